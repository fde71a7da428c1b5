"""Batch and health report records."""

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, Field

from articlebot.core.schemas import PublishedPost, utcnow


class BatchStats(BaseModel):
    requested: int = 0
    generated: int = 0
    failed: int = 0
    average_seo_score: int = 0


class BatchResult(BaseModel):
    """Outcome of one PublishingPipeline.generate call."""
    success: bool = False
    posts: List[PublishedPost] = Field(default_factory=list)
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)
    stats: BatchStats = Field(default_factory=BatchStats)
    started_at: datetime = Field(default_factory=utcnow)
    finished_at: datetime = Field(default_factory=utcnow)


class CheckStatus(str, Enum):
    PASS = "pass"
    WARN = "warn"
    FAIL = "fail"


class HealthCheck(BaseModel):
    name: str
    status: CheckStatus
    message: str = ""


class HealthReport(BaseModel):
    healthy: bool
    checks: List[HealthCheck] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=utcnow)

    @classmethod
    def from_checks(cls, checks: List[HealthCheck]) -> "HealthReport":
        return cls(healthy=all(c.status != CheckStatus.FAIL for c in checks), checks=checks)
