"""
Publishing pipeline for articlebot.

Main Components:
- pipeline: batch orchestrator with per-slot isolation
- persistence: article to stored post, with category and tag resolution
- results: batch and health reports
- factory: builds a pipeline from settings
"""

from .factory import build_pipeline, create_http_client, create_store
from .persistence import ArticlePersister, determine_category
from .pipeline import PublishingPipeline, PipelineState
from .results import BatchResult, BatchStats, HealthReport, HealthCheck, CheckStatus
