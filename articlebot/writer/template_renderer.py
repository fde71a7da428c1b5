"""
Deterministic fallback article renderer.

Produces a complete, styled HTML article from a topic without any external
call. Used whenever the model path fails, so it must always succeed.
"""

import html
from typing import List

from articlebot.core.logging import get_logger
from articlebot.core.schemas import TrendingTopic
from articlebot.core.utils import truncate_text

logger = get_logger(__name__)

GITHUB_TAGS = ["open-source", "github", "programming", "development"]
NEWS_TAGS = ["technology", "news", "innovation", "trends"]
GENERIC_KEYWORDS = ["technology", "software development", "best practices", "guide", "tutorial"]

ARTICLE_STYLE = """<style>
.article-body{font-family:system-ui,-apple-system,sans-serif;line-height:1.75;color:#1f2937;max-width:820px;margin:0 auto}
.article-body h1{font-size:2.25rem;margin-bottom:1rem}
.article-body h2{font-size:1.6rem;margin-top:2.5rem;border-bottom:2px solid #e5e7eb;padding-bottom:.4rem}
.article-body h3{font-size:1.25rem;margin-top:1.5rem}
.article-body .toc{background:#f9fafb;border-left:4px solid #6366f1;padding:1rem 1.5rem}
.article-body table{width:100%;border-collapse:collapse;margin:1.5rem 0}
.article-body th,.article-body td{border:1px solid #e5e7eb;padding:.6rem;text-align:left}
.article-body .cta{background:#eef2ff;border-radius:8px;padding:1.5rem;margin-top:2rem}
</style>"""

_SECTIONS = [
    ("introduction", "Introduction"),
    ("key-features", "Key Features"),
    ("implementation-guide", "Implementation Guide"),
    ("best-practices", "Best Practices"),
    ("use-cases", "Real-World Use Cases"),
    ("conclusion", "Conclusion"),
    ("faq", "Frequently Asked Questions"),
]


class FallbackRenderer:
    """Render a fallback article for a topic."""

    def render(self, topic: TrendingTopic) -> str:
        """Full article HTML: style block, h1, sections, FAQ and call to action."""
        title = html.escape(topic.title)
        summary = html.escape(topic.description)
        subject = html.escape(self._subject(topic))
        repo = topic.is_repository

        parts = [ARTICLE_STYLE, '<article class="article-body">', f"<h1>{title}</h1>"]
        parts.append(self._toc())
        parts.append(self._introduction(subject, summary, repo))
        parts.append(self._features(subject, repo))
        parts.append(self._implementation(subject, repo))
        parts.append(self._best_practices(subject))
        parts.append(self._use_cases(subject, repo))
        parts.append(self._conclusion(subject, topic))
        parts.append(self._faq(subject, repo))
        parts.append(
            '<div class="cta"><p>Want more hands-on guides like this? '
            '<a href="/blog">Browse the latest articles on our blog</a> and stay ahead of the curve.</p></div>'
        )
        parts.append("</article>")
        return "\n".join(parts)

    def description(self, topic: TrendingTopic) -> str:
        """Meta description no longer than 155 characters."""
        if topic.is_repository:
            text = f"Discover {self._subject(topic)}: features, setup guide, best practices and real-world use cases for developers."
        else:
            text = f"{topic.description} Key insights, practical implications and what it means for developers."
        return truncate_text(text, 155)

    def tags(self, topic: TrendingTopic) -> List[str]:
        return list(GITHUB_TAGS if topic.is_repository else NEWS_TAGS)

    def keywords(self, topic: TrendingTopic, limit: int = 15) -> List[str]:
        """Title words longer than three letters, then tags, then generic terms."""
        keywords: List[str] = []
        candidates = [w.strip(".,:;!?()[]\"'").lower() for w in topic.title.split()]
        candidates = [w for w in candidates if len(w) > 3]
        for word in candidates + list(topic.keywords) + self.tags(topic) + GENERIC_KEYWORDS:
            if word and word not in keywords:
                keywords.append(word)
        return keywords[:limit]

    @staticmethod
    def _subject(topic: TrendingTopic) -> str:
        if topic.is_repository and ":" in topic.title:
            return topic.title.split(":", 1)[0].strip()
        return topic.title

    @staticmethod
    def _toc() -> str:
        items = "".join(f'<li><a href="#{anchor}">{label}</a></li>' for anchor, label in _SECTIONS)
        return f'<nav class="toc"><h3>Table of Contents</h3><ol>{items}</ol></nav>'

    @staticmethod
    def _introduction(subject: str, summary: str, repo: bool) -> str:
        if repo:
            lead = (f"{subject} is one of the fastest-rising open-source projects on GitHub right now. "
                    f"{summary}")
        else:
            lead = (f"{summary} In this article we break down what {subject} means for developers "
                    f"and technology teams, and how to act on it.")
        return (f'<h2 id="introduction">Introduction</h2><p>{lead}</p>'
                f"<p>We cover the key features, a practical implementation guide, best practices "
                f"and real-world use cases so you can decide quickly whether it belongs in your stack.</p>")

    @staticmethod
    def _features(subject: str, repo: bool) -> str:
        items = [
            ("Developer Experience", f"{subject} focuses on a clean, approachable developer workflow."),
            ("Performance", "Designed with efficiency in mind, from startup time to resource usage."),
            ("Ecosystem", "Integrates with popular tools, libraries and deployment platforms."),
        ]
        if repo:
            items.append(("Community", "An active open-source community contributes fixes, docs and extensions."))
        else:
            items.append(("Industry Impact", "Signals a broader shift that technology leaders are watching closely."))
        body = "".join(f"<h3>{name}</h3><p>{text}</p>" for name, text in items)
        return f'<h2 id="key-features">Key Features</h2>{body}'

    @staticmethod
    def _implementation(subject: str, repo: bool) -> str:
        if repo:
            steps = [
                ("Step 1: Review the Repository", "Read the README, license and open issues to understand scope and maturity."),
                ("Step 2: Install and Configure", "Clone the project, install its dependencies and run the included examples."),
                ("Step 3: Integrate Incrementally", "Start with a small, isolated feature before adopting it across your codebase."),
            ]
        else:
            steps = [
                ("Step 1: Assess the Impact", "Identify which of your products, teams or workflows this development touches."),
                ("Step 2: Run a Pilot", "Validate assumptions with a time-boxed experiment and clear success metrics."),
                ("Step 3: Scale What Works", "Document learnings and roll out the approach to more teams."),
            ]
        body = "".join(f"<h3>{name}</h3><p>{text}</p>" for name, text in steps)
        return (f'<h2 id="implementation-guide">Implementation Guide</h2>'
                f"<p>Here is a practical path to getting value from {subject}.</p>{body}"
                "<pre><code># keep dependencies pinned and reproducible\n"
                "git checkout -b evaluate-new-tooling</code></pre>")

    @staticmethod
    def _best_practices(subject: str) -> str:
        rows = [
            ("Start small", "Reduces risk and speeds up feedback"),
            ("Measure outcomes", "Keeps decisions grounded in data"),
            ("Document decisions", "Helps the whole team ramp up"),
            ("Review security", "Protects users and infrastructure"),
        ]
        table_rows = "".join(f"<tr><td>{p}</td><td>{w}</td></tr>" for p, w in rows)
        return (f'<h2 id="best-practices">Best Practices</h2>'
                f"<p>Teams that succeed with {subject} tend to follow a few simple rules.</p>"
                f"<table><thead><tr><th>Practice</th><th>Why it matters</th></tr></thead>"
                f"<tbody>{table_rows}</tbody></table>")

    @staticmethod
    def _use_cases(subject: str, repo: bool) -> str:
        cases = (
            ["Internal developer tooling", "Production web services", "Prototypes and proof-of-concepts"]
            if repo else
            ["Product strategy planning", "Engineering roadmap decisions", "Technology investment reviews"]
        )
        items = "".join(f"<li>{case}</li>" for case in cases)
        return (f'<h2 id="use-cases">Real-World Use Cases</h2>'
                f"<p>Where {subject} is already making a difference:</p><ul>{items}</ul>")

    @staticmethod
    def _conclusion(subject: str, topic: TrendingTopic) -> str:
        source_link = ""
        if topic.url and topic.url.startswith(("http://", "https://")):
            source_link = (f' Read the original source at <a href="{html.escape(topic.url)}" '
                           f'rel="noopener" target="_blank">{html.escape(topic.source)}</a>.')
        return (f'<h2 id="conclusion">Conclusion</h2>'
                f"<p>{subject} is worth a close look for any team that wants to stay current.{source_link}</p>")

    @staticmethod
    def _faq(subject: str, repo: bool) -> str:
        questions = [
            (f"What is {subject}?",
             "It is a " + ("trending open-source project" if repo else "notable technology development")
             + " that developers and technology leaders are paying attention to."),
            (f"Is {subject} ready for production?",
             "Evaluate it against your requirements with a small pilot before a wider rollout."),
            ("How do I get started?", "Follow the implementation guide above and start with a low-risk experiment."),
            ("Where can I learn more?", "Check the official documentation and the community resources linked in this article."),
        ]
        body = "".join(f"<h3>{q}</h3><p>{a}</p>" for q, a in questions)
        return f'<h2 id="faq">Frequently Asked Questions</h2>{body}'
