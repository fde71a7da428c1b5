"""Hand-curated topics used when live discovery yields nothing."""

from typing import List

from articlebot.core.schemas import TrendingTopic

FALLBACK_SOURCE = "Curated"

_FALLBACK_TOPICS = [
    {
        "title": "React 19 Server Components: Revolutionary Frontend Development Patterns",
        "description": "Explore how React 19 Server Components change data fetching, bundle size and rendering strategies for modern frontend applications.",
        "keywords": ["react", "server components", "frontend", "javascript"],
    },
    {
        "title": "TypeScript 5.5: Advanced Type Features for Modern Development",
        "description": "A practical look at the newest TypeScript type system features and how they improve safety in large codebases.",
        "keywords": ["typescript", "type system", "javascript", "developer tools"],
    },
    {
        "title": "Python AI Integration: Building Smart Applications with OpenAI",
        "description": "How to integrate large language models into Python applications, from prompt design to production deployment.",
        "keywords": ["python", "ai", "openai", "machine learning"],
    },
    {
        "title": "Next.js 15: App Router and Server Actions Deep Dive",
        "description": "A deep dive into the Next.js App Router, server actions and caching model for full stack React applications.",
        "keywords": ["next.js", "react", "server actions", "web development"],
    },
    {
        "title": "WebAssembly (Wasm): The Future of Web Performance",
        "description": "Why WebAssembly is reshaping web performance and how to compile Rust, Go and C++ for the browser.",
        "keywords": ["webassembly", "wasm", "performance", "rust"],
    },
    {
        "title": "Flutter Cross-Platform Development: Dart Language Mastery",
        "description": "Building cross-platform mobile and desktop apps with Flutter and mastering the Dart language along the way.",
        "keywords": ["flutter", "dart", "mobile development", "cross-platform"],
    },
    {
        "title": "Rust Programming: Building High-Performance Applications",
        "description": "Memory safety without garbage collection: how Rust enables fast, reliable systems and web services.",
        "keywords": ["rust", "systems programming", "performance", "memory safety"],
    },
    {
        "title": "AI Dev Tools: Revolutionizing Software Development Workflow",
        "description": "AI-assisted coding tools are changing how developers write, review and ship software. Here is what works today.",
        "keywords": ["ai dev tools", "developer productivity", "coding assistants", "programming"],
    },
]


def get_fallback_topics() -> List[TrendingTopic]:
    """Fresh copies of the curated topics, all priority 1."""
    return [
        TrendingTopic(source=FALLBACK_SOURCE, priority_score=1, **topic)
        for topic in _FALLBACK_TOPICS
    ]
