"\"\"\"Curated vocabularies shared by query interpretation and provider adapters.\"\"\""

from __future__ import annotations

import re
from typing import Iterable, Mapping

# canonical skill -> aliases (lowercase)
SKILLS: dict[str, tuple[str, ...]] = {
    "python": ("python", "py"),
    "javascript": ("javascript", "js"),
    "typescript": ("typescript", "ts"),
    "react": ("react", "reactjs", "react.js"),
    "vue": ("vue", "vuejs", "vue.js"),
    "angular": ("angular",),
    "node.js": ("node.js", "nodejs", "node"),
    "java": ("java",),
    "kotlin": ("kotlin",),
    "go": ("golang", "go"),
    "rust": ("rust",),
    "c++": ("c++", "cpp"),
    "c#": ("c#", "csharp", ".net", "dotnet"),
    "ruby": ("ruby", "rails", "ruby on rails"),
    "php": ("php",),
    "swift": ("swift",),
    "scala": ("scala",),
    "sql": ("sql", "postgres", "postgresql", "mysql"),
    "machine learning": ("machine learning", "ml"),
    "deep learning": ("deep learning", "dl"),
    "artificial intelligence": ("artificial intelligence", "ai"),
    "data science": ("data science",),
    "data engineering": ("data engineering", "etl"),
    "nlp": ("nlp", "natural language processing"),
    "computer vision": ("computer vision",),
    "pytorch": ("pytorch",),
    "tensorflow": ("tensorflow",),
    "kubernetes": ("kubernetes", "k8s"),
    "docker": ("docker", "containers"),
    "aws": ("aws", "amazon web services"),
    "gcp": ("gcp", "google cloud"),
    "azure": ("azure",),
    "terraform": ("terraform",),
    "devops": ("devops", "sre", "site reliability"),
    "graphql": ("graphql",),
    "django": ("django",),
    "flask": ("flask",),
    "fastapi": ("fastapi",),
    "spring": ("spring", "spring boot"),
    "ios": ("ios",),
    "android": ("android",),
    "blockchain": ("blockchain", "web3", "solidity"),
    "security": ("security", "cybersecurity", "appsec"),
    "frontend": ("frontend", "front-end", "front end"),
    "backend": ("backend", "back-end", "back end"),
    "full stack": ("full stack", "full-stack", "fullstack"),
}

# canonical seniority -> (aliases, implied minimum years)
SENIORITY: dict[str, tuple[tuple[str, ...], float]] = {
    "junior": (("junior", "entry level", "entry-level", "graduate"), 0.0),
    "mid-level": (("mid-level", "mid level", "intermediate"), 3.0),
    "senior": (("senior", "sr"), 5.0),
    "lead": (("lead", "tech lead", "team lead"), 6.0),
    "staff": (("staff",), 8.0),
    "principal": (("principal", "architect"), 10.0),
}

LOCATIONS: dict[str, tuple[str, ...]] = {
    "remote": ("remote", "anywhere", "distributed"),
    "san francisco": ("san francisco", "sf", "bay area"),
    "new york": ("new york", "nyc"),
    "seattle": ("seattle",),
    "austin": ("austin",),
    "boston": ("boston",),
    "london": ("london",),
    "berlin": ("berlin",),
    "paris": ("paris",),
    "amsterdam": ("amsterdam",),
    "toronto": ("toronto",),
    "singapore": ("singapore",),
    "tokyo": ("tokyo",),
    "bangalore": ("bangalore", "bengaluru"),
    "sydney": ("sydney",),
    "europe": ("europe", "eu"),
    "united states": ("united states", "usa"),
}

INDUSTRIES: dict[str, tuple[str, ...]] = {
    "startup": ("startup", "start-up", "early stage", "early-stage"),
    "fintech": ("fintech", "finance", "banking", "payments"),
    "healthcare": ("healthcare", "health tech", "healthtech", "medical"),
    "e-commerce": ("e-commerce", "ecommerce", "retail"),
    "gaming": ("gaming", "games"),
    "saas": ("saas", "b2b"),
    "enterprise": ("enterprise", "big tech", "faang"),
    "edtech": ("edtech", "education"),
    "adtech": ("adtech", "advertising"),
    "crypto": ("crypto", "defi"),
}

CULTURE: dict[str, tuple[str, ...]] = {
    "collaborative": ("collaborative", "team player", "teamwork"),
    "self-driven": ("self-driven", "self-starter", "autonomous", "proactive"),
    "growth mindset": ("growth mindset", "curious", "eager to learn"),
    "leadership": ("leadership", "mentor", "mentoring", "mentorship"),
    "communication": ("communication", "communicator"),
    "innovative": ("innovative", "creative"),
    "fast-paced": ("fast-paced", "fast paced", "scrappy"),
    "open source": ("open source", "open-source", "oss"),
}


def alias_pattern(alias: str) -> re.Pattern[str]:
    """Word-boundary pattern tolerant of symbols such as ``c++`` or ``node.js``."""
    return re.compile(rf"(?<![\w+#.]){re.escape(alias)}(?![\w+#])")


def find_terms(text: str, vocabulary: Mapping[str, Iterable[str]]) -> list[tuple[int, str]]:
    """Return ``(position, canonical)`` pairs for the earliest hit of each term."""
    lowered = text.lower()
    hits: list[tuple[int, str]] = []
    for canonical, aliases in vocabulary.items():
        positions = [
            match.start()
            for alias in aliases
            for match in [alias_pattern(alias).search(lowered)]
            if match is not None
        ]
        if positions:
            hits.append((min(positions), canonical))
    hits.sort()
    return hits


def canonical_skills(values: Iterable[str]) -> list[str]:
    """Map free-form tags onto canonical skill names, keeping first-seen order."""
    result: list[str] = []
    for value in values:
        for _, canonical in find_terms(value, SKILLS):
            if canonical not in result:
                result.append(canonical)
    return result
