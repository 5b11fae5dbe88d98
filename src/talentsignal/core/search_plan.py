"\"\"\"Per-provider sourcing queries derived from an interpreted hiring query.\"\"\""

from __future__ import annotations

from ..schemas.query import PlatformQuery, QueryInterpretation, SearchPlan
from ..schemas.signals import Provider

_DEFAULT_SKILL = "software"
_DEFAULT_TITLE = "software engineer"


def build_search_plan(interpretation: QueryInterpretation) -> SearchPlan:
    """Build broad, targeted and precise queries for every provider."""
    skills = [req.value for req in interpretation.by_category("skills")]
    experience = [req.value for req in interpretation.by_category("experience")]
    locations = [req.value for req in interpretation.by_category("location")]
    industries = [req.value for req in interpretation.by_category("industry")]

    primary = skills[0] if skills else _DEFAULT_SKILL
    secondary = skills[1:3]
    seniority = next((value for value in experience if "years" not in value), "")
    title = f"{seniority} {primary} engineer".strip() if skills else _DEFAULT_TITLE
    location = locations[0] if locations else ""
    industry = industries[0] if industries else ""

    queries: list[PlatformQuery] = []

    queries.append(_query(Provider.CODE_HOSTING, "broad", f"language:{_slug(primary)} followers:>10", [primary], 200))
    targeted_code = " ".join(
        part
        for part in [f"language:{_slug(primary)}", *(f"topic:{_slug(s)}" for s in secondary), "stars:>30"]
    )
    queries.append(_query(Provider.CODE_HOSTING, "targeted", targeted_code, [primary, *secondary], 120))
    precise_code = targeted_code + (f" location:\"{location}\"" if location else "") + (
        f" {_slug(industry)}" if industry else ""
    )
    queries.append(
        _query(Provider.CODE_HOSTING, "precise", precise_code, _keywords(primary, secondary, location, industry), 40)
    )

    tags = "".join(f"[{_slug(s)}]" for s in [primary, *secondary])
    queries.append(_query(Provider.REPUTATION, "broad", f"[{_slug(primary)}] reputation:>500", [primary], 80))
    queries.append(_query(Provider.REPUTATION, "targeted", f"{tags} reputation:>1000", [primary, *secondary], 50))
    queries.append(
        _query(Provider.REPUTATION, "precise", f"{tags} reputation:>1000 answers:>10", [primary, *secondary], 20)
    )

    queries.append(_query(Provider.NETWORK, "broad", f"\"{title}\"", [title], 100))
    network_targeted = f"\"{title}\" AND " + " AND ".join(f"\"{s}\"" for s in [primary, *secondary])
    queries.append(_query(Provider.NETWORK, "targeted", network_targeted, [title, primary, *secondary], 60))
    network_precise = network_targeted
    if location:
        network_precise += f" location:\"{location}\""
    if industry:
        network_precise += f" industry:\"{industry}\""
    queries.append(
        _query(Provider.NETWORK, "precise", network_precise, _keywords(title, [primary, *secondary], location, industry), 25)
    )

    queries.append(_query(Provider.MICROBLOG, "broad", f"#{_slug(primary)}", [primary], 60))
    queries.append(
        _query(Provider.MICROBLOG, "targeted", " ".join(f"#{_slug(s)}" for s in [primary, *secondary]), [primary, *secondary], 35)
    )
    queries.append(
        _query(Provider.MICROBLOG, "precise", f"\"{primary} developer\"" + (f" {location}" if location else ""), _keywords(primary, [], location, ""), 15)
    )

    queries.append(_query(Provider.FORUM, "broad", f"\"{primary} developer\"", [primary], 40))
    forum_topic = industry or (secondary[0] if secondary else "projects")
    queries.append(_query(Provider.FORUM, "targeted", f"\"{primary}\" \"{forum_topic}\"", [primary, forum_topic], 25))
    queries.append(
        _query(Provider.FORUM, "precise", f"\"{primary}\" \"{forum_topic}\" karma:>1000", [primary, forum_topic], 10)
    )

    return SearchPlan(
        queries=queries,
        total_expected_results=sum(query.expected_results for query in queries),
        strategy=_strategy(skills, experience, industries, locations),
        confidence=_confidence(skills, experience, industries, locations),
    )


def _query(provider: Provider, tier: str, text: str, keywords: list[str], expected: int) -> PlatformQuery:
    return PlatformQuery(
        provider=provider,
        tier=tier,
        query=" ".join(text.split()),
        keywords=[keyword for keyword in keywords if keyword],
        expected_results=expected,
    )


def _keywords(primary: str, others: list[str], location: str, industry: str) -> list[str]:
    return [primary, *others, location, industry]


def _slug(value: str) -> str:
    return value.strip().lower().replace(" ", "-")


def _strategy(skills, experience, industries, locations) -> str:
    steps: list[str] = []
    if skills:
        steps.append("Code-hosting repository analysis for technical depth")
    if experience:
        steps.append("Q&A reputation and activity scoring for seniority")
    if industries:
        steps.append("Industry-specific project and discussion analysis")
    if locations:
        steps.append("Location-filtered professional network search")
    steps.append("Professional network evaluation")
    steps.append("Microblog and forum thought-leadership assessment")
    return ". ".join(steps) + "."


def _confidence(skills, experience, industries, locations) -> float:
    score = 0.5
    if skills:
        score += 0.2
    if experience:
        score += 0.1
    if industries:
        score += 0.1
    if locations:
        score += 0.1
    return round(min(score, 1.0), 4)
