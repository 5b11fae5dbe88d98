from __future__ import annotations

import pytest

from talentsignal.core import InterpreterConfig, QueryInterpreter

QUERY = "senior React developer with ML experience and startup background"


def values(interpretation, category: str) -> list[str]:
    return [req.value for req in interpretation.by_category(category)]


def test_interpretation_extracts_categories_in_order():
    interpretation = QueryInterpreter().interpret(QUERY)

    assert values(interpretation, "skills") == ["react", "machine learning"]
    assert values(interpretation, "experience") == ["senior"]
    assert values(interpretation, "industry") == ["startup"]
    assert interpretation.categories() == {"skills", "experience", "industry"}
    assert all(req.provenance == "explicit" for req in interpretation.requirements)
    assert interpretation.confidence == pytest.approx(0.81)
    assert interpretation.original_query == QUERY


def test_interpretation_is_deterministic():
    interpreter = QueryInterpreter()
    assert interpreter.interpret(QUERY) == interpreter.interpret(QUERY)
    assert QueryInterpreter().interpret(QUERY) == interpreter.interpret(QUERY)


def test_years_location_and_culture():
    interpretation = QueryInterpreter().interpret(
        "Python engineer, 5+ years, Berlin or remote, collaborative and self-starter"
    )

    assert values(interpretation, "skills") == ["python"]
    assert values(interpretation, "experience") == ["5+ years"]
    assert values(interpretation, "location") == ["berlin", "remote"]
    assert values(interpretation, "culture") == ["collaborative", "self-driven"]


def test_word_boundaries_keep_similar_names_apart():
    interpretation = QueryInterpreter().interpret("JavaScript engineer who knows C++")
    assert values(interpretation, "skills") == ["javascript", "c++"]


def test_empty_query_yields_no_requirements():
    interpretation = QueryInterpreter().interpret("   ")

    assert interpretation.requirements == []
    assert interpretation.confidence == 0.0
    assert "no specific requirements" in interpretation.interpreted_intent
    assert interpretation.search_strategy.endswith(".")


def test_narrative_mentions_extracted_terms():
    interpretation = QueryInterpreter().interpret(QUERY)

    assert "react and machine learning" in interpretation.interpreted_intent
    assert interpretation.search_strategy.startswith("Prioritize")
    assert "startup" in interpretation.search_strategy


def test_importance_comes_from_config():
    config = InterpreterConfig()
    config.importance["skills"] = 1.0
    interpretation = QueryInterpreter(config=config).interpret("rust developer")
    assert interpretation.requirements[0].importance == 1.0
