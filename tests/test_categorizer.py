import pytest

from app.core.exceptions import InvalidArgumentError
from app.utils.categorizer import CategorySuggestion, suggest_category


def test_uber_is_transport():
    suggestion = suggest_category("Uber ride to airport")
    assert suggestion.category == "Transport"
    assert suggestion.confidence >= 95


def test_empty_description_is_miscellaneous():
    assert suggest_category("") == CategorySuggestion("Miscellaneous", 50)
    assert suggest_category("   ") == CategorySuggestion("Miscellaneous", 50)


def test_confidence_never_exceeds_rule_base():
    assert suggest_category("uber taxi cab").confidence == 95


def test_higher_confidence_rule_wins():
    assert suggest_category("Team lunch at hotel").category == "Travel"
    assert suggest_category("AWS hosting").to_dict() == {"category": "Cloud & Hosting", "confidence": 85}


def test_shared_keyword_keeps_earlier_rule():
    # "saas" is listed under both Cloud & Hosting and Software
    assert suggest_category("saas").category == "Cloud & Hosting"


def test_lower_table_entries():
    assert suggest_category("Office Rent").to_dict() == {"category": "Rent", "confidence": 75}
    assert suggest_category("Udemy course").to_dict() == {"category": "Training", "confidence": 60}


def test_non_string_description_rejected():
    with pytest.raises(InvalidArgumentError):
        suggest_category(None)
