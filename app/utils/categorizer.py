from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict, Tuple

from app.core.exceptions import InvalidArgumentError

DEFAULT_CATEGORY = "Miscellaneous"
DEFAULT_CONFIDENCE = 50


@dataclass(frozen=True)
class CategoryRule:
    keywords: Tuple[str, ...]
    category: str
    confidence: int


@dataclass(frozen=True)
class CategorySuggestion:
    category: str
    confidence: int

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


# Evaluated in order; a later rule only wins with a strictly higher score.
CATEGORY_RULES: Tuple[CategoryRule, ...] = (
    CategoryRule(("uber", "ola", "cab", "taxi", "fuel", "petrol", "diesel", "metro", "train", "bus"), "Transport", 95),
    CategoryRule(("hotel", "airbnb", "flight", "airlines", "travel", "trip", "booking", "reservation"), "Travel", 92),
    CategoryRule(("food", "restaurant", "dinner", "lunch", "cafe", "pizza", "swiggy", "zomato", "delivery"), "Dining", 90),
    CategoryRule(("grocery", "supermarket", "mart", "bigbasket", "grofers"), "Groceries", 88),
    CategoryRule(("aws", "azure", "gcp", "server", "hosting", "domain", "cloud", "saas"), "Cloud & Hosting", 85),
    CategoryRule(("internet", "wifi", "broadband", "mobile", "phone", "telecom"), "Utilities", 83),
    CategoryRule(("laptop", "mouse", "keyboard", "monitor", "computer", "hardware"), "Equipment", 80),
    CategoryRule(("doctor", "pharmacy", "hospital", "medicine", "healthcare"), "Health", 78),
    CategoryRule(("rent", "lease", "office", "property", "real estate"), "Rent", 75),
    CategoryRule(("marketing", "advertising", "google ads", "facebook ads", "social media"), "Marketing", 70),
    CategoryRule(("software", "license", "subscription", "saas", "app"), "Software", 65),
    CategoryRule(("training", "course", "education", "workshop", "seminar"), "Training", 60),
)


def suggest_category(description: str) -> CategorySuggestion:
    """
    Keyword based expense category suggestion.

    Keywords match as substrings of the lower-cased description. A rule's score
    is ``min(confidence, confidence + 5 * matches)``, which never exceeds the
    rule's base confidence.
    """
    if not isinstance(description, str):
        raise InvalidArgumentError("Description must be a string")

    text = description.lower()
    best = CategorySuggestion(DEFAULT_CATEGORY, DEFAULT_CONFIDENCE)

    for rule in CATEGORY_RULES:
        match_count = sum(1 for keyword in rule.keywords if keyword in text)
        if match_count == 0:
            continue
        confidence = min(rule.confidence, rule.confidence + match_count * 5)
        if confidence > best.confidence:
            best = CategorySuggestion(rule.category, confidence)

    return best
