"""Fuel product gate and category mapping for free-text product names.

Two tables drive classification. The fuel allow-list decides whether a row is
a fuel purchase at all; the ordered category rule table maps accepted products
to a category. The tables differ on purpose, so a product can pass the gate and
still map to `other`. Rules are evaluated in declared order and the first
match wins.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import Literal

from .models import ProductCategory

DEFAULT_FUEL_KEYWORDS: tuple[str, ...] = (
    "Diesel",
    "AdBlue",
    "Super 98",
    "CNG",
    "Super 95",
    "Fuel",
)


@dataclass(frozen=True)
class ProductRule:
    """One predicate over a normalized (trimmed, lowercase) product name.

    Attributes:
        token: Lowercase token to test.
        match: `contains` for substring tests, `exact` for equality.
    """

    token: str
    match: Literal["contains", "exact"] = "contains"

    def rule_matches(self, normalized_product: str) -> bool:
        if self.match == "exact":
            return normalized_product == self.token
        return self.token in normalized_product


def _contains(category: ProductCategory, *tokens: str) -> tuple[tuple[ProductRule, ProductCategory], ...]:
    return tuple((ProductRule(token=token), category) for token in tokens)


def _exact(category: ProductCategory, token: str) -> tuple[tuple[ProductRule, ProductCategory], ...]:
    return ((ProductRule(token=token, match="exact"), category),)


DEFAULT_CATEGORY_RULES: tuple[tuple[ProductRule, ProductCategory], ...] = (
    *_contains(ProductCategory.DIESEL, "diesel", "motorin", "gasoil", "gas-oil", "derv"),
    *_exact(ProductCategory.DIESEL, "d miles"),
    *_contains(ProductCategory.DIESEL, "premium diesel"),
    *_contains(
        ProductCategory.PETROL,
        "petrol",
        "gasoline",
        "benzin",
        "super",
        "unleaded",
        "95",
        "98",
        "e5",
        "e10",
        "futura",
    ),
    *_exact(ProductCategory.PETROL, "95 miles"),
    *_contains(ProductCategory.PETROL, "milesplus"),
    *_contains(ProductCategory.LPG, "lpg", "autogas"),
    *_contains(ProductCategory.ADBLUE, "adblue", "ad blue", "def", "urea"),
    *_contains(ProductCategory.CNG, "cng", "natural gas", "biocng"),
    *_contains(ProductCategory.ELECTRIC, "electric", "charging", "ev"),
)

_UNIT_BY_CATEGORY: dict[ProductCategory, str] = {
    ProductCategory.ELECTRIC: "kWh",
    ProductCategory.CNG: "kg",
}


def classifier_normalize_product(product: str) -> str:
    """Return trimmed lowercase product text used by every classification rule."""

    return product.strip().lower()


def classifier_unit_for(category: ProductCategory) -> str:
    """Return unit of measure for a product category."""

    return _UNIT_BY_CATEGORY.get(category, "L")


class ProductClassifier:
    """Classify free-text product names using explicit keyword and rule tables."""

    def __init__(
        self,
        fuel_keywords: Iterable[str] = DEFAULT_FUEL_KEYWORDS,
        category_rules: Iterable[tuple[ProductRule, ProductCategory]] = DEFAULT_CATEGORY_RULES,
    ):
        """Initialize classifier tables.

        Args:
            fuel_keywords: Fuel allow-list used by the skip gate.
            category_rules: Ordered `(rule, category)` pairs, first match wins.

        Raises:
            ValueError: Raised when the fuel allow-list is empty or has blank entries.
        """

        normalized_keywords = tuple(classifier_normalize_product(keyword) for keyword in fuel_keywords)
        if not normalized_keywords:
            raise ValueError("fuel_keywords must not be empty")
        if any(not keyword for keyword in normalized_keywords):
            raise ValueError("fuel_keywords must not contain blank values")

        self._fuel_keywords = normalized_keywords
        self._category_rules = tuple(category_rules)

    def classifier_is_fuel(self, product: str) -> bool:
        """Return whether product text contains any fuel allow-list keyword."""

        normalized_product = classifier_normalize_product(product)
        return any(keyword in normalized_product for keyword in self._fuel_keywords)

    def classifier_map_category(self, product: str) -> ProductCategory:
        """Map product text to a category, falling back to `other`."""

        normalized_product = classifier_normalize_product(product)
        for rule, category in self._category_rules:
            if rule.rule_matches(normalized_product):
                return category
        return ProductCategory.OTHER
