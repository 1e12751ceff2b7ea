"""
Goal-based drink catalog.

Static alternatives browsed by goal, independent of the live recommendation.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class CatalogDrink:
    name: str
    time: str
    cost: int
    calories: int
    benefit: str


class UnknownGoal(KeyError):
    pass


CATALOG: dict[str, list[CatalogDrink]] = {
    "hydration": [
        CatalogDrink("Lemon Water", "Morning", 5, 10, "Boosts metabolism"),
        CatalogDrink("Coconut Water", "Mid-day", 25, 45, "Natural electrolytes"),
        CatalogDrink("Cucumber Water", "Evening", 8, 5, "Anti-inflammatory"),
    ],
    "detox": [
        CatalogDrink("Green Tea", "Morning", 15, 2, "Antioxidants"),
        CatalogDrink("Ginger Turmeric Tea", "Afternoon", 20, 8, "Anti-inflammatory"),
        CatalogDrink("Mint Water", "Evening", 6, 3, "Digestive aid"),
    ],
    "energy": [
        CatalogDrink("Green Smoothie", "Morning", 45, 120, "Vitamins & minerals"),
        CatalogDrink("Matcha Latte", "Mid-day", 35, 80, "Sustained energy"),
        CatalogDrink("Protein Shake", "Post-workout", 40, 150, "Muscle recovery"),
    ],
    "recovery": [
        CatalogDrink("Chocolate Milk", "Post-workout", 30, 180, "Protein & carbs"),
        CatalogDrink("Tart Cherry Juice", "Evening", 50, 130, "Anti-inflammatory"),
        CatalogDrink("Electrolyte Drink", "During workout", 35, 60, "Hydration"),
    ],
}


def goals() -> list[str]:
    return list(CATALOG)


def alternatives(goal: str) -> list[CatalogDrink]:
    try:
        return list(CATALOG[goal.lower()])
    except KeyError:
        raise UnknownGoal(f"Unknown goal '{goal}', expected one of {goals()}") from None


def cheapest(goal: str) -> CatalogDrink:
    return min(alternatives(goal), key=lambda d: d.cost)
