"""
Drink recommendation rules.

RULES is an ordered list of (name, predicate, suggestion) entries. The first
rule whose predicate holds wins, so list order is the tie-break policy:
acute physiological conditions come before contextual and time-of-day
defaults. The last rule always matches.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field, replace
from datetime import datetime, timedelta
from enum import Enum
from typing import Any

from .state_model import ActivitySnapshot, Location, StressLevel


class Urgency(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


@dataclass(frozen=True)
class DrinkSuggestion:
    drink: str
    reason: str
    urgency: Urgency
    cost: int
    calories: int
    benefits: tuple[str, ...] = field(default_factory=tuple)
    timing: str = "Anytime"
    rule: str = ""

    def to_dict(self) -> dict[str, Any]:
        return {
            "drink": self.drink,
            "reason": self.reason,
            "urgency": self.urgency.value,
            "cost": self.cost,
            "calories": self.calories,
            "benefits": list(self.benefits),
            "timing": self.timing,
            "rule": self.rule,
        }


RulePredicate = Callable[[ActivitySnapshot, datetime], bool]


@dataclass(frozen=True)
class Rule:
    name: str
    predicate: RulePredicate
    suggestion: DrinkSuggestion

    def matches(self, snapshot: ActivitySnapshot, now: datetime) -> bool:
        return self.predicate(snapshot, now)

    def build(self) -> DrinkSuggestion:
        return replace(self.suggestion, rule=self.name)


POST_MEAL_WINDOW = timedelta(hours=1)


def _workout_intensity(s: ActivitySnapshot, now: datetime) -> bool:
    return s.heart_rate > 100 and s.workout_minutes > 0


def _dehydration(s: ActivitySnapshot, now: datetime) -> bool:
    return s.water_intake < 500 and now.hour > 10


def _office_stress(s: ActivitySnapshot, now: datetime) -> bool:
    return s.stress_level == StressLevel.HIGH and s.location == Location.OFFICE


def _caffeine_crash(s: ActivitySnapshot, now: datetime) -> bool:
    return s.caffeine_intake > 200 and now.hour > 14


def _post_meal(s: ActivitySnapshot, now: datetime) -> bool:
    return s.last_meal is not None and now - s.last_meal < POST_MEAL_WINDOW


def _morning(s: ActivitySnapshot, now: datetime) -> bool:
    return 6 <= now.hour < 9


def _afternoon(s: ActivitySnapshot, now: datetime) -> bool:
    return 15 <= now.hour < 17


def _always(s: ActivitySnapshot, now: datetime) -> bool:
    return True


RULES: list[Rule] = [
    Rule(
        "workout_intensity",
        _workout_intensity,
        DrinkSuggestion(
            drink="Electrolyte Sports Drink",
            reason="High heart rate detected during workout - need immediate electrolyte replenishment",
            urgency=Urgency.HIGH,
            cost=35,
            calories=80,
            benefits=("Rapid hydration", "Electrolyte balance", "Energy restoration"),
            timing="Immediately",
        ),
    ),
    Rule(
        "dehydration",
        _dehydration,
        DrinkSuggestion(
            drink="Coconut Water with Lemon",
            reason="Low water intake detected - risk of dehydration",
            urgency=Urgency.HIGH,
            cost=30,
            calories=50,
            benefits=("Natural electrolytes", "Quick hydration", "Vitamin C boost"),
            timing="Now",
        ),
    ),
    Rule(
        "office_stress",
        _office_stress,
        DrinkSuggestion(
            drink="Chamomile Green Tea",
            reason="High stress levels detected - need calming nutrients",
            urgency=Urgency.MEDIUM,
            cost=20,
            calories=5,
            benefits=("Stress reduction", "Mental clarity", "Antioxidants"),
            timing="Within 15 minutes",
        ),
    ),
    Rule(
        "caffeine_crash",
        _caffeine_crash,
        DrinkSuggestion(
            drink="Matcha Latte with Almond Milk",
            reason="Preventing afternoon caffeine crash with sustained energy",
            urgency=Urgency.MEDIUM,
            cost=45,
            calories=90,
            benefits=("Sustained energy", "L-theanine for focus", "Antioxidants"),
            timing="Next 30 minutes",
        ),
    ),
    Rule(
        "post_meal",
        _post_meal,
        DrinkSuggestion(
            drink="Ginger Mint Tea",
            reason="Recent meal detected - supporting digestion",
            urgency=Urgency.LOW,
            cost=15,
            calories=8,
            benefits=("Digestive aid", "Reduces bloating", "Fresh breath"),
            timing="After 30 minutes",
        ),
    ),
    Rule(
        "morning",
        _morning,
        DrinkSuggestion(
            drink="Warm Lemon Honey Water",
            reason="Morning metabolism boost and detox",
            urgency=Urgency.MEDIUM,
            cost=8,
            calories=25,
            benefits=("Metabolism boost", "Detox", "Vitamin C"),
            timing="First thing in morning",
        ),
    ),
    Rule(
        "afternoon",
        _afternoon,
        DrinkSuggestion(
            drink="Green Smoothie",
            reason="Afternoon energy and nutrient boost",
            urgency=Urgency.LOW,
            cost=50,
            calories=120,
            benefits=("Vitamins & minerals", "Fiber", "Natural energy"),
            timing="Mid-afternoon",
        ),
    ),
    Rule(
        "fallback",
        _always,
        DrinkSuggestion(
            drink="Infused Water (Cucumber Mint)",
            reason="Maintaining optimal hydration levels",
            urgency=Urgency.LOW,
            cost=10,
            calories=5,
            benefits=("Hydration", "Antioxidants", "Refreshing"),
            timing="Anytime",
        ),
    ),
]


def recommend(
    snapshot: ActivitySnapshot,
    now: datetime,
    rules: list[Rule] | None = None,
) -> DrinkSuggestion:
    """
    Return the suggestion of the first matching rule.

    Args:
        snapshot: Current activity snapshot
        now: Local time; only its hour is used, plus the post-meal window.
            A naive value is taken to be in the zone of last_meal.
        rules: Rule list to evaluate, defaults to RULES

    Raises:
        LookupError: Only if a custom rule list has no catch-all rule
    """
    if now.tzinfo is None and snapshot.last_meal is not None:
        now = now.replace(tzinfo=snapshot.last_meal.tzinfo)

    for rule in rules if rules is not None else RULES:
        if rule.matches(snapshot, now):
            return rule.build()
    raise LookupError("No recommendation rule matched")
