"""Lifestyle inflation model.

Lifestyle goals (cars, schooling, travel, ...) rarely inflate at the headline
CPI rate. This module computes what each goal will cost at its target year,
how much must be saved monthly to cover the increase, and how far the whole
basket drifts from a generic-CPI expectation (the "truth gap").
"""

import datetime
import json
import os
from typing import Dict, Iterable, List, Optional

from model.LifestyleData import LifestyleItem, ItemSummary, BasketSummary


REFERENCE_PATH = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', '..', 'reference', 'lifestyle-inflation.json'))

GENERIC_INFLATION = 0.02
GOOD_GAP_PERCENT = 10
WARNING_GAP_PERCENT = 25


def future_cost(current_cost: float, inflation_rate: float, years: float) -> float:
    return current_cost * (1 + inflation_rate) ** years


def required_monthly_savings(current_cost: float, future: float, years: float) -> float:
    """Monthly amount needed to cover the cost increase over the given years.

    Raises:
        ValueError: If years is not positive
    """
    if years <= 0:
        raise ValueError(f"Savings horizon must be positive, got {years} years")
    return (future - current_cost) / (years * 12)


def weighted_inflation(items: Iterable[LifestyleItem]) -> float:
    """Cost-weighted average inflation rate of a basket (0.0 when empty)."""
    items = list(items)
    total_cost = sum(item.current_cost for item in items)
    if total_cost == 0:
        return 0.0
    # Weight by cost share; a single item has share 1.0 and keeps its exact rate
    return sum((item.current_cost / total_cost) * item.inflation_rate for item in items)


def gap_severity(gap_percentage: float) -> str:
    if gap_percentage < GOOD_GAP_PERCENT:
        return 'good'
    if gap_percentage < WARNING_GAP_PERCENT:
        return 'warning'
    return 'critical'


def summarize_item(item: LifestyleItem, current_year: int) -> ItemSummary:
    years = item.target_year - current_year
    cost = future_cost(item.current_cost, item.inflation_rate, years)
    savings = required_monthly_savings(item.current_cost, cost, years) if years > 0 else None
    return ItemSummary(item=item, years_to_target=years, future_cost=cost, required_monthly_savings=savings)


def summarize_basket(items: Iterable[LifestyleItem], current_year: Optional[int] = None,
                     generic_inflation: float = GENERIC_INFLATION) -> BasketSummary:
    """Aggregate a lifestyle basket and compare it with generic CPI growth.

    The expected cost grows the total current cost at generic_inflation over
    the average number of years to target. The truth gap is the difference
    between the basket's real future cost and that expectation, and its
    percentage is taken relative to the total current cost.

    Args:
        items: Lifestyle items in the basket
        current_year: Calendar year treated as "now" (defaults to today)
        generic_inflation: CPI rate for the comparison
    """
    if current_year is None:
        current_year = datetime.date.today().year
    items = list(items)

    summaries = [summarize_item(item, current_year) for item in items]
    total_current = sum(item.current_cost for item in items)
    total_future = sum(s.future_cost for s in summaries)
    avg_years = sum(s.years_to_target for s in summaries) / len(summaries) if summaries else 0.0

    expected = total_current * (1 + generic_inflation) ** avg_years
    gap = total_future - expected
    gap_percentage = (gap / total_current) * 100 if total_current else 0.0

    return BasketSummary(
        item_count=len(items),
        total_current_cost=total_current,
        total_future_cost=total_future,
        weighted_inflation=weighted_inflation(items),
        average_years_to_target=avg_years,
        generic_inflation=generic_inflation,
        expected_cost_at_generic_inflation=expected,
        truth_gap=gap,
        gap_percentage=gap_percentage,
        severity=gap_severity(gap_percentage),
        items=summaries
    )


class LifestyleCatalog:
    """Inflation categories and item templates from the reference data."""

    def __init__(self, path: Optional[str] = None):
        with open(path or REFERENCE_PATH, 'r') as f:
            data = json.load(f)
        self.generic_inflation = data.get('genericInflation', GENERIC_INFLATION)
        self.categories: Dict[str, dict] = data.get('categories', {})
        self.templates: List[dict] = data.get('templates', [])

    def items_by_category(self, category: str) -> List[dict]:
        return [t for t in self.templates if t['category'] == category]

    def category_info(self, category: str) -> dict:
        if category not in self.categories:
            raise ValueError(f"Unknown lifestyle category '{category}'. Available: {list(self.categories)}")
        return self.categories[category]

    def get_template(self, template_id: str) -> dict:
        for template in self.templates:
            if template['id'] == template_id:
                return template
        raise ValueError(f"Unknown lifestyle template '{template_id}'")

    def item_from_template(self, template_id: str, target_year: int,
                           current_cost: Optional[float] = None) -> LifestyleItem:
        """Create a basket item from a template, optionally overriding its cost."""
        template = self.get_template(template_id)
        return LifestyleItem(
            id=template['id'],
            name=template['name'],
            category=template['category'],
            current_cost=template['typicalCost'] if current_cost is None else current_cost,
            inflation_rate=template['inflationRate'],
            target_year=target_year,
            recurring='recurring' in template.get('tags', [])
        )
