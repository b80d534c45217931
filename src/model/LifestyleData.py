"""Lifestyle basket value types."""

from dataclasses import dataclass, field, asdict
from typing import List, Optional


@dataclass(frozen=True)
class LifestyleItem:
    """A lifestyle goal whose cost inflates at its own rate."""
    id: str
    name: str
    category: str
    current_cost: float
    inflation_rate: float
    target_year: int
    recurring: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> 'LifestyleItem':
        return cls(
            id=str(data.get('id', '')),
            name=data.get('name', ''),
            category=data.get('category', ''),
            current_cost=data.get('currentCost', 0.0),
            inflation_rate=data.get('inflationRate', 0.0),
            target_year=int(data.get('targetYear', 0)),
            recurring=bool(data.get('recurring', False)),
        )


@dataclass
class ItemSummary:
    item: LifestyleItem
    years_to_target: int
    future_cost: float
    # None when the target year is not in the future
    required_monthly_savings: Optional[float]


@dataclass
class BasketSummary:
    """Aggregates for a lifestyle basket compared with generic CPI."""
    item_count: int
    total_current_cost: float
    total_future_cost: float
    weighted_inflation: float
    average_years_to_target: float
    generic_inflation: float
    expected_cost_at_generic_inflation: float
    truth_gap: float
    gap_percentage: float
    severity: str
    items: List[ItemSummary] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)
