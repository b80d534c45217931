"""Value types for wealth projections and scenario runs.

A projection is an ordered tuple of ProjectionRow values, one per simulated
year. Rows are created fresh for every run and never mutated afterwards, so
the same tuple can be handed to renderers, the MCP tools and the document
store without copying.
"""

from dataclasses import dataclass, replace
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class ProjectionInput:
    """Inputs for a year-by-year wealth projection.

    All rates are unitless fractions (e.g., 0.07 for 7%).
    """
    start_year: int
    current_wealth: float
    monthly_savings: float
    annual_return: float
    inflation_rate: float
    base_annual_expenses: float
    expense_growth_rate: float
    years: int

    @classmethod
    def from_dict(cls, data: dict) -> 'ProjectionInput':
        """Build an input from the camelCase form used in spec.json files."""
        return cls(
            start_year=int(data.get('startYear', 0)),
            current_wealth=data.get('currentWealth', 0.0),
            monthly_savings=data.get('monthlySavings', 0.0),
            annual_return=data.get('annualReturn', 0.0),
            inflation_rate=data.get('inflationRate', 0.0),
            base_annual_expenses=data.get('baseAnnualExpenses', 0.0),
            expense_growth_rate=data.get('expenseGrowthRate', 0.0),
            years=int(data.get('years', 0)),
        )

    def to_dict(self) -> dict:
        return {
            'startYear': self.start_year,
            'currentWealth': self.current_wealth,
            'monthlySavings': self.monthly_savings,
            'annualReturn': self.annual_return,
            'inflationRate': self.inflation_rate,
            'baseAnnualExpenses': self.base_annual_expenses,
            'expenseGrowthRate': self.expense_growth_rate,
            'years': self.years,
        }

    def with_return_offset(self, delta: float) -> 'ProjectionInput':
        """Return a copy with the annual return shifted by delta."""
        return replace(self, annual_return=self.annual_return + delta)


@dataclass(frozen=True)
class ProjectionRow:
    """One simulated year of a wealth projection."""
    year: int
    wealth: int
    expenses: int
    fire_number: int
    fire_reached: bool

    def to_dict(self) -> dict:
        return {
            'year': self.year,
            'wealth': self.wealth,
            'expenses': self.expenses,
            'fireNumber': self.fire_number,
            'fireReached': self.fire_reached,
        }


@dataclass(frozen=True)
class FireStats:
    """Summary of the first year in which FIRE is reached."""
    fire_year: int
    fire_age: int
    years_to_fire: int

    def to_dict(self) -> dict:
        return {
            'fireYear': self.fire_year,
            'fireAge': self.fire_age,
            'yearsToFire': self.years_to_fire,
        }


@dataclass(frozen=True)
class ScenarioSet:
    """Bear, base and bull projections computed from the same input."""
    bear: Tuple[ProjectionRow, ...]
    base: Tuple[ProjectionRow, ...]
    bull: Tuple[ProjectionRow, ...]

    def as_dict(self) -> Dict[str, Tuple[ProjectionRow, ...]]:
        return {'bear': self.bear, 'base': self.base, 'bull': self.bull}

    def final_wealth(self) -> Dict[str, Optional[int]]:
        """Final-year wealth per scenario, or None for an empty horizon."""
        return {name: (rows[-1].wealth if rows else None) for name, rows in self.as_dict().items()}

    def to_dict(self) -> dict:
        return {name: [row.to_dict() for row in rows] for name, rows in self.as_dict().items()}
