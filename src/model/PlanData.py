"""Unified data model for a program run.

PlanData collects the output of every calculator for one program spec.
Each renderer and MCP tool picks the parts it needs from this structure.
"""

from dataclasses import dataclass, field
from typing import Dict, Optional, Tuple

from model.ProjectionData import ProjectionInput, ProjectionRow, FireStats, ScenarioSet
from model.TaxResult import GermanTaxResult
from model.LifestyleData import BasketSummary


@dataclass
class PlanData:
    """Complete results of a program across all calculators.

    Sections whose input is missing from the spec are left as None.
    """
    current_age: int
    projection_input: ProjectionInput

    # Wealth projection indexed in chronological order
    projection: Tuple[ProjectionRow, ...] = ()
    scenarios: Optional[ScenarioSet] = None
    fire_stats: Optional[FireStats] = None

    # Taxes for the program's gross income
    country_tax: Optional[dict] = None
    german_tax: Optional[GermanTaxResult] = None

    budget: Optional[dict] = None
    health_score: Optional[dict] = None
    wealth_summary: Optional[dict] = None
    lifestyle: Optional[BasketSummary] = None
    investments: Dict[int, dict] = field(default_factory=dict)

    @property
    def first_year(self) -> Optional[int]:
        return self.projection[0].year if self.projection else None

    @property
    def last_year(self) -> Optional[int]:
        return self.projection[-1].year if self.projection else None

    def get_year(self, year: int) -> Optional[ProjectionRow]:
        """Get the projection row for a calendar year."""
        for row in self.projection:
            if row.year == year:
                return row
        return None

    def final_wealth(self) -> Optional[int]:
        return self.projection[-1].wealth if self.projection else None

    def to_dict(self) -> dict:
        """Serialize to the camelCase JSON document stored per user."""
        return {
            'currentAge': self.current_age,
            'input': self.projection_input.to_dict(),
            'projection': [row.to_dict() for row in self.projection],
            'scenarios': self.scenarios.to_dict() if self.scenarios else None,
            'fireStats': self.fire_stats.to_dict() if self.fire_stats else None,
            'countryTax': self.country_tax,
            'germanTax': self.german_tax.to_dict() if self.german_tax else None,
            'budget': self.budget,
            'healthScore': self.health_score,
            'wealthSummary': self.wealth_summary,
            'lifestyle': self.lifestyle.to_dict() if self.lifestyle else None,
            'investments': [self.investments[y] for y in sorted(self.investments)],
        }
