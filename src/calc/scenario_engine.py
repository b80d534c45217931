"""Bear/base/bull scenarios and user-defined scenario branches."""

import datetime
import math
from dataclasses import dataclass, field
from typing import List, Optional

from model.ProjectionData import ProjectionInput, ScenarioSet
from calc.wealth_projector import project_wealth, FIRE_MULTIPLIER


SCENARIO_MODIFIERS = {
    'bear': -0.02,
    'base': 0.0,
    'bull': 0.02,
}

# Branches whose FIRE year lies further out than this get no FIRE year
MAX_FIRE_HORIZON_YEARS = 50


def calculate_scenarios(projection: ProjectionInput) -> ScenarioSet:
    """Run the wealth projection once per market scenario.

    Each run only differs from the input in its annual return, shifted by
    the scenario's entry in SCENARIO_MODIFIERS.
    """
    runs = {
        name: project_wealth(projection.with_return_offset(delta))
        for name, delta in SCENARIO_MODIFIERS.items()
    }
    return ScenarioSet(bear=runs['bear'], base=runs['base'], bull=runs['bull'])


@dataclass(frozen=True)
class LifeEvent:
    """A life event inside a scenario branch.

    Only 'one-time-expense' and 'one-time-income' events change the projected
    net worth; other types (e.g. 'income-change') are kept for display.
    """
    name: str
    type: str
    year: int
    amount: float
    recurring: bool = False

    @classmethod
    def from_dict(cls, data: dict) -> 'LifeEvent':
        return cls(
            name=data.get('name', ''),
            type=data.get('type', 'one-time-expense'),
            year=int(data.get('year', 0)),
            amount=data.get('amount', 0.0),
            recurring=bool(data.get('recurring', False)),
        )


@dataclass(frozen=True)
class ScenarioBranch:
    name: str
    current_age: int
    retirement_age: int
    current_net_worth: float
    monthly_income: float
    monthly_savings: float
    expected_return: float
    inflation_rate: float = 0.02
    life_events: tuple = ()

    @classmethod
    def from_dict(cls, data: dict) -> 'ScenarioBranch':
        return cls(
            name=data.get('name', ''),
            current_age=int(data.get('currentAge', 0)),
            retirement_age=int(data.get('retirementAge', 0)),
            current_net_worth=data.get('currentNetWorth', 0.0),
            monthly_income=data.get('monthlyIncome', 0.0),
            monthly_savings=data.get('monthlySavings', 0.0),
            expected_return=data.get('expectedReturn', 0.0),
            inflation_rate=data.get('inflationRate', 0.02),
            life_events=tuple(LifeEvent.from_dict(e) for e in data.get('lifeEvents', [])),
        )

    @property
    def savings_rate(self) -> float:
        return self.monthly_savings / self.monthly_income if self.monthly_income > 0 else 0.0


@dataclass
class BranchResult:
    name: str
    projected_net_worth: float
    fire_number: float
    years_to_fire: Optional[int]
    fire_year: Optional[int]
    confidence_score: int
    events: List[LifeEvent] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'projectedNetWorth': self.projected_net_worth,
            'fireNumber': self.fire_number,
            'yearsToFire': self.years_to_fire,
            'fireYear': self.fire_year,
            'confidenceScore': self.confidence_score,
        }


def confidence_score(branch: ScenarioBranch) -> int:
    """Heuristic confidence in a branch, from 30 to 95."""
    score = 70
    if branch.savings_rate >= 0.30:
        score += 15
    elif branch.savings_rate >= 0.20:
        score += 10
    if 0.07 <= branch.expected_return <= 0.09:
        score += 10
    if len(branch.life_events) <= 3:
        score += 5
    return min(95, max(30, score))


def evaluate_branch(branch: ScenarioBranch, current_year: Optional[int] = None) -> BranchResult:
    """Project a scenario branch to retirement and estimate its FIRE date.

    Net worth compounds annually at the expected return with a full year of
    savings added after growth. One-time expenses and incomes that fall
    before retirement are applied once, after compounding.

    Args:
        branch: The scenario branch to evaluate
        current_year: Calendar year treated as "now" (defaults to today)
    """
    if current_year is None:
        current_year = datetime.date.today().year

    years_to_retirement = branch.retirement_age - branch.current_age
    projected = branch.current_net_worth
    for _ in range(max(0, years_to_retirement)):
        projected = projected * (1 + branch.expected_return) + branch.monthly_savings * 12

    for event in branch.life_events:
        offset = event.year - current_year
        if 0 <= offset < years_to_retirement:
            if event.type == 'one-time-expense':
                projected -= event.amount
            elif event.type == 'one-time-income':
                projected += event.amount

    fire_number = branch.monthly_income * 12 * FIRE_MULTIPLIER
    if projected >= fire_number:
        years_to_fire = 0
    elif branch.monthly_savings <= 0:
        # Savings never close the gap
        years_to_fire = None
    else:
        years_to_fire = math.ceil((fire_number - branch.current_net_worth) / (branch.monthly_savings * 12))

    fire_year = None
    if years_to_fire is not None and years_to_fire <= MAX_FIRE_HORIZON_YEARS:
        fire_year = current_year + years_to_fire

    return BranchResult(
        name=branch.name,
        projected_net_worth=projected,
        fire_number=fire_number,
        years_to_fire=years_to_fire,
        fire_year=fire_year,
        confidence_score=confidence_score(branch),
        events=list(branch.life_events)
    )
