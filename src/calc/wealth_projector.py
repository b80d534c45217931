"""Year-by-year wealth projection with FIRE detection.

Wealth grows at the real return (nominal return minus inflation), receives a
full year of savings, and pays that year's expenses. Wealth and expenses are
rounded to whole currency units once per row, and the rounded wealth is what
compounds into the next year.
"""

from typing import Tuple

from model.ProjectionData import ProjectionInput, ProjectionRow
from calc.rounding import round_currency

# 4% safe withdrawal rate
FIRE_MULTIPLIER = 25


def project_wealth(projection: ProjectionInput) -> Tuple[ProjectionRow, ...]:
    """Project wealth for `projection.years` years after the start year.

    Args:
        projection: The projection inputs

    Returns:
        Tuple of rows; row i (0-based) is for year start_year + i + 1.
        An empty tuple when years is 0.

    Raises:
        ValueError: If years is negative
    """
    if projection.years < 0:
        raise ValueError(f"Projection horizon must not be negative, got {projection.years}")

    real_return = projection.annual_return - projection.inflation_rate
    annual_savings = projection.monthly_savings * 12

    rows = []
    wealth = projection.current_wealth
    for i in range(1, projection.years + 1):
        expenses = projection.base_annual_expenses * (1 + projection.expense_growth_rate) ** i
        fire_number = expenses * FIRE_MULTIPLIER

        wealth = round_currency(wealth * (1 + real_return) + annual_savings - expenses)

        rows.append(ProjectionRow(
            year=projection.start_year + i,
            wealth=wealth,
            expenses=round_currency(expenses),
            fire_number=round_currency(fire_number),
            fire_reached=wealth >= fire_number
        ))

    return tuple(rows)
