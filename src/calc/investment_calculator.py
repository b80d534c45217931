"""Investment portfolio calculator.

Projects a portfolio with monthly compounding and monthly contributions,
an optional lump-sum contribution at each year end, and contributions that
grow every year.
"""

from typing import Dict, Optional


# Long-run nominal returns per asset class
DEFAULT_RETURNS = {
    'etf': 0.07,
    'cash': 0.01,
    'realEstate': 0.04,
}


def blended_return(allocation: Dict[str, float]) -> float:
    """Expected return of an asset allocation.

    Weights are normalized by their sum, so both fractions (0.6/0.1/0.3)
    and percentages (60/10/30) are accepted. An empty or all-zero
    allocation returns 0.
    """
    total = sum(allocation.get(asset, 0.0) for asset in DEFAULT_RETURNS)
    if total <= 0:
        return 0.0
    return sum(allocation.get(asset, 0.0) * rate for asset, rate in DEFAULT_RETURNS.items()) / total


class InvestmentCalculator:
    """Calculator for an investment portfolio over time.

    Year 0 holds the starting amount. Every following year runs twelve
    months of `balance * (1 + monthly_return) + monthly_contribution`, then
    adds the annual contribution. Both contributions grow by the contribution
    growth rate after each year.
    """

    def __init__(self, spec: dict, current_age: int = 0):
        """Initialize the investment calculator.

        Args:
            spec: The program specification containing an 'investments' section
            current_age: Age at year 0, used to label each row
        """
        investments = spec.get('investments', {})

        self.current_age = current_age
        self.starting_amount = investments.get('startingAmount', 0.0)
        self.monthly_contribution = investments.get('monthlyContribution', 0.0)
        self.annual_contribution = investments.get('annualContribution', 0.0)
        self.years = investments.get('years', 0)
        self.inflation_adjusted = investments.get('inflationAdjusted', False)
        self.inflation_rate = investments.get('inflationRate', 0.0)
        self.contribution_growth = investments.get('contributionGrowth', 0.0)

        # An explicit expected return wins over the allocation blend
        allocation = investments.get('allocation')
        if 'expectedReturn' in investments:
            self.expected_return = investments['expectedReturn']
        elif allocation:
            self.expected_return = blended_return(allocation)
        else:
            self.expected_return = 0.0

        self._balances: Dict[int, dict] = {}
        self._calculate_all_years()

    @property
    def real_return(self) -> float:
        if self.inflation_adjusted:
            return self.expected_return - self.inflation_rate
        return self.expected_return

    def _calculate_all_years(self) -> None:
        balance = self.starting_amount
        total_contributed = self.starting_amount
        monthly = self.monthly_contribution
        annual = self.annual_contribution
        monthly_return = (1 + self.real_return) ** (1 / 12) - 1

        self._balances[0] = {
            'year': 0,
            'age': self.current_age,
            'contributions': 0.0,
            'returns': 0.0,
            'balance': balance,
            'total_contributed': total_contributed,
            'total_gains': 0.0
        }

        for year in range(1, self.years + 1):
            year_start = balance
            yearly_contributions = monthly * 12 + annual

            for _ in range(12):
                balance = balance * (1 + monthly_return) + monthly
            balance += annual

            total_contributed += yearly_contributions
            self._balances[year] = {
                'year': year,
                'age': self.current_age + year,
                'contributions': yearly_contributions,
                'returns': balance - year_start - yearly_contributions,
                'balance': balance,
                'total_contributed': total_contributed,
                'total_gains': balance - total_contributed
            }

            monthly *= (1 + self.contribution_growth)
            annual *= (1 + self.contribution_growth)

    def get_balances(self, year: int) -> Optional[dict]:
        """Get the projection row for a year offset (0 = today), or None outside the horizon."""
        return self._balances.get(year)

    def get_all_balances(self) -> Dict[int, dict]:
        return self._balances.copy()

    def get_final_balances(self) -> dict:
        """Get the last row of the projection.

        Returns:
            Dictionary with balance, total contributed, total gains and the
            total return in percent of contributions
        """
        final = dict(self._balances[self.years])
        contributed = final['total_contributed']
        final['total_return_percent'] = (final['total_gains'] / contributed) * 100 if contributed else 0.0
        return final
