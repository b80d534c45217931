import json
import os
from typing import Optional

from model.TaxResult import GermanTaxResult
from calc.rounding import round_half_up


REFERENCE_PATH = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', '..', 'reference', 'german-tax-details.json'))


class GermanTaxDetails:
    """Detailed German income tax and social insurance calculator.

    Income tax uses the closed-form zone formulas of the official tariff
    (Nullzone, two progression zones, two proportional zones). Married filers
    use income splitting: the tariff is applied to half the income and the
    result doubled.

    Statutory values (zone edges, surcharge thresholds, contribution ceilings
    and rates) are passed in as the parsed `german-tax-details.json` document
    so tests can construct the calculator without touching the filesystem.
    """

    def __init__(self, details: dict):
        zones = details["zones"]
        self.year = details.get("year")
        self.tax_free_allowance = zones["taxFreeAllowance"]
        self.progression_one_ceiling = zones["progressionOneCeiling"]
        self.progression_two_ceiling = zones["progressionTwoCeiling"]
        self.proportional_ceiling = zones["proportionalCeiling"]
        self.solidarity = details["solidarity"]
        self.church = details["churchTax"]
        self.social = details["socialInsurance"]
        self.kindergeld_per_child_monthly = details.get("kindergeldPerChildMonthly", 0)

    @classmethod
    def load(cls, path: Optional[str] = None) -> 'GermanTaxDetails':
        """Create a calculator from the reference JSON file."""
        with open(path or REFERENCE_PATH, 'r') as f:
            return cls(json.load(f))

    def tariff(self, income: float) -> float:
        """Income tax for a single filer's income (no splitting)."""
        if income <= self.tax_free_allowance:
            return 0.0
        if income <= self.progression_one_ceiling:
            y = (income - self.tax_free_allowance) / 10000
            return (922.98 * y + 1400) * y
        if income <= self.progression_two_ceiling:
            z = (income - self.progression_one_ceiling) / 10000
            return (181.19 * z + 2397) * z + 1025.38
        if income <= self.proportional_ceiling:
            return 0.42 * income - 10602.13
        return 0.45 * income - 18936.88

    def income_tax(self, income: float, married: bool = False) -> float:
        """Income tax with Ehegattensplitting for married filers."""
        if married:
            return self.tariff(income / 2) * 2
        return self.tariff(income)

    def marginal_rate(self, income: float, married: bool = False) -> float:
        """Marginal income tax rate in percent, interpolated inside the progression zones."""
        x = income / 2 if married else income
        if x <= self.tax_free_allowance:
            return 0.0
        if x <= self.progression_one_ceiling:
            return 14 + ((x - self.tax_free_allowance) / (self.progression_one_ceiling - self.tax_free_allowance)) * 9.97
        if x <= self.progression_two_ceiling:
            return 23.97 + ((x - self.progression_one_ceiling) / (self.progression_two_ceiling - self.progression_one_ceiling)) * 18.03
        if x <= self.proportional_ceiling:
            return 42.0
        return 45.0

    def solidarity_surcharge(self, income_tax: float, married: bool = False) -> float:
        """Solidaritätszuschlag: 5.5% of income tax above the threshold, phased in at 11.9% of the excess."""
        threshold = self.solidarity["thresholdMarried"] if married else self.solidarity["thresholdSingle"]
        if income_tax <= threshold:
            return 0.0
        excess = income_tax - threshold
        return min(income_tax * self.solidarity["rate"], excess * self.solidarity["phaseInRate"])

    def church_tax_rate(self, state: str) -> float:
        if state in self.church["reducedRateStates"]:
            return self.church["reducedRate"]
        return self.church["standardRate"]

    def care_rate(self, children: int) -> float:
        """Employee care insurance rate with the childless surcharge or the per-child discount."""
        rate = self.social["careRate"]
        if children == 0:
            rate += self.social["careChildlessSurcharge"]
        elif children >= 2:
            rate -= self.social["careChildDiscount"] * (children - 1)
        return rate

    def calculate(self, income: float, married: bool = False, church_tax: bool = False,
                  state: str = 'Bayern', children: int = 0) -> GermanTaxResult:
        """Calculate the full German tax breakdown for an annual gross income.

        Args:
            income: Annual gross income.
            married: Use income splitting and the married solidarity threshold.
            church_tax: Whether the payer is liable for Kirchensteuer.
            state: Federal state, selects the 8% or 9% church tax rate.
            children: Number of children (Kindergeld and care insurance rate).

        Returns:
            GermanTaxResult where net_income + total_deductions equals gross income.
        """
        income_for_tax = income / 2 if married else income
        taxable_income = max(0.0, income_for_tax - self.tax_free_allowance)

        income_tax = self.income_tax(income, married)
        solidarity_tax = self.solidarity_surcharge(income_tax, married)
        church = income_tax * self.church_tax_rate(state) if church_tax else 0.0

        pension_base = min(income, self.social["pensionCeiling"])
        health_base = min(income, self.social["healthCeiling"])
        pension = pension_base * self.social["pensionRate"]
        health = health_base * self.social["healthRate"] + health_base * self.social["healthAdditionalRate"]
        unemployment = pension_base * self.social["unemploymentRate"]
        care = health_base * self.care_rate(children)

        total_tax = income_tax + solidarity_tax + church
        total_social = pension + health + unemployment + care
        total_deductions = total_tax + total_social

        return GermanTaxResult(
            gross_income=income,
            taxable_income=taxable_income,
            tax_free_allowance=self.tax_free_allowance,
            income_tax=income_tax,
            solidarity_tax=solidarity_tax,
            church_tax=church,
            pension_insurance=pension,
            health_insurance=health,
            unemployment_insurance=unemployment,
            care_insurance=care,
            total_tax=total_tax,
            total_social_contributions=total_social,
            total_deductions=total_deductions,
            net_income=income - total_deductions,
            kindergeld=children * self.kindergeld_per_child_monthly * 12,
            effective_tax_rate=(total_deductions / income) * 100 if income > 0 else 0.0,
            marginal_tax_rate=self.marginal_rate(income, married)
        )


def monthly_breakdown(result: GermanTaxResult) -> dict:
    """Divide the annual amounts of a German tax result by 12, rounded to cents."""
    fields = [
        'gross_income', 'income_tax', 'solidarity_tax', 'church_tax', 'total_tax',
        'pension_insurance', 'health_insurance', 'unemployment_insurance',
        'care_insurance', 'total_social_contributions', 'total_deductions',
        'kindergeld', 'net_income',
    ]
    return {name: round_half_up(getattr(result, name) / 12, 2) for name in fields}
