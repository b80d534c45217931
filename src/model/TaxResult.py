"""Value types shared by the tax calculators."""

from dataclasses import dataclass, field, asdict
from typing import List, Optional, Tuple


@dataclass(frozen=True)
class TaxBracket:
    """A single marginal bracket. max is float('inf') for the top bracket."""
    min: float
    max: float
    rate: float


@dataclass(frozen=True)
class CountryTaxProfile:
    """Bracket table and flat contributions for one country.

    standard_deduction is carried for reference only; compute_tax does not
    subtract it from taxable income.
    """
    name: str
    brackets: Tuple[TaxBracket, ...]
    social_security_rate: float
    standard_deduction: float = 0.0
    married_brackets: Optional[Tuple[TaxBracket, ...]] = None
    married_standard_deduction: Optional[float] = None
    code: Optional[str] = None
    year: Optional[int] = None
    currency: Optional[str] = None
    wage_base: Optional[float] = None
    health_rate: float = 0.0
    health_additional_rate: float = 0.0
    health_additional_threshold: Optional[float] = None
    source: str = ''
    notes: str = ''

    def brackets_for(self, married: bool) -> Tuple[TaxBracket, ...]:
        if married and self.married_brackets:
            return self.married_brackets
        return self.brackets


@dataclass
class GermanTaxResult:
    """Detailed German income tax and social insurance breakdown."""
    gross_income: float
    taxable_income: float
    tax_free_allowance: float
    income_tax: float
    solidarity_tax: float
    church_tax: float
    pension_insurance: float
    health_insurance: float
    unemployment_insurance: float
    care_insurance: float
    total_tax: float
    total_social_contributions: float
    total_deductions: float
    net_income: float
    kindergeld: float
    effective_tax_rate: float
    marginal_tax_rate: float

    @property
    def net_income_with_benefits(self) -> float:
        """Net income plus the (untaxed) child benefit."""
        return self.net_income + self.kindergeld

    def to_dict(self) -> dict:
        result = asdict(self)
        result['net_income_with_benefits'] = self.net_income_with_benefits
        return result


@dataclass
class TaxZone:
    zone: int
    name: str
    range: str
    rate: str
    tax_amount: float


@dataclass
class GermanTaxEstimate:
    """Breakdown produced by the simplified German estimator."""
    gross_income: float
    taxable_income: float
    grundfreibetrag: float
    kinderfreibetrag: float
    income_tax: float
    solidarity_tax: float
    church_tax: float
    total_tax: float
    pension_insurance: float
    health_insurance: float
    unemployment_insurance: float
    long_term_care: float
    total_social_security: float
    kindergeld: float
    net_income: float
    effective_tax_rate: float
    marginal_tax_rate: float
    tax_zones: List[TaxZone] = field(default_factory=list)

    def to_dict(self) -> dict:
        return asdict(self)
