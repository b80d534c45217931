"""Simplified German income tax estimators.

`estimate_german_tax` is the breakdown estimator used by the plain tax page. It
subtracts the Grundfreibetrag and Kinderfreibetrag up front and then applies
cumulative zone amounts. `german_income_tax` is an older one-line estimate on
gross income with flat segments. Neither agrees with GermanTaxDetails for the
same income, and they do not agree with each other.
"""

import json
import os
from typing import List, Optional

from model.TaxResult import GermanTaxEstimate, TaxZone
from calc.rounding import round_half_up, round_currency


REFERENCE_PATH = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', '..', 'reference', 'german-tax-details.json'))

SOLI_THRESHOLD_SINGLE = 18130
SOLI_THRESHOLD_MARRIED = 36260
SOLI_RATE = 0.055
KINDERGELD_PER_CHILD = 250

# Segment limits of the quick estimator
QUICK_ZERO_LIMIT = 10908
QUICK_ENTRY_LIMIT = 15999
QUICK_PROGRESSION_LIMIT = 62809

# Cumulative amounts of the fully used zones 2 and 3
_Y2_FULL = (17005 - 11604) / 10000
_TAX2_FULL = (922.98 * _Y2_FULL + 1400) * _Y2_FULL
_Z3_FULL = (66760 - 17005) / 10000
_TAX3_FULL = (181.19 * _Z3_FULL + 2397) * _Z3_FULL + 1025.38
_TAX4_FULL = (277825 - 66760) * 0.42

_ZONE_LABELS = [
    (1, 'Nullzone', '€0 - €11,604', '0%'),
    (2, 'Progressionszone 1', '€11,605 - €17,005', '14% - 24%'),
    (3, 'Progressionszone 2', '€17,006 - €66,760', '24% - 42%'),
    (4, 'Proportionalzone 1', '€66,761 - €277,825', '42%'),
    (5, 'Proportionalzone 2 (Reichensteuer)', '€277,826+', '45%'),
]


def _load_constants(path: Optional[str] = None) -> dict:
    with open(path or REFERENCE_PATH, 'r') as f:
        return json.load(f)["estimator"]


def progressive_income_tax(taxable_income: float, married: bool = False):
    """Return (income_tax, zones, marginal_rate) for an already reduced taxable income."""
    income = taxable_income / 2 if married else taxable_income

    if income <= 11604:
        amounts = [0.0]
        tax = 0.0
        marginal = 0.0
    elif income <= 17005:
        y = (income - 11604) / 10000
        tax = (922.98 * y + 1400) * y
        amounts = [0.0, tax]
        marginal = 14 + (y * 10)
    elif income <= 66760:
        z = (income - 17005) / 10000
        tax3 = (181.19 * z + 2397) * z + 1025.38
        amounts = [0.0, _TAX2_FULL, tax3]
        tax = _TAX2_FULL + tax3
        marginal = 24 + (z * 1.8)
    elif income <= 277825:
        tax4 = (income - 66760) * 0.42
        amounts = [0.0, _TAX2_FULL, _TAX3_FULL, tax4]
        tax = _TAX2_FULL + _TAX3_FULL + tax4
        marginal = 42.0
    else:
        tax5 = (income - 277825) * 0.45
        amounts = [0.0, _TAX2_FULL, _TAX3_FULL, _TAX4_FULL, tax5]
        tax = _TAX2_FULL + _TAX3_FULL + _TAX4_FULL + tax5
        marginal = 45.0

    zones: List[TaxZone] = [
        TaxZone(zone=number, name=name, range=span, rate=rate, tax_amount=amount)
        for (number, name, span, rate), amount in zip(_ZONE_LABELS, amounts)
    ]
    final_tax = tax * 2 if married else tax
    return round_half_up(final_tax, 2), zones, marginal


def estimate_german_tax(gross_income: float, married: bool = False, children: int = 0,
                        church_tax: bool = False, age: int = 30,
                        constants: Optional[dict] = None) -> GermanTaxEstimate:
    """Estimate German taxes, social insurance and net income.

    Args:
        gross_income: Annual gross income.
        married: Joint filing (doubles the Grundfreibetrag and uses splitting).
        children: Number of children (Kinderfreibetrag, Kindergeld, care rate).
        church_tax: Apply the flat estimator church tax rate.
        age: Age of the payer; the childless care surcharge applies from 23.
        constants: Parsed `estimator` section; loaded from reference when None.
    """
    c = constants or _load_constants()

    grundfreibetrag = c["grundfreibetragMarried"] if married else c["grundfreibetragSingle"]
    kinderfreibetrag = children * c["kinderfreibetrag"]
    taxable_income = max(0, gross_income - grundfreibetrag - kinderfreibetrag)

    income_tax, zones, marginal = progressive_income_tax(taxable_income, married)

    threshold = SOLI_THRESHOLD_MARRIED if married else SOLI_THRESHOLD_SINGLE
    solidarity = 0.0 if income_tax <= threshold else round_half_up(income_tax * SOLI_RATE, 2)
    church = income_tax * c["churchTaxRate"] if church_tax else 0.0
    total_tax = income_tax + solidarity + church

    pension_base = min(gross_income, c["pensionCeiling"])
    health_base = min(gross_income, c["healthCeiling"])
    pension = pension_base * c["pensionRate"]
    health = health_base * (c["healthRate"] + c["healthAdditionalRate"])
    unemployment = pension_base * c["unemploymentRate"]
    childless = children == 0 and age >= c["childlessMinimumAge"]
    care = health_base * (c["careRateChildless"] if childless else c["careRate"])
    total_social = round_half_up(pension + health + unemployment + care, 2)

    kindergeld = children * KINDERGELD_PER_CHILD * 12

    return GermanTaxEstimate(
        gross_income=gross_income,
        taxable_income=taxable_income,
        grundfreibetrag=grundfreibetrag,
        kinderfreibetrag=kinderfreibetrag,
        income_tax=income_tax,
        solidarity_tax=solidarity,
        church_tax=church,
        total_tax=total_tax,
        pension_insurance=round_half_up(pension, 2),
        health_insurance=round_half_up(health, 2),
        unemployment_insurance=round_half_up(unemployment, 2),
        long_term_care=round_half_up(care, 2),
        total_social_security=total_social,
        kindergeld=kindergeld,
        net_income=gross_income - total_tax - total_social + kindergeld,
        effective_tax_rate=(total_tax / gross_income) * 100 if gross_income > 0 else 0.0,
        marginal_tax_rate=marginal,
        tax_zones=zones
    )


def german_income_tax(gross_income: float, married: bool = False) -> int:
    """Quick estimate of German income tax plus solidarity surcharge.

    Uses the older flat-segment formula on gross income with no allowances
    deducted, split for married filers, and a 5.5% surcharge on every euro of
    tax. Rounded to a whole euro.
    """
    base = gross_income / 2 if married else gross_income

    if base <= QUICK_ZERO_LIMIT:
        tax = 0.0
    elif base <= QUICK_ENTRY_LIMIT:
        tax = (base - QUICK_ZERO_LIMIT) * 0.14
    elif base <= QUICK_PROGRESSION_LIMIT:
        tax = 1027 + (base - QUICK_ENTRY_LIMIT) * 0.24
    else:
        tax = 14753 + (base - QUICK_PROGRESSION_LIMIT) * 0.42

    if married:
        tax *= 2
    return round_currency(tax * (1 + SOLI_RATE))
