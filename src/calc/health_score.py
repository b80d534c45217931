"""Financial health score out of 100.

Six component scores are summed: savings rate (25), emergency fund (20),
diversification (15), debt ratio (15), goal progress (15) and lifestyle
inflation (10).
"""

from typing import Dict, List, Optional

from calc.rounding import round_currency


INDUSTRY_MEDIAN = 65

MAX_SCORES = {
    'savings_rate': 25,
    'emergency_fund': 20,
    'diversification': 15,
    'debt_ratio': 15,
    'goal_progress': 15,
    'lifestyle_inflation': 10,
}

# (minimum total score, status), checked from the top
STATUS_BANDS = [
    (80, 'Excellent'),
    (70, 'Strong'),
    (50, 'Adequate'),
    (40, 'Needs Attention'),
]


def savings_rate_score(rate: float) -> int:
    if rate >= 0.30:
        return 25
    if rate >= 0.20:
        return 20
    if rate >= 0.10:
        return 10
    return round_currency(rate * 100)


def emergency_fund_score(months: float) -> int:
    if months >= 12:
        return 20
    if months >= 6:
        return 15
    if months >= 3:
        return 10
    return round_currency((months / 12) * 20)


def diversification_score(asset_classes: int) -> int:
    if asset_classes >= 5:
        return 15
    if asset_classes >= 3:
        return 10
    if asset_classes >= 1:
        return 5
    return 0


def debt_ratio_score(ratio: float) -> int:
    """Lower debt-to-income ratios score higher."""
    if ratio <= 0.10:
        return 15
    if ratio <= 0.30:
        return 10
    if ratio <= 0.50:
        return 5
    return 0


def goal_progress_score(progress: float) -> int:
    if progress >= 0.75:
        return 15
    if progress >= 0.50:
        return 10
    if progress >= 0.25:
        return 5
    return 0


def lifestyle_inflation_score(rate: float) -> int:
    if rate <= 0.05:
        return 10
    if rate <= 0.10:
        return 5
    return 0


def status_text(total_score: int) -> str:
    for minimum, status in STATUS_BANDS:
        if total_score >= minimum:
            return status
    return 'Critical'


def percentile(total_score: int) -> int:
    """Approximate position among users, clamped to 1..99."""
    return min(99, max(1, round_currency((total_score / 100) * 95)))


def _priority_actions(breakdown: Dict[str, dict]) -> List[str]:
    actions = []
    if breakdown['emergency_fund']['score'] < 15:
        actions.append("Build emergency fund to 6 months of expenses")
    if breakdown['savings_rate']['score'] < 20:
        actions.append("Increase savings rate to 20% or higher")
    if breakdown['diversification']['score'] < 10:
        actions.append("Diversify across additional asset classes")
    if breakdown['debt_ratio']['score'] < 10:
        actions.append("Reduce debt-to-income ratio below 30%")
    return actions


def calculate_health_score(savings_rate: float = 0.0, emergency_fund_months: float = 0.0,
                           asset_classes: int = 0, debt_ratio: float = 0.0,
                           goal_progress: float = 0.0, lifestyle_inflation: float = 0.02) -> dict:
    """Score a financial position out of 100.

    Args:
        savings_rate: Share of take-home pay saved, as a fraction
        emergency_fund_months: Months of expenses held in cash
        asset_classes: Number of distinct asset classes held
        debt_ratio: Debt-to-income ratio, as a fraction
        goal_progress: Progress towards the savings goal, as a fraction
        lifestyle_inflation: Personal lifestyle inflation rate, as a fraction

    Returns:
        Dictionary with total score, per-component breakdown, percentile,
        status band, comparison to the industry median and priority actions
    """
    breakdown = {
        'savings_rate': {'score': savings_rate_score(savings_rate), 'value': savings_rate},
        'emergency_fund': {'score': emergency_fund_score(emergency_fund_months), 'value': emergency_fund_months},
        'diversification': {'score': diversification_score(asset_classes), 'value': asset_classes},
        'debt_ratio': {'score': debt_ratio_score(debt_ratio), 'value': debt_ratio},
        'goal_progress': {'score': goal_progress_score(goal_progress), 'value': goal_progress},
        'lifestyle_inflation': {'score': lifestyle_inflation_score(lifestyle_inflation), 'value': lifestyle_inflation},
    }
    for key, component in breakdown.items():
        component['max_score'] = MAX_SCORES[key]

    total = sum(component['score'] for component in breakdown.values())

    return {
        'total_score': total,
        'breakdown': breakdown,
        'percentile': percentile(total),
        'status': status_text(total),
        'industry_median': INDUSTRY_MEDIAN,
        'above_median': total >= INDUSTRY_MEDIAN,
        'priority_actions': _priority_actions(breakdown),
    }


def health_score_from_spec(spec: dict, budget: Optional[dict] = None) -> dict:
    """Score the spec's 'healthScore' section.

    When the section has no savingsRate, the budget's savings rate is used if a
    budget was calculated.
    """
    section = spec.get('healthScore', {})
    savings_rate = section.get('savingsRate')
    if savings_rate is None:
        savings_rate = budget['savings_rate'] / 100 if budget else 0.0

    return calculate_health_score(
        savings_rate=savings_rate,
        emergency_fund_months=section.get('emergencyFundMonths', 0),
        asset_classes=section.get('assetClasses', 0),
        debt_ratio=section.get('debtRatio', 0),
        goal_progress=section.get('goalProgress', 0),
        lifestyle_inflation=section.get('lifestyleInflation', 0.02),
    )
