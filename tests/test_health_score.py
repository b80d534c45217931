"""Tests for the financial health score."""

import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from calc.health_score import (
    savings_rate_score, emergency_fund_score, diversification_score, debt_ratio_score,
    goal_progress_score, lifestyle_inflation_score, status_text, percentile,
    calculate_health_score, health_score_from_spec
)


@pytest.mark.parametrize('rate, expected', [
    (0.35, 25), (0.30, 25), (0.25, 20), (0.10, 10), (0.084, 8), (0.085, 9), (0.0, 0),
])
def test_savings_rate_score(rate, expected):
    assert savings_rate_score(rate) == expected


@pytest.mark.parametrize('months, expected', [
    (24, 20), (12, 20), (6, 15), (3, 10), (2, 3), (1.5, 3), (0, 0),
])
def test_emergency_fund_score_is_pro_rata_below_three_months(months, expected):
    assert emergency_fund_score(months) == expected


def test_tiered_component_scores():
    assert [diversification_score(n) for n in (0, 1, 3, 5, 8)] == [0, 5, 10, 15, 15]
    assert [debt_ratio_score(r) for r in (0.0, 0.10, 0.3, 0.5, 0.51)] == [15, 15, 10, 5, 0]
    assert [goal_progress_score(p) for p in (0.0, 0.25, 0.5, 0.75, 1.0)] == [0, 5, 10, 15, 15]
    assert [lifestyle_inflation_score(r) for r in (0.02, 0.05, 0.08, 0.12)] == [10, 10, 5, 0]


def test_status_bands():
    assert status_text(100) == 'Excellent'
    assert status_text(80) == 'Excellent'
    assert status_text(79) == 'Strong'
    assert status_text(70) == 'Strong'
    assert status_text(50) == 'Adequate'
    assert status_text(40) == 'Needs Attention'
    assert status_text(39) == 'Critical'


def test_percentile_is_clamped():
    assert percentile(0) == 1
    assert percentile(65) == 62
    assert percentile(100) == 95
    assert percentile(110) == 99


def test_perfect_score():
    result = calculate_health_score(savings_rate=0.4, emergency_fund_months=12, asset_classes=5,
                                    debt_ratio=0.0, goal_progress=0.9, lifestyle_inflation=0.01)
    assert result['total_score'] == 100
    assert result['status'] == 'Excellent'
    assert result['above_median'] is True
    assert result['priority_actions'] == []
    assert {k: v['max_score'] for k, v in result['breakdown'].items()} == {
        'savings_rate': 25, 'emergency_fund': 20, 'diversification': 15,
        'debt_ratio': 15, 'goal_progress': 15, 'lifestyle_inflation': 10,
    }


def test_defaults_score_debt_and_inflation_only():
    result = calculate_health_score()
    # No debt (15) and 2% lifestyle inflation (10)
    assert result['total_score'] == 25
    assert result['status'] == 'Critical'
    assert result['percentile'] == 24
    assert result['above_median'] is False
    assert result['priority_actions'] == [
        "Build emergency fund to 6 months of expenses",
        "Increase savings rate to 20% or higher",
        "Diversify across additional asset classes",
    ]


def test_heavy_debt_adds_debt_action():
    result = calculate_health_score(debt_ratio=0.6)
    assert result['breakdown']['debt_ratio']['score'] == 0
    assert "Reduce debt-to-income ratio below 30%" in result['priority_actions']


def test_from_spec_uses_section_values():
    spec = {'healthScore': {'savingsRate': 0.25, 'emergencyFundMonths': 6, 'assetClasses': 3,
                            'debtRatio': 0.15, 'goalProgress': 0.4, 'lifestyleInflation': 0.06}}
    result = health_score_from_spec(spec, budget={'savings_rate': 90.0})

    assert result['breakdown']['savings_rate']['value'] == 0.25
    assert result['total_score'] == 65
    assert result['status'] == 'Adequate'
    assert result['above_median'] is True


def test_from_spec_takes_savings_rate_from_budget():
    result = health_score_from_spec({'healthScore': {}}, budget={'savings_rate': 22.0})
    assert result['breakdown']['savings_rate']['value'] == pytest.approx(0.22)
    assert result['breakdown']['savings_rate']['score'] == 20


def test_from_spec_without_budget_or_rate():
    result = health_score_from_spec({'healthScore': {}})
    assert result['breakdown']['savings_rate']['value'] == 0.0
    assert result['breakdown']['lifestyle_inflation']['value'] == 0.02
