"""Tests for the lifestyle inflation model and catalog."""

import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from calc.lifestyle_inflation import (
    future_cost, required_monthly_savings, weighted_inflation, gap_severity,
    summarize_item, summarize_basket, LifestyleCatalog
)
from model.LifestyleData import LifestyleItem


def item(cost, rate, target_year, name='item'):
    return LifestyleItem(id=name, name=name, category='watches', current_cost=cost,
                         inflation_rate=rate, target_year=target_year)


def test_future_cost():
    assert future_cost(1000, 0.05, 10) == pytest.approx(1628.894627, abs=1e-6)
    assert future_cost(1000, 0.05, 0) == 1000


def test_required_monthly_savings():
    assert required_monthly_savings(1000, 2200, 10) == pytest.approx(10.0)


def test_required_monthly_savings_needs_positive_horizon():
    with pytest.raises(ValueError):
        required_monthly_savings(1000, 1000, 0)
    with pytest.raises(ValueError):
        required_monthly_savings(1000, 900, -2)


def test_weighted_inflation():
    items = [item(30000, 0.08, 2030), item(10000, 0.04, 2030)]
    assert weighted_inflation(items) == pytest.approx(0.07)
    assert weighted_inflation([]) == 0.0


@pytest.mark.parametrize('cost, rate', [(12000, 0.08), (333.33, 0.035), (7, 0.1234567), (20000, -0.01)])
def test_single_item_weighted_inflation_is_its_rate(cost, rate):
    assert weighted_inflation([item(cost, rate, 2030)]) == rate


@pytest.mark.parametrize('cost, rate, years', [(1000, 0.05, 10), (12000, 0.08, 5), (333.33, 0.035, 7)])
def test_future_cost_is_stable_with_zero_rate_and_horizon(cost, rate, years):
    future = future_cost(cost, rate, years)
    assert future_cost(future, 0, 0) == future
    assert future_cost(future, 0, years) == future


def test_gap_severity_thresholds():
    assert gap_severity(-5) == 'good'
    assert gap_severity(9.99) == 'good'
    assert gap_severity(10) == 'warning'
    assert gap_severity(24.9) == 'warning'
    assert gap_severity(25) == 'critical'


def test_summarize_item_past_target_has_no_savings():
    summary = summarize_item(item(5000, 0.05, 2024), current_year=2026)
    assert summary.years_to_target == -2
    assert summary.required_monthly_savings is None
    assert summary.future_cost == pytest.approx(5000 / 1.05 ** 2)


def test_basket_warning_gap():
    basket = summarize_basket([item(10000, 0.035, 2036)], current_year=2026)

    assert basket.total_future_cost == pytest.approx(10000 * 1.035 ** 10)
    assert basket.expected_cost_at_generic_inflation == pytest.approx(10000 * 1.02 ** 10)
    assert basket.gap_percentage == pytest.approx((1.035 ** 10 - 1.02 ** 10) * 100)
    assert basket.severity == 'warning'


def test_basket_good_and_critical():
    assert summarize_basket([item(10000, 0.02, 2036)], current_year=2026).severity == 'good'
    assert summarize_basket([item(10000, 0.10, 2036)], current_year=2026).severity == 'critical'


def test_basket_uses_average_years():
    items = [item(1000, 0.05, 2030, 'a'), item(3000, 0.05, 2036, 'b')]
    basket = summarize_basket(items, current_year=2026)
    assert basket.item_count == 2
    assert basket.average_years_to_target == 7
    assert basket.expected_cost_at_generic_inflation == pytest.approx(4000 * 1.02 ** 7)
    assert basket.weighted_inflation == pytest.approx(0.05)


def test_empty_basket():
    basket = summarize_basket([], current_year=2026)
    assert basket.total_current_cost == 0
    assert basket.average_years_to_target == 0.0
    assert basket.gap_percentage == 0.0
    assert basket.severity == 'good'
    assert basket.to_dict()['items'] == []


class TestLifestyleCatalog:
    def setup_method(self):
        self.catalog = LifestyleCatalog()

    def test_generic_inflation(self):
        assert self.catalog.generic_inflation == 0.02

    def test_items_by_category(self):
        ids = [t['id'] for t in self.catalog.items_by_category('watches')]
        assert ids == ['rolex-submariner', 'patek-philippe']

    def test_category_info(self):
        assert self.catalog.category_info('travel')['avgInflationRate'] == 0.05
        with pytest.raises(ValueError):
            self.catalog.category_info('spaceships')

    def test_item_from_template(self):
        rolex = self.catalog.item_from_template('rolex-submariner', 2031)
        assert rolex.current_cost == 12000
        assert rolex.inflation_rate == 0.08
        assert rolex.recurring is False

        flights = self.catalog.item_from_template('business-class-annual', 2036, current_cost=18000)
        assert flights.current_cost == 18000
        assert flights.recurring is True

    def test_unknown_template(self):
        with pytest.raises(ValueError):
            self.catalog.get_template('time-machine')
