"""Tests for the household wealth summary."""

import os
import sys
import pytest

sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../src')))

from calc.wealth_summary import wealth_summary


WEALTH = {'investments': 150000, 'property': 300000, 'cash': 20000, 'liabilities': 170000}


def test_single_household():
    result = wealth_summary(WEALTH, {'maritalStatus': 'single', 'members': 1})

    assert result == {
        'net_worth': 300000,
        'assets': 470000,
        'liabilities': 170000,
        'liquidity': 20000,
        'per_person_net_worth': None,
    }


def test_married_household_splits_net_worth():
    result = wealth_summary(WEALTH, {'maritalStatus': 'married', 'members': 3})
    assert result['per_person_net_worth'] == 100000


def test_missing_values_count_as_zero():
    result = wealth_summary({'cash': 5000}, {})
    assert result['net_worth'] == 5000
    assert result['liquidity'] == 5000
    assert result['per_person_net_worth'] is None


def test_negative_net_worth():
    result = wealth_summary({'cash': 1000, 'liabilities': 25000}, {'maritalStatus': 'married', 'members': 2})
    assert result['net_worth'] == -24000
    assert result['per_person_net_worth'] == -12000


def test_married_household_without_members_raises():
    with pytest.raises(ValueError):
        wealth_summary(WEALTH, {'maritalStatus': 'married', 'members': 0})
