"""Tests for the MCP server tools module."""

import os
import sys
import json
import shutil
import tempfile
import pytest

# Add src and mcp-server to path for imports
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../src')))
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '../../mcp-server')))

from tools import FirePlannerTools, MultiProgramTools


# Path to test fixtures
FIXTURES_PATH = os.path.abspath(os.path.join(os.path.dirname(__file__), 'fixtures'))

# Path to the project root (for reference files)
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), '../..'))

CURRENT_YEAR = 2026


def _write_program(base_path, name, spec):
    program_dir = os.path.join(base_path, 'input-parameters', name)
    os.makedirs(program_dir, exist_ok=True)
    with open(os.path.join(program_dir, 'spec.json'), 'w') as f:
        json.dump(spec, f)


@pytest.fixture(scope="module")
def test_base_path():
    """Create a temporary directory structure for testing.

    This creates a temp directory with the required structure:
    - input-parameters/testprogram/spec.json (from fixtures)
    - reference/*.json (symlinked from project)
    """
    temp_dir = tempfile.mkdtemp()

    # Copy the test program from fixtures
    input_params_dir = os.path.join(temp_dir, 'input-parameters')
    os.makedirs(input_params_dir)
    shutil.copytree(
        os.path.join(FIXTURES_PATH, 'testprogram'),
        os.path.join(input_params_dir, 'testprogram')
    )

    # Symlink the reference directory from the project root
    os.symlink(
        os.path.join(PROJECT_ROOT, 'reference'),
        os.path.join(temp_dir, 'reference')
    )

    yield temp_dir

    # Cleanup
    shutil.rmtree(temp_dir, ignore_errors=True)


@pytest.fixture
def two_program_path(test_base_path):
    """Temp structure with testprogram plus a wealthy program that is already at FIRE."""
    temp_dir = tempfile.mkdtemp()
    shutil.copytree(os.path.join(test_base_path, 'input-parameters'), os.path.join(temp_dir, 'input-parameters'))
    os.symlink(os.path.join(PROJECT_ROOT, 'reference'), os.path.join(temp_dir, 'reference'))

    with open(os.path.join(FIXTURES_PATH, 'testprogram', 'spec.json'), 'r') as f:
        spec = json.load(f)
    spec['projection']['currentWealth'] = 2000000
    del spec['lifestyleBasket']
    _write_program(temp_dir, 'wealthy', spec)

    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


class TestFirePlannerTools:
    """Tests for FirePlannerTools class."""

    @pytest.fixture
    def tools(self, test_base_path):
        """Create a FirePlannerTools instance using testprogram."""
        return FirePlannerTools(test_base_path, 'testprogram', CURRENT_YEAR)

    def test_init_loads_spec(self, tools):
        """Test that initialization loads the spec correctly."""
        assert tools.spec['currentAge'] == 34
        assert 'projection' in tools.spec

    def test_init_calculates_plan(self, tools):
        """Test that the plan is calculated on construction."""
        assert len(tools.plan_data.projection) == 40
        assert tools.plan_data.german_tax is not None

    def test_program_overview(self, tools):
        overview = tools.get_program_overview()

        assert overview['program_name'] == 'testprogram'
        assert overview['current_age'] == 34
        assert overview['projection_horizon'] == {
            'start_year': 2026, 'first_year': 2027, 'last_year': 2066, 'years': 40
        }
        assert overview['assumptions']['real_return'] == pytest.approx(0.05)
        assert overview['tax_profile']['country'] == 'Germany'
        assert overview['final_wealth'] == tools.plan_data.projection[-1].wealth
        assert overview['lifestyle_items'] == 2

    def test_projection_all_years(self, tools):
        result = tools.get_projection()
        assert len(result['rows']) == 40
        assert result['rows'][0]['year'] == 2027
        assert set(result['rows'][0]) == {'year', 'wealth', 'expenses', 'fireNumber', 'fireReached'}

    def test_projection_single_year(self, tools):
        result = tools.get_projection(2030)
        assert result['year'] == 2030
        assert result['row']['year'] == 2030

    def test_projection_year_outside_horizon(self, tools):
        assert 'error' in tools.get_projection(1999)

    def test_scenarios(self, tools):
        result = tools.get_scenarios()
        final = result['final_wealth']
        assert final['base'] == tools.plan_data.final_wealth()
        assert final['bear'] == result['scenarios']['bear'][-1]['wealth']
        assert final['bear'] != final['bull']
        assert len(result['scenarios']['bear']) == 40

    def test_fire_stats_not_reached(self, tools):
        # Savings do not cover growing expenses in the example program
        result = tools.get_fire_stats()
        assert result['fire_reached'] is False
        assert result['final_wealth'] == tools.plan_data.projection[-1].wealth

    def test_lifestyle_basket(self, tools):
        result = tools.get_lifestyle_basket()
        assert result['item_count'] == 2
        assert result['severity'] in ('good', 'warning', 'critical')
        assert result['items'][0]['item']['name'] == 'Rolex Submariner'

    def test_financial_health(self, tools):
        result = tools.get_financial_health()
        assert result['health_score']['total_score'] == 65
        assert result['health_score']['status'] == 'Adequate'
        assert result['health_score']['percentile'] == 62
        assert result['wealth_summary']['net_worth'] == 115000
        assert result['wealth_summary']['per_person_net_worth'] is None

    def test_overview_includes_net_worth_and_health(self, tools):
        overview = tools.get_program_overview()
        assert overview['net_worth'] == 115000
        assert overview['health_score'] == 65

    def test_investment_summary(self, tools):
        result = tools.get_investment_projection()
        assert result['years'] == 20
        assert result['initial_balance'] == 50000
        assert result['final_balance'] > result['total_contributed']
        assert len(result['rows']) == 21

    def test_investment_single_year(self, tools):
        result = tools.get_investment_projection(1)
        assert result['year'] == 1
        assert result['age'] == 35
        assert result['contributions'] == 18000

    def test_investment_year_outside_horizon(self, tools):
        assert 'error' in tools.get_investment_projection(25)

    def test_search_with_year(self, tools):
        result = tools.search_projection_data('net worth', 2030)
        assert result['year'] == 2030
        assert result['results']['wealth'] == tools.plan_data.get_year(2030).wealth
        assert 'wealth' in result['fields']

    def test_search_all_years(self, tools):
        result = tools.search_projection_data('FIRE number')
        assert set(result['years'][2027]) == {'fire_number', 'fire_reached'}

    def test_search_no_match(self, tools):
        result = tools.search_projection_data('salary')
        assert 'message' in result


class TestMultiProgramTools:
    """Tests for MultiProgramTools class."""

    @pytest.fixture
    def multi_tools(self, test_base_path):
        return MultiProgramTools(test_base_path, current_year=CURRENT_YEAR)

    def test_discovers_programs(self, multi_tools):
        assert 'testprogram' in multi_tools.programs
        assert multi_tools.default_program == 'testprogram'

    def test_list_programs(self, multi_tools):
        result = multi_tools.list_programs()
        assert result['available_programs'] == ['testprogram']
        assert result['programs_info']['testprogram']['start_year'] == 2026
        assert result['programs_info']['testprogram']['monthly_savings'] == 1500

    def test_unknown_program_raises(self, multi_tools):
        with pytest.raises(ValueError):
            multi_tools.get_projection(program='nonexistent')

    def test_results_name_program(self, multi_tools):
        assert multi_tools.get_scenarios()['program'] == 'testprogram'
        assert multi_tools.get_fire_stats('testprogram')['program'] == 'testprogram'

    def test_missing_input_parameters(self, tmp_path):
        os.symlink(os.path.join(PROJECT_ROOT, 'reference'), str(tmp_path / 'reference'))
        multi = MultiProgramTools(str(tmp_path))
        assert multi.programs == {}
        assert multi.default_program is None

    def test_broken_program_is_skipped(self, test_base_path):
        broken_dir = os.path.join(test_base_path, 'input-parameters', 'broken')
        os.makedirs(broken_dir)
        with open(os.path.join(broken_dir, 'spec.json'), 'w') as f:
            f.write('{"currentAge": 30}')
        try:
            multi = MultiProgramTools(test_base_path, current_year=CURRENT_YEAR)
            assert 'broken' not in multi.programs
            assert 'testprogram' in multi.programs
        finally:
            shutil.rmtree(broken_dir)

    def test_reload_programs(self, two_program_path):
        multi = MultiProgramTools(two_program_path, current_year=CURRENT_YEAR)
        shutil.rmtree(os.path.join(two_program_path, 'input-parameters', 'wealthy'))

        result = multi.reload_programs()

        assert result['status'] == 'success'
        assert result['programs_loaded'] == ['testprogram']
        assert result['changes']['removed'] == ['wealthy']
        assert result['changes']['reloaded'] == ['testprogram']

    def test_explicit_program_required_when_several(self, two_program_path):
        multi = MultiProgramTools(two_program_path, current_year=CURRENT_YEAR)
        with pytest.raises(ValueError, match='Multiple programs'):
            multi.get_program_overview()
        assert multi.get_program_overview('wealthy')['program'] == 'wealthy'

    def test_fire_stats_reached(self, two_program_path):
        multi = MultiProgramTools(two_program_path, current_year=CURRENT_YEAR)
        result = multi.get_fire_stats('wealthy')
        assert result['fire_reached'] is True
        assert result['fireYear'] == 2027
        assert result['yearsToFire'] == 1
        assert result['fireAge'] == 35
        assert result['wealth_at_fire'] >= result['fire_number']

    def test_lifestyle_missing(self, two_program_path):
        multi = MultiProgramTools(two_program_path, current_year=CURRENT_YEAR)
        assert 'error' in multi.get_lifestyle_basket('wealthy')

    def test_financial_health_missing(self, two_program_path):
        spec_path = os.path.join(two_program_path, 'input-parameters', 'wealthy', 'spec.json')
        with open(spec_path, 'r') as f:
            spec = json.load(f)
        del spec['healthScore'], spec['wealth']
        _write_program(two_program_path, 'wealthy', spec)

        multi = MultiProgramTools(two_program_path, current_year=CURRENT_YEAR)
        assert 'error' in multi.get_financial_health('wealthy')
        assert multi.get_financial_health('testprogram')['program'] == 'testprogram'


class TestProgramIndependentTools:
    """Tests for calculators that do not need a program."""

    @pytest.fixture
    def multi_tools(self, test_base_path):
        return MultiProgramTools(test_base_path, current_year=CURRENT_YEAR)

    def test_country_tax(self, multi_tools):
        result = multi_tools.calculate_country_tax(60000, 'DE')
        assert result['country'] == 'Germany'
        assert result['income_tax'] == pytest.approx(6872.88)
        assert 'United Kingdom' in result['available_countries']

    def test_country_tax_unknown(self, multi_tools):
        with pytest.raises(ValueError):
            multi_tools.calculate_country_tax(60000, 'Atlantis')

    def test_german_tax(self, multi_tools):
        result = multi_tools.calculate_german_tax(60000)
        assert result['annual']['income_tax'] == pytest.approx(14680.71, abs=0.01)
        assert result['monthly']['gross_income'] == 5000.0
        assert result['monthly']['pension_insurance'] == 465.0

    def test_estimate_german_income_tax(self, multi_tools):
        result = multi_tools.estimate_german_income_tax(60000)
        assert result['taxable_income'] == 48396
        assert len(result['tax_zones']) == 3
        assert result['quick_income_tax'] == 12225

    def test_future_cost(self, multi_tools):
        result = multi_tools.calculate_future_cost(1000, 0.05, 10)
        assert result['future_cost'] == 1628.89
        assert result['cost_increase'] == 628.89
        assert result['required_monthly_savings'] == 5.24

    def test_future_cost_without_horizon(self, multi_tools):
        result = multi_tools.calculate_future_cost(1000, 0.05, 0)
        assert result['future_cost'] == 1000
        assert result['required_monthly_savings'] is None


class TestComparePrograms:
    """Tests for compare_programs."""

    @pytest.fixture
    def multi_tools(self, two_program_path):
        return MultiProgramTools(two_program_path, current_year=CURRENT_YEAR)

    def test_compare_all_metrics(self, multi_tools):
        result = multi_tools.compare_programs('testprogram', 'wealthy')

        assert set(result['metrics']) == {
            'final_wealth', 'years_to_fire', 'bear_final_wealth',
            'bull_final_wealth', 'final_expenses', 'investment_balance'
        }
        assert result['metrics']['final_wealth']['better'] == 'wealthy'
        assert result['metrics']['years_to_fire']['better'] == 'wealthy'
        # Never reaching FIRE counts as one year past the 40 year horizon
        assert result['metrics']['years_to_fire']['testprogram'] == 41
        assert result['metrics']['final_expenses']['better'] == 'tie'
        assert result['summary']['overall_better'] == 'wealthy'
        assert 'reaches FIRE 40 years sooner' in result['recommendation']

    def test_compare_selected_metrics(self, multi_tools):
        result = multi_tools.compare_programs('testprogram', 'wealthy', ['final_wealth', 'not_a_metric'])
        assert list(result['metrics']) == ['final_wealth']
        assert result['summary']['metrics_compared'] == 1

    def test_compare_invalid_metrics(self, multi_tools):
        result = multi_tools.compare_programs('testprogram', 'wealthy', ['lifetime_income'])
        assert 'error' in result

    def test_compare_unknown_program(self, multi_tools):
        result = multi_tools.compare_programs('testprogram', 'nonexistent')
        assert 'error' in result
        assert 'nonexistent' in result['error']


@pytest.fixture
def future_start_path():
    """Programs starting in later years: one reaches FIRE, one never does."""
    temp_dir = tempfile.mkdtemp()
    os.symlink(os.path.join(PROJECT_ROOT, 'reference'), os.path.join(temp_dir, 'reference'))

    with open(os.path.join(FIXTURES_PATH, 'testprogram', 'spec.json'), 'r') as f:
        spec = json.load(f)

    late = json.loads(json.dumps(spec))
    late['projection']['startYear'] = 2040
    late['projection']['years'] = 5
    _write_program(temp_dir, 'late', late)

    saver = json.loads(json.dumps(spec))
    saver['projection']['startYear'] = 2035
    saver['projection']['currentWealth'] = 2000000
    _write_program(temp_dir, 'saver', saver)

    yield temp_dir
    shutil.rmtree(temp_dir, ignore_errors=True)


def test_compare_years_to_fire_counts_from_current_year(future_start_path):
    multi = MultiProgramTools(future_start_path, current_year=CURRENT_YEAR)
    assert multi.programs['late'].plan_data.fire_stats is None
    assert multi.programs['saver'].plan_data.fire_stats.fire_year == 2036

    result = multi.compare_programs('late', 'saver', ['years_to_fire'])

    metric = result['metrics']['years_to_fire']
    # 2045 is the last projected year of 'late'
    assert metric['late'] == 2045 + 1 - CURRENT_YEAR
    assert metric['saver'] == 10
    assert metric['better'] == 'saver'
