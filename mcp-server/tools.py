"""FIRE Planner Tools for MCP Server.

This module provides the tool implementations that wrap the FIRE planning
calculators and expose their data through MCP.
"""

import os
import sys
import json
import datetime
import logging
from typing import Dict, List, Optional

# Add src to path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from tax.CountryTaxDetails import CountryTaxDetails
from tax.GermanTaxDetails import GermanTaxDetails, monthly_breakdown
from tax.GermanTaxEstimator import estimate_german_tax, german_income_tax
from calc.plan_calculator import PlanCalculator
from calc.lifestyle_inflation import future_cost, required_monthly_savings
from model.PlanData import PlanData
from model.field_metadata import get_description


logger = logging.getLogger(__name__)


class FirePlannerTools:
    """Tools that wrap the FIRE planning calculators for one program."""

    def __init__(self, base_path: str, program_name: str, current_year: Optional[int] = None):
        """Initialize with paths and calculate the program's plan.

        Args:
            base_path: Path to the fire-planner root directory
            program_name: Name of the program folder in input-parameters
            current_year: Calendar year treated as "now" (defaults to today)
        """
        self.base_path = base_path
        self.program_name = program_name
        self.current_year = current_year
        self.spec = self._load_spec()
        self.country_tax = CountryTaxDetails(os.path.join(base_path, 'reference'))
        self.german_tax = GermanTaxDetails.load(os.path.join(base_path, 'reference', 'german-tax-details.json'))
        self.plan_calculator = PlanCalculator(self.country_tax, self.german_tax)
        self.plan_data: PlanData = self.plan_calculator.calculate(self.spec, current_year)

    def _load_spec(self) -> dict:
        spec_path = os.path.join(self.base_path, 'input-parameters', self.program_name, 'spec.json')
        with open(spec_path, 'r') as f:
            return json.load(f)

    def get_program_overview(self) -> dict:
        """Get an overview of the plan inputs and headline results."""
        plan = self.plan_data
        projection = plan.projection_input
        tax = self.spec.get('tax', {})
        return {
            "program_name": self.program_name,
            "current_age": plan.current_age,
            "projection_horizon": {
                "start_year": projection.start_year,
                "first_year": plan.first_year,
                "last_year": plan.last_year,
                "years": projection.years
            },
            "assumptions": {
                "current_wealth": projection.current_wealth,
                "monthly_savings": projection.monthly_savings,
                "annual_return": projection.annual_return,
                "inflation_rate": projection.inflation_rate,
                "real_return": round(projection.annual_return - projection.inflation_rate, 6),
                "base_annual_expenses": projection.base_annual_expenses,
                "expense_growth_rate": projection.expense_growth_rate
            },
            "tax_profile": {
                "country": tax.get('country'),
                "gross_income": tax.get('grossIncome', 0),
                "married": tax.get('married', False)
            },
            "final_wealth": plan.final_wealth(),
            "fire_stats": plan.fire_stats.to_dict() if plan.fire_stats else None,
            "net_worth": plan.wealth_summary['net_worth'] if plan.wealth_summary else None,
            "health_score": plan.health_score['total_score'] if plan.health_score else None,
            "lifestyle_items": plan.lifestyle.item_count if plan.lifestyle else 0
        }

    def get_projection(self, year: Optional[int] = None) -> dict:
        """Get the wealth projection for one year or all years."""
        if year is not None:
            row = self.plan_data.get_year(year)
            if row is None:
                return {"error": f"Year {year} is not in the projection horizon"}
            return {"year": year, "row": row.to_dict()}
        return {
            "rows": [row.to_dict() for row in self.plan_data.projection],
            "final_wealth": self.plan_data.final_wealth()
        }

    def get_scenarios(self) -> dict:
        scenarios = self.plan_data.scenarios
        return {
            "final_wealth": scenarios.final_wealth(),
            "scenarios": scenarios.to_dict()
        }

    def get_fire_stats(self) -> dict:
        """Get FIRE year, age and years to FIRE, or a note when FIRE is not reached."""
        stats = self.plan_data.fire_stats
        if stats is None:
            last = self.plan_data.projection[-1] if self.plan_data.projection else None
            return {
                "fire_reached": False,
                "message": "FIRE is not reached within the projection horizon",
                "final_wealth": last.wealth if last else None,
                "final_fire_number": last.fire_number if last else None
            }
        row = self.plan_data.get_year(stats.fire_year)
        return {
            "fire_reached": True,
            **stats.to_dict(),
            "wealth_at_fire": row.wealth,
            "fire_number": row.fire_number
        }

    def get_lifestyle_basket(self) -> dict:
        if self.plan_data.lifestyle is None:
            return {"error": "Program has no lifestyle basket"}
        return self.plan_data.lifestyle.to_dict()

    def get_financial_health(self) -> dict:
        """Get the financial health score and household net worth."""
        plan = self.plan_data
        if plan.health_score is None and plan.wealth_summary is None:
            return {"error": "Program has no healthScore or wealth section"}
        return {
            "health_score": plan.health_score,
            "wealth_summary": plan.wealth_summary
        }

    def get_investment_projection(self, year: Optional[int] = None) -> dict:
        """Get the investment portfolio row for a year offset, or a summary of all years."""
        investments = self.plan_data.investments
        if not investments:
            return {"error": "Program has no investments section"}
        if year is not None:
            if year not in investments:
                return {"error": f"Year {year} is not in the investment horizon (0-{max(investments)})"}
            return {k: round(v, 2) if isinstance(v, float) else v for k, v in investments[year].items()}
        final = investments[max(investments)]
        return {
            "years": len(investments) - 1,
            "initial_balance": round(investments[0]['balance'], 2),
            "final_balance": round(final['balance'], 2),
            "total_contributed": round(final['total_contributed'], 2),
            "total_gains": round(final['total_gains'], 2),
            "rows": [investments[y] for y in sorted(investments)]
        }

    def search_projection_data(self, query: str, year: Optional[int] = None) -> dict:
        """Search projection fields matching a query."""
        query_lower = query.lower()

        # Map common terms to ProjectionRow field names
        term_mapping = {
            "wealth": ["wealth"],
            "net worth": ["wealth"],
            "expense": ["expenses"],
            "spending": ["expenses"],
            "fire": ["fire_number", "fire_reached"],
            "target": ["fire_number"],
            "retire": ["fire_number", "fire_reached"],
        }

        matched_keys = []
        for term, keys in term_mapping.items():
            if term in query_lower:
                matched_keys.extend(k for k in keys if k not in matched_keys)

        if not matched_keys:
            return {
                "query": query,
                "message": "No matching projection metrics found. Try terms like: wealth, net worth, expenses, FIRE number, retire."
            }

        fields = {key: get_description(key) for key in matched_keys}
        if year is not None:
            row = self.plan_data.get_year(year)
            if row is None:
                return {"error": f"Year {year} is not in the projection horizon"}
            return {
                "year": year,
                "query": query,
                "fields": fields,
                "results": {key: getattr(row, key) for key in matched_keys}
            }

        return {
            "query": query,
            "fields": fields,
            "years": {
                row.year: {key: getattr(row, key) for key in matched_keys}
                for row in self.plan_data.projection
            }
        }


class MultiProgramTools:
    """Manager for multiple FIRE planning programs.

    Discovers all available programs and caches their calculations,
    allowing queries to specify which program to use. Calculators that do
    not depend on a program (taxes, future cost) are served directly.
    """

    def __init__(self, base_path: str, default_program: Optional[str] = None,
                 current_year: Optional[int] = None):
        """Initialize and discover all available programs.

        Args:
            base_path: Path to the fire-planner root directory
            default_program: Default program to use when none specified
            current_year: Calendar year treated as "now" (defaults to today)
        """
        self.base_path = base_path
        self.current_year = current_year
        self.programs: Dict[str, FirePlannerTools] = {}
        self.default_program = default_program
        self.country_tax = CountryTaxDetails(os.path.join(base_path, 'reference'))
        self.german_tax = GermanTaxDetails.load(os.path.join(base_path, 'reference', 'german-tax-details.json'))
        self._discover_programs()

    def _discover_programs(self):
        input_params_path = os.path.join(self.base_path, 'input-parameters')

        if not os.path.exists(input_params_path):
            return

        for name in sorted(os.listdir(input_params_path)):
            program_dir = os.path.join(input_params_path, name)
            spec_path = os.path.join(program_dir, 'spec.json')

            if os.path.isdir(program_dir) and os.path.exists(spec_path):
                try:
                    self.programs[name] = FirePlannerTools(self.base_path, name, self.current_year)
                except (OSError, ValueError, KeyError) as e:
                    # One broken program must not take the server down
                    logger.warning("Failed to load program '%s': %s", name, e)

        if self.default_program is None and self.programs:
            self.default_program = list(self.programs.keys())[0]

    def _get_program(self, program: Optional[str] = None, require_explicit: bool = False) -> FirePlannerTools:
        """Get the specified program or default.

        Args:
            program: Program name to use, or None for default
            require_explicit: If True, raise error when program not specified and multiple exist
        """
        if program is None and len(self.programs) > 1 and require_explicit:
            available = list(self.programs.keys())
            raise ValueError(
                f"Multiple programs available: {available}. Please specify which program to query."
            )

        program_name = program or self.default_program

        if program_name not in self.programs:
            available = list(self.programs.keys())
            raise ValueError(
                f"Program '{program_name}' not found. Available programs: {available}"
            )

        return self.programs[program_name]

    def _with_program(self, result: dict, program: Optional[str]) -> dict:
        result["program"] = program or self.default_program
        return result

    def list_programs(self) -> dict:
        programs_info = {}
        for name, tools in self.programs.items():
            projection = tools.plan_data.projection_input
            programs_info[name] = {
                "start_year": projection.start_year,
                "years": projection.years,
                "current_wealth": projection.current_wealth,
                "monthly_savings": projection.monthly_savings
            }

        return {
            "available_programs": list(self.programs.keys()),
            "default_program": self.default_program,
            "programs_info": programs_info
        }

    def reload_programs(self) -> dict:
        """Reload all programs from disk, refreshing the cache."""
        old_programs = set(self.programs.keys())

        self.programs.clear()
        self.default_program = None
        self._discover_programs()

        new_programs = set(self.programs.keys())
        logger.info("Reloaded %d programs", len(new_programs))

        return {
            "status": "success",
            "message": f"Reloaded {len(self.programs)} programs",
            "programs_loaded": list(self.programs.keys()),
            "default_program": self.default_program,
            "changes": {
                "added": sorted(new_programs - old_programs),
                "removed": sorted(old_programs - new_programs),
                "reloaded": sorted(old_programs & new_programs)
            }
        }

    def get_program_overview(self, program: Optional[str] = None) -> dict:
        return self._with_program(self._get_program(program, require_explicit=True).get_program_overview(), program)

    def get_projection(self, year: Optional[int] = None, program: Optional[str] = None) -> dict:
        return self._with_program(self._get_program(program, require_explicit=True).get_projection(year), program)

    def get_scenarios(self, program: Optional[str] = None) -> dict:
        return self._with_program(self._get_program(program, require_explicit=True).get_scenarios(), program)

    def get_fire_stats(self, program: Optional[str] = None) -> dict:
        return self._with_program(self._get_program(program, require_explicit=True).get_fire_stats(), program)

    def get_lifestyle_basket(self, program: Optional[str] = None) -> dict:
        return self._with_program(self._get_program(program, require_explicit=True).get_lifestyle_basket(), program)

    def get_financial_health(self, program: Optional[str] = None) -> dict:
        return self._with_program(self._get_program(program, require_explicit=True).get_financial_health(), program)

    def get_investment_projection(self, year: Optional[int] = None, program: Optional[str] = None) -> dict:
        return self._with_program(
            self._get_program(program, require_explicit=True).get_investment_projection(year), program)

    def search_projection_data(self, query: str, year: Optional[int] = None, program: Optional[str] = None) -> dict:
        return self._with_program(
            self._get_program(program, require_explicit=True).search_projection_data(query, year), program)

    def calculate_country_tax(self, gross_income: float, country: str, married: bool = False) -> dict:
        """Bracket income tax and social contributions for a country profile."""
        result = self.country_tax.taxBurden(gross_income, country, married)
        result["available_countries"] = self.country_tax.list_profiles()
        return result

    def calculate_german_tax(self, gross_income: float, married: bool = False, church_tax: bool = False,
                             state: str = 'Bayern', children: int = 0) -> dict:
        """Detailed German tax breakdown, annual and monthly."""
        result = self.german_tax.calculate(gross_income, married, church_tax, state, children)
        return {
            "annual": result.to_dict(),
            "monthly": monthly_breakdown(result)
        }

    def estimate_german_income_tax(self, gross_income: float, married: bool = False, children: int = 0,
                                   church_tax: bool = False, age: int = 30) -> dict:
        """Breakdown estimate plus the one-line quick estimate of income tax with surcharge."""
        result = estimate_german_tax(gross_income, married, children, church_tax, age).to_dict()
        result["quick_income_tax"] = german_income_tax(gross_income, married)
        return result

    def calculate_future_cost(self, current_cost: float, inflation_rate: float, years: int) -> dict:
        """Future cost of an item and the monthly savings to cover its increase."""
        cost = future_cost(current_cost, inflation_rate, years)
        return {
            "current_cost": current_cost,
            "inflation_rate": inflation_rate,
            "years": years,
            "future_cost": round(cost, 2),
            "cost_increase": round(cost - current_cost, 2),
            "required_monthly_savings": round(required_monthly_savings(current_cost, cost, years), 2) if years > 0 else None
        }

    def compare_programs(self, program1: str, program2: str, metrics: Optional[List[str]] = None) -> dict:
        """Compare two programs and analyze which reaches FIRE sooner and richer.

        Args:
            program1: First program name to compare
            program2: Second program name to compare
            metrics: Optional list of metrics to focus on. Options: 'final_wealth',
                     'years_to_fire', 'bear_final_wealth', 'bull_final_wealth',
                     'final_expenses', 'investment_balance'
        """
        if program1 not in self.programs:
            return {"error": f"Program '{program1}' not found. Available: {list(self.programs.keys())}"}
        if program2 not in self.programs:
            return {"error": f"Program '{program2}' not found. Available: {list(self.programs.keys())}"}

        plan1 = self.programs[program1].plan_data
        plan2 = self.programs[program2].plan_data

        def final_expenses(plan: PlanData) -> float:
            return plan.projection[-1].expenses if plan.projection else 0

        current_year = self.current_year or datetime.date.today().year

        def years_to_fire(plan: PlanData) -> float:
            # A plan that never reaches FIRE counts as one year past its last projected year
            if plan.fire_stats is None:
                last_year = plan.last_year if plan.last_year is not None else plan.projection_input.start_year
                return last_year + 1 - current_year
            return plan.fire_stats.years_to_fire

        def investment_balance(plan: PlanData) -> float:
            return plan.investments[max(plan.investments)]['balance'] if plan.investments else 0

        def compare_metric(val1: float, val2: float, higher_is_better: bool = True) -> dict:
            diff = val2 - val1
            if val1 != 0:
                pct_diff = (diff / abs(val1)) * 100
            else:
                pct_diff = 100 if val2 > 0 else (-100 if val2 < 0 else 0)

            if higher_is_better:
                winner = program1 if val1 > val2 else (program2 if val2 > val1 else "tie")
            else:
                winner = program1 if val1 < val2 else (program2 if val2 < val1 else "tie")

            return {
                program1: round(val1, 2),
                program2: round(val2, 2),
                "difference": round(diff, 2),
                "percent_difference": round(pct_diff, 1),
                "better": winner,
                "higher_is_better": higher_is_better
            }

        all_metrics = {
            "final_wealth": ("Final Projected Wealth", plan1.final_wealth() or 0, plan2.final_wealth() or 0, True),
            "years_to_fire": ("Years to FIRE", years_to_fire(plan1), years_to_fire(plan2), False),
            "bear_final_wealth": ("Bear Scenario Final Wealth",
                                  plan1.scenarios.final_wealth()['bear'] or 0,
                                  plan2.scenarios.final_wealth()['bear'] or 0, True),
            "bull_final_wealth": ("Bull Scenario Final Wealth",
                                  plan1.scenarios.final_wealth()['bull'] or 0,
                                  plan2.scenarios.final_wealth()['bull'] or 0, True),
            "final_expenses": ("Final Annual Expenses", final_expenses(plan1), final_expenses(plan2), False),
            "investment_balance": ("Final Investment Balance", investment_balance(plan1), investment_balance(plan2), True),
        }

        if metrics:
            metrics_to_compare = {k: v for k, v in all_metrics.items() if k in metrics}
            if not metrics_to_compare:
                return {
                    "error": f"No valid metrics specified. Available metrics: {list(all_metrics.keys())}"
                }
        else:
            metrics_to_compare = all_metrics

        comparison = {"metrics": {}}
        wins = {program1: 0, program2: 0, "tie": 0}
        for key, (description, val1, val2, higher_is_better) in metrics_to_compare.items():
            result = compare_metric(val1, val2, higher_is_better)
            comparison["metrics"][key] = {"description": description, **result}
            wins[result["better"]] += 1

        if wins[program1] > wins[program2]:
            overall_winner = program1
        elif wins[program2] > wins[program1]:
            overall_winner = program2
        else:
            overall_winner = "tie"

        comparison["summary"] = {
            "metrics_compared": len(metrics_to_compare),
            "wins": {
                program1: wins[program1],
                program2: wins[program2],
                "tied": wins["tie"]
            },
            "overall_better": overall_winner
        }

        if overall_winner == "tie":
            recommendation = f"Both programs are roughly equivalent, each winning {wins[program1]} metrics."
        else:
            loser = program2 if overall_winner == program1 else program1
            recommendation = (f"'{overall_winner}' appears better overall, winning {wins[overall_winner]} of "
                              f"{len(metrics_to_compare)} metrics compared to {wins[loser]} for '{loser}'.")
            fire_metric = comparison["metrics"].get("years_to_fire")
            if fire_metric and fire_metric["better"] != "tie":
                recommendation += (f" '{fire_metric['better']}' reaches FIRE "
                                   f"{abs(fire_metric['difference']):.0f} years sooner.")

        comparison["recommendation"] = recommendation
        return comparison
