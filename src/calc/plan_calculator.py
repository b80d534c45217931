"""Unified plan calculator.

Builds a complete PlanData object for a program spec by running every
calculator whose section is present:

1. Wealth projection, market scenarios and FIRE stats ('projection')
2. Country and German taxes on the gross income ('tax')
3. Monthly budget ('budget')
4. Financial health score ('healthScore') and net worth ('wealth', 'household')
5. Lifestyle basket ('lifestyleBasket')
6. Investment portfolio ('investments')
"""

import logging
from typing import Optional

from model.PlanData import PlanData
from model.ProjectionData import ProjectionInput
from model.LifestyleData import LifestyleItem
from tax.CountryTaxDetails import CountryTaxDetails
from tax.GermanTaxDetails import GermanTaxDetails
from calc.wealth_projector import project_wealth
from calc.scenario_engine import calculate_scenarios
from calc.fire_analyzer import calculate_fire_stats
from calc.lifestyle_inflation import summarize_basket
from calc.investment_calculator import InvestmentCalculator
from calc.budget_calculator import BudgetCalculator
from calc.health_score import health_score_from_spec
from calc.wealth_summary import wealth_summary
from storage.document_store import DocumentStore


logger = logging.getLogger(__name__)

GERMANY = 'germany'


class PlanCalculator:
    """Calculator that builds complete plan data for a program.

    Tax details are injected so statutory data is loaded once by the caller
    and the calculator can be unit tested with hand-built details.
    """

    def __init__(self, country_tax: CountryTaxDetails, german_tax: GermanTaxDetails):
        self.country_tax = country_tax
        self.german_tax = german_tax
        self.budget_calculator = BudgetCalculator(country_tax)

    def calculate(self, spec: dict, current_year: Optional[int] = None) -> PlanData:
        """Calculate all plan data for a program spec.

        Args:
            spec: The program specification dictionary
            current_year: Calendar year treated as "now" for FIRE stats and
                          lifestyle targets; defaults to the wall-clock year

        Returns:
            PlanData with every section the spec provides
        """
        if 'projection' not in spec:
            raise ValueError("spec must contain a 'projection' section")

        current_age = spec.get('currentAge', 0)
        projection_input = ProjectionInput.from_dict(spec['projection'])

        plan = PlanData(current_age=current_age, projection_input=projection_input)

        plan.projection = project_wealth(projection_input)
        plan.scenarios = calculate_scenarios(projection_input)
        plan.fire_stats = calculate_fire_stats(plan.projection, current_age, current_year)
        logger.debug("Projected %d years, FIRE stats: %s", len(plan.projection), plan.fire_stats)

        tax_spec = spec.get('tax', {})
        country = tax_spec.get('country', 'Germany')
        if tax_spec:
            gross_income = tax_spec.get('grossIncome', 0)
            married = tax_spec.get('married', False)
            plan.country_tax = self.country_tax.taxBurden(gross_income, country, married)
            if self.country_tax.get_profile(country).name.lower() == GERMANY:
                plan.german_tax = self.german_tax.calculate(
                    gross_income,
                    married=married,
                    church_tax=tax_spec.get('churchTax', False),
                    state=tax_spec.get('state', 'Bayern'),
                    children=tax_spec.get('children', 0)
                )

        if 'budget' in spec:
            plan.budget = self.budget_calculator.calculate(spec, spec['budget'].get('country', country))

        if 'healthScore' in spec:
            plan.health_score = health_score_from_spec(spec, plan.budget)

        if 'wealth' in spec:
            plan.wealth_summary = wealth_summary(spec['wealth'], spec.get('household', {}))

        basket = spec.get('lifestyleBasket')
        if basket:
            items = [LifestyleItem.from_dict(item) for item in basket]
            plan.lifestyle = summarize_basket(items, current_year)

        if 'investments' in spec:
            plan.investments = InvestmentCalculator(spec, current_age).get_all_balances()

        return plan

    def save(self, store: DocumentStore, user_id: str, plan: PlanData) -> None:
        """Persist a plan's results for a user through the given store."""
        logger.info("Saving plan results for user '%s'", user_id)
        store.save_projection(user_id, plan.to_dict())
        if plan.scenarios is not None:
            store.set(user_id, 'scenarios', 'latest', plan.scenarios.to_dict())
        if plan.lifestyle is not None:
            store.set(user_id, 'lifestyleBaskets', 'latest', plan.lifestyle.to_dict())
