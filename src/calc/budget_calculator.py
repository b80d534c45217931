from typing import Dict

from tax.CountryTaxDetails import CountryTaxDetails, compute_tax, social_contributions


EXPENSE_GROUPS = ('responsible', 'irresponsible', 'bonusSpending')


class BudgetCalculator:
    """Monthly budget: country take-home pay against grouped expenses.

    Pass a hydrated `CountryTaxDetails` into the constructor so file I/O stays
    in the caller and the calculation is easy to unit test.
    """

    def __init__(self, country_tax: CountryTaxDetails):
        self.country_tax = country_tax

    def calculate(self, spec: dict, country: str) -> Dict:
        """Calculate the budget for the spec's 'budget' section.

        Args:
            spec: The program specification
            country: Name or code of the country tax profile to use

        Returns:
            Dictionary with income, taxes, take-home, expense groups, savings
            and savings rate (percent of monthly take-home)
        """
        budget = spec.get('budget', {})
        profile = self.country_tax.get_profile(country)

        income = budget.get('income', {})
        total_pre_tax = sum(income.values())

        income_tax = compute_tax(total_pre_tax, profile)
        social = social_contributions(total_pre_tax, profile)
        total_tax = income_tax + social
        annual_take_home = total_pre_tax - total_tax
        monthly_take_home = annual_take_home / 12

        monthly_expenses = budget.get('monthlyExpenses', {})
        groups = {group: sum(monthly_expenses.get(group, {}).values()) for group in EXPENSE_GROUPS}
        total_monthly_expenses = sum(groups.values())

        monthly_savings = monthly_take_home - total_monthly_expenses
        savings_rate = (monthly_savings / monthly_take_home) * 100 if monthly_take_home else 0.0

        return {
            'country': profile.name,
            'total_pre_tax_income': total_pre_tax,
            'income_tax': income_tax,
            'social_security_tax': social,
            'total_tax': total_tax,
            'effective_tax_rate': (total_tax / total_pre_tax) * 100 if total_pre_tax else 0.0,
            'annual_take_home': annual_take_home,
            'monthly_take_home': monthly_take_home,
            'expense_groups': groups,
            'total_monthly_expenses': total_monthly_expenses,
            'monthly_savings': monthly_savings,
            'annual_savings': monthly_savings * 12,
            'savings_rate': savings_rate,
            'total_assets': sum(budget.get('assets', {}).values())
        }
