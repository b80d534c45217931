"""Renderer classes for displaying FIRE planning results.

Each renderer takes the unified PlanData structure, extracts the section it
needs and prints it as a fixed-width text report.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Tuple

from model.PlanData import PlanData
from model.ProjectionData import ProjectionRow
from model.field_metadata import get_short_name, wrap_header


def format_multiline_headers(columns: List[tuple], year_width: int = 6,
                             first_label: str = 'Year') -> Tuple[List[str], str]:
    """Format column headers with multi-line wrapping support.

    Args:
        columns: List of (header_text, width) tuples for each column
        year_width: Width of the leading label column (default 6)
        first_label: Header of the leading label column

    Returns:
        Tuple of (list of header lines, separator line)
    """
    wrapped_headers = [(wrap_header(header, width), width) for header, width in columns]
    max_lines = max(len(lines) for lines, _ in wrapped_headers) if wrapped_headers else 1

    # Pad at the top so the last line of every header lines up
    for lines, _ in wrapped_headers:
        while len(lines) < max_lines:
            lines.insert(0, "")

    header_lines = []
    for line_idx in range(max_lines):
        label = first_label if line_idx == max_lines - 1 else ''
        header_line = f"  {label:<{year_width}}"
        for lines, width in wrapped_headers:
            header_line += f" {lines[line_idx]:>{width}}"
        header_lines.append(header_line)

    sep_line = f"  {'-' * year_width}"
    for _, width in wrapped_headers:
        sep_line += f" {'-' * width}"

    return header_lines, sep_line


def _banner(title: str, width: int) -> None:
    print()
    print("=" * width)
    print(f"{title:^{width}}")
    print("=" * width)


def _section(title: str, width: int = 60) -> None:
    print()
    print("-" * width)
    print(title)
    print("-" * width)


class BaseRenderer(ABC):
    """Abstract base class for all renderers."""

    @abstractmethod
    def render(self, data: PlanData) -> None:
        """Render the data to output.

        Args:
            data: The PlanData containing all calculation results
        """
        pass


class ProjectionRenderer(BaseRenderer):
    """Renderer for the year-by-year wealth projection."""

    def __init__(self, start_year: Optional[int] = None, end_year: Optional[int] = None):
        self.start_year = start_year
        self.end_year = end_year

    def _rows(self, data: PlanData) -> List[ProjectionRow]:
        start = self.start_year if self.start_year is not None else data.first_year
        end = self.end_year if self.end_year is not None else data.last_year
        return [row for row in data.projection if start <= row.year <= end]

    def render(self, data: PlanData) -> None:
        _banner("WEALTH PROJECTION", 80)
        if not data.projection:
            print("  No projection years to display")
            return
        print()

        columns = [
            (get_short_name("wealth"), 18),
            (get_short_name("expenses"), 14),
            (get_short_name("fire_number"), 18),
            (get_short_name("fire_reached"), 8),
        ]
        header_lines, sep_line = format_multiline_headers(columns, year_width=8)
        for line in header_lines:
            print(line)
        print(sep_line)

        for row in self._rows(data):
            reached = "yes" if row.fire_reached else "-"
            print(f"  {row.year:<8} €{row.wealth:>17,} €{row.expenses:>13,} €{row.fire_number:>17,} {reached:>8}")
        print()


class ScenariosRenderer(BaseRenderer):
    """Renderer comparing bear, base and bull projections side by side."""

    def render(self, data: PlanData) -> None:
        _banner("MARKET SCENARIOS", 80)
        if data.scenarios is None or not data.scenarios.base:
            print("  No scenario data to display")
            return
        print()

        columns = [("Bear Wealth", 18), ("Base Wealth", 18), ("Bull Wealth", 18)]
        header_lines, sep_line = format_multiline_headers(columns, year_width=8)
        for line in header_lines:
            print(line)
        print(sep_line)

        runs = data.scenarios
        for bear, base, bull in zip(runs.bear, runs.base, runs.bull):
            print(f"  {base.year:<8} €{bear.wealth:>17,} €{base.wealth:>17,} €{bull.wealth:>17,}")

        print()
        print("-" * 80)
        for name, wealth in runs.final_wealth().items():
            print(f"  {'Final ' + name.capitalize() + ' Wealth:':<40} €{wealth:>18,}")
        print()


class FireRenderer(BaseRenderer):
    """Renderer for the FIRE summary."""

    def render(self, data: PlanData) -> None:
        _banner("FIRE SUMMARY", 60)
        stats = data.fire_stats
        if stats is None:
            print("  FIRE is not reached within the projection horizon")
            if data.projection:
                last = data.projection[-1]
                print(f"  {'Final Wealth:':<40} €{last.wealth:>14,}")
                print(f"  {'Final FIRE Number:':<40} €{last.fire_number:>14,}")
            print()
            return

        row = data.get_year(stats.fire_year)
        print(f"  {'FIRE Year:':<40} {stats.fire_year:>15}")
        print(f"  {'FIRE Age:':<40} {stats.fire_age:>15}")
        print(f"  {'Years to FIRE:':<40} {stats.years_to_fire:>15}")
        if row is not None:
            print(f"  {'Wealth at FIRE:':<40} €{row.wealth:>14,}")
            print(f"  {'FIRE Number:':<40} €{row.fire_number:>14,}")
        print()


class GermanTaxRenderer(BaseRenderer):
    """Renderer for the detailed German tax breakdown."""

    def render(self, data: PlanData) -> None:
        result = data.german_tax
        if result is None:
            print("No German tax data available (tax.country is not Germany)")
            return

        _banner("GERMAN TAX SUMMARY", 60)

        _section("INCOME")
        print(f"  {'Gross Income:':<40} €{result.gross_income:>14,.2f}")
        print(f"  {'Tax-Free Allowance:':<40} €{result.tax_free_allowance:>14,.2f}")
        print(f"  {'Taxable Income:':<40} €{result.taxable_income:>14,.2f}")

        _section("TAXES")
        print(f"  {'Income Tax:':<40} €{result.income_tax:>14,.2f}")
        print(f"  {'Solidarity Surcharge:':<40} €{result.solidarity_tax:>14,.2f}")
        if result.church_tax > 0:
            print(f"  {'Church Tax:':<40} €{result.church_tax:>14,.2f}")
        print(f"  {'Total Tax:':<40} €{result.total_tax:>14,.2f}")

        _section("SOCIAL INSURANCE")
        print(f"  {'Pension Insurance:':<40} €{result.pension_insurance:>14,.2f}")
        print(f"  {'Health Insurance:':<40} €{result.health_insurance:>14,.2f}")
        print(f"  {'Unemployment Insurance:':<40} €{result.unemployment_insurance:>14,.2f}")
        print(f"  {'Care Insurance:':<40} €{result.care_insurance:>14,.2f}")
        print(f"  {'Total Social Contributions:':<40} €{result.total_social_contributions:>14,.2f}")

        _section("NET INCOME")
        print(f"  {'Total Deductions:':<40} €{result.total_deductions:>14,.2f}")
        print(f"  {'Net Income:':<40} €{result.net_income:>14,.2f}")
        print(f"  {'Net Income (Monthly):':<40} €{result.net_income / 12:>14,.2f}")
        if result.kindergeld > 0:
            print(f"  {'Kindergeld:':<40} €{result.kindergeld:>14,.2f}")
            print(f"  {'Net Income with Benefits:':<40} €{result.net_income_with_benefits:>14,.2f}")
        print(f"  {'Effective Rate:':<40} {result.effective_tax_rate:>14.2f}%")
        print(f"  {'Marginal Rate:':<40} {result.marginal_tax_rate:>14.2f}%")
        print("=" * 60)
        print()


class CountryTaxRenderer(BaseRenderer):
    """Renderer for the country bracket tax burden."""

    def render(self, data: PlanData) -> None:
        burden = data.country_tax
        if burden is None:
            print("No tax data available (spec has no 'tax' section)")
            return

        _banner(f"TAX BURDEN - {burden['country'].upper()}", 60)
        print(f"  {'Gross Income:':<40} {burden['gross_income']:>15,.2f}")
        print(f"  {'Income Tax:':<40} {burden['income_tax']:>15,.2f}")
        print(f"  {'Social Contributions:':<40} {burden['social_contributions']:>15,.2f}")
        print(f"  {'Total Tax:':<40} {burden['total_tax']:>15,.2f}")
        print(f"  {'Take Home:':<40} {burden['take_home']:>15,.2f}")
        print(f"  {'Effective Rate:':<40} {burden['effective_tax_rate']:>15.2%}")
        print(f"  {'Marginal Rate:':<40} {burden['marginal_rate']:>15.2%}")

        budget = data.budget
        if budget is not None:
            _section("MONTHLY BUDGET")
            print(f"  {'Monthly Take Home:':<40} {budget['monthly_take_home']:>15,.2f}")
            for group, amount in budget['expense_groups'].items():
                print(f"  {group + ':':<40} {amount:>15,.2f}")
            print(f"  {'Monthly Savings:':<40} {budget['monthly_savings']:>15,.2f}")
            print(f"  {'Savings Rate:':<40} {budget['savings_rate']:>14.1f}%")
        print()


class LifestyleBasketRenderer(BaseRenderer):
    """Renderer for the lifestyle basket and its truth gap."""

    def render(self, data: PlanData) -> None:
        summary = data.lifestyle
        if summary is None:
            print("No lifestyle basket in spec")
            return

        _banner("LIFESTYLE BASKET", 100)
        print()
        columns = [("Category", 14), ("Inflation", 10), ("Target", 8), ("Current Cost", 14),
                   ("Future Cost", 16), ("Monthly Savings", 16)]
        header_lines, sep_line = format_multiline_headers(columns, year_width=30, first_label='Item')
        for line in header_lines:
            print(line)
        print(sep_line)

        for s in summary.items:
            item = s.item
            savings = f"€{s.required_monthly_savings:>15,.2f}" if s.required_monthly_savings is not None else f"{'-':>16}"
            print(f"  {item.name[:30]:<30} {item.category[:14]:>14} {item.inflation_rate:>10.1%} {item.target_year:>8} "
                  f"€{item.current_cost:>13,.0f} €{s.future_cost:>15,.0f} {savings}")

        _section("TRUTH SCORE", 100)
        print(f"  {'Total Current Cost:':<40} €{summary.total_current_cost:>14,.0f}")
        print(f"  {'Total Future Cost:':<40} €{summary.total_future_cost:>14,.0f}")
        print(f"  {'Weighted Inflation:':<40} {summary.weighted_inflation:>15.1%}")
        print(f"  {'Expected at Generic CPI:':<40} €{summary.expected_cost_at_generic_inflation:>14,.0f}")
        print(f"  {'Truth Gap:':<40} €{summary.truth_gap:>14,.0f}")
        print(f"  {'Gap Percentage:':<40} {summary.gap_percentage:>14.1f}%")
        print(f"  {'Severity:':<40} {summary.severity:>15}")
        print()


class InvestmentsRenderer(BaseRenderer):
    """Renderer for the investment portfolio projection."""

    def render(self, data: PlanData) -> None:
        _banner("INVESTMENT PROJECTION", 110)
        if not data.investments:
            print("  No investment data in spec")
            return
        print()

        fields = ["age", "contributions", "returns", "balance", "total_contributed", "total_gains"]
        columns = [(get_short_name(f), 6 if f == "age" else 16) for f in fields]
        header_lines, sep_line = format_multiline_headers(columns, year_width=6)
        for line in header_lines:
            print(line)
        print(sep_line)

        for year in sorted(data.investments):
            r = data.investments[year]
            print(f"  {year:<6} {r['age']:>6} €{r['contributions']:>15,.2f} €{r['returns']:>15,.2f} "
                  f"€{r['balance']:>15,.2f} €{r['total_contributed']:>15,.2f} €{r['total_gains']:>15,.2f}")
        print()


RENDERER_REGISTRY = {
    'Projection': ProjectionRenderer,
    'Scenarios': ScenariosRenderer,
    'Fire': FireRenderer,
    'GermanTax': GermanTaxRenderer,
    'CountryTax': CountryTaxRenderer,
    'LifestyleBasket': LifestyleBasketRenderer,
    'Investments': InvestmentsRenderer,
}
