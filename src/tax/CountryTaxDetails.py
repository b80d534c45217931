import json
import os
from typing import Dict, List, Optional

from model.TaxResult import TaxBracket, CountryTaxProfile


REFERENCE_DIR = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', '..', 'reference'))


def _parse_brackets(raw: List[dict]) -> tuple:
	brackets = []
	for b in raw:
		rate = b["rate"]
		if rate > 1:
			rate = rate / 100.0
		upper = b.get("max")
		brackets.append(TaxBracket(
			min=b["min"],
			max=float('inf') if upper is None else upper,
			rate=rate
		))
	return tuple(brackets)


def compute_tax(gross_income: float, profile: CountryTaxProfile, married: bool = False) -> float:
	"""
	Progressive bracket tax for gross_income under the given profile.

	Each bracket taxes min(max(0, income - min), max - min) at its rate, and the
	walk stops at the first bracket whose upper edge is at or above the income,
	so an income exactly on an edge is taxed entirely by the lower bracket.
	"""
	tax = 0.0
	remaining_income = gross_income
	for bracket in profile.brackets_for(married):
		taxable_in_bracket = min(
			max(0, remaining_income - bracket.min),
			bracket.max - bracket.min
		)
		tax += taxable_in_bracket * bracket.rate
		if remaining_income <= bracket.max:
			break
	return tax


def social_contributions(gross_income: float, profile: CountryTaxProfile) -> float:
	"""
	Employee social contributions for the profile.

	Budget profiles carry a single flat rate on gross income. Rule-set profiles
	cap the social security rate at the wage base and add the health/medicare
	rate, plus the additional rate above its threshold when one is defined.
	"""
	if profile.wage_base is None:
		return gross_income * profile.social_security_rate
	social_security = min(gross_income, profile.wage_base) * profile.social_security_rate
	health = gross_income * profile.health_rate
	if profile.health_additional_threshold is not None:
		if gross_income > profile.health_additional_threshold:
			health += (gross_income - profile.health_additional_threshold) * profile.health_additional_rate
	else:
		health += gross_income * profile.health_additional_rate
	return social_security + health


def marginal_rate(gross_income: float, profile: CountryTaxProfile, married: bool = False) -> float:
	"""Rate of the bracket that taxes the last unit of gross_income."""
	brackets = profile.brackets_for(married)
	for b in brackets:
		if gross_income <= b.max:
			return b.rate
	return brackets[-1].rate


class CountryTaxDetails:
	def __init__(self, reference_dir: Optional[str] = None):
		"""
		reference_dir: directory holding country-tax-profiles.json and
		tax-rules-<year>.json (defaults to the repository reference/ folder)
		"""
		self.reference_dir = reference_dir or REFERENCE_DIR
		self.profiles: Dict[str, CountryTaxProfile] = {}
		self.rule_sets: Dict[tuple, CountryTaxProfile] = {}
		self._load_profiles()
		self._load_rule_sets()

	def _load_profiles(self):
		ref_path = os.path.join(self.reference_dir, 'country-tax-profiles.json')
		with open(ref_path, 'r') as f:
			data = json.load(f)

		profiles = data.get("profiles", [])
		if not profiles:
			raise ValueError("country-tax-profiles.json must contain a 'profiles' array with at least one entry")

		for p in profiles:
			profile = CountryTaxProfile(
				name=p["name"],
				code=p.get("code"),
				currency=p.get("currency"),
				brackets=_parse_brackets(p["brackets"]),
				social_security_rate=p.get("socialSecurity", 0),
				standard_deduction=p.get("standardDeduction", 0)
			)
			self.profiles[profile.name] = profile

	def _load_rule_sets(self):
		for file_name in sorted(os.listdir(self.reference_dir)):
			if not (file_name.startswith('tax-rules-') and file_name.endswith('.json')):
				continue
			with open(os.path.join(self.reference_dir, file_name), 'r') as f:
				data = json.load(f)
			for year_data in data.get("taxYears", []):
				year = year_data["year"]
				for rule in year_data.get("ruleSets", []):
					profile = self._profile_from_rule_set(rule, year)
					self.rule_sets[(profile.code, year)] = profile

	@staticmethod
	def _profile_from_rule_set(rule: dict, year: int) -> CountryTaxProfile:
		brackets = rule.get("brackets", {})
		married = brackets.get("married")
		deduction = rule.get("standardDeduction", {})
		social = rule.get("socialSecurity", {})
		health = rule.get("medicareOrHealth", {})
		return CountryTaxProfile(
			name=rule["country"],
			code=rule["countryCode"],
			year=year,
			currency=rule.get("currency"),
			brackets=_parse_brackets(brackets.get("single", [])),
			married_brackets=_parse_brackets(married) if married else None,
			social_security_rate=social.get("employeeRate", 0),
			wage_base=social.get("wageBase"),
			standard_deduction=deduction.get("single", 0),
			married_standard_deduction=deduction.get("married"),
			health_rate=health.get("rate", 0),
			health_additional_rate=health.get("additionalRate", 0),
			health_additional_threshold=health.get("additionalThreshold"),
			source=rule.get("source", ""),
			notes=rule.get("notes", "")
		)

	def list_profiles(self) -> List[str]:
		return list(self.profiles.keys())

	def list_rule_sets(self) -> List[dict]:
		return [
			{"country": p.name, "countryCode": code, "year": year}
			for (code, year), p in sorted(self.rule_sets.items())
		]

	def get_profile(self, name: str) -> CountryTaxProfile:
		"""
		Look up a budget profile by country name or code (case-insensitive).
		"""
		key = name.strip().lower()
		for profile in self.profiles.values():
			if profile.name.lower() == key or (profile.code or '').lower() == key:
				return profile
		raise ValueError(f"No tax profile available for country '{name}'. Available: {self.list_profiles()}")

	def get_rule_set(self, country_code: str, year: Optional[int] = None) -> CountryTaxProfile:
		"""
		Look up a yearly rule set by country code; the latest year is used when
		year is omitted.
		"""
		code = country_code.strip().upper()
		years = sorted(y for (c, y) in self.rule_sets if c == code)
		if not years:
			raise ValueError(f"No tax rules available for country code '{country_code}'")
		if year is None:
			year = years[-1]
		if (code, year) not in self.rule_sets:
			raise ValueError(f"No tax rules available for {code} in year {year}")
		return self.rule_sets[(code, year)]

	def taxBurden(self, gross_income: float, country: str, married: bool = False) -> dict:
		"""
		Income tax, social contributions and take-home for one country profile.
		"""
		profile = self.get_profile(country)
		income_tax = compute_tax(gross_income, profile, married)
		social = social_contributions(gross_income, profile)
		total_tax = income_tax + social
		return {
			"country": profile.name,
			"gross_income": gross_income,
			"income_tax": income_tax,
			"social_contributions": social,
			"total_tax": total_tax,
			"take_home": gross_income - total_tax,
			"effective_tax_rate": (total_tax / gross_income) if gross_income > 0 else 0.0,
			"marginal_rate": marginal_rate(gross_income, profile, married)
		}
