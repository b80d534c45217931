import sys
import os
import json
import argparse
import logging
from tax.CountryTaxDetails import CountryTaxDetails
from tax.GermanTaxDetails import GermanTaxDetails
from calc.plan_calculator import PlanCalculator
from render.renderers import RENDERER_REGISTRY
from storage.document_store import JsonFileDocumentStore


logger = logging.getLogger(__name__)

DEFAULT_STORE_DIR = os.path.normpath(os.path.join(os.path.dirname(__file__), '..', 'user-data'))


def load_spec(program_name: str) -> dict:
    """Load input-parameters/<program_name>/spec.json.

    Raises:
        FileNotFoundError: If the program has no spec.json
    """
    spec_path = os.path.join(os.path.dirname(__file__), '../input-parameters', program_name, 'spec.json')
    if not os.path.exists(spec_path):
        raise FileNotFoundError(f"Spec file not found: {spec_path}")
    with open(spec_path, 'r') as f:
        return json.load(f)


def build_calculator() -> PlanCalculator:
    """Load statutory reference data and inject it into a PlanCalculator."""
    return PlanCalculator(CountryTaxDetails(), GermanTaxDetails.load())


def main(argv=None):
    parser = argparse.ArgumentParser(
        description='FIRE planning calculator',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Modes:
  Projection       Year-by-year wealth, expenses and FIRE number (default)
  Scenarios        Bear/base/bull wealth side by side
  Fire             FIRE year, age and years to FIRE
  GermanTax        Detailed German income tax and social insurance
  CountryTax       Bracket tax burden for the spec's country plus budget
  LifestyleBasket  Lifestyle item future costs and the truth gap
  Investments      Investment portfolio projection

Examples:
  python src/Program.py example
  python src/Program.py example --mode Scenarios
  python src/Program.py example --mode GermanTax
  python src/Program.py example --save --user alice
        """
    )
    parser.add_argument('program_name', help='Name of the program (folder in input-parameters)')
    parser.add_argument('--mode', '-m',
                        choices=list(RENDERER_REGISTRY.keys()),
                        default='Projection',
                        help='Output mode (default: Projection)')
    parser.add_argument('--save', action='store_true',
                        help='Persist the results to the document store')
    parser.add_argument('--store-dir',
                        default=os.environ.get('FIRE_PLANNER_STORE', DEFAULT_STORE_DIR),
                        help='Document store directory (default: $FIRE_PLANNER_STORE or ./user-data)')
    parser.add_argument('--user', default='local',
                        help='User id the results are saved under (default: local)')
    parser.add_argument('--verbose', '-v', action='store_true', help='Enable debug logging')

    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO,
                        format='%(levelname)s %(name)s: %(message)s')

    try:
        spec = load_spec(args.program_name)
    except FileNotFoundError as e:
        print(e)
        sys.exit(1)

    calculator = build_calculator()
    try:
        plan = calculator.calculate(spec)
    except ValueError as e:
        logger.error("Invalid spec for program '%s': %s", args.program_name, e)
        sys.exit(1)

    renderer = RENDERER_REGISTRY[args.mode]()
    renderer.render(plan)

    if args.save:
        store = JsonFileDocumentStore(args.store_dir)
        calculator.save(store, args.user, plan)
        logger.info("Results for '%s' saved to %s", args.program_name, args.store_dir)


if __name__ == "__main__":
    main()
