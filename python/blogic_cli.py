"""
blogic command line: parse a formula, optionally simplify it, and print the
result as JSON or YAML.

Examples:
    blogic "a*b+c" --table
    blogic "(a*b)+(a*c)" --simplify --dialect logic
    blogic --file formula.txt --assign a=true --assign b=false --format yaml
"""

import argparse
import json
import logging
import sys
from typing import List, Tuple

import yaml

from blogic_parser import BooleanParser


BOOLEANS = {
    'true': True, '1': True, 'yes': True, 'on': True,
    'false': False, '0': False, 'no': False, 'off': False,
}


def assignment_pair(text: str) -> Tuple[str, bool]:
    """argparse type for --assign: 'a=true' -> ('a', True)."""
    name, sep, value = text.partition('=')
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"expected NAME=BOOL, got '{text}'")
    try:
        return name.strip(), BOOLEANS[value.strip().lower()]
    except KeyError:
        raise argparse.ArgumentTypeError(
            f"'{value.strip()}' is not a boolean; use true or false"
        ) from None


def build_parser() -> argparse.ArgumentParser:
    ap = argparse.ArgumentParser(
        prog="blogic",
        description="Boolean expression evaluator and simplifier",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""Examples:
 blogic "a*b+c" --table                      # Truth table
 blogic "(a*b)+(a*c)" --simplify             # Simplification steps
 blogic --file formula.txt --assign a=true   # Evaluate with a value for a"""
    )
    source = ap.add_mutually_exclusive_group(required=True)
    source.add_argument("formula", nargs="?", help="Infix formula, e.g. 'a*b+c'")
    source.add_argument("--file", "-f", help="Read the formula from a text file")
    ap.add_argument("--grammar", "-g", default=None,
                    help="Path to a lark grammar (default: built-in grammar)")
    ap.add_argument("--simplify", "-s", action="store_true",
                    help="Simplify the formula and list the steps taken.")
    ap.add_argument("--table", "-t", action="store_true",
                    help="Print the truth table.")
    ap.add_argument("--assign", "-a", action="append", dest="assignments",
                    type=assignment_pair, metavar="NAME=BOOL",
                    help="Give an input a value (e.g., --assign a=true). Can be repeated.")
    ap.add_argument("--invert", "-n", action="append", dest="inversions", metavar="NAME",
                    help="Invert an input. Can be repeated.")
    ap.add_argument("--dialect", "-d", choices=("unicode", "math", "logic"), default="unicode",
                    help="Operator symbols used in the output (default: unicode)")
    ap.add_argument("--format", choices=("json", "yaml"), default="json",
                    help="Output format (default: json)")
    ap.add_argument("--verbose", "-v", action="store_true",
                    help="Log simplification steps to stderr.")
    return ap


def main(argv: List[str] = None) -> int:
    args = build_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.INFO, format="%(message)s", stream=sys.stderr)

    try:
        assignment = dict(args.assignments or ())

        parser = BooleanParser(args.grammar)
        if args.file:
            with open(args.file, 'r', encoding='utf-8') as f:
                formula = f.read().strip()
        else:
            formula = args.formula
        expression = parser.parse_string(formula)

        unknown = set(assignment) - set(expression.inputs)
        if unknown:
            print(json.dumps({"error": f"Unknown input(s) in --assign: {', '.join(sorted(unknown))}"},
                             ensure_ascii=False), file=sys.stderr)
            return 1

        if args.inversions:
            expression.invert(*args.inversions)

        result = {
            "FORMULA": formula,
            "EXPRESSION": expression.to_expression(args.dialect),
        }

        if args.simplify:
            expression.simplify()
            result["STEPS"] = [str(change) for change in expression.changes]
            result["SIMPLIFIED"] = expression.to_expression(args.dialect)

        if assignment:
            value = expression.value_of(assignment)
            result["VALUE"] = value

        if args.table:
            result["TRUTH_TABLE"] = expression.truth_table()

        if args.format == "yaml":
            print(yaml.dump(result, default_flow_style=False, allow_unicode=True, sort_keys=False))
        else:
            print(json.dumps(result, indent=2, ensure_ascii=False))

        return 0

    except Exception as e:
        print(json.dumps({"error": str(e)}, ensure_ascii=False), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
