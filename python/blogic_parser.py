"""
Infix parser for boolean formulas, built on Lark.

Operators have no precedence: chains are read left to right and only
parentheses group. Each binary triple becomes an expression with a single
term over its two operands, built innermost first, and the enclosing triple
takes it as a nested operand.

Accepted symbols:
    OR    +  ∨  ||
    AND   *  ∧  &&
    XOR   ^  ⊕
    NAND  ⊼      NOR  ⊽      XNOR  ⊻
    NOT   ¬  !  ~   (prefix)

A name carrying an overline (ā, a̅b̅) refers to the inverted input.
Whitespace is removed before parsing, so 'a b' reads as the name 'ab'.
"""

import logging
import re
from functools import lru_cache
from pathlib import Path
from typing import Dict, Union

from lark import Lark
from lark.exceptions import UnexpectedInput, VisitError
from lark.visitors import Transformer_NonRecursive

from blogic import Expression
from blogic_errors import BooleanExpressionError, ParseError, TooDeeplyNestedError
from blogic_render import bar, is_barred
from blogic_values import MAX_NESTING_DEPTH, LogicValue, Operator


logger = logging.getLogger(__name__)


GRAMMAR = r"""
    ?start: expr

    ?expr: binary
         | unary

    binary: expr BINOP unary

    ?unary: negation
          | atom

    negation: NEG unary

    ?atom: name
         | "(" expr ")"

    name: NAME

    BINOP: "+" | "*" | "^" | "&&" | "||" | "∧" | "∨" | "⊕" | "⊼" | "⊽" | "⊻"
    NEG: "¬" | "!" | "~"
    NAME: /[^\W\d][̄̅]*(\w[̄̅]*)*/
"""

OPERATORS = {
    '+': Operator.OR,
    '∨': Operator.OR,
    '||': Operator.OR,
    '*': Operator.AND,
    '∧': Operator.AND,
    '&&': Operator.AND,
    '^': Operator.XOR,
    '⊕': Operator.XOR,
    '⊼': Operator.NAND,
    '⊽': Operator.NOR,
    '⊻': Operator.XNOR,
}


class BuildExpression(Transformer_NonRecursive):
    """
    Transformer that turns the parse tree into nested expressions.

    All expressions built from one text share a single LogicValue per
    input name, so inverting an input anywhere inverts it everywhere.
    """

    def __init__(self):
        super().__init__()
        self.inputs: Dict[str, LogicValue] = {}
        self.depths: Dict[int, int] = {}

    def name(self, items) -> str:
        token = items[0]
        text = str(token)
        barred = is_barred(text)
        plain = bar(text) if barred else text
        if plain not in self.inputs:
            self.inputs[plain] = LogicValue(inverted=barred)
        elif self.inputs[plain].inverted != barred:
            raise ParseError(
                f"Input '{plain}' is used both inverted and plain",
                column=token.column,
            )
        return plain

    def binary(self, items) -> Expression:
        left, op, right = items
        return self.build(OPERATORS[str(op)], [left, right])

    def negation(self, items) -> Expression:
        return self.build(Operator.AND, [items[-1]]).push(Operator.NOT, ())

    def build(self, operator: Operator, operands) -> Expression:
        depth = 1 + max(
            (self.depths[id(o)] for o in operands if isinstance(o, Expression)),
            default=0,
        )
        if depth > MAX_NESTING_DEPTH:
            raise TooDeeplyNestedError(
                f"Formula nests deeper than {MAX_NESTING_DEPTH} levels"
            )

        expression = Expression()
        for operand in operands:
            if isinstance(operand, str):
                expression.inputs[operand] = self.inputs[operand]
        expression.push(operator, operands)
        self.depths[id(expression)] = depth
        return expression


class BooleanParser:
    """
    Parser for infix boolean formulas.

    Usage:
        parser = BooleanParser()
        expr = parser.parse_string('a*b+c')
    """

    def __init__(self, grammar_path: str = None):
        """
        Args:
            grammar_path: Path to a .lark grammar file. If None, the built-in
                          grammar is used.
        """
        if grammar_path is None:
            grammar = GRAMMAR
        else:
            grammar = Path(grammar_path).read_text(encoding="utf-8")
        self.lark_parser = Lark(grammar, parser='lalr', start='start')

    def parse_string(self, text: str) -> Expression:
        """
        Parse a formula.

        Raises:
            ParseError: The text is empty or malformed.
            TooDeeplyNestedError: The formula nests too deeply.
        """
        stripped = re.sub(r'\s', '', text)
        if not stripped:
            raise ParseError("Empty formula", text)

        try:
            tree = self.lark_parser.parse(stripped)
        except UnexpectedInput as e:
            raise ParseError(
                f"Malformed formula at column {e.column}: {stripped!r}",
                text, e.column,
            ) from e

        builder = BuildExpression()
        try:
            result = builder.transform(tree)
        except VisitError as e:
            if isinstance(e.orig_exc, BooleanExpressionError):
                if isinstance(e.orig_exc, ParseError):
                    e.orig_exc.text = text
                raise e.orig_exc from None
            raise

        expression = _as_expression(result, builder)
        logger.debug("Parsed %r as %s", text, expression)
        return expression

    def parse_file(self, filepath: str) -> Expression:
        """Parse the formula stored in a text file."""
        with open(filepath, 'r', encoding='utf-8') as f:
            return self.parse_string(f.read())


def _as_expression(result: Union[str, Expression], builder: BuildExpression) -> Expression:
    if isinstance(result, Expression):
        return result
    return builder.build(Operator.AND, [result])


@lru_cache(maxsize=1)
def default_parser() -> BooleanParser:
    return BooleanParser()


def parse(text: str) -> Expression:
    """Parse an infix formula such as 'a*b+c' or '(a ∧ b) ∨ ¬c'."""
    return default_parser().parse_string(text)
