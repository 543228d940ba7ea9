"""
Text rendering of boolean expressions.

Rendering replays the evaluation walk: each term's text becomes the leading
fragment of the next term, and every term but the last is parenthesized, so
the text reads exactly in evaluation order.
"""

import re
from typing import Dict, Optional

from blogic_errors import TooDeeplyNestedError, UnknownInputError
from blogic_values import MAX_NESTING_DEPTH, Operator, value_text


MACRON = '\u0304'
OVERLINE = '\u0305'

DIALECTS = {
    'math': {
        '∧': '*',
        '∨': '+',
        '⊕': '^',
        '⊼': '*~',
        '⊽': '+~',
        '⊻': '^~',
        '¬': '~',
    },
    'logic': {
        '∧': '&&',
        '∨': '||',
        '⊕': '^',
        '⊼': 'nand',
        '⊽': 'nor',
        '⊻': 'xnor',
        '¬': '!',
    },
}

NEGATION_PREFIX = {'math': '~', 'logic': '!'}

BARRED_NAME = re.compile(r'(?:\w' + OVERLINE + r')+|\w' + MACRON)


def bar(text: str, first_only: bool = False) -> str:
    """
    Toggle an overline on text.

    A bar already present is removed. Otherwise a single character (or only
    the first one, with first_only) gets a combining macron and a longer
    name gets a combining overline after every character.
    """
    if MACRON in text or OVERLINE in text:
        return text.replace(MACRON, '').replace(OVERLINE, '')
    if not text:
        return text
    if len(text) == 1 or first_only:
        return text[0] + MACRON + text[1:]
    return ''.join(c + OVERLINE for c in text)


def is_barred(text: str) -> bool:
    return MACRON in text or OVERLINE in text


def check_depth(depth: int):
    if depth > MAX_NESTING_DEPTH:
        raise TooDeeplyNestedError(
            f"Expressions nested deeper than {MAX_NESTING_DEPTH} levels"
        )


def render(expression, assignment: Optional[Dict[str, bool]] = None,
           use_labels: bool = True, force_parens: bool = False,
           depth: int = 0) -> str:
    """
    Render an expression with unicode logic glyphs.

    Args:
        expression: The expression to render.
        assignment: Input values used when use_labels is False.
        use_labels: Show input names; otherwise show their values.
        force_parens: Parenthesize the last term too (nested operands).
        depth: Current nesting depth.
    """
    check_depth(depth)
    assignment = assignment or {}
    text = ''
    last = len(expression.terms) - 1

    for i, term in enumerate(expression.terms):
        fragments = [
            _fragment(expression, operand, assignment, use_labels, depth)
            for operand in term.operands
        ]
        if term.operator is Operator.NOT:
            if text:
                text = f"¬{text}"
            elif fragments:
                text = f"¬{fragments[0]}"
            continue

        if text:
            fragments.insert(0, text)
        if not fragments:
            continue
        text = f" {term.operator.glyph} ".join(fragments)
        if force_parens or i < last:
            text = f"({text})"

    return text


def _fragment(expression, operand, assignment, use_labels, depth) -> str:
    if not isinstance(operand, str):
        return render(operand, assignment, use_labels, True, depth + 1)
    if operand not in expression.inputs:
        raise UnknownInputError(operand)
    logic = expression.inputs[operand]
    if use_labels:
        return bar(operand) if logic.inverted else operand
    return value_text(logic.resolve(assignment.get(operand)))


def translate(text: str, dialect: str) -> str:
    """
    Convert unicode glyph text into another symbol dialect.

    Args:
        text: Text produced by render().
        dialect: 'unicode', 'math' (* + ^ ~) or 'logic' (&& || ^ !).
    """
    if dialect == 'unicode':
        return text
    if dialect not in DIALECTS:
        raise ValueError(
            f"Unknown dialect '{dialect}'. Expected 'unicode', 'math' or 'logic'"
        )

    prefix = NEGATION_PREFIX[dialect]
    text = BARRED_NAME.sub(lambda m: prefix + bar(m.group(0)), text)
    for glyph, symbol in DIALECTS[dialect].items():
        text = text.replace(glyph, symbol)
    return text
