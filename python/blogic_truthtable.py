"""
Truth tables for boolean expressions.

Assignments are enumerated in binary counting order over the alphabetically
sorted input names, the first name being the most significant bit.
"""

import warnings
from itertools import product
from typing import Dict, Iterator, List, Optional

from blogic_errors import UnresolvedResultWarning
from blogic_values import value_text


def assignments(names: List[str]) -> Iterator[Dict[str, bool]]:
    """Every assignment of the names, counting up from all-false."""
    for bits in product((False, True), repeat=len(names)):
        yield dict(zip(names, bits))


def truth_vector(expression) -> Dict[str, List[Optional[bool]]]:
    """
    Evaluate every labeled output for all input assignments.

    The expression is labeled with its own formula when it has no label
    yet, and labels of nested operands are collected first.

    Returns:
        Dictionary of label -> list of results, one per assignment.
    """
    if not expression.outputs:
        expression.label()
    expression.collect_labels()

    names = sorted(expression.inputs)
    vector = {}
    for label, snapshot in expression.outputs.items():
        vector[label] = [snapshot.value_of(row) for row in assignments(names)]
    return vector


def truth_table(expression) -> List[Dict[str, Optional[bool]]]:
    """
    Build table rows keyed by input column then output label.

    Inverted inputs get a barred column holding their effective value.
    Unresolved cells are None and raise UnresolvedResultWarning once.
    """
    columns = expression.input_names()
    vector = truth_vector(expression)

    table = []
    for i, row in enumerate(assignments(sorted(expression.inputs))):
        entry = {}
        for (column, inverted), value in zip(columns, row.values()):
            entry[column] = (not value) if inverted else value
        for label, results in vector.items():
            entry[label] = results[i]
        table.append(entry)

    if any(None in results for results in vector.values()):
        warnings.warn(
            "NOR, NAND & XNOR are not supported fully; output may be null "
            "if the expression cannot be resolved",
            UnresolvedResultWarning, stacklevel=3,
        )
    return table


def print_states(expression, assignment: Optional[Dict[str, bool]] = None) -> str:
    """
    Describe the result for every combination of the inputs missing from
    the assignment, one tab-indented line per state.
    """
    assignment = dict(assignment or {})
    missing = [name for name in expression.inputs if name not in assignment]
    combinations = 2 ** len(missing)

    text = ''
    if missing:
        plural = 's' if len(missing) > 1 else ''
        text += f"Missing {len(missing)} input{plural} ({', '.join(missing)}). "
    text += f"Resolving {combinations} possible state{'s' if combinations > 1 else ''}:\n"

    for fixed in assignments(missing):
        state = {**assignment, **fixed}
        formula = expression.to_string(state, use_labels=False)
        text += f"\t{formula} = {value_text(expression.value_of(state))}\n"
    return text.replace('true', 'true ')
