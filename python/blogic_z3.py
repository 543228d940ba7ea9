"""
Translation of boolean expressions into Z3 terms.

Used to prove that two expressions agree on every assignment, e.g. that a
simplification kept the meaning of a formula:

    original = expr.copy()
    assert equivalent(expr.simplify(), original)
"""

from functools import reduce
from typing import Dict, Optional

from z3 import And, Bool, BoolRef, Not, Or, Solver, Xor, unsat

from blogic_errors import BooleanExpressionError, UnknownInputError
from blogic_render import check_depth
from blogic_values import Operator


COMBINATORS = {
    Operator.AND: lambda a, b: And(a, b),
    Operator.OR: lambda a, b: Or(a, b),
    Operator.XOR: lambda a, b: Xor(a, b),
    Operator.NAND: lambda a, b: Not(And(a, b)),
    Operator.NOR: lambda a, b: Not(Or(a, b)),
    Operator.XNOR: lambda a, b: Not(Xor(a, b)),
}


class UnresolvedTermError(BooleanExpressionError):
    """The expression has no boolean meaning for some assignment."""


def to_z3(expression, z3_vars: Optional[Dict[str, BoolRef]] = None, depth: int = 0) -> BoolRef:
    """
    Build the Z3 term computed by the expression's left-to-right fold.

    Args:
        expression: Expression to translate.
        z3_vars: Z3 variables by input name; created on demand.
        depth: Current nesting depth.
    """
    check_depth(depth)
    z3_vars = {} if z3_vars is None else z3_vars
    accumulator = None

    for term in expression.terms:
        values = []
        for operand in term.operands:
            if isinstance(operand, str):
                values.append(_input(expression, operand, z3_vars))
            else:
                operand.inputs.update(expression.inputs)
                values.append(to_z3(operand, z3_vars, depth + 1))

        if term.operator is Operator.NOT:
            if accumulator is None and values:
                accumulator = values[0]
            if accumulator is not None:
                accumulator = Not(accumulator)
            continue
        if not values:
            continue
        if accumulator is not None:
            values.insert(0, accumulator)
        if term.operator.binary_only and len(values) > 2:
            raise UnresolvedTermError(
                f"{term.operator.name} cannot fold {len(values)} inputs"
            )
        accumulator = reduce(COMBINATORS[term.operator], values)

    if accumulator is None:
        raise UnresolvedTermError("Empty expression has no value")
    return accumulator


def _input(expression, name: str, z3_vars: Dict[str, BoolRef]) -> BoolRef:
    if name not in expression.inputs:
        raise UnknownInputError(name)
    if name not in z3_vars:
        z3_vars[name] = Bool(name)
    if expression.inputs[name].inverted:
        return Not(z3_vars[name])
    return z3_vars[name]


def equivalent(first, second) -> bool:
    """True when both expressions give the same value for every assignment."""
    z3_vars = {}
    solver = Solver()
    solver.add(Xor(to_z3(first, z3_vars), to_z3(second, z3_vars)))
    return solver.check() == unsat
