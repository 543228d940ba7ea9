"""
blogic - a boolean expression engine.

Expressions are assembled with a fluent builder or parsed from infix text
(see blogic_parser), then evaluated, simplified, rendered and tabulated.

Usage:
    from blogic import and_

    expr = and_('a', 'b').or_('c')      # (a ∧ b) ∨ c
    expr.value_of({'a': True, 'b': False, 'c': True})
    expr.truth_table()
    expr.simplify().to_expression('logic')

Terms are folded left to right: the result of every term becomes the
leading operand of the next term, whose own operator decides how it is
merged in. or_('a').and_('b') therefore reads as a ∧ b.
"""

import re
import warnings
from typing import Callable, Dict, Iterator, List, Optional, Tuple

import blogic_truthtable
import blogic_z3
from blogic_errors import (
    ArityError, BooleanExpressionError, ImpreciseNotWarning, UnknownInputError,
)
from blogic_render import bar, check_depth, render, translate
from blogic_simplifier import Change, Simplifier
from blogic_values import LogicValue, Operator, Term


__all__ = [
    'Expression', 'LogicValue', 'Operator', 'Term', 'Change',
    'and_', 'or_', 'xor', 'nand', 'nor', 'xnor', 'not_',
]


class Expression:
    """
    A boolean formula: named inputs, an ordered list of terms and labeled
    outputs.

    Builder methods mutate the expression and return it for chaining. Use
    copy() to keep a version before simplifying in place.
    """

    def __init__(self):
        self.inputs: Dict[str, LogicValue] = {}
        self.terms: List[Term] = []
        self.outputs: Dict[str, 'Expression'] = {}
        self.original: Optional[str] = None
        self.changes: List[Change] = []

    # --- Builder ---

    def and_(self, *operands) -> 'Expression':
        return self.push(Operator.AND, operands)

    def or_(self, *operands) -> 'Expression':
        return self.push(Operator.OR, operands)

    def xor(self, *operands) -> 'Expression':
        return self.push(Operator.XOR, operands)

    def nand(self, *operands) -> 'Expression':
        return self.push(Operator.NAND, operands)

    def nor(self, *operands) -> 'Expression':
        return self.push(Operator.NOR, operands)

    def xnor(self, *operands) -> 'Expression':
        return self.push(Operator.XNOR, operands)

    def not_(self, *operands) -> 'Expression':
        """
        Negate everything folded so far.

        An operand is only used while nothing has resolved yet; passing one
        is allowed but flagged with ImpreciseNotWarning.
        """
        self._check_arity(Operator.NOT, operands)
        if operands:
            warnings.warn("NOT might not be accurate with an operand",
                          ImpreciseNotWarning, stacklevel=2)
        return self.push(Operator.NOT, operands)

    def push(self, operator: Operator, operands) -> 'Expression':
        """Append one term. Nothing changes if the operands are rejected."""
        self._check_arity(operator, operands)
        for operand in operands:
            if isinstance(operand, Expression):
                if operand is self or any(e is self for e in operand.iter_nested()):
                    raise BooleanExpressionError(
                        "An expression cannot be nested inside itself"
                    )
            elif not isinstance(operand, str):
                raise TypeError(
                    f"Operands must be input names or expressions, "
                    f"not {type(operand).__name__}"
                )

        for operand in operands:
            if isinstance(operand, str):
                self.inputs.setdefault(operand, LogicValue())
            else:
                for name, logic in operand.inputs.items():
                    self.inputs.setdefault(name, logic)
                self.share_inputs(operand)
        self.terms.append(Term(operator, list(operands)))
        return self

    def _check_arity(self, operator: Operator, operands):
        limit = operator.max_arity
        if limit is not None and len(operands) > limit:
            raise ArityError(
                f"{operator.name} can only have {limit} "
                f"input{'s' if limit > 1 else ''}, got {len(operands)}"
            )
        if operator.binary_only and self.terms and self.terms[-1].operator is operator:
            combined = len(self.terms[-1].operands) + len(operands)
            if combined > limit:
                raise ArityError(
                    f"{operator.name} after {operator.name} would combine "
                    f"{combined} inputs; {operator.name} can only have {limit}"
                )

    def share_inputs(self, nested: 'Expression'):
        """Bind this expression's inputs into a nested expression and below."""
        stack = [(self, nested)]
        while stack:
            parent, child = stack.pop()
            child.inputs.update(parent.inputs)
            for grandchild in child.nested_operands():
                stack.append((child, grandchild))

    # --- Inputs and labels ---

    def invert(self, *names: str) -> 'Expression':
        """Toggle inversion of the named inputs and rename affected labels."""
        for name in names:
            if name not in self.inputs:
                raise UnknownInputError(name)

        for name in names:
            self.inputs[name].invert()
            pattern = re.compile(
                r'(?<!\w)(?:(%s)|(%s))(?![\w\u0304\u0305])'
                % (re.escape(bar(name)), re.escape(name))
            )
            swap = lambda m: name if m.group(1) else bar(name)
            for label in list(self.outputs):
                renamed = pattern.sub(swap, label)
                if renamed != label:
                    self.outputs[renamed] = self.outputs.pop(label)
        return self

    def label(self, name: Optional[str] = None, inverted: bool = False) -> 'Expression':
        """
        Record the current formula as a named output.

        Args:
            name: Output name; defaults to the rendered formula.
            inverted: Store the negated formula. Plain identifiers get a bar,
                      anything else is wrapped as ¬(name).
        """
        if not name:
            name = self.to_string()
        snapshot = self.copy()
        if inverted:
            name = bar(name) if re.fullmatch(r'\w+', name) else f"¬({name})"
            snapshot.terms.append(Term(Operator.NOT))
        self.outputs[name] = snapshot
        return self

    def collect_labels(self) -> 'Expression':
        """Pull labels of nested operands, at any depth, into this expression."""
        for nested in self.iter_nested():
            for name, snapshot in nested.outputs.items():
                self.outputs.setdefault(name, snapshot)
        return self

    def input_names(self) -> List[Tuple[str, bool]]:
        """(column name, inverted) per input, alphabetically; inverted names are barred."""
        return [
            (bar(name) if self.inputs[name].inverted else name, self.inputs[name].inverted)
            for name in sorted(self.inputs)
        ]

    # --- Structure ---

    def nested_operands(self) -> Iterator['Expression']:
        """Nested expressions used directly by this expression's terms."""
        for term in self.terms:
            yield from term.nested()

    def iter_nested(self) -> Iterator['Expression']:
        """Every nested expression below this one, depth first."""
        stack = list(reversed(list(self.nested_operands())))
        while stack:
            nested = stack.pop()
            yield nested
            stack.extend(reversed(list(nested.nested_operands())))

    def used_names(self) -> List[str]:
        """Input names referenced by the terms, nested terms included."""
        used = []
        for expression in [self, *self.iter_nested()]:
            for term in expression.terms:
                for name in term.names():
                    if name not in used:
                        used.append(name)
        return used

    def copy(self) -> 'Expression':
        """
        Copy terms and outputs for rewriting; input values stay shared.

        Nested expressions are copied level by level without recursion, so
        any depth the builder accepts can be copied.
        """
        clone = self._shallow_copy()
        stack = [clone]
        while stack:
            current = stack.pop()
            for term in current.terms:
                for i, operand in enumerate(term.operands):
                    if isinstance(operand, Expression):
                        term.operands[i] = operand._shallow_copy()
                        stack.append(term.operands[i])
        return clone

    def _shallow_copy(self) -> 'Expression':
        clone = type(self)()
        clone.inputs = dict(self.inputs)
        clone.terms = [Term(term.operator, list(term.operands)) for term in self.terms]
        clone.outputs = dict(self.outputs)
        clone.original = self.original
        return clone

    # --- Evaluation ---

    def value_of(self, assignment: Optional[Dict[str, bool]] = None) -> Optional[bool]:
        """
        Evaluate the expression.

        Args:
            assignment: Input values by name. Inputs not given keep their
                        stored value; names that are not inputs are ignored.

        Returns:
            True, False, or None when the result is unresolved.
        """
        return self._evaluate(assignment or {}, 0)

    def _evaluate(self, assignment: Dict[str, bool], depth: int) -> Optional[bool]:
        check_depth(depth)
        accumulator = None
        for term in self.terms:
            values = []
            for operand in term.operands:
                if isinstance(operand, str):
                    if operand not in self.inputs:
                        raise UnknownInputError(operand)
                    values.append(self.inputs[operand].resolve(assignment.get(operand)))
                else:
                    operand.inputs.update(self.inputs)
                    values.append(operand._evaluate(assignment, depth + 1))

            if term.operator is Operator.NOT:
                # Its operand seeds the accumulator only while nothing has resolved;
                # otherwise NOT ignores its operand list
                if accumulator is None and values:
                    accumulator = values[0]
                if accumulator is not None:
                    accumulator = not accumulator
                continue
            if not values:
                continue
            # An unresolved accumulator is not carried into the next term
            if accumulator is not None:
                values.insert(0, accumulator)
            accumulator = term.operator.fold(values)
        return accumulator

    def to_function(self) -> Callable[..., Optional[bool]]:
        """Return a callable taking input values as keyword arguments."""
        def function(**assignment):
            return self.value_of(assignment)
        return function

    # --- Rendering ---

    def to_string(self, assignment: Optional[Dict[str, bool]] = None,
                  use_labels: bool = True, force_parens: bool = False) -> str:
        return render(self, assignment, use_labels, force_parens)

    def to_expression(self, dialect: str = 'unicode') -> str:
        """Render with 'unicode' glyphs, 'math' (* + ^ ~) or 'logic' (&& || ^ !) symbols."""
        return translate(self.to_string(), dialect)

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        return f"Expression({self.to_string()!r})"

    # --- Simplification ---

    def simplify(self, max_passes: Optional[int] = None) -> 'Expression':
        """
        Rewrite the expression in place with the sort, idempotent,
        associative, absorption and distributive laws until it stops
        changing. The steps taken are left in self.changes.
        """
        Simplifier(self, max_passes=max_passes).run()
        return self

    def remove_unused(self) -> List[str]:
        """
        Drop inputs that neither the terms nor any labeled output refer to;
        returns the removed names.
        """
        used = set(self.used_names())
        for snapshot in self.outputs.values():
            used.update(snapshot.used_names())
        removed = [name for name in self.inputs if name not in used]
        for name in removed:
            del self.inputs[name]
        return removed

    # --- Truth tables ---

    def truth_vector(self) -> Dict[str, List[Optional[bool]]]:
        return blogic_truthtable.truth_vector(self)

    def truth_table(self) -> List[Dict[str, Optional[bool]]]:
        return blogic_truthtable.truth_table(self)

    def print_states(self, assignment: Optional[Dict[str, bool]] = None) -> str:
        return blogic_truthtable.print_states(self, assignment)

    # --- Z3 ---

    def to_z3(self):
        return blogic_z3.to_z3(self)

    def equivalent(self, other: 'Expression') -> bool:
        return blogic_z3.equivalent(self, other)


# =============================================================================
# Expression starters
# =============================================================================

def and_(*operands) -> Expression:
    return Expression().and_(*operands)


def or_(*operands) -> Expression:
    return Expression().or_(*operands)


def xor(*operands) -> Expression:
    return Expression().xor(*operands)


def nand(*operands) -> Expression:
    return Expression().nand(*operands)


def nor(*operands) -> Expression:
    return Expression().nor(*operands)


def xnor(*operands) -> Expression:
    return Expression().xnor(*operands)


def not_(*operands) -> Expression:
    return Expression().not_(*operands)
