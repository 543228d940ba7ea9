"""
Rewrite passes that simplify an expression in place.

One pass applies, in order: un-nesting and sorting, the idempotent law, the
associative law, the absorption law and the distributive law. Passes repeat
until neither the rendered formula nor its term structure changes. Every
rewrite is recorded as a Change and logged, e.g.

    › Swap inputs 'b' ⇆ 'a'      ⇒ (a ∧ b) ∨ c
    › OR absorption of a ∧ b     ⇒ a
"""

import logging
from dataclasses import dataclass
from typing import List, Optional

from blogic_errors import BooleanExpressionError, SimplificationDidNotConvergeError
from blogic_render import check_depth
from blogic_values import Operator, Term


logger = logging.getLogger(__name__)


@dataclass
class Change:
    """One simplification step and the formula it produced."""
    step: str
    formula: str

    def __str__(self):
        return f"› {self.step:<25} ⇒ {self.formula}"


def expression_size(expression) -> int:
    """Terms plus operands, nested expressions included."""
    size = 0
    for each in [expression, *expression.iter_nested()]:
        for term in each.terms:
            size += 1 + len(term.operands)
    return size


class Simplifier:
    """
    Applies the rewrite passes to one expression.

    Nested operands are simplified by child simplifiers that share the
    change log and report the formula of the root expression.
    """

    def __init__(self, expression, max_passes: Optional[int] = None,
                 depth: int = 0, root=None, changes: Optional[List[Change]] = None):
        self.expression = expression
        self.max_passes = max_passes or 4 * expression_size(expression) + 4
        self.depth = depth
        self.root = root if root is not None else expression
        self.changes = changes if changes is not None else []
        self.start: Optional[str] = None

    @property
    def terms(self) -> List[Term]:
        return self.expression.terms

    def record(self, step: str):
        change = Change(step, str(self.root))
        self.changes.append(change)
        logger.info("%s", change)

    # --- Driver ---

    def run(self):
        check_depth(self.depth)
        expression = self.expression
        if self.depth == 0:
            expression.changes = self.changes
            self.start = str(expression)
            if expression.original is None:
                expression.original = str(expression)
                self.record("Simplifying boolean equation:")

        before = self.signature()
        passes = 0
        while True:
            if passes >= self.max_passes:
                raise SimplificationDidNotConvergeError(
                    f"No fixpoint after {passes} passes: {expression}", self.changes
                )
            terms = [term.copy() for term in expression.terms]
            inputs = dict(expression.inputs)
            try:
                self.run_pass()
            except BooleanExpressionError:
                expression.terms = terms
                expression.inputs.clear()
                expression.inputs.update(inputs)
                raise
            passes += 1
            after = self.signature()
            if after == before:
                break
            before = after

        if self.depth == 0:
            self.update_labels()
            for name in expression.remove_unused():
                self.record(f"Removed obsolete input '{name}'")
        return expression

    def signature(self):
        """Rendered formula plus term structure; equal signatures mean a fixpoint."""
        return str(self.expression), repr(self.terms)

    def run_pass(self):
        # Ordered so that each law sees the output of the previous one
        self.sort()
        self.idempotent()
        self.associative()
        self.absorption()
        self.distributive()

    # --- Helpers ---

    def find_pair(self, first: Operator, second: Operator) -> Optional[int]:
        """Index of the first adjacent term pair with the given operators."""
        for i in range(len(self.terms) - 1):
            if self.terms[i].operator is first and self.terms[i + 1].operator is second:
                return i
        return None

    def un_nest(self):
        """Inline a nested expression that is the first operand of the first term."""
        if not self.terms or not self.terms[0].operands:
            return
        nested = self.terms[0].operands[0]
        if isinstance(nested, str) or not any(t.operands for t in nested.terms):
            return
        first = self.terms[0]
        first.operands.pop(0)
        if not first.operands and first.operator is not Operator.NOT:
            del self.terms[0]
        self.terms[0:0] = [term.copy() for term in nested.terms]

    def clean(self):
        """Drop terms left without operands; they do not change the result."""
        self.un_nest()
        self.terms[:] = [
            term for term in self.terms
            if term.operands or term.operator is Operator.NOT
        ]

    def update_labels(self):
        """
        Refresh labels recorded from the unsimplified formula.

        Plain and inverted snapshots of the starting formula are replaced by
        snapshots of the simplified one. Labels named after the starting text
        are renamed to the simplified text; custom names are kept.
        """
        expression = self.expression
        current = str(expression)
        refreshed = {}
        for name, snapshot in expression.outputs.items():
            inverted = self.labels_start(snapshot)
            if inverted is None:
                refreshed[name] = snapshot
                continue
            fresh = expression.copy()
            if inverted:
                fresh.terms.append(Term(Operator.NOT))
                if name == f"¬({self.start})":
                    name = f"¬({current})"
            elif name == self.start:
                name = current
            refreshed[name] = fresh
        expression.outputs = refreshed

    def labels_start(self, snapshot) -> Optional[bool]:
        """False for a snapshot of the starting formula, True for its negation, else None."""
        if str(snapshot) == self.start:
            return False
        last = snapshot.terms[-1] if snapshot.terms else None
        if last is None or last.operator is not Operator.NOT or last.operands:
            return None
        base = snapshot.copy()
        base.terms.pop()
        return True if str(base) == self.start else None

    # --- Laws ---

    def sort(self):
        """Order inputs and the names inside each term alphabetically."""
        self.un_nest()
        inputs = self.expression.inputs
        ordered = sorted(inputs.items())
        inputs.clear()
        inputs.update(ordered)

        for term in self.terms:
            names = term.names()
            if names == sorted(names):
                continue
            left, right = next((a, b) for a, b in zip(names, names[1:]) if a > b)
            slots = iter(sorted(names))
            term.operands = [
                next(slots) if isinstance(o, str) else o for o in term.operands
            ]
            self.record(f"Swap inputs '{left}' ⇆ '{right}'")

        self.un_nest()

    def idempotent(self):
        """Remove repeated names: A ∧ A = A, A ∨ A = A."""
        for term in self.terms:
            if term.operator not in (Operator.AND, Operator.OR):
                continue
            seen, removed, operands = set(), [], []
            for operand in term.operands:
                if isinstance(operand, str):
                    if operand in seen:
                        removed.append(operand)
                        continue
                    seen.add(operand)
                operands.append(operand)
            if removed:
                term.operands = operands
                unique = "', '".join(dict.fromkeys(removed))
                plural = 's' if len(removed) > 1 else ''
                self.record(f"Remove duplicate{plural} '{unique}'")

    def associative(self):
        """
        Merge adjacent terms of the same operator: (A ∧ B) ∧ C = A ∧ B ∧ C.
        When nothing merges at this level the nested operands are simplified.
        """
        merged = False
        for operator in (Operator.AND, Operator.OR, Operator.XOR):
            i = self.find_pair(operator, operator)
            if i is None:
                continue
            self.terms[i].operands.extend(self.terms.pop(i + 1).operands)
            merged = True
            self.record(f"Combine {operator.name}'s")

        if not merged:
            for nested in list(self.expression.nested_operands()):
                Simplifier(nested, depth=self.depth + 1, root=self.root,
                           changes=self.changes).run()

    def absorption(self):
        """
        Apply A ∧ (A ∨ B) = A and A ∨ (A ∧ B) = A to the first adjacent
        AND/OR or OR/AND pair where either form applies.
        """
        for i in range(len(self.terms) - 1):
            first, second = self.terms[i], self.terms[i + 1]
            if first.operator.complement is None or second.operator is not first.operator.complement:
                continue

            # First term implies the second: the second alone decides the result
            shared = [name for name in first.names() if name in second.operands]
            if shared:
                obsolete = [o for o in first.operands if o not in second.operands]
                del self.terms[:i + 1]
                absorbed = ', '.join(str(o) for o in obsolete or shared)
                self.record(f"{first.operator.name} absorption of {absorbed}")
                return

            # A nested operand of the second term implies the first term
            if i > 0 or not first.names() or first.nested():
                continue
            names = set(first.names())
            for nested in second.nested():
                if len(nested.terms) != 1:
                    continue
                inner = nested.terms[0]
                if inner.operator is first.operator and names <= set(inner.names()):
                    second.operands = [o for o in second.operands if o is not nested]
                    self.clean()
                    self.record(f"{second.operator.name} absorption of {nested}")
                    return

    def distributive(self):
        """
        Factor common names out of the first two terms:
        (A ∨ B) ∧ (A ∨ C) = A ∨ (B ∧ C), (A ∧ B) ∨ (A ∧ C) = A ∧ (B ∨ C).
        """
        if len(self.terms) < 2:
            return
        first, second = self.terms[0], self.terms[1]
        operator = first.operator
        if operator.complement is None or second.operator is not operator.complement:
            return
        if not second.operands or isinstance(second.operands[0], str):
            return
        nested = second.operands[0]
        if len(nested.terms) != 1 or nested.terms[0].operator is not operator:
            return
        if first.nested() or nested.terms[0].nested():
            return

        a, b = first.names(), nested.terms[0].names()
        common = [name for name in a if name in b]
        rest_a = [name for name in a if name not in common]
        rest_b = [name for name in b if name not in common]
        if not common or not rest_a or not rest_b:
            return

        group = type(self.expression)().push(
            operator.complement,
            [self._side(operator, rest_a), self._side(operator, rest_b)],
        )
        self.expression.share_inputs(group)
        self.terms[0] = Term(operator, [*common, group])
        second.operands.pop(0)
        self.clean()
        self.record("Apply distributive law")

    def _side(self, operator: Operator, names: List[str]):
        if len(names) == 1:
            return names[0]
        return type(self.expression)().push(operator, names)
