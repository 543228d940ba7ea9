"""
Building blocks of a boolean expression: values, operators and terms.

A LogicValue carries a boolean (or None while unresolved) and an inversion
flag. An Operator folds a list of values left to right. A Term is one
operator application with its ordered operand list; operands are input names
or nested expressions.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Sequence


# =============================================================================
# Values
# =============================================================================

@dataclass
class LogicValue:
    """A boolean scalar with an inversion flag. None means unresolved."""
    value: Optional[bool] = None
    inverted: bool = False

    def resolve(self, assigned: Optional[bool] = None) -> Optional[bool]:
        """
        Return the effective value.

        Args:
            assigned: Value to use instead of the stored one, if not None.
        """
        value = self.value if assigned is None else assigned
        if value is None:
            return None
        return (not value) if self.inverted else bool(value)

    def invert(self) -> 'LogicValue':
        self.inverted = not self.inverted
        return self

    def __str__(self):
        return value_text(self.resolve())


def value_text(value: Optional[bool]) -> str:
    """Lowercase text of a resolved or unresolved value."""
    if value is None:
        return 'null'
    return 'true' if value else 'false'


# =============================================================================
# Operators
# =============================================================================

class Operator(Enum):
    AND = "and"
    OR = "or"
    XOR = "xor"
    NAND = "nand"
    NOR = "nor"
    XNOR = "xnor"
    NOT = "not"

    @property
    def max_arity(self) -> Optional[int]:
        """Operands accepted by one builder call; None when unbounded."""
        return MAX_ARITY[self]

    @property
    def binary_only(self) -> bool:
        return self.max_arity == 2

    @property
    def glyph(self) -> str:
        return GLYPHS[self]

    @property
    def complement(self) -> Optional['Operator']:
        """AND for OR and OR for AND, used by absorption and distribution."""
        return COMPLEMENTS.get(self)

    def fold(self, values: Sequence[Optional[bool]]) -> Optional[bool]:
        """
        Reduce values left to right, the first value being the seed.

        Returns None when there is nothing to fold, when any value is
        unresolved, or when a binary-only operator is asked to fold more
        than two values.
        """
        if self is Operator.NOT:
            raise ValueError("NOT negates the accumulator and does not fold")
        if not values or any(v is None for v in values):
            return None
        if self.binary_only and len(values) > 2:
            return None
        combine = COMBINATORS[self]
        result = values[0]
        for value in values[1:]:
            result = combine(result, value)
        return result


MAX_ARITY = {
    Operator.AND: None,
    Operator.OR: None,
    Operator.XOR: None,
    Operator.NAND: 2,
    Operator.NOR: 2,
    Operator.XNOR: 2,
    Operator.NOT: 1,
}

GLYPHS = {
    Operator.AND: '∧',
    Operator.OR: '∨',
    Operator.XOR: '⊕',
    Operator.NAND: '⊼',
    Operator.NOR: '⊽',
    Operator.XNOR: '⊻',
    Operator.NOT: '¬',
}

COMBINATORS = {
    Operator.AND: lambda a, b: a and b,
    Operator.OR: lambda a, b: a or b,
    Operator.XOR: lambda a, b: a != b,
    Operator.NAND: lambda a, b: not (a and b),
    Operator.NOR: lambda a, b: not (a or b),
    Operator.XNOR: lambda a, b: a == b,
}

COMPLEMENTS = {
    Operator.AND: Operator.OR,
    Operator.OR: Operator.AND,
}


# =============================================================================
# Terms
# =============================================================================

@dataclass
class Term:
    """One operator application; the unit the simplifier rewrites."""
    operator: Operator
    operands: List = field(default_factory=list)

    def names(self) -> List[str]:
        """Operands that are input names, in order."""
        return [o for o in self.operands if isinstance(o, str)]

    def nested(self) -> List:
        """Operands that are nested expressions, in order."""
        return [o for o in self.operands if not isinstance(o, str)]

    def copy(self) -> 'Term':
        operands = [o if isinstance(o, str) else o.copy() for o in self.operands]
        return Term(self.operator, operands)


# =============================================================================
# Limits
# =============================================================================

# Deepest chain of nested expressions that evaluation, rendering, parsing
# and simplification will follow.
MAX_NESTING_DEPTH = 200
