"""
Errors and warnings raised by the boolean expression engine.

Fatal conditions are exceptions deriving from BooleanExpressionError.
Non-fatal conditions are reported through the warnings module so the
operation that produced them still completes.
"""


class BooleanExpressionError(Exception):
    """Base class for every fatal error of the engine."""


class ArityError(BooleanExpressionError):
    """An operator was given more operands than it accepts."""


class UnknownInputError(BooleanExpressionError, KeyError):
    """Evaluation reached an input name the expression does not know."""

    def __init__(self, name: str):
        super().__init__(name)
        self.name = name

    def __str__(self):
        return f"Unknown input '{self.name}'"


class ParseError(BooleanExpressionError, ValueError):
    """
    Malformed infix text.

    Attributes:
        text: The text that failed to parse.
        column: 1-based column of the offending character, if known.
    """

    def __init__(self, message: str, text: str = '', column: int = None):
        super().__init__(message)
        self.text = text
        self.column = column


class TooDeeplyNestedError(BooleanExpressionError):
    """Nested expressions exceed the supported depth."""


class SimplificationDidNotConvergeError(BooleanExpressionError):
    """
    The rewrite passes kept changing the formula past the pass limit.

    Attributes:
        changes: The change log recorded up to the failure.
    """

    def __init__(self, message: str, changes=None):
        super().__init__(message)
        self.changes = list(changes or [])


# --- Warnings ---

class ImpreciseNotWarning(UserWarning):
    """NOT was given an operand; it only negates what came before it."""


class UnresolvedResultWarning(UserWarning):
    """A truth-table cell could not be resolved to true or false."""
