"""
Tests for the Z3 translation
"""

import pytest
from z3 import BoolRef, Solver, sat, unsat

from blogic import and_, nand, not_, or_, xnor
from blogic_z3 import UnresolvedTermError, equivalent, to_z3


def test_to_z3_returns_bool_term():
    term = and_('a', 'b').or_('c').to_z3()
    assert isinstance(term, BoolRef)

    solver = Solver()
    solver.add(term)
    assert solver.check() == sat


def test_contradiction_is_unsat():
    solver = Solver()
    solver.add(to_z3(and_('a').and_(and_('a').not_())))
    assert solver.check() == unsat
    print("✓ Contradiction test passed")


def test_equivalent():
    assert equivalent(and_('a', 'b'), and_('b', 'a'))
    assert not equivalent(and_('a', 'b'), or_('a', 'b'))
    assert equivalent(nand('a', 'b'), and_('a', 'b').not_())
    assert equivalent(xnor('a', 'b'), and_('a').xor('b').not_())


def test_inverted_inputs():
    with pytest.warns(UserWarning):
        negated = not_('a')
    assert equivalent(and_('a').invert('a'), negated)


def test_unresolved_terms():
    with pytest.raises(UnresolvedTermError):
        and_('a').nand('b', 'c').to_z3()
    with pytest.raises(UnresolvedTermError):
        and_().to_z3()
