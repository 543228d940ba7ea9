"""
Tests for truth vectors, truth tables and state listings
"""

import pytest

from blogic import and_, or_
from blogic_errors import UnresolvedResultWarning
from blogic_render import bar
from blogic_truthtable import assignments


def test_assignments_count_in_binary():
    rows = list(assignments(['a', 'b']))
    assert rows == [
        {'a': False, 'b': False},
        {'a': False, 'b': True},
        {'a': True, 'b': False},
        {'a': True, 'b': True},
    ]
    assert list(assignments([])) == [{}]


def test_truth_vector():
    expr = or_('a', 'b')
    assert expr.truth_vector() == {'a ∨ b': [False, True, True, True]}


def test_truth_vector_collects_nested_labels():
    inner = and_('a', 'b').label('x')
    expr = or_(inner, 'c')
    vector = expr.truth_vector()
    assert list(vector) == ['(a ∧ b) ∨ c', 'x']
    assert vector['x'] == [False, False, False, False, False, False, True, True]
    assert vector['(a ∧ b) ∨ c'] == [False, True, False, True, False, True, True, True]


def test_truth_table_rows():
    expr = and_('a', 'b')
    table = expr.truth_table()
    assert len(table) == 4
    assert table[0] == {'a': False, 'b': False, 'a ∧ b': False}
    assert table[3] == {'a': True, 'b': True, 'a ∧ b': True}
    print("✓ Truth table test passed")


def test_truth_table_row_count():
    expr = and_('a', 'b', 'c').or_('d', 'e')
    assert len(expr.truth_table()) == 2 ** 5


def test_truth_table_inverted_column():
    """Inverted inputs show their effective value under a barred name"""
    expr = and_('a', 'b').invert('a')
    table = expr.truth_table()
    label = bar('a') + ' ∧ b'
    assert list(table[0]) == [bar('a'), 'b', label]
    for row in table:
        assert row[label] == (row[bar('a')] and row['b'])


def test_unresolved_cells_warn():
    expr = and_('a').nand('b', 'c')
    with pytest.warns(UnresolvedResultWarning):
        table = expr.truth_table()
    label = str(expr)
    assert all(row[label] is None for row in table)


def test_print_states():
    expr = and_('a', 'b')
    text = expr.print_states({'a': True})
    assert text == (
        "Missing 1 input (b). Resolving 2 possible states:\n"
        "\ttrue  ∧ false = false\n"
        "\ttrue  ∧ true  = true \n"
    )


def test_print_states_all_missing():
    text = or_('a', 'b').print_states()
    assert text.startswith("Missing 2 inputs (a, b). Resolving 4 possible states:\n")
    assert text.count('\n') == 5


def test_print_states_nothing_missing():
    text = and_('a', 'b').print_states({'a': True, 'b': False})
    assert text == "Resolving 1 possible state:\n\ttrue  ∧ false = false\n"
