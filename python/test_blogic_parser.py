"""
Tests for the infix formula parser
"""

import pytest

from blogic import and_, nand, or_, xor
from blogic_errors import ParseError, TooDeeplyNestedError
from blogic_parser import GRAMMAR, BooleanParser, parse
from blogic_render import bar
from blogic_truthtable import assignments


def test_truth_table_of_parsed_formula():
    """a*b+c reads as (a ∧ b) ∨ c"""
    expr = parse('a*b+c')
    table = expr.truth_table()
    assert len(table) == 8

    label = '(a ∧ b) ∨ c'
    assert list(expr.outputs) == [label]
    for row in table:
        assert row[label] == ((row['a'] and row['b']) or row['c'])

    assert table[4] == {'a': True, 'b': False, 'c': False, label: False}
    assert table[1] == {'a': False, 'b': False, 'c': True, label: True}
    print("✓ Parsed truth table test passed")


def test_single_name():
    expr = parse('a')
    assert str(expr) == 'a'
    assert expr.value_of({'a': True}) is True


def test_no_precedence():
    """Chains are read left to right"""
    expr = parse('a+b*c')
    assert str(expr) == '(a ∨ b) ∧ c'
    assert expr.value_of({'a': True, 'b': False, 'c': False}) is False

    grouped = parse('a+(b*c)')
    assert str(grouped) == 'a ∨ (b ∧ c)'
    assert grouped.value_of({'a': True, 'b': False, 'c': False}) is True


def test_operator_symbols():
    row = {'a': True, 'b': False}
    assert parse('a ∧ b').value_of(row) is False
    assert parse('a && b').value_of(row) is False
    assert parse('a ∨ b').value_of(row) is True
    assert parse('a || b').value_of(row) is True
    assert parse('a ⊕ b').value_of(row) is True
    assert parse('a ^ b').value_of(row) is True
    assert parse('a ⊼ b').value_of(row) is True
    assert parse('a ⊽ b').value_of(row) is False
    assert parse('a ⊻ b').value_of(row) is False
    print("✓ Operator symbols test passed")


def test_negation():
    for text in ['!a', '~a', '¬a']:
        expr = parse(text)
        assert expr.value_of({'a': True}) is False
        assert expr.value_of({'a': False}) is True

    expr = parse('!(a+b)*c')
    assert expr.value_of({'a': False, 'b': False, 'c': True}) is True
    assert expr.value_of({'a': True, 'b': False, 'c': True}) is False

    assert parse('!!a').value_of({'a': True}) is True


def test_whitespace_is_removed():
    expr = parse('  foo *\tbar\n')
    assert sorted(expr.inputs) == ['bar', 'foo']
    assert str(expr) == 'foo ∧ bar'


def test_barred_names():
    """An overlined name refers to the inverted input"""
    expr = parse(bar('a') + '*b')
    assert expr.inputs['a'].inverted
    assert str(expr) == bar('a') + ' ∧ b'
    assert expr.value_of({'a': False, 'b': True}) is True
    assert expr.value_of({'a': True, 'b': True}) is False

    long = parse(bar('ab') + '+c')
    assert long.inputs['ab'].inverted


def test_mixed_barred_and_plain_name():
    with pytest.raises(ParseError):
        parse(bar('a') + '*a')


def test_inputs_are_shared():
    """One LogicValue per name across the whole parse"""
    expr = parse('a*b+a')
    inner = expr.terms[0].operands[0]
    assert inner.inputs['a'] is expr.inputs['a']
    expr.invert('a')
    assert inner.inputs['a'].inverted


@pytest.mark.parametrize('text', ['', '   ', 'a*', '*a', '(a*b', 'a*b)', 'a**b', 'a $ b', '()', 'a!b'])
def test_malformed_formulas(text):
    with pytest.raises(ParseError):
        parse(text)


def test_parse_error_details():
    with pytest.raises(ParseError) as info:
        parse('a*)')
    assert info.value.text == 'a*)'
    assert info.value.column == 3
    assert isinstance(info.value, ValueError)


def test_too_deeply_nested():
    with pytest.raises(TooDeeplyNestedError):
        parse('!' * 250 + 'a')

    assert parse('!' * 20 + 'a').value_of({'a': True}) is True


def test_round_trip():
    """Rendered text parses back to the same values"""
    cases = [
        and_('a', 'b').or_('c'),
        and_('a').or_(and_('a', 'b')),
        or_('a').and_('b').not_(),
        xor('a', 'b', 'c'),
        and_('a', 'b').nand('c'),
        or_(nand('a', 'b'), 'c').invert('c'),
    ]
    for expr in cases:
        reparsed = parse(str(expr))
        for row in assignments(sorted(expr.inputs)):
            assert reparsed.value_of(row) == expr.value_of(row), str(expr)
    print("✓ Round trip test passed")


def test_round_trip_after_simplification():
    expr = parse('(a+b)*(a+c)*d').simplify()
    reparsed = parse(str(expr))
    for row in assignments(['a', 'b', 'c', 'd']):
        assert reparsed.value_of(row) == expr.value_of(row)


def test_parse_file(tmp_path):
    path = tmp_path / 'formula.txt'
    path.write_text('a ∧ b\n', encoding='utf-8')
    expr = BooleanParser().parse_file(str(path))
    assert str(expr) == 'a ∧ b'


def test_grammar_file(tmp_path):
    path = tmp_path / 'blogic.lark'
    path.write_text(GRAMMAR, encoding='utf-8')
    parser = BooleanParser(str(path))
    assert parser.parse_string('a+b').value_of({'a': False, 'b': True}) is True
