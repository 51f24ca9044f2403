"""Sentences and derivation steps"""

import pytest

from grammnorm.errors import PreconditionError
from grammnorm.production import ProductionRule
from grammnorm.sentence import Sentence
from grammnorm.symbols import Terminal, NonTerminal, EPSILON, PIPE, Option, Alternative

a, b, c = Terminal("a"), Terminal("b"), Terminal("c")
A, B = NonTerminal("A"), NonTerminal("B")


def test_join_drops_epsilon():
    assert Sentence.join(Sentence.of(a), EPSILON, [b]) == Sentence.of(a, b)
    assert Sentence.join(EPSILON, []) == Sentence.of(EPSILON)


def test_edits_return_new_sentences():
    s = Sentence.of(a, B, c)
    assert s.add(a) == Sentence.of(a, B, c, a)
    assert s.insert_at(3, b) == Sentence.of(a, B, c, b)
    assert s.remove_at(1) == Sentence.of(a, c)
    assert s.replace(1, [b, b]) == Sentence.of(a, b, b, c)
    assert s == Sentence.of(a, B, c)


def test_edit_out_of_range():
    s = Sentence.of(a)
    with pytest.raises(PreconditionError):
        s.remove_at(1)
    with pytest.raises(PreconditionError):
        s.replace(-1, b)


def test_pipes_fold_into_alternative():
    s = Sentence.of(a, PIPE, b)
    assert len(s) == 1
    assert s[0] == Alternative((a,), (b,))
    assert s.contains_macro()


def test_queries():
    s = Sentence.of(a, A, b, B, c)
    assert s.leftmost_symbol() == a
    assert s.rightmost_symbol() == c
    assert s.leftmost_non_terminal() == A
    assert s.rightmost_non_terminal() == B
    assert s.leftmost_terminal() == a
    assert s.rightmost_terminal() == c
    assert Sentence.of(a, b).leftmost_non_terminal() is None
    assert Sentence.of(EPSILON).is_epsilon()
    assert not s.is_epsilon()


def test_index_of_symbol_is_by_identity():
    first, second = Terminal("a"), Terminal("a")
    s = Sentence.of(first, second)
    assert s.index_of_symbol(second) == 1
    assert s.index_of_symbol(Terminal("a")) == -1
    assert s.indexes_of(Terminal("a")) == [0, 1]


def test_leftmost_macro_index():
    assert Sentence.of(a, Option(b), Option(c)).leftmost_macro_index() == 1
    assert Sentence.of(a).leftmost_macro_index() == -1


def test_derive():
    rule = ProductionRule(A, Sentence.of(b, B))
    step = Sentence.of(a, A, c).derive(1, rule)
    assert step.derived == Sentence.of(a, b, B, c)
    assert step.non_terminal == A
    assert step.position == 1


def test_derive_epsilon_production():
    rule = ProductionRule(A, Sentence.of(EPSILON))
    assert Sentence.of(a, A).derive(1, rule).derived == Sentence.of(a)
    assert Sentence.of(A).derive(0, rule).derived == Sentence.of(EPSILON)


def test_derive_leftmost_and_rightmost():
    rule = ProductionRule(A, Sentence.of(b))
    s = Sentence.of(A, a, A)
    assert s.derive_leftmost(rule).derived == Sentence.of(b, a, A)
    assert s.derive_rightmost(rule).derived == Sentence.of(A, a, b)


def test_derive_checks_its_arguments():
    rule = ProductionRule(A, Sentence.of(b))
    with pytest.raises(PreconditionError):
        Sentence.of(a, A).derive(0, rule)
    with pytest.raises(PreconditionError):
        Sentence.of(B).derive(0, rule)
    with pytest.raises(PreconditionError):
        Sentence.of(A).derive(3, rule)
    with pytest.raises(PreconditionError):
        Sentence.of(a).derive_leftmost(rule)
