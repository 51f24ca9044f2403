"""Symbols, macros and their expansions"""

import pytest

from grammnorm.errors import PreconditionError
from grammnorm.symbols import (Terminal, NonTerminal, EPSILON, PIPE, SymbolKind, MacroKind,
                               Group, Option, Repetition, Alternative, fold_pipes)


def test_terminal_equality_uses_kind_and_literal():
    assert Terminal("num") == Terminal("num")
    assert Terminal("op", "+") == Terminal("op", "+")
    assert Terminal("op", "+") != Terminal("op", "-")
    assert Terminal("op", "+") != Terminal("op")
    assert len({Terminal("op", "+"), Terminal("op", "+")}) == 1


def test_terminal_text():
    assert str(Terminal("num")) == "num"
    assert str(Terminal("+", "+")) == "'+'"


def test_non_terminal_is_keyed_by_name():
    assert NonTerminal("expr") == NonTerminal("expr")
    assert hash(NonTerminal("expr")) == hash(NonTerminal("expr"))
    assert NonTerminal("expr") != Terminal("expr")


def test_non_terminal_rejects_bad_names():
    with pytest.raises(PreconditionError):
        NonTerminal("")
    with pytest.raises(PreconditionError):
        NonTerminal("ε")


def test_kind_tags():
    assert Terminal("a").kind == SymbolKind.TERMINAL
    assert NonTerminal("A").is_non_terminal
    assert EPSILON.is_epsilon
    assert Option(Terminal("a")).is_macro
    assert Option(Terminal("a")).macro_kind == MacroKind.OPTION


def test_fold_pipes():
    a, b, c = Terminal("a"), Terminal("b"), Terminal("c")
    assert fold_pipes([a, b]) == (a, b)
    folded = fold_pipes([a, b, PIPE, c])
    assert folded == (Alternative((a, b), (c,)),)


def test_empty_alternative_is_epsilon():
    a = Terminal("a")
    assert fold_pipes([a, PIPE]) == (Alternative((a,), (EPSILON,)),)


def test_macro_must_wrap_something():
    with pytest.raises(PreconditionError):
        Group()
    with pytest.raises(PreconditionError):
        Alternative()


def test_macro_expansions():
    a, b = Terminal("a"), Terminal("b")
    x = NonTerminal("X")
    assert Group(a, b).expand(x) == [(a, b)]
    assert Option(a).expand(x) == [(a,), (EPSILON,)]
    assert Repetition(a).expand(x) == [(a, x), (EPSILON,)]
    assert Alternative((a,), (b,)).expand(x) == [(a,), (b,)]


def test_macro_text():
    a, b = Terminal("a"), Terminal("b")
    assert str(Option(a)) == "[ a ]"
    assert str(Repetition(a, b)) == "{ a b }"
    assert str(Group(a, PIPE, b)) == "( ( a | b ) )"


def test_macros_compare_structurally():
    a = Terminal("a")
    assert Option(a) == Option(Terminal("a"))
    assert Option(a) != Group(a)
    assert Option(a) != Repetition(a)
