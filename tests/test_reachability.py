"""Reachable and realizable non-terminals"""

import pytest

from grammnorm.errors import PreconditionError
from grammnorm.production import ProductionRule, ProductionSet
from grammnorm.reachability import (reachable, unreachable, get_unreachable_productions,
                                    realizable, unrealizable, get_unrealizable_productions,
                                    UnreachableRemoval)
from grammnorm.records import Reason
from grammnorm.sentence import Sentence
from grammnorm.symbols import Terminal, NonTerminal, Option

a, b = Terminal("a"), Terminal("b")
S, X, Y, Z = (NonTerminal(n) for n in "SXYZ")


def rule(head, *body):
    return ProductionRule(head, Sentence.of(*body))


def test_remove_unreferenced_symbol():
    prods = ProductionSet([rule(S, a), rule(X, b)], S)
    records = UnreachableRemoval(prods).transform()
    assert prods.productions == [rule(S, a)]
    assert len(records) == 1
    assert records[0].original == rule(X, b)
    assert records[0].reason == Reason.UNREACHABLE_SYMBOL_REMOVAL
    assert records[0].replacements == ()


def test_reachable_in_breadth_first_order():
    prods = ProductionSet([rule(S, X, Y), rule(X, Z), rule(Y, a), rule(Z, b)], S)
    assert reachable(prods) == [S, X, Y, Z]
    assert unreachable(prods) == []


def test_unreachable_cluster():
    prods = ProductionSet([rule(S, a), rule(X, Y), rule(Y, X), rule(Y, b)], S)
    assert unreachable(prods) == [X, Y]
    assert get_unreachable_productions(prods).productions == [rule(X, Y), rule(Y, X), rule(Y, b)]


def test_every_remaining_symbol_is_reachable():
    prods = ProductionSet([rule(S, X), rule(X, a), rule(Y, Z), rule(Z, Y)], S)
    UnreachableRemoval(prods).transform()
    reached = set(reachable(prods))
    assert all(r.head in reached for r in prods)
    assert len(UnreachableRemoval(prods).transform()) == 0


def test_realizable_needs_one_terminating_alternative():
    prods = ProductionSet([rule(S, a), rule(S, X), rule(X, b, X)], S)
    assert realizable(prods) == {S}
    assert unrealizable(prods) == [X]
    assert get_unrealizable_productions(prods).productions == [rule(X, b, X)]


def test_realizable_through_other_symbols():
    prods = ProductionSet([rule(S, X, Y), rule(X, Y), rule(Y, a)], S)
    assert realizable(prods) == {S, X, Y}


def test_analyses_need_macro_free_set():
    prods = ProductionSet([rule(S, Option(a))], S)
    with pytest.raises(PreconditionError):
        reachable(prods)
    with pytest.raises(PreconditionError):
        realizable(prods)


def test_reachable_needs_start_symbol():
    with pytest.raises(PreconditionError):
        reachable(ProductionSet([rule(S, a)], "Q"))
