"""Unit production expansion"""

from grammnorm.production import ProductionRule, ProductionSet
from grammnorm.records import Reason
from grammnorm.sentence import Sentence
from grammnorm.symbols import Terminal, NonTerminal
from grammnorm.unit_productions import UnitProductions

a, b, c = Terminal("a"), Terminal("b"), Terminal("c")
A, B, C = (NonTerminal(n) for n in "ABC")


def rule(head, *body):
    return ProductionRule(head, Sentence.of(*body))


def test_unit_production_takes_target_alternatives():
    prods = ProductionSet([rule(A, B), rule(B, b), rule(B, C, c), rule(C, c)], A)
    records = UnitProductions(prods).transform()
    assert prods.productions == [rule(A, b), rule(A, C, c), rule(B, b), rule(B, C, c), rule(C, c)]
    assert len(records) == 1
    assert records[0].reason == Reason.UNIT_PRODUCTION_EXPANSION
    assert list(records[0].replacements) == [rule(A, b), rule(A, C, c)]


def test_unit_chains_are_followed():
    prods = ProductionSet([rule(A, B), rule(B, C), rule(C, c)], A)
    UnitProductions(prods).transform()
    assert prods.lookup(A) == [rule(A, c)]
    assert not any(r.is_unit_production() for r in prods)


def test_self_loop_is_ignored():
    prods = ProductionSet([rule(A, A), rule(A, a)], A)
    xform = UnitProductions(prods)
    assert len(xform.transform()) == 0
    assert xform.ignored == [rule(A, A)]
    assert prods.productions == [rule(A, A), rule(A, a)]


def test_mutual_units_terminate():
    prods = ProductionSet([rule(A, B), rule(B, A), rule(B, b)], A)
    UnitProductions(prods).transform()
    assert rule(A, b) in prods
    assert rule(A, B) not in prods


def test_unit_to_undefined_symbol_is_left_alone():
    prods = ProductionSet([rule(A, B)], A)
    assert len(UnitProductions(prods).transform()) == 0
    assert prods.productions == [rule(A, B)]
