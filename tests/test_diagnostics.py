"""Grammar-quality diagnostics"""

from grammnorm.diagnostics import get_errors, get_ll1_errors, get_lr1_errors
from grammnorm.errors import AggregateGrammarError, Diagnostic
from grammnorm.left_recursion import LeftRecursionCycle
from grammnorm.production import ProductionRule, ProductionSet
from grammnorm.sentence import Sentence
from grammnorm.symbols import Terminal, NonTerminal

a, b = Terminal("a"), Terminal("b")
S, X, Y = NonTerminal("S"), NonTerminal("X"), NonTerminal("Y")


def rule(head, *body):
    return ProductionRule(head, Sentence.of(*body))


def test_clean_grammar_has_no_errors():
    prods = ProductionSet([rule(S, a, X), rule(X, b)], S)
    assert get_errors(prods) == []
    assert get_ll1_errors(prods) == []
    assert get_lr1_errors(prods) == []


def test_empty_grammar_has_no_errors():
    assert get_errors(ProductionSet()) == []


def test_unreachable_is_reported_with_its_productions():
    prods = ProductionSet([rule(S, a), rule(X, b)], S)
    errors = get_errors(prods)
    assert [e.title for e in errors] == ["Unreachable productions"]
    assert errors[0].data["productions"].productions == [rule(X, b)]
    assert errors[0].details["Non-terminals"] == "X"


def test_unrealizable_is_reported():
    prods = ProductionSet([rule(S, a), rule(S, X), rule(X, b, X)], S)
    errors = get_errors(prods)
    assert [e.title for e in errors] == ["Unrealizable productions"]
    assert "X -> b X" in str(errors[0])


def test_left_recursion_is_reported_as_cycles():
    prods = ProductionSet([rule(S, S, a), rule(S, b)], S)
    errors = get_errors(prods)
    assert [e.title for e in errors] == ["Left recursion"]
    cycles = errors[0].data["cycles"]
    assert len(cycles) == 1
    assert isinstance(cycles[0], LeftRecursionCycle)


def test_lr1_tolerates_left_recursion():
    prods = ProductionSet([rule(S, S, a), rule(S, b)], S)
    assert get_lr1_errors(prods) == []


def test_ll1_adds_first_conflicts():
    prods = ProductionSet([rule(S, a, X), rule(S, a), rule(X, b)], S)
    assert get_errors(prods) == []
    assert [e.title for e in get_ll1_errors(prods)] == ["FIRST/FIRST conflicts"]


def test_checks_do_not_change_the_grammar():
    prods = ProductionSet([rule(S, S, a), rule(S, b), rule(X, b)], S)
    before = prods.copy()
    get_ll1_errors(prods)
    assert prods == before


def test_aggregate_error_carries_diagnostics():
    diagnostic = Diagnostic("Unreachable productions").add_detail("Non-terminals", "X")
    error = AggregateGrammarError([diagnostic])
    assert error.diagnostics == [diagnostic]
    assert "Unreachable productions" in str(error)
    assert str(diagnostic) == "Unreachable productions\n  Non-terminals:\n    X"
