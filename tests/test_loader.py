"""Grammar documents"""

import io

import pytest

from grammnorm import loader, pipeline
from grammnorm.errors import PreconditionError
from grammnorm.loader import GrammarFormatError
from grammnorm.production import ProductionRule
from grammnorm.sentence import Sentence
from grammnorm.symbols import Terminal, NonTerminal, EPSILON, Option, Repetition, Group, Alternative

EXPR = """
start: expr
terminals: [num]
productions:
  expr:
    - [expr, "'+'", term]
    - [term]
  term:
    - [num]
    - ["'('", expr, "')'"]
    - [{option: ["'-'"]}, term]
"""

expr, term = NonTerminal("expr"), NonTerminal("term")
num = Terminal("num")
plus, minus, lpar, rpar = (Terminal(t, t) for t in "+-()")


def rule(head, *body):
    return ProductionRule(head, Sentence.of(*body))


def test_load_document():
    prods = loader.load(io.StringIO(EXPR))
    assert prods.start == expr
    assert prods.productions == [
        rule(expr, expr, plus, term),
        rule(expr, term),
        rule(term, num),
        rule(term, lpar, expr, rpar),
        rule(term, Option(minus), term),
    ]


def test_names_that_head_nothing_are_terminals():
    prods = loader.load(io.StringIO("productions:\n  S: [[a, S, b], []]\n"))
    S = NonTerminal("S")
    assert prods.start == S
    assert prods.productions == [rule(S, Terminal("a"), S, Terminal("b")), rule(S, EPSILON)]


def test_string_bodies_and_macros():
    doc = """
start: S
productions:
  S:
    - "x | y"
    - [{repeat: [x]}, {group: [x, "|", y]}, {alt: [[x], []]}]
    - ε
"""
    prods = loader.load(io.StringIO(doc))
    x, y = Terminal("x"), Terminal("y")
    assert prods[0].body == Sentence.of(Alternative((x,), (y,)))
    assert prods[1].body == Sentence.of(Repetition(x), Group(Alternative((x,), (y,))),
                                        Alternative((x,), (EPSILON,)))
    assert prods[2].body == Sentence.of(EPSILON)


def test_round_trip():
    prods = loader.load(io.StringIO(EXPR))
    pipeline.auto_transform(prods)
    again = loader.load(io.StringIO(loader.dump(prods)))
    assert again == prods


def test_dump_keeps_macros():
    prods = loader.load(io.StringIO(EXPR))
    assert loader.load(io.StringIO(loader.dump(prods))) == prods


@pytest.mark.parametrize("doc", [
    "start: S\n",
    "productions: [a, b]\n",
    "productions:\n  S: [[{bogus: [a]}]]\n",
    "productions:\n  S: [[{option: [a], group: [b]}]]\n",
    "productions:\n  S: [[\"''\"]]\n",
    "productions:\n  S: [[3]]\n",
    "productions: [a, b\n",
    "terminals: 5\nproductions:\n  S: [[a]]\n",
    "terminals: [[a]]\nproductions:\n  S: [[a]]\n",
    "start: [S]\nproductions:\n  S: [[a]]\n",
])
def test_malformed_documents(doc):
    with pytest.raises(GrammarFormatError):
        loader.load(io.StringIO(doc))


def test_unknown_start_symbol():
    with pytest.raises(PreconditionError):
        loader.load(io.StringIO("start: T\nproductions:\n  S: [[a]]\n"))
