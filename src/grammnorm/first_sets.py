"""FIRST and FOLLOW sets.

FIRST(A) is the set of terminals that can begin a string derived
from A, plus whether A can derive the empty string.  FOLLOW(A) is
the set of terminals that can come right after A in some sentential
form derived from the start symbol, with the end-of-input terminal
following the start symbol.  Both are the usual fixpoints over the
whole production set, which must be macro-free.
"""

from typing import Dict, FrozenSet, Iterable, List, Set, Tuple

import grammnorm.config as config
from grammnorm.production import ProductionSet
from grammnorm.symbols import NonTerminal, Symbol, Terminal

import logging
logging.basicConfig()
log = logging.getLogger(__name__)
log.setLevel(logging.INFO)

END_OF_INPUT = Terminal(config.END_OF_INPUT)


class FirstSet:
    def __init__(self, symbol: NonTerminal, terminals: Iterable[Terminal], contains_epsilon: bool):
        self.symbol = symbol
        self.terminals: FrozenSet[Terminal] = frozenset(terminals)
        self.contains_epsilon = contains_epsilon

    def overlaps(self, other: "FirstSet") -> bool:
        return bool(self.terminals & other.terminals) \
            or (self.contains_epsilon and other.contains_epsilon)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FirstSet) \
            and (other.symbol, other.terminals, other.contains_epsilon) == \
                (self.symbol, self.terminals, self.contains_epsilon)

    def __hash__(self) -> int:
        return hash((self.symbol, self.terminals, self.contains_epsilon))

    def __str__(self) -> str:
        items = sorted(str(t) for t in self.terminals)
        if self.contains_epsilon:
            items.append(config.EPSILON_TEXT)
        return f"FIRST({self.symbol}) = {{{', '.join(items)}}}"

    def __repr__(self) -> str:
        return str(self)


class FollowSet:
    def __init__(self, symbol: NonTerminal, terminals: Iterable[Terminal]):
        self.symbol = symbol
        self.terminals: FrozenSet[Terminal] = frozenset(terminals)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, FollowSet) \
            and (other.symbol, other.terminals) == (self.symbol, self.terminals)

    def __hash__(self) -> int:
        return hash((self.symbol, self.terminals))

    def __str__(self) -> str:
        items = sorted(str(t) for t in self.terminals)
        return f"FOLLOW({self.symbol}) = {{{', '.join(items)}}}"

    def __repr__(self) -> str:
        return str(self)


def _first_of(symbols: Iterable[Symbol],
              first: Dict[NonTerminal, Set[Terminal]],
              nullable: Set[NonTerminal]) -> Tuple[Set[Terminal], bool]:
    """Terminals that can begin symbols, and whether symbols can vanish"""
    terminals: Set[Terminal] = set()
    for sym in symbols:
        if sym.is_terminal:
            terminals.add(sym)
            return terminals, False
        if sym.is_epsilon:
            continue
        assert sym.is_non_terminal, f"Unexpected {sym} in a macro-free sentence"
        terminals |= first.get(sym, set())
        if sym not in nullable:
            return terminals, False
    return terminals, True


def _fixpoint(productions: ProductionSet) -> Tuple[Dict[NonTerminal, Set[Terminal]], Set[NonTerminal]]:
    productions.ensure_no_macros()
    first: Dict[NonTerminal, Set[Terminal]] = {nt: set() for nt in productions.non_terminals()}
    nullable: Set[NonTerminal] = set()
    changed = True
    while changed:
        changed = False
        for rule in productions:
            terminals, vanishes = _first_of(rule.body, first, nullable)
            if not terminals <= first[rule.head]:
                first[rule.head] |= terminals
                changed = True
            if vanishes and rule.head not in nullable:
                nullable.add(rule.head)
                changed = True
    return first, nullable


def compute_first_sets(productions: ProductionSet) -> List[FirstSet]:
    """One FirstSet per non-terminal, in order of first appearance"""
    first, nullable = _fixpoint(productions)
    return [FirstSet(nt, first[nt], nt in nullable) for nt in productions.non_terminals()]


def compute_first_table(productions: ProductionSet) -> Dict[NonTerminal, FirstSet]:
    return {fs.symbol: fs for fs in compute_first_sets(productions)}


def first_of_sentence(productions: ProductionSet, symbols: Iterable[Symbol]) -> Tuple[FrozenSet[Terminal], bool]:
    """FIRST of an arbitrary sequence of symbols: the terminals
    and whether the whole sequence can derive ε
    """
    first, nullable = _fixpoint(productions)
    terminals, vanishes = _first_of(symbols, first, nullable)
    return frozenset(terminals), vanishes


def compute_follow_sets(productions: ProductionSet) -> List[FollowSet]:
    start = productions.ensure_start()
    first, nullable = _fixpoint(productions)
    follow: Dict[NonTerminal, Set[Terminal]] = {nt: set() for nt in productions.non_terminals()}
    follow.setdefault(start, set()).add(END_OF_INPUT)
    changed = True
    while changed:
        changed = False
        for rule in productions:
            body = rule.body.symbols
            for i, sym in enumerate(body):
                if not sym.is_non_terminal:
                    continue
                terminals, vanishes = _first_of(body[i + 1:], first, nullable)
                if vanishes:
                    terminals |= follow.get(rule.head, set())
                target = follow.setdefault(sym, set())
                if not terminals <= target:
                    target |= terminals
                    changed = True
    return [FollowSet(nt, follow[nt]) for nt in productions.non_terminals()]


def get_first_set_conflicts(productions: ProductionSet) -> List[ProductionSet]:
    """For each non-terminal, the alternatives whose FIRST sets
    overlap with another alternative's (an LL(1) FIRST/FIRST conflict)
    """
    first, nullable = _fixpoint(productions)
    conflicts = []
    for head, rules in productions.group_by_head().items():
        if len(rules) < 2:
            continue
        firsts = [FirstSet(head, *_first_of(rule.body, first, nullable)) for rule in rules]
        clashing = [rule for i, rule in enumerate(rules)
                    if any(i != j and firsts[i].overlaps(firsts[j]) for j in range(len(rules)))]
        if clashing:
            conflicts.append(productions.subset(clashing))
    return conflicts
