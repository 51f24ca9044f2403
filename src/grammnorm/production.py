"""Production rules and the production set.

The ProductionSet is the one mutable structure in the engine.
A transformation is handed the set and has it to itself until it
returns; nothing in here is safe for concurrent mutation.
"""

from typing import Callable, Dict, Iterable, Iterator, List, Optional, Set, Union

import grammnorm.config as config
from grammnorm.errors import PreconditionError
from grammnorm.sentence import Sentence
from grammnorm.symbols import Symbol, NonTerminal, Terminal, EPSILON

import logging
logging.basicConfig()
log = logging.getLogger(__name__)
log.setLevel(logging.INFO)


class ProductionRule:
    """head -> body.  An empty body is stored as the single symbol ε."""

    def __init__(self, head: Union[NonTerminal, str], body: Iterable[Symbol] = ()):
        if isinstance(head, str):
            head = NonTerminal(head)
        self.head = head
        body = body if isinstance(body, Sentence) else Sentence(body)
        self.body = body if len(body) > 0 else Sentence.of(EPSILON)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ProductionRule) \
            and other.head == self.head and other.body == self.body

    def __hash__(self) -> int:
        return hash((self.head, self.body))

    def __str__(self) -> str:
        return f"{self.head} -> {self.body}"

    def __repr__(self) -> str:
        return f"ProductionRule({self})"

    def is_left_recursive(self) -> bool:
        return self.body.leftmost_symbol() == self.head

    def is_unit_production(self) -> bool:
        return len(self.body) == 1 and self.body[0].is_non_terminal

    def is_epsilon_production(self) -> bool:
        return self.body.is_epsilon()

    def contains_macro(self) -> bool:
        return self.body.contains_macro()


def _names_in(symbols: Iterable[Symbol], names: Set[str]):
    """Collect non-terminal names, looking inside macros too"""
    for sym in symbols:
        if sym.is_non_terminal:
            names.add(sym.name)
        elif sym.is_macro:
            for part in getattr(sym, "alternatives", (getattr(sym, "symbols", ()),)):
                _names_in(part, names)


class ProductionSet:
    """An ordered list of production rules and a start symbol.
    The order of rules with the same head is the priority order
    of the alternatives, so we preserve it through every rewrite.
    """

    def __init__(self, productions: Iterable[ProductionRule] = (),
                 start: Optional[Union[NonTerminal, str]] = None):
        self.productions: List[ProductionRule] = list(productions)
        if isinstance(start, str):
            start = NonTerminal(start)
        if start is None and self.productions:
            start = self.productions[0].head
        self.start: Optional[NonTerminal] = start

    def __len__(self) -> int:
        return len(self.productions)

    def __iter__(self) -> Iterator[ProductionRule]:
        return iter(self.productions)

    def __getitem__(self, index: int) -> ProductionRule:
        return self.productions[index]

    def __contains__(self, rule: ProductionRule) -> bool:
        return rule in self.productions

    def __eq__(self, other: object) -> bool:
        return isinstance(other, ProductionSet) \
            and other.start == self.start and other.productions == self.productions

    def __str__(self) -> str:
        return "\n".join(str(rule) for rule in self.productions)

    def __repr__(self) -> str:
        return f"ProductionSet(start={self.start}, {len(self.productions)} productions)"

    def copy(self) -> "ProductionSet":
        return ProductionSet(self.productions, self.start)

    # Lookup

    def lookup(self, nt: NonTerminal) -> List[ProductionRule]:
        """All rules for nt, in insertion order"""
        return [rule for rule in self.productions if rule.head == nt]

    def non_terminals(self) -> List[NonTerminal]:
        """Distinct heads, in order of first appearance"""
        return list(dict.fromkeys(rule.head for rule in self.productions))

    def terminals(self) -> List[Terminal]:
        return list(dict.fromkeys(sym for rule in self.productions
                                  for sym in rule.body if sym.is_terminal))

    def group_by_head(self) -> Dict[NonTerminal, List[ProductionRule]]:
        groups: Dict[NonTerminal, List[ProductionRule]] = {}
        for rule in self.productions:
            groups.setdefault(rule.head, []).append(rule)
        return groups

    def subset(self, rules: Iterable[ProductionRule]) -> "ProductionSet":
        """A new set holding just these rules, same start symbol"""
        return ProductionSet(rules, self.start)

    # Mutation

    def add(self, *rules: ProductionRule):
        self.productions.extend(rules)

    def remove(self, *rules: ProductionRule):
        """Remove the first occurrence of each rule"""
        for rule in rules:
            self.productions.remove(rule)

    def remove_at(self, index: int) -> ProductionRule:
        return self.productions.pop(index)

    def replace(self, rule: ProductionRule, replacements: Iterable[ProductionRule]):
        """Put replacements where the first occurrence of rule was"""
        index = self.productions.index(rule)
        self.productions[index:index + 1] = list(replacements)

    def retain(self, keep: Callable[[ProductionRule], bool]) -> List[ProductionRule]:
        """Drop the rules for which keep is false; return them"""
        dropped = [rule for rule in self.productions if not keep(rule)]
        self.productions = [rule for rule in self.productions if keep(rule)]
        return dropped

    def create_prime(self, nt: NonTerminal) -> NonTerminal:
        """A non-terminal named like nt with one or more prime
        marks appended, not used anywhere in the set yet.
        """
        taken: Set[str] = set()
        for rule in self.productions:
            taken.add(rule.head.name)
            _names_in(rule.body, taken)
        name = nt.name + config.PRIME
        while name in taken:
            name += config.PRIME
        return NonTerminal(name)

    # Preconditions

    def contains_macro(self) -> bool:
        return any(rule.contains_macro() for rule in self.productions)

    def ensure_no_macros(self):
        if self.contains_macro():
            raise PreconditionError("The production set contains macros; expand them first")

    def ensure_start(self) -> NonTerminal:
        if self.start is None:
            raise PreconditionError("The production set has no start symbol")
        if self.productions and not self.lookup(self.start):
            raise PreconditionError(f"Start symbol {self.start} is not the head of any production")
        return self.start

    # Notation

    def to_ebnf(self) -> str:
        """One line per non-terminal, alternatives separated by |"""
        lines = []
        for head, rules in self.group_by_head().items():
            alts = " | ".join(str(rule.body) for rule in rules)
            lines.append(f"{head} ::= {alts} ;")
        return "\n".join(lines)
