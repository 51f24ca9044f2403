"""Sentences (sequences of grammar symbols) and single derivation steps.

A Sentence is immutable: add, insert_at, remove_at and replace all
return a new Sentence, so anyone holding an earlier one keeps it intact.
Equality is structural, symbol by symbol.
"""

from typing import Iterable, Iterator, List, Optional, Union, TYPE_CHECKING

from grammnorm.errors import PreconditionError
from grammnorm.symbols import Symbol, NonTerminal, Terminal, EPSILON, fold_pipes

if TYPE_CHECKING:
    from grammnorm.production import ProductionRule


SymbolOrSymbols = Union[Symbol, Iterable[Symbol]]


def _as_symbols(item: SymbolOrSymbols) -> tuple:
    if isinstance(item, Symbol):
        return (item,)
    return tuple(item)


class Sentence:
    """An ordered sequence of symbols"""

    def __init__(self, symbols: Iterable[Symbol] = ()):
        self.symbols = fold_pipes(symbols)

    @classmethod
    def of(cls, *symbols: Symbol) -> "Sentence":
        return cls(symbols)

    @classmethod
    def join(cls, *parts: SymbolOrSymbols) -> "Sentence":
        """Concatenation that drops epsilons, unless nothing else is
        left, in which case the result is the single symbol ε.
        """
        symbols = [sym for part in parts for sym in _as_symbols(part)
                   if not sym.is_epsilon]
        return cls(symbols or [EPSILON])

    def __len__(self) -> int:
        return len(self.symbols)

    def __iter__(self) -> Iterator[Symbol]:
        return iter(self.symbols)

    def __getitem__(self, index):
        if isinstance(index, slice):
            return Sentence(self.symbols[index])
        return self.symbols[index]

    def __contains__(self, sym: Symbol) -> bool:
        return sym in self.symbols

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Sentence) and other.symbols == self.symbols

    def __hash__(self) -> int:
        return hash(self.symbols)

    def __add__(self, other: SymbolOrSymbols) -> "Sentence":
        return self.add(other)

    def __str__(self) -> str:
        return " ".join(str(sym) for sym in self.symbols)

    def __repr__(self) -> str:
        return f"Sentence({self})"

    # Structural edits; each returns a new sentence

    def add(self, item: SymbolOrSymbols) -> "Sentence":
        return Sentence(self.symbols + _as_symbols(item))

    def insert_at(self, index: int, item: SymbolOrSymbols) -> "Sentence":
        self._check_index(index, allow_end=True)
        return Sentence(self.symbols[:index] + _as_symbols(item) + self.symbols[index:])

    def remove_at(self, index: int) -> "Sentence":
        self._check_index(index)
        return Sentence(self.symbols[:index] + self.symbols[index + 1:])

    def replace(self, index: int, item: SymbolOrSymbols) -> "Sentence":
        """Replace the symbol at index by one or more symbols"""
        self._check_index(index)
        return Sentence(self.symbols[:index] + _as_symbols(item) + self.symbols[index + 1:])

    def _check_index(self, index: int, allow_end: bool = False):
        limit = len(self.symbols) + (1 if allow_end else 0)
        if not 0 <= index < limit:
            raise PreconditionError(f"Position {index} is out of range for '{self}'")

    # Queries

    def is_empty(self) -> bool:
        return len(self.symbols) == 0

    def is_epsilon(self) -> bool:
        """True if the sentence derives only the empty string
        by itself, i.e., it is empty or all ε.
        """
        return all(sym.is_epsilon for sym in self.symbols)

    def contains_macro(self) -> bool:
        return any(sym.is_macro for sym in self.symbols)

    def index_of_symbol(self, symbol: Symbol) -> int:
        """Position of this very symbol object (identity, not equality),
        or -1.  Used to target one occurrence among equal-looking ones.
        """
        for i, sym in enumerate(self.symbols):
            if sym is symbol:
                return i
        return -1

    def leftmost_macro_index(self) -> int:
        for i, sym in enumerate(self.symbols):
            if sym.is_macro:
                return i
        return -1

    def indexes_of(self, symbol: Symbol) -> List[int]:
        return [i for i, sym in enumerate(self.symbols) if sym == symbol]

    def leftmost_symbol(self) -> Optional[Symbol]:
        return self.symbols[0] if self.symbols else None

    def rightmost_symbol(self) -> Optional[Symbol]:
        return self.symbols[-1] if self.symbols else None

    def leftmost_non_terminal(self) -> Optional[NonTerminal]:
        return next((sym for sym in self.symbols if sym.is_non_terminal), None)

    def rightmost_non_terminal(self) -> Optional[NonTerminal]:
        return next((sym for sym in reversed(self.symbols) if sym.is_non_terminal), None)

    def leftmost_terminal(self) -> Optional[Terminal]:
        return next((sym for sym in self.symbols if sym.is_terminal), None)

    def rightmost_terminal(self) -> Optional[Terminal]:
        return next((sym for sym in reversed(self.symbols) if sym.is_terminal), None)

    # Derivations

    def derive(self, index: int, production: "ProductionRule") -> "Derivation":
        """Rewrite the non-terminal at index with the body of production"""
        self._check_index(index)
        sym = self.symbols[index]
        if not sym.is_non_terminal:
            raise PreconditionError(f"Cannot derive from {sym} at position {index}: not a non-terminal")
        if sym != production.head:
            raise PreconditionError(f"{sym} at position {index} does not match the head of {production}")
        body = () if production.body.is_epsilon() else production.body.symbols
        derived = Sentence.join(self.symbols[:index], body, self.symbols[index + 1:])
        return Derivation(production, sym, self, derived, index)

    def derive_leftmost(self, production: "ProductionRule") -> "Derivation":
        for i, sym in enumerate(self.symbols):
            if sym.is_non_terminal:
                return self.derive(i, production)
        raise PreconditionError(f"No non-terminal in '{self}'")

    def derive_rightmost(self, production: "ProductionRule") -> "Derivation":
        for i in reversed(range(len(self.symbols))):
            if self.symbols[i].is_non_terminal:
                return self.derive(i, production)
        raise PreconditionError(f"No non-terminal in '{self}'")


class Derivation:
    """One step  original => derived,  rewriting non_terminal
    (at position) with production.
    """

    def __init__(self, production: "ProductionRule", non_terminal: NonTerminal,
                 original: Sentence, derived: Sentence, position: int):
        assert original[position] == non_terminal == production.head
        self.production = production
        self.non_terminal = non_terminal
        self.original = original
        self.derived = derived
        self.position = position

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Derivation) \
            and (other.production, other.original, other.position) == \
                (self.production, self.original, self.position)

    def __hash__(self) -> int:
        return hash((self.production, self.original, self.position))

    def __str__(self) -> str:
        return f"{self.production}  ({self.original} => {self.derived})"

    def __repr__(self) -> str:
        return f"Derivation({self})"
