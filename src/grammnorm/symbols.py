"""Grammar symbols.

The set of symbol variants is closed:
   Terminal     -- a token kind, optionally with the literal text
   NonTerminal  -- a name; primary key for production lookup
   Epsilon      -- the empty string
   Macro        -- Group ( ... ), Option [ ... ], Repetition { ... },
                   Alternative ( a | b | ... )
Every symbol carries a SymbolKind tag (and macros a MacroKind tag),
and code that must treat each variant differently dispatches on the
tag rather than on the Python class.

PIPE is not a grammar symbol: it is the bare '|' separator, accepted
only while a sentence or macro body is being built, and folded into a
single Alternative macro at that point.
"""

from enum import Enum
from typing import Callable, Dict, Iterable, List, Optional, Sequence, Tuple

import grammnorm.config as config
from grammnorm.errors import PreconditionError


class SymbolKind(Enum):
    TERMINAL = "terminal"
    NON_TERMINAL = "non-terminal"
    EPSILON = "epsilon"
    MACRO = "macro"
    PIPE = "pipe"


class MacroKind(Enum):
    GROUP = "group"
    OPTION = "option"
    REPETITION = "repetition"
    ALTERNATIVE = "alternative"


class Symbol:
    """Abstract base class for grammar symbols"""
    kind: SymbolKind

    @property
    def is_terminal(self) -> bool:
        return self.kind == SymbolKind.TERMINAL

    @property
    def is_non_terminal(self) -> bool:
        return self.kind == SymbolKind.NON_TERMINAL

    @property
    def is_epsilon(self) -> bool:
        return self.kind == SymbolKind.EPSILON

    @property
    def is_macro(self) -> bool:
        return self.kind == SymbolKind.MACRO

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self})"


class Terminal(Symbol):
    """A token kind, with an optional literal.  Two terminals
    are equal iff both the kind and the literal match.
    """
    kind = SymbolKind.TERMINAL

    def __init__(self, token: str, literal: Optional[str] = None):
        self.token = token
        self.literal = literal

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Terminal) \
            and other.token == self.token and other.literal == self.literal

    def __hash__(self) -> int:
        return hash((self.kind, self.token, self.literal))

    def __str__(self) -> str:
        if self.literal:
            return f"'{self.literal}'"
        return self.token


class NonTerminal(Symbol):
    kind = SymbolKind.NON_TERMINAL

    def __init__(self, name: str):
        if not name or name == config.EPSILON_TEXT:
            raise PreconditionError(f"'{name}' is not a valid non-terminal name")
        self.name = name

    def __eq__(self, other: object) -> bool:
        return isinstance(other, NonTerminal) and other.name == self.name

    def __hash__(self) -> int:
        return hash((self.kind, self.name))

    def __str__(self) -> str:
        return self.name


class Epsilon(Symbol):
    kind = SymbolKind.EPSILON

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Epsilon)

    def __hash__(self) -> int:
        return hash(self.kind)

    def __str__(self) -> str:
        return config.EPSILON_TEXT

    def __repr__(self) -> str:
        return "EPSILON"


EPSILON = Epsilon()


class _Pipe(Symbol):
    kind = SymbolKind.PIPE

    def __eq__(self, other: object) -> bool:
        return isinstance(other, _Pipe)

    def __hash__(self) -> int:
        return hash(self.kind)

    def __str__(self) -> str:
        return "|"

    def __repr__(self) -> str:
        return "PIPE"


PIPE = _Pipe()


def fold_pipes(symbols: Iterable[Symbol]) -> Tuple[Symbol, ...]:
    """a b | c  ==>  ( a b | c ) as a single Alternative.
    An empty alternative stands for epsilon.
    """
    symbols = tuple(symbols)
    if PIPE not in symbols:
        return symbols
    alternatives: List[List[Symbol]] = [[]]
    for sym in symbols:
        if sym == PIPE:
            alternatives.append([])
        else:
            alternatives[-1].append(sym)
    return (Alternative(*alternatives),)


class Macro(Symbol):
    """EBNF shorthand that must be expanded before analysis.
    expand(fresh) gives the bodies of the productions for 'fresh',
    the non-terminal that replaces the macro occurrence.
    """
    kind = SymbolKind.MACRO
    macro_kind: MacroKind

    def expand(self, fresh: "NonTerminal") -> List[Tuple[Symbol, ...]]:
        expansion = _EXPANSIONS.get(self.macro_kind)
        assert expansion is not None, f"No expansion rule for {self.macro_kind}"
        return expansion(self, fresh)


class _SentenceMacro(Macro):
    """A macro wrapping one sub-sentence"""
    opener = "("
    closer = ")"

    def __init__(self, *symbols: Symbol):
        self.symbols = fold_pipes(symbols)
        if len(self.symbols) == 0:
            raise PreconditionError(f"{self.__class__.__name__} must wrap at least one symbol")

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Macro) and other.macro_kind == self.macro_kind \
            and other.symbols == self.symbols

    def __hash__(self) -> int:
        return hash((self.macro_kind, self.symbols))

    def __str__(self) -> str:
        inner = " ".join(str(sym) for sym in self.symbols)
        return f"{self.opener} {inner} {self.closer}"


class Group(_SentenceMacro):
    macro_kind = MacroKind.GROUP


class Option(_SentenceMacro):
    macro_kind = MacroKind.OPTION
    opener = "["
    closer = "]"


class Repetition(_SentenceMacro):
    macro_kind = MacroKind.REPETITION
    opener = "{"
    closer = "}"


class Alternative(Macro):
    """( a b | c | ... ), one sentence per alternative"""
    macro_kind = MacroKind.ALTERNATIVE

    def __init__(self, *alternatives: Sequence[Symbol]):
        if len(alternatives) == 0:
            raise PreconditionError("Alternative must have at least one alternative")
        self.alternatives = tuple(tuple(alt) or (EPSILON,) for alt in alternatives)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, Alternative) and other.alternatives == self.alternatives

    def __hash__(self) -> int:
        return hash((self.macro_kind, self.alternatives))

    def __str__(self) -> str:
        alts = " | ".join(" ".join(str(sym) for sym in alt) for alt in self.alternatives)
        return f"( {alts} )"


# How each kind of macro turns into productions for the fresh
# non-terminal X that takes its place:
#   ( a b )        X -> a b
#   [ a b ]        X -> a b | ε
#   { a b }        X -> a b X | ε
#   ( a | b c )    X -> a | b c
_EXPANSIONS: Dict[MacroKind, Callable[[Macro, NonTerminal], List[Tuple[Symbol, ...]]]] = {
    MacroKind.GROUP: lambda m, fresh: [m.symbols],
    MacroKind.OPTION: lambda m, fresh: [m.symbols, (EPSILON,)],
    MacroKind.REPETITION: lambda m, fresh: [m.symbols + (fresh,), (EPSILON,)],
    MacroKind.ALTERNATIVE: lambda m, fresh: list(m.alternatives),
}
assert set(_EXPANSIONS) == set(MacroKind), "Every macro kind needs an expansion rule"
