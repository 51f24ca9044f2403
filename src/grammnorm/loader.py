"""Read and write grammars as YAML documents.

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

Body items are
    a name           non-terminal, or terminal kind if listed in 'terminals'
                     (with no 'terminals' list, any name that heads no
                     production is a terminal kind)
    "'text'"         a literal terminal
    "ε"              epsilon
    "|"              alternation; the alternatives around it are folded
                     into one Alternative
    {group: [...]}   ( ... )
    {option: [...]}  [ ... ]
    {repeat: [...]}  { ... }
    {alt: [[...], [...]]}  ( ... | ... )
A body may also be written as a single string of space-separated items.
An empty body is ε.
"""

import io
from typing import Dict, List, Optional, Set

import yaml
try:
    from yaml import CSafeLoader as Loader, CSafeDumper as Dumper
except ImportError:
    from yaml import SafeLoader as Loader, SafeDumper as Dumper

import grammnorm.config as config
from grammnorm.errors import GrammarError
from grammnorm.production import ProductionRule, ProductionSet
from grammnorm.symbols import (Symbol, Terminal, NonTerminal, EPSILON, PIPE,
                               Macro, MacroKind, Group, Option, Repetition, Alternative)

import logging
logging.basicConfig()
log = logging.getLogger(__name__)
log.setLevel(logging.INFO)


class GrammarFormatError(GrammarError):
    """The document is not a grammar in the expected shape"""
    pass


MACROS = {
    "group": Group,
    "option": Option,
    "repeat": Repetition,
}

MACRO_KEYS = {
    MacroKind.GROUP: "group",
    MacroKind.OPTION: "option",
    MacroKind.REPETITION: "repeat",
}


class _Reader:
    def __init__(self, heads: Set[str], terminals: Optional[Set[str]]):
        self.heads = heads
        self.terminals = terminals

    def symbol(self, item) -> Symbol:
        if isinstance(item, dict):
            return self.macro(item)
        if not isinstance(item, str):
            raise GrammarFormatError(f"Cannot read '{item}' as a grammar symbol")
        if item == "|":
            return PIPE
        if item == config.EPSILON_TEXT:
            return EPSILON
        if len(item) >= 2 and item[0] == item[-1] and item[0] in "'\"":
            literal = item[1:-1]
            if not literal:
                raise GrammarFormatError("Empty literal; write ε for the empty string")
            return Terminal(literal, literal)
        if self.terminals is not None:
            if item in self.terminals:
                return Terminal(item)
            return NonTerminal(item)
        if item in self.heads:
            return NonTerminal(item)
        return Terminal(item)

    def macro(self, item: dict) -> Macro:
        if len(item) != 1:
            raise GrammarFormatError(f"A macro is a mapping with exactly one key, not {item}")
        (key, value), = item.items()
        if key == "alt":
            if not isinstance(value, list) or not value:
                raise GrammarFormatError(f"'alt' needs a list of alternatives, not {value}")
            return Alternative(*[self.sentence(alt) for alt in value])
        if key not in MACROS:
            raise GrammarFormatError(f"Unknown macro '{key}'; expected one of {', '.join(MACROS)}, alt")
        return MACROS[key](*self.sentence(value))

    def sentence(self, body) -> List[Symbol]:
        if body is None:
            return []
        if isinstance(body, str):
            body = body.split()
        if not isinstance(body, list):
            raise GrammarFormatError(f"A body is a list of symbols, not {body}")
        return [self.symbol(item) for item in body]


def from_dict(doc: dict) -> ProductionSet:
    if not isinstance(doc, dict) or "productions" not in doc:
        raise GrammarFormatError("A grammar document needs a 'productions' table")
    table = doc["productions"]
    if not isinstance(table, dict):
        raise GrammarFormatError("'productions' must map each head to its list of bodies")
    terminals = doc.get("terminals")
    if terminals is not None and not (isinstance(terminals, list)
                                      and all(isinstance(t, str) for t in terminals)):
        raise GrammarFormatError("'terminals' must be a list of terminal kinds")
    start = doc.get("start")
    if start is not None and not isinstance(start, str):
        raise GrammarFormatError(f"'start' must be a non-terminal name, not {start}")
    reader = _Reader({str(head) for head in table},
                     None if terminals is None else set(terminals))
    rules = []
    for head, bodies in table.items():
        if not isinstance(bodies, list):
            bodies = [bodies]
        for body in bodies:
            rules.append(ProductionRule(NonTerminal(str(head)), reader.sentence(body)))
    productions = ProductionSet(rules, start)
    if rules:
        productions.ensure_start()
    log.debug(f"Read {len(rules)} productions for {len(table)} non-terminals")
    return productions


def load(f: io.IOBase) -> ProductionSet:
    try:
        doc = yaml.load(f, Loader=Loader)
    except yaml.YAMLError as e:
        raise GrammarFormatError(f"Not a YAML document: {e}")
    return from_dict(doc)


def _item(sym: Symbol):
    if sym.is_epsilon:
        return config.EPSILON_TEXT
    if sym.is_terminal:
        return f"'{sym.literal}'" if sym.literal else sym.token
    if sym.is_non_terminal:
        return sym.name
    if sym.macro_kind == MacroKind.ALTERNATIVE:
        return {"alt": [[_item(s) for s in alt] for alt in sym.alternatives]}
    return {MACRO_KEYS[sym.macro_kind]: [_item(s) for s in sym.symbols]}


def _terminal_kinds(productions: ProductionSet) -> List[str]:
    kinds: Dict[str, None] = {}

    def collect(symbols):
        for sym in symbols:
            if sym.is_terminal and not sym.literal:
                kinds[sym.token] = None
            elif sym.is_macro:
                for part in getattr(sym, "alternatives", (getattr(sym, "symbols", ()),)):
                    collect(part)

    for rule in productions:
        collect(rule.body)
    return list(kinds)


def to_dict(productions: ProductionSet) -> dict:
    table: Dict[str, list] = {}
    for rule in productions:
        table.setdefault(rule.head.name, []).append([_item(sym) for sym in rule.body])
    doc = {}
    if productions.start is not None:
        doc["start"] = productions.start.name
    doc["terminals"] = _terminal_kinds(productions)
    doc["productions"] = table
    return doc


def dump(productions: ProductionSet) -> str:
    return yaml.dump(to_dict(productions), Dumper=Dumper,
                     allow_unicode=True, sort_keys=False, default_flow_style=None)
