"""Reachability and realizability of non-terminals.

Reachable:  appears in some sentential form derived from the start symbol.
Realizable: derives, in finitely many steps, a string with no
            non-terminals in it.
Productions for unreachable non-terminals can be dropped without
changing the language; unrealizable ones point at a broken grammar.
"""

from collections import deque
from typing import List, Set

from grammnorm.production import ProductionSet
from grammnorm.records import Reason
from grammnorm.symbols import NonTerminal
from grammnorm.transform import TransformBase

import logging
logging.basicConfig()
log = logging.getLogger(__name__)
log.setLevel(logging.INFO)


def reachable(productions: ProductionSet) -> List[NonTerminal]:
    """Breadth-first from the start symbol, in visiting order"""
    productions.ensure_no_macros()
    start = productions.ensure_start()
    groups = productions.group_by_head()
    seen = {start}
    order = [start]
    queue = deque([start])
    while queue:
        nt = queue.popleft()
        for rule in groups.get(nt, []):
            for sym in rule.body:
                if sym.is_non_terminal and sym not in seen:
                    seen.add(sym)
                    order.append(sym)
                    queue.append(sym)
    return order


def unreachable(productions: ProductionSet) -> List[NonTerminal]:
    """Heads of productions that cannot be reached from the start symbol"""
    reached = set(reachable(productions))
    return [nt for nt in productions.non_terminals() if nt not in reached]


def get_unreachable_productions(productions: ProductionSet) -> ProductionSet:
    dead = set(unreachable(productions))
    return productions.subset(rule for rule in productions if rule.head in dead)


def realizable(productions: ProductionSet) -> Set[NonTerminal]:
    """Fixpoint: start from non-terminals with an alternative made only
    of terminals and ε, then add any non-terminal with an alternative
    whose non-terminals are all known to be realizable.
    """
    productions.ensure_no_macros()
    known: Set[NonTerminal] = set()
    changed = True
    while changed:
        changed = False
        for rule in productions:
            if rule.head in known:
                continue
            if all(not sym.is_non_terminal or sym in known for sym in rule.body):
                known.add(rule.head)
                changed = True
    return known


def unrealizable(productions: ProductionSet) -> List[NonTerminal]:
    known = realizable(productions)
    return [nt for nt in productions.non_terminals() if nt not in known]


def get_unrealizable_productions(productions: ProductionSet) -> ProductionSet:
    dead = set(unrealizable(productions))
    return productions.subset(rule for rule in productions if rule.head in dead)


class UnreachableRemoval(TransformBase):
    """Prune productions of unreachable non-terminals"""
    reason = Reason.UNREACHABLE_SYMBOL_REMOVAL

    def apply(self):
        if len(self.productions) == 0:
            return
        reached = set(reachable(self.productions))
        dropped = self.productions.retain(lambda rule: rule.head in reached)
        for rule in dropped:
            self.commit(rule)
        if dropped:
            dead = ", ".join(str(nt) for nt in dict.fromkeys(rule.head for rule in dropped))
            log.debug(f"Unreachable symbols removed: {dead}")
