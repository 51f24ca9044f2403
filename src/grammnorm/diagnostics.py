"""Grammar-quality checks.

These are expected outcomes on real grammars, not faults, so they
come back as a list of Diagnostic records; callers decide whether
to stop.  The production set must be macro-free.
"""

from typing import List

from grammnorm.errors import Diagnostic
from grammnorm.first_sets import get_first_set_conflicts
from grammnorm.left_recursion import find_left_recursion_cycles
from grammnorm.production import ProductionSet
from grammnorm.reachability import get_unreachable_productions, get_unrealizable_productions

import logging
logging.basicConfig()
log = logging.getLogger(__name__)
log.setLevel(logging.INFO)


def unrealizable_errors(productions: ProductionSet) -> List[Diagnostic]:
    dead = get_unrealizable_productions(productions)
    if len(dead) == 0:
        return []
    heads = ", ".join(str(nt) for nt in dead.non_terminals())
    return [Diagnostic("Unrealizable productions")
            .add_detail("Non-terminals", heads)
            .add_detail("Productions", str(dead))
            .add_data("productions", dead)]


def unreachable_errors(productions: ProductionSet) -> List[Diagnostic]:
    dead = get_unreachable_productions(productions)
    if len(dead) == 0:
        return []
    heads = ", ".join(str(nt) for nt in dead.non_terminals())
    return [Diagnostic("Unreachable productions")
            .add_detail("Non-terminals", heads)
            .add_detail("Productions", str(dead))
            .add_data("productions", dead)]


def left_recursion_errors(productions: ProductionSet) -> List[Diagnostic]:
    cycles = find_left_recursion_cycles(productions)
    if not cycles:
        return []
    diagnostic = Diagnostic("Left recursion").add_data("cycles", cycles)
    for i, cycle in enumerate(cycles):
        diagnostic.add_detail(f"Cycle {i + 1} at {cycle.root}", str(cycle))
    return [diagnostic]


def first_set_errors(productions: ProductionSet) -> List[Diagnostic]:
    conflicts = get_first_set_conflicts(productions)
    if not conflicts:
        return []
    diagnostic = Diagnostic("FIRST/FIRST conflicts").add_data("conflicts", conflicts)
    for conflict in conflicts:
        diagnostic.add_detail(f"Alternatives of {conflict[0].head}", str(conflict))
    return [diagnostic]


def get_errors(productions: ProductionSet) -> List[Diagnostic]:
    """Unrealizable productions, unreachable productions and
    left recursion cycles, in that order.
    """
    if len(productions) == 0:
        return []
    errors = unrealizable_errors(productions) \
        + unreachable_errors(productions) \
        + left_recursion_errors(productions)
    for error in errors:
        log.debug(f"{error}")
    return errors


def get_ll1_errors(productions: ProductionSet) -> List[Diagnostic]:
    """get_errors, plus alternatives that an LL(1) parser could
    not choose between on one token of lookahead.
    """
    if len(productions) == 0:
        return []
    return get_errors(productions) + first_set_errors(productions)


def get_lr1_errors(productions: ProductionSet) -> List[Diagnostic]:
    """An LR(1) table can live with left recursion and shared
    prefixes; it still needs every symbol realizable and reachable.
    """
    if len(productions) == 0:
        return []
    return unrealizable_errors(productions) + unreachable_errors(productions)
