"""Detection and removal of left recursion.

Direct left recursion is removed by the usual rewrite:
    A ::= A α1 | A α2 | β1 | β2 ;
becomes
    A  ::= β1 A′ | β2 A′ ;
    A′ ::= α1 A′ | α2 A′ | ε ;
(with ε A′ written as just A′).

Indirect left recursion, e.g.
    A ::= B x ;
    B ::= A y | c ;
is found by following leftmost non-terminals until we come back to
where we started.  The last production on such a cycle (B ::= A y)
gets the alternatives of the cycle's root substituted for its
leading symbol (B ::= B x y), which shortens the cycle by one step.
Repeating this turns every cycle into direct recursion, which the
rewrite above removes.
"""

from typing import List, Optional, Set

from grammnorm.errors import InvalidGrammarState, NonConvergenceError
from grammnorm.production import ProductionRule, ProductionSet
from grammnorm.records import Reason
from grammnorm.sentence import Derivation, Sentence
from grammnorm.symbols import NonTerminal, EPSILON
from grammnorm.transform import TransformBase

import logging
logging.basicConfig()
log = logging.getLogger(__name__)
log.setLevel(logging.INFO)


class LeftRecursionCycle:
    """Leftmost derivations  A => B ... => ... => A ...  back to the root"""

    def __init__(self, derivations: List[Derivation]):
        if not derivations:
            raise InvalidGrammarState("A left recursion cycle needs at least one derivation")
        self.derivations = list(derivations)
        self.root: NonTerminal = self.derivations[0].non_terminal
        last = self.derivations[-1].derived.leftmost_symbol()
        if last != self.root:
            raise InvalidGrammarState(f"Derivations do not lead back to {self.root}")

    @property
    def productions(self) -> List[ProductionRule]:
        return [d.production for d in self.derivations]

    @property
    def is_direct(self) -> bool:
        return len(self.derivations) == 1

    def __eq__(self, other: object) -> bool:
        return isinstance(other, LeftRecursionCycle) and other.derivations == self.derivations

    def __hash__(self) -> int:
        return hash(tuple(self.derivations))

    def __str__(self) -> str:
        return "\n".join(str(d) for d in self.derivations)

    def __repr__(self) -> str:
        path = " => ".join(str(rule.head) for rule in self.productions)
        return f"LeftRecursionCycle({path} => {self.root})"


def _as_cycle(root: NonTerminal, path: List[ProductionRule]) -> LeftRecursionCycle:
    sentence = Sentence.of(root)
    derivations = []
    for rule in path:
        derivation = sentence.derive(0, rule)
        derivations.append(derivation)
        sentence = derivation.derived
    return LeftRecursionCycle(derivations)


def find_left_recursion_cycles(productions: ProductionSet) -> List[LeftRecursionCycle]:
    """Depth-first walk along leftmost non-terminals from each
    non-terminal.  A cycle through several non-terminals is
    reported once, from the first of them we walk from.
    """
    productions.ensure_no_macros()
    groups = productions.group_by_head()
    cycles: List[LeftRecursionCycle] = []
    seen: Set[frozenset] = set()

    def walk(root: NonTerminal, nt: NonTerminal, path: List[ProductionRule], visited: Set[NonTerminal]):
        visited.add(nt)
        for rule in groups.get(nt, []):
            lead = rule.body.leftmost_symbol()
            if not lead.is_non_terminal:
                continue
            if lead == root:
                cycle_rules = path + [rule]
                key = frozenset(cycle_rules)
                if key not in seen:
                    seen.add(key)
                    cycles.append(_as_cycle(root, cycle_rules))
            elif lead not in visited:
                walk(root, lead, path + [rule], visited)

    for nt in groups:
        walk(nt, nt, [], set())
    return cycles


class LeftFactor(TransformBase):
    """One round of direct left recursion removal: each
    non-terminal with left-recursive alternatives is rewritten once.
    A non-terminal whose alternatives are all left-recursive derives
    nothing; LeftFactor raises InvalidGrammarState on it, while the
    repeating removals below leave it for get_errors to report.
    """
    reason = Reason.LEFT_RECURSION_EXPANSION
    skip_unrealizable = False

    def apply(self):
        for nt in self.productions.non_terminals():
            self.eliminate_direct(nt)

    def has_base_case(self, nt: NonTerminal) -> bool:
        return any(not rule.is_left_recursive() for rule in self.productions.lookup(nt))

    def eliminate_direct(self, nt: NonTerminal):
        rules = self.productions.lookup(nt)
        recursive = [rule for rule in rules if rule.is_left_recursive()]
        if not recursive:
            return
        betas = [rule for rule in rules if not rule.is_left_recursive()]
        if not betas:
            if self.skip_unrealizable:
                log.debug(f"Every alternative of {nt} is left-recursive; left in place")
                return
            raise InvalidGrammarState(
                f"Every alternative of {nt} is left-recursive; it derives no sentence")
        position = self.productions.productions.index(rules[0])
        self.productions.retain(lambda rule: rule.head != nt)
        # A ::= A  adds nothing to the language
        looping = [rule for rule in recursive if len(rule.body) == 1]
        for rule in looping:
            self.commit(rule)
        recursive = [rule for rule in recursive if len(rule.body) > 1]
        if not recursive:
            self.productions.productions[position:position] = betas
            return

        fresh = self.productions.create_prime(nt)
        new_rules = []
        for rule in betas:
            replacement = ProductionRule(nt, Sentence.join(rule.body, fresh))
            new_rules.append(replacement)
            self.commit(rule, [replacement])
        tail = ProductionRule(fresh, Sentence.of(EPSILON))
        for i, rule in enumerate(recursive):
            replacement = ProductionRule(fresh, Sentence.join(rule.body[1:], fresh))
            new_rules.append(replacement)
            if i == len(recursive) - 1:
                self.commit(rule, [replacement, tail])
            else:
                self.commit(rule, [replacement])
        new_rules.append(tail)
        self.productions.productions[position:position] = new_rules
        log.debug(f"Removed direct left recursion of {nt} using {fresh}")


class DirectLeftRecursionRemoval(LeftFactor):
    """LeftFactor repeated until no production is directly left-recursive,
    apart from those of non-terminals with no other alternative
    """
    skip_unrealizable = True

    def apply(self):
        for _ in self.iterations():
            if not any(rule.is_left_recursive() and self.has_base_case(rule.head)
                       for rule in self.productions):
                break
            super().apply()


class LeftRecursionRemoval(LeftFactor):
    """Remove all left recursion, direct and indirect.

    Substitution can grow the set without bound when ε alternatives
    hide recursion behind a nullable leading symbol, so besides the
    pass ceiling the set may not grow past max_growth times its
    original size.
    """
    skip_unrealizable = True

    def apply(self):
        limit = self.settings.max_growth * max(len(self.productions), 1)
        for _ in self.iterations():
            cycles = [cycle for cycle in find_left_recursion_cycles(self.productions)
                      if self.has_base_case(cycle.root)]
            if not cycles:
                break
            direct: Optional[LeftRecursionCycle] = next(
                (cycle for cycle in cycles if cycle.is_direct), None)
            if direct is not None:
                self.eliminate_direct(direct.root)
            else:
                self.substitute(cycles[0])
            if len(self.productions) > limit:
                raise NonConvergenceError(self.__class__.__name__, limit, "productions")

    def substitute(self, cycle: LeftRecursionCycle):
        """X ::= R γ, last step of a cycle rooted at R, becomes
        X ::= δ γ for each alternative R ::= δ.
        """
        recursive = cycle.productions[-1]
        if recursive.body.leftmost_symbol() != cycle.root:
            raise InvalidGrammarState(f"{recursive} does not close the cycle at {cycle.root}")
        alternatives = self.productions.lookup(cycle.root)
        if not alternatives:
            raise InvalidGrammarState(f"{cycle.root} has no productions to substitute")
        suffix = recursive.body[1:]
        replacements = list(dict.fromkeys(
            ProductionRule(recursive.head, Sentence.join(alt.body, suffix))
            for alt in alternatives))
        self.productions.replace(recursive, replacements)
        self.commit(recursive, replacements)
        log.debug(f"Substituted {cycle.root} into {recursive}")
