"""Left-factor alternatives that begin with the same symbol.
Example:
    A ::= a b | a c | d ;

becomes
    A  ::= a A′ | d ;
    A′ ::= b | c ;

Factoring can leave a shared prefix one level down (a b x | a b y),
so we repeat until no non-terminal has two alternatives with the
same leading symbol.  Alternatives that are just ε are duplicates,
not a shared prefix, and are left to duplicate removal.
"""

from typing import Dict, List, Tuple

from grammnorm.production import ProductionRule, ProductionSet
from grammnorm.records import Reason
from grammnorm.sentence import Sentence
from grammnorm.symbols import NonTerminal, Symbol
from grammnorm.transform import TransformBase

import logging
logging.basicConfig()
log = logging.getLogger(__name__)
log.setLevel(logging.INFO)


def common_prefix_groups(productions: ProductionSet) -> List[Tuple[NonTerminal, Symbol, List[ProductionRule]]]:
    """(head, prefix, rules) for each group of two or more
    alternatives of head that start with prefix
    """
    productions.ensure_no_macros()
    groups = []
    for head, rules in productions.group_by_head().items():
        by_prefix: Dict[Symbol, List[ProductionRule]] = {}
        for rule in rules:
            lead = rule.body.leftmost_symbol()
            if lead.is_epsilon:
                continue
            by_prefix.setdefault(lead, []).append(rule)
        for prefix, shared in by_prefix.items():
            if len(shared) > 1:
                groups.append((head, prefix, shared))
    return groups


def get_common_prefix_heads(productions: ProductionSet) -> List[NonTerminal]:
    return list(dict.fromkeys(head for head, _, _ in common_prefix_groups(productions)))


class CommonPrefixFactorization(TransformBase):
    reason = Reason.COMMON_PREFIX_FACTORIZATION

    def apply(self):
        for _ in self.iterations():
            groups = common_prefix_groups(self.productions)
            if not groups:
                break
            for head, prefix, rules in groups:
                self.factor(head, prefix, rules)

    def factor(self, head: NonTerminal, prefix: Symbol, rules: List[ProductionRule]):
        fresh = self.productions.create_prime(head)
        adjusted = ProductionRule(head, Sentence.of(prefix, fresh))
        suffixes = {rule: ProductionRule(fresh, Sentence.join(rule.body[1:]))
                    for rule in rules}
        new_rules = [adjusted] + list(dict.fromkeys(suffixes.values()))
        self.productions.replace(rules[0], new_rules)
        for rule in rules[1:]:
            self.productions.remove(rule)
        for rule in rules:
            self.commit(rule, [adjusted, suffixes[rule]])
        log.debug(f"Factored {prefix} out of {len(rules)} alternatives of {head} into {fresh}")
