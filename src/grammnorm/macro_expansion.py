"""Desugar EBNF macros into plain productions.
Example:
    foo ::= [ bar ] baz ;

becomes
    foo  ::= foo′ baz ;
    foo′ ::= bar | ε ;

Each pass rewrites the leftmost macro of every production that still
has one; macros can nest, so we keep going until none is left.
"""

from typing import List

from grammnorm.production import ProductionRule, ProductionSet
from grammnorm.records import Reason
from grammnorm.transform import TransformBase

import logging
logging.basicConfig()
log = logging.getLogger(__name__)
log.setLevel(logging.INFO)


def expand_leftmost_macro(productions: ProductionSet, rule: ProductionRule) -> List[ProductionRule]:
    """Replacement rules for rule, with its leftmost macro pulled
    out into a fresh non-terminal.
    """
    index = rule.body.leftmost_macro_index()
    assert index >= 0, f"{rule} has no macro to expand"
    macro = rule.body[index]
    fresh = productions.create_prime(rule.head)
    rewritten = ProductionRule(rule.head, rule.body.replace(index, fresh))
    expansions = [ProductionRule(fresh, body) for body in macro.expand(fresh)]
    log.debug(f"Expanding {macro} in {rule} as {fresh}")
    return [rewritten] + expansions


class MacroExpansion(TransformBase):
    reason = Reason.MACRO_EXPANSION
    needs_macro_free = False

    def apply(self):
        for _ in self.iterations():
            if not self.productions.contains_macro():
                break
            for rule in list(self.productions):
                if not rule.contains_macro():
                    continue
                replacements = expand_leftmost_macro(self.productions, rule)
                self.productions.replace(rule, replacements)
                self.commit(rule, replacements)
