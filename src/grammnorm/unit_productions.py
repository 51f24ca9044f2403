"""Expand unit productions.
Example:
    A ::= B ;
    B ::= 'b' | C 'c' ;

should become:
    A ::= 'b' | C 'c' ;
    B ::= 'b' | C 'c' ;

(B may then be unreachable and get pruned by the unreachable sweep.)
"""

from typing import List

from grammnorm.production import ProductionRule
from grammnorm.records import Reason
from grammnorm.transform import TransformBase

import logging
logging.basicConfig()
log = logging.getLogger(__name__)
log.setLevel(logging.INFO)


class UnitProductions(TransformBase):
    """After transformation, no production has a single non-terminal as
    its body, except those on the ignore list:
      A ::= A ;              (a self-loop, adds nothing)
      A ::= B ;  with B ::= B among B's alternatives
                             (expanding would give A ::= B back)
    """
    reason = Reason.UNIT_PRODUCTION_EXPANSION

    def __init__(self, productions, settings=None):
        super().__init__(productions, settings)
        self.ignored: List[ProductionRule] = []

    def is_unit(self, rule: ProductionRule) -> bool:
        return rule.is_unit_production() and rule not in self.ignored

    def apply(self):
        for _ in self.iterations():
            for rule in list(self.productions):
                if self.is_unit(rule) and rule in self.productions:
                    self.expand(rule)
            if not any(self.is_unit(rule) for rule in self.productions):
                break

    def expand(self, unit: ProductionRule):
        target = unit.body[0]
        if target == unit.head:
            log.debug(f"Ignoring self-loop {unit}")
            self.ignored.append(unit)
            return
        replacements = []
        for alt in self.productions.lookup(target):
            replacement = ProductionRule(unit.head, alt.body)
            if replacement == unit:
                log.debug(f"Ignoring {unit}: expansion would reproduce it")
                self.ignored.append(unit)
                return
            replacements.append(replacement)
        if not replacements:
            # B has no productions at all; nothing to expand into
            self.ignored.append(unit)
            return
        self.productions.replace(unit, replacements)
        self.commit(unit, replacements)
