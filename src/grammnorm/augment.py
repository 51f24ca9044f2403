"""Augment the start symbol for LR parsing.
Example:
    S ::= a S | b ;

becomes
    S′ ::= S ;
    S  ::= a S | b ;

with S′ as the new start symbol, so that accepting the input is
the single reduction by S′ -> S.  A start symbol that already has
exactly one production, a unit production, is left alone.
"""

from grammnorm.production import ProductionRule
from grammnorm.records import Reason
from grammnorm.sentence import Sentence
from grammnorm.transform import TransformBase

import logging
logging.basicConfig()
log = logging.getLogger(__name__)
log.setLevel(logging.INFO)


class StartAugmentation(TransformBase):
    reason = Reason.START_AUGMENTATION

    def apply(self):
        if len(self.productions) == 0:
            return
        start = self.productions.ensure_start()
        rules = self.productions.lookup(start)
        if len(rules) == 1 and rules[0].is_unit_production():
            log.debug(f"Start symbol {start} is already augmented")
            return
        fresh = self.productions.create_prime(start)
        augmented = ProductionRule(fresh, Sentence.of(start))
        self.productions.productions.insert(0, augmented)
        self.productions.start = fresh
        self.commit(rules[0], [augmented, rules[0]])
