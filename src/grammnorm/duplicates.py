"""Remove repeated productions, keeping the first of each"""

from grammnorm.records import Reason
from grammnorm.transform import TransformBase


class DuplicateRemoval(TransformBase):
    reason = Reason.DUPLICATE_PRODUCTION_REMOVAL

    def apply(self):
        seen = set()
        kept = []
        for rule in self.productions:
            if rule in seen:
                self.commit(rule)
                continue
            seen.add(rule)
            kept.append(rule)
        self.productions.productions = kept
