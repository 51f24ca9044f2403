"""Base class for transformations of a production set.

A transformation is built around the set it will rewrite and
run once:
    xform = UnitProductions(productions)
    records = xform.transform()
transform() calls setup(), apply() and teardown() in that order and
returns the records committed along the way.
"""

from typing import Iterable, Optional

from grammnorm.errors import NonConvergenceError
from grammnorm.production import ProductionRule, ProductionSet
from grammnorm.records import Reason, TransformationRecord, TransformationRecordCollection
from grammnorm.settings import Settings

import logging
logging.basicConfig()
log = logging.getLogger(__name__)
log.setLevel(logging.INFO)


class TransformBase:
    """Abstract base class for transformations.  Subclasses
    set 'reason' and override apply(); most analyses need a
    macro-free set, so setup() checks for that unless
    'needs_macro_free' is turned off.
    """
    reason: Reason
    needs_macro_free = True

    def __init__(self, productions: ProductionSet, settings: Optional[Settings] = None):
        self.productions = productions
        self.settings = settings or Settings()
        self.records = TransformationRecordCollection()

    def transform(self) -> TransformationRecordCollection:
        self.setup()
        self.apply()
        self.teardown()
        log.debug(f"{self.__class__.__name__}: {len(self.records)} rewrites")
        return self.records

    def setup(self):
        if self.needs_macro_free:
            self.productions.ensure_no_macros()

    def apply(self):
        raise NotImplementedError(f"{self.__class__.__name__} must implement apply")

    def teardown(self):
        pass

    def commit(self, original: ProductionRule,
               replacements: Iterable[ProductionRule] = ()) -> TransformationRecord:
        """Record a rewrite that has been made in the set"""
        record = TransformationRecord(original, replacements, self.reason)
        log.debug(f"{record}")
        self.records.append(record)
        return record

    def iterations(self):
        """Pass counter for fixpoint loops; raises once the
        configured ceiling is exceeded.
        """
        limit = self.settings.max_iterations
        for i in range(limit):
            yield i
        raise NonConvergenceError(self.__class__.__name__, limit)
