"""Audit trail of rewrites.

Every transformation that changes a production set leaves one
TransformationRecord per original production it replaced or removed.
The records of a pipeline run, in order, say exactly what happened.
"""

from enum import Enum
from typing import Iterable, Iterator, List, Tuple

from grammnorm.production import ProductionRule


class Reason(Enum):
    MACRO_EXPANSION = "macro expansion"
    LEFT_RECURSION_EXPANSION = "left recursion expansion"
    UNREACHABLE_SYMBOL_REMOVAL = "unreachable symbol removal"
    UNIT_PRODUCTION_EXPANSION = "unit production expansion"
    DUPLICATE_PRODUCTION_REMOVAL = "duplicate production removal"
    COMMON_PREFIX_FACTORIZATION = "common prefix factorization"
    START_AUGMENTATION = "start augmentation"


class TransformationRecord:
    """original was replaced by replacements (none: it was removed)"""

    def __init__(self, original: ProductionRule,
                 replacements: Iterable[ProductionRule],
                 reason: Reason):
        self.original = original
        self.replacements: Tuple[ProductionRule, ...] = tuple(replacements)
        self.reason = reason

    def __eq__(self, other: object) -> bool:
        return isinstance(other, TransformationRecord) \
            and (other.original, other.replacements, other.reason) == \
                (self.original, self.replacements, self.reason)

    def __hash__(self) -> int:
        return hash((self.original, self.replacements, self.reason))

    def __str__(self) -> str:
        if not self.replacements:
            return f"[{self.reason.value}] removed {self.original}"
        replaced = "; ".join(str(rule) for rule in self.replacements)
        return f"[{self.reason.value}] {self.original}  ==>  {replaced}"

    def __repr__(self) -> str:
        return f"TransformationRecord({self})"


class TransformationRecordCollection:
    """Ordered, append-only list of records"""

    def __init__(self, records: Iterable[TransformationRecord] = ()):
        self._records: List[TransformationRecord] = list(records)

    def append(self, record: TransformationRecord):
        self._records.append(record)

    def extend(self, records: Iterable[TransformationRecord]):
        self._records.extend(records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[TransformationRecord]:
        return iter(self._records)

    def __getitem__(self, index: int) -> TransformationRecord:
        return self._records[index]

    def __bool__(self) -> bool:
        return bool(self._records)

    def __eq__(self, other: object) -> bool:
        return isinstance(other, TransformationRecordCollection) \
            and list(other) == self._records

    def with_reason(self, reason: Reason) -> List[TransformationRecord]:
        return [record for record in self._records if record.reason == reason]

    def __str__(self) -> str:
        return "\n".join(str(record) for record in self._records)
