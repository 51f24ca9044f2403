"""Entry points: single transformations and the composite
clean / fix / transform passes built from them.

Every function rewrites the given ProductionSet in place and returns
the TransformationRecordCollection describing what it did; an empty
collection means the set was already in the wanted shape.
    productions = loader.load(f)
    records = pipeline.auto_transform(productions)
"""

from typing import Callable, Optional

from grammnorm.augment import StartAugmentation
from grammnorm.common_prefix import CommonPrefixFactorization
from grammnorm.diagnostics import get_errors, get_lr1_errors
from grammnorm.duplicates import DuplicateRemoval
from grammnorm.errors import AggregateGrammarError, NonConvergenceError
from grammnorm.left_recursion import DirectLeftRecursionRemoval, LeftFactor, LeftRecursionRemoval
from grammnorm.macro_expansion import MacroExpansion
from grammnorm.production import ProductionSet
from grammnorm.reachability import UnreachableRemoval
from grammnorm.records import TransformationRecordCollection
from grammnorm.settings import Settings
from grammnorm.unit_productions import UnitProductions

import logging
logging.basicConfig()
log = logging.getLogger(__name__)
log.setLevel(logging.INFO)


Pass = Callable[[ProductionSet, Optional[Settings]], TransformationRecordCollection]


# Single transformations

def expand_macros(productions: ProductionSet, settings: Optional[Settings] = None) -> TransformationRecordCollection:
    return MacroExpansion(productions, settings).transform()


def remove_left_recursion(productions: ProductionSet, settings: Optional[Settings] = None) -> TransformationRecordCollection:
    return LeftRecursionRemoval(productions, settings).transform()


def left_factor(productions: ProductionSet, settings: Optional[Settings] = None) -> TransformationRecordCollection:
    """One round of direct left recursion removal"""
    return LeftFactor(productions, settings).transform()


def remove_direct_left_recursion(productions: ProductionSet, settings: Optional[Settings] = None) -> TransformationRecordCollection:
    return DirectLeftRecursionRemoval(productions, settings).transform()


def factor_common_prefix_productions(productions: ProductionSet, settings: Optional[Settings] = None) -> TransformationRecordCollection:
    return CommonPrefixFactorization(productions, settings).transform()


def remove_unreachable_productions(productions: ProductionSet, settings: Optional[Settings] = None) -> TransformationRecordCollection:
    return UnreachableRemoval(productions, settings).transform()


def expand_unit_productions(productions: ProductionSet, settings: Optional[Settings] = None) -> TransformationRecordCollection:
    return UnitProductions(productions, settings).transform()


def remove_duplicates(productions: ProductionSet, settings: Optional[Settings] = None) -> TransformationRecordCollection:
    return DuplicateRemoval(productions, settings).transform()


def augment_start(productions: ProductionSet, settings: Optional[Settings] = None) -> TransformationRecordCollection:
    return StartAugmentation(productions, settings).transform()


# Composite passes

def _run(productions: ProductionSet, settings: Optional[Settings], *stages: Pass) -> TransformationRecordCollection:
    records = TransformationRecordCollection()
    for stage in stages:
        done = stage(productions, settings)
        log.debug(f"{stage.__name__}: {len(done)} records")
        records.extend(done)
    return records


def _until_quiet(name: str, one_pass: Pass,
                 productions: ProductionSet, settings: Optional[Settings]) -> TransformationRecordCollection:
    """Repeat one_pass until it leaves the set alone"""
    settings = settings or Settings()
    records = TransformationRecordCollection()
    for _ in range(settings.max_iterations):
        done = one_pass(productions, settings)
        if not done:
            return records
        records.extend(done)
    raise NonConvergenceError(name, settings.max_iterations)


def auto_clean(productions: ProductionSet, settings: Optional[Settings] = None) -> TransformationRecordCollection:
    """Macros, unreachable symbols, unit productions, duplicates,
    then a last sweep for symbols the unit expansion orphaned.
    """
    return _run(productions, settings,
                expand_macros,
                remove_unreachable_productions,
                expand_unit_productions,
                remove_duplicates,
                remove_unreachable_productions)


def recursive_auto_clean(productions: ProductionSet, settings: Optional[Settings] = None) -> TransformationRecordCollection:
    return _until_quiet("auto_clean", auto_clean, productions, settings)


def auto_fix(productions: ProductionSet, settings: Optional[Settings] = None) -> TransformationRecordCollection:
    """Left recursion and common prefixes, then validation.
    Raises AggregateGrammarError if the result still has problems.
    """
    records = _run(productions, settings,
                   remove_left_recursion,
                   factor_common_prefix_productions,
                   remove_unreachable_productions)
    errors = get_errors(productions)
    if errors:
        raise AggregateGrammarError(errors)
    return records


def recursive_auto_fix(productions: ProductionSet, settings: Optional[Settings] = None) -> TransformationRecordCollection:
    return _until_quiet("auto_fix", auto_fix, productions, settings)


def _clean_then_fix(productions: ProductionSet, settings: Optional[Settings] = None) -> TransformationRecordCollection:
    return _run(productions, settings, recursive_auto_clean, recursive_auto_fix)


def auto_transform(productions: ProductionSet, settings: Optional[Settings] = None) -> TransformationRecordCollection:
    """Clean and fix, over and over, until neither has anything to do.
    The result is macro-free, duplicate-free, reachable, free of left
    recursion and left-factored.
    """
    records = _until_quiet("auto_transform", _clean_then_fix, productions, settings)
    log.info(f"auto_transform: {len(records)} rewrites, {len(productions)} productions")
    return records


def auto_transform_lr1(productions: ProductionSet, settings: Optional[Settings] = None) -> TransformationRecordCollection:
    """Prepare a grammar for an LR(1) table generator: macros out,
    augmented start symbol, every symbol realizable and reachable.
    """
    records = _run(productions, settings, expand_macros, augment_start)
    errors = get_lr1_errors(productions)
    if errors:
        raise AggregateGrammarError(errors)
    log.info(f"auto_transform_lr1: {len(records)} rewrites, {len(productions)} productions")
    return records
