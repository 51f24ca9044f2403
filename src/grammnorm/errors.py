"""Exceptions raised by the transformation engine, and the
Diagnostic records that describe grammar-quality problems.

Diagnostics are data: get_errors returns them, and only a fix pass
that fails to get rid of them turns them into an AggregateGrammarError.
"""

from typing import Dict, List, Optional


class GrammarError(Exception):
    """Base class of everything the engine raises"""
    pass


class PreconditionError(GrammarError):
    """Raised when an operation is called on a production set
    (or sentence) that does not satisfy its precondition,
    e.g., macros still present or no start symbol.
    """
    pass


class InvalidGrammarState(GrammarError):
    """Raised when a transformation reaches a state its own
    invariants say is impossible.
    """
    pass


class NonConvergenceError(GrammarError):
    """Raised when a fixpoint loop exceeds its iteration ceiling,
    or grows the production set past its size ceiling.
    """

    def __init__(self, stage: str, limit: int, unit: str = "iterations"):
        super().__init__(f"{stage} did not reach a fixpoint within {limit} {unit}")
        self.stage = stage
        self.limit = limit
        self.unit = unit


class SettingsError(GrammarError):
    """Raised when a settings file cannot be used"""
    pass


class Diagnostic:
    """One grammar-quality problem.  'details' holds human-readable
    text by label; 'data' holds the offending objects by label.
    """

    def __init__(self, title: str,
                 details: Optional[Dict[str, str]] = None,
                 data: Optional[Dict[str, object]] = None):
        self.title = title
        self.details = dict(details or {})
        self.data = dict(data or {})

    def add_detail(self, label: str, text: str) -> "Diagnostic":
        self.details[label] = text
        return self

    def add_data(self, label: str, value: object) -> "Diagnostic":
        self.data[label] = value
        return self

    def __str__(self) -> str:
        lines = [self.title]
        for label, text in self.details.items():
            lines.append(f"  {label}:")
            lines.extend(f"    {line}" for line in text.splitlines())
        return "\n".join(lines)

    def __repr__(self) -> str:
        return f"Diagnostic({self.title!r})"


class AggregateGrammarError(GrammarError):
    """Raised when diagnostics remain after a fix pass"""

    def __init__(self, diagnostics: List[Diagnostic]):
        self.diagnostics = list(diagnostics)
        titles = "; ".join(d.title for d in self.diagnostics)
        super().__init__(f"{len(self.diagnostics)} grammar error(s): {titles}")
