"""Grouping of multi-repository writes."""

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol, TypeVar

T = TypeVar("T")


class TransactionContext(Protocol):
    """Runs a unit of work with best-effort all-or-nothing semantics."""

    def run(self, work: Callable[[], T]) -> T:
        """Run ``work`` and return its result."""


@dataclass
class DirectTransactionContext(TransactionContext):
    """Runs work directly; commit/abort is left to the underlying store."""

    def run(self, work: Callable[[], T]) -> T:
        return work()
