"""Collect the outcome of many fallible computations into one result.

A single failure is raised exactly as it occurred, so the common case looks
the same as calling the function directly. Several failures are raised
together as an :class:`AggregateError`.
"""

from collections.abc import Callable, Iterable, Sequence
from typing import TypeVar

T = TypeVar("T")
R = TypeVar("R")


class AggregateError(Exception):
    """Several independent errors reported together.

    The message is every underlying message, one per line. The first error is
    attached as ``__cause__`` so tracebacks lead to it.
    """

    def __init__(self, errors: Sequence[BaseException]):
        if len(errors) < 2:
            raise ValueError("AggregateError needs at least two errors")
        self.errors: tuple[BaseException, ...] = tuple(errors)
        super().__init__("\n".join(str(error) for error in self.errors))
        self.__cause__ = self.errors[0]

    def __len__(self) -> int:
        return len(self.errors)

    def __iter__(self):
        return iter(self.errors)


def partition(
    results: Iterable[T | BaseException],
) -> tuple[list[T], list[BaseException]]:
    """Split outcomes into successes and failures, keeping their order."""
    successes: list[T] = []
    failures: list[BaseException] = []
    for result in results:
        if isinstance(result, BaseException):
            failures.append(result)
        else:
            successes.append(result)
    return successes, failures


def raise_for_failures(failures: Sequence[BaseException]) -> None:
    """Raise nothing, the single failure, or an AggregateError."""
    if len(failures) == 1:
        raise failures[0]
    if failures:
        raise AggregateError(failures)


def collect(
    items: Iterable[T],
    func: Callable[[T], R],
    catch: type[BaseException] | tuple[type[BaseException], ...] = Exception,
) -> list[R]:
    """Apply ``func`` to every item, reporting every failure at once.

    Args:
        items: Inputs, processed in order
        func: Fallible computation applied to each input
        catch: Exception type(s) treated as per-item failures; anything else
            propagates immediately

    Returns:
        Results of ``func`` in input order, when no item failed

    Raises:
        The single error if exactly one item failed, or AggregateError if
        more than one did
    """
    outcomes: list[R | BaseException] = []
    for item in items:
        try:
            outcomes.append(func(item))
        except catch as e:
            outcomes.append(e)

    successes, failures = partition(outcomes)
    raise_for_failures(failures)
    return successes
