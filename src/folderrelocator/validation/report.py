"""Problems found while validating a move request."""

import threading
from collections.abc import Iterable, Iterator
from dataclasses import dataclass
from enum import Enum


class ProblemCategory(str, Enum):
    """Which kind of check produced a problem."""

    FORMAT = "format"
    POLICY = "policy"
    PRECONDITION = "precondition"
    PERMISSION = "permission"
    CAPACITY = "capacity"


@dataclass(frozen=True)
class Problem:
    """A single validation finding."""

    message: str
    category: ProblemCategory
    cause: BaseException | None = None

    def __str__(self) -> str:
        if self.cause is not None:
            return f"{self.message} ({self.cause})"
        return self.message


class ValidationReport:
    """
    Ordered, append-only collection of problems for one request.

    Appends are serialized with a lock so concurrent workers can report
    into the same instance. An empty report means the move may proceed.
    """

    def __init__(self, problems: Iterable[Problem] | None = None):
        self._lock = threading.Lock()
        self._problems: list[Problem] = list(problems or [])

    def add(
        self,
        message: str,
        category: ProblemCategory,
        cause: BaseException | None = None,
    ) -> Problem:
        """Record a new problem and return it."""
        problem = Problem(message=message, category=category, cause=cause)
        with self._lock:
            self._problems.append(problem)
        return problem

    def extend(self, problems: Iterable[Problem]) -> None:
        """Append several problems at once, keeping their order."""
        problems = list(problems)
        with self._lock:
            self._problems.extend(problems)

    @property
    def problems(self) -> list[Problem]:
        """Snapshot of the problems recorded so far."""
        with self._lock:
            return list(self._problems)

    @property
    def is_clean(self) -> bool:
        """True when nothing is wrong with the request."""
        return len(self) == 0

    def messages(self) -> list[str]:
        """Problem messages in the order they were found."""
        return [problem.message for problem in self.problems]

    def by_category(self, category: ProblemCategory) -> list[Problem]:
        """Problems produced by one kind of check."""
        return [problem for problem in self.problems if problem.category == category]

    def __len__(self) -> int:
        with self._lock:
            return len(self._problems)

    def __iter__(self) -> Iterator[Problem]:
        return iter(self.problems)

    def __bool__(self) -> bool:
        # A report is truthy when it holds problems
        return len(self) > 0

    def __repr__(self) -> str:
        return f"ValidationReport({self.problems!r})"
