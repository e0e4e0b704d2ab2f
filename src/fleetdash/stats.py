"""Decision log statistics for the dashboard charts.

Pure data processing: no I/O and no state between calls.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass

from fleetdash.models.decision_log import DecisionLog

DEFAULT_CHART_TITLE = "Decision Actions"


class ActionCounts(Mapping[str, int]):
    """Immutable mapping of action label to occurrence count.

    Iteration order is the order in which each label was first seen in the
    aggregated input; it is neither alphabetical nor sorted by count.
    """

    __slots__ = ("_counts",)

    def __init__(self, counts: Mapping[str, int] | None = None) -> None:
        self._counts: dict[str, int] = dict(counts or {})

    def __getitem__(self, label: str) -> int:
        return self._counts[label]

    def __iter__(self) -> Iterator[str]:
        return iter(self._counts)

    def __len__(self) -> int:
        return len(self._counts)

    def __repr__(self) -> str:
        return f"ActionCounts({self._counts!r})"

    @property
    def labels(self) -> list[str]:
        return list(self._counts)

    @property
    def values_list(self) -> list[int]:
        return list(self._counts.values())

    @property
    def total(self) -> int:
        return sum(self._counts.values())


def aggregate(logs: Iterable[DecisionLog]) -> ActionCounts:
    """Count decision logs per ``decision.action`` label.

    Keys keep first-seen order; an empty input gives an empty mapping. The
    result keeps no reference to *logs*.
    """
    counts: dict[str, int] = {}
    for log in logs:
        label = log.decision.action
        counts[label] = counts.get(label, 0) + 1
    return ActionCounts(counts)


@dataclass(frozen=True, slots=True)
class ChartSeries:
    """Labels and values ready for a pie/bar chart renderer."""

    title: str
    labels: tuple[str, ...]
    data: tuple[int, ...]

    @property
    def is_empty(self) -> bool:
        return not self.labels

    def shares(self) -> tuple[float, ...]:
        """Fraction of the total per label (all zeros for an empty series)."""
        total = sum(self.data)
        if total == 0:
            return tuple(0.0 for _ in self.data)
        return tuple(value / total for value in self.data)


def to_chart_series(counts: ActionCounts, title: str = DEFAULT_CHART_TITLE) -> ChartSeries:
    """Turn aggregated counts into a chart series, keeping key order."""
    return ChartSeries(title=title, labels=tuple(counts.labels), data=tuple(counts.values_list))
