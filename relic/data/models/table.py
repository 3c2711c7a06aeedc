"""Metric time-series table."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class MetricObservation(BaseModel):
    """Values of one metric over a single timeslice."""

    name: str = Field(..., min_length=1)
    start: datetime
    values: dict[str, float | None] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @property
    def key(self) -> tuple[str, datetime]:
        """Identity of the row within a table."""
        return (self.name, self.start)

    def value(self, value_name: str) -> float | None:
        return self.values.get(value_name)


class MetricTable(BaseModel):
    """Ordered rows of metric observations.

    Rows are kept in the order they were fetched: chunk order first, then
    timeslice order within each chunk. Each requested value name is a column.
    """

    value_names: list[str] = Field(default_factory=list)
    rows: list[MetricObservation] = Field(default_factory=list)

    def __len__(self) -> int:
        return len(self.rows)

    @property
    def is_empty(self) -> bool:
        return not self.rows

    @property
    def columns(self) -> list[str]:
        return ["name", "start", *self.value_names]

    @property
    def metric_names(self) -> list[str]:
        """Distinct metric names in order of first appearance."""
        return list(dict.fromkeys(row.name for row in self.rows))

    @property
    def earliest(self) -> datetime | None:
        return min((row.start for row in self.rows), default=None)

    @property
    def latest(self) -> datetime | None:
        return max((row.start for row in self.rows), default=None)

    def filter(self, name: str) -> MetricTable:
        """Rows of a single metric."""
        return MetricTable(
            value_names=list(self.value_names),
            rows=[row for row in self.rows if row.name == name],
        )

    def to_records(self) -> list[dict[str, Any]]:
        """Flatten rows into dicts with one key per column."""
        records = []
        for row in self.rows:
            record: dict[str, Any] = {"name": row.name, "start": row.start}
            for value_name in self.value_names:
                record[value_name] = row.values.get(value_name)
            records.append(record)
        return records

    @classmethod
    def concat(
        cls, tables: Iterable[MetricTable], value_names: list[str] | None = None
    ) -> MetricTable:
        """Concatenate tables preserving their order and row order."""
        tables = list(tables)
        if value_names is None:
            value_names = []
            for table in tables:
                for name in table.value_names:
                    if name not in value_names:
                        value_names.append(name)
        rows = [row for table in tables for row in table.rows]
        return cls(value_names=value_names, rows=rows)
