# -------------------------------------
# datapoint store
# -------------------------------------
"""
In-memory store of metric datapoints.

Each series is a pair of sorted numpy arrays (dates as datetime64[D],
values as float64). Series come from the registry's YAML points or from a
Parquet file with columns (series, date, value), read through DuckDB.
"""
from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Mapping

import duckdb
import numpy as np
import pyarrow as pa
import pyarrow.parquet as pq

from .errors import CalcError
from .registry import Registry
from .timespan import TimeSpan

COLUMNS = ("series", "date", "value")


class DataStore:
    def __init__(self):
        self._series: dict[str, tuple[np.ndarray, np.ndarray]] = {}

    def add(self, name: str, points: Mapping[date, float]) -> None:
        """Add (or extend) a series from a date -> value mapping."""
        dates = np.array(list(points.keys()), dtype="datetime64[D]")
        values = np.array(list(points.values()), dtype=np.float64)
        if name in self._series:
            old_d, old_v = self._series[name]
            dates = np.concatenate([old_d, dates])
            values = np.concatenate([old_v, values])
        order = np.argsort(dates, kind="stable")
        self._series[name] = (dates[order], values[order])

    def names(self) -> list[str]:
        return sorted(self._series)

    def __contains__(self, name: str) -> bool:
        return name in self._series

    def values(self, name: str, span: TimeSpan) -> np.ndarray:
        """Values of series `name` dated inside span, in date order."""
        try:
            dates, values = self._series[name]
        except KeyError:
            raise CalcError(f"no datapoints for series {name!r}") from None
        lo = np.datetime64(span.start, "D")
        hi = np.datetime64(span.end, "D")
        mask = (dates >= lo) & (dates <= hi)
        return values[mask]

    # ---------------------------------
    # construction / persistence
    # ---------------------------------

    @classmethod
    def from_registry(cls, registry: Registry) -> "DataStore":
        store = cls()
        for name, spec in registry.series.items():
            store.add(name, spec.points)
        return store

    @classmethod
    def from_parquet(cls, path: str | Path) -> "DataStore":
        """
        Load every series from a Parquet file with columns series, date, value.
        """
        path = Path(path)
        con = duckdb.connect()
        try:
            rows = con.execute(
                "SELECT series, CAST(date AS DATE), CAST(value AS DOUBLE) "
                "FROM read_parquet(?) ORDER BY series, date",
                [str(path)],
            ).fetchall()
        finally:
            con.close()

        grouped: dict[str, dict[date, float]] = {}
        for series, d, v in rows:
            grouped.setdefault(str(series), {})[d] = float(v)
        store = cls()
        for name, points in grouped.items():
            store.add(name, points)
        return store

    def to_parquet(self, path: str | Path) -> None:
        """Write every series to a Parquet file with columns series, date, value."""
        series: list[str] = []
        dates: list[date] = []
        values: list[float] = []
        for name in self.names():
            d, v = self._series[name]
            series.extend([name] * len(d))
            dates.extend(d.astype(object).tolist())
            values.extend(v.tolist())
        table = pa.table({
            "series": pa.array(series, pa.string()),
            "date": pa.array(dates, pa.date32()),
            "value": pa.array(values, pa.float64()),
        })
        pq.write_table(table, str(Path(path)))
