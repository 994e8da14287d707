"""Load daily measurement series from CSV files."""

from __future__ import annotations

import logging
from datetime import date
from pathlib import Path
from typing import Union

import pandas as pd

logger = logging.getLogger(__name__)


class SeriesLoader:
    """Reads a day -> value mapping from CSV exports."""

    REQUIRED_COLUMNS = ["date", "value"]

    def load_from_csv(self, csv_path: Union[Path, str]) -> dict[date, float]:
        """Load a daily series from a CSV file.

        CSV format:
            date,value
            2025-01-15,81.4
            2025-01-15T21:30:00,81.9
            2025-01-17,80.8

        Timestamps are truncated to their calendar day and multiple
        observations on the same day are averaged. Rows with a missing or
        non-numeric value are skipped.

        Args:
            csv_path: Path to the CSV file

        Returns:
            Dict mapping each day to its (averaged) value

        Raises:
            ValueError: If required columns are missing or a date cannot be parsed
        """
        df = pd.read_csv(csv_path)
        return self.load_from_frame(df)

    def load_from_frame(self, df: pd.DataFrame) -> dict[date, float]:
        """Aggregate an already-loaded frame with date and value columns."""
        missing = set(self.REQUIRED_COLUMNS) - set(df.columns)
        if missing:
            raise ValueError(
                f"Missing required columns: {missing}. "
                f"Required columns are: {self.REQUIRED_COLUMNS}"
            )

        if df.empty:
            return {}

        try:
            days = pd.to_datetime(df["date"], format="ISO8601").dt.normalize()
        except (ValueError, TypeError) as e:
            raise ValueError(f"Could not parse dates: {e}") from e

        values = pd.to_numeric(df["value"], errors="coerce")
        frame = pd.DataFrame({"day": days, "value": values}).dropna()
        skipped = len(df) - len(frame)
        if skipped:
            logger.warning("Skipped %d rows with missing or invalid values", skipped)

        daily = frame.groupby("day")["value"].mean()
        return {ts.date(): float(value) for ts, value in daily.items()}


def load_series(csv_path: Union[Path, str]) -> dict[date, float]:
    """Convenience wrapper around SeriesLoader.load_from_csv."""
    return SeriesLoader().load_from_csv(csv_path)
