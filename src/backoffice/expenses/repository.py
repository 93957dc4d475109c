from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import DailySummary


class DailySummaryRepository(Protocol):
    def get(self, summary_date: date) -> Optional[DailySummary]:
        raise NotImplementedError

    def upsert(self, summary: DailySummary) -> None:
        """Insert or fully replace the summary stored for ``summary.summary_date``."""

        raise NotImplementedError

    def exists(self, summary_date: date) -> bool:
        raise NotImplementedError

    def list_dates(self) -> Sequence[date]:
        raise NotImplementedError

    def list_between(self, start: date, end: date) -> Sequence[DailySummary]:
        raise NotImplementedError
