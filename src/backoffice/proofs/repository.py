from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import ProofSubmission


class ProofRepository(Protocol):
    def get(self, proof_date: date) -> Optional[ProofSubmission]:
        raise NotImplementedError

    def save(self, submission: ProofSubmission) -> None:
        """Insert or replace the image list of a date."""

        raise NotImplementedError

    def delete(self, proof_date: date) -> bool:
        raise NotImplementedError

    def list_between(self, start: Optional[date] = None, end: Optional[date] = None) -> Sequence[ProofSubmission]:
        """Newest first."""

        raise NotImplementedError
