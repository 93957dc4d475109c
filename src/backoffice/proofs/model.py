from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from ..common.datetime_utils import format_iso_date


@dataclass(frozen=True)
class UploadedImage:
    """An uploaded file already read from the request."""

    filename: str
    mimetype: str
    data: bytes


@dataclass(frozen=True)
class ProofSubmission:
    proof_date: date
    images: tuple[str, ...] = ()

    def to_dict(self) -> dict:
        return {"date": format_iso_date(self.proof_date), "images": list(self.images), "count": len(self.images)}
