from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Sequence

from ..common.datetime_utils import format_iso_date, parse_iso_date
from ..common.validators import require_list
from ..core.exceptions import NotFoundError, ValidationError
from .model import ProofSubmission, UploadedImage
from .repository import ProofRepository
from .storage import LocalProofStorage

logger = logging.getLogger(__name__)


def proof_url(day: str, filename: str) -> str:
    return f"/proof/{day}/{filename}"


class ProofService:
    """Use case: proof-of-deposit photos grouped by business date."""

    def __init__(self, proofs: ProofRepository, storage: LocalProofStorage, *, max_files: int):
        self._proofs = proofs
        self._storage = storage
        self._max_files = int(max_files)

    def upload(self, *, proof_date: Any, images: Sequence[UploadedImage]) -> ProofSubmission:
        day = parse_iso_date(proof_date)
        key = format_iso_date(day)
        if not images:
            raise ValidationError("No files uploaded")
        if len(images) > self._max_files:
            raise ValidationError(f"At most {self._max_files} files per upload")
        # Nothing is written unless every file is acceptable.
        for image in images:
            self._storage.validate(image)

        stored: list[str] = []
        try:
            for image in images:
                stored.append(self._storage.save(key, image))
            urls = tuple(proof_url(key, name) for name in stored)
            existing = self._proofs.get(day)
            submission = ProofSubmission(proof_date=day, images=(existing.images if existing else ()) + urls)
            self._proofs.save(submission)
        except Exception:
            logger.exception("Proof upload for %s failed; removing %s stored file(s)", key, len(stored))
            for name in stored:
                self._storage.remove(key, name)
            raise
        logger.info("Stored %s proof image(s) for %s", len(urls), key)
        return submission

    def list_proofs(self, *, start: Any = None, end: Any = None) -> list[ProofSubmission]:
        start_d = parse_iso_date(start, "start") if start else None
        end_d = parse_iso_date(end, "end") if end else None
        return list(self._proofs.list_between(start_d, end_d))

    def submitted_dates(self) -> list[str]:
        return [format_iso_date(p.proof_date) for p in self._proofs.list_between()]

    def _remove(self, day_value: Any, filenames: Sequence[str]) -> ProofSubmission:
        day = parse_iso_date(day_value)
        key = format_iso_date(day)
        submission = self._proofs.get(day)
        if not submission:
            raise NotFoundError("No proofs found for this date")

        doomed = {proof_url(key, Path(str(f)).name) for f in filenames}
        for url in doomed:
            self._storage.remove(key, url.rsplit("/", 1)[-1])

        remaining = tuple(u for u in submission.images if u not in doomed)
        updated = ProofSubmission(proof_date=day, images=remaining)
        if remaining:
            self._proofs.save(updated)
        else:
            self._proofs.delete(day)
            self._storage.remove_day(key)
        logger.info("Removed %s proof image(s) for %s (%s left)", len(doomed), key, len(remaining))
        return updated

    def delete_single(self, *, proof_date: Any, filename: Any) -> ProofSubmission:
        if not filename:
            raise ValidationError("Filename is required")
        return self._remove(proof_date, [str(filename)])

    def delete_many(self, *, proof_date: Any, filenames: Any) -> ProofSubmission:
        names = require_list(filenames, "filenames")
        if not names:
            raise ValidationError("No files selected")
        return self._remove(proof_date, [str(n) for n in names])

    def delete_dates(self, dates: Any) -> dict:
        values = require_list(dates, "dates")
        if not values:
            raise ValidationError("No dates selected")
        days = [parse_iso_date(v) for v in values]

        documents = folders = 0
        for day in days:
            if self._proofs.delete(day):
                documents += 1
            if self._storage.remove_day(format_iso_date(day)):
                folders += 1
        logger.info("Deleted proofs for %s date(s): documents=%s folders=%s", len(days), documents, folders)
        return {"deleted_documents": documents, "deleted_folders": folders}

    def file_path(self, proof_date: Any, filename: str) -> Path:
        day = format_iso_date(parse_iso_date(proof_date))
        path = self._storage.path_for(day, filename)
        if not path.is_file():
            raise NotFoundError("File not found")
        return path
