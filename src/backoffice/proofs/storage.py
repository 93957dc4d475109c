from __future__ import annotations

import io
import logging
import os
import secrets
import shutil
from pathlib import Path
from typing import Callable

from PIL import Image, UnidentifiedImageError
from werkzeug.utils import secure_filename

from ..common.datetime_utils import now_local
from ..core.exceptions import ValidationError
from .model import UploadedImage

logger = logging.getLogger(__name__)


class LocalProofStorage:
    """Proof images on local disk: ``<root>/<YYYY-MM-DD>/<ms>-<random><ext>``."""

    def __init__(self, root: str | os.PathLike, *, max_bytes: int, clock: Callable = now_local):
        self._root = Path(root)
        self._max_bytes = int(max_bytes)
        self._clock = clock

    @property
    def root(self) -> Path:
        return self._root

    def _day_dir(self, day: str) -> Path:
        return self._root / secure_filename(day)

    def validate(self, image: UploadedImage) -> None:
        name = image.filename or "file"
        if not (image.mimetype or "").startswith("image/"):
            raise ValidationError(f"Only image files are allowed ({name})")
        if len(image.data) > self._max_bytes:
            raise ValidationError(f"{name} exceeds the {self._max_bytes // (1024 * 1024)}MB limit")
        try:
            with Image.open(io.BytesIO(image.data)) as img:
                img.verify()
        except (UnidentifiedImageError, OSError, SyntaxError):
            raise ValidationError(f"{name} is not a valid image")

    def save(self, day: str, image: UploadedImage) -> str:
        """Write one image and return the stored file name."""
        ext = Path(secure_filename(image.filename or "")).suffix.lower() or ".jpg"
        stamp = int(self._clock().timestamp() * 1000)
        stored = f"{stamp}-{secrets.token_hex(4)}{ext}"

        folder = self._day_dir(day)
        folder.mkdir(parents=True, exist_ok=True)
        (folder / stored).write_bytes(image.data)
        return stored

    def path_for(self, day: str, filename: str) -> Path:
        return self._day_dir(day) / secure_filename(filename)

    def remove(self, day: str, filename: str) -> bool:
        path = self.path_for(day, filename)
        if not path.is_file():
            logger.warning("Proof file already missing: %s", path)
            return False
        path.unlink()
        return True

    def remove_day(self, day: str) -> bool:
        folder = self._day_dir(day)
        if not folder.is_dir():
            return False
        shutil.rmtree(folder)
        return True
