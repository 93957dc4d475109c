from __future__ import annotations

import logging
import time
from typing import Callable, Optional

import requests

from ..core.constants import OCR_READ_PATH
from ..core.exceptions import RequestTimeoutError, ServiceError, ValidationError

logger = logging.getLogger(__name__)


class AzureReadClient:
    """Text extraction through the Azure Computer Vision Read API.

    The API is asynchronous: the image is submitted, then the returned
    ``Operation-Location`` is polled until the analysis succeeds or fails.
    """

    def __init__(
        self,
        *,
        endpoint: str,
        key: str,
        poll_attempts: int = 10,
        poll_interval: float = 1.5,
        timeout: float = 30,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._endpoint = (endpoint or "").rstrip("/")
        self._key = key or ""
        self._poll_attempts = int(poll_attempts)
        self._poll_interval = float(poll_interval)
        self._timeout = timeout
        self._session = session or requests.Session()
        self._sleep = sleep

    @property
    def configured(self) -> bool:
        return bool(self._endpoint and self._key)

    def read_lines(self, image: bytes) -> list[str]:
        if not image:
            raise ValidationError("No file uploaded")
        if not self.configured:
            raise ServiceError("OCR service is not configured")

        operation_url = self._submit(image)
        pages = self._poll(operation_url)
        return [line.get("text") for page in pages for line in page.get("lines", []) if line.get("text")]

    def _submit(self, image: bytes) -> str:
        try:
            resp = self._session.post(
                f"{self._endpoint}{OCR_READ_PATH}",
                headers={
                    "Ocp-Apim-Subscription-Key": self._key,
                    "Content-Type": "application/octet-stream",
                },
                data=image,
                timeout=self._timeout,
            )
        except requests.RequestException as e:
            logger.warning("OCR submit failed: %s", e)
            raise ServiceError("OCR service unreachable") from e

        if not resp.ok:
            raise ValidationError(resp.text or f"OCR request rejected ({resp.status_code})")

        operation_url = resp.headers.get("Operation-Location")
        if not operation_url:
            raise ServiceError("OCR service did not return an operation location")
        return operation_url

    def _poll(self, operation_url: str) -> list[dict]:
        for attempt in range(self._poll_attempts):
            self._sleep(self._poll_interval)
            try:
                resp = self._session.get(
                    operation_url,
                    headers={"Ocp-Apim-Subscription-Key": self._key},
                    timeout=self._timeout,
                )
                body = resp.json()
            except (requests.RequestException, ValueError) as e:
                logger.warning("OCR poll failed: %s", e)
                raise ServiceError("OCR service unreachable") from e

            status = body.get("status")
            if status == "succeeded":
                return list((body.get("analyzeResult") or {}).get("readResults") or [])
            if status == "failed":
                raise ServiceError("Azure Read failed.")
            logger.debug("OCR status %s (attempt %s/%s)", status, attempt + 1, self._poll_attempts)

        raise RequestTimeoutError("Timeout waiting for Azure.")
