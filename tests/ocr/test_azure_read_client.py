import pytest
from requests.structures import CaseInsensitiveDict

from backoffice.core.exceptions import RequestTimeoutError, ServiceError, ValidationError
from backoffice.ocr.client import AzureReadClient


class FakeResponse:
    def __init__(self, status_code=200, body=None, headers=None, text=""):
        self.status_code = status_code
        self._body = body or {}
        self.headers = CaseInsensitiveDict(headers or {})
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return self._body


class FakeSession:
    def __init__(self, submit, polls):
        self.submit = submit
        self.polls = list(polls)
        self.posted = []
        self.polled = 0

    def post(self, url, headers=None, data=None, timeout=None):
        self.posted.append((url, headers, data))
        return self.submit

    def get(self, url, headers=None, timeout=None):
        self.polled += 1
        return self.polls.pop(0)


ACCEPTED = FakeResponse(202, headers={"operation-location": "https://ocr.test/op/1"})


def _client(session, attempts=3):
    return AzureReadClient(
        endpoint="https://ocr.test/",
        key="k",
        poll_attempts=attempts,
        poll_interval=0,
        session=session,
        sleep=lambda _: None,
    )


def test_read_lines_collects_text_of_all_pages():
    session = FakeSession(
        ACCEPTED,
        [
            FakeResponse(body={"status": "running"}),
            FakeResponse(
                body={
                    "status": "succeeded",
                    "analyzeResult": {
                        "readResults": [
                            {"lines": [{"text": "TOTAL"}, {"text": "1,250.00"}]},
                            {"lines": [{"text": ""}, {"text": "Thank you"}]},
                        ]
                    },
                }
            ),
        ],
    )

    assert _client(session).read_lines(b"img") == ["TOTAL", "1,250.00", "Thank you"]
    url, headers, data = session.posted[0]
    assert url == "https://ocr.test/vision/v3.2/read/analyze"
    assert headers["Ocp-Apim-Subscription-Key"] == "k"
    assert headers["Content-Type"] == "application/octet-stream"
    assert data == b"img"
    assert session.polled == 2


def test_rejected_submission_is_a_client_error():
    session = FakeSession(FakeResponse(401, text="Access denied due to invalid subscription key"), [])
    with pytest.raises(ValidationError, match="invalid subscription key"):
        _client(session).read_lines(b"img")


def test_failed_analysis_is_a_server_error():
    session = FakeSession(ACCEPTED, [FakeResponse(body={"status": "failed"})])
    with pytest.raises(ServiceError):
        _client(session).read_lines(b"img")


def test_no_result_in_time():
    session = FakeSession(ACCEPTED, [FakeResponse(body={"status": "running"}) for _ in range(2)])
    with pytest.raises(RequestTimeoutError):
        _client(session, attempts=2).read_lines(b"img")
    assert session.polled == 2


def test_unconfigured_client():
    with pytest.raises(ServiceError):
        AzureReadClient(endpoint="", key="").read_lines(b"img")
