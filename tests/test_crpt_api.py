import base64
import json
from concurrent.futures import ThreadPoolExecutor

import pytest

from core.encoder import encode_document
from core.models import Document
from crpt_api import CrptApi
from utils.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    DecodingError,
    EncodingError,
    TransportError,
)
from utils.rate_limiter import TimeUnit

VALID_TOKEN = "Bearer_test_token_123456789"


@pytest.mark.parametrize("limit", [0, -5])
def test_non_positive_limit(limit):
    with pytest.raises(ConfigurationError, match="Request limit must be positive"):
        CrptApi(TimeUnit.MINUTES, limit, VALID_TOKEN)


@pytest.mark.parametrize("token", [None, "", "   "])
def test_blank_token(token):
    with pytest.raises(ConfigurationError, match="Auth token cannot be null or empty"):
        CrptApi(TimeUnit.MINUTES, 100, token)


def test_construction_does_no_network_io(make_session):
    session = make_session()

    CrptApi(TimeUnit.MINUTES, 100, VALID_TOKEN, session=session)

    assert session.calls == []


def test_submit_document_success(make_session, document):
    session = make_session(200, '{"value":"doc-123"}')
    api = CrptApi(TimeUnit.MINUTES, 100, VALID_TOKEN, session=session)

    response = api.submit_document(document, "signature-value")

    assert response.is_success()
    assert response.document_id == "doc-123"
    _, kwargs = session.calls[0]
    body = json.loads(kwargs["data"])
    assert body["signature"] == "signature-value"
    assert base64.b64decode(body["product_document"]) == encode_document(document)


def test_application_rejection_is_returned(make_session, document):
    api = CrptApi(TimeUnit.MINUTES, 100, VALID_TOKEN, session=make_session(200, '{"value":"","code":"BAD"}'))

    response = api.submit_document(document, "sig")

    assert response.is_success() is False
    assert response.code == "BAD"


def test_401_raises_without_retry(make_session, document):
    session = make_session(401, "")
    api = CrptApi(TimeUnit.MINUTES, 100, VALID_TOKEN, session=session)

    with pytest.raises(AuthenticationError):
        api.submit_document(document, "sig")
    assert len(session.calls) == 1


def test_403_raises(make_session, document):
    api = CrptApi(TimeUnit.MINUTES, 100, VALID_TOKEN, session=make_session(403, ""))

    with pytest.raises(AuthorizationError):
        api.submit_document(document, "sig")


def test_transport_error_propagates(make_session, document):
    import requests

    session = make_session(error=requests.exceptions.ConnectionError("dns"))
    api = CrptApi(TimeUnit.MINUTES, 100, VALID_TOKEN, session=session)

    with pytest.raises(TransportError):
        api.submit_document(document, "sig")


def test_unparseable_reply_is_a_request_error(make_session, document):
    session = make_session(200, "<html>gateway ok</html>")
    api = CrptApi(TimeUnit.MINUTES, 100, VALID_TOKEN, session=session)

    with pytest.raises(DecodingError) as exc_info:
        api.submit_document(document, "sig")

    assert not isinstance(exc_info.value, EncodingError)
    assert exc_info.value.status_code == 200
    assert len(session.calls) == 1


def test_encoding_error_sends_nothing(make_session):
    session = make_session()
    api = CrptApi(TimeUnit.MINUTES, 100, VALID_TOKEN, session=session)

    with pytest.raises(EncodingError):
        api.submit_document(Document(reg_date="not a date"), "sig")
    assert session.calls == []


def test_each_call_takes_a_slot(make_session, document):
    api = CrptApi(TimeUnit.MINUTES, 100, VALID_TOKEN, session=make_session())
    slots = []
    original = api.rate_limiter.await_slot

    def recording():
        slots.append(original())
        return slots[-1]

    api.rate_limiter.await_slot = recording
    api.rate_limiter._sleep = lambda seconds: None

    for _ in range(3):
        api.submit_document(document, "sig")

    assert len(slots) == 3
    assert slots[2] - slots[0] >= 2 * api.rate_limiter.min_delay - 1e-9


def test_shared_client_from_many_threads(make_session, document):
    session = make_session()
    api = CrptApi(TimeUnit.SECONDS, 50, VALID_TOKEN, session=session)

    with ThreadPoolExecutor(max_workers=10) as pool:
        responses = list(pool.map(lambda _: api.submit_document(document, "sig"), range(10)))

    assert all(response.is_success() for response in responses)
    assert len(session.calls) == 10


def test_context_manager_closes_own_session(monkeypatch):
    api = CrptApi(TimeUnit.MINUTES, 100, VALID_TOKEN)
    closed = []
    monkeypatch.setattr(api._transport._session, "close", lambda: closed.append(True))

    with api:
        pass

    assert closed == [True]
