"""
Общие фикстуры тестов: поддельная сессия requests и типовой документ.
"""
from datetime import date

import pytest

from core.models import Description, Document, Product


class FakeResponse:
    def __init__(self, status_code: int, body: str = ""):
        self.status_code = status_code
        self.text = body
        self.content = body.encode("utf-8")


class FakeSession:
    """Записывает вызовы post() и возвращает заранее заданные ответы."""

    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []
        self.closed = False

    def post(self, url, **kwargs):
        self.calls.append((url, kwargs))
        if self.error is not None:
            raise self.error
        return self.response

    def close(self):
        self.closed = True


@pytest.fixture
def make_session():
    def _make(status_code=200, body='{"value":"doc-123"}', error=None):
        return FakeSession(FakeResponse(status_code, body), error=error)
    return _make


@pytest.fixture
def document():
    return Document(
        description=Description(participant_inn="1234567890"),
        doc_id="TEST_DOC_001",
        doc_status="NEW",
        owner_inn="1234567890",
        participant_inn="9876543210",
        producer_inn="1111111111",
        production_date=date(2025, 10, 31),
        products=[
            Product(
                certificate_document="CONFORMITY_CERTIFICATE",
                certificate_document_date="2025-10-01",
                certificate_document_number="CERT-42",
                owner_inn="1234567890",
                producer_inn="1111111111",
                production_date="2025-10-31",
                tnved_code="6109100000",
                uit_code="01234567890123456789",
                uitu_code=None,
            )
        ],
        reg_date=date(2025, 11, 1),
        reg_number="REG_001",
    )
