import base64
import json
from datetime import date, datetime

import pytest

from core.encoder import (
    decode_document,
    decode_envelope_document,
    decode_response,
    encode_document,
    encode_envelope,
    format_date,
)
from core.models import Document, Product
from utils.exceptions import DecodingError, EncodingError


def test_dates_are_rendered_as_iso_literals(document):
    raw = encode_document(document).decode("utf-8")

    assert '"production_date":"2025-10-31"' in raw
    assert '"reg_date":"2025-11-01"' in raw


def test_document_dates_survive_decoding(document):
    decoded = decode_document(encode_document(document))

    assert decoded.production_date == date(2025, 10, 31)
    assert decoded.reg_date == date(2025, 11, 1)
    assert decoded == document


def test_empty_products_serialize_to_empty_array():
    raw = encode_document(Document(products=[])).decode("utf-8")

    assert '"products":[]' in raw


def test_uit_code_is_verbatim():
    document = Document(products=[Product(uit_code="01234567890123456789")])
    payload = json.loads(encode_document(document))

    assert payload["products"][0]["uit_code"] == "01234567890123456789"


def test_wire_field_names(document):
    payload = json.loads(encode_document(document))

    assert list(payload) == [
        "description", "doc_id", "doc_status", "doc_type", "importRequest",
        "owner_inn", "participant_inn", "producer_inn", "production_date",
        "production_type", "products", "reg_date", "reg_number",
    ]
    assert payload["description"] == {"participantInn": "1234567890"}
    assert payload["doc_type"] == "LP_INTRODUCE_GOODS"
    assert payload["production_type"] == "OWN_PRODUCTION"
    assert payload["importRequest"] is False
    assert set(payload["products"][0]) == {
        "certificate_document", "certificate_document_date", "certificate_document_number",
        "owner_inn", "producer_inn", "production_date", "tnved_code", "uit_code", "uitu_code",
    }


def test_null_dates_and_description_are_json_null():
    payload = json.loads(encode_document(Document()))

    assert payload["production_date"] is None
    assert payload["reg_date"] is None
    assert payload["description"] is None


def test_product_production_date_is_not_parsed():
    document = Document(products=[Product(production_date="31.10.2025")])
    payload = json.loads(encode_document(document))

    assert payload["products"][0]["production_date"] == "31.10.2025"


def test_non_ascii_is_kept_as_utf8():
    document = Document(reg_number="№ 1")

    assert "№ 1".encode("utf-8") in encode_document(document)


@pytest.mark.parametrize("value, expected", [
    (date(2025, 1, 5), "2025-01-05"),
    (datetime(2025, 1, 5, 23, 59), "2025-01-05"),
    ("2025-01-05", "2025-01-05"),
    (date(999, 2, 3), "0999-02-03"),
    (None, None),
])
def test_format_date(value, expected):
    assert format_date(value, "reg_date") == expected


@pytest.mark.parametrize("bad", ["05.01.2025", "2025-1-5", "2025-13-01", 20250105, True])
def test_invalid_date_raises_encoding_error(bad):
    document = Document(reg_date=bad)

    with pytest.raises(EncodingError) as exc_info:
        encode_document(document)
    assert exc_info.value.field == "reg_date"


def test_envelope_structure(document):
    body = json.loads(encode_envelope(document, "signature-value"))

    assert list(body) == ["document_format", "product_document", "product_group", "signature", "type"]
    assert body["document_format"] == "MANUAL"
    assert body["product_group"] == "clothes"
    assert body["signature"] == "signature-value"
    assert body["type"] == "LP_INTRODUCE_GOODS"
    assert base64.b64decode(body["product_document"]) == encode_document(document)
    assert "\n" not in body["product_document"]


def test_envelope_document_can_be_extracted(document):
    assert decode_envelope_document(encode_envelope(document, "sig")) == document


def test_signature_bytes_are_decoded(document):
    body = json.loads(encode_envelope(document, "подпись".encode("utf-8")))

    assert body["signature"] == "подпись"


@pytest.mark.parametrize("signature", [None, 123, b"\xff\xfe"])
def test_unusable_signature_raises(document, signature):
    with pytest.raises(EncodingError):
        encode_envelope(document, signature)


def test_decode_document_ignores_constants_and_unknown_keys():
    raw = json.dumps({
        "doc_id": "1",
        "doc_type": "SOMETHING_ELSE",
        "importRequest": True,
        "unknown": 42,
        "products": [{"uit_code": "X", "extra": "y"}],
    })

    document = decode_document(raw)

    assert document.doc_id == "1"
    assert document.doc_type == "LP_INTRODUCE_GOODS"
    assert document.import_request is True
    assert document.products == (Product(uit_code="X"),)


@pytest.mark.parametrize("raw", ["not json", "[]", '{"reg_date":"01.11.2025"}'])
def test_decode_document_errors(raw):
    with pytest.raises(EncodingError):
        decode_document(raw)


@pytest.mark.parametrize("value", ["false", 0, 1, "true"])
def test_import_request_must_be_boolean(value):
    with pytest.raises(EncodingError) as exc_info:
        decode_document(json.dumps({"importRequest": value}))

    assert exc_info.value.field == "import_request"


def test_null_import_request_is_false():
    assert decode_document('{"importRequest": null}').import_request is False


def test_decode_response():
    response = decode_response('{"value":"","code":"BAD","error_message":"oops","other":1}')

    assert response.value == ""
    assert response.code == "BAD"
    assert response.error_message == "oops"
    assert response.description is None
    assert not response.is_success()


@pytest.mark.parametrize("raw", ["", "<html>", '"value"', "null"])
def test_decode_response_errors(raw):
    with pytest.raises(DecodingError):
        decode_response(raw)
