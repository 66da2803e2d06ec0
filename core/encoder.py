"""
MODULE: core.encoder
RESPONSIBILITY: Serialize documents and envelopes to the CRPT wire format.
ALLOWED: json, base64, datetime, core.models, utils.exceptions.
FORBIDDEN: Network access, shared mutable state.
ERRORS: EncodingError, DecodingError.

Кодирование документа для API ЦРПТ:
Document -> JSON (UTF-8) -> base64 -> конверт CreateDocumentRequest -> JSON.

Имена полей на проводе задаются статическими таблицами (атрибут -> ключ JSON).
Даты документа передаются строго в формате YYYY-MM-DD.
"""

import base64
import binascii
import json
import re
from datetime import date, datetime
from typing import Any, Dict, Optional, Tuple, Union

from core.models import (
    CreateDocumentRequest,
    CreateDocumentResponse,
    Description,
    Document,
    Product,
)
from utils.exceptions import DecodingError, EncodingError

DATE_FORMAT = "%Y-%m-%d"
DATE_PATTERN = re.compile(r"\d{4}-\d{2}-\d{2}")

# (атрибут, ключ на проводе) - порядок совпадает с порядком ключей в JSON
DESCRIPTION_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("participant_inn", "participantInn"),
)

PRODUCT_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("certificate_document", "certificate_document"),
    ("certificate_document_date", "certificate_document_date"),
    ("certificate_document_number", "certificate_document_number"),
    ("owner_inn", "owner_inn"),
    ("producer_inn", "producer_inn"),
    ("production_date", "production_date"),
    ("tnved_code", "tnved_code"),
    ("uit_code", "uit_code"),
    ("uitu_code", "uitu_code"),
)

DOCUMENT_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("description", "description"),
    ("doc_id", "doc_id"),
    ("doc_status", "doc_status"),
    ("doc_type", "doc_type"),
    ("import_request", "importRequest"),
    ("owner_inn", "owner_inn"),
    ("participant_inn", "participant_inn"),
    ("producer_inn", "producer_inn"),
    ("production_date", "production_date"),
    ("production_type", "production_type"),
    ("products", "products"),
    ("reg_date", "reg_date"),
    ("reg_number", "reg_number"),
)

# Поля Document с типом "календарная дата"
DOCUMENT_DATE_FIELDS = frozenset({"production_date", "reg_date"})
# Константы документа: пишутся на провод, при чтении игнорируются
DOCUMENT_CONSTANT_FIELDS = frozenset({"doc_type", "production_type"})

REQUEST_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("document_format", "document_format"),
    ("product_document", "product_document"),
    ("product_group", "product_group"),
    ("signature", "signature"),
    ("type", "type"),
)

RESPONSE_FIELDS: Tuple[Tuple[str, str], ...] = (
    ("value", "value"),
    ("code", "code"),
    ("error_message", "error_message"),
    ("description", "description"),
)


# --- Даты ------------------------------------------------------------------------

def format_date(value: Any, field_name: str) -> Optional[str]:
    """
    Форматирует дату в YYYY-MM-DD.

    :param value: date/datetime, строка YYYY-MM-DD или None
    :param field_name: Имя поля (для сообщения об ошибке)
    :return: Строка даты или None
    :raises EncodingError: Если значение не является датой
    """
    if value is None:
        return None
    if isinstance(value, str):
        value = parse_date(value, field_name)
    if isinstance(value, datetime):
        value = value.date()
    if not isinstance(value, date):
        raise EncodingError(
            f"Поле '{field_name}' должно быть датой, получено {type(value).__name__}",
            field=field_name,
        )
    # strftime не дополняет год нулями до 4 знаков на всех платформах
    return f"{value.year:04d}-{value.month:02d}-{value.day:02d}"


def parse_date(value: Optional[str], field_name: str) -> Optional[date]:
    """Разбирает дату формата YYYY-MM-DD."""
    if value is None:
        return None
    try:
        if not DATE_PATTERN.fullmatch(value):
            raise ValueError("ожидается ровно 4-2-2 цифры")
        return datetime.strptime(value, DATE_FORMAT).date()
    except (TypeError, ValueError) as e:
        raise EncodingError(
            f"Поле '{field_name}': некорректная дата {value!r}, ожидается YYYY-MM-DD",
            field=field_name,
        ) from e


# --- Сериализация ----------------------------------------------------------------

def _dumps(payload: Dict[str, Any]) -> bytes:
    try:
        return json.dumps(payload, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodingError(f"Не удалось сериализовать в JSON: {e}") from e


def _plain_to_dict(obj: Any, fields: Tuple[Tuple[str, str], ...]) -> Dict[str, Any]:
    return {wire: getattr(obj, attr) for attr, wire in fields}


def document_to_dict(document: Document) -> Dict[str, Any]:
    """Преобразует документ в словарь с ключами в формате API."""
    payload: Dict[str, Any] = {}
    for attr, wire in DOCUMENT_FIELDS:
        value = getattr(document, attr)
        if attr in DOCUMENT_DATE_FIELDS:
            value = format_date(value, attr)
        elif attr == "description":
            value = _plain_to_dict(value, DESCRIPTION_FIELDS) if value is not None else None
        elif attr == "products":
            value = [_plain_to_dict(product, PRODUCT_FIELDS) for product in value]
        payload[wire] = value
    return payload


def encode_document(document: Document) -> bytes:
    """
    Сериализует документ в JSON (UTF-8).

    :raises EncodingError: Если дату нельзя отформатировать или объект не сериализуется
    """
    if not isinstance(document, Document):
        raise EncodingError(f"Ожидается Document, получено {type(document).__name__}")
    try:
        payload = document_to_dict(document)
    except AttributeError as e:
        raise EncodingError(f"Документ: неожиданная структура ({e})") from e
    return _dumps(payload)


def _signature_text(signature: Union[str, bytes]) -> str:
    if isinstance(signature, str):
        return signature
    if isinstance(signature, (bytes, bytearray)):
        try:
            return bytes(signature).decode("utf-8")
        except UnicodeDecodeError as e:
            raise EncodingError("Подпись не является текстом в UTF-8", field="signature") from e
    raise EncodingError(
        f"Подпись должна быть строкой, получено {type(signature).__name__}",
        field="signature",
    )


def build_request(document: Document, signature: Union[str, bytes]) -> CreateDocumentRequest:
    """Формирует конверт: документ в JSON, закодированный в base64, и подпись."""
    document_json = encode_document(document)
    encoded_document = base64.b64encode(document_json).decode("ascii")
    return CreateDocumentRequest(
        product_document=encoded_document,
        signature=_signature_text(signature),
    )


def encode_request(request: CreateDocumentRequest) -> bytes:
    payload = _plain_to_dict(request, REQUEST_FIELDS)
    payload["document_format"] = request.document_format.value
    return _dumps(payload)


def encode_envelope(document: Document, signature: Union[str, bytes]) -> bytes:
    """
    Сериализует конверт запроса на создание документа.

    :param document: Документ
    :param signature: Открепленная подпись (передается без изменений)
    :return: Тело HTTP-запроса (JSON, UTF-8)
    :raises EncodingError: При ошибке сериализации документа или подписи
    """
    return encode_request(build_request(document, signature))


# --- Разбор ----------------------------------------------------------------------

def _loads_object(raw: Union[str, bytes], error_cls: type, what: str) -> Dict[str, Any]:
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise error_cls(f"{what}: некорректный JSON ({e})") from e
    if not isinstance(data, dict):
        raise error_cls(f"{what}: ожидается JSON-объект, получено {type(data).__name__}")
    return data


def _plain_from_dict(cls, data: Dict[str, Any], fields: Tuple[Tuple[str, str], ...]):
    return cls(**{attr: data.get(wire) for attr, wire in fields})


def document_from_dict(data: Dict[str, Any]) -> Document:
    """Восстанавливает документ из словаря с ключами в формате API."""
    kwargs: Dict[str, Any] = {}
    for attr, wire in DOCUMENT_FIELDS:
        if attr in DOCUMENT_CONSTANT_FIELDS or wire not in data:
            continue
        value = data[wire]
        if attr in DOCUMENT_DATE_FIELDS:
            value = parse_date(value, attr)
        elif attr == "description":
            value = _plain_from_dict(Description, value, DESCRIPTION_FIELDS) if value else None
        elif attr == "products":
            value = [_plain_from_dict(Product, item, PRODUCT_FIELDS) for item in value or ()]
        elif attr == "import_request":
            if value is not None and not isinstance(value, bool):
                raise EncodingError(
                    f"Поле 'importRequest' должно быть true/false, получено {value!r}",
                    field=attr,
                )
            value = bool(value)
        kwargs[attr] = value
    return Document(**kwargs)


def decode_document(raw: Union[str, bytes]) -> Document:
    """
    Разбирает документ из JSON (даты в формате YYYY-MM-DD).

    :raises EncodingError: При некорректном JSON или дате
    """
    data = _loads_object(raw, EncodingError, "Документ")
    try:
        return document_from_dict(data)
    except (AttributeError, TypeError) as e:
        raise EncodingError(f"Документ: неожиданная структура ({e})") from e


def decode_envelope_document(raw: Union[str, bytes]) -> Document:
    """Извлекает документ из тела запроса (обратная операция к encode_envelope)."""
    data = _loads_object(raw, EncodingError, "Конверт")
    try:
        document_json = base64.b64decode(data.get("product_document") or "", validate=True)
    except (binascii.Error, ValueError) as e:
        raise EncodingError(f"Конверт: product_document не является base64 ({e})") from e
    return decode_document(document_json)


def decode_response(raw: Union[str, bytes]) -> CreateDocumentResponse:
    """
    Разбирает ответ сервиса. Неизвестные поля игнорируются.

    :raises DecodingError: Если тело ответа не является JSON-объектом
    """
    data = _loads_object(raw, DecodingError, "Ответ сервиса")
    return CreateDocumentResponse(**{
        attr: (str(data[wire]) if data.get(wire) is not None else None)
        for attr, wire in RESPONSE_FIELDS
    })
