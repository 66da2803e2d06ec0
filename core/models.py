"""
MODULE: core.models
RESPONSIBILITY: Define domain data structures (dataclasses, enums).
ALLOWED: Dataclasses, Enums, Typing.
FORBIDDEN: Business logic, serialization, network access.
ERRORS: None.

Модели данных документа ввода в оборот (ЦРПТ, товарная группа "clothes")

Модуль содержит dataclass модели:
- Document, Product, Description - содержимое документа
- CreateDocumentRequest - внешний конверт запроса
- CreateDocumentResponse - ответ сервиса
"""

from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Iterable, Optional, Tuple

DOC_TYPE = "LP_INTRODUCE_GOODS"
PRODUCTION_TYPE = "OWN_PRODUCTION"  # товар произведен в РФ
PRODUCT_GROUP = "clothes"


class DocumentFormat(Enum):
    """Формат документа в конверте (клиент формирует только MANUAL)"""
    MANUAL = "MANUAL"
    XML = "XML"
    CSV = "CSV"


@dataclass
class Description:
    """
    Описание документа

    Attributes:
        participant_inn: ИНН участника оборота
    """
    participant_inn: Optional[str] = None


@dataclass
class Product:
    """
    Товар (строка документа)

    Attributes:
        certificate_document: Вид документа обязательной сертификации
        certificate_document_date: Дата документа сертификации (строка, не разбирается)
        certificate_document_number: Номер документа сертификации
        owner_inn: ИНН собственника
        producer_inn: ИНН производителя
        production_date: Дата производства (строка, не разбирается)
        tnved_code: Код ТН ВЭД
        uit_code: Уникальный идентификатор товара
        uitu_code: Уникальный идентификатор транспортной упаковки
    """
    certificate_document: Optional[str] = None
    certificate_document_date: Optional[str] = None
    certificate_document_number: Optional[str] = None
    owner_inn: Optional[str] = None
    producer_inn: Optional[str] = None
    production_date: Optional[str] = None
    tnved_code: Optional[str] = None
    uit_code: Optional[str] = None
    uitu_code: Optional[str] = None


@dataclass
class Document:
    """
    Документ ввода в оборот товаров

    Список товаров копируется при каждом присваивании в неизменяемый кортеж,
    поэтому внешний код не может изменить его после передачи в документ.
    Поля doc_type и production_type - константы.

    Attributes:
        description: Описание (ИНН участника)
        doc_id: Идентификатор документа
        doc_status: Статус документа
        import_request: Признак импорта
        owner_inn: ИНН собственника
        participant_inn: ИНН участника оборота
        producer_inn: ИНН производителя
        production_date: Дата производства
        products: Товары документа
        reg_date: Дата регистрации
        reg_number: Регистрационный номер
    """
    description: Optional[Description] = None
    doc_id: Optional[str] = None
    doc_status: Optional[str] = None
    import_request: bool = False
    owner_inn: Optional[str] = None
    participant_inn: Optional[str] = None
    producer_inn: Optional[str] = None
    production_date: Optional[date] = None
    products: Tuple[Product, ...] = field(default=())
    reg_date: Optional[date] = None
    reg_number: Optional[str] = None

    def __setattr__(self, name, value):
        if name == "products":
            value = tuple(value) if value is not None else ()
        super().__setattr__(name, value)

    @property
    def doc_type(self) -> str:
        return DOC_TYPE

    @property
    def production_type(self) -> str:
        return PRODUCTION_TYPE

    def add_products(self, products: Iterable[Product]) -> None:
        """Добавляет товары в конец списка (с копированием)"""
        self.products = self.products + tuple(products)


@dataclass(frozen=True)
class CreateDocumentRequest:
    """
    Конверт запроса на создание документа

    Attributes:
        product_document: Документ в JSON, закодированный в base64
        signature: Открепленная подпись (передается как есть)
        document_format: Формат документа
        product_group: Товарная группа
        type: Тип документа
    """
    product_document: str
    signature: str
    document_format: DocumentFormat = DocumentFormat.MANUAL
    product_group: str = PRODUCT_GROUP
    type: str = DOC_TYPE


@dataclass
class CreateDocumentResponse:
    """
    Ответ сервиса на создание документа

    Успех определяется только полем value (идентификатор документа);
    остальные поля носят диагностический характер.
    """
    value: Optional[str] = None
    code: Optional[str] = None
    error_message: Optional[str] = None
    description: Optional[str] = None

    def is_success(self) -> bool:
        return bool(self.value)

    @property
    def document_id(self) -> Optional[str]:
        return self.value
