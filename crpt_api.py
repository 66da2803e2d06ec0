"""
Клиент API ЦРПТ (Честный знак) для создания документов ввода в оборот.

Один экземпляр можно использовать из нескольких потоков: ограничитель частоты
сериализует только выдачу слотов, сами HTTP-запросы выполняются параллельно.
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Union

import requests

from config import ClientSettings, load_client_settings
from core.encoder import encode_envelope
from core.models import CreateDocumentResponse, Document
from crpt_transport import API_URL, REQUEST_TIMEOUT, CrptTransport, normalize_token
from utils.logger_config import get_logger
from utils.rate_limiter import RateLimiter, TimeUnit


logger = get_logger()


class CrptApi:
    """
    Фасад: слот ограничителя -> кодирование конверта -> POST -> разбор ответа.

    Пример::

        api = CrptApi(TimeUnit.MINUTES, 100, token)
        response = api.submit_document(document, signature)
        if response.is_success():
            print(response.document_id)
    """

    def __init__(self, time_unit: Union[TimeUnit, str], request_limit: int, auth_token: str,
                 *, api_url: str = API_URL, timeout: float = REQUEST_TIMEOUT,
                 session: Optional[requests.Session] = None) -> None:
        """
        :param time_unit: Окно ограничения частоты
        :param request_limit: Максимум запросов за окно (> 0)
        :param auth_token: Bearer токен (обрезается, не может быть пустым)
        :param api_url: Адрес API создания документов
        :param timeout: Таймаут HTTP-запроса в секундах
        :param session: Сессия requests (по умолчанию создаётся своя)
        :raises ConfigurationError: При неверном лимите или пустом токене
        """
        self._rate_limiter = RateLimiter(time_unit, request_limit)
        self._transport = CrptTransport(
            normalize_token(auth_token),
            api_url=api_url,
            timeout=timeout,
            session=session,
        )
        logger.debug(f"Клиент ЦРПТ создан: {self._rate_limiter!r}, url={self._transport.api_url}")

    @classmethod
    def from_settings(cls, settings: ClientSettings,
                      session: Optional[requests.Session] = None) -> "CrptApi":
        return cls(
            settings.time_unit,
            settings.request_limit,
            settings.auth_token,
            api_url=settings.api_url,
            timeout=settings.timeout,
            session=session,
        )

    @classmethod
    def from_config(cls, config_path: Optional[Union[str, Path]] = None,
                    auth_token: Optional[str] = None) -> "CrptApi":
        """
        Создаёт клиент по config.ini и .env.

        :param config_path: Путь к config.ini (по умолчанию CONFIG_INI_PATH)
        :param auth_token: Токен, имеет приоритет над .env
        """
        return cls.from_settings(load_client_settings(config_path, auth_token=auth_token))

    @property
    def rate_limiter(self) -> RateLimiter:
        return self._rate_limiter

    def submit_document(self, document: Document, signature: str) -> CreateDocumentResponse:
        """
        Создаёт документ ввода в оборот.

        Ответ 2xx с пустым value возвращается как есть (is_success() == False).

        :param document: Документ
        :param signature: Открепленная подпись
        :return: Ответ сервиса
        :raises EncodingError: Ошибка сериализации документа
        :raises CrptRequestError: Ошибка HTTP или сети (без повторов)
        """
        self._rate_limiter.await_slot()

        body = encode_envelope(document, signature)
        response = self._transport.submit(body)

        if response.is_success():
            logger.info(f"Документ создан: {response.document_id}")
        else:
            logger.warning(
                f"Документ не принят: code={response.code}, "
                f"error_message={response.error_message}, description={response.description}"
            )
        return response

    def close(self) -> None:
        self._transport.close()

    def __enter__(self) -> "CrptApi":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
