"""
HTTP-транспорт API ЦРПТ: отправка конверта документа и классификация ответа.

Повторные попытки не выполняются - политику повторов определяет вызывающий код.
"""

from __future__ import annotations

from typing import Optional

import requests

from core.encoder import decode_response
from core.models import PRODUCT_GROUP, CreateDocumentResponse
from utils.exceptions import (
    AuthenticationError,
    AuthorizationError,
    ConfigurationError,
    DecodingError,
    HttpError,
    TransportError,
)
from utils.logger_config import get_logger, mask_token


logger = get_logger()

API_URL = "https://ismp.crpt.ru/api/v3/lk/documents/create"
REQUEST_TIMEOUT = 30  # секунд
# Время жизни токена контролирует сервис, локально не проверяется
TOKEN_LIFETIME_HOURS = 10


def normalize_token(auth_token: Optional[str]) -> str:
    """
    Обрезает пробелы вокруг токена и проверяет, что он не пустой.

    :raises ConfigurationError: Если токен None или пустой
    """
    if auth_token is None or not str(auth_token).strip():
        raise ConfigurationError("Auth token cannot be null or empty")
    return str(auth_token).strip()


class CrptTransport:
    """
    Отправляет тело запроса POST-ом на API создания документов.

    Сессия requests используется только для пула соединений,
    поэтому один транспорт можно вызывать из нескольких потоков.
    """

    def __init__(self, auth_token: str, api_url: str = API_URL,
                 timeout: float = REQUEST_TIMEOUT,
                 session: Optional[requests.Session] = None) -> None:
        self._token = normalize_token(auth_token)
        self.api_url = api_url or API_URL
        self.timeout = timeout
        self._owns_session = session is None
        self._session = session if session is not None else requests.Session()

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
            "Authorization": f"Bearer {self._token}",
        }

    def submit(self, body: bytes) -> CreateDocumentResponse:
        """
        Отправляет конверт документа.

        :param body: Тело запроса (JSON, UTF-8)
        :return: Разобранный ответ сервиса (2xx)
        :raises AuthenticationError: HTTP 401
        :raises AuthorizationError: HTTP 403
        :raises HttpError: Любой другой статус вне 2xx
        :raises TransportError: Сетевая ошибка или истечение таймаута
        :raises DecodingError: Тело ответа 2xx не является JSON-объектом
        """
        logger.debug(
            f"[CRPT] POST -> {self.api_url} ({len(body)} байт, токен {mask_token(self._token)})"
        )
        try:
            resp = self._session.post(
                self.api_url,
                params={"pg": PRODUCT_GROUP},
                data=body,
                headers=self._headers(),
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.error(f"[CRPT] Таймаут запроса ({self.timeout} с): {e}")
            raise TransportError(f"Таймаут запроса к {self.api_url}: {e}", original_error=e) from e
        except requests.exceptions.RequestException as e:
            logger.error(f"[CRPT] Ошибка соединения: {e}")
            raise TransportError(f"Ошибка соединения с {self.api_url}: {e}", original_error=e) from e

        status_code = resp.status_code
        logger.info(f"[CRPT] Ответ: HTTP {status_code}")

        if status_code == 401:
            logger.error("[CRPT] Ошибка авторизации (401)")
            raise AuthenticationError(
                "Ошибка авторизации (401): Bearer токен недействителен или истек "
                f"(время жизни {TOKEN_LIFETIME_HOURS} часов)",
                status_code=status_code,
                body=resp.text,
            )
        if status_code == 403:
            logger.error("[CRPT] Доступ запрещен (403)")
            raise AuthorizationError(
                "Доступ запрещен (403): Недостаточно прав или товарная группа не подключена",
                status_code=status_code,
                body=resp.text,
            )
        if not 200 <= status_code < 300:
            logger.error(f"[CRPT] HTTP Error {status_code}: {resp.text[:500]}")
            raise HttpError(
                f"HTTP Error {status_code}",
                status_code=status_code,
                body=resp.text,
            )

        try:
            return decode_response(resp.content)
        except DecodingError as e:
            logger.error(f"[CRPT] Ответ HTTP {status_code} не разобран: {resp.text[:500]}")
            raise DecodingError(str(e), status_code=status_code, body=resp.text) from e

    def close(self) -> None:
        """Закрывает сессию, если транспорт создал её сам."""
        if self._owns_session:
            self._session.close()
