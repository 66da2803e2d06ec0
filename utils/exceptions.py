"""
Кастомные исключения клиента ЦРПТ (Честный знак).
"""
from typing import Optional


class CrptApiError(Exception):
    """Базовое исключение клиента ЦРПТ."""
    pass


class ConfigurationError(CrptApiError):
    """Ошибка конфигурации (неверные параметры конструктора, config.ini, токен)."""
    pass


class EncodingError(CrptApiError):
    """Ошибка сериализации документа (даты, подпись, JSON)."""
    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message)
        self.field = field


class CrptRequestError(CrptApiError):
    """Ошибка при запросе к API ЦРПТ."""
    def __init__(self, message: str, status_code: Optional[int] = None,
                 body: Optional[str] = None):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class AuthenticationError(CrptRequestError):
    """HTTP 401: Bearer токен недействителен или истек."""
    pass


class AuthorizationError(CrptRequestError):
    """HTTP 403: недостаточно прав или товарная группа не подключена."""
    pass


class HttpError(CrptRequestError):
    """Любой другой ответ вне диапазона 2xx."""
    def __str__(self) -> str:
        return f"HTTP Error {self.status_code}: {self.body}"


class DecodingError(CrptRequestError):
    """Ответ 2xx не удалось разобрать как JSON-объект (запрос уже отправлен)."""
    pass


class TransportError(CrptRequestError):
    """Сетевая ошибка: DNS, отказ в соединении, истечение таймаута."""
    def __init__(self, message: str, original_error: Optional[Exception] = None):
        super().__init__(message)
        self.original_error = original_error
