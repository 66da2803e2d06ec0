"""
Централизованная конфигурация клиента ЦРПТ.

Правила:
- config.py является единственным источником правды для путей и ключевых настроек
- все пути хранятся как объекты pathlib.Path
- значения берутся из переменных окружения с разумными значениями по умолчанию
- параметры клиента читаются из config.ini, токен - из .env
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Optional, Union

from dotenv import load_dotenv


# Корень проекта (папка, где лежит данный файл)
PROJECT_ROOT: Final[Path] = Path(__file__).resolve().parent

# Путь к .env файлу приложения
APP_ENV_PATH: Final[Path] = PROJECT_ROOT / ".env"

# Загружаем переменные окружения из .env (если файл есть)
load_dotenv(APP_ENV_PATH)


# === Пути к ключевым файлам конфигурации ===

CONFIG_INI_PATH: Final[Path] = Path(
    os.getenv("CRPT_CONFIG_INI_PATH", PROJECT_ROOT / "config.ini")
)

LOG_DIR: Final[Path] = Path(os.getenv("CRPT_LOG_DIR", PROJECT_ROOT / "logs"))


@dataclass(frozen=True)
class ClientSettings:
    """Параметры клиента ЦРПТ"""
    time_unit: str
    request_limit: int
    auth_token: str
    api_url: str
    timeout: float
    log_level: str = "INFO"
    log_dir: Optional[Path] = None


def load_client_settings(config_path: Optional[Union[str, Path]] = None,
                         auth_token: Optional[str] = None) -> ClientSettings:
    """
    Собирает параметры клиента из config.ini и .env.

    :param config_path: Путь к config.ini (по умолчанию CONFIG_INI_PATH)
    :param auth_token: Токен, имеет приоритет над .env / окружением
    :raises ConfigurationError: Если конфигурация некорректна или токен не найден
    """
    # Импорт здесь, чтобы config.py не зависел от utils при загрузке путей
    from crpt_transport import API_URL, REQUEST_TIMEOUT
    from secondary_functions import load_config, load_token
    from utils.exceptions import ConfigurationError

    manager = load_config(config_path or CONFIG_INI_PATH)

    token = auth_token or load_token(manager)
    if not token:
        raise ConfigurationError("Токен не найден: укажите CRPT_TOKEN или TOKEN в .env файле")

    log_dir = manager.get("logging", "log_dir", fallback="")
    return ClientSettings(
        time_unit=manager.get("crpt", "time_unit", fallback="MINUTES"),
        request_limit=manager.get_int("crpt", "request_limit"),
        auth_token=token,
        api_url=manager.get("crpt", "api_url", fallback=API_URL),
        timeout=manager.get_float("crpt", "timeout", fallback=float(REQUEST_TIMEOUT)),
        log_level=manager.get("logging", "level", fallback="INFO"),
        log_dir=Path(log_dir) if log_dir else LOG_DIR,
    )
