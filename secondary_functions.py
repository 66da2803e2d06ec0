import os
from pathlib import Path
from typing import Optional, Union

from dotenv import dotenv_values

from utils.config_manager import ConfigManager
from utils.exceptions import ConfigurationError
from utils.logger_config import get_logger

logger = get_logger()

# Кэшированный экземпляр менеджера конфигурации
_config_manager: Optional[ConfigManager] = None


def load_config(config_path: Union[str, Path] = "config.ini") -> ConfigManager:
    """
    Загружает конфигурационный файл.
    Использует кэшированный экземпляр ConfigManager, если путь не изменился.

    :param config_path: Путь к конфигурационному файлу (по умолчанию "config.ini").
    :return: ConfigManager с загруженной конфигурацией.
    :raises ConfigurationError: Если не удалось загрузить или провалидировать конфигурацию.
    """
    global _config_manager

    if _config_manager is None or _config_manager.config_path != Path(config_path):
        manager = ConfigManager(config_path)
        if not manager.validate():
            raise ConfigurationError("Конфигурация не прошла валидацию")
        _config_manager = manager

    return _config_manager


def check_file_exists(file_path, description):
    """
    Проверяет существование файла и логирует ошибку, если его нет.

    :param file_path: Путь к проверяемому файлу.
    :param description: Описание файла для вывода в лог.
    :return: True, если файл существует, иначе False.
    """
    if not os.path.exists(file_path):
        logger.error(f"Файл {description} не найден: {file_path}")
        return False
    return True


def load_token(config: ConfigManager) -> Optional[str]:
    """
    Загружает Bearer токен.

    Порядок: переменная окружения CRPT_TOKEN, затем TOKEN из .env файла,
    путь к которому хранится в config.ini (секция [path], опция env_file).
    Относительный путь считается от каталога config.ini.

    :param config: Менеджер конфигурации.
    :return: Токен или None, если токен не найден.
    """
    token = os.getenv("CRPT_TOKEN")
    if token and token.strip():
        return token.strip()

    env_path = config.get("path", "env_file", fallback="")
    if not env_path:
        logger.error("Токен не задан в CRPT_TOKEN, и путь к .env файлу не найден в config.ini")
        return None

    env_path = Path(os.path.normpath(env_path))
    if not env_path.is_absolute():
        env_path = config.config_path.parent / env_path

    if not check_file_exists(env_path, ".env"):
        return None

    token = (dotenv_values(env_path).get("TOKEN") or "").strip()
    if not token:
        logger.error(f"Токен не найден в .env файле: {env_path}")
        return None

    return token
