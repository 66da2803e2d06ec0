"""
Централизованное управление конфигурацией проекта.
"""
import configparser
from pathlib import Path
from typing import Dict, Optional, Union

from utils.exceptions import ConfigurationError
from utils.logger_config import get_logger

logger = get_logger()

REQUIRED_SECTIONS = ("crpt",)


class ConfigManager:
    """Централизованный менеджер конфигурации."""

    def __init__(self, config_path: Union[str, Path] = "config.ini"):
        """
        Инициализация менеджера конфигурации.

        :param config_path: Путь к файлу конфигурации
        :raises ConfigurationError: Если не удалось загрузить конфигурацию
        """
        self.config_path = Path(config_path)
        self.config = configparser.ConfigParser()
        self._load_config()

    def _load_config(self):
        """Загружает конфигурацию из файла."""
        if not self.config_path.exists():
            raise ConfigurationError(f"Файл конфигурации не найден: {self.config_path}")
        try:
            self.config.read(self.config_path, encoding="utf-8")
        except configparser.Error as e:
            error_msg = f"Ошибка при загрузке конфигурации: {e}"
            logger.error(error_msg)
            raise ConfigurationError(error_msg) from e

    def get(self, section: str, option: str, fallback: Optional[str] = None) -> str:
        """
        Получить значение из конфигурации.

        :param section: Секция конфигурации
        :param option: Опция в секции
        :param fallback: Значение по умолчанию
        :return: Значение из конфигурации
        :raises ConfigurationError: Если секция или опция не найдены и fallback не указан
        """
        try:
            return self.config.get(section, option)
        except (configparser.NoSectionError, configparser.NoOptionError) as e:
            if fallback is not None:
                return fallback
            error_msg = f"Конфигурация не найдена: секция '{section}', опция '{option}'"
            logger.error(error_msg)
            raise ConfigurationError(error_msg) from e

    def get_int(self, section: str, option: str, fallback: Optional[int] = None) -> int:
        value = self.get(section, option, fallback=None if fallback is None else str(fallback))
        try:
            return int(value)
        except ValueError as e:
            raise ConfigurationError(
                f"Опция '{section}.{option}' должна быть целым числом, получено {value!r}"
            ) from e

    def get_float(self, section: str, option: str, fallback: Optional[float] = None) -> float:
        value = self.get(section, option, fallback=None if fallback is None else str(fallback))
        try:
            return float(value)
        except ValueError as e:
            raise ConfigurationError(
                f"Опция '{section}.{option}' должна быть числом, получено {value!r}"
            ) from e

    def get_section(self, section: str) -> Dict[str, str]:
        """
        Получить всю секцию конфигурации.

        :raises ConfigurationError: Если секция не найдена
        """
        if not self.config.has_section(section):
            raise ConfigurationError(f"Секция конфигурации не найдена: '{section}'")
        return dict(self.config[section])

    def validate(self) -> bool:
        """
        Валидация конфигурации.

        :return: True, если все обязательные секции на месте
        """
        for section in REQUIRED_SECTIONS:
            if not self.config.has_section(section):
                logger.error(f"Отсутствует обязательная секция конфигурации: '{section}'")
                return False
        return True
