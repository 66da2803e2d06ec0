"""
Настройка логирования для проекта.

Модули библиотеки только получают logger через get_logger().
Обработчики (консоль + файлы) подключает точка входа через setup_logging().
"""
import sys
from pathlib import Path
from typing import Optional, Union

from loguru import logger

FILE_FORMAT = "{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
CONSOLE_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | <level>{level: <8}</level> | <level>{message}</level>"
)


def setup_logging(level: str = "INFO", log_dir: Optional[Union[str, Path]] = "logs") -> None:
    """
    Подключает обработчики loguru.

    :param level: Уровень логирования для консоли
    :param log_dir: Директория для app.log / errors.log (None - только консоль)
    """
    # Удаляем стандартный обработчик loguru
    logger.remove()

    logger.add(sys.stderr, level=level.upper(), format=CONSOLE_FORMAT, colorize=True)

    if log_dir is None:
        return

    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    # Файл приложения (DEBUG и выше)
    logger.add(
        log_path / "app.log",
        format=FILE_FORMAT,
        level="DEBUG",
        rotation="10 MB",
        retention="30 days",
        compression="zip",
    )

    # Файл ошибок (ERROR и выше)
    logger.add(
        log_path / "errors.log",
        format=FILE_FORMAT,
        level="ERROR",
        rotation="10 MB",
        retention="90 days",
        compression="zip",
        backtrace=True,
        diagnose=False,
    )


def mask_token(token: Optional[str]) -> str:
    """Маскирует токен для вывода в лог: 'abcd...wxyz'."""
    if not token:
        return "<empty>"
    if len(token) <= 8:
        return "***"
    return f"{token[:4]}...{token[-4:]}"


def get_logger():
    """Возвращает настроенный logger."""
    return logger
