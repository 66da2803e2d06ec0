"""
Ограничитель частоты запросов к API ЦРПТ.

Сервис разрешает не более N запросов за единицу времени. Ограничитель
выдаёт "слоты" с фиксированным шагом min_delay = единица_времени / N:
два слота никогда не выдаются ближе, чем через min_delay, в том числе
при одновременных вызовах из нескольких потоков.

Резервирование следующего слота выполняется атомарно под блокировкой,
а само ожидание - вне блокировки, поэтому потоки не мешают друг другу спать.
"""
import time
from enum import Enum
from threading import Lock
from typing import Callable, Optional, Union

from utils.exceptions import ConfigurationError
from utils.logger_config import get_logger

logger = get_logger()


class TimeUnit(Enum):
    """Единица времени окна ограничения (значение - длительность в секундах)."""
    NANOSECONDS = 1e-9
    MICROSECONDS = 1e-6
    MILLISECONDS = 1e-3
    SECONDS = 1.0
    MINUTES = 60.0
    HOURS = 3600.0
    DAYS = 86400.0

    @property
    def seconds(self) -> float:
        return self.value

    @classmethod
    def from_name(cls, name: str) -> "TimeUnit":
        """
        Получить единицу времени по имени (без учёта регистра).

        :raises ConfigurationError: Если имя неизвестно
        """
        try:
            return cls[str(name).strip().upper()]
        except KeyError as e:
            allowed = ", ".join(unit.name for unit in cls)
            raise ConfigurationError(
                f"Неизвестная единица времени '{name}'. Допустимые значения: {allowed}"
            ) from e


class RateLimiter:
    """Потокобезопасный ограничитель: один слот каждые min_delay секунд."""

    def __init__(self, time_unit: Union[TimeUnit, str], request_limit: int,
                 clock: Callable[[], float] = time.monotonic,
                 sleep: Callable[[float], None] = time.sleep):
        """
        :param time_unit: Окно ограничения (TimeUnit или его имя)
        :param request_limit: Максимум запросов за окно, целое > 0
        :param clock: Монотонные часы (секунды)
        :param sleep: Функция ожидания
        :raises ConfigurationError: При неверных параметрах
        """
        if isinstance(time_unit, str):
            time_unit = TimeUnit.from_name(time_unit)
        if not isinstance(time_unit, TimeUnit):
            raise ConfigurationError(f"Неверная единица времени: {time_unit!r}")
        if isinstance(request_limit, bool) or not isinstance(request_limit, int) or request_limit <= 0:
            raise ConfigurationError("Request limit must be positive")

        self.time_unit = time_unit
        self.request_limit = request_limit
        self.min_delay = time_unit.seconds / request_limit

        self._clock = clock
        self._sleep = sleep
        self._lock = Lock()
        # Время последнего выданного слота; None - слотов ещё не было
        self._last_slot: Optional[float] = None

    def _reserve_slot(self) -> tuple[float, float]:
        """Резервирует ближайший свободный слот. Возвращает (слот, текущее время)."""
        with self._lock:
            now = self._clock()
            if self._last_slot is None:
                slot = now
            else:
                slot = max(now, self._last_slot + self.min_delay)
            self._last_slot = slot
        return slot, now

    def await_slot(self) -> float:
        """
        Блокирует вызывающий поток до наступления его слота.

        :return: Время выданного слота по часам ограничителя
        """
        slot, now = self._reserve_slot()
        wait = slot - now
        if wait > 0:
            logger.debug(f"Ограничение частоты: ожидание {wait:.3f} с")
            self._sleep(wait)
        return slot

    def __repr__(self) -> str:
        return (f"RateLimiter(time_unit={self.time_unit.name}, "
                f"request_limit={self.request_limit}, min_delay={self.min_delay:.6f}s)")
