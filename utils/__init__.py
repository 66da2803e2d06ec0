"""
Утилиты клиента ЦРПТ.
"""
from .logger_config import get_logger, setup_logging, mask_token
from .exceptions import (
    CrptApiError,
    ConfigurationError,
    EncodingError,
    DecodingError,
    CrptRequestError,
    AuthenticationError,
    AuthorizationError,
    HttpError,
    TransportError,
)
from .rate_limiter import RateLimiter, TimeUnit
from .config_manager import ConfigManager

__all__ = [
    'get_logger',
    'setup_logging',
    'mask_token',
    'CrptApiError',
    'ConfigurationError',
    'EncodingError',
    'DecodingError',
    'CrptRequestError',
    'AuthenticationError',
    'AuthorizationError',
    'HttpError',
    'TransportError',
    'RateLimiter',
    'TimeUnit',
    'ConfigManager',
]
