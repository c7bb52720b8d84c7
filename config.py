"""
Настройки программы и конфигурация логирования
"""
import logging
import sys
from typing import Any, Dict, Optional

ROOT_LOGGER_NAME = "fd_normalizer"

# ======================= Настройки =======================
CONFIG: Dict[str, Any] = {
    "DISPLAY": {
        # Отступ при выводе отношений и результатов в консоль
        "WIDTH": 12,
    },
    "LOGGING": {
        "LEVEL": "INFO",
        "FORMAT": "%(message)s",
    },
    "BENCHMARK": {
        "ATTRIBUTE_COUNTS": [4, 6, 8, 10, 12],
        "DEPENDENCY_COUNT": 8,
        "MAX_LHS_SIZE": 3,
        "MAX_RHS_SIZE": 2,
        "REPEATS": 5,
        "SEED": 42,
    },
}


def setup_logging(level: Optional[str] = None, format_string: Optional[str] = None) -> None:
    """
    Настроить логирование программы

    Args:
        level: Уровень логирования (DEBUG, INFO, WARNING, ...)
        format_string: Формат сообщений
    """
    log_level = (level or CONFIG["LOGGING"]["LEVEL"]).upper()
    format_string = format_string or CONFIG["LOGGING"]["FORMAT"]

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, log_level))
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(getattr(logging, log_level))
    console_handler.setFormatter(logging.Formatter(format_string))
    root_logger.addHandler(console_handler)

    root_logger.propagate = False


def get_logger(name: str) -> logging.Logger:
    """Получить логгер модуля (с префиксом fd_normalizer)"""
    if name.startswith(ROOT_LOGGER_NAME):
        return logging.getLogger(name)
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")
