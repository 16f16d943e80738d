"""
nexo/logging_setup.py — Configuração do loguru.
"""
import sys

from loguru import logger

from nexo.config import settings


def setup_logging() -> None:
    """Substitui o sink padrão respeitando LOG_LEVEL."""
    logger.remove()
    logger.add(
        sys.stderr,
        level=settings.LOG_LEVEL.upper(),
        format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | "
               "<cyan>{name}</cyan> - <level>{message}</level>",
    )
