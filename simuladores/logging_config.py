"""Configuração de logging (loguru)"""

import os
import sys

from loguru import logger

# Remove o handler padrão para evitar logs duplicados no console.
logger.remove()

logger.add(
    sys.stderr,
    level=os.getenv("SIMULADORES_LOG_LEVEL", "INFO"),
    format="<green>{time:YYYY-MM-DD HH:mm:ss}</green> | <level>{level: <8}</level> | <cyan>{name}</cyan>:<cyan>{function}</cyan>:<cyan>{line}</cyan> - <level>{message}</level>",
    colorize=True
)

# Arquivo opcional: guarda tudo a partir de DEBUG, com rotação.
_log_file = os.getenv("SIMULADORES_LOG_FILE")
if _log_file:
    logger.add(
        _log_file,
        rotation="10 MB",
        retention="30 days",
        level="DEBUG",
        format="{time:YYYY-MM-DD HH:mm:ss} | {level: <8} | {name}:{function}:{line} - {message}"
    )

log = logger
