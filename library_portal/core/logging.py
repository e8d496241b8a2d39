"""
Configuração de logging da aplicação.

Chamado uma vez no startup da API, do seed e dos jobs. Os módulos apenas
fazem `logging.getLogger(__name__)`.
"""

import logging
import sys
from typing import Optional

from library_portal.core.config import get_settings

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Loggers de terceiros que só interessam em WARNING ou acima
QUIET_LOGGERS = ("uvicorn.access", "asyncio", "httpx")


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configura o logger raiz com saída em stdout.

    Args:
        level: Nível de logging. Se não fornecido, usa LOG_LEVEL do .env

    Com DB_ECHO habilitado, o SQL do SQLAlchemy aparece em INFO; caso
    contrário fica restrito a WARNING.
    """
    settings = get_settings()
    log_level = (level or settings.LOG_LEVEL).upper()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    # Remove handlers existentes para evitar duplicação
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(
        logging.INFO if settings.DB_ECHO else logging.WARNING
    )

    logging.getLogger(__name__).info(
        f"Logging configurado com nível {log_level} ({settings.ENVIRONMENT})"
    )
