"""
Módulo de banco de dados - conexões, sessões e unit of work.
"""

from library_portal.db.session import Base, engine, get_db, async_session_factory
from library_portal.db.unit_of_work import unit_of_work

__all__ = [
    "Base",
    "engine",
    "get_db",
    "async_session_factory",
    "unit_of_work",
]
