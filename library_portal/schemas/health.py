"""
Schema do healthcheck.
"""

from typing import Literal

from pydantic import BaseModel


class HealthResponse(BaseModel):
    """
    Resposta de GET /health.

    Attributes:
        status: Sempre "healthy" quando a API responde
        app_name: Nome da aplicação
        version: Versão da API
        environment: Ambiente atual (development, staging, production)
        cache: "enabled" se o Redis está conectado e o cache ligado
    """

    status: Literal["healthy"] = "healthy"
    app_name: str
    version: str
    environment: str
    cache: Literal["enabled", "disabled"]

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "status": "healthy",
                    "app_name": "Library Portal API",
                    "version": "0.1.0",
                    "environment": "development",
                    "cache": "enabled",
                }
            ]
        }
    }
