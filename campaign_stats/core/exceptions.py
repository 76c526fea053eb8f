"""
Exceptions customizadas do painel de broadcasts.

Dados malformados de campanha NUNCA viram exception (sao zerados e
corrigidos na normalizacao). Exceptions aqui cobrem apenas falhas
estruturais: configuracao invalida, payload com formato errado,
recurso inexistente.
"""
from typing import Optional


class BroadcastStatsException(Exception):
    """Base exception para todos os erros do sistema."""

    def __init__(
        self,
        message: str,
        details: Optional[dict] = None,
        original_error: Optional[Exception] = None
    ):
        self.message = message
        self.details = details or {}
        self.original_error = original_error
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - {self.details}"
        return self.message


class ValidationError(BroadcastStatsException):
    """Erro de validacao estrutural de dados de entrada."""
    pass


class NotFoundError(BroadcastStatsException):
    """Recurso nao encontrado."""

    def __init__(
        self,
        resource: str,
        identifier: Optional[str] = None
    ):
        message = f"{resource} nao encontrado"
        details = {}
        if identifier:
            details["id"] = identifier
        super().__init__(message, details)


class ConfigurationError(BroadcastStatsException):
    """Erro de configuracao do sistema."""
    pass
