"""
Testes para exception handlers do FastAPI.
"""
import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from campaign_stats.api.error_handlers import register_exception_handlers
from campaign_stats.core.exceptions import (
    BroadcastStatsException,
    ValidationError,
    NotFoundError,
    ConfigurationError,
)


@pytest.fixture
def app_with_handlers():
    """Cria app FastAPI com handlers registrados."""
    app = FastAPI()
    register_exception_handlers(app)
    return app


@pytest.fixture
def client(app_with_handlers):
    """Cliente de teste."""
    return TestClient(app_with_handlers, raise_server_exceptions=False)


class TestExceptionHandlers:
    """Testes para cada tipo de exception."""

    def test_not_found_error_returns_404(self, app_with_handlers, client):
        """NotFoundError deve retornar 404."""
        @app_with_handlers.get("/test-not-found")
        async def raise_not_found():
            raise NotFoundError("Campanha", identifier="123")

        response = client.get("/test-not-found")

        assert response.status_code == 404
        data = response.json()
        assert data["error"] == "NotFoundError"
        assert "nao encontrado" in data["message"]
        assert data["details"]["id"] == "123"

    def test_validation_error_returns_400(self, app_with_handlers, client):
        """ValidationError deve retornar 400."""
        @app_with_handlers.get("/test-validation")
        async def raise_validation():
            raise ValidationError("Payload invalido", details={"field": "stats"})

        response = client.get("/test-validation")

        assert response.status_code == 400
        data = response.json()
        assert data["error"] == "ValidationError"
        assert data["details"] == {"field": "stats"}

    def test_configuration_error_returns_500(self, app_with_handlers, client):
        """ConfigurationError deve retornar 500."""
        @app_with_handlers.get("/test-config")
        async def raise_config():
            raise ConfigurationError("max_age_ms deve ser maior que zero")

        response = client.get("/test-config")

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "ConfigurationError"

    def test_base_exception_returns_500(self, app_with_handlers, client):
        """Exception base do sistema tambem e tratada."""
        @app_with_handlers.get("/test-base")
        async def raise_base():
            raise BroadcastStatsException("Falha generica")

        response = client.get("/test-base")

        assert response.status_code == 500
        assert response.json()["error"] == "BroadcastStatsException"

    def test_generic_exception_returns_500(self, app_with_handlers, client):
        """Exception generica deve retornar 500 sem expor detalhes."""
        @app_with_handlers.get("/test-generic")
        async def raise_generic():
            raise ValueError("Erro interno secreto")

        response = client.get("/test-generic")

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "InternalServerError"
        # NAO deve expor a mensagem interna
        assert "secreto" not in data["message"]
        assert data["message"] == "Erro interno do servidor"


class TestExceptionStr:
    """Representacao textual das exceptions."""

    def test_str_com_details(self):
        exc = ValidationError("Campo invalido", details={"campo": "x"})
        assert str(exc) == "Campo invalido - {'campo': 'x'}"

    def test_str_sem_details(self):
        assert str(NotFoundError("Campanha")) == "Campanha nao encontrado"
