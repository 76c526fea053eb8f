"""
Configuração global de testes - Fixtures compartilhadas.

Este arquivo contém fixtures reutilizáveis em todos os testes do projeto.

Usage:
    Fixtures aqui definidas são automaticamente disponíveis em todos os testes.
    Para fixtures específicas de módulo, use conftest.py local.
"""

import pytest
from typing import Any
from unittest.mock import MagicMock

from campaign_stats.services.broadcast_stats import (
    BroadcastStatsService,
    StalenessCache,
    UpdateCoalescer,
    aggregate,
)


# =============================================================================
# RELOGIO SIMULADO
# =============================================================================


class RelogioFake:
    """Relogio em milissegundos controlado pelo teste."""

    def __init__(self, inicio: float = 10_000.0):
        self.agora = inicio

    def __call__(self) -> float:
        return self.agora

    def avancar(self, ms: float) -> None:
        self.agora += ms


# =============================================================================
# FACTORIES
# =============================================================================


def criar_campanha(
    id: str = "c1",
    status: str = "completed",
    recipient_count: int = 100,
    **counters: Any,
) -> dict[str, Any]:
    """
    Cria payload bruto de campanha no formato do network layer.

    Example:
        criar_campanha("c1", "sending", 100, sent=90, delivered=80)
    """
    return {
        "id": id,
        "name": f"Campanha {id}",
        "status": status,
        "recipientCount": recipient_count,
        "counters": dict(counters),
    }


# =============================================================================
# FIXTURES
# =============================================================================


@pytest.fixture
def relogio():
    """Relogio simulado para cache e coalescedor."""
    return RelogioFake()


@pytest.fixture
def aggregator_espiao():
    """Aggregator real envolvido em MagicMock para contar chamadas."""
    return MagicMock(side_effect=aggregate)


@pytest.fixture
def cache(relogio, aggregator_espiao):
    """StalenessCache de 2s com relogio simulado."""
    return StalenessCache(max_age_ms=2000, aggregator=aggregator_espiao, clock=relogio)


@pytest.fixture
def coalescer(relogio):
    """UpdateCoalescer de 500ms com relogio simulado."""
    return UpdateCoalescer(quiet_ms=500, clock=relogio)


@pytest.fixture
def service(cache, coalescer):
    """Servico isolado (nao usa a instancia global)."""
    return BroadcastStatsService(cache=cache, coalescer=coalescer)


@pytest.fixture
def campanha_inconsistente():
    """Campanha do exemplo canonico: read (85) maior que delivered (80)."""
    return criar_campanha(
        "c1", "sending", 100, sent=90, delivered=80, read=85, replied=5, failed=3
    )
