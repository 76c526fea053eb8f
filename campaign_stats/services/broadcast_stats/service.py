"""
Servico de estatisticas de broadcast.

Compoe o motor: guarda o conjunto atual de campanhas, um cache de
staleness e um coalescedor de invalidacoes.

USO:
    from campaign_stats.services.broadcast_stats import broadcast_stats_service

    # Recarga completa vinda do network layer
    broadcast_stats_service.load(campanhas)

    # Atualizacao em tempo real (webhook/socket)
    broadcast_stats_service.update_stats("abc123", {"delivered": 80})

    # Leitura para o painel
    overview = broadcast_stats_service.overview()

    # Botao "Atualizar"
    broadcast_stats_service.refresh()
"""
import logging
import threading
from typing import Any, Iterable, Optional

from campaign_stats.core.exceptions import NotFoundError
from campaign_stats.services.broadcast_stats.cache import StalenessCache
from campaign_stats.services.broadcast_stats.coalescer import UpdateCoalescer
from campaign_stats.services.broadcast_stats.merge import apply_stats_update
from campaign_stats.services.broadcast_stats.normalizer import normalize
from campaign_stats.services.broadcast_stats.rates import calculate_rates
from campaign_stats.services.broadcast_stats.types import (
    CampaignRates,
    CampaignRecord,
    OverviewStats,
)

logger = logging.getLogger(__name__)


class BroadcastStatsService:
    """Dono do cache e do coalescedor de uma visao de broadcasts."""

    def __init__(
        self,
        cache: Optional[StalenessCache] = None,
        coalescer: Optional[UpdateCoalescer] = None,
    ):
        self.cache = cache or StalenessCache()
        self.coalescer = coalescer or UpdateCoalescer()
        self._records: tuple[CampaignRecord, ...] = ()
        self._records_lock = threading.Lock()

    @property
    def records(self) -> tuple[CampaignRecord, ...]:
        """Registros atuais (brutos, como recebidos)."""
        return self._records

    def load(self, records: Iterable[Any]) -> int:
        """
        Substitui o conjunto de campanhas (recarga completa).

        Invalida o cache: a proxima leitura reflete os dados novos.

        Returns:
            Quantidade de campanhas carregadas
        """
        novos = tuple(
            r if isinstance(r, CampaignRecord) else CampaignRecord.from_dict(r)
            for r in records
        )
        with self._records_lock:
            self._records = novos
        self.coalescer.cancel()
        self.cache.invalidate()
        logger.info(f"[BroadcastStats] {len(novos)} campanha(s) carregada(s)")
        return len(novos)

    def update_stats(self, campaign_id: Any, stats: Any) -> bool:
        """
        Aplica atualizacao de contadores de uma campanha.

        A invalidacao do cache e coalescida: uma rajada de eventos vira
        um unico recalculo.

        Returns:
            True se a campanha existia
        """
        with self._records_lock:
            resultado = apply_stats_update(self._records, campaign_id, stats)
            self._records = resultado.records

        if resultado.updated:
            self.coalescer.schedule(self.cache.invalidate)
        return resultado.updated

    def overview(self, max_age_ms: Optional[float] = None) -> OverviewStats:
        """Visao geral (read-through no cache)."""
        self.coalescer.fire_if_due()
        return self.cache.read(self._records, max_age_ms)

    def refresh(self) -> None:
        """Refresh manual: a proxima leitura sempre recalcula."""
        self.coalescer.cancel()
        self.cache.invalidate()
        logger.info("[BroadcastStats] Refresh manual")

    def get_campaign(self, campaign_id: Any) -> CampaignRecord:
        """
        Busca campanha pelo ID.

        Raises:
            NotFoundError: Se a campanha nao existe
        """
        alvo = "" if campaign_id is None else str(campaign_id)
        for record in self._records:
            if alvo and record.id == alvo:
                return record
        raise NotFoundError("Campanha", identifier=alvo)

    def rates(self, campaign_id: Any) -> CampaignRates:
        """Taxas de uma campanha."""
        return calculate_rates(self.get_campaign(campaign_id))

    def campaigns(self) -> list[CampaignRecord]:
        """Campanhas com contadores normalizados."""
        return [normalize(r) for r in self._records]

    def status(self) -> dict:
        """Retorna status do servico."""
        return {
            "campanhas": len(self._records),
            "cache": self.cache.status(),
            "coalescer": self.coalescer.status(),
        }


broadcast_stats_service = BroadcastStatsService()
