"""
Motor de estatisticas de broadcast.

Estrutura:
- types: Registros, contadores e visao geral
- normalizer: Correcao da ordem logica dos contadores
- aggregator: Soma das campanhas em OverviewStats
- cache: Cache de staleness read-through
- coalescer: Coalescimento de rajadas de recalculo
- rates: Taxas por campanha
- merge: Atualizacoes em tempo real sem regressao
- service: Composicao para o painel
"""
from campaign_stats.services.broadcast_stats.aggregator import aggregate
from campaign_stats.services.broadcast_stats.cache import CacheEntry, CacheState, StalenessCache
from campaign_stats.services.broadcast_stats.coalescer import UpdateCoalescer
from campaign_stats.services.broadcast_stats.merge import apply_stats_update, merge_counters
from campaign_stats.services.broadcast_stats.normalizer import (
    normalize,
    normalize_all,
    normalize_with_report,
)
from campaign_stats.services.broadcast_stats.rates import calculate_rates
from campaign_stats.services.broadcast_stats.service import (
    BroadcastStatsService,
    broadcast_stats_service,
)
from campaign_stats.services.broadcast_stats.types import (
    CampaignRates,
    CampaignRecord,
    CampaignStatus,
    CounterAdjustment,
    DeliveryCounters,
    NormalizationResult,
    OverviewStats,
)

__all__ = [
    "aggregate",
    "CacheEntry",
    "CacheState",
    "StalenessCache",
    "UpdateCoalescer",
    "apply_stats_update",
    "merge_counters",
    "normalize",
    "normalize_all",
    "normalize_with_report",
    "calculate_rates",
    "BroadcastStatsService",
    "broadcast_stats_service",
    "CampaignRates",
    "CampaignRecord",
    "CampaignStatus",
    "CounterAdjustment",
    "DeliveryCounters",
    "NormalizationResult",
    "OverviewStats",
]
