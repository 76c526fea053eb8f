"""
Taxas por campanha exibidas nos cards de broadcast.

Sempre calculadas sobre o registro normalizado, para que card e
visao geral usem a mesma politica de correcao.
"""
import math

from campaign_stats.services.broadcast_stats.normalizer import RecordLike, normalize
from campaign_stats.services.broadcast_stats.types import CampaignRates


def _percentual(parte: int, base: int) -> int:
    """Percentual inteiro arredondado (meio para cima), limitado a 0-100."""
    if base <= 0:
        return 0
    taxa = parte / base * 100
    return min(100, max(0, math.floor(taxa + 0.5)))


def calculate_rates(record: RecordLike) -> CampaignRates:
    """
    Calcula taxas de entrega, leitura e resposta de uma campanha.

    Bases:
    - entrega: sent
    - leitura: sent, ou recipient_count, ou delivered
    - resposta: sent, ou recipient_count

    Args:
        record: CampaignRecord ou dict bruto

    Returns:
        CampaignRates com percentuais 0-100
    """
    campanha = normalize(record)
    c = campanha.counters

    return CampaignRates(
        delivery_rate=_percentual(c.delivered, c.sent),
        read_rate=_percentual(c.read, c.sent or campanha.recipient_count or c.delivered),
        reply_rate=_percentual(c.replied, c.sent or campanha.recipient_count),
    )
