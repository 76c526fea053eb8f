"""
Agregacao de estatisticas de broadcast.

Dobra os registros normalizados em um unico OverviewStats. Nunca soma
contador bruto: cada registro passa pelo normalizer antes.

Como cada registro respeita replied <= read <= delivered <= sent e a
soma de nao-negativos preserva <=, o agregado tambem respeita.
"""
import logging
from typing import Iterable

from campaign_stats.services.broadcast_stats.normalizer import RecordLike, normalize
from campaign_stats.services.broadcast_stats.types import CampaignStatus, OverviewStats

logger = logging.getLogger(__name__)


def aggregate(records: Iterable[RecordLike]) -> OverviewStats:
    """
    Calcula a visao geral de um conjunto de campanhas.

    - sent/delivered/read/replied/failed: soma dos contadores normalizados
    - sending: soma de destinatarios das campanhas em envio (volume)
    - processing: quantidade de campanhas em processamento
    - queued: quantidade de campanhas agendadas

    A ordem dos registros nao altera o resultado.

    Args:
        records: Registros (CampaignRecord ou dict bruto)

    Returns:
        OverviewStats
    """
    totais = {
        "sent": 0,
        "delivered": 0,
        "read": 0,
        "replied": 0,
        "sending": 0,
        "failed": 0,
        "processing": 0,
        "queued": 0,
    }
    total_campanhas = 0

    for record in records:
        campanha = normalize(record)
        contadores = campanha.counters
        total_campanhas += 1

        totais["sent"] += contadores.sent
        totais["delivered"] += contadores.delivered
        totais["read"] += contadores.read
        totais["replied"] += contadores.replied
        totais["failed"] += contadores.failed

        if campanha.status == CampaignStatus.SENDING:
            totais["sending"] += campanha.recipient_count
        elif campanha.status == CampaignStatus.PROCESSING:
            totais["processing"] += 1
        elif campanha.status == CampaignStatus.SCHEDULED:
            totais["queued"] += 1

    logger.debug(f"[Aggregator] {total_campanhas} campanha(s) agregada(s): {totais}")
    return OverviewStats(**totais)
