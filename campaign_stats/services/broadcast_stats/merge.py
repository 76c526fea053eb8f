"""
Merge de atualizacoes de contadores em tempo real.

Atualizacoes chegam por caminhos concorrentes (webhook de status,
recarga completa, polling) e podem chegar fora de ordem. Contadores
sao cumulativos, entao um snapshot atrasado nao pode baixar um valor
ja observado: o merge fica com o maior de cada contador.
"""
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Mapping

from campaign_stats.services.broadcast_stats.types import (
    CONTADORES,
    CampaignRecord,
    DeliveryCounters,
    coerce_count,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StatsUpdateResult:
    """Resultado da aplicacao de uma atualizacao."""

    records: tuple[CampaignRecord, ...]
    updated: bool


def merge_counters(current: DeliveryCounters, incoming: Any) -> DeliveryCounters:
    """
    Combina contadores atuais com os recebidos, sem regredir nenhum.

    Chaves ausentes no payload mantem o valor atual.

    Args:
        current: Contadores ja conhecidos
        incoming: DeliveryCounters ou dict parcial recebido

    Returns:
        Novos DeliveryCounters
    """
    if isinstance(incoming, DeliveryCounters):
        incoming = incoming.to_dict()
    if not isinstance(incoming, Mapping):
        return current

    valores = {}
    for nome in CONTADORES:
        atual = getattr(current, nome)
        if nome not in incoming:
            valores[nome] = atual
            continue
        recebido = coerce_count(incoming[nome])
        if recebido < atual:
            logger.debug(f"[StatsMerge] {nome} regressivo ignorado: {recebido} < {atual}")
        valores[nome] = max(atual, recebido)

    return DeliveryCounters(**valores)


def apply_stats_update(
    records: Iterable[CampaignRecord],
    campaign_id: Any,
    stats: Any,
) -> StatsUpdateResult:
    """
    Aplica atualizacao de contadores a uma campanha da colecao.

    IDs sao comparados como string (o upstream mistura int e str).
    ID vazio nunca casa: registros sem id nao recebem atualizacao.

    Args:
        records: Registros atuais
        campaign_id: ID da campanha atualizada
        stats: Contadores recebidos

    Returns:
        StatsUpdateResult com nova tupla de registros
    """
    alvo = "" if campaign_id is None else str(campaign_id)
    if not alvo:
        logger.warning("[StatsMerge] Atualizacao sem ID de campanha ignorada")
        return StatsUpdateResult(records=tuple(records), updated=False)

    novos = []
    atualizado = False

    for record in records:
        if record.id == alvo:
            record = record.with_counters(merge_counters(record.counters, stats))
            atualizado = True
        novos.append(record)

    if not atualizado:
        logger.info(f"[StatsMerge] Campanha nao encontrada para atualizacao: {alvo!r}")

    return StatsUpdateResult(records=tuple(novos), updated=atualizado)
