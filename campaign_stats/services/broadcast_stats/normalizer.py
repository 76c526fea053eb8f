"""
Normalizacao de contadores de entrega.

Restaura a ordem logica dos contadores de uma campanha:

    replied <= read <= delivered <= sent <= recipient_count
    failed <= sent

Politica unica: CLAMP PARA BAIXO. O contador "maior" da cadeia e
tratado como autoritativo; quando read > delivered, read desce para
delivered (delivered nunca e inflado para casar com read). Toda tela
que exibe contadores ou taxas passa por aqui; nao existe segunda
politica no codigo.

Nenhum contador sai maior do que entrou, e normalizar duas vezes da
o mesmo resultado.
"""
import logging
from typing import Any, Iterable, Union

from campaign_stats.services.broadcast_stats.types import (
    CampaignRecord,
    CounterAdjustment,
    DeliveryCounters,
    NormalizationResult,
)

logger = logging.getLogger(__name__)

RecordLike = Union[CampaignRecord, Any]


def _as_record(record: RecordLike) -> CampaignRecord:
    if isinstance(record, CampaignRecord):
        return record
    return CampaignRecord.from_dict(record)


def normalize_with_report(record: RecordLike) -> NormalizationResult:
    """
    Normaliza um registro e devolve as correcoes aplicadas.

    Inconsistencia nao e erro: vira observacao de diagnostico no log
    (WARNING para read > delivered, race conhecida do upstream; DEBUG
    para o resto) e e corrigida.

    Args:
        record: CampaignRecord ou payload bruto (dict)

    Returns:
        NormalizationResult com registro normalizado e ajustes
    """
    record = _as_record(record)
    raw = record.counters

    sent = min(raw.sent, record.recipient_count)
    delivered = min(raw.delivered, sent)
    read = min(raw.read, delivered)
    replied = min(raw.replied, read)
    failed = min(raw.failed, sent)

    limites = (
        ("sent", raw.sent, sent, "recipient_count"),
        ("delivered", raw.delivered, delivered, "sent"),
        ("read", raw.read, read, "delivered"),
        ("replied", raw.replied, replied, "read"),
        ("failed", raw.failed, failed, "sent"),
    )
    adjustments = tuple(
        CounterAdjustment(counter=nome, raw=bruto, normalized=final, bound=limite)
        for nome, bruto, final, limite in limites
        if final != bruto
    )

    if not adjustments:
        return NormalizationResult(record=record)

    for ajuste in adjustments:
        nivel = logging.WARNING if ajuste.counter == "read" and raw.read > raw.delivered else logging.DEBUG
        logger.log(
            nivel,
            f"[Normalizer] Campanha {record.id!r} ({record.name!r}): "
            f"{ajuste.counter} {ajuste.raw} -> {ajuste.normalized} (limite: {ajuste.bound})",
        )

    normalizado = DeliveryCounters(
        sent=sent,
        delivered=delivered,
        read=read,
        replied=replied,
        failed=failed,
    )
    return NormalizationResult(
        record=record.with_counters(normalizado),
        adjustments=adjustments,
    )


def normalize(record: RecordLike) -> CampaignRecord:
    """
    Retorna o registro com contadores logicamente consistentes.

    Nunca levanta exception; campos ausentes ou invalidos valem 0.
    """
    return normalize_with_report(record).record


def normalize_all(records: Iterable[RecordLike]) -> list[CampaignRecord]:
    """Normaliza uma colecao de registros."""
    return [normalize(r) for r in records]
