"""
Tipos do motor de estatisticas de broadcast.

Os registros de campanha chegam do network layer com formato frouxo
(campos ausentes, aliases, numeros como string). Toda regra de default
e coercao fica aqui, na fronteira de ingestao, e nao espalhada pelo
agregador.
"""
import logging
import math
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

# Ordem logica: cada contador e subconjunto do anterior
CONTADORES = ("sent", "delivered", "read", "replied", "failed")


class CampaignStatus(str, Enum):
    """Status possiveis de uma campanha de broadcast."""

    SCHEDULED = "scheduled"
    SENDING = "sending"
    PROCESSING = "processing"
    COMPLETED = "completed"
    CANCELLED = "cancelled"
    FAILED = "failed"

    @classmethod
    def parse(cls, valor: Any) -> Optional["CampaignStatus"]:
        """Converte valor bruto em status. Desconhecido vira None."""
        if isinstance(valor, cls):
            return valor
        if not isinstance(valor, str):
            return None
        try:
            return cls(valor.strip().lower())
        except ValueError:
            logger.debug(f"[BroadcastTypes] Status ignorado: {valor!r}")
            return None


def coerce_count(valor: Any) -> int:
    """
    Converte valor bruto em contador nao-negativo.

    Regras:
    - None, bool, NaN, infinito, texto nao numerico -> 0
    - float -> truncado
    - str com inteiro ("12") -> 12
    - negativo -> 0

    Args:
        valor: Valor recebido do upstream

    Returns:
        Inteiro >= 0
    """
    if valor is None or isinstance(valor, bool):
        return 0
    if isinstance(valor, int):
        return max(valor, 0)
    if isinstance(valor, float):
        if math.isnan(valor) or math.isinf(valor):
            return 0
        return max(int(valor), 0)
    if isinstance(valor, str):
        try:
            return max(int(valor.strip()), 0)
        except ValueError:
            return 0
    return 0


@dataclass(frozen=True)
class DeliveryCounters:
    """Contadores cumulativos de entrega de uma campanha."""

    sent: int = 0
    delivered: int = 0
    read: int = 0
    replied: int = 0
    failed: int = 0

    def __post_init__(self):
        for nome in CONTADORES:
            object.__setattr__(self, nome, coerce_count(getattr(self, nome)))

    @classmethod
    def from_dict(cls, data: Any) -> "DeliveryCounters":
        """Cria a partir de dicionario. Chaves ausentes viram 0."""
        if not isinstance(data, Mapping):
            return cls()
        return cls(**{nome: data.get(nome) for nome in CONTADORES})

    def to_dict(self) -> dict:
        """Converte para dicionario."""
        return {nome: getattr(self, nome) for nome in CONTADORES}

    def satisfies_ordering(self, recipient_count: int) -> bool:
        """Verifica replied <= read <= delivered <= sent <= recipients e failed <= sent."""
        return (
            self.replied <= self.read <= self.delivered <= self.sent <= recipient_count
            and self.failed <= self.sent
        )


@dataclass(frozen=True)
class CampaignRecord:
    """Registro de uma campanha (somente leitura para o motor)."""

    id: str
    name: str = ""
    status: Optional[CampaignStatus] = None
    recipient_count: int = 0
    counters: DeliveryCounters = field(default_factory=DeliveryCounters)

    def __post_init__(self):
        object.__setattr__(self, "id", "" if self.id is None else str(self.id))
        object.__setattr__(self, "status", CampaignStatus.parse(self.status))
        object.__setattr__(self, "recipient_count", coerce_count(self.recipient_count))
        if not isinstance(self.counters, DeliveryCounters):
            object.__setattr__(self, "counters", DeliveryCounters.from_dict(self.counters))

    @classmethod
    def from_dict(cls, data: Any) -> "CampaignRecord":
        """
        Cria a partir do payload bruto do network layer.

        Aceita os formatos legados do painel:
        - id em `id` ou `_id`
        - contadores em `counters` ou `stats`
        - total em `recipientCount`/`recipient_count`, ou tamanho de `recipients`

        Nunca levanta exception: payload invalido vira registro vazio.
        """
        if not isinstance(data, Mapping):
            logger.debug(f"[BroadcastTypes] Registro ignorado (tipo {type(data).__name__})")
            return cls(id="")

        campaign_id = data.get("id")
        if campaign_id is None:
            campaign_id = data.get("_id")

        recipient_count = coerce_count(
            data.get("recipientCount", data.get("recipient_count"))
        )
        if not recipient_count:
            recipients = data.get("recipients")
            if isinstance(recipients, (list, tuple)):
                recipient_count = len(recipients)

        counters = data.get("counters")
        if counters is None:
            counters = data.get("stats")

        name = data.get("name")

        return cls(
            id=campaign_id,
            name=name if isinstance(name, str) else "",
            status=data.get("status"),
            recipient_count=recipient_count,
            counters=DeliveryCounters.from_dict(counters),
        )

    def with_counters(self, counters: DeliveryCounters) -> "CampaignRecord":
        """Retorna copia com novos contadores."""
        return replace(self, counters=counters)

    def to_dict(self) -> dict:
        """Converte para dicionario."""
        return {
            "id": self.id,
            "name": self.name,
            "status": self.status.value if self.status else None,
            "recipientCount": self.recipient_count,
            "counters": self.counters.to_dict(),
        }


@dataclass(frozen=True)
class OverviewStats:
    """
    Visao geral agregada de todas as campanhas.

    `sending`, `processing` e `queued` derivam do status, nao dos contadores.
    `sending` e volume (soma de destinatarios), os outros dois contam campanhas.
    """

    sent: int = 0
    delivered: int = 0
    read: int = 0
    replied: int = 0
    sending: int = 0
    failed: int = 0
    processing: int = 0
    queued: int = 0

    def _taxa(self, parte: int) -> float:
        if self.sent == 0:
            return 0.0
        return round(parte / self.sent * 100, 2)

    @property
    def delivery_rate(self) -> float:
        """Taxa de entrega sobre enviados."""
        return self._taxa(self.delivered)

    @property
    def read_rate(self) -> float:
        """Taxa de leitura sobre enviados."""
        return self._taxa(self.read)

    @property
    def reply_rate(self) -> float:
        """Taxa de resposta sobre enviados."""
        return self._taxa(self.replied)

    @property
    def fail_rate(self) -> float:
        """Taxa de falha sobre enviados."""
        return self._taxa(self.failed)

    def to_dict(self) -> dict:
        """Converte para dicionario."""
        return {
            "sent": self.sent,
            "delivered": self.delivered,
            "read": self.read,
            "replied": self.replied,
            "sending": self.sending,
            "failed": self.failed,
            "processing": self.processing,
            "queued": self.queued,
        }


@dataclass(frozen=True)
class CounterAdjustment:
    """Correcao aplicada a um contador durante a normalizacao."""

    counter: str
    raw: int
    normalized: int
    bound: str  # contador (ou recipient_count) que limitou o valor


@dataclass(frozen=True)
class NormalizationResult:
    """Registro normalizado e as correcoes aplicadas."""

    record: CampaignRecord
    adjustments: tuple[CounterAdjustment, ...] = ()

    @property
    def changed(self) -> bool:
        return bool(self.adjustments)


@dataclass(frozen=True)
class CampaignRates:
    """Percentuais inteiros (0-100) de uma campanha."""

    delivery_rate: int = 0
    read_rate: int = 0
    reply_rate: int = 0

    def to_dict(self) -> dict:
        return {
            "delivery_rate": self.delivery_rate,
            "read_rate": self.read_rate,
            "reply_rate": self.reply_rate,
        }
