"""
Cache de staleness para a visao geral de broadcasts.

Estados:
- EMPTY: nada calculado ainda (ou invalidado); read() calcula
- FRESH: idade < max_age; read() devolve o mesmo objeto, sem recalcular
- STALE: idade >= max_age; read() recalcula e substitui a entrada

A entrada (data, computed_at) e sempre substituida inteira. O lock
garante no maximo um recalculo por instancia: quem chega durante um
recalculo espera e recebe o valor novo. invalidate() usa o mesmo lock,
entao um read() depois de invalidate() nunca ve dado anterior.
"""
import logging
import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Optional

from campaign_stats.core.config import settings
from campaign_stats.core.exceptions import ConfigurationError
from campaign_stats.services.broadcast_stats.aggregator import aggregate
from campaign_stats.services.broadcast_stats.normalizer import RecordLike
from campaign_stats.services.broadcast_stats.types import OverviewStats

logger = logging.getLogger(__name__)

Aggregator = Callable[[Iterable[RecordLike]], OverviewStats]


def monotonic_ms() -> float:
    """Relogio monotonico em milissegundos."""
    return time.monotonic() * 1000


class CacheState(Enum):
    EMPTY = "empty"
    FRESH = "fresh"
    STALE = "stale"


@dataclass(frozen=True)
class CacheEntry:
    """Ultimo valor calculado e quando (ms do relogio do cache)."""

    data: Optional[OverviewStats] = None
    computed_at: Optional[float] = None


_ENTRADA_VAZIA = CacheEntry()


def _validar_max_age(max_age_ms, aceita_zero: bool = False) -> float:
    """Valida idade maxima. Em leituras, 0 significa sempre recalcular."""
    if isinstance(max_age_ms, bool) or not isinstance(max_age_ms, (int, float)):
        raise ConfigurationError(
            "max_age_ms deve ser numerico",
            details={"max_age_ms": repr(max_age_ms)},
        )
    if max_age_ms < 0:
        raise ConfigurationError(
            "max_age_ms nao pode ser negativo",
            details={"max_age_ms": max_age_ms},
        )
    if max_age_ms == 0 and not aceita_zero:
        raise ConfigurationError(
            "max_age_ms deve ser maior que zero",
            details={"max_age_ms": max_age_ms},
        )
    return float(max_age_ms)


class StalenessCache:
    """Cache read-through do OverviewStats com idade maxima."""

    def __init__(
        self,
        max_age_ms: Optional[float] = None,
        aggregator: Aggregator = aggregate,
        clock: Callable[[], float] = monotonic_ms,
        nome: str = "overview",
    ):
        if max_age_ms is None:
            max_age_ms = settings.STATS_CACHE_MAX_AGE_MS
        self.max_age_ms = _validar_max_age(max_age_ms)
        self.nome = nome
        self._aggregator = aggregator
        self._clock = clock
        self._entry = _ENTRADA_VAZIA
        self._lock = threading.Lock()
        self.recalculos = 0

    @property
    def entry(self) -> CacheEntry:
        """Snapshot da entrada atual."""
        return self._entry

    def age_ms(self) -> Optional[float]:
        """Idade do valor em cache, None se vazio."""
        entry = self._entry
        if entry.computed_at is None:
            return None
        return self._clock() - entry.computed_at

    def _estado(self, entry: CacheEntry, max_age_ms: float) -> CacheState:
        if entry.data is None or entry.computed_at is None:
            return CacheState.EMPTY
        if self._clock() - entry.computed_at < max_age_ms:
            return CacheState.FRESH
        return CacheState.STALE

    @property
    def state(self) -> CacheState:
        """Estado atual usando o max_age configurado."""
        return self._estado(self._entry, self.max_age_ms)

    def read(
        self,
        records: Iterable[RecordLike],
        max_age_ms: Optional[float] = None,
    ) -> OverviewStats:
        """
        Retorna o OverviewStats em cache ou recalcula.

        Args:
            records: Registros usados se precisar recalcular
            max_age_ms: Idade maxima tolerada nesta leitura (padrao: do cache);
                0 forca recalculo

        Returns:
            OverviewStats (o mesmo objeto enquanto FRESH)
        """
        limite = self.max_age_ms if max_age_ms is None else _validar_max_age(max_age_ms, aceita_zero=True)

        with self._lock:
            entry = self._entry
            estado = self._estado(entry, limite)

            if estado == CacheState.FRESH:
                return entry.data

            logger.debug(f"[StatsCache:{self.nome}] {estado.value}, recalculando")
            data = self._aggregator(records)
            self._entry = CacheEntry(data=data, computed_at=self._clock())
            self.recalculos += 1
            return data

    def invalidate(self) -> None:
        """Descarta o valor em cache (volta para EMPTY)."""
        with self._lock:
            if self._entry.data is not None:
                logger.debug(f"[StatsCache:{self.nome}] invalidado")
            self._entry = _ENTRADA_VAZIA

    def status(self) -> dict:
        """Retorna status atual do cache."""
        idade = self.age_ms()
        return {
            "nome": self.nome,
            "estado": self.state.value,
            "max_age_ms": self.max_age_ms,
            "idade_ms": round(idade, 1) if idade is not None else None,
            "recalculos": self.recalculos,
        }
