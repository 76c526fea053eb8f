"""
Coalescedor de recalculos.

Rajadas de eventos de atualizacao (webhook de status, refresh do
usuario, polling) viram um unico recalculo depois de um intervalo de
silencio. Cada schedule() substitui a chamada pendente e reinicia o
prazo; nao existe fila: vale a ultima chamada.

Dois modos de disparo:
- Com event loop asyncio rodando, schedule() arma um call_later.
- Sem loop (ou em teste com relogio simulado), o host chama
  fire_if_due().
"""
import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Optional

from campaign_stats.core.config import settings
from campaign_stats.core.exceptions import ConfigurationError
from campaign_stats.services.broadcast_stats.cache import monotonic_ms

logger = logging.getLogger(__name__)

# Evita rearmar o timer em loop apertado quando o relogio ainda nao andou
_REARME_MINIMO_MS = 1.0


@dataclass
class _ChamadaPendente:
    fn: Callable[..., Any]
    args: tuple = ()
    kwargs: dict = field(default_factory=dict)
    deadline: float = 0.0


class UpdateCoalescer:
    """Executa a ultima funcao agendada apos `quiet_ms` sem novos agendamentos."""

    def __init__(
        self,
        quiet_ms: Optional[float] = None,
        clock: Callable[[], float] = monotonic_ms,
        nome: str = "stats",
    ):
        if quiet_ms is None:
            quiet_ms = settings.STATS_COALESCE_QUIET_MS
        if isinstance(quiet_ms, bool) or not isinstance(quiet_ms, (int, float)) or quiet_ms < 0:
            raise ConfigurationError(
                "quiet_ms deve ser numero nao-negativo",
                details={"quiet_ms": repr(quiet_ms)},
            )
        self.quiet_ms = float(quiet_ms)
        self.nome = nome
        self._clock = clock
        self._pendente: Optional[_ChamadaPendente] = None
        self._timer: Optional[asyncio.TimerHandle] = None
        self.agendamentos = 0
        self.disparos = 0

    @property
    def pending(self) -> bool:
        """True se ha chamada aguardando o silencio."""
        return self._pendente is not None

    def schedule(self, fn: Callable[..., Any], *args, **kwargs) -> None:
        """
        Agenda `fn(*args, **kwargs)` substituindo qualquer chamada pendente.

        O prazo recomeca a cada chamada.
        """
        if self._pendente is not None:
            logger.debug(f"[Coalescer:{self.nome}] chamada pendente substituida")
        self._pendente = _ChamadaPendente(
            fn=fn,
            args=args,
            kwargs=kwargs,
            deadline=self._clock() + self.quiet_ms,
        )
        self.agendamentos += 1
        self._armar_timer(self.quiet_ms)

    def fire_if_due(self) -> bool:
        """
        Executa a chamada pendente se o silencio ja passou.

        Returns:
            True se executou

        Raises:
            Qualquer exception levantada pela funcao agendada
        """
        pendente = self._pendente
        if pendente is None or self._clock() < pendente.deadline:
            return False

        self._pendente = None
        self._cancelar_timer()
        self.disparos += 1
        logger.debug(
            f"[Coalescer:{self.nome}] disparando apos {self.agendamentos} agendamento(s)"
        )
        self.agendamentos = 0
        pendente.fn(*pendente.args, **pendente.kwargs)
        return True

    def cancel(self) -> None:
        """Descarta a chamada pendente, se houver."""
        self._pendente = None
        self.agendamentos = 0
        self._cancelar_timer()

    def _armar_timer(self, atraso_ms: float) -> None:
        self._cancelar_timer()
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # Sem loop: o host chama fire_if_due()
            return
        self._timer = loop.call_later(atraso_ms / 1000, self._disparar_pelo_timer)

    def _cancelar_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _disparar_pelo_timer(self) -> None:
        self._timer = None
        try:
            executou = self.fire_if_due()
        except Exception as e:
            logger.exception(f"[Coalescer:{self.nome}] erro na funcao agendada: {e}")
            return

        if not executou and self._pendente is not None:
            # call_later pode acordar antes do relogio do coalescedor
            restante = self._pendente.deadline - self._clock()
            self._armar_timer(max(restante, _REARME_MINIMO_MS))

    def status(self) -> dict:
        """Retorna status atual do coalescedor."""
        return {
            "nome": self.nome,
            "quiet_ms": self.quiet_ms,
            "pendente": self.pending,
            "disparos": self.disparos,
        }
