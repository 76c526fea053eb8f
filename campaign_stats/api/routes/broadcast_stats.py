"""
Endpoints de estatisticas de broadcast para o painel.
"""
from fastapi import APIRouter, Query
from pydantic import BaseModel
from typing import Any, Dict, List, Optional
import logging

from campaign_stats.core.exceptions import ValidationError
from campaign_stats.services.broadcast_stats import (
    broadcast_stats_service,
    normalize_with_report,
)
from campaign_stats.services.broadcast_stats.types import CONTADORES

router = APIRouter(prefix="/broadcasts/stats", tags=["Broadcast Stats"])
logger = logging.getLogger(__name__)


class CarregarCampanhas(BaseModel):
    campanhas: List[Dict[str, Any]]


class AtualizarStats(BaseModel):
    stats: Dict[str, Any]


class NormalizarCampanha(BaseModel):
    campanha: Dict[str, Any]


@router.put("/campaigns")
async def carregar_campanhas(dados: CarregarCampanhas):
    """Substitui o conjunto de campanhas (recarga completa do network layer)."""
    total = broadcast_stats_service.load(dados.campanhas)
    return {"carregadas": total}


@router.post("/campaigns/{campaign_id}/stats")
async def atualizar_stats(campaign_id: str, dados: AtualizarStats):
    """Aplica atualizacao de contadores em tempo real."""
    if not any(nome in dados.stats for nome in CONTADORES):
        raise ValidationError(
            "Nenhum contador reconhecido no payload",
            details={"esperado": list(CONTADORES), "recebido": sorted(dados.stats)},
        )

    # Levanta NotFoundError antes de tentar o merge
    broadcast_stats_service.get_campaign(campaign_id)
    broadcast_stats_service.update_stats(campaign_id, dados.stats)
    return {"status": "agendado", "campaign_id": campaign_id}


@router.get("/overview")
async def obter_overview(max_age_ms: Optional[int] = Query(None, ge=0)):
    """Visao geral agregada (servida do cache enquanto fresca)."""
    overview = broadcast_stats_service.overview(max_age_ms)
    return {
        **overview.to_dict(),
        "taxas": {
            "entrega": overview.delivery_rate,
            "leitura": overview.read_rate,
            "resposta": overview.reply_rate,
            "falha": overview.fail_rate,
        },
        "cache": broadcast_stats_service.cache.status(),
    }


@router.post("/refresh")
async def refresh():
    """Refresh manual: invalida o cache."""
    broadcast_stats_service.refresh()
    return {"status": "invalidado"}


@router.get("/campaigns/{campaign_id}/rates")
async def obter_taxas(campaign_id: str):
    """Taxas de entrega, leitura e resposta de uma campanha."""
    taxas = broadcast_stats_service.rates(campaign_id)
    return {"campaign_id": campaign_id, **taxas.to_dict()}


@router.post("/normalize")
async def normalizar(dados: NormalizarCampanha):
    """Normaliza um registro avulso e retorna as correcoes aplicadas."""
    resultado = normalize_with_report(dados.campanha)
    return {
        "campanha": resultado.record.to_dict(),
        "ajustes": [
            {
                "contador": a.counter,
                "bruto": a.raw,
                "normalizado": a.normalized,
                "limite": a.bound,
            }
            for a in resultado.adjustments
        ],
    }
