"""
Testes para a agregacao da visao geral.
"""
import random

from campaign_stats.services.broadcast_stats.aggregator import aggregate
from campaign_stats.services.broadcast_stats.types import CampaignRecord, OverviewStats
from tests.conftest import criar_campanha


class TestAggregate:
    """Testes para aggregate()."""

    def test_exemplo_campanha_unica(self, campanha_inconsistente):
        """Exemplo canonico: read corrigido e sending = destinatarios."""
        assert aggregate([campanha_inconsistente]) == OverviewStats(
            sent=90,
            delivered=80,
            read=80,
            replied=5,
            sending=100,
            failed=3,
            processing=0,
            queued=0,
        )

    def test_agendadas_contam_como_queued(self):
        """Cada campanha agendada soma 1, independente dos contadores."""
        overview = aggregate([
            criar_campanha("a", "scheduled", 50, sent=0),
            criar_campanha("b", "scheduled", 10, sent=999),
        ])
        assert overview.queued == 2
        assert overview.sending == 0

    def test_processing_conta_campanhas(self):
        overview = aggregate([
            criar_campanha("a", "processing", 500),
            criar_campanha("b", "processing", 20),
            criar_campanha("c", "completed", 20),
        ])
        assert overview.processing == 2

    def test_sending_e_volume(self):
        overview = aggregate([
            criar_campanha("a", "sending", 300),
            criar_campanha("b", "sending", 200),
        ])
        assert overview.sending == 500

    def test_status_desconhecido_nao_conta(self):
        overview = aggregate([criar_campanha("a", "rascunho", 10, sent=5)])
        assert overview.sent == 5
        assert (overview.sending, overview.processing, overview.queued) == (0, 0, 0)

    def test_lista_vazia(self):
        assert aggregate([]) == OverviewStats()

    def test_aceita_gerador(self, campanha_inconsistente):
        overview = aggregate(r for r in [campanha_inconsistente])
        assert overview.sent == 90

    def test_nunca_soma_contador_bruto(self):
        """delivered acima de sent e cortado antes da soma."""
        overview = aggregate([
            criar_campanha("a", "completed", 10, sent=10, delivered=15),
            criar_campanha("b", "completed", 10, sent=5, delivered=5),
        ])
        assert overview.delivered == 15
        assert overview.sent == 15

    def test_ordem_irrelevante(self):
        rng = random.Random(99)
        registros = [
            CampaignRecord.from_dict(criar_campanha(
                str(i),
                rng.choice(["scheduled", "sending", "processing", "completed"]),
                rng.randint(0, 100),
                sent=rng.randint(0, 120),
                delivered=rng.randint(0, 120),
                read=rng.randint(0, 120),
                replied=rng.randint(0, 120),
                failed=rng.randint(0, 120),
            ))
            for i in range(50)
        ]
        embaralhados = list(registros)
        rng.shuffle(embaralhados)

        assert aggregate(registros) == aggregate(embaralhados)

    def test_ordem_logica_no_agregado(self):
        rng = random.Random(7)
        for _ in range(50):
            registros = [
                criar_campanha(
                    str(i),
                    "completed",
                    rng.randint(0, 50),
                    sent=rng.randint(0, 60),
                    delivered=rng.randint(0, 60),
                    read=rng.randint(0, 60),
                    replied=rng.randint(0, 60),
                )
                for i in range(rng.randint(0, 8))
            ]
            o = aggregate(registros)
            assert o.replied <= o.read <= o.delivered <= o.sent

    def test_sending_usa_lista_de_destinatarios_sem_recipient_count(self):
        """Sem recipientCount, o volume em envio vem da lista de destinatarios."""
        registro = {"id": "x", "status": "sending", "recipients": ["a", "b", "c"]}

        assert aggregate([registro]).sending == 3
