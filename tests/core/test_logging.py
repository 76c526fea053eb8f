"""
Testes para a configuracao de logging.
"""
import json
import logging
import sys

from campaign_stats.core.logging import ColoredFormatter, JSONFormatter, setup_logging


def _record(msg="mensagem", level=logging.INFO, **extra):
    record = logging.LogRecord(
        name="teste", level=level, pathname=__file__, lineno=10,
        msg=msg, args=(), exc_info=None, func="funcao",
    )
    for chave, valor in extra.items():
        setattr(record, chave, valor)
    return record


class TestJSONFormatter:
    """Testes para JSONFormatter."""

    def test_campos_basicos(self):
        data = json.loads(JSONFormatter().format(_record()))

        assert data["level"] == "INFO"
        assert data["logger"] == "teste"
        assert data["message"] == "mensagem"
        assert data["function"] == "funcao"
        assert "timestamp" in data

    def test_campos_extra(self):
        data = json.loads(JSONFormatter().format(_record(path="/broadcasts/stats", error_type="X")))

        assert data["path"] == "/broadcasts/stats"
        assert data["error_type"] == "X"

    def test_exception_info(self):
        try:
            raise ValueError("falhou")
        except ValueError:
            record = _record(level=logging.ERROR)
            record.exc_info = sys.exc_info()

        data = json.loads(JSONFormatter().format(record))
        assert "ValueError: falhou" in data["exception"]


class TestColoredFormatter:
    """Testes para ColoredFormatter."""

    def test_cor_nao_vaza_para_o_record(self):
        record = _record(level=logging.WARNING)
        saida = ColoredFormatter(fmt="%(levelname)s %(message)s").format(record)

        assert "\033[33m" in saida
        assert record.levelname == "WARNING"


class TestSetupLogging:
    """Testes para setup_logging."""

    def test_producao_usa_json(self):
        root = logging.getLogger()
        handlers_antes = list(root.handlers)
        nivel_antes = root.level
        try:
            setup_logging(environment="production", log_level="warning")

            assert len(root.handlers) == 1
            assert isinstance(root.handlers[0].formatter, JSONFormatter)
            assert root.level == logging.WARNING
        finally:
            root.handlers[:] = handlers_antes
            root.setLevel(nivel_antes)

    def test_desenvolvimento_usa_cores(self):
        root = logging.getLogger()
        handlers_antes = list(root.handlers)
        nivel_antes = root.level
        try:
            setup_logging(environment="development", log_level="debug")

            assert isinstance(root.handlers[0].formatter, ColoredFormatter)
            assert root.level == logging.DEBUG
        finally:
            root.handlers[:] = handlers_antes
            root.setLevel(nivel_antes)
