"""
Tests for application wiring: health endpoints, request logging and logging setup.
"""
import logging

import pytest
from httpx import AsyncClient

from relateai import __version__
from relateai.core.logging import setup_logging


@pytest.mark.asyncio
async def test_root(client: AsyncClient):
    response = await client.get("/")

    assert response.status_code == 200
    assert response.json()["version"] == __version__


@pytest.mark.asyncio
async def test_health(client: AsyncClient):
    response = await client.get("/health")

    assert response.json() == {"status": "healthy", "version": __version__}


@pytest.mark.asyncio
async def test_requests_are_logged(client: AsyncClient, caplog):
    with caplog.at_level(logging.INFO, logger="relateai.main"):
        await client.get("/health")

    assert any("GET /health 200" in record.getMessage() for record in caplog.records)


def test_setup_logging_writes_file(tmp_path):
    log_file = tmp_path / "logs" / "relateai.log"
    configured = [logging.getLogger(name) for name in ("relateai", "uvicorn.error", "uvicorn.access")]
    root = logging.getLogger()
    root_handlers, root_level = list(root.handlers), root.level

    try:
        setup_logging(level="debug", log_file=str(log_file))
        logging.getLogger("relateai.test").debug("hello file")

        assert logging.getLogger("relateai").level == logging.DEBUG
        assert "hello file" in log_file.read_text()
    finally:
        for logger in configured:
            for handler in logger.handlers:
                handler.close()
            logger.handlers.clear()
            logger.propagate = True
            logger.setLevel(logging.NOTSET)
        for handler in root.handlers:
            if handler not in root_handlers:
                handler.close()
        root.handlers = root_handlers
        root.setLevel(root_level)
