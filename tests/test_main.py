import asyncio
import logging
import signal

import pytest

import main
from config_loader import get_sample_config
from services.discovery_server import DiscoveryServer

from conftest import FakeSocket, yeelight_reply


@pytest.fixture(autouse=True)
def restore_signal_handlers():
    handlers = {sig: signal.getsignal(sig) for sig in (signal.SIGINT, signal.SIGTERM)}
    yield
    for sig, handler in handlers.items():
        signal.signal(sig, handler)
    for handler in list(logging.getLogger().handlers):
        if isinstance(handler, logging.FileHandler):
            logging.getLogger().removeHandler(handler)
            handler.close()


def test_main_reports_session_summary(tmp_path, monkeypatch, caplog):
    config = get_sample_config()
    config['discovery'].update({'receive_timeout': 0.05, 'session_seconds': 0.2})
    config['api']['enabled'] = False
    config['logging'].update({'file': str(tmp_path / "server.log"), 'console_output': False})

    sock = FakeSocket()
    sock.deliver(yeelight_reply("0xA"), "192.168.1.30")
    monkeypatch.setattr(main, "DiscoveryServer",
                        lambda config_path: DiscoveryServer(config=config, socket_factory=lambda: sock))

    with caplog.at_level(logging.INFO, logger="main"):
        exit_code = asyncio.run(main.main())

    assert exit_code == 0
    assert "Session summary: 1 devices (0xA@192.168.1.30)" in caplog.text


def test_main_fails_on_missing_config(tmp_path, monkeypatch):
    monkeypatch.setenv("CONFIG_FILE", str(tmp_path / "absent.yaml"))

    assert asyncio.run(main.main()) == 1
