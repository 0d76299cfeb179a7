"""
Discovery Server - Main orchestrator for SSDP discovery and the local API
"""

import asyncio
import logging
from typing import Dict, List, Optional
import uvicorn

from config_loader import load_config, setup_logging
from discovery.manager import DiscoveryManager
from discovery.models import Device
from api.main_api import DiscoveryAPI

logger = logging.getLogger(__name__)

class DiscoveryServer:
    """Main server wiring configuration, discovery sessions and the HTTP API"""

    def __init__(self, config_path: str = "config/config.yaml", config: Optional[Dict] = None, socket_factory=None):
        self.config = config if config is not None else load_config(config_path)
        setup_logging(self.config)

        self.discovery = DiscoveryManager(self.config['discovery'], socket_factory=socket_factory)
        self.api = DiscoveryAPI(self.discovery)
        self.running = False
        self._api_server: Optional[uvicorn.Server] = None

    async def start(self):
        """Start discovery and serve the API (or wait for the session when the API is disabled)"""
        logger.info("Starting SSDP discovery server...")
        self.running = True

        try:
            if self.config['discovery'].get('auto_start', True):
                self.discovery.start_session()

            if self.config['api'].get('enabled', True):
                await self._start_api_server()
            else:
                devices = await asyncio.to_thread(self.discovery.wait_for_session)
                self._log_devices(devices)

        except Exception as e:
            logger.error(f"Server startup failed: {e}")
            await self.stop()
            raise

    async def stop(self):
        """Stop discovery and the API server"""
        if not self.running:
            return
        logger.info("Stopping server...")
        self.running = False

        if self._api_server:
            self._api_server.should_exit = True

        await asyncio.to_thread(self.discovery.stop_session)
        logger.info("Server stopped")

    async def _start_api_server(self):
        """Start the FastAPI server"""
        config = uvicorn.Config(
            self.api.app,
            host=self.config['api']['host'],
            port=self.config['api']['port'],
            log_level="info",
            access_log=False  # We handle our own logging
        )

        self._api_server = uvicorn.Server(config)

        logger.info(f"Starting API server on {self.config['api']['host']}:{self.config['api']['port']}")
        logger.info(f"API documentation: http://localhost:{self.config['api']['port']}/docs")

        await self._api_server.serve()

    def _log_devices(self, devices: List[Device]):
        logger.info(f"[SUCCESS] Discovery finished: {len(devices)} devices")
        for device in devices:
            logger.info(f"  {device.id} @ {device.source_address} {device.location or ''}")
