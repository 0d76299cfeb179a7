"""
Main FastAPI application setup
Local HTTP API exposing SSDP discovery status, control and discovered devices
"""

from fastapi import FastAPI
import logging

from .system_routes import create_system_routes
from .device_routes import create_device_routes

logger = logging.getLogger(__name__)


class DiscoveryAPI:
    """Local HTTP API for the discovery server"""

    def __init__(self, discovery_manager):
        self.discovery = discovery_manager
        self.app = FastAPI(
            title="SSDP Local Discovery Server",
            description="Local API for SSDP device discovery status, control and results",
            version="1.0.0"
        )
        self._setup_routes()

    def _setup_routes(self):
        """Setup FastAPI routes using modular approach"""
        self.app.include_router(create_system_routes(self.discovery))
        self.app.include_router(create_device_routes(self.discovery))
