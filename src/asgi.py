"""
ASGI entry point for uvicorn
This module exposes the FastAPI app for use with uvicorn command line
"""

import logging
import os

from config_loader import load_config, setup_logging
from discovery.manager import DiscoveryManager
from api.main_api import DiscoveryAPI

# Load configuration
config = load_config(os.environ.get('CONFIG_FILE', 'config/config.yaml'))
setup_logging(config)

logger = logging.getLogger(__name__)

logger.info("Initializing application components...")

discovery = DiscoveryManager(config['discovery'])
api = DiscoveryAPI(discovery)

# Expose the FastAPI app for uvicorn
app = api.app

@app.on_event("startup")
async def startup_event():
    """Start discovery on startup when configured"""
    logger.info("Starting up application...")
    if config['discovery'].get('auto_start', True):
        discovery.start_session()

@app.on_event("shutdown")
async def shutdown_event():
    """Stop discovery and release the socket"""
    logger.info("Shutting down application...")
    discovery.stop_session()
    logger.info("Application shut down complete")

logger.info("ASGI app ready for uvicorn")
