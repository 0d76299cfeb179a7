"""
SSDP Local Discovery Server - Main Entry Point
Usage: CONFIG_FILE=config/config.yaml ssdp-discovery-server
"""

import asyncio
import signal
import sys
import logging
import os

from services.discovery_server import DiscoveryServer

logger = logging.getLogger(__name__)

async def main() -> int:
    """Run the discovery server until it finishes or a signal arrives"""
    config_path = os.environ.get('CONFIG_FILE', 'config/config.yaml')

    try:
        server = DiscoveryServer(config_path=config_path)
    except (OSError, ValueError) as e:
        logger.error(f"Cannot start discovery server with {config_path}: {e}")
        return 1

    loop = asyncio.get_running_loop()

    def request_stop(signum, frame):
        logger.info(f"Received signal {signum}, stopping discovery...")
        loop.call_soon_threadsafe(lambda: loop.create_task(server.stop()))

    signal.signal(signal.SIGINT, request_stop)
    signal.signal(signal.SIGTERM, request_stop)

    exit_code = 0
    try:
        await server.start()
    except Exception as e:
        logger.error(f"Server failed: {e}")
        exit_code = 1
    finally:
        await server.stop()

    devices = server.discovery.devices()
    summary = ", ".join(f"{d.id}@{d.source_address}" for d in devices)
    logger.info(f"Session summary: {len(devices)} devices" + (f" ({summary})" if summary else ""))
    return exit_code

def run():
    sys.exit(asyncio.run(main()))

if __name__ == "__main__":
    run()
