"""
System health and discovery control API routes
"""

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse
from pydantic import BaseModel
from typing import Optional
from datetime import datetime, timezone
import logging

logger = logging.getLogger(__name__)

# Response models
class DiscoveryStatusResponse(BaseModel):
    discovering: bool
    service_type: Optional[str]
    port: int
    receive_timeout: float
    device_count: int
    session_started: Optional[datetime] = None
    last_error: Optional[str] = None

def _status_response(discovery_manager) -> DiscoveryStatusResponse:
    status = discovery_manager.status()
    return DiscoveryStatusResponse(
        discovering=status.discovering,
        service_type=status.service_type,
        port=status.port,
        receive_timeout=status.receive_timeout,
        device_count=status.device_count,
        session_started=datetime.fromtimestamp(status.session_started, tz=timezone.utc) if status.session_started else None,
        last_error=status.last_error
    )

def create_system_routes(discovery_manager):
    """Create system monitoring and discovery control routes"""
    router = APIRouter(prefix="/api", tags=["system"])

    @router.get("/system/health")
    async def system_health():
        """System health check"""
        try:
            status = discovery_manager.status()
            return {
                "status": "healthy" if not status.last_error else "degraded",
                "discovering": status.discovering,
                "device_count": status.device_count,
                "last_error": status.last_error,
                "timestamp": datetime.now(timezone.utc).isoformat()
            }

        except Exception as e:
            return {
                "status": "unhealthy",
                "error": str(e),
                "timestamp": datetime.now(timezone.utc).isoformat()
            }

    @router.get("/discovery/status", response_model=DiscoveryStatusResponse)
    async def get_discovery_status():
        """Get discovery session status"""
        try:
            return _status_response(discovery_manager)
        except Exception as e:
            logger.error(f"Error getting discovery status: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/discovery/start", response_model=DiscoveryStatusResponse)
    def start_discovery():
        """Start a discovery session (no-op while one is running)"""
        try:
            discovery_manager.start_session()
            return _status_response(discovery_manager)
        except Exception as e:
            logger.error(f"Error starting discovery: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.post("/discovery/stop", response_model=DiscoveryStatusResponse)
    def stop_discovery():
        """Stop the active discovery session"""
        try:
            discovery_manager.stop_session()
            return _status_response(discovery_manager)
        except Exception as e:
            logger.error(f"Error stopping discovery: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.get("/discovery/request", response_class=PlainTextResponse)
    async def get_search_request():
        """M-SEARCH request sent by the configured discovery"""
        return discovery_manager.request_preview()

    return router
