"""
Discovered device API routes
"""

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel
from typing import List, Optional
import logging

logger = logging.getLogger(__name__)

class DeviceResponse(BaseModel):
    id: str
    source_address: str
    location: Optional[str] = None
    server: Optional[str] = None
    st: Optional[str] = None
    model: Optional[str] = None
    fw_ver: Optional[str] = None
    name: Optional[str] = None


def create_device_routes(discovery_manager):
    """Create routes exposing the device registry"""
    router = APIRouter(prefix="/api/devices", tags=["devices"])

    @router.get("", response_model=List[DeviceResponse])
    async def list_devices():
        """All devices found by the current or last session, in arrival order"""
        try:
            return [DeviceResponse(**device.to_dict()) for device in discovery_manager.devices()]
        except Exception as e:
            logger.error(f"Error listing devices: {e}")
            raise HTTPException(status_code=500, detail=str(e))

    @router.get("/{device_id}", response_model=DeviceResponse)
    async def get_device(device_id: str):
        """Get one device by its reported id"""
        device = discovery_manager.get_device(device_id)
        if device is None:
            raise HTTPException(status_code=404, detail=f"Device not found: {device_id}")
        return DeviceResponse(**device.to_dict())

    return router
