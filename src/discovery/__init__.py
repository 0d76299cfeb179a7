"""
Discovery module for SSDP device discovery
"""

from .manager import DiscoveryManager
from .models import Device, DiscoveryStatus, DeviceParseError, DEVICE_ADDED
from .network_discovery import SSDPClient, build_request, SSDP_ADDR
from .parser import parse_device
from .registry import DeviceRegistry

__all__ = [
    'DiscoveryManager', 'Device', 'DiscoveryStatus', 'DeviceParseError', 'DEVICE_ADDED',
    'SSDPClient', 'build_request', 'SSDP_ADDR', 'parse_device', 'DeviceRegistry'
]
