"""
API module for discovery control and device listing
"""

from .main_api import DiscoveryAPI
from .device_routes import create_device_routes
from .system_routes import create_system_routes

__all__ = ['DiscoveryAPI', 'create_device_routes', 'create_system_routes']
