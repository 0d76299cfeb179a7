"""
Services module for server orchestration
"""

from .discovery_server import DiscoveryServer

__all__ = ['DiscoveryServer']
