"""
Discovery data structures and models
"""

from types import MappingProxyType
from typing import Mapping, Optional
from dataclasses import dataclass, field

# Event tag passed to observers when a device joins the registry
DEVICE_ADDED = "ADD"


class DeviceParseError(ValueError):
    """Raised when a datagram is not a usable SSDP device reply"""


@dataclass(frozen=True, eq=False)
class Device:
    """Represents a device that answered an SSDP search"""
    id: str
    source_address: str
    location: Optional[str] = None
    server: Optional[str] = None
    st: Optional[str] = None
    model: Optional[str] = None
    fw_ver: Optional[str] = None
    name: Optional[str] = None
    headers: Mapping[str, str] = field(default_factory=dict, repr=False)

    def __post_init__(self):
        # Freeze the header mapping along with the rest of the record
        object.__setattr__(self, 'headers', MappingProxyType(dict(self.headers)))

    # Identity is the reported device id; the source address may change between replies
    def __eq__(self, other):
        if not isinstance(other, Device):
            return NotImplemented
        return self.id == other.id

    def __hash__(self):
        return hash(self.id)

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'source_address': self.source_address,
            'location': self.location,
            'server': self.server,
            'st': self.st,
            'model': self.model,
            'fw_ver': self.fw_ver,
            'name': self.name,
        }


@dataclass
class DiscoveryStatus:
    """Snapshot of the discovery manager state"""
    discovering: bool
    service_type: Optional[str]
    port: int
    receive_timeout: float
    device_count: int
    session_started: Optional[float] = None
    last_error: Optional[str] = None
