"""
Default SSDP reply parser

Turns a raw search response (or NOTIFY ssdp:alive advertisement) into a Device.
Yeelight bulbs report their identity in an ``id`` header; standard UPnP
devices use ``USN``.
"""

import logging
from typing import Dict

from .models import Device, DeviceParseError

logger = logging.getLogger(__name__)

SEARCH_RESPONSE_PREFIX = 'HTTP/1.1 200'
NOTIFY_PREFIX = 'NOTIFY * HTTP/1.1'
NTS_ALIVE = 'ssdp:alive'


def parse_headers(lines) -> Dict[str, str]:
    """Parse 'Name: value' lines into a dict keyed by lower-case name"""
    headers = {}
    for line in lines:
        if ':' not in line:
            continue
        name, value = line.split(':', 1)
        name = name.strip().lower()
        if name:
            headers[name] = value.strip()
    return headers


def parse_device(source_address: str, data: bytes) -> Device:
    """
    Build a Device from an SSDP reply
    Raises DeviceParseError for anything that is not an identifiable device reply
    """
    text = data.decode('utf-8', errors='replace').replace('\x00', '')
    lines = text.splitlines()

    if not lines:
        raise DeviceParseError(f"Empty datagram from {source_address}")

    start_line = lines[0].strip()
    if not (start_line.upper().startswith(SEARCH_RESPONSE_PREFIX) or start_line.upper().startswith(NOTIFY_PREFIX)):
        raise DeviceParseError(f"Not an SSDP reply from {source_address}: {start_line[:40]!r}")

    headers = parse_headers(lines[1:])

    # Only alive advertisements announce a device; byebye and update do not
    if start_line.upper().startswith(NOTIFY_PREFIX) and headers.get('nts', '').lower() != NTS_ALIVE:
        raise DeviceParseError(f"NOTIFY from {source_address} is not an alive advertisement: {headers.get('nts')!r}")

    device_id = headers.get('id') or headers.get('usn')
    if not device_id:
        raise DeviceParseError(f"SSDP reply from {source_address} carries no device identifier")

    return Device(
        id=device_id,
        source_address=source_address,
        location=headers.get('location'),
        server=headers.get('server'),
        st=headers.get('st') or headers.get('nt'),
        model=headers.get('model'),
        fw_ver=headers.get('fw_ver'),
        name=headers.get('name') or None,
        headers=headers
    )
