"""
SSDP multicast discovery client

One M-SEARCH is sent per session; replies are collected on a background thread
until stop() is called. The receive timeout doubles as the stop-check interval,
so stop() takes effect within one timeout.
"""

import socket
import threading
import logging
from typing import Callable, List, Optional

from .models import Device
from .parser import parse_device
from .registry import DeviceRegistry, DeviceObserver

logger = logging.getLogger(__name__)

SSDP_ADDR = '239.255.255.250'
SSDP_ALL = 'ssdp:all'
DEFAULT_BUFFER_SIZE = 4096


def build_request(service_type: Optional[str], port: int) -> str:
    """Format the M-SEARCH request; CRLF line endings are part of the wire format"""
    lines = [
        "M-SEARCH * HTTP/1.1",
        f"HOST: {SSDP_ADDR}:{port}",
        'MAN: "ssdp:discover"',
        f"ST: {service_type if service_type is not None else SSDP_ALL}",
    ]
    return "\r\n".join(lines) + "\r\n\r\n"


class SSDPClient:
    """
    Simple SSDP client that only manages discovery

    An instance runs a single session: start() may be called once. Create a new
    client to discover again.
    """

    def __init__(self, timeout: float, service_type: Optional[str], port: int,
                 sock: Optional[socket.socket] = None,
                 parser: Optional[Callable[[str, bytes], Device]] = None,
                 on_error: Optional[Callable[[Exception], None]] = None,
                 buffer_size: int = DEFAULT_BUFFER_SIZE):
        self.timeout = timeout
        self.service_type = service_type
        self.port = port
        self.buffer_size = buffer_size
        self.parser = parser or parse_device
        self.on_error = on_error
        self.last_error: Optional[Exception] = None

        # Raises OSError to the caller when no socket can be opened
        if sock is None:
            sock = socket.socket(socket.AF_INET, socket.SOCK_DGRAM, socket.IPPROTO_UDP)
            sock.setsockopt(socket.IPPROTO_IP, socket.IP_MULTICAST_TTL, 2)
        self._sock = sock
        self._sock_closed = False
        self._close_lock = threading.Lock()

        self._discovering = threading.Event()
        self._registry = DeviceRegistry(emitter=self)
        self._thread = threading.Thread(
            target=self._discovery_loop,
            name=f"ssdp-discovery-{port}",
            daemon=True
        )

    # ================== REQUEST ==================

    def build_request(self) -> str:
        return build_request(self.service_type, self.port)

    # ================== LIFECYCLE ==================

    def start(self) -> None:
        """
        Start discovering in the background and return immediately
        Raises RuntimeError if this client has already been started
        """
        if self._thread.ident is not None:
            raise RuntimeError("SSDP client already started; create a new client for another session")
        self._discovering.set()
        self._thread.start()

    def stop(self) -> None:
        """Ask the loop to finish at its next receive timeout"""
        self._discovering.clear()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the discovery thread; returns True once it has finished"""
        if self._thread.ident is None:
            return True
        self._thread.join(timeout)
        return not self._thread.is_alive()

    def shutdown(self, timeout: Optional[float] = None) -> None:
        """Stop, wait for the loop and release the socket"""
        self.stop()
        if self.join(timeout):
            self._close_socket()
        else:
            logger.warning(f"Discovery thread did not exit within {timeout}s")

    def is_discovering(self) -> bool:
        return self._discovering.is_set()

    # ================== DEVICES & OBSERVERS ==================

    def list_devices(self) -> List[Device]:
        return self._registry.list_devices()

    def add_observer(self, observer: DeviceObserver) -> None:
        self._registry.add_observer(observer)

    def remove_observer(self, observer: DeviceObserver) -> None:
        self._registry.remove_observer(observer)

    # ================== DISCOVERY LOOP ==================

    def _discovery_loop(self) -> None:
        try:
            request = self.build_request()
            logger.debug(f"Sending SSDP request to {SSDP_ADDR}:{self.port}:\n{request}")
            self._sock.sendto(request.encode('utf-8'), (SSDP_ADDR, self.port))
            self._sock.settimeout(self.timeout)

            logger.info(f"SSDP search sent (ST: {self.service_type or SSDP_ALL}, port {self.port})")

            while self._discovering.is_set():
                try:
                    data, addr = self._sock.recvfrom(self.buffer_size)
                except socket.timeout:
                    continue
                logger.debug(f"SSDP reply from {addr[0]} ({len(data)} bytes)")
                self._handle_datagram(addr[0], data)

            logger.info(f"SSDP discovery stopped: {len(self._registry)} devices known")

        except OSError as e:
            self._discovering.clear()
            self.last_error = e
            logger.error(f"SSDP discovery failed: {e}")
            self._report_error(e)
        finally:
            self._discovering.clear()
            self._close_socket()

    def _handle_datagram(self, source_address: str, data: bytes) -> None:
        try:
            device = self.parser(source_address, data)
        except Exception as e:
            # Stray multicast traffic is expected on a shared segment
            logger.debug(f"Ignoring datagram from {source_address}: {e}")
            return
        self._registry.add_if_new(device)

    def _report_error(self, error: Exception) -> None:
        if not self.on_error:
            return
        try:
            self.on_error(error)
        except Exception:
            logger.exception("Discovery error callback failed")

    def _close_socket(self) -> None:
        with self._close_lock:
            if self._sock_closed:
                return
            self._sock_closed = True
        try:
            self._sock.close()
        except OSError as e:
            logger.warning(f"Error closing discovery socket: {e}")
