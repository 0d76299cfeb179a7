"""
Discovery manager - runs SSDP sessions on behalf of the server
Each session gets a fresh SSDPClient; devices from the last session stay readable until the next one starts.
"""

import logging
import threading
import time
from functools import partial
from typing import Callable, Dict, List, Optional

from .models import Device, DiscoveryStatus
from .network_discovery import SSDPClient, build_request, DEFAULT_BUFFER_SIZE
from .registry import DeviceObserver, same_observer

logger = logging.getLogger(__name__)


class DiscoveryManager:
    """Owns the active SSDP session and the observers that outlive individual sessions"""

    def __init__(self, config: Dict, socket_factory: Optional[Callable] = None, parser: Optional[Callable] = None):
        self.config = config
        self.service_type = config.get('service_type')
        self.port = config.get('port', 1900)
        self.receive_timeout = config.get('receive_timeout', 1.0)
        self.buffer_size = config.get('buffer_size', DEFAULT_BUFFER_SIZE)
        self.session_seconds = config.get('session_seconds')
        self.socket_factory = socket_factory  # Returns a socket for each new session
        self.parser = parser

        self.client: Optional[SSDPClient] = None
        self.session_started: Optional[float] = None
        self.last_error: Optional[str] = None
        self._observers: List[DeviceObserver] = []
        self._lock = threading.Lock()

    # ================== SESSION CONTROL ==================

    def start_session(self) -> SSDPClient:
        """Start a new discovery session unless one is already running"""
        with self._lock:
            if self.client and self.client.is_discovering():
                logger.info("Discovery session already running")
                return self.client

            previous = self.client
            sock = self.socket_factory() if self.socket_factory else None
            client = SSDPClient(
                self.receive_timeout,
                self.service_type,
                self.port,
                sock=sock,
                parser=self.parser,
                buffer_size=self.buffer_size
            )
            client.on_error = partial(self._on_session_error, client)
            client.add_observer(self._log_new_device)
            for observer in self._observers:
                client.add_observer(observer)

            if previous:
                previous.shutdown(timeout=self.receive_timeout * 2)

            self.client = client
            self.session_started = time.time()
            self.last_error = None

            # Started under the lock so a concurrent caller sees it as running
            logger.info(f"[LAUNCH] Starting SSDP discovery (ST: {self.service_type or 'ssdp:all'}, port {self.port})")
            client.start()
        return client

    def stop_session(self, wait: bool = True) -> None:
        """Stop the active session; with wait=True block until its socket is released"""
        client = self.client
        if not client:
            return
        client.stop()
        if wait:
            client.shutdown(timeout=self.receive_timeout * 2)
        logger.info(f"Discovery session stopped with {len(client.list_devices())} devices")

    def wait_for_session(self) -> List[Device]:
        """
        Block until the session ends
        With session_seconds configured the session is stopped once that much time has passed
        """
        client = self.client
        if not client:
            return []

        if self.session_seconds:
            deadline = self.session_started + self.session_seconds
            while client.is_discovering() and time.time() < deadline:
                time.sleep(min(self.receive_timeout, max(deadline - time.time(), 0)))
            self.stop_session()
        else:
            client.join()
        return client.list_devices()

    def is_discovering(self) -> bool:
        return bool(self.client and self.client.is_discovering())

    # ================== DEVICES & OBSERVERS ==================

    def devices(self) -> List[Device]:
        return self.client.list_devices() if self.client else []

    def get_device(self, device_id: str) -> Optional[Device]:
        for device in self.devices():
            if device.id == device_id:
                return device
        return None

    def add_observer(self, observer: DeviceObserver) -> None:
        with self._lock:
            if not any(same_observer(existing, observer) for existing in self._observers):
                self._observers.append(observer)
            client = self.client
        if client:
            client.add_observer(observer)

    def remove_observer(self, observer: DeviceObserver) -> None:
        with self._lock:
            self._observers = [existing for existing in self._observers if not same_observer(existing, observer)]
            client = self.client
        if client:
            client.remove_observer(observer)

    # ================== STATUS ==================

    def status(self) -> DiscoveryStatus:
        return DiscoveryStatus(
            discovering=self.is_discovering(),
            service_type=self.service_type,
            port=self.port,
            receive_timeout=self.receive_timeout,
            device_count=len(self.devices()),
            session_started=self.session_started,
            last_error=self.last_error
        )

    def request_preview(self) -> str:
        return build_request(self.service_type, self.port)

    def _on_session_error(self, client: SSDPClient, error: Exception) -> None:
        # Errors from a replaced session must not mark the active one as failed
        if client is self.client:
            self.last_error = str(error)

    def _log_new_device(self, emitter, event, devices, device) -> None:
        details = ", ".join(f"{k}={v}" for k, v in (('model', device.model), ('name', device.name), ('location', device.location)) if v)
        logger.info(f"[OK] Discovered {device.id} at {device.source_address} ({details or 'no details'}) - {len(devices)} total")
