"""
Device registry with observer notification
"""

import logging
import threading
from typing import Any, Callable, Dict, List

from .models import Device, DEVICE_ADDED

logger = logging.getLogger(__name__)

# (emitter, event, all_devices, new_device)
DeviceObserver = Callable[[Any, str, List[Device], Device], None]


def same_observer(first: DeviceObserver, second: DeviceObserver) -> bool:
    """Identity match; bound methods match when they wrap the same function on the same object"""
    if first is second:
        return True
    first_self = getattr(first, '__self__', None)
    if first_self is None or first_self is not getattr(second, '__self__', None):
        return False
    first_func = getattr(first, '__func__', None)
    return first_func is not None and first_func is getattr(second, '__func__', None)


class DeviceRegistry:
    """Known devices keyed by reported id, plus the observers interested in new ones"""

    def __init__(self, emitter: Any = None):
        self.emitter = emitter if emitter is not None else self
        self._devices: Dict[str, Device] = {}
        self._observers: List[DeviceObserver] = []
        self._lock = threading.Lock()

    def add_if_new(self, device: Device) -> bool:
        """
        Insert device unless its id is already known
        Returns True when the device was added; observers are notified after the lock is released
        """
        with self._lock:
            if device.id in self._devices:
                return False
            self._devices[device.id] = device
            snapshot = list(self._devices.values())
            observers = list(self._observers)

        logger.debug(f"New device {device.id} from {device.source_address} ({len(snapshot)} known)")
        self._notify(observers, snapshot, device)
        return True

    def list_devices(self) -> List[Device]:
        """Copy of known devices in arrival order"""
        with self._lock:
            return list(self._devices.values())

    def __len__(self):
        with self._lock:
            return len(self._devices)

    def add_observer(self, observer: DeviceObserver) -> None:
        with self._lock:
            if not any(same_observer(existing, observer) for existing in self._observers):
                self._observers.append(observer)

    def remove_observer(self, observer: DeviceObserver) -> None:
        with self._lock:
            self._observers = [existing for existing in self._observers if not same_observer(existing, observer)]

    def _notify(self, observers: List[DeviceObserver], snapshot: List[Device], device: Device) -> None:
        for observer in observers:
            # Skip observers removed while earlier ones were running
            with self._lock:
                if not any(same_observer(existing, observer) for existing in self._observers):
                    continue
            try:
                observer(self.emitter, DEVICE_ADDED, list(snapshot), device)
            except Exception:
                logger.exception(f"Observer {observer!r} failed handling device {device.id}")
