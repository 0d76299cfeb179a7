import queue
import socket
import time

import pytest


def yeelight_reply(device_id, address="192.168.1.239", name="", model="color"):
    return (
        "HTTP/1.1 200 OK\r\n"
        "Cache-Control: max-age=3600\r\n"
        "Date: \r\n"
        "Ext: \r\n"
        f"Location: yeelight://{address}:55443\r\n"
        "Server: POSIX UPnP/1.0 YGLC/1\r\n"
        f"id: {device_id}\r\n"
        f"model: {model}\r\n"
        "fw_ver: 18\r\n"
        "support: get_prop set_default set_power toggle set_bright start_cf stop_cf\r\n"
        "power: on\r\n"
        "bright: 100\r\n"
        f"name: {name}\r\n"
        "\r\n"
    ).encode()


class FakeSocket:
    """Stand-in for a UDP socket; replies are queued with deliver()"""

    def __init__(self, send_error=None):
        self.send_error = send_error
        self.sent = []
        self.timeout = None
        self.close_count = 0
        self._replies = queue.Queue()

    def deliver(self, data, address="192.168.1.10", port=1982):
        self._replies.put((data, (address, port)))

    def fail_receive(self, error):
        self._replies.put(error)

    def sendto(self, data, address):
        if self.send_error:
            raise self.send_error
        self.sent.append((data, address))
        return len(data)

    def settimeout(self, timeout):
        self.timeout = timeout

    def recvfrom(self, bufsize):
        try:
            item = self._replies.get(timeout=self.timeout)
        except queue.Empty:
            raise socket.timeout("timed out")
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.close_count += 1


def wait_until(predicate, timeout=2.0):
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.01)
    return predicate()


@pytest.fixture
def fake_socket():
    return FakeSocket()


@pytest.fixture
def recorder():
    """Observer that records every notification"""
    events = []

    def observer(emitter, event, devices, device):
        events.append((emitter, event, [d.id for d in devices], device))

    observer.events = events
    return observer
