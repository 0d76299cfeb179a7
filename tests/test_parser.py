import pytest

from discovery.models import Device, DeviceParseError
from discovery.parser import parse_device

from conftest import yeelight_reply


def test_parse_yeelight_reply():
    device = parse_device("192.168.1.239", yeelight_reply("0x000000000015243f", name="desk"))

    assert device.id == "0x000000000015243f"
    assert device.source_address == "192.168.1.239"
    assert device.location == "yeelight://192.168.1.239:55443"
    assert device.model == "color"
    assert device.fw_ver == "18"
    assert device.name == "desk"
    assert device.headers["power"] == "on"


def test_parse_upnp_reply_uses_usn():
    data = (
        b"HTTP/1.1 200 OK\r\n"
        b"CACHE-CONTROL: max-age=1800\r\n"
        b"LOCATION: http://192.168.1.1:49152/desc.xml\r\n"
        b"SERVER: Linux/3.14 UPnP/1.0 IpBridge/1.26.0\r\n"
        b"ST: upnp:rootdevice\r\n"
        b"USN: uuid:2f402f80-da50-11e1-9b23-001788255acc::upnp:rootdevice\r\n\r\n"
    )
    device = parse_device("192.168.1.1", data)

    assert device.id == "uuid:2f402f80-da50-11e1-9b23-001788255acc::upnp:rootdevice"
    assert device.st == "upnp:rootdevice"
    assert device.location == "http://192.168.1.1:49152/desc.xml"
    assert device.name is None


def test_parse_notify_uses_nt():
    data = (
        b"NOTIFY * HTTP/1.1\r\n"
        b"HOST: 239.255.255.250:1900\r\n"
        b"NT: upnp:rootdevice\r\n"
        b"NTS: ssdp:alive\r\n"
        b"USN: uuid:abc::upnp:rootdevice\r\n\r\n"
    )
    assert parse_device("10.0.0.2", data).st == "upnp:rootdevice"


@pytest.mark.parametrize("data", [
    b"",
    b"M-SEARCH * HTTP/1.1\r\nHOST: 239.255.255.250:1982\r\nST: wifi_bulb\r\n\r\n",
    b"\xff\xfe garbage",
    b"HTTP/1.1 200 OK\r\nLOCATION: http://10.0.0.1/\r\n\r\n",
])
def test_unusable_payloads_raise(data):
    with pytest.raises(DeviceParseError):
        parse_device("10.0.0.1", data)


def test_device_identity_is_reported_id():
    first = parse_device("10.0.0.1", yeelight_reply("0x1"))
    moved = parse_device("10.0.0.99", yeelight_reply("0x1"))

    assert first == moved
    assert hash(first) == hash(moved)
    assert first != Device(id="0x2", source_address="10.0.0.1")


def test_device_is_immutable():
    device = parse_device("10.0.0.1", yeelight_reply("0x1"))

    with pytest.raises(AttributeError):
        device.id = "0x2"
    with pytest.raises(TypeError):
        device.headers["power"] = "off"


@pytest.mark.parametrize("nts", ["ssdp:byebye", "ssdp:update", None])
def test_notify_without_alive_is_rejected(nts):
    data = (
        "NOTIFY * HTTP/1.1\r\n"
        "HOST: 239.255.255.250:1900\r\n"
        "NT: upnp:rootdevice\r\n"
        + (f"NTS: {nts}\r\n" if nts else "")
        + "USN: uuid:abc::upnp:rootdevice\r\n\r\n"
    ).encode()

    with pytest.raises(DeviceParseError):
        parse_device("10.0.0.2", data)
