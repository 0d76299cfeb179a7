import pytest

from discovery.network_discovery import SSDPClient, build_request, SSDP_ADDR


@pytest.mark.parametrize("service_type,expected_st", [
    ("wifi_bulb", "ST: wifi_bulb"),
    ("urn:schemas-upnp-org:device:MediaRenderer:1", "ST: urn:schemas-upnp-org:device:MediaRenderer:1"),
    (None, "ST: ssdp:all"),
])
def test_request_headers(service_type, expected_st):
    request = build_request(service_type, 1982)
    lines = request.split("\r\n")

    assert lines[0] == "M-SEARCH * HTTP/1.1"
    assert f"HOST: {SSDP_ADDR}:1982" in lines
    assert 'MAN: "ssdp:discover"' in lines
    assert expected_st in lines


def test_request_lines_are_crlf_terminated():
    request = build_request("wifi_bulb", 1900)

    assert request.endswith("\r\n\r\n")
    assert "\n" not in request.replace("\r\n", "")


def test_request_is_deterministic():
    assert build_request(None, 1900) == build_request(None, 1900)


def test_client_request_uses_configuration(fake_socket):
    client = SSDPClient(0.1, "wifi_bulb", 1982, sock=fake_socket)

    assert client.build_request() == build_request("wifi_bulb", 1982)
