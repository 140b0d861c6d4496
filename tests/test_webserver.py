import ipaddress

import pytest

from smartfloor.webserver import (
    INDEX_PATH,
    Route,
    RoutingLink,
    build_response,
    format_ipv6,
    parse_request_path,
    render_routes,
)

ROUTER = "fe80::201:1:1:1"
FLOOR = "fe80::203:3:3:3"


def test_format_link_local_address():
    assert format_ipv6(FLOOR) == "fe80::203:3:3:3"


def test_format_all_zero_address():
    assert format_ipv6(bytes(16)) == "::"


@pytest.mark.parametrize(
    "text",
    ["fe80::201:1:1:1", "fd00::1", "::1", "2001:db8:1:2:3:4:5:6", "fd00::"],
)
def test_format_round_trips_through_ipaddress(text):
    address = ipaddress.IPv6Address(text)
    assert ipaddress.IPv6Address(format_ipv6(address.packed)) == address


def test_format_accepts_ipv6address_and_bytes_alike():
    address = ipaddress.IPv6Address(ROUTER)
    assert format_ipv6(address) == format_ipv6(address.packed) == format_ipv6(ROUTER)


def test_format_rejects_wrong_length():
    with pytest.raises(ValueError):
        format_ipv6(b"\x00" * 4)


def test_parse_root_is_index():
    assert parse_request_path("GET / HTTP/1.0\r\n") == INDEX_PATH


def test_parse_plain_path():
    assert parse_request_path(b"GET /foo HTTP/1.0\r\n") == "/foo"


def test_parse_long_path_is_truncated():
    path = "/" + "a" * 40
    result = parse_request_path(f"GET {path} HTTP/1.0\r\n")
    assert len(result) == 15
    assert path.startswith(result)


@pytest.mark.parametrize(
    "request_line",
    ["POST / HTTP/1.0\r\n", "GETX / HTTP/1.0\r\n", "GET foo HTTP/1.0\r\n", "GET /foo"],
)
def test_parse_rejects_bad_requests(request_line):
    with pytest.raises(ValueError):
        parse_request_path(request_line)


def test_render_page_structure():
    page = render_routes([FLOOR], [], [])
    assert page.startswith("<html>\n")
    assert page.endswith("\n</body>\n</html>\n")
    assert "  Neighbors\n  <ul>\n    <li>fe80::203:3:3:3</li>\n  </ul>\n" in page
    assert "Routing links" not in page


def test_render_routes_and_links():
    route = Route("fd00::203:3:3:3", 128, FLOOR, 1800)
    links = [
        RoutingLink("fd00::203:3:3:3", "fd00::201:1:1:1", 600),
        RoutingLink("fd00::201:1:1:1", None, 0),
    ]
    page = render_routes([], [route], links)
    assert "<li>fd00::203:3:3:3/128 (via fe80::203:3:3:3) 1800s</li>" in page
    assert "<li>fd00::203:3:3:3 (parent: fd00::201:1:1:1) 600s</li>" in page
    assert page.count("<li>") == 2


def test_build_response_headers_and_body():
    reply = build_response("GET / HTTP/1.0\r\n", [ROUTER], [], [])
    assert reply.startswith(b"HTTP/1.0 200 OK\r\n")
    assert b"Content-type: text/html\r\n\r\n<html>" in reply
    assert reply.endswith(render_routes([ROUTER], [], []).encode("ascii"))


def test_build_response_any_path_serves_page():
    first = build_response("GET /missing.html HTTP/1.0\r\n", [], [], [])
    second = build_response("GET / HTTP/1.0\r\n", [], [], [])
    assert first == second


def test_build_response_rejects_bad_request():
    with pytest.raises(ValueError):
        build_response("HEAD / HTTP/1.0\r\n", [], [], [])