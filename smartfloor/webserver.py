"""Minimal HTTP status page of the border router: neighbours, routes and links."""

from __future__ import annotations

import ipaddress
import struct
from collections.abc import Iterable
from dataclasses import dataclass
from typing import Union

HTTPD_PATHLEN = 16
INDEX_PATH = "/index.html"

HEADER_200 = "HTTP/1.0 200 OK\r\nServer: smartfloor\r\nConnection: close\r\n"
CONTENT_TYPE_HTML = "Content-type: text/html\r\n\r\n"

TOP = "<html>\n  <head>\n    <title>Border Router</title>\n  </head>\n<body>\n"
BOTTOM = "\n</body>\n</html>\n"

Address = Union[bytes, bytearray, str, ipaddress.IPv6Address]


@dataclass(frozen=True)
class Route:
    """A downward route: destination prefix, its length, next hop and lifetime in seconds."""

    address: Address
    length: int
    next_hop: Address
    lifetime: int


@dataclass(frozen=True)
class RoutingLink:
    """A source-routing link from a child node to its parent, with lifetime in seconds."""

    child: Address
    parent: Address | None
    lifetime: int


def _packed(address: Address) -> bytes:
    if isinstance(address, ipaddress.IPv6Address):
        return address.packed
    if isinstance(address, str):
        return ipaddress.IPv6Address(address).packed
    raw = bytes(address)
    if len(raw) != 16:
        raise ValueError(f"an IPv6 address has 16 bytes, got {len(raw)}")
    return raw


def format_ipv6(address: Address) -> str:
    """Write an IPv6 address in hex groups, folding the first run of zero groups into '::'."""
    parts: list[str] = []
    folding = 0  # 0: not yet folded, >0: inside the folded run, -1: fold used up
    for position, group in enumerate(struct.unpack(">8H", _packed(address))):
        if group == 0 and folding >= 0:
            if folding == 0:
                parts.append("::")
            folding += 1
            continue
        if folding > 0:
            folding = -1
        elif position > 0:
            parts.append(":")
        parts.append(f"{group:x}")
    return "".join(parts)


def parse_request_path(request: bytes | str) -> str:
    """Return the file name a GET request asks for.

    A bare ``/`` names the index page; longer paths are cut to the server's
    path length. Anything other than a ``GET`` of an absolute path raises
    ValueError, as the server closes such connections.
    """
    text = request.decode("latin-1") if isinstance(request, (bytes, bytearray)) else request
    if not text.startswith("GET "):
        raise ValueError("only GET requests are served")
    path, sep, _ = text[4:].partition(" ")
    if not sep:
        raise ValueError("incomplete request line")
    if not path.startswith("/"):
        raise ValueError(f"path must start with '/': {path!r}")
    if path == "/":
        return INDEX_PATH
    return path[: HTTPD_PATHLEN - 1]


def render_routes(
    neighbors: Iterable[Address],
    routes: Iterable[Route],
    links: Iterable[RoutingLink],
) -> str:
    """Render the status page listing neighbours, routes and routing links."""
    chunks = [TOP, "  Neighbors\n  <ul>\n"]
    chunks.extend(f"    <li>{format_ipv6(nbr)}</li>\n" for nbr in neighbors)
    chunks.append("  </ul>\n")

    chunks.append("  Routes\n  <ul>\n")
    chunks.extend(
        f"    <li>{format_ipv6(route.address)}/{route.length} "
        f"(via {format_ipv6(route.next_hop)}) {route.lifetime}s</li>\n"
        for route in routes
    )
    chunks.append("  </ul>\n")

    link_list = list(links)
    if link_list:
        chunks.append("  Routing links\n  <ul>\n")
        chunks.extend(
            f"    <li>{format_ipv6(link.child)} "
            f"(parent: {format_ipv6(link.parent)}) {link.lifetime}s</li>\n"
            for link in link_list
            if link.parent is not None
        )
        chunks.append("  </ul>")

    chunks.append(BOTTOM)
    return "".join(chunks)


def build_response(
    request: bytes | str,
    neighbors: Iterable[Address],
    routes: Iterable[Route],
    links: Iterable[RoutingLink],
) -> bytes:
    """Answer an HTTP request with the status page; every path serves the same page."""
    parse_request_path(request)
    page = render_routes(neighbors, routes, links)
    return (HEADER_200 + CONTENT_TYPE_HTML + page).encode("ascii")