"""Floor actuator resources: air-conditioning and window setpoints."""

from __future__ import annotations

import logging
from collections.abc import Callable

from smartfloor.coap import Response, Status, parse_float, query_variable

log = logging.getLogger(__name__)

AC_MIN = 16.0
AC_MAX = 30.0
WINDOW_MIN = 0.0
WINDOW_MAX = 100.0


def _reply(status: Status, text: str) -> Response:
    return Response(status, text.encode("utf-8"))


def post_ac_setpoint(query: str | None) -> Response:
    """Handle ``POST AC/setpoint?on=0|1[&setpoint=FLOAT]``."""
    log.info("Received AC control POST request")
    on = query_variable(query, "on")
    if not on:
        return _reply(Status.BAD_REQUEST, "Missing 'on' parameter")
    if on not in ("0", "1"):
        return _reply(Status.BAD_REQUEST, "Invalid 'on' value: must be 0 or 1")
    if on == "0":
        return _reply(Status.CHANGED, "AC turned OFF")

    raw = query_variable(query, "setpoint")
    if not raw:
        return _reply(Status.BAD_REQUEST, "Missing 'setpoint' parameter")
    try:
        setpoint = parse_float(raw)
    except ValueError:
        setpoint = None
    if setpoint is None or not AC_MIN <= setpoint <= AC_MAX:
        return _reply(Status.BAD_REQUEST, "Invalid setpoint: must be 16.0–30.0")
    return _reply(Status.CHANGED, f"AC ON. Setpoint: {setpoint:.2f}°C")


def post_window_setpoint(query: str | None) -> Response:
    """Handle ``POST Window/setpoint?setpoint=FLOAT`` (percentage open)."""
    log.info("Received window setpoint POST request")
    raw = query_variable(query, "setpoint")
    if not raw:
        return _reply(Status.BAD_REQUEST, "Missing 'setpoint' parameter")
    try:
        value = parse_float(raw)
    except ValueError:
        return _reply(Status.BAD_REQUEST, "Invalid input: not a float")
    if WINDOW_MIN <= value <= WINDOW_MAX:
        return _reply(Status.CHANGED, f"Window setpoint updated to {value:.2f}%")
    return _reply(Status.BAD_REQUEST, f"Invalid value: {value:.2f} (allowed 0–100)")


class ActuatorServer:
    """Routes POST requests to the floor's actuator resources."""

    def __init__(self) -> None:
        self.resources: dict[str, Callable[[str | None], Response]] = {
            "AC/setpoint": post_ac_setpoint,
            "Window/setpoint": post_window_setpoint,
        }
        log.info("Starting Actuators Floor CoAP Server")

    def handle(self, path: str, query: str | None) -> Response:
        handler = self.resources.get(path.strip("/"))
        if handler is None:
            return Response(Status.NOT_FOUND)
        return handler(query)