"""Floor sensor node: simulated sensors, setpoint control and required-value resources."""

from __future__ import annotations

import logging
import random
from collections.abc import Callable

from smartfloor.actuators import ActuatorServer
from smartfloor.coap import (
    APPLICATION_JSON,
    Leds,
    Response,
    Status,
    describe_reply,
    parse_float,
    query_variable,
)

log = logging.getLogger(__name__)

INITIAL_TEMPERATURE = 22.0
INITIAL_LIGHT = 200.0
INITIAL_TEMP_REQUIRED = 20.0
INITIAL_LIGHT_REQUIRED = 250.0
INITIAL_AC = 21.0
INITIAL_WINDOW = 50.0

TEMP_REQUIRED_MIN = 17.0
TEMP_REQUIRED_MAX = 30.0
LIGHT_REQUIRED_MIN = 0.0
LIGHT_REQUIRED_MAX = 1000.0

AC_PATH = "AC/setpoint"
WINDOW_PATH = "Window/setpoint"
SENSORS_PATH = "SENSORS/reading"
LIGHT_REQUIRED_PATH = "LIGHT/setpoint"
TEMP_REQUIRED_PATH = "TEMP/setpoint"
OBS_RESOURCE_URI = "energy-modality"

Sender = Callable[[str, str], "Response | None"]


def clamp(value: float, low: float, high: float) -> float:
    """Limit ``value`` to the closed range [low, high]."""
    if value < low:
        return low
    if value > high:
        return high
    return value


def biased_random(bias: float, max_change: float, rng: random.Random) -> float:
    """A random change of up to ``max_change / 2`` either way, shifted by ``bias``."""
    r = rng.randrange(1001) / 1000.0 - 0.5
    return r * max_change + bias * (max_change / 2.0)


class SensorSimulator:
    """Simulated temperature and light sensors that drift with the actuator setpoints."""

    def __init__(
        self,
        temperature: float = INITIAL_TEMPERATURE,
        light: float = INITIAL_LIGHT,
        rng: random.Random | None = None,
    ) -> None:
        self.temperature = temperature
        self.light = light
        self.rng = rng if rng is not None else random.Random()
        self._previous_ac_setpoint = 22.0
        self._previous_window_setpoint = 50.0

    def read_temperature(self, ac_setpoint: float) -> float:
        """Take a new temperature reading, biased by how the AC setpoint moved."""
        diff = ac_setpoint - self._previous_ac_setpoint
        bias = 0.0
        if diff > 0.1:
            bias = 0.5
        elif diff < -0.1:
            bias = -0.5
        delta = biased_random(bias, 0.8, self.rng)
        self.temperature = clamp(self.temperature + delta, -20.0, 200.0)
        self._previous_ac_setpoint = ac_setpoint
        return self.temperature

    def read_light(self, window_setpoint: float) -> float:
        """Take a new light reading; closing the covers more makes it darker."""
        diff = window_setpoint - self._previous_window_setpoint
        bias = 0.0
        if diff > 2.0:
            bias = -0.5
        elif diff < -2.0:
            bias = 0.5
        delta = biased_random(bias, 40.0, self.rng)
        self.light = clamp(self.light + delta, 0.0, 1000.0)
        self._previous_window_setpoint = window_setpoint
        return self.light


def update_temp_setpoint(
    current_temp: float, setpoint: float, temp_required: float, modality: int
) -> float:
    """Move the AC setpoint towards the required temperature.

    When the room is too warm the correction is damped more strongly the
    higher the energy-saving modality.
    """
    difference = temp_required - current_temp
    if difference < 0.0:
        if modality == 0:
            scaling = 4.0
        elif modality == 1:
            scaling = 5.0
        else:
            scaling = 8.0
        return setpoint + difference / scaling
    return setpoint + difference / 4.0


def update_window_setpoint(
    current_light: float, setpoint: float, light_required: float
) -> float:
    """Adjust the window cover percentage towards the required light, within 0-100."""
    new_setpoint = setpoint - (light_required - current_light) / 10.0
    return clamp(new_setpoint, 0.0, 100.0)


def _reply(status: Status, text: str) -> Response:
    return Response(status, text.encode("utf-8"))


class FloorController:
    """The floor sensor node: its resources and its periodic control step."""

    def __init__(
        self,
        simulator: SensorSimulator | None = None,
        send: Sender | None = None,
        notify: Callable[[str], None] | None = None,
    ) -> None:
        self.simulator = simulator if simulator is not None else SensorSimulator()
        self._send = send if send is not None else ActuatorServer().handle
        self._notify = notify if notify is not None else (lambda path: None)
        self.leds = Leds()

        self.temperature_required = INITIAL_TEMP_REQUIRED
        self.light_required = INITIAL_LIGHT_REQUIRED
        self.ac_setpoint = INITIAL_AC
        self.window_setpoint = INITIAL_WINDOW
        self.modality = 0
        self.sensors_version = 0

    @property
    def temperature(self) -> float:
        return self.simulator.temperature

    @property
    def light(self) -> float:
        return self.simulator.light

    def _post_required(
        self,
        query: str | None,
        low: float,
        high: float,
        updated: str,
        allowed: str,
    ) -> tuple[Response, float | None]:
        raw = query_variable(query, "setpoint")
        if not raw:
            return _reply(Status.BAD_REQUEST, "Missing 'setpoint' parameter"), None
        try:
            value = parse_float(raw)
        except ValueError:
            return _reply(Status.BAD_REQUEST, "Invalid input: not a float"), None
        if low <= value <= high:
            return _reply(Status.CHANGED, updated.format(value)), value
        return (
            _reply(Status.BAD_REQUEST, f"Invalid value: {value:.2f} ({allowed})"),
            None,
        )

    def post_light_required(self, query: str | None) -> Response:
        """Handle ``POST LIGHT/setpoint?setpoint=FLOAT`` (lumen, 0-1000)."""
        log.info("Received light setpoint POST request")
        response, value = self._post_required(
            query,
            LIGHT_REQUIRED_MIN,
            LIGHT_REQUIRED_MAX,
            "Light setpoint updated to {:.2f}L",
            "allowed 0–1000",
        )
        if value is not None:
            self.light_required = value
        return response

    def post_temp_required(self, query: str | None) -> Response:
        """Handle ``POST TEMP/setpoint?setpoint=FLOAT`` (Celsius, 17-30)."""
        log.info("Received temperature setpoint POST request")
        response, value = self._post_required(
            query,
            TEMP_REQUIRED_MIN,
            TEMP_REQUIRED_MAX,
            "Temperature setpoint updated to {:.2f}C",
            "allowed 17-30 C",
        )
        if value is not None:
            self.temperature_required = value
        return response

    def get_sensors(self) -> Response:
        """Return light and temperature as JSON; each call bumps the version."""
        body = (
            f'{{"light": {self.light:.3f}, "temp": {self.temperature:.3f}, '
            f'"v":{self.sensors_version}}}'
        )
        self.sensors_version += 1
        return Response(Status.CONTENT, body.encode("ascii"), APPLICATION_JSON)

    def handle_modality(self, payload: bytes | None) -> int:
        """Apply an energy-modality notification and return the current modality."""
        log.info("Notification handler, observee URI: %s", OBS_RESOURCE_URI)
        if not payload:
            log.info("No payload received to parse modality")
            return self.modality
        mod = payload[0]
        if mod <= 2:
            log.info("Modality PARSED: %u", mod)
            self.modality = mod
            self.leds.set_color(mod)
        else:
            log.info("Unknown modality value: %u", mod)
        return self.modality

    def step(self) -> list[str]:
        """Read the sensors, recompute setpoints and send them to the actuators.

        Returns the description of each actuator reply, AC first.
        """
        temperature = self.simulator.read_temperature(self.ac_setpoint)
        light = self.simulator.read_light(self.window_setpoint)

        self.ac_setpoint = update_temp_setpoint(
            temperature, self.ac_setpoint, self.temperature_required, self.modality
        )
        self.window_setpoint = update_window_setpoint(
            light, self.window_setpoint, self.light_required
        )

        log.info(
            "Temp: %.2fC | AC Setpoint: %.2fC | Temp target: %.2f",
            temperature,
            self.ac_setpoint,
            self.temperature_required,
        )
        log.info(
            "Light: %.2f lm | Window Setpoint: %.2f | Light target: %.2f lm",
            light,
            self.window_setpoint,
            self.light_required,
        )

        requests = (
            (AC_PATH, f"on=1&setpoint={self.ac_setpoint:.2f}"),
            (WINDOW_PATH, f"setpoint={self.window_setpoint:.2f}"),
        )
        replies = [describe_reply(self._send(path, query)) for path, query in requests]

        log.info("LIGHT %.3f", self.light)
        log.info("TEMP %.3f", self.temperature)
        self._notify(SENSORS_PATH)
        return replies