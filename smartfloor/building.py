"""Building border router: energy prediction, battery control and modality resources."""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable, Sequence

from smartfloor.coap import (
    APPLICATION_JSON,
    APPLICATION_OCTET_STREAM,
    LedColor,
    Leds,
    Response,
    Status,
    parse_float,
    query_variable,
)
from smartfloor.energy import (
    BUFFER_SIZE,
    EnergyReadings,
    ReadingsBuffer,
    next_soc,
    quantize_features,
)

log = logging.getLogger(__name__)

MIN_KW_BATTERY = -10.0
MAX_KW_BATTERY = 10.0

MAX_TH = 3
LOW_TH = 2

POWER_PATH = "power"
BATTERY_SOC_PATH = "battery/soc"
BATTERY_SETPOINT_PATH = "battery/setpoint"
ENERGY_MODALITY_PATH = "energy-modality"

Regressor = Callable[[Sequence[int]], float]


class Modality(enum.IntEnum):
    """Energy-saving mode announced to the floors."""

    DISABLED = -2
    UNKNOWN = -1
    NORMAL = 0
    LIGHT_SAVING = 1
    HEAVY_SAVING = 2


def _reply(status: Status, text: str) -> Response:
    return Response(status, text.encode("utf-8"))


class BuildingRouter:
    """State and CoAP resources of the building's border router."""

    def __init__(
        self,
        readings: EnergyReadings | None = None,
        notify: Callable[[str], None] | None = None,
    ) -> None:
        self.readings = readings if readings is not None else EnergyReadings()
        self.buffer = ReadingsBuffer()
        self.leds = Leds()
        self._notify = notify if notify is not None else (lambda path: None)

        self.battery_setpoint = 0.0
        self.soc = 0.0
        self.prediction = 0.0
        self.last_reading: tuple[float, float] = (0.0, 0.0)
        self.modality = Modality.UNKNOWN
        self.modality_disabled = False

        self.reading_counter = 0
        self.power_version = 0
        self.soc_version = 0
        log.info("Server initialized")

    # -- battery/setpoint ------------------------------------------------

    def post_battery_setpoint(self, query: str | None) -> Response:
        """Handle ``POST battery/setpoint?setpoint=FLOAT`` (kW, -10 to 10)."""
        log.info("Received battery setpoint POST request")
        raw = query_variable(query, "setpoint")
        if not raw:
            return Response(Status.CONTENT)
        try:
            setpoint = parse_float(raw)
        except ValueError:
            setpoint = None
        if setpoint is None or not MIN_KW_BATTERY <= setpoint <= MAX_KW_BATTERY:
            return _reply(Status.BAD_REQUEST, "Invalid SOC setpoint")

        if self.soc <= 0.1 and setpoint < 0.0:
            return _reply(
                Status.BAD_REQUEST, "Battery empty, cannot set negative setpoint"
            )
        if self.soc >= 99.0 and setpoint > 0.0:
            return _reply(
                Status.BAD_REQUEST, "Battery full, cannot set positive setpoint"
            )

        text = (
            f"BATTERY SOC Setpoint: {setpoint:.2f}, "
            f"last set: {self.battery_setpoint:.2f}, last soc: {self.soc:.2f}, "
        )
        self.battery_setpoint = setpoint
        return _reply(Status.CHANGED, text)

    # -- observable GET resources -----------------------------------------

    def get_battery_soc(self) -> Response:
        """Return the state of charge as JSON; each call bumps the version."""
        body = f'{{"soc": {self.soc:.3f}, "v": {self.soc_version}}}'
        self.soc_version += 1
        return Response(Status.CONTENT, body.encode("ascii"), APPLICATION_JSON)

    def get_power(self) -> Response:
        """Return the last prediction and reading as JSON; each call bumps the version."""
        first, second = self.last_reading
        body = (
            f'{{"pred": {self.prediction:.3f}, '
            f'"last": [{first:.3f}, {second:.3f}], "v": {self.power_version}}}'
        )
        self.power_version += 1
        return Response(Status.CONTENT, body.encode("ascii"), APPLICATION_JSON)

    def get_energy_modality(self) -> Response:
        """Return the modality as a single byte; a disabled modality reads as 0."""
        value = 0 if self.modality is Modality.DISABLED else int(self.modality) & 0xFF
        return Response(Status.CONTENT, bytes([value]), APPLICATION_OCTET_STREAM)

    # -- events ----------------------------------------------------------

    def toggle_modality(self) -> None:
        """Button press: switch the modality service off or back on."""
        self.modality_disabled = not self.modality_disabled

    def refresh_modality(self) -> None:
        """Recompute the modality from the prediction and notify observers on change."""
        if self.modality_disabled:
            if self.modality is not Modality.DISABLED:
                log.info("Energy Modality disabled")
                self.leds.set_color(LedColor.DISABLE)
                was_normal = self.modality is Modality.NORMAL
                self.modality = Modality.DISABLED
                if not was_normal:
                    self._notify(ENERGY_MODALITY_PATH)
            return

        if self.modality is Modality.DISABLED:
            log.info("Energy Modality enabled")
            self.leds.set_color(LedColor.GREEN)

        if self.prediction > MAX_TH:
            mod = Modality.HEAVY_SAVING
        elif self.prediction > LOW_TH:
            mod = Modality.LIGHT_SAVING
        else:
            mod = Modality.NORMAL

        if self.modality is not mod:
            self.modality = mod
            log.info("Energy Modality changed to %d", int(mod))
            self.leds.set_color(mod)
            self._notify(ENERGY_MODALITY_PATH)

    def advance(self, prediction: Regressor) -> float:
        """Take the next reading, predict power with ``prediction`` and fire events.

        ``prediction`` maps the flattened buffer of quantised readings, newest
        first, to a predicted power. Until the buffer has filled the result is -1.
        Returns the prediction that was stored.
        """
        reading = self.readings.next_reading()
        self.soc = next_soc(self.soc, self.battery_setpoint)
        self.last_reading = (float(reading[0]), float(reading[1]))

        self.buffer.push(quantize_features(reading))
        self.reading_counter += 1
        if self.reading_counter < BUFFER_SIZE:
            self.prediction = -1.0
        else:
            self.prediction = float(prediction(self.buffer.flatten()))
        log.info("pred %.3f", self.prediction)

        log.info(
            "PREDICTION %d: %.3f LAST: {%.3f, %.3f}",
            self.power_version,
            self.prediction,
            *self.last_reading,
        )
        self._notify(POWER_PATH)
        log.info("SOC : %.3f", self.soc)
        self._notify(BATTERY_SOC_PATH)
        self.refresh_modality()
        return self.prediction