"""Building energy readings, state-of-charge simulation and feature quantisation."""

from __future__ import annotations

import itertools
import math
from collections import deque
from collections.abc import Iterable, Sequence

N_FEATURES = 2
N_SAMPLES = 20
BUFFER_SIZE = 5

INT16_MAX = 32767.0

DATA_MIN = (0.08806667, 0.0)
DATA_RANGE = (7.788, 0.78913333)

FAKE_READINGS: tuple[tuple[float, float], ...] = (
    (2.493, 0.10986667),
    (1.9274, 0.09073333),
    (3.17073333, 0.06773333),
    (1.99266667, 0.117),
    (1.78846667, 0.12013333),
    (4.7648, 0.27933333),
    (2.65353333, 0.1768),
    (2.28846667, 0.2246),
    (1.969, 0.22026667),
    (1.86273333, 0.3678),
    (1.53846667, 0.1946),
    (1.78306667, 0.14846667),
    (2.0638, 0.25626667),
    (2.12146667, 0.25853333),
    (2.4142, 0.102),
    (3.5566, 0.0752),
    (3.34366667, 0.0894),
    (3.3084, 0.09686667),
    (3.49106667, 0.20006667),
    (3.32246667, 0.1332),
)


class EnergyReadings:
    """Replays recorded energy samples in a loop."""

    def __init__(self, samples: Sequence[tuple[float, float]] = FAKE_READINGS) -> None:
        if not samples:
            raise ValueError("at least one sample is required")
        self._samples = itertools.cycle(tuple(samples))

    def next_reading(self) -> tuple[float, float]:
        return next(self._samples)


def next_soc(soc: float, battery_setpoint: float) -> float:
    """Move the state of charge one percent towards the battery setpoint's direction."""
    if battery_setpoint > 0.0 and soc <= 99.0:
        return soc + 1
    if battery_setpoint < 0.0 and soc >= 1.0:
        return soc - 1
    return soc


def quantize_feature(index: int, value: float) -> int:
    """Scale a feature to [-1, 1] using the training range and map it onto int16."""
    norm = (value - DATA_MIN[index]) / DATA_RANGE[index]
    norm = min(max(norm * 2.0 - 1.0, -1.0), 1.0)
    return math.trunc(norm * INT16_MAX)


def quantize_features(values: Iterable[float]) -> tuple[int, ...]:
    return tuple(quantize_feature(index, value) for index, value in enumerate(values))


class ReadingsBuffer:
    """The most recent quantised readings, newest first."""

    def __init__(self, size: int = BUFFER_SIZE, features: int = N_FEATURES) -> None:
        self._features = features
        self._readings: deque[tuple[int, ...]] = deque(
            [(0,) * features] * size, maxlen=size
        )

    def push(self, reading: Sequence[int]) -> None:
        if len(reading) != self._features:
            raise ValueError(f"expected {self._features} features, got {len(reading)}")
        self._readings.appendleft(tuple(reading))

    def flatten(self) -> tuple[int, ...]:
        return tuple(itertools.chain.from_iterable(self._readings))