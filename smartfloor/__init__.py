"""Simulated smart-building floor control with energy-aware modalities."""

__version__ = "0.1.0"

__all__ = ["actuators", "building", "coap", "energy", "floor", "webserver"]