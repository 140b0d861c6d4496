import pytest

from smartfloor.actuators import (
    ActuatorServer,
    post_ac_setpoint,
    post_window_setpoint,
)
from smartfloor.coap import Status


def test_ac_off():
    response = post_ac_setpoint("on=0")
    assert response.status is Status.CHANGED
    assert response.text == "AC turned OFF"


def test_ac_missing_on():
    response = post_ac_setpoint("setpoint=20")
    assert response.status is Status.BAD_REQUEST
    assert response.text == "Missing 'on' parameter"


@pytest.mark.parametrize("on", ["2", "11", "yes"])
def test_ac_invalid_on(on):
    response = post_ac_setpoint(f"on={on}&setpoint=20")
    assert response.status is Status.BAD_REQUEST
    assert response.text == "Invalid 'on' value: must be 0 or 1"


def test_ac_on_without_setpoint():
    response = post_ac_setpoint("on=1")
    assert response.status is Status.BAD_REQUEST
    assert response.text == "Missing 'setpoint' parameter"


def test_ac_on_with_setpoint():
    response = post_ac_setpoint("on=1&setpoint=22")
    assert response.status is Status.CHANGED
    assert response.text == "AC ON. Setpoint: 22.00°C"


@pytest.mark.parametrize("value", ["16", "30"])
def test_ac_accepts_bounds(value):
    assert post_ac_setpoint(f"on=1&setpoint={value}").status is Status.CHANGED


@pytest.mark.parametrize("value", ["15.9", "30.1", "warm", "20x"])
def test_ac_rejects_bad_setpoint(value):
    response = post_ac_setpoint(f"on=1&setpoint={value}")
    assert response.status is Status.BAD_REQUEST
    assert response.text == "Invalid setpoint: must be 16.0–30.0"


def test_window_updates():
    response = post_window_setpoint("setpoint=50")
    assert response.status is Status.CHANGED
    assert response.text == "Window setpoint updated to 50.00%"


def test_window_not_a_float():
    response = post_window_setpoint("setpoint=open")
    assert response.status is Status.BAD_REQUEST
    assert response.text == "Invalid input: not a float"


def test_window_out_of_range():
    response = post_window_setpoint("setpoint=150")
    assert response.status is Status.BAD_REQUEST
    assert response.text.startswith("Invalid value: 150.00")


def test_window_missing_setpoint():
    for query in (None, "", "setpoint="):
        response = post_window_setpoint(query)
        assert response.status is Status.BAD_REQUEST
        assert response.text == "Missing 'setpoint' parameter"


def test_server_routes_paths():
    server = ActuatorServer()
    assert server.handle("AC/setpoint", "on=0").text == "AC turned OFF"
    assert server.handle("/Window/setpoint", "setpoint=10").status is Status.CHANGED


def test_server_unknown_path():
    response = ActuatorServer().handle("Door/setpoint", "setpoint=1")
    assert response.status is Status.NOT_FOUND
    assert response.payload == b""