import math

import pytest

from smartfloor.coap import (
    LedColor,
    Leds,
    Response,
    Status,
    describe_reply,
    parse_float,
    query_variable,
)


def test_status_codes_follow_coap_numbering():
    changed = Response(Status.CHANGED, b"")
    bad = Response(Status.BAD_REQUEST, b"")
    missing = Response(Status.NOT_FOUND, b"")
    assert changed.status.dotted == "2.04"
    assert bad.status.dotted == "4.00"
    assert missing.status.dotted == "4.04"


def test_leds_light_one_colour():
    leds = Leds()
    leds.set_color(LedColor.YELLOW)
    assert leds.lit is LedColor.YELLOW
    leds.set_color(2)
    assert leds.lit is LedColor.RED


def test_leds_disable_turns_all_off():
    leds = Leds()
    leds.set_color(LedColor.GREEN)
    leds.set_color(-1)
    assert leds.lit is None


def test_leds_unknown_colour_turns_all_off():
    leds = Leds()
    leds.set_color(LedColor.GREEN)
    leds.set_color(7)
    assert leds.lit is None


def test_query_variable_finds_value():
    assert query_variable("on=1&setpoint=22.5", "setpoint") == "22.5"
    assert query_variable("on=1&setpoint=22.5", "on") == "1"


def test_query_variable_missing_or_prefix():
    assert query_variable("onx=1", "on") is None
    assert query_variable("", "on") is None
    assert query_variable(None, "on") is None
    assert query_variable("on", "on") is None


def test_query_variable_first_match_wins():
    assert query_variable("a=first&a=second", "a") == "first"


def test_parse_float_accepts_plain_numbers():
    assert parse_float("21.5") == 21.5
    assert parse_float("  -3") == -3.0
    assert parse_float("1e2") == 100.0


def test_parse_float_rounds_to_single_precision():
    value = parse_float("22.1")
    assert value != 22.1
    assert abs(value - 22.1) < 1e-5


def test_parse_float_special_values():
    assert parse_float("inf") == math.inf
    assert str(parse_float("nan")) == "nan"
    assert parse_float("1e60") == math.inf


@pytest.mark.parametrize("text", ["", "abc", "1.5x", "2 ", " ", "1,5"])
def test_parse_float_rejects_garbage(text):
    with pytest.raises(ValueError):
        parse_float(text)


def test_describe_reply_timeout():
    assert describe_reply(None) == "Request timed out"


def test_describe_reply_payload():
    response = Response(Status.CHANGED, "AC turned OFF".encode())
    assert describe_reply(response) == "AC turned OFF"