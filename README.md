# smartfloor

A small, dependency-free model of an energy-aware smart building. It
simulates three cooperating parts:

- **Building router** (`smartfloor.building`): `BuildingRouter` keeps the
  battery state of charge, accepts battery setpoints, publishes the power
  prediction and derives an energy `Modality` (normal, light saving, heavy
  saving) from it, lighting a status LED to match.
- **Floor sensor** (`smartfloor.floor`): `SensorSimulator` produces
  temperature and light readings; `FloorController` accepts comfort targets,
  recomputes the AC and window setpoints (taking the current energy modality
  into account) and sends them to the actuators.
- **Floor actuators** (`smartfloor.actuators`): `post_ac_setpoint`,
  `post_window_setpoint` and the `ActuatorServer` router validate setpoint
  requests.

Supporting modules:

- `smartfloor.coap` – `Status` codes, the `Response` type, `query_variable`,
  `parse_float`, `describe_reply` and the `Leds` status-LED model.
- `smartfloor.energy` – `EnergyReadings` (sample readings replayed in a
  loop), `next_soc` battery stepping, `quantize_feature`/`quantize_features`
  and the rolling `ReadingsBuffer`.
- `smartfloor.webserver` – `format_ipv6`, `parse_request_path`,
  `render_routes` and `build_response` for a minimal HTTP status page listing
  neighbours, `Route`s and `RoutingLink`s.

## Installation

The package has no runtime dependencies and supports Python 3.10 and later.
Install it with your usual tool from a checkout of the project; the `test`
extra adds pytest.

## Examples

Recomputing the floor setpoints:

```python
from smartfloor.floor import clamp, update_temp_setpoint, update_window_setpoint

# Room at 22 °C, AC set to 21 °C, target 20 °C, normal modality:
update_temp_setpoint(22.0, 21.0, 20.0, 0)      # 20.5

# 200 lm measured, window cover at 50 %, 250 lm wanted:
update_window_setpoint(200.0, 50.0, 250.0)     # 45.0

clamp(150.0, 0.0, 100.0)                       # 100.0
```

Validating actuator requests:

```python
from smartfloor.actuators import post_ac_setpoint, post_window_setpoint

post_ac_setpoint("on=1&setpoint=21.50").text   # 'AC ON. Setpoint: 21.50°C'
post_ac_setpoint("on=1&setpoint=40").status    # Status.BAD_REQUEST
post_window_setpoint("setpoint=75").status     # Status.CHANGED
```

Working with the building router. `advance` takes the next energy reading
and calls the given function with the flattened buffer of quantised
readings (newest first) to get the predicted power; until the buffer holds
five readings the prediction is -1.

```python
from smartfloor.building import BuildingRouter, Modality

router = BuildingRouter()
router.post_battery_setpoint("setpoint=2.5")    # accepted, battery charging

for _ in range(5):
    router.advance(lambda features: 3.4)        # above 3 kW: heavy saving

router.modality is Modality.HEAVY_SAVING        # True
router.get_energy_modality().payload            # b'\x02'
router.get_power().text                         # JSON with prediction and last reading
router.toggle_modality()                        # button press: disable the modality
```

Compact IPv6 formatting and the status page:

```python
from smartfloor.webserver import build_response, format_ipv6

format_ipv6("fe80::203:3:3:3")                  # 'fe80::203:3:3:3'
build_response(b"GET / HTTP/1.0\r\n", ["fe80::1"], [], [])
```

`parse_request_path` and `build_response` raise `ValueError` for anything
other than a `GET` of an absolute path.

## What the package does not do

- There is no network transport. The resources are plain methods and
  functions that take a query string and return a `Response`; nothing listens
  on a UDP or TCP socket, and observers are reached only through the
  `notify` callback you pass in.
- There is no trained power model. `BuildingRouter.advance` needs the
  regression function to be supplied by the caller.
- The web status page is only rendered: the neighbour, route and link lists
  must be given to it, as there is no routing stack to read them from.
- There is no command-line program and no timer loop; call
  `BuildingRouter.advance` and `FloorController.step` at whatever interval
  suits you.

## Running the tests

Install the `test` extra and run pytest from the project root.