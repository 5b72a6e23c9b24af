# cn105

Building blocks for talking to Mitsubishi heat pumps over the CN105 serial
connector. The package can:

- build and checksum the packets sent to the indoor unit: connect, info
  requests, settings, remote temperature, and reading or writing the installer
  function codes;
- assemble reply frames from the incoming bytes one at a time and check their
  checksums;
- decode settings, room temperature, operating status and standby/sub-mode
  replies;
- turn user requests (mode, setpoint, fan, swing) into wanted settings, and
  turn received settings back into climate state;
- time polling cycles and run named timeouts;
- hold sensor, select, button and number entities that the state is published to.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `cn105.protocol` – the byte maps (power, mode, temperature, fan, vane, wide
  vane, room temperature, stage, sub-mode, auto sub-mode), packet headers,
  request indices such as `RQST_PKT_SETTINGS`, and the records
  `HeatpumpSettings`, `WantedSettings`, `HeatpumpTimers` and `HeatpumpStatus`.
- `cn105.functions` – `HeatpumpFunctions`, the 30 function bytes read in two
  parts (`set_data1`, `set_data2`), with `get_value`, `set_value` for codes
  101–128 and `all_codes`.
- `cn105.cycle` – `CycleManager` (cycle start/end, update interval,
  timeout, deferral after a write), `Scheduler` (named one-shot timeouts
  run by `run_due`) and `monotonic_ms()`. Both classes take a clock
  function, so they can be driven by a fake clock.
- `cn105.util` – `lookup_index`, `lookup_value`, `has_changed`,
  `is_wanted_setting_applied`, `packet_hex`, `format_settings`,
  `format_status`, `fahrenheit_to_celsius` and `celsius_to_fahrenheit`.
- `cn105.entities` – `Sensor`, `TextSensor`, `BinarySensor`, the
  compressor frequency, input power, kWh, runtime hours and outside air
  temperature sensors, `VaneOrientationSelect`, `FunctionsButton`,
  `FunctionsNumber` and `UptimeConnectionSensor`.
- `cn105.frames` – `checksum`, `Frame`, `FrameParser`, and the packet
  builders `connect_packet`, `info_packet`, `set_packet`,
  `settings_packet`, `remote_temperature_packet`,
  `functions_request_packet` and `functions_set_packets`. Builders raise
  `ValueError` for unknown settings or incomplete function data.
- `cn105.decode` – `decode_settings` (returns a `SettingsReading`),
  `decode_room_temperature`, `decode_status` and `decode_standby`
  (returns a `StandbyReading`).
- `cn105.controls` – the `ClimateMode`, `ClimateAction`, `FanMode` and
  `SwingMode` enums, `ClimateTraits`, `ClimateCall`, and `ClimateControls`,
  which holds the climate state and the wanted and current settings.

## Example

Turn a user request into a settings packet:

```python
from cn105.controls import ClimateCall, ClimateControls, ClimateMode, FanMode
from cn105.frames import settings_packet

controls = ClimateControls()
controls.control(ClimateCall(mode=ClimateMode.COOL, target_temperature=22, fan_mode=FanMode.LOW))

packet = settings_packet(
    controls.wanted_settings,
    temp_mode=controls.temp_mode,
    wide_vane_adj=controls.wide_vane_adj,
)
```

Parse a reply and apply the received settings:

```python
from cn105.decode import decode_settings
from cn105.frames import FrameParser, info_packet

request = info_packet(0)            # ask for the settings
parser = FrameParser()
for frame in parser.feed_bytes(received_bytes):
    if frame.valid() and frame.command == 0x62 and frame.data[0] == 0x02:
        reading = decode_settings(frame.data)
        controls.temp_mode = reading.temp_mode
        controls.check_power_and_mode_settings(reading.settings)
        controls.check_fan_settings(reading.settings)
        controls.check_vane_settings(reading.settings)
        controls.update_action()
        controls.publish_state()
```

## What the package does not do

There is no serial port handling: the package neither opens a port nor reads
or writes bytes. The caller passes the bytes it received to `FrameParser` and
sends the packets the builders return.

There is also no ready-made component that runs the conversation by itself.
Nothing here sends the connect packet, walks the request sequence (settings,
room temperature, status, standby) on each update interval, watches for lost
connections, or sends wanted settings once they have settled; the caller uses
`CycleManager`, `Scheduler` and `ClimateControls` to do that. The package has
no command-line tool.