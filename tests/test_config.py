"""Tests for controlbox.config module."""

import pytest

from controlbox import (
    BranchHysteresisElement,
    Direction,
    HysteresisElement,
    ImpulseSignal,
    InvalidParameter,
    NoiseSignal,
    PT1Element,
    StepSignal,
    SuperpositionSignal,
)
from controlbox.config import (
    load_spec,
    parse_element_spec,
    parse_signal_spec,
    to_seconds,
)

SPEC_YAML = """\
signals:
  setpoint:
    StepSignal:
      amplitude: 1.0
      onset_time: {value: 20, units: ms}
  disturbance:
    SuperpositionSignal:
      signals:
        - NoiseSignal: {amplitude: 0.05, seed: 42}
        - ImpulseSignal: {amplitude: 0.5, time: 0.1}
elements:
  plant:
    PT1Element:
      time_constant: {value: 150, units: ms}
      gain: 2.0
  relay:
    BranchHysteresisElement:
      lower_branch: {slope: 0.0, offset: 0.0}
      upper_branch: {slope: 0.0, offset: 1.0}
      lower: -0.5
      upper: 0.5
      direction: rising
"""


@pytest.mark.parametrize(
    "value, units, expected",
    [(20, "ms", 0.02), (1.5, None, 1.5), (2, "min", 120.0), (1, "hour", 3600.0)],
)
def test_to_seconds(value, units, expected):
    """Test time conversion to seconds."""
    assert to_seconds(value, units) == pytest.approx(expected)


@pytest.mark.parametrize("units", ["m", "furlongs_per_fortnight_xyz", 5])
def test_to_seconds_invalid(units):
    """Test non-time, unknown or non-string units are rejected."""
    with pytest.raises(InvalidParameter):
        to_seconds(1.0, units)


def test_parse_signal_spec_step():
    """Test building a step signal with a time in milliseconds."""
    sig = parse_signal_spec(
        {"StepSignal": {"amplitude": 2.0, "onset_time": {"value": 500, "units": "ms"}}}
    )

    assert isinstance(sig, StepSignal)
    assert sig.onset_time == pytest.approx(0.5)
    assert sig.value_at(0.49) == 0.0
    assert sig.value_at(0.5) == 2.0


def test_parse_signal_spec_superposition():
    """Test nested superposition specifications."""
    sig = parse_signal_spec(
        {
            "SuperpositionSignal": {
                "signals": [
                    {"StepSignal": {"amplitude": 1.0}},
                    {"StepSignal": {"amplitude": 1.0}},
                ]
            }
        }
    )

    assert isinstance(sig, SuperpositionSignal)
    assert sig.value_at(5.0) == 2.0


def test_parse_signal_spec_empty_superposition():
    """Test a superposition without children."""
    sig = parse_signal_spec({"SuperpositionSignal": None})
    assert sig.value_at(0.0) == 0.0


@pytest.mark.parametrize(
    "spec",
    [
        {"SawtoothSignal": {}},
        {"StepSignal": {"amplitude": 1.0}, "NoiseSignal": {"seed": 1}},
        {"StepSignal": {"height": 1.0}},
        {"ImpulseSignal": {"amplitude": 1.0, "time": 0.0, "width": -1}},
        {"StepSignal": {"amplitude": 1.0, "onset_time": {"units": "s"}}},
        {"StepSignal": 2.0},
        {"SuperpositionSignal": [{"StepSignal": {"amplitude": 1.0}}]},
        [],
    ],
)
def test_parse_signal_spec_invalid(spec):
    """Test invalid signal specifications are rejected."""
    with pytest.raises(InvalidParameter):
        parse_signal_spec(spec)


def test_parse_element_spec():
    """Test building elements from specifications."""
    pt1 = parse_element_spec(
        {"PT1Element": {"time_constant": {"value": 2, "units": "s"}, "gain": 3.0}}
    )
    assert isinstance(pt1, PT1Element)
    assert pt1.time_constant == 2.0

    h = parse_element_spec({"HysteresisElement": {"band_width": 2.0}})
    assert isinstance(h, HysteresisElement)


@pytest.mark.parametrize(
    "spec",
    [
        {"PT3Element": {}},
        {"PT1Element": {"time_constant": 0}},
        {"HysteresisElement": {"band_width": -1}},
        {"DeadTimeElement": "1 s"},
        {"PT1Element": {"time_constant": {"value": 1, "units": "kg"}}},
        {
            "BranchHysteresisElement": {
                "lower_branch": {"slope": 1.0},
                "upper_branch": {"slope": 1.0, "offset": 1.0},
                "lower": 0.0,
                "upper": 1.0,
                "direction": "sideways",
            }
        },
        {
            "BranchHysteresisElement": {
                "lower_branch": {"gradient": 1.0},
                "upper_branch": {"slope": 1.0},
                "lower": 0.0,
                "upper": 1.0,
            }
        },
    ],
)
def test_parse_element_spec_invalid(spec):
    """Test invalid element specifications are rejected."""
    with pytest.raises(InvalidParameter):
        parse_element_spec(spec)


def test_load_spec(tmp_path):
    """Test loading signals and elements from a YAML file."""
    path = tmp_path / "spec.yaml"
    path.write_text(SPEC_YAML)

    loaded = load_spec(path)
    signals, elements = loaded["signals"], loaded["elements"]

    assert set(signals) == {"setpoint", "disturbance"}
    assert signals["setpoint"].onset_time == pytest.approx(0.02)
    children = signals["disturbance"].signals
    assert isinstance(children[0], NoiseSignal)
    assert isinstance(children[1], ImpulseSignal)

    plant = elements["plant"]
    assert isinstance(plant, PT1Element)
    assert plant.time_constant == pytest.approx(0.15)
    assert plant.gain == 2.0

    relay = elements["relay"]
    assert isinstance(relay, BranchHysteresisElement)
    assert relay.direction is Direction.RISING
    assert relay.step(0.0) == 1.0


def test_load_spec_reproducible_noise(tmp_path):
    """Test two loads of the same file give the same noise sequence."""
    path = tmp_path / "spec.yaml"
    path.write_text(SPEC_YAML)

    a = load_spec(path)["signals"]["disturbance"]
    b = load_spec(path)["signals"]["disturbance"]
    assert [a(t) for t in range(5)] == [b(t) for t in range(5)]


def test_load_spec_missing_sections(tmp_path):
    """Test a file without signals or elements is rejected."""
    path = tmp_path / "empty.yaml"
    path.write_text("simulation: {dt: 0.01}\n")

    with pytest.raises(InvalidParameter, match="missing required section"):
        load_spec(path)


def test_load_spec_not_a_mapping(tmp_path):
    """Test a YAML file whose top level is a list is rejected."""
    path = tmp_path / "list.yaml"
    path.write_text("- StepSignal: {amplitude: 1.0}\n")

    with pytest.raises(InvalidParameter, match="mapping"):
        load_spec(path)
