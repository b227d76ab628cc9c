"""Tests for controlbox.sampling module."""

import numpy as np
import pandas as pd
import pytest

from controlbox import (
    InvalidParameter,
    NoiseSignal,
    PT1Element,
    StepSignal,
    sample,
    time_range,
)
from controlbox.sampling import DEFAULT_SAMPLES


def test_time_range_dt():
    """Test fixed-step grid includes both end points."""
    t = time_range(0.0, 1.0, dt=0.25)
    np.testing.assert_allclose(t, [0.0, 0.25, 0.5, 0.75, 1.0])


def test_time_range_dt_rounding():
    """Test the end point survives float rounding of the step."""
    t = time_range(0.0, 5.0, dt=0.01)
    assert len(t) == 501
    assert t[-1] == pytest.approx(5.0)


def test_time_range_dt_not_dividing_range():
    """Test the grid never goes past the end point."""
    t = time_range(0.0, 1.0, dt=0.6)
    np.testing.assert_allclose(t, [0.0, 0.6])

    t = time_range(0.0, 1.0, dt=0.3)
    np.testing.assert_allclose(t, [0.0, 0.3, 0.6, 0.9])
    assert t[-1] <= 1.0


def test_time_range_n_samples():
    """Test grid by number of samples, including the default."""
    t = time_range(-5.0, 15.0, n_samples=10)
    assert len(t) == 10
    assert t[0] == -5.0
    assert t[-1] == 15.0

    assert len(time_range(0.0, 100.0)) == DEFAULT_SAMPLES


@pytest.mark.parametrize(
    "args, kwargs",
    [
        ((5.0, 1.0), {}),
        ((0.0, 1.0), {"dt": 0.0}),
        ((0.0, 1.0), {"dt": -0.1}),
        ((0.0, 1.0), {"dt": 2.0}),
        ((0.0, 1.0), {"n_samples": 1}),
        ((0.0, 1.0), {"dt": 0.1, "n_samples": 10}),
    ],
)
def test_time_range_invalid(args, kwargs):
    """Test invalid grid definitions are rejected."""
    with pytest.raises(InvalidParameter):
        time_range(*args, **kwargs)


def test_sample_step():
    """Test sampling returns a time-indexed Series."""
    s = sample(StepSignal(amplitude=2.0, onset_time=1.0), [0.0, 0.5, 1.0, 2.0])

    assert isinstance(s, pd.Series)
    assert s.index.name == "time"
    assert s.name == "StepSignal"
    assert s.tolist() == [0.0, 0.0, 2.0, 2.0]
    assert s.loc[1.0] == 2.0


def test_sample_name():
    """Test a custom series name."""
    s = sample(StepSignal(1.0), time_range(0.0, 1.0, n_samples=3), name="u")
    assert s.name == "u"


def test_sample_noise_follows_call_order():
    """Test noise samples follow the order of the time points."""
    times = time_range(0.0, 1.0, n_samples=5)
    forward = sample(NoiseSignal(1.0, seed=9), times)
    backward = sample(NoiseSignal(1.0, seed=9), times[::-1])

    np.testing.assert_array_equal(forward.values, backward.values)
    assert list(backward.index) == list(times[::-1])


def test_sample_drives_pt1():
    """Test a sampled step fed through a PT1 element."""
    dt = 0.01
    times = time_range(0.0, 5.0, dt=dt)
    u = sample(StepSignal(amplitude=1.0, onset_time=0.0), times)

    pt1 = PT1Element(time_constant=1.0, gain=2.0)
    y = [pt1.step(value, dt) for value in u.values[:-1]]

    assert y[-1] == pytest.approx(2.0, rel=0.01)
