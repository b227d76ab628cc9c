"""Stateful linear elements advanced in discrete time steps.

PT1Element
    First-order lag, ``tau * dy/dt + y = gain * u``
PT2Element
    Second-order lag, ``T**2 * y'' + 2*D*T * y' + y = gain * u``
DeadTimeElement
    Pure transport delay of the scaled input

Each ``step(input, dt)`` holds ``input`` constant over the step. The
lag elements use forward Euler unless ``method="rk4"`` is given. The
step size is the caller's responsibility: explicit Euler overshoots once
``dt`` exceeds the time constant and diverges beyond twice it. This is
logged but not prevented. A non-positive ``dt`` raises InvalidTimeStep
before any state changes.
"""

import logging
from collections import deque

import numpy as np

from controlbox.exceptions import (
    check_time_step,
    require_non_negative,
    require_positive,
)
from controlbox.integrators import make_integrator

logger = logging.getLogger(__name__)

# Relative slack when comparing sample times against the dead-time horizon
CLOCK_TOLERANCE = 1e-9


def _pt1_dynamics(t, x, u, p):
    return (p["gain"] * u - x) / p["time_constant"]


def _pt2_dynamics(t, x, u, p):
    T = p["time_constant"]
    y, dy = x[0], x[1]
    ddy = (p["gain"] * u - y - 2 * p["damping"] * T * dy) / T**2
    return np.array([dy, ddy])


class PT1Element:
    """First-order lag element.

    With the default forward Euler method each step computes::

        y_new = y_old + dt / tau * (gain * u - y_old)

    Parameters
    ----------
    time_constant : float
        Time constant tau, must be > 0
    gain : float, optional
        Static gain, by default 1.0
    initial_output : float, optional
        Output before the first step, by default 0.0
    method : {'euler', 'rk4'}, optional
        Integration method, by default 'euler'

    Raises
    ------
    InvalidParameter
        If ``time_constant <= 0`` or ``method`` is unknown.

    Examples
    --------
    >>> pt1 = PT1Element(time_constant=1.0, gain=2.0)
    >>> pt1.step(1.0, dt=0.5)
    1.0
    >>> pt1.current_output
    1.0
    """

    def __init__(
        self,
        time_constant: float,
        gain: float = 1.0,
        initial_output: float = 0.0,
        method: str = "euler",
    ):
        self.time_constant = require_positive("time_constant", time_constant)
        self.gain = float(gain)
        self.initial_output = float(initial_output)
        self.method = method
        self._integrator = make_integrator(method, _pt1_dynamics)
        self._params = {"time_constant": self.time_constant, "gain": self.gain}
        self._warned_large_dt = False
        self.current_output = self.initial_output
        logger.debug("Created %r", self)

    def step(self, input: float, dt: float) -> float:
        """Advance by ``dt`` and return the new output."""
        dt = check_time_step(dt)
        if dt > self.time_constant and not self._warned_large_dt:
            logger.warning(
                "PT1 step dt=%g exceeds time_constant=%g; "
                "explicit integration will overshoot",
                dt,
                self.time_constant,
            )
            self._warned_large_dt = True
        self.current_output = float(
            self._integrator(0.0, self.current_output, dt, input, self._params)
        )
        return self.current_output

    def reset(self):
        """Restore the initial output."""
        self.current_output = self.initial_output

    def __repr__(self):
        return (
            f"PT1Element(time_constant={self.time_constant}, "
            f"gain={self.gain}, method='{self.method}')"
        )


class PT2Element:
    """Second-order lag element.

    The state ``[y, dy/dt]`` is integrated with the chosen method. The
    response is oscillatory for ``damping < 1``, critically damped at 1
    and overdamped above.

    Parameters
    ----------
    time_constant : float
        Time constant T (inverse natural frequency), must be > 0
    damping : float, optional
        Damping ratio D, must be >= 0, by default 1.0
    gain : float, optional
        Static gain, by default 1.0
    initial_output : float, optional
        Output before the first step, by default 0.0
    method : {'euler', 'rk4'}, optional
        Integration method, by default 'euler'
    """

    def __init__(
        self,
        time_constant: float,
        damping: float = 1.0,
        gain: float = 1.0,
        initial_output: float = 0.0,
        method: str = "euler",
    ):
        self.time_constant = require_positive("time_constant", time_constant)
        self.damping = require_non_negative("damping", damping)
        self.gain = float(gain)
        self.initial_output = float(initial_output)
        self.method = method
        self._integrator = make_integrator(method, _pt2_dynamics)
        self._params = {
            "time_constant": self.time_constant,
            "damping": self.damping,
            "gain": self.gain,
        }
        self._warned_large_dt = False
        self.reset()
        logger.debug("Created %r", self)

    @property
    def current_output(self) -> float:
        return float(self._state[0])

    @property
    def current_rate(self) -> float:
        """Time derivative of the output."""
        return float(self._state[1])

    def step(self, input: float, dt: float) -> float:
        """Advance by ``dt`` and return the new output."""
        dt = check_time_step(dt)
        if dt > self.time_constant and not self._warned_large_dt:
            logger.warning(
                "PT2 step dt=%g exceeds time_constant=%g; "
                "explicit integration will overshoot",
                dt,
                self.time_constant,
            )
            self._warned_large_dt = True
        self._state = self._integrator(0.0, self._state, dt, input, self._params)
        return self.current_output

    def reset(self):
        """Restore the initial output with zero rate."""
        self._state = np.array([self.initial_output, 0.0])

    def __repr__(self):
        return (
            f"PT2Element(time_constant={self.time_constant}, "
            f"damping={self.damping}, gain={self.gain}, "
            f"method='{self.method}')"
        )


class DeadTimeElement:
    """Transport delay of ``gain * input`` by ``dead_time``.

    The element keeps its own clock, advanced by ``dt`` on every step.
    Each step records ``gain * input`` at the new clock value. The output
    is the latest recorded value that is at least ``dead_time`` old, or
    ``initial_output`` while no such value exists.

    Parameters
    ----------
    dead_time : float
        Delay, must be >= 0
    gain : float, optional
        Static gain, by default 1.0
    initial_output : float, optional
        Output until the first delayed value arrives, by default 0.0

    Examples
    --------
    >>> delay = DeadTimeElement(dead_time=2.0)
    >>> [delay.step(u, dt=1.0) for u in (1.0, 2.0, 3.0, 4.0)]
    [0.0, 0.0, 1.0, 2.0]
    """

    def __init__(
        self, dead_time: float, gain: float = 1.0, initial_output: float = 0.0
    ):
        self.dead_time = require_non_negative("dead_time", dead_time)
        self.gain = float(gain)
        self.initial_output = float(initial_output)
        self.reset()
        logger.debug("Created %r", self)

    def step(self, input: float, dt: float) -> float:
        """Advance by ``dt`` and return the delayed output."""
        dt = check_time_step(dt)
        self._clock += dt
        self._buffer.append((self._clock, self.gain * input))

        # Pop every sample old enough to be released; the last one wins.
        # The clock is a running sum of dt, so allow for its rounding.
        horizon = self._clock - self.dead_time
        horizon += CLOCK_TOLERANCE * max(1.0, abs(self._clock))
        while self._buffer and self._buffer[0][0] <= horizon:
            _, self.current_output = self._buffer.popleft()
        return self.current_output

    def reset(self):
        """Clear the delay line and restore the initial output."""
        self._clock = 0.0
        self._buffer = deque()
        self.current_output = self.initial_output

    def __repr__(self):
        return f"DeadTimeElement(dead_time={self.dead_time}, gain={self.gain})"
