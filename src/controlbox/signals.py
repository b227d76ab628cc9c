"""Time-domain signal generators.

Every signal provides ``value_at(time)`` and can also be called directly,
so ``sig(t)`` is the same as ``sig.value_at(t)``.

Notes
-----
StepSignal, ImpulseSignal and SuperpositionSignal (of deterministic
children) are pure functions of time. NoiseSignal is the exception: its
draws are indexed by call count, not by time (see its docstring).
"""

import logging
import numbers
from typing import Iterable, Iterator

import numpy as np

from controlbox.core import Signal
from controlbox.exceptions import InvalidParameter, require_non_negative

logger = logging.getLogger(__name__)

DEFAULT_IMPULSE_TOLERANCE = 1e-9


class StepSignal:
    """Step from a resting level to ``offset + amplitude`` at onset.

    Parameters
    ----------
    amplitude : float
        Height of the step
    onset_time : float, optional
        Time at which the step occurs, by default 0.0
    offset : float, optional
        Resting level before the step, by default 0.0

    Examples
    --------
    >>> u = StepSignal(amplitude=2.0, onset_time=1.0)
    >>> u.value_at(0.5)
    0.0
    >>> u.value_at(1.0)
    2.0
    """

    def __init__(
        self, amplitude: float, onset_time: float = 0.0, offset: float = 0.0
    ):
        self.amplitude = float(amplitude)
        self.onset_time = float(onset_time)
        self.offset = float(offset)

    def value_at(self, time: float) -> float:
        """Return value at time t."""
        if time >= self.onset_time:
            return self.offset + self.amplitude
        return self.offset

    __call__ = value_at

    def __repr__(self):
        return (
            f"StepSignal(amplitude={self.amplitude}, "
            f"onset_time={self.onset_time}, offset={self.offset})"
        )


class ImpulseSignal:
    """Impulse or rectangular pulse around a given time.

    Exact floating-point time matches are fragile, so containment is
    tested against a tolerance window:

    - ``width == 0``: active when ``abs(t - time) <= tolerance``
    - ``width > 0``: active when
      ``time - tolerance <= t <= time + width + tolerance``

    Parameters
    ----------
    amplitude : float
        Height of the impulse above the resting level
    time : float
        Time of the impulse (start of the pulse when ``width > 0``)
    width : float, optional
        Pulse duration, by default 0.0 (idealised impulse)
    tolerance : float, optional
        Half-width of the containment window, by default 1e-9
    offset : float, optional
        Resting level outside the impulse, by default 0.0

    Raises
    ------
    InvalidParameter
        If ``width`` or ``tolerance`` is negative.

    Examples
    --------
    >>> u = ImpulseSignal(amplitude=3.0, time=2.0)
    >>> u.value_at(2.0)
    3.0
    >>> u.value_at(2.1)
    0.0
    >>> pulse = ImpulseSignal(amplitude=1.0, time=0.0, width=1.0)
    >>> pulse.value_at(0.5)
    1.0
    """

    def __init__(
        self,
        amplitude: float,
        time: float,
        width: float = 0.0,
        tolerance: float = DEFAULT_IMPULSE_TOLERANCE,
        offset: float = 0.0,
    ):
        self.amplitude = float(amplitude)
        self.time = float(time)
        self.width = require_non_negative("width", width)
        self.tolerance = require_non_negative("tolerance", tolerance)
        self.offset = float(offset)

    def value_at(self, time: float) -> float:
        """Return value at time t."""
        start = self.time - self.tolerance
        end = self.time + self.width + self.tolerance
        if start <= time <= end:
            return self.offset + self.amplitude
        return self.offset

    __call__ = value_at

    def __repr__(self):
        return (
            f"ImpulseSignal(amplitude={self.amplitude}, time={self.time}, "
            f"width={self.width}, offset={self.offset})"
        )


class NoiseSignal:
    """Seeded random noise.

    Draws are indexed by call count, not by time: the n-th call to
    ``value_at`` returns the n-th draw of a ``numpy.random.Generator``
    seeded with ``seed``, whatever time is passed. Two instances created
    with the same arguments produce identical sequences, and ``reset()``
    replays the sequence from the start.

    Parameters
    ----------
    amplitude : float
        Scale of the noise. Uniform draws lie in
        ``[-amplitude, amplitude]``; normal draws have standard deviation
        ``abs(amplitude)``.
    seed : int
        Non-negative seed for the generator
    distribution : {'uniform', 'normal'}, optional
        Distribution to draw from, by default 'uniform'

    Raises
    ------
    InvalidParameter
        If ``seed`` is not a non-negative integer or ``distribution`` is
        unknown.
    """

    DISTRIBUTIONS = ("uniform", "normal")

    def __init__(self, amplitude: float, seed: int, distribution: str = "uniform"):
        if isinstance(seed, bool) or not isinstance(seed, numbers.Integral):
            raise InvalidParameter(f"seed must be an integer, got {seed!r}")
        if seed < 0:
            raise InvalidParameter(f"seed must be >= 0, got {seed!r}")
        if distribution not in self.DISTRIBUTIONS:
            raise InvalidParameter(
                f"distribution must be one of {self.DISTRIBUTIONS}, "
                f"got {distribution!r}"
            )
        self.amplitude = float(amplitude)
        self.seed = int(seed)
        self.distribution = distribution
        self.reset()

    def reset(self):
        """Rewind the draw sequence to its first value."""
        self._rng = np.random.default_rng(self.seed)
        self.n_draws = 0

    def value_at(self, time: float) -> float:
        """Return the next draw; ``time`` does not affect the value."""
        if self.distribution == "uniform":
            draw = self._rng.uniform(-1.0, 1.0)
        else:
            draw = self._rng.standard_normal()
        self.n_draws += 1
        return self.amplitude * float(draw)

    __call__ = value_at

    def __repr__(self):
        return (
            f"NoiseSignal(amplitude={self.amplitude}, seed={self.seed}, "
            f"distribution='{self.distribution}')"
        )


class SuperpositionSignal:
    """Sum of other signals evaluated at the same time.

    Parameters
    ----------
    signals : iterable of Signal, optional
        Child signals, in order. An empty superposition is always 0.

    Examples
    --------
    >>> u = SuperpositionSignal([StepSignal(1.0), StepSignal(1.0)])
    >>> u.value_at(5.0)
    2.0
    >>> SuperpositionSignal().value_at(5.0)
    0.0
    """

    def __init__(self, signals: Iterable[Signal] = ()):
        self.signals = tuple(signals)
        logger.debug("Superposition of %d signals", len(self.signals))

    def value_at(self, time: float) -> float:
        """Return the sum of the children's values at time t."""
        return float(sum((sig.value_at(time) for sig in self.signals), 0.0))

    __call__ = value_at

    def __len__(self) -> int:
        return len(self.signals)

    def __iter__(self) -> Iterator[Signal]:
        return iter(self.signals)

    def __repr__(self):
        return f"SuperpositionSignal(n_signals={len(self.signals)})"
