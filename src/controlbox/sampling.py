"""Time grids and signal sampling."""

from typing import Optional, Union

import numpy as np
import pandas as pd

from controlbox.core import Signal
from controlbox.exceptions import InvalidParameter, require_positive

DEFAULT_SAMPLES = 100
END_TOLERANCE = 1e-9


def time_range(
    start: float,
    end: float,
    dt: Optional[float] = None,
    n_samples: Optional[int] = None,
) -> np.ndarray:
    """Evenly spaced time points from ``start`` to ``end`` inclusive.

    Parameters
    ----------
    start, end : float
        First and last time points, ``start <= end``
    dt : float, optional
        Fixed spacing. Cannot be combined with ``n_samples``. If ``dt``
        does not divide ``end - start`` the grid stops at the last point
        before ``end``.
    n_samples : int, optional
        Number of points. Used when ``dt`` is not given, defaulting to
        ``DEFAULT_SAMPLES``.

    Returns
    -------
    times : ndarray
        1-D array of time points

    Raises
    ------
    InvalidParameter
        If ``end < start``, both ``dt`` and ``n_samples`` are given,
        ``dt <= 0``, ``dt > end - start`` or ``n_samples < 2``.

    Examples
    --------
    >>> time_range(0.0, 1.0, dt=0.25)
    array([0.  , 0.25, 0.5 , 0.75, 1.  ])
    >>> len(time_range(-5.0, 15.0, n_samples=10))
    10
    """
    if not start <= end:
        raise InvalidParameter(f"start {start!r} must not exceed end {end!r}")
    if dt is not None and n_samples is not None:
        raise InvalidParameter("Cannot provide both dt and n_samples")

    if dt is not None:
        dt = require_positive("dt", dt)
        if dt > end - start:
            raise InvalidParameter(
                f"dt={dt} is larger than the range {end - start}"
            )
        # Half-step margin so float rounding keeps the end point, then
        # drop the extra point when dt does not divide the range
        t = np.arange(start, end + dt / 2, dt)
        return t[t <= end + END_TOLERANCE * max(1.0, abs(end))]

    if n_samples is None:
        n_samples = DEFAULT_SAMPLES
    if n_samples < 2:
        raise InvalidParameter(f"n_samples must be >= 2, got {n_samples!r}")
    return np.linspace(start, end, int(n_samples))


def sample(
    signal: Signal,
    times: Union[list, np.ndarray],
    name: Optional[str] = None,
) -> pd.Series:
    """Evaluate a signal at each time point.

    Times are visited in the order given, which matters for signals
    with call-indexed draws such as NoiseSignal.

    Parameters
    ----------
    signal : Signal
        Signal to evaluate
    times : array-like
        Time points
    name : str, optional
        Series name, by default the signal's class name

    Returns
    -------
    values : pandas.Series
        Signal values indexed by time (index name ``"time"``)

    Examples
    --------
    >>> from controlbox.signals import StepSignal
    >>> s = sample(StepSignal(1.0, onset_time=1.0), [0.0, 1.0, 2.0])
    >>> s.tolist()
    [0.0, 1.0, 1.0]
    """
    t_vec = np.asarray(times, dtype=float)
    values = np.array([signal.value_at(t) for t in t_vec], dtype=float)
    if name is None:
        name = type(signal).__name__
    return pd.Series(values, index=pd.Index(t_vec, name="time"), name=name)
