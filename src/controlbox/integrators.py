"""Fixed-step integrators used by the stateful elements.

Each integrator wraps a dynamics function ``f(t, x, u, p) -> xdot`` and
advances the state ``x`` from ``t`` to ``t + dt`` with the input ``u``
held constant over the step. States may be plain floats or NumPy arrays.
"""

from typing import Any, Callable

from controlbox.exceptions import InvalidParameter


class ForwardEuler:
    """Explicit (forward) Euler integrator.

    One derivative evaluation per step; O(1) cost and no iteration. The
    result drifts from the continuous response when ``dt`` is large
    relative to the system's time constants.

    Parameters
    ----------
    dynamics_func : callable
        Function f(t, x, u, p) -> xdot that computes state derivatives

    Examples
    --------
    >>> def dynamics(t, x, u, p):
    ...     return (u - x) / p["time_constant"]
    >>> integrator = ForwardEuler(dynamics)
    >>> integrator(t=0.0, x=0.0, dt=0.1, u=1.0, p={"time_constant": 1.0})
    0.1
    """

    def __init__(self, dynamics_func: Callable):
        self.dynamics = dynamics_func

    def __call__(self, t: float, x: Any, dt: float, u: Any, p: Any) -> Any:
        """Integrate from t to t+dt using forward Euler."""
        dx = self.dynamics(t, x, u, p)
        return x + dt * dx

    def __repr__(self):
        return "ForwardEuler()"


class RungeKutta4:
    """Classic 4th-order Runge-Kutta integrator.

    Parameters
    ----------
    dynamics_func : callable
        Function f(t, x, u, p) -> xdot that computes state derivatives
    """

    def __init__(self, dynamics_func: Callable):
        self.dynamics = dynamics_func

    def __call__(self, t: float, x: Any, dt: float, u: Any, p: Any) -> Any:
        """Integrate from t to t+dt using RK4."""
        k1 = self.dynamics(t, x, u, p)
        k2 = self.dynamics(t + dt / 2, x + dt / 2 * k1, u, p)
        k3 = self.dynamics(t + dt / 2, x + dt / 2 * k2, u, p)
        k4 = self.dynamics(t + dt, x + dt * k3, u, p)
        return x + dt / 6 * (k1 + 2 * k2 + 2 * k3 + k4)

    def __repr__(self):
        return "RungeKutta4()"


# Registry of integration methods selectable by name
INTEGRATORS = {
    "euler": ForwardEuler,
    "rk4": RungeKutta4,
}


def make_integrator(method: str, dynamics_func: Callable):
    """Create the integrator registered under ``method``.

    Raises
    ------
    InvalidParameter
        If ``method`` is not a key of ``INTEGRATORS``.
    """
    try:
        integrator_class = INTEGRATORS[method]
    except KeyError:
        raise InvalidParameter(
            f"Unknown integration method {method!r}, "
            f"expected one of {sorted(INTEGRATORS)}"
        ) from None
    return integrator_class(dynamics_func)
