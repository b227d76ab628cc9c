"""Protocols for signals and elements.

Signals are pure functions of time. Elements carry internal state that
evolves across calls to ``step``. Concrete classes satisfy these
protocols by duck-typing; none of them inherit from the protocols.
"""

from typing import Protocol, Union, runtime_checkable


@runtime_checkable
class Signal(Protocol):
    """Protocol for time-domain signals.

    A signal returns its value at an arbitrary time. Evaluation never
    fails for a real time; invalid parameters are rejected when the
    signal is constructed.
    """

    def value_at(self, time: float) -> float:
        """Evaluate the signal at ``time``.

        Parameters
        ----------
        time : float
            Time at which to evaluate the signal, typically in seconds

        Returns
        -------
        value : float
            Signal value at ``time``
        """
        ...


@runtime_checkable
class TimeStepElement(Protocol):
    """Protocol for elements whose dynamics depend on elapsed time.

    Implementations must raise ``InvalidTimeStep`` for ``dt <= 0`` and
    leave their state unchanged when they do.
    """

    def step(self, input: float, dt: float) -> float:
        """Advance the element by ``dt`` with ``input`` held constant.

        Parameters
        ----------
        input : float
            Input value over the step
        dt : float
            Time step size, must be > 0

        Returns
        -------
        output : float
            Element output at the end of the step
        """
        ...


@runtime_checkable
class StaticElement(Protocol):
    """Protocol for time-independent elements with memory."""

    def step(self, input: float) -> float:
        """Feed ``input`` to the element and return its output."""
        ...


Element = Union[TimeStepElement, StaticElement]
