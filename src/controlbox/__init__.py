"""Signal generators and simple dynamical elements for control simulations.

This package provides reproducible input waveforms and simple plant
behaviours to exercise controller logic in test harnesses, without a
full physics engine. It supplies primitives only: wiring elements
together and stepping a simulation is left to the harness.

Protocols
---------
Signal : ``value_at(time) -> float``, a function of time
TimeStepElement : ``step(input, dt) -> float``, state evolving with time
StaticElement : ``step(input) -> float``, time-independent memory

Signals
-------
StepSignal : Step at an onset time
ImpulseSignal : Impulse (or rectangular pulse) at a given time
NoiseSignal : Seeded noise, draws indexed by call count
SuperpositionSignal : Sum of other signals

Elements
--------
PT1Element : First-order lag
PT2Element : Second-order lag
DeadTimeElement : Transport delay
HysteresisElement : Dead band around the last output
BranchHysteresisElement : Two linear branches with switching thresholds

Examples
--------
>>> from controlbox import PT1Element, StepSignal, time_range
>>> u = StepSignal(amplitude=1.0, onset_time=0.0)
>>> plant = PT1Element(time_constant=1.0, gain=1.0)
>>> for t in time_range(0.0, 5.0, dt=0.01)[:-1]:
...     y = plant.step(u.value_at(t), dt=0.01)
>>> abs(y - 1.0) < 0.01
True
"""

# Protocols
from controlbox.core import Element, Signal, StaticElement, TimeStepElement

# Errors
from controlbox.exceptions import (
    ControlBoxError,
    InvalidParameter,
    InvalidTimeStep,
)

# Signals
from controlbox.signals import (
    ImpulseSignal,
    NoiseSignal,
    StepSignal,
    SuperpositionSignal,
)

# Elements
from controlbox.elements import DeadTimeElement, PT1Element, PT2Element
from controlbox.hysteresis import (
    BranchHysteresisElement,
    Direction,
    HysteresisElement,
    LinearBranch,
)

# Integrators
from controlbox.integrators import ForwardEuler, RungeKutta4

# Sampling and configuration
from controlbox.sampling import sample, time_range
from controlbox.config import (
    load_spec,
    parse_element_spec,
    parse_signal_spec,
    to_seconds,
)

__all__ = [
    # Protocols
    "Signal",
    "Element",
    "TimeStepElement",
    "StaticElement",
    # Errors
    "ControlBoxError",
    "InvalidParameter",
    "InvalidTimeStep",
    # Signals
    "StepSignal",
    "ImpulseSignal",
    "NoiseSignal",
    "SuperpositionSignal",
    # Elements
    "PT1Element",
    "PT2Element",
    "DeadTimeElement",
    "HysteresisElement",
    "BranchHysteresisElement",
    "LinearBranch",
    "Direction",
    # Integrators
    "ForwardEuler",
    "RungeKutta4",
    # Sampling and configuration
    "time_range",
    "sample",
    "load_spec",
    "parse_signal_spec",
    "parse_element_spec",
    "to_seconds",
]
