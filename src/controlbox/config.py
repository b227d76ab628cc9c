"""Build signals and elements from parameter dictionaries and YAML files.

A specification maps a class name to its keyword arguments, e.g.::

    signals:
      setpoint:
        StepSignal: {amplitude: 1.0, onset_time: {value: 20, units: ms}}
      disturbance:
        SuperpositionSignal:
          signals:
            - NoiseSignal: {amplitude: 0.05, seed: 42}
            - ImpulseSignal: {amplitude: 0.5, time: 0.1}
    elements:
      plant:
        PT1Element: {time_constant: {value: 150, units: ms}, gain: 2.0}

Parameters that are times (see ``TIME_PARAMETERS``) may be given as
``{value, units}`` dicts and are converted to seconds with pint.
"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

import pint
import yaml

from controlbox.elements import DeadTimeElement, PT1Element, PT2Element
from controlbox.exceptions import InvalidParameter
from controlbox.hysteresis import (
    BranchHysteresisElement,
    Direction,
    HysteresisElement,
    LinearBranch,
)
from controlbox.signals import (
    ImpulseSignal,
    NoiseSignal,
    StepSignal,
    SuperpositionSignal,
)

logger = logging.getLogger(__name__)

# Registry of available signal classes
SIGNAL_CLASSES = {
    "StepSignal": StepSignal,
    "ImpulseSignal": ImpulseSignal,
    "NoiseSignal": NoiseSignal,
    "SuperpositionSignal": SuperpositionSignal,
}

# Registry of available element classes
ELEMENT_CLASSES = {
    "PT1Element": PT1Element,
    "PT2Element": PT2Element,
    "DeadTimeElement": DeadTimeElement,
    "HysteresisElement": HysteresisElement,
    "BranchHysteresisElement": BranchHysteresisElement,
}

# Keyword arguments interpreted as durations or instants
TIME_PARAMETERS = {
    "onset_time",
    "time",
    "width",
    "tolerance",
    "time_constant",
    "dead_time",
}


def to_seconds(
    value: float,
    units: Optional[str] = None,
    ureg: Optional[pint.UnitRegistry] = None,
) -> float:
    """Convert a time quantity to seconds.

    Parameters
    ----------
    value : float
        Magnitude of the quantity
    units : str, optional
        Time units understood by pint ('ms', 'min', 'hour', ...). None
        means the value is already in seconds.
    ureg : pint.UnitRegistry, optional
        Unit registry to use. If None, a new registry is created.

    Raises
    ------
    InvalidParameter
        If ``units`` cannot be parsed, is unknown or is not a time unit.

    Examples
    --------
    >>> to_seconds(20, "ms")
    0.02
    """
    if units is None:
        return float(value)
    if ureg is None:
        ureg = pint.UnitRegistry()
    try:
        return float(ureg.Quantity(value, units).to("second").magnitude)
    except (pint.PintError, TypeError, ValueError) as e:
        raise InvalidParameter(f"Cannot convert {value} {units} to seconds: {e}") from e


def _resolve_time_params(params: dict, ureg=None) -> dict:
    kwargs = {}
    for key, value in params.items():
        if key in TIME_PARAMETERS and isinstance(value, dict):
            if "value" not in value:
                raise InvalidParameter(f"Parameter {key!r} needs a 'value' field")
            value = to_seconds(value["value"], value.get("units"), ureg=ureg)
        kwargs[key] = value
    return kwargs


def _split_spec(spec: dict, registry: dict, kind: str):
    if not isinstance(spec, dict) or len(spec) != 1:
        raise InvalidParameter(
            f"A {kind} specification must have exactly one class name key, "
            f"got {spec!r}"
        )
    class_name, params = next(iter(spec.items()))
    if class_name not in registry:
        raise InvalidParameter(f"Unknown {kind} class: {class_name}")
    if params is not None and not isinstance(params, dict):
        raise InvalidParameter(
            f"Parameters for {class_name} must be a mapping, got {params!r}"
        )
    return class_name, params or {}


def _construct(cls, class_name: str, kwargs: dict):
    try:
        return cls(**kwargs)
    except TypeError as e:
        raise InvalidParameter(f"Bad parameters for {class_name}: {e}") from e


def parse_signal_spec(spec: dict, ureg=None):
    """
    Parse a signal specification and return the signal.

    Parameters
    ----------
    spec : dict
        Single-key dict mapping a class name in ``SIGNAL_CLASSES`` to its
        keyword arguments, e.g. ``{'StepSignal': {'amplitude': 1.0}}``.
        ``SuperpositionSignal`` takes a ``signals`` list of nested specs.
    ureg : pint.UnitRegistry, optional
        Unit registry used for time parameters with units.

    Returns
    -------
    Signal
    """
    class_name, params = _split_spec(spec, SIGNAL_CLASSES, "signal")
    logger.debug("Parsing signal %s with %r", class_name, params)

    if class_name == "SuperpositionSignal":
        children = [
            parse_signal_spec(child, ureg=ureg)
            for child in params.get("signals", [])
        ]
        return SuperpositionSignal(children)

    kwargs = _resolve_time_params(params, ureg=ureg)
    return _construct(SIGNAL_CLASSES[class_name], class_name, kwargs)


def parse_element_spec(spec: dict, ureg=None):
    """
    Parse an element specification and return the element.

    Parameters
    ----------
    spec : dict
        Single-key dict mapping a class name in ``ELEMENT_CLASSES`` to its
        keyword arguments, e.g. ``{'HysteresisElement': {'band_width': 2}}``.
        ``BranchHysteresisElement`` takes ``lower_branch`` and
        ``upper_branch`` as ``{slope, offset}`` dicts and an optional
        ``direction`` name ('rising' or 'falling').
    ureg : pint.UnitRegistry, optional
        Unit registry used for time parameters with units.

    Returns
    -------
    Element
    """
    class_name, params = _split_spec(spec, ELEMENT_CLASSES, "element")
    logger.debug("Parsing element %s with %r", class_name, params)
    kwargs = _resolve_time_params(params, ureg=ureg)

    if class_name == "BranchHysteresisElement":
        for key in ("lower_branch", "upper_branch"):
            if key in kwargs:
                kwargs[key] = _construct(LinearBranch, key, kwargs[key])
        if "direction" in kwargs:
            try:
                kwargs["direction"] = Direction(kwargs["direction"])
            except ValueError:
                raise InvalidParameter(
                    f"Unknown direction: {kwargs['direction']!r}"
                ) from None

    return _construct(ELEMENT_CLASSES[class_name], class_name, kwargs)


def load_spec(
    yaml_path: Union[str, Path], ureg=None
) -> dict[str, dict[str, Any]]:
    """Load signals and elements from a YAML specification file.

    The file must contain a ``signals`` and/or an ``elements`` mapping
    from names to specifications (see :func:`parse_signal_spec` and
    :func:`parse_element_spec`).

    Returns
    -------
    dict
        ``{'signals': {name: Signal}, 'elements': {name: Element}}``

    Raises
    ------
    InvalidParameter
        If neither section is present or any specification is invalid.
    """
    with open(yaml_path, "r") as f:
        spec = yaml.safe_load(f) or {}
    if not isinstance(spec, dict):
        raise InvalidParameter(f"{yaml_path}: expected a mapping at top level")

    if not any(section in spec for section in ("signals", "elements")):
        raise InvalidParameter(
            f"{yaml_path}: missing required section 'signals' or 'elements'"
        )
    if ureg is None:
        ureg = pint.UnitRegistry()

    signals = {
        name: parse_signal_spec(sig_spec, ureg=ureg)
        for name, sig_spec in (spec.get("signals") or {}).items()
    }
    elements = {
        name: parse_element_spec(elem_spec, ureg=ureg)
        for name, elem_spec in (spec.get("elements") or {}).items()
    }
    logger.debug(
        "Loaded %d signals and %d elements from %s",
        len(signals),
        len(elements),
        yaml_path,
    )
    return {"signals": signals, "elements": elements}
