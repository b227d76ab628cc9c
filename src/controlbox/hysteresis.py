"""Hysteresis elements: nonlinearities whose output depends on input history.

HysteresisElement
    Dead band around the last committed output
BranchHysteresisElement
    Two linear branches selected by lower and upper switching thresholds
"""

import enum
import logging
from dataclasses import dataclass

from controlbox.exceptions import InvalidParameter, require_non_negative

logger = logging.getLogger(__name__)


class Direction(enum.Enum):
    """Direction of the most recent output change."""

    UNDEFINED = "undefined"
    RISING = "rising"
    FALLING = "falling"


class HysteresisElement:
    """Dead-band memory element.

    The output holds while the input stays within
    ``[last_output - band_width/2, last_output + band_width/2]``. When the
    input leaves that band, the output snaps to the input itself (not to
    the band edge) and ``direction`` records whether the exit was upward
    or downward.

    NaN inputs are not trapped: a NaN never lies inside the band, so it
    becomes the new output with direction FALLING.

    Parameters
    ----------
    band_width : float
        Full width of the dead band, must be >= 0
    initial_output : float, optional
        Output before the first step, by default 0.0

    Raises
    ------
    InvalidParameter
        If ``band_width < 0``.

    Examples
    --------
    >>> h = HysteresisElement(band_width=2.0)
    >>> [h.step(u) for u in (0.5, -0.5, 0.9)]
    [0.0, 0.0, 0.0]
    >>> h.step(1.5), h.direction
    (1.5, <Direction.RISING: 'rising'>)
    """

    def __init__(self, band_width: float, initial_output: float = 0.0):
        self.band_width = require_non_negative("band_width", band_width)
        self.initial_output = float(initial_output)
        self.reset()
        logger.debug("Created %r", self)

    @property
    def half_band(self) -> float:
        return self.band_width / 2

    def step(self, input: float) -> float:
        """Feed ``input`` and return the (possibly unchanged) output."""
        previous = self.last_output
        if abs(input - previous) <= self.half_band:
            return previous
        self.last_output = float(input)
        self.direction = Direction.RISING if input > previous else Direction.FALLING
        return self.last_output

    def reset(self):
        """Restore the initial output and an undefined direction."""
        self.last_output = self.initial_output
        self.direction = Direction.UNDEFINED

    def __repr__(self):
        return (
            f"HysteresisElement(band_width={self.band_width}, "
            f"last_output={self.last_output}, "
            f"direction={self.direction.value})"
        )


@dataclass(frozen=True)
class LinearBranch:
    """Straight line ``y = slope * u + offset``."""

    slope: float = 1.0
    offset: float = 0.0

    def __call__(self, u: float) -> float:
        return self.slope * u + self.offset


def _slope_difference(lower_branch: LinearBranch, upper_branch: LinearBranch):
    slope_diff = upper_branch.slope - lower_branch.slope
    if slope_diff == 0:
        raise InvalidParameter(
            "parallel branches keep a constant gap; thresholds need distinct slopes"
        )
    return slope_diff


def _gap_point(lower_branch: LinearBranch, upper_branch: LinearBranch, gap: float):
    """Input at which ``upper_branch(u) - lower_branch(u) == gap``."""
    slope_diff = _slope_difference(lower_branch, upper_branch)
    return (lower_branch.offset - upper_branch.offset + gap) / slope_diff


class BranchHysteresisElement:
    """Two-branch hysteresis with switching thresholds.

    Below ``lower`` the element switches to the lower branch (direction
    FALLING); above ``upper`` it switches to the upper branch (direction
    RISING). Between the thresholds it stays on the branch it was last
    switched to. A relay or Schmitt trigger is the special case of two
    flat branches.

    Parameters
    ----------
    lower_branch, upper_branch : LinearBranch
        Output lines used after falling below ``lower`` and rising above
        ``upper`` respectively
    lower, upper : float
        Switching thresholds, ``lower <= upper``
    direction : Direction, optional
        Initially active branch, by default Direction.FALLING (lower)

    Raises
    ------
    InvalidParameter
        If ``lower > upper`` or ``direction`` is UNDEFINED.

    Examples
    --------
    >>> relay = BranchHysteresisElement(
    ...     LinearBranch(slope=0.0, offset=0.0),
    ...     LinearBranch(slope=0.0, offset=1.0),
    ...     lower=-0.5,
    ...     upper=0.5,
    ... )
    >>> [relay.step(u) for u in (0.0, 0.6, 0.0, -0.6)]
    [0.0, 1.0, 1.0, 0.0]
    """

    def __init__(
        self,
        lower_branch: LinearBranch,
        upper_branch: LinearBranch,
        lower: float,
        upper: float,
        direction: Direction = Direction.FALLING,
    ):
        if not lower <= upper:
            raise InvalidParameter(
                f"lower threshold {lower!r} must not exceed upper {upper!r}"
            )
        if direction is Direction.UNDEFINED:
            raise InvalidParameter("initial direction must be RISING or FALLING")
        self.lower_branch = lower_branch
        self.upper_branch = upper_branch
        self.lower = float(lower)
        self.upper = float(upper)
        self.initial_direction = direction
        self.direction = direction
        logger.debug("Created %r", self)

    @classmethod
    def centered(
        cls,
        lower_branch: LinearBranch,
        upper_branch: LinearBranch,
        spread: float,
        midpoint: float = 0.0,
        direction: Direction = Direction.FALLING,
    ) -> "BranchHysteresisElement":
        """Build with thresholds ``midpoint -/+ spread/2``."""
        spread = require_non_negative("spread", spread)
        return cls(
            lower_branch,
            upper_branch,
            lower=midpoint - spread / 2,
            upper=midpoint + spread / 2,
            direction=direction,
        )

    @classmethod
    def crossing(
        cls,
        lower_branch: LinearBranch,
        upper_branch: LinearBranch,
        spread: float,
        direction: Direction = Direction.FALLING,
    ) -> "BranchHysteresisElement":
        """Build with thresholds centred where the two branches intersect.

        Raises
        ------
        InvalidParameter
            If the branches are parallel and never intersect.
        """
        midpoint = _gap_point(lower_branch, upper_branch, 0.0)
        return cls.centered(
            lower_branch, upper_branch, spread, midpoint=midpoint, direction=direction
        )

    @classmethod
    def from_output_spread(
        cls,
        lower_branch: LinearBranch,
        upper_branch: LinearBranch,
        spread_y: float,
        midpoint: float = 0.0,
        direction: Direction = Direction.FALLING,
    ) -> "BranchHysteresisElement":
        """Build around ``midpoint`` with the spread given in output units.

        The input spread is ``spread_y`` divided by the difference of the
        branch slopes.

        Examples
        --------
        >>> h = BranchHysteresisElement.from_output_spread(
        ...     LinearBranch(0.5, 0.0), LinearBranch(1.0, 1.0), spread_y=1.0
        ... )
        >>> (h.lower, h.upper)
        (-1.0, 1.0)
        """
        slope_diff = _slope_difference(lower_branch, upper_branch)
        return cls.centered(
            lower_branch,
            upper_branch,
            spread_y / slope_diff,
            midpoint=midpoint,
            direction=direction,
        )

    @classmethod
    def from_lower(
        cls,
        lower_branch: LinearBranch,
        upper_branch: LinearBranch,
        lower: float,
        spread: float,
        direction: Direction = Direction.FALLING,
    ) -> "BranchHysteresisElement":
        """Build with thresholds ``lower`` and ``lower + spread``."""
        spread = require_non_negative("spread", spread)
        return cls(
            lower_branch,
            upper_branch,
            lower=lower,
            upper=lower + spread,
            direction=direction,
        )

    @classmethod
    def from_upper(
        cls,
        lower_branch: LinearBranch,
        upper_branch: LinearBranch,
        upper: float,
        spread: float,
        direction: Direction = Direction.FALLING,
    ) -> "BranchHysteresisElement":
        """Build with thresholds ``upper - spread`` and ``upper``."""
        spread = require_non_negative("spread", spread)
        return cls(
            lower_branch,
            upper_branch,
            lower=upper - spread,
            upper=upper,
            direction=direction,
        )

    @classmethod
    def from_lower_gap(
        cls,
        lower_branch: LinearBranch,
        upper_branch: LinearBranch,
        gap: float,
        spread: float,
        direction: Direction = Direction.FALLING,
    ) -> "BranchHysteresisElement":
        """Put the lower threshold where ``upper_branch - lower_branch == gap``.

        The upper threshold is ``spread`` above it.
        """
        lower = _gap_point(lower_branch, upper_branch, gap)
        return cls.from_lower(
            lower_branch, upper_branch, lower, spread, direction=direction
        )

    @classmethod
    def from_upper_gap(
        cls,
        lower_branch: LinearBranch,
        upper_branch: LinearBranch,
        gap: float,
        spread: float,
        direction: Direction = Direction.FALLING,
    ) -> "BranchHysteresisElement":
        """Put the upper threshold where ``upper_branch - lower_branch == gap``.

        The lower threshold is ``spread`` below it.
        """
        upper = _gap_point(lower_branch, upper_branch, gap)
        return cls.from_upper(
            lower_branch, upper_branch, upper, spread, direction=direction
        )

    def step(self, input: float) -> float:
        """Feed ``input`` and return the output of the active branch."""
        if input < self.lower:
            self.direction = Direction.FALLING
        elif input > self.upper:
            self.direction = Direction.RISING
        if self.direction is Direction.RISING:
            return self.upper_branch(input)
        return self.lower_branch(input)

    def reset(self):
        """Restore the initially active branch."""
        self.direction = self.initial_direction

    def __repr__(self):
        return (
            f"BranchHysteresisElement(lower={self.lower}, upper={self.upper}, "
            f"direction={self.direction.value})"
        )
