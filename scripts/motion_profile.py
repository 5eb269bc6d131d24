"""Motion profile contract and motion parameter definitions."""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum

from numeric import FloatNumeric, Numeric


class RampMode(Enum):
    IDLE = "idle"
    RAMP_UP = "accel"
    PLATEAU = "const"
    RAMP_DOWN = "decel"


class MotionProfile(ABC):
    """
    Base class for all acceleration profiles.

    A profile is armed with ``enter_position_mode`` and then pulled one delay
    at a time with ``next_delay`` until it returns None. Delays are in the
    unit of time implied by the velocity passed in: steps per second gives
    seconds, steps per timer tick gives timer ticks.
    """

    def __init__(self, numeric: Numeric = None):
        self.numeric = numeric if numeric is not None else FloatNumeric()

    def _coerce_input(self, name: str, value, allow_zero: bool):
        """
        Bring a caller-supplied rate into the numeric backend.

        The sign is checked on the raw value, so unsigned backends report
        misuse as ValueError rather than a range error. A positive value the
        backend rounds to zero is rejected instead of silently becoming zero.
        """
        if value < 0 or (value == 0 and not allow_zero):
            requirement = "must not be negative" if allow_zero else "must be positive"
            raise ValueError(f"{name} {requirement}, got {value}")

        num = self.numeric
        coerced = num.coerce(value)
        if value > 0 and coerced == num.zero():
            raise ValueError(
                f"{name} {value} is below the resolution of the {num.name} backend"
            )
        return coerced

    @abstractmethod
    def enter_position_mode(self, max_velocity, num_steps: int) -> None:
        """Arm a motion of ``num_steps`` steps, discarding any unfinished one."""

    @abstractmethod
    def next_delay(self):
        """Return the delay before the next step, or None once the motion is done."""

    @abstractmethod
    def mode(self) -> RampMode:
        pass

    def delays(self):
        """Yield delays until the current motion is exhausted."""
        while True:
            delay = self.next_delay()
            if delay is None:
                return
            yield delay

    def velocities(self):
        """Yield the velocity (reciprocal of the delay) for every remaining step."""
        for delay in self.delays():
            yield self.numeric.recip(delay)

    def accelerations(self):
        """
        Yield the acceleration between each pair of consecutive steps.

        A velocity defined by a delay is taken to be reached halfway through
        that delay, so two velocities are ``delay_prev / 2 + delay_next / 2``
        apart in time. Yields one value fewer than there are delays.

        Values are Python floats: deceleration is negative, which unsigned
        fixed-point backends cannot represent.
        """
        to_float = self.numeric.to_float
        delay_prev = None
        for delay in self.delays():
            delay_next = to_float(delay)
            if delay_prev is not None:
                velocity_diff = 1.0 / delay_next - 1.0 / delay_prev
                time_diff = delay_prev / 2 + delay_next / 2
                yield velocity_diff / time_diff
            delay_prev = delay_next


@dataclass
class MotionParameters:
    name: str
    target_acceleration: float  # steps/s^2
    max_velocity: float  # steps/s
    num_steps: int
    numeric: str = "float"
    color: str = "blue"


# Example parameter sets used in notebooks or quick tests
reference_move = MotionParameters(
    name="Reference Move",
    target_acceleration=6000,
    max_velocity=1000,
    num_steps=200,
    color="blue",
)

long_move = MotionParameters(
    name="Long Move",
    target_acceleration=1000,
    max_velocity=1500,
    num_steps=2000,
    color="orange",
)
