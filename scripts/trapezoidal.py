"""
Trapezoidal acceleration profile for stepper motors.

Approximates a constant-acceleration ramp using the recurrence described by
Leib (http://hwml.com/LeibRamp.htm), simplified as follows:
    - the timer frequency F is dropped; the caller picks the unit of time
    - the initial velocity is zero, so motions start and end at standstill

Ramp-up and ramp-down use the same (triangular) recurrence with opposite
sign. The trapezoid comes only from clamping the delay at the minimum delay
implied by the maximum velocity.
"""
from motion_profile import MotionProfile, RampMode
from numeric import Numeric


def ramp_mode(numeric: Numeric, delay_min, delay_prev, steps_left: int, target_acceleration) -> RampMode:
    """
    Decide what the next step has to do, from the engine state alone.

    Pure function of ``(delay_min, delay_prev, steps_left, target_acceleration)``;
    the engine stores no mode of its own.
    """
    if delay_min is None or steps_left == 0:
        return RampMode.IDLE

    num = numeric
    velocity = num.recip(delay_prev)
    two = num.add(num.one(), num.one())

    # Steps needed to reach standstill from the current velocity, decelerating
    # at the target rate.
    steps_to_stop = num.ceil(
        num.div(num.mul(velocity, velocity), num.mul(two, target_acceleration))
    )

    if steps_left <= steps_to_stop:
        return RampMode.RAMP_DOWN
    if num.le(delay_prev, delay_min):
        return RampMode.PLATEAU
    return RampMode.RAMP_UP


class Trapezoidal(MotionProfile):
    """
    Trapezoidal acceleration profile.

    ``target_acceleration`` is in steps per (unit of time)^2 and must be
    positive. Pass a ``Numeric`` backend to run the ramp in float32 or fixed
    point; low-precision backends track the target acceleration less closely.
    """

    def __init__(self, target_acceleration, numeric: Numeric = None):
        super().__init__(numeric)
        num = self.numeric
        target_acceleration = self._coerce_input(
            "target_acceleration", target_acceleration, allow_zero=False
        )

        self.target_acceleration = target_acceleration

        # Equation [17] in the referenced paper
        two = num.add(num.one(), num.one())
        self.delay_initial = num.recip(num.sqrt(num.mul(two, target_acceleration)))
        self._three_halves = num.coerce(1.5)

        self.delay_min = None
        self.delay_prev = self.delay_initial
        self.steps_left = 0

    def enter_position_mode(self, max_velocity, num_steps: int) -> None:
        num = self.numeric
        max_velocity = self._coerce_input("max_velocity", max_velocity, allow_zero=True)
        if num_steps < 0:
            raise ValueError("num_steps must not be negative")

        # Equation [7] in the referenced paper
        if max_velocity == num.zero():
            self.delay_min = None
        else:
            self.delay_min = num.recip(max_velocity)

        self.delay_prev = self.delay_initial
        self.steps_left = int(num_steps)

    def mode(self) -> RampMode:
        return ramp_mode(
            self.numeric,
            self.delay_min,
            self.delay_prev,
            self.steps_left,
            self.target_acceleration,
        )

    def next_delay(self):
        mode = self.mode()
        if mode is RampMode.IDLE:
            return None

        num = self.numeric
        one = num.one()

        # Equation [20] in the referenced paper, expanded to second order in q
        q = num.mul(num.mul(self.target_acceleration, self.delay_prev), self.delay_prev)
        correction = num.mul(num.mul(self._three_halves, q), q)

        if mode is RampMode.RAMP_UP:
            factor = num.add(num.sub(one, q), correction)
            delay_next = num.max(num.mul(self.delay_prev, factor), self.delay_min)
        elif mode is RampMode.PLATEAU:
            delay_next = self.delay_prev
        else:
            factor = num.add(num.add(one, q), correction)
            delay_next = num.mul(self.delay_prev, factor)

        # Keeps the ramp stable at very low velocities
        delay_next = num.min(delay_next, self.delay_initial)

        self.delay_prev = delay_next
        self.steps_left -= 1
        return delay_next
