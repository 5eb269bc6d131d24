"""
Flat (constant velocity) profile.

Every delay equals ``1 / max_velocity``. In theory this means infinite
acceleration at the start and end of the motion, so it is only usable at low
speed and load; it mainly serves as a reference case for the profile contract.
"""
from motion_profile import MotionProfile, RampMode
from numeric import Numeric


class Flat(MotionProfile):
    def __init__(self, numeric: Numeric = None):
        super().__init__(numeric)
        self.delay = None
        self.steps_left = 0

    def enter_position_mode(self, max_velocity, num_steps: int) -> None:
        num = self.numeric
        max_velocity = self._coerce_input("max_velocity", max_velocity, allow_zero=True)
        if num_steps < 0:
            raise ValueError("num_steps must not be negative")

        self.delay = None if max_velocity == num.zero() else num.recip(max_velocity)
        self.steps_left = int(num_steps)

    def mode(self) -> RampMode:
        if self.delay is None or self.steps_left == 0:
            return RampMode.IDLE
        return RampMode.PLATEAU

    def next_delay(self):
        if self.mode() is RampMode.IDLE:
            return None
        self.steps_left -= 1
        return self.delay
