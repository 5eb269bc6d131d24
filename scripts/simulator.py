import logging

import numpy as np

from motion_profile import MotionProfile, RampMode

PHASE_NAMES = {
    "accel": "Acceleration",
    "const": "Constant",
    "decel": "Deceleration",
}


def delays_to_array(profile: MotionProfile) -> np.ndarray:
    """Drain the armed profile and return its delays as a float64 array."""
    num = profile.numeric
    return np.array([num.to_float(d) for d in profile.delays()], dtype=np.float64)


def accelerations_from_delays(delays: np.ndarray) -> np.ndarray:
    """
    Midpoint finite-difference acceleration between consecutive delays.
    Returns an array one shorter than ``delays``.
    """
    delays = np.asarray(delays, dtype=np.float64)
    if delays.size < 2:
        return np.array([])
    v = 1.0 / delays
    time_diff = delays[:-1] / 2 + delays[1:] / 2
    return np.diff(v) / time_diff


class ProfileSimulator:
    def __init__(self, profile: MotionProfile, max_velocity: float, num_steps: int):
        self.profile = profile
        self.max_velocity = max_velocity
        self.num_steps = num_steps

    def simulate(self):
        """
        Arm the profile, run it to completion and record every step.
        Returns: time, position, velocity, acceleration, phase.

        ``t[i]`` is the time at which step i fires, ``x`` the step count after
        it, and ``a[0]`` is 0.0 so that every array has one entry per step.
        """
        profile = self.profile
        num = profile.numeric
        profile.enter_position_mode(self.max_velocity, self.num_steps)

        delays = []
        phase = []
        while True:
            mode = profile.mode()
            delay = profile.next_delay()
            if delay is None:
                break
            delays.append(num.to_float(delay))
            phase.append(mode.value)

        delays = np.array(delays, dtype=np.float64)
        logging.debug(
            "Simulated %d steps (%s, %s)", delays.size, type(profile).__name__, num.name
        )
        if delays.size == 0:
            empty = np.array([])
            return empty, empty, empty, empty, np.array([], dtype=str)

        t = np.cumsum(delays)
        x = np.arange(1, delays.size + 1)
        v = 1.0 / delays
        a = np.concatenate([[0.0], accelerations_from_delays(delays)])
        return t, x, v, a, np.array(phase)

    def compute_time_breakdown(self):
        """
        Compute the time spent in each phase of the move.
        """
        t, x, v, a, phase = self.simulate()
        delays = np.diff(np.concatenate([[0.0], t]))

        breakdown = {
            name: float(delays[phase == key].sum()) for key, name in PHASE_NAMES.items()
        }
        breakdown["Total"] = sum(breakdown.values())
        return breakdown

    def plateau_steps(self) -> int:
        phase = self.simulate()[4]
        return int(np.count_nonzero(phase == RampMode.PLATEAU.value))
