import logging

import numpy as np
import pandas as pd

from motion_profile import MotionParameters
from numeric import get_numeric
from simulator import ProfileSimulator, accelerations_from_delays, delays_to_array
from trapezoidal import Trapezoidal


def build_profile(params: MotionParameters) -> Trapezoidal:
    return Trapezoidal(params.target_acceleration, get_numeric(params.numeric))


def acceleration_error(profile, max_velocity, num_steps, target_acceleration, skip=5):
    """
    Relative error between measured and target acceleration on the ramps.

    Ignores the first and last ``skip`` accelerations, plateau steps, and the
    single steps next to a plateau, where the clamp cuts the ramp short.
    Returns a dict with max_error, mean_error and samples.
    """
    profile.enter_position_mode(max_velocity, num_steps)
    accels = accelerations_from_delays(delays_to_array(profile))

    errors = []
    for i in range(skip, accels.size - skip):
        if accels[i] == 0.0 or accels[i - 1] == 0.0 or accels[i + 1] == 0.0:
            continue
        errors.append(abs(abs(accels[i]) - target_acceleration) / target_acceleration)

    if not errors:
        return {"max_error": 0.0, "mean_error": 0.0, "samples": 0}
    return {
        "max_error": float(np.max(errors)),
        "mean_error": float(np.mean(errors)),
        "samples": len(errors),
    }


def ideal_move_time(target_acceleration, max_velocity, num_steps):
    """
    Duration of a continuous trapezoid covering ``num_steps`` from rest to rest.

    Falls back to the triangular time when the move is too short to reach
    ``max_velocity``.
    """
    if num_steps <= 0 or max_velocity <= 0:
        return 0.0
    if max_velocity ** 2 / target_acceleration < num_steps:
        return num_steps / max_velocity + max_velocity / target_acceleration
    return 2.0 * np.sqrt(num_steps / target_acceleration)


def sweep_velocity(params: MotionParameters, velocity_range):
    """
    Sweep max_velocity, return velocity_list and total_time_list for this axis.
    """
    results = []
    for vmax in velocity_range:
        sim = ProfileSimulator(build_profile(params), vmax, params.num_steps)
        breakdown = sim.compute_time_breakdown()
        results.append((vmax, breakdown["Total"]))
    logging.debug("Velocity sweep over %d points for %s", len(results), params.name)
    velocities, total_times = zip(*results)
    return np.array(velocities), np.array(total_times)


def sweep_accel(params: MotionParameters, accel_range):
    """
    Sweep target_acceleration, return accel_list and total_time_list for this axis.
    """
    results = []
    for accel in accel_range:
        profile = Trapezoidal(accel, get_numeric(params.numeric))
        sim = ProfileSimulator(profile, params.max_velocity, params.num_steps)
        breakdown = sim.compute_time_breakdown()
        results.append((accel, breakdown["Total"]))
    logging.debug("Acceleration sweep over %d points for %s", len(results), params.name)
    accels, total_times = zip(*results)
    return np.array(accels), np.array(total_times)


def sweep_velocity_accel(params: MotionParameters, velocity_range, accel_range):
    """
    2D sweep: For each (v, a) pair, compute total move time. Returns meshgrid and Z.
    """
    Z = np.zeros((len(accel_range), len(velocity_range)))
    for i, accel in enumerate(accel_range):
        profile = Trapezoidal(accel, get_numeric(params.numeric))
        for j, vmax in enumerate(velocity_range):
            sim = ProfileSimulator(profile, vmax, params.num_steps)
            Z[i, j] = sim.compute_time_breakdown()["Total"]
    V, A = np.meshgrid(velocity_range, accel_range)
    return V, A, Z


def compare_numeric_types(names, target_acceleration, max_velocity, num_steps):
    """
    Run the same move under several numeric backends.

    Returns a DataFrame indexed by backend name with the step count, total
    move time, plateau length and acceleration error of each run.
    """
    rows = []
    for name in names:
        numeric = get_numeric(name)
        sim = ProfileSimulator(Trapezoidal(target_acceleration, numeric), max_velocity, num_steps)
        t, x, v, a, phase = sim.simulate()
        error = acceleration_error(
            Trapezoidal(target_acceleration, numeric), max_velocity, num_steps, target_acceleration
        )
        rows.append({
            "Numeric": numeric.name,
            "Steps": int(x.size),
            "Total Time (s)": float(t[-1]) if t.size else 0.0,
            "Plateau Steps": int(np.count_nonzero(phase == "const")),
            "Max Accel Error": error["max_error"],
            "Mean Accel Error": error["mean_error"],
        })
        logging.debug("Numeric backend %s: %s", numeric.name, rows[-1])
    return pd.DataFrame(rows).set_index("Numeric")


def analyze_axes_from_csv(csv_path, default_numeric="float"):
    """
    Reads CSV with columns:
        Axis, Target Acceleration (steps/s^2), Max Velocity (steps/s), Steps
    and an optional Numeric column. For each row, simulates the move and returns:
        - list of axis labels
        - list of MotionParameters
        - list of breakdown dicts
    """
    try:
        df = pd.read_csv(csv_path, encoding="utf-8-sig")
    except UnicodeDecodeError:
        df = pd.read_csv(csv_path, encoding="cp1252")

    labels = []
    axes = []
    breakdowns = []
    for _, row in df.iterrows():
        numeric = default_numeric
        if "Numeric" in df.columns and isinstance(row["Numeric"], str) and row["Numeric"].strip():
            numeric = row["Numeric"].strip()

        params = MotionParameters(
            name=f"{row['Axis']}",
            target_acceleration=float(row["Target Acceleration (steps/s^2)"]),
            max_velocity=float(row["Max Velocity (steps/s)"]),
            num_steps=int(row["Steps"]),
            numeric=numeric,
        )
        sim = ProfileSimulator(build_profile(params), params.max_velocity, params.num_steps)
        labels.append(params.name)
        axes.append(params)
        breakdowns.append(sim.compute_time_breakdown())
    return labels, axes, breakdowns
