import sys
from pathlib import Path
sys.path.append(str(Path(__file__).resolve().parents[1] / 'scripts'))

import numpy as np
import pytest
from analysis import (
    acceleration_error, analyze_axes_from_csv, compare_numeric_types, ideal_move_time,
    sweep_accel, sweep_velocity, sweep_velocity_accel,
)
from motion_profile import reference_move
from trapezoidal import Trapezoidal


def test_acceleration_error_within_five_percent():
    error = acceleration_error(Trapezoidal(6000.0), 1000.0, 200, 6000.0)
    assert error["samples"] > 100
    assert error["max_error"] <= 0.05
    assert error["mean_error"] <= error["max_error"]


def test_acceleration_error_on_empty_move():
    error = acceleration_error(Trapezoidal(6000.0), 0.0, 200, 6000.0)
    assert error == {"max_error": 0.0, "mean_error": 0.0, "samples": 0}


def test_faster_moves_take_less_time():
    v_vals, t_vals = sweep_velocity(reference_move, np.linspace(200, 3000, 5))
    assert len(v_vals) == len(t_vals) == 5
    assert t_vals[0] > t_vals[-1]

    a_vals, t_acc_vals = sweep_accel(reference_move, np.linspace(1000, 20000, 5))
    assert t_acc_vals[0] > t_acc_vals[-1]


def test_ideal_move_time_trapezoid_and_triangle():
    # 1000²/6000 < 200, so the move reaches its top speed
    assert ideal_move_time(6000.0, 1000.0, 200) == pytest.approx(200 / 1000 + 1000 / 6000)
    # 40 steps are too few to reach 1000 steps/s
    assert ideal_move_time(6000.0, 1000.0, 40) == pytest.approx(2 * np.sqrt(40 / 6000))
    assert ideal_move_time(6000.0, 0.0, 200) == 0.0


def test_ramp_time_close_to_ideal():
    v_vals, t_vals = sweep_velocity(reference_move, [reference_move.max_velocity])
    ideal = ideal_move_time(reference_move.target_acceleration, reference_move.max_velocity, reference_move.num_steps)
    assert t_vals[0] == pytest.approx(ideal, rel=0.1)


def test_sweep_velocity_accel_shape():
    V, A, Z = sweep_velocity_accel(reference_move, np.linspace(200, 3000, 4), np.linspace(1000, 20000, 3))
    assert V.shape == A.shape == Z.shape == (3, 4)
    assert np.all(Z > 0)


def test_compare_numeric_types():
    df = compare_numeric_types(["float", "float32", "ufixed32.32"], 6000.0, 1000.0, 200)
    assert list(df.index) == ["float", "float32", "ufixed32.32"]
    assert (df["Steps"] == 200).all()
    assert (df["Plateau Steps"] > 0).all()
    assert df.loc["float", "Max Accel Error"] <= 0.05
    assert df.loc["ufixed32.32", "Total Time (s)"] == pytest.approx(df.loc["float", "Total Time (s)"], rel=1e-3)


def test_analyze_axes_from_csv(base_dir):
    labels, axes, breakdowns = analyze_axes_from_csv(base_dir / "data" / "axis_data.csv")
    assert labels == ["X", "Y"]
    assert axes[0].numeric == "float"
    assert axes[1].num_steps == 50
    for bd in breakdowns:
        assert bd["Total"] > 0
        assert bd["Total"] == pytest.approx(bd["Acceleration"] + bd["Constant"] + bd["Deceleration"])


def test_analyze_axes_with_numeric_column(tmp_path):
    csv_path = tmp_path / "axes.csv"
    csv_path.write_text(
        "Axis,Target Acceleration (steps/s^2),Max Velocity (steps/s),Steps,Numeric\n"
        "Z,12000,2000,300,ufixed32.32\n"
        "R,1500,600,120,\n"
    )
    labels, axes, breakdowns = analyze_axes_from_csv(csv_path)
    assert [p.numeric for p in axes] == ["ufixed32.32", "float"]
