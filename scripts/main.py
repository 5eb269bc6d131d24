"""
Stepper Ramp Simulation Main Script
===================================

CLI-driven main script for generating and analysing trapezoidal stepper
ramps (inter-step delay sequences).

Use-cases (selectable via CLI or run all):
    1. Single move debugging (delays, velocity/acceleration, phase breakdown)
    2. Parametric sweeps (max velocity, target acceleration, 2D)
    3. Numeric backend comparison (float / float32 / fixed point accuracy)
    4. Axis table analysis (one move per row of data/axis_data.csv)

To add new use-cases, define a new function and add to the USE_CASES dict.
CLI Usage Examples:

# Run the default single_move case with the baseline config
python scripts/main.py

# Run ALL use-cases
python scripts/main.py --base-dir "..." --usecase all

# Compare numeric backends with a specific config file
python scripts/main.py --base-dir "..." --usecase numeric_compare --config stepper_baseline.json

# Run all use-cases, generate PDF report
python scripts/main.py --base-dir "..." --usecase all --pdf-report

# Change logging verbosity
python scripts/main.py --loglevel DEBUG

NOTE:
- All config files should be placed in the config/ directory at the project base.
- The axis table should be in data/axis_data.csv.
- Results and PDF reports are auto-named and stored in the results/ directory.
"""

import argparse
import logging
import json
from pathlib import Path
import datetime
import sys

import numpy as np
import pandas as pd
from fpdf import FPDF

from motion_profile import MotionParameters
from simulator import ProfileSimulator
from analysis import (
    build_profile, acceleration_error, sweep_velocity, sweep_accel,
    sweep_velocity_accel, compare_numeric_types, analyze_axes_from_csv, ideal_move_time
)
from plotter import (
    plot_delays_vs_step,
    plot_velocity_and_accel_vs_time,
    plot_velocity_vs_position,
    plot_phase_breakdown_bar,
    plot_sweep_total_time,
    plot_velocity_accel_map,
    plot_numeric_comparison,
)
# =============================
# DEFAULT RUN SETTINGS
# =============================
DEFAULT_SETTINGS = {
    "base_dir": Path(__file__).resolve().parents[1],
    "config": "stepper_baseline.json",
    "usecase": ["single_move"],
    "pdf_report": False,
    "loglevel": "INFO",
}

REQUIRED_AXIS_KEYS = ("target_acceleration", "max_velocity", "num_steps")


# =======================
# 1. CONFIGURATION UTILS
# =======================

def load_config(config_path: Path) -> dict:
    """Load and validate a JSON configuration file."""
    try:
        with open(config_path, "r") as f:
            config = json.load(f)
    except FileNotFoundError:
        logging.error(f"Config file not found: {config_path}")
        sys.exit(1)
    except json.JSONDecodeError:
        logging.error(f"Config file is not valid JSON: {config_path}")
        sys.exit(1)

    missing = [k for k in REQUIRED_AXIS_KEYS if k not in config.get("axis", {})]
    if missing:
        logging.error(f"Config file {config_path} is missing axis keys: {', '.join(missing)}")
        sys.exit(1)
    return config


def setup_dirs(base_dir: Path) -> dict:
    """Create and return all working subdirectories."""
    dirs = {
        "config": base_dir / "config",
        "results": base_dir / "results",
        "parametric": base_dir / "results" / "parametric",
        "single_move": base_dir / "results" / "single_move",
        "data": base_dir / "data",
    }
    for d in dirs.values():
        d.mkdir(parents=True, exist_ok=True)
    return dirs


# ==============================
# 2. EXPERIMENT UTILITY FUNCTIONS
# ==============================

def build_axis_parameters(config: dict) -> MotionParameters:
    """Create the motion parameters of the configured axis."""
    axis = config["axis"]
    return MotionParameters(
        name=axis.get("name", "Axis"),
        target_acceleration=axis["target_acceleration"],
        max_velocity=axis["max_velocity"],
        num_steps=int(axis["num_steps"]),
        numeric=axis.get("numeric", "float"),
        color=axis.get("color", "blue"),
    )


def print_parameters(p: MotionParameters):
    print(f"\n[{p.name} MOTION PARAMETERS]")
    print(f"  Target Acceleration : {p.target_acceleration:.4f} steps/s²")
    print(f"  Max Velocity        : {p.max_velocity:.4f} steps/s")
    print(f"  Steps               : {p.num_steps}")
    print(f"  Numeric Backend     : {p.numeric}")


# ==========================
# 3. USE-CASE IMPLEMENTATION
# ==========================

def usecase_single_move_debug(config, dirs, params):
    """Run a single move and chart its delays, velocity and phases."""
    logging.info("Running use-case: Single Move Debugging")
    axis = params["axis"]
    sim = ProfileSimulator(build_profile(axis), axis.max_velocity, axis.num_steps)

    print_parameters(axis)

    breakdown = sim.compute_time_breakdown()
    print(f"\n[{axis.name} Phase Timing Breakdown]")
    for k, v in breakdown.items():
        print(f"  {k:12s}: {v:8.4f} sec")

    error = acceleration_error(
        build_profile(axis), axis.max_velocity, axis.num_steps, axis.target_acceleration
    )
    print(f"  Accel error : max {error['max_error']:.2%}, mean {error['mean_error']:.2%} "
          f"over {error['samples']} steps\n")

    t, x, v, a, phase = sim.simulate()
    pd.DataFrame({
        "step": x, "time_s": t, "delay_s": np.diff(np.concatenate([[0.0], t])),
        "velocity": v, "acceleration": a, "phase": phase,
    }).to_csv(dirs["single_move"] / "delays.csv", index=False)

    plot_delays_vs_step([axis], [sim], dirs["single_move"])
    plot_velocity_and_accel_vs_time([axis], [sim], dirs["single_move"])
    plot_velocity_vs_position([axis], [sim], dirs["single_move"])
    plot_phase_breakdown_bar([breakdown], [axis.name], dirs["single_move"])


def usecase_parametric_sweep(config, dirs, params):
    """
    Run parametric sweeps for velocity, acceleration, and the velocity-acceleration map.
    """
    logging.info("Running use-case: Parametric Sweep Analysis")
    axis = params["axis"]

    vel_range = np.linspace(*config["velocity_sweep"])
    v_vals, t_vals = sweep_velocity(axis, vel_range)
    ideal = [ideal_move_time(axis.target_acceleration, v, axis.num_steps) for v in v_vals]
    plot_sweep_total_time("velocity", v_vals, t_vals, ideal, axis, dirs["parametric"])

    accel_range = np.linspace(*config["acceleration_sweep"])
    a_vals, t_acc_vals = sweep_accel(axis, accel_range)
    ideal = [ideal_move_time(a, axis.max_velocity, axis.num_steps) for a in a_vals]
    plot_sweep_total_time("acceleration", a_vals, t_acc_vals, ideal, axis, dirs["parametric"])

    if "velocity_2d_sweep" in config and "acceleration_2d_sweep" in config:
        v_2d = np.linspace(*config["velocity_2d_sweep"])
        a_2d = np.linspace(*config["acceleration_2d_sweep"])
        V, A, Z = sweep_velocity_accel(axis, v_2d, a_2d)
        plot_velocity_accel_map(V, A, Z, axis, dirs["parametric"])


def usecase_numeric_compare(config, dirs, params):
    """Run the configured move under each numeric backend and compare accuracy."""
    logging.info("Running use-case: Numeric Backend Comparison")
    axis = params["axis"]
    names = config.get("numeric_backends", ["float", "float32"])
    df = compare_numeric_types(names, axis.target_acceleration, axis.max_velocity, axis.num_steps)
    print("\n[Numeric Backend Comparison]")
    print(df.to_string())
    df.to_csv(dirs["parametric"] / "numeric_comparison.csv")
    plot_numeric_comparison(df, dirs["parametric"])


def usecase_axis_table(config, dirs, params):
    """
    Simulate one move per row of the axis table and plot the phase breakdowns.
    """
    logging.info("Running use-case: Axis Table Analysis")
    csv_path = dirs["data"] / "axis_data.csv"
    if not csv_path.exists():
        logging.error(f"Axis table not found: {csv_path}")
        return
    labels, axes, breakdowns = analyze_axes_from_csv(csv_path)
    plot_phase_breakdown_bar(breakdowns, labels, dirs["parametric"], fname="axis_table_breakdown.png")


# Register use-cases
USE_CASES = {
    "single_move": usecase_single_move_debug,
    "parametric": usecase_parametric_sweep,
    "numeric_compare": usecase_numeric_compare,
    "axis_table": usecase_axis_table,
}

# ========================
# 4. REPORT GENERATION
# ========================

def generate_pdf_report(
    parameters_dict,
    charts_dirs,
    output_pdf_path,
    notes=None,
):
    pdf = FPDF()
    pdf.set_auto_page_break(auto=True, margin=15)
    pdf.add_page()
    pdf.set_font("Helvetica", "B", 16)
    pdf.cell(0, 10, "Stepper Ramp Simulation Report", new_x="LMARGIN", new_y="NEXT", align="C")
    pdf.ln(2)
    pdf.set_font("Helvetica", size=11)
    pdf.cell(0, 10, f"Generated: {datetime.datetime.now().strftime('%Y-%m-%d %H:%M:%S')}",
             new_x="LMARGIN", new_y="NEXT")
    pdf.ln(5)
    pdf.set_font("Helvetica", "B", 13)
    pdf.cell(0, 8, "Motion Parameters:", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", size=11)
    for k, v in parameters_dict.items():
        pdf.cell(0, 7, f"{k}: {v}", new_x="LMARGIN", new_y="NEXT")
    if notes:
        pdf.ln(4)
        pdf.set_font("Helvetica", "B", 13)
        pdf.cell(0, 7, "Notes:", new_x="LMARGIN", new_y="NEXT")
        pdf.set_font("Helvetica", size=11)
        pdf.multi_cell(0, 7, notes)
    chart_files = []
    for charts_dir in charts_dirs:
        for img in sorted(Path(charts_dir).glob("*.png")):
            chart_files.append(img)
    for img_path in chart_files:
        pdf.add_page()
        pdf.set_font("Helvetica", "B", 12)
        caption = img_path.stem.replace("_", " ").capitalize()
        pdf.cell(0, 10, caption, new_x="LMARGIN", new_y="NEXT", align="C")
        pdf.image(str(img_path), x=15, w=180)
        pdf.ln(3)
    pdf.output(str(output_pdf_path))
    print(f"PDF report saved to: {output_pdf_path}")

# ================
# 5. MAIN ENTRYPOINT
# ================

def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        description="Stepper ramp simulation - trapezoidal delay generation and analysis"
    )
    parser.add_argument(
        "--base-dir",
        type=str,
        default=str(DEFAULT_SETTINGS['base_dir']),
        help="Project base directory holding config/, data/ and results/"
    )
    parser.add_argument(
        "--config",
        type=str,
        default=DEFAULT_SETTINGS["config"],
        help="Name of config file to load from the config/ directory"
    )
    parser.add_argument(
        "--usecase",
        type=str,
        nargs="*",
        choices=list(USE_CASES.keys()) + ["all"],
        default=DEFAULT_SETTINGS["usecase"],
        help="Which use-case(s) to run (default: single_move)"
    )
    parser.add_argument(
        "--pdf-report",
        action="store_true", default=DEFAULT_SETTINGS["pdf_report"],
        help="Generate PDF report from latest results"
    )
    parser.add_argument(
        "--loglevel",
        type=str,
        default=DEFAULT_SETTINGS["loglevel"],
        help="Set logging level (DEBUG, INFO, WARNING, ERROR)"
    )
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)

    logging.basicConfig(level=getattr(logging, args.loglevel.upper()), format="%(levelname)s: %(message)s")
    base_dir = Path(args.base_dir)
    dirs = setup_dirs(base_dir)
    config_path = dirs["config"] / args.config
    config = load_config(config_path)

    try:
        axis = build_axis_parameters(config)
        build_profile(axis).enter_position_mode(axis.max_velocity, axis.num_steps)
    except (ValueError, OverflowError) as e:
        logging.error(f"Invalid axis configuration in {config_path}: {e}")
        sys.exit(1)

    params = dict(axis=axis)

    if "all" in args.usecase:
        run_cases = USE_CASES.values()
    else:
        run_cases = [USE_CASES[uc] for uc in args.usecase]
    for fn in run_cases:
        fn(config, dirs, params)

    if args.pdf_report:
        parameters_dict = {
            "Config File": str(config_path),
            "Axis": axis.name,
            "Target Acceleration (steps/s^2)": axis.target_acceleration,
            "Max Velocity (steps/s)": axis.max_velocity,
            "Steps": axis.num_steps,
            "Numeric Backend": axis.numeric,
        }
        if "velocity_sweep" in config:
            parameters_dict["Velocity Sweep Range (steps/s)"] = (
                f"{config['velocity_sweep'][0]} to {config['velocity_sweep'][1]}"
            )
        if "acceleration_sweep" in config:
            parameters_dict["Acceleration Sweep Range (steps/s^2)"] = (
                f"{config['acceleration_sweep'][0]} to {config['acceleration_sweep'][1]}"
            )
        config_name = config.get("name", "stepper")
        generate_pdf_report(
            parameters_dict=parameters_dict,
            charts_dirs=[dirs["single_move"], dirs["parametric"]],
            output_pdf_path=dirs["results"] / f"{config_name}_ramp_report.pdf",
            notes=f"Config: {config_name} | Automated batch run."
        )


if __name__ == "__main__":
    main()
