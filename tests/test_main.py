import sys
from pathlib import Path
sys.path.append(str(Path(__file__).resolve().parents[1] / 'scripts'))

import pandas as pd
import pytest
import main


def test_load_config_missing_file(tmp_path):
    with pytest.raises(SystemExit):
        main.load_config(tmp_path / "missing.json")


def test_load_config_invalid_json(tmp_path):
    path = tmp_path / "broken.json"
    path.write_text("{not json")
    with pytest.raises(SystemExit):
        main.load_config(path)


def test_load_config_missing_axis_keys(tmp_path):
    path = tmp_path / "partial.json"
    path.write_text('{"axis": {"max_velocity": 1000}}')
    with pytest.raises(SystemExit):
        main.load_config(path)


def test_build_axis_parameters_defaults():
    config = {"axis": {"target_acceleration": 6000, "max_velocity": 1000, "num_steps": 200}}
    axis = main.build_axis_parameters(config)
    assert axis.name == "Axis"
    assert axis.numeric == "float"
    assert axis.num_steps == 200


def test_zero_acceleration_config_exits(base_dir):
    (base_dir / "config" / "zero.json").write_text(
        '{"axis": {"target_acceleration": 0, "max_velocity": 1000, "num_steps": 200}}'
    )
    with pytest.raises(SystemExit):
        main.main(["--base-dir", str(base_dir), "--config", "zero.json"])


def test_negative_acceleration_on_unsigned_backend_exits(base_dir):
    (base_dir / "config" / "negative.json").write_text(
        '{"axis": {"target_acceleration": -6000, "max_velocity": 1000,'
        ' "num_steps": 200, "numeric": "ufixed32.32"}}'
    )
    with pytest.raises(SystemExit):
        main.main(["--base-dir", str(base_dir), "--config", "negative.json"])


def test_single_move_usecase_writes_results(base_dir):
    main.main(["--base-dir", str(base_dir), "--config", "baseline.json", "--usecase", "single_move"])

    out = base_dir / "results" / "single_move"
    df = pd.read_csv(out / "delays.csv")
    assert len(df) == 200
    assert df["delay_s"].min() >= 0.001 - 1e-12
    assert (out / "velocity_accel_vs_time.png").exists()
    assert (out / "phase_breakdown.png").exists()


def test_all_usecases_with_pdf_report(base_dir):
    main.main([
        "--base-dir", str(base_dir), "--config", "baseline.json",
        "--usecase", "all", "--pdf-report",
    ])

    assert (base_dir / "results" / "parametric" / "numeric_comparison.csv").exists()
    assert (base_dir / "results" / "parametric" / "axis_table_breakdown.png").exists()
    assert (base_dir / "results" / "test_baseline_ramp_report.pdf").exists()


def test_parametric_usecase_writes_sweep_charts(base_dir):
    (base_dir / "config" / "grid.json").write_text(
        '{"name": "grid",'
        ' "axis": {"target_acceleration": 6000, "max_velocity": 1000, "num_steps": 200},'
        ' "velocity_sweep": [500, 2000, 3],'
        ' "acceleration_sweep": [2000, 8000, 3],'
        ' "velocity_2d_sweep": [500, 2000, 3],'
        ' "acceleration_2d_sweep": [2000, 8000, 3]}'
    )
    main.main(["--base-dir", str(base_dir), "--config", "grid.json", "--usecase", "parametric"])

    out = base_dir / "results" / "parametric"
    assert (out / "velocity_sweep.png").exists()
    assert (out / "acceleration_sweep.png").exists()
    assert (out / "velocity_accel_map.png").exists()
