import matplotlib
import pytest

matplotlib.use("Agg")


@pytest.fixture
def base_dir(tmp_path):
    """Create a temporary project layout with a baseline config and axis table"""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    data_dir = tmp_path / "data"
    data_dir.mkdir()

    (config_dir / "baseline.json").write_text(
        '{"name": "test_baseline",'
        ' "axis": {"name": "Test Axis", "target_acceleration": 6000,'
        ' "max_velocity": 1000, "num_steps": 200},'
        ' "velocity_sweep": [500, 2000, 3],'
        ' "acceleration_sweep": [2000, 8000, 3],'
        ' "numeric_backends": ["float", "float32"]}'
    )
    (data_dir / "axis_data.csv").write_text(
        "Axis,Target Acceleration (steps/s^2),Max Velocity (steps/s),Steps\n"
        "X,6000,1000,200\n"
        "Y,3000,500,50\n"
    )
    return tmp_path
