import matplotlib

matplotlib.use("Agg")

import pytest  # noqa: E402

from rosmodels.data import prepare_model_data, simulate_ros_data  # noqa: E402
from rosmodels.explorer.parameters import ExplorerConfig  # noqa: E402


@pytest.fixture
def explorer_config():
    return ExplorerConfig()


@pytest.fixture
def ros_frame():
    return simulate_ros_data(num_observations=60, seed=11)


@pytest.fixture
def grouped_ros_frame():
    return simulate_ros_data(num_observations=80, num_groups=4, seed=7)


@pytest.fixture
def ros_model_data(ros_frame):
    return prepare_model_data(ros_frame)


@pytest.fixture
def grouped_ros_model_data(grouped_ros_frame):
    return prepare_model_data(grouped_ros_frame, group_column="fire")
