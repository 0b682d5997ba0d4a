import logging
import os

import numpy as np
import pytest

from mission_planner.common.vehicle.vehicle import VehicleInfo
from mission_planner.utils.config import DefaultPlannerSettings, load_config_file
from mission_planner.utils.errors import ConfigError
from mission_planner.utils.logger import initialize_logger, release_logger

CONFIG_FILE = os.path.join(os.path.dirname(os.path.abspath(__file__)), os.pardir, os.pardir, 'config',
                           'default_planner.yaml')


def test_default_settings():
    settings = DefaultPlannerSettings()
    assert settings.goal_angle_threshold_deg == 45.0
    assert not settings.enable_correct_goal_pose
    assert not settings.consider_no_drivable_lanes
    assert settings.check_footprint_inside_lanes
    assert settings.footprint_search_margin == 2.0


def test_settings_from_dict(caplog):
    with caplog.at_level(logging.WARNING):
        settings = DefaultPlannerSettings.from_dict({'goal_angle_threshold_deg': 30,
                                                     'enable_correct_goal_pose': True,
                                                     'max_speed': 3.0})
    assert settings.goal_angle_threshold_deg == 30.0
    assert settings.enable_correct_goal_pose
    assert not hasattr(settings, 'max_speed')
    assert 'max_speed' in caplog.text


@pytest.mark.parametrize("params", [{'check_footprint_inside_lanes': 'yes'},
                                    {'footprint_search_margin': 'far'},
                                    {'lane_change_cost': True}])
def test_settings_with_wrong_types(params):
    with pytest.raises(ConfigError):
        DefaultPlannerSettings.from_dict(params)


def test_settings_from_file(tmp_path):
    config_file = tmp_path / 'planner.yaml'
    config_file.write_text("planner:\n  consider_no_drivable_lanes: true\n  footprint_search_margin: 0.5\n")
    settings = DefaultPlannerSettings.from_file(str(config_file))
    assert settings.consider_no_drivable_lanes
    assert settings.footprint_search_margin == 0.5


def test_shipped_config_matches_defaults():
    configs = load_config_file(CONFIG_FILE)
    assert vars(DefaultPlannerSettings.from_dict(configs['planner'])) == vars(DefaultPlannerSettings())
    vehicle_info = VehicleInfo.from_dict(configs['vehicle'])
    assert vehicle_info.max_longitudinal_offset == pytest.approx(3.79)


def test_unreadable_config_file(tmp_path):
    config_file = tmp_path / 'broken.yaml'
    config_file.write_text("planner: [unclosed\n")
    with pytest.raises(ConfigError):
        load_config_file(str(config_file))


def test_vehicle_info():
    with pytest.raises(ConfigError):
        VehicleInfo.from_dict({'wheel_base': 'long'})
    vehicle_info = VehicleInfo.from_dict({'wheel_base': 3, 'rear_overhang': 1})
    assert vehicle_info.vehicle_length == pytest.approx(5.0)
    footprint = vehicle_info.create_footprint(margin=0.5)
    assert footprint.shape == (7, 2)
    assert np.allclose(footprint[0], footprint[-1])
    assert footprint[:, 0].max() == pytest.approx(4.5)
    assert footprint[:, 0].min() == pytest.approx(-1.5)


def test_logger_writes_to_file(tmp_path):
    config = {'logging': {'level': 'DEBUG', 'log_to_console': False, 'log_to_file': True,
                          'log_file_dir': str(tmp_path), 'log_file_name': 'planner'}}
    logger = initialize_logger('mission_planner_test', config)
    logger.info("route planned")
    release_logger(logger)
    assert not logger.handlers
    with open(os.path.join(str(tmp_path), 'planner.log')) as log_file:
        assert "route planned" in log_file.read()
