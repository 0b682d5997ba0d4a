import logging

import yaml

from mission_planner.utils.errors import ConfigError

logger = logging.getLogger(__name__)


def load_config_file(filename) -> dict:
    # open config file
    with open(filename, 'r') as stream:
        try:
            configs = yaml.safe_load(stream)
        except yaml.YAMLError as exc:
            raise ConfigError(f"Cannot parse config file {filename}: {exc}")
    return configs or {}


class DefaultPlannerSettings(object):
    def __init__(self):
        self.goal_angle_threshold_deg = 45.0            # max deviation between goal heading and lane heading [deg]
        self.enable_correct_goal_pose = False           # True to snap the goal onto the closest centerline
        self.consider_no_drivable_lanes = False         # True to avoid lanes tagged as not drivable when possible
        self.check_footprint_inside_lanes = True        # True to reject goals whose footprint leaves the lanes
        self.footprint_search_margin = 2.0              # extra length searched beyond the vehicle front [m]
        self.lane_change_cost = 2.0                     # routing cost of a lane change [m]
        self.fine_centerline_resolution = 1.0           # centerline sampling of the goal correction [m]
        self.elevation_centerline_resolution = 5.0      # centerline sampling of the goal elevation [m]

    @classmethod
    def from_dict(cls, params: dict):
        settings = cls()
        for key, value in (params or {}).items():
            if not hasattr(settings, key):
                logger.warning(f"Unknown planner parameter '{key}' is ignored")
                continue
            default = getattr(settings, key)
            if isinstance(default, bool):
                if not isinstance(value, bool):
                    raise ConfigError(f"Planner parameter '{key}' must be a boolean, got {value!r}")
            elif isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ConfigError(f"Planner parameter '{key}' must be a number, got {value!r}")
            else:
                value = float(value)
            setattr(settings, key, value)
        return settings

    @classmethod
    def from_file(cls, filename):
        configs = load_config_file(filename)
        return cls.from_dict(configs.get('planner', {}))
