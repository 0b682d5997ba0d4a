import numpy as np

from mission_planner.utils.errors import ConfigError


class VehicleInfo(object):
    """ class that stores vehicle parameters

    Used by the goal validator and the pose refiner. All lengths are in [m], the
    base_link frame is centered on the rear axle.
    """
    KEYS = ('wheel_base', 'wheel_tread', 'front_overhang', 'rear_overhang', 'left_overhang', 'right_overhang')

    def __init__(self, wheel_base: float = 2.79, wheel_tread: float = 1.64, front_overhang: float = 1.0,
                 rear_overhang: float = 1.1, left_overhang: float = 0.128, right_overhang: float = 0.128,
                 vehicle_height: float = 2.5):
        self.wheel_base = wheel_base                                            # distance between front and rear axle [m]
        self.wheel_tread = wheel_tread                                          # distance between left and right wheels [m]
        self.front_overhang = front_overhang                                    # front axle to front bumper [m]
        self.rear_overhang = rear_overhang                                      # rear axle to rear bumper [m]
        self.left_overhang = left_overhang                                      # left wheel to left side [m]
        self.right_overhang = right_overhang                                    # right wheel to right side [m]
        self.vehicle_height = vehicle_height

        # derived dimensions
        self.vehicle_length = self.front_overhang + self.wheel_base + self.rear_overhang
        self.vehicle_width = self.wheel_tread + self.left_overhang + self.right_overhang
        self.max_longitudinal_offset = self.front_overhang + self.wheel_base   # base_link to front bumper [m]
        self.min_longitudinal_offset = -self.rear_overhang                      # base_link to rear bumper [m]
        self.max_lateral_offset = self.wheel_tread / 2.0 + self.left_overhang
        self.min_lateral_offset = -(self.wheel_tread / 2.0 + self.right_overhang)

    @classmethod
    def from_dict(cls, params: dict):
        values = {}
        for key in cls.KEYS + ('vehicle_height',):
            if key not in params:
                continue
            try:
                values[key] = float(params[key])
            except (TypeError, ValueError):
                raise ConfigError(f"Vehicle parameter '{key}' must be a number, got {params[key]!r}")
        return cls(**values)

    def create_footprint(self, margin: float = 0.0, lat_margin: float = 0.0) -> np.ndarray:
        ''' Closed footprint ring in base_link frame

        front left -> front right -> middle right -> rear right -> rear left -> middle left -> front left
        '''
        x_front = self.max_longitudinal_offset + margin
        x_center = self.wheel_base / 2.0
        x_rear = self.min_longitudinal_offset - margin
        y_left = self.max_lateral_offset + lat_margin
        y_right = self.min_lateral_offset - lat_margin
        return np.array([
            (x_front, y_left),
            (x_front, y_right),
            (x_center, y_right),
            (x_rear, y_right),
            (x_rear, y_left),
            (x_center, y_left),
            (x_front, y_left),
        ])

