from enum import Enum
from typing import List, Optional

import numpy as np
from shapely.geometry import LineString, Polygon

from mission_planner.common.geometry.polygon_utils import arc_lengths

class SegmentType(Enum):
    OTHER = 0
    ROAD = 1
    SHOULDER = 2
    PARKING = 3


def _as_3d(points) -> np.ndarray:
    points = np.asarray(points, dtype=float)
    if points.ndim != 2 or points.shape[0] < 2:
        raise ValueError(f"a bound needs at least 2 points, got shape {points.shape}")
    if points.shape[1] == 2:
        points = np.hstack((points, np.zeros((points.shape[0], 1))))
    return points[:, :3]


def _resample_by_ratio(points: np.ndarray, ratios: np.ndarray) -> np.ndarray:
    s = arc_lengths(points)
    if s[-1] == 0.0:
        return np.repeat(points[:1], len(ratios), axis=0)
    return np.column_stack([np.interp(ratios * s[-1], s, points[:, k]) for k in range(3)])


class Segment(object):
    """ Segment (lanelet)

    Directed drivable primitive of the road network. Owned by `RoadNetworkGraph`,
    every other component refers to it by `id`.

    Attributes
    ------
        `id` (`int`): unique id of the segment
        `left_bound`, `right_bound` (`np.ndarray`): N x 3 boundary points in driving direction
        `centerline` (`np.ndarray`): N x 3 center points, averaged from the bounds if not given
        `polygon` (`Polygon`): 2D drivable area
        `segment_type` (`SegmentType`): road / shoulder / ...
        `drivable` (`bool`): False for lanes tagged as not drivable
        `successors`, `predecessors` (`list[int]`): longitudinal neighbours
        `adj_left`, `adj_right` (`int`): lateral neighbours, `None` if there is none
        `lane_change_left`, `lane_change_right` (`bool`): lane change to the lateral neighbour is permitted
        `length` (`float`): 2D length of the centerline [m]
    """
    def __init__(self, segment_id: int, left_bound, right_bound, centerline=None,
                 segment_type: SegmentType = SegmentType.ROAD,
                 successors: Optional[List[int]] = None, predecessors: Optional[List[int]] = None,
                 adj_left: Optional[int] = None, adj_right: Optional[int] = None,
                 adj_left_same_direction: bool = True, adj_right_same_direction: bool = True,
                 lane_change_left: bool = False, lane_change_right: bool = False,
                 drivable: bool = True):
        self.id: int = int(segment_id)
        self.left_bound: np.ndarray = _as_3d(left_bound)
        self.right_bound: np.ndarray = _as_3d(right_bound)
        if centerline is None:
            n = max(len(self.left_bound), len(self.right_bound))
            ratios = np.linspace(0.0, 1.0, n)
            centerline = (_resample_by_ratio(self.left_bound, ratios) + _resample_by_ratio(self.right_bound, ratios)) / 2.0
        self.centerline: np.ndarray = _as_3d(centerline)
        self.polygon: Polygon = Polygon(np.vstack((self.left_bound[:, :2], self.right_bound[::-1, :2])))
        self.segment_type: SegmentType = segment_type
        self.drivable: bool = drivable
        self.successors: List[int] = list(successors or [])
        self.predecessors: List[int] = list(predecessors or [])
        self.adj_left = adj_left
        self.adj_right = adj_right
        self.adj_left_same_direction = adj_left_same_direction
        self.adj_right_same_direction = adj_right_same_direction
        self.lane_change_left = lane_change_left
        self.lane_change_right = lane_change_right
        self.length: float = float(arc_lengths(self.centerline)[-1])

    @property
    def bounding_box(self):
        return self.polygon.bounds

    @property
    def is_road(self) -> bool:
        return self.segment_type == SegmentType.ROAD

    @property
    def is_shoulder(self) -> bool:
        return self.segment_type == SegmentType.SHOULDER

    def __repr__(self):
        return f"Segment(id={self.id}, type={self.segment_type.name}, length={self.length:.2f})"


class ParkingSpace(object):
    """ Parking space given as a line string with a width """
    def __init__(self, parking_id: int, linestring, width: float):
        self.id = int(parking_id)
        self.linestring = np.asarray(linestring, dtype=float)
        self.width = float(width)

    @property
    def polygon(self) -> Optional[Polygon]:
        if len(self.linestring) < 2 or self.width <= 0.0:
            return None
        line = LineString(self.linestring[:, :2])
        if line.length == 0.0:
            return None
        return line.buffer(self.width / 2.0, cap_style='flat', join_style='mitre')


class ParkingLot(object):
    def __init__(self, parking_id: int, vertices):
        self.id = int(parking_id)
        self.polygon = Polygon(np.asarray(vertices, dtype=float)[:, :2])
