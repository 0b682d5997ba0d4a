import os

import pytest

from mission_planner.common.scenario.lanelet import Segment
from mission_planner.common.scenario.road_network import RoadNetworkGraph
from mission_planner.common.vehicle.vehicle import VehicleInfo
from mission_planner.interface.map_loader import load_map

DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), os.pardir, 'data')


def box_segment(segment_id, x0, x1, y_right, y_left, z0=0.0, z1=0.0, **kwargs) -> Segment:
    ''' Straight segment heading east between x0 and x1 '''
    left = [[x0, y_left, z0], [x1, y_left, z1]]
    right = [[x0, y_right, z0], [x1, y_right, z1]]
    return Segment(segment_id, left, right, **kwargs)


@pytest.fixture
def make_segment():
    return box_segment


@pytest.fixture
def small_vehicle() -> VehicleInfo:
    # footprint spans 0.5 m behind and 2.0 m ahead of the pose, 0.85 m to each side
    return VehicleInfo(wheel_base=1.0, wheel_tread=1.5, front_overhang=1.0, rear_overhang=0.5,
                       left_overhang=0.1, right_overhang=0.1)


@pytest.fixture
def straight_road() -> RoadNetworkGraph:
    ''' One 50 m long and 4 m wide segment along the x axis '''
    return RoadNetworkGraph([box_segment(1, 0.0, 50.0, -2.0, 2.0)])


@pytest.fixture
def two_lane_road() -> RoadNetworkGraph:
    ''' Two lanes of three 30 m segments (right 11-13, left 21-23), shoulder 31, parking lot 101 and space 201 '''
    return load_map(os.path.join(DATA_DIR, 'two_lane_road.yaml'))


@pytest.fixture
def ring_road() -> RoadNetworkGraph:
    ''' Closed counter-clockwise loop 1 (east) -> 2 (north) -> 3 (west) -> 4 (south) -> 1 '''
    east = Segment(1, [[0, 2], [20, 2]], [[0, -2], [20, -2]], successors=[2])
    north = Segment(2, [[18, 0], [18, 20]], [[22, 0], [22, 20]], successors=[3])
    west = Segment(3, [[20, 18], [0, 18]], [[20, 22], [0, 22]], successors=[4])
    south = Segment(4, [[2, 20], [2, 0]], [[-2, 20], [-2, 0]], successors=[1])
    return RoadNetworkGraph([east, north, west, south])
