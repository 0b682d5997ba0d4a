import os

import numpy as np
import pytest

from mission_planner.common.scenario.lanelet import SegmentType
from mission_planner.interface.map_loader import build_road_network, load_map
from mission_planner.utils.errors import MapValidationError

DATA_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), os.pardir, os.pardir, 'data')


def test_load_yaml_map():
    road_network = load_map(os.path.join(DATA_DIR, 'two_lane_road.yaml'))
    assert len(road_network.segments) == 7
    assert [p.id for p in road_network.parking_spaces] == [201]
    assert [p.id for p in road_network.parking_lots] == [101]
    segment = road_network.get_segment(12)
    assert segment.length == pytest.approx(30.0)
    assert np.allclose(segment.centerline[0], [30.0, -1.75, 0.3])
    assert road_network.get_segment(31).segment_type == SegmentType.SHOULDER


def test_segment_types_and_defaults():
    road_network = build_road_network({'segments': [
        {'id': 1, 'left_bound': [[0, 1], [10, 1]], 'right_bound': [[0, -1], [10, -1]]},
        {'id': 2, 'type': 'sidewalk', 'left_bound': [[0, 3], [10, 3]], 'right_bound': [[0, 1], [10, 1]]},
    ]})
    assert road_network.get_segment(1).is_road
    assert road_network.get_segment(2).segment_type == SegmentType.OTHER
    assert road_network.get_segment(1).left_bound.shape == (2, 3)


@pytest.mark.parametrize("map_dict", [
    {},
    {'segments': [{'id': 1, 'left_bound': [[0, 1], [10, 1]]}]},
    {'segments': [{'id': 1, 'left_bound': [[0, 1]], 'right_bound': [[0, -1]]}]},
])
def test_malformed_maps(map_dict):
    with pytest.raises(MapValidationError):
        build_road_network(map_dict)
