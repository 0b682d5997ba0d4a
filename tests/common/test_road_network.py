import pytest

from mission_planner.common.scenario.lanelet import Segment, SegmentType
from mission_planner.common.scenario.road_network import RoadNetworkGraph
from mission_planner.common.scenario.route import Pose
from mission_planner.utils.errors import MapValidationError


# ---------- map validation


def test_zero_length_segment_is_rejected(make_segment):
    degenerate = Segment(2, [[10, 2], [10, 2]], [[10, -2], [10, -2]])
    with pytest.raises(MapValidationError):
        RoadNetworkGraph([make_segment(1, 0, 10, -2, 2, successors=[2]), degenerate])


def test_unknown_and_duplicated_ids_are_rejected(make_segment):
    with pytest.raises(MapValidationError):
        RoadNetworkGraph([make_segment(1, 0, 10, -2, 2, successors=[7])])
    with pytest.raises(MapValidationError):
        RoadNetworkGraph([make_segment(1, 0, 10, -2, 2), make_segment(1, 10, 20, -2, 2)])


def test_predecessors_are_linked(two_lane_road):
    assert two_lane_road.get_segment(12).predecessors == [11]
    assert [s.id for s in two_lane_road.get_previous_segments(13)] == [12]
    assert [s.id for s in two_lane_road.get_next_segments(11)] == [12]


# ---------- queries


def test_segments_at_point(two_lane_road):
    assert [s.id for s in two_lane_road.get_road_segments_at(Pose(15.0, -1.0))] == [11]
    assert [s.id for s in two_lane_road.get_road_segments_at(Pose(15.0, 1.0))] == [21]
    # shared boundary belongs to both lanes
    assert [s.id for s in two_lane_road.get_road_segments_at(Pose(15.0, 0.0))] == [11, 21]
    assert [s.id for s in two_lane_road.get_shoulder_segments_at(Pose(70.0, -4.5))] == [31]
    assert two_lane_road.get_road_segments_at(Pose(70.0, -4.5)) == []


def test_lateral_queries(two_lane_road):
    assert two_lane_road.get_lateral_neighbors(11) == [21, 11]
    assert two_lane_road.get_lateral_neighbors(23) == [23, 13]
    assert two_lane_road.get_lane_change_neighbors(12) == [22]
    assert [s.id for s in two_lane_road.get_adjacent_shoulders(13)] == [31]
    assert two_lane_road.get_segment(31).segment_type == SegmentType.SHOULDER
    assert not two_lane_road.is_road_segment(31)


def test_routing_graph_edges(two_lane_road):
    graph = two_lane_road.graph
    assert graph[11][12]['relation'] == 'successor'
    assert graph[11][12]['weight'] == pytest.approx(30.0)
    assert graph[11][21]['relation'] == 'lane_change'
    assert 31 not in graph


def test_nearest_until_visits_in_increasing_box_distance(two_lane_road):
    visited = []

    def visit(bbox_distance, segment):
        visited.append((bbox_distance, segment.id))
        return False

    assert two_lane_road.nearest_until(Pose(45.0, 10.0), visit) is None
    distances = [d for d, _ in visited]
    assert distances == sorted(distances)
    assert sorted(i for _, i in visited) == [11, 12, 13, 21, 22, 23, 31]


def test_nearest_until_returns_segment_where_it_stopped(two_lane_road):
    stopped = two_lane_road.nearest_until(Pose(15.0, -1.0), lambda d, s: True)
    assert stopped.id == 11


def test_closest_segment_prefers_aligned_lane(make_segment):
    # two overlapping segments with opposite headings
    forward = make_segment(1, 0, 10, -2, 2)
    backward = Segment(2, [[10, -2], [0, -2]], [[10, 2], [0, 2]])
    road_network = RoadNetworkGraph([forward, backward])
    segments = road_network.get_road_segments_at(Pose(5.0, 0.0))
    assert road_network.get_closest_segment(segments, Pose(5.0, 0.0, 0.0, 3.0)).id == 2
    assert road_network.get_closest_segment(segments, Pose(5.0, 0.0, 0.0, 0.1)).id == 1
    assert road_network.get_closest_segment([], Pose(5.0, 0.0)) is None


# ---------- path search


def test_plan_path_along_one_lane(two_lane_road):
    path = two_lane_road.plan_path_between_checkpoints(Pose(5.0, -1.75), Pose(80.0, -1.75))
    assert path == [11, 12, 13]


def test_plan_path_with_lane_change(two_lane_road):
    path = two_lane_road.plan_path_between_checkpoints(Pose(5.0, -1.75), Pose(80.0, 1.75))
    assert path[0] == 11
    assert path[-1] == 23
    for a, b in zip(path[:-1], path[1:]):
        assert two_lane_road.graph.has_edge(a, b)


def test_plan_path_fails_against_driving_direction(two_lane_road):
    assert two_lane_road.plan_path_between_checkpoints(Pose(80.0, -1.75), Pose(5.0, -1.75)) is None


@pytest.fixture
def no_drivable_detour(make_segment):
    # 1 -> 2 (not drivable) -> 4 is shorter than the detour 1 -> 3 -> 4
    return [
        make_segment(1, 0, 10, -1, 1, successors=[2, 3]),
        make_segment(2, 10, 20, -1, 1, successors=[4], drivable=False),
        make_segment(3, 10, 40, 5, 7, successors=[4]),
        make_segment(4, 20, 30, -1, 1),
    ]


def test_no_drivable_lanes_are_avoided_when_requested(no_drivable_detour):
    road_network = RoadNetworkGraph(no_drivable_detour)
    start, goal = Pose(5.0, 0.0), Pose(25.0, 0.0)
    assert road_network.plan_path_between_checkpoints(start, goal) == [1, 2, 4]
    assert road_network.plan_path_between_checkpoints(start, goal, consider_no_drivable_lanes=True) == [1, 3, 4]


def test_no_drivable_lane_is_kept_without_detour(make_segment):
    road_network = RoadNetworkGraph([
        make_segment(1, 0, 10, -1, 1, successors=[2]),
        make_segment(2, 10, 20, -1, 1, successors=[4], drivable=False),
        make_segment(4, 20, 30, -1, 1),
    ])
    path = road_network.plan_path_between_checkpoints(Pose(5.0, 0.0), Pose(25.0, 0.0), consider_no_drivable_lanes=True)
    assert path == [1, 2, 4]
