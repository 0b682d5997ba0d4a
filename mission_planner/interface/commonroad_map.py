import logging

import numpy as np

from commonroad.common.file_reader import CommonRoadFileReader
from commonroad.scenario.lanelet import Lanelet, LaneletNetwork, LaneletType, LineMarking

from mission_planner.common.scenario.lanelet import ParkingLot, Segment, SegmentType
from mission_planner.common.scenario.road_network import RoadNetworkGraph

logger = logging.getLogger(__name__)

# lanelet types that are not meant for cars
NON_ROAD_TYPES = {LaneletType.SIDEWALK, LaneletType.CROSSWALK, LaneletType.BICYCLE_LANE}
# markings a lane change must not cross
SOLID_MARKINGS = {LineMarking.SOLID, LineMarking.BROAD_SOLID}


def _with_elevation(vertices: np.ndarray, elevation: float) -> np.ndarray:
    return np.hstack((vertices, np.full((len(vertices), 1), elevation)))


def _segment_type(lanelet: Lanelet) -> SegmentType:
    types = lanelet.lanelet_type or set()
    if LaneletType.SHOULDER in types:
        return SegmentType.SHOULDER
    if types & NON_ROAD_TYPES:
        return SegmentType.OTHER
    return SegmentType.ROAD


def from_lanelet_network(lanelet_network: LaneletNetwork, elevation: float = 0.0,
                         lane_change_cost: float = 2.0) -> RoadNetworkGraph:
    ''' Convert a CommonRoad lanelet network into a road network

    Parking lanelets become parking lots, shoulder lanelets become shoulder segments.
    CommonRoad maps are planar, every point gets the constant `elevation`.
    '''
    parking_lots = []
    lanelets = []
    for lanelet in lanelet_network.lanelets:
        if LaneletType.PARKING in (lanelet.lanelet_type or set()):
            vertices = np.vstack((lanelet.left_vertices, lanelet.right_vertices[::-1]))
            parking_lots.append(ParkingLot(lanelet.lanelet_id, vertices))
        else:
            lanelets.append(lanelet)
    known_ids = {lanelet.lanelet_id for lanelet in lanelets}

    def known(ids):
        return [i for i in (ids or []) if i in known_ids]

    def neighbor(i):
        return i if i in known_ids else None

    segments = []
    for lanelet in lanelets:
        segments.append(Segment(
            lanelet.lanelet_id,
            _with_elevation(lanelet.left_vertices, elevation),
            _with_elevation(lanelet.right_vertices, elevation),
            centerline=_with_elevation(lanelet.center_vertices, elevation),
            segment_type=_segment_type(lanelet),
            successors=known(lanelet.successor),
            predecessors=known(lanelet.predecessor),
            adj_left=neighbor(lanelet.adj_left),
            adj_right=neighbor(lanelet.adj_right),
            adj_left_same_direction=bool(lanelet.adj_left_same_direction),
            adj_right_same_direction=bool(lanelet.adj_right_same_direction),
            lane_change_left=lanelet.line_marking_left_vertices not in SOLID_MARKINGS,
            lane_change_right=lanelet.line_marking_right_vertices not in SOLID_MARKINGS,
            drivable=LaneletType.RESTRICTED not in (lanelet.lanelet_type or set()),
        ))
    logger.debug(f"Converted {len(segments)} lanelets and {len(parking_lots)} parking lots")
    return RoadNetworkGraph(segments, parking_lots=parking_lots, lane_change_cost=lane_change_cost)


def load_commonroad_map(filename, elevation: float = 0.0, lane_change_cost: float = 2.0) -> RoadNetworkGraph:
    scenario, _ = CommonRoadFileReader(filename).open()
    return from_lanelet_network(scenario.lanelet_network, elevation, lane_change_cost)
