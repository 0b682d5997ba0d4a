import logging

import yaml

from mission_planner.common.scenario.lanelet import ParkingLot, ParkingSpace, Segment, SegmentType
from mission_planner.common.scenario.road_network import RoadNetworkGraph
from mission_planner.utils.errors import MapValidationError

logger = logging.getLogger(__name__)

SEGMENT_TYPES = {
    'road': SegmentType.ROAD,
    'shoulder': SegmentType.SHOULDER,
    'road_shoulder': SegmentType.SHOULDER,
    'parking': SegmentType.PARKING,
}


def segment_from_dict(params: dict) -> Segment:
    try:
        segment_type = SEGMENT_TYPES.get(str(params.get('type', 'road')).lower(), SegmentType.OTHER)
        return Segment(params['id'], params['left_bound'], params['right_bound'],
                       centerline=params.get('centerline'),
                       segment_type=segment_type,
                       successors=params.get('successors'),
                       predecessors=params.get('predecessors'),
                       adj_left=params.get('adj_left'),
                       adj_right=params.get('adj_right'),
                       adj_left_same_direction=params.get('adj_left_same_direction', True),
                       adj_right_same_direction=params.get('adj_right_same_direction', True),
                       lane_change_left=params.get('lane_change_left', False),
                       lane_change_right=params.get('lane_change_right', False),
                       drivable=params.get('drivable', True))
    except KeyError as err:
        raise MapValidationError(f"Segment {params.get('id')} misses the field {err}")
    except ValueError as err:
        raise MapValidationError(f"Segment {params.get('id')} is malformed: {err}")


def build_road_network(map_dict: dict, lane_change_cost: float = 2.0) -> RoadNetworkGraph:
    ''' Build a road network from the content of a YAML map

    Expected keys: `segments`, and optionally `parking_spaces` (`id`, `linestring`, `width`)
    and `parking_lots` (`id`, `polygon`).
    '''
    if not map_dict or 'segments' not in map_dict:
        raise MapValidationError("The map has no 'segments'")
    segments = [segment_from_dict(params) for params in map_dict['segments']]
    parking_spaces = [ParkingSpace(p['id'], p['linestring'], p['width']) for p in map_dict.get('parking_spaces') or []]
    parking_lots = [ParkingLot(p['id'], p['polygon']) for p in map_dict.get('parking_lots') or []]
    return RoadNetworkGraph(segments, parking_spaces, parking_lots, lane_change_cost=lane_change_cost)


def load_map(filename, lane_change_cost: float = 2.0) -> RoadNetworkGraph:
    with open(filename, 'r') as stream:
        try:
            map_dict = yaml.safe_load(stream)
        except yaml.YAMLError as exc:
            raise MapValidationError(f"Cannot parse map file {filename}: {exc}")
    road_network = build_road_network(map_dict, lane_change_cost)
    logger.info(f"Loaded map {filename}")
    return road_network
