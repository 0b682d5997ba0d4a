from typing import Dict, List, Set

from mission_planner.common.scenario.road_network import RoadNetworkGraph
from mission_planner.common.scenario.route import RouteSection


def remove_consecutive_duplicates(segment_ids: List[int]) -> List[int]:
    result = []
    for segment_id in segment_ids:
        if result and result[-1] == segment_id:
            continue
        result.append(segment_id)
    return result


class RouteSectionBuilder(object):
    """ Turns a sequence of segment ids into route sections

    Every section holds the preferred segment of the path at that point and the
    segments beside it that the route may use (the path itself and the lanes a lane
    change from the path can reach).
    """
    def __init__(self, road_network: RoadNetworkGraph):
        self.road_network = road_network

    def route_lanelet_ids(self, segment_ids: List[int]) -> Set[int]:
        ids = set(segment_ids)
        for segment_id in segment_ids:
            ids.update(self.road_network.get_lane_change_neighbors(segment_id))
        return ids

    def build(self, segment_ids: List[int]) -> List[RouteSection]:
        sequence = remove_consecutive_duplicates(segment_ids)
        route_ids = self.route_lanelet_ids(sequence)

        sections: List[RouteSection] = []
        for segment_id in sequence:
            if sections:
                previous = sections[-1]
                # a lane change in the path stays in the same section, the target lane becomes preferred
                if segment_id in self.road_network.get_lateral_neighbors(previous.preferred_primitive):
                    sections[-1] = RouteSection(segment_id, previous.primitives)
                    continue
            primitives = [i for i in self.road_network.get_lateral_neighbors(segment_id) if i in route_ids]
            sections.append(RouteSection(segment_id, primitives))
        return sections

    @staticmethod
    def has_loop(sections: List[RouteSection]) -> bool:
        ''' True if a segment id appears in two sections that are not next to each other '''
        first_seen: Dict[int, int] = {}
        for index, section in enumerate(sections):
            for primitive in section.primitives:
                first_seen.setdefault(primitive, index)
                if index - first_seen[primitive] > 1:
                    return True
        return False
