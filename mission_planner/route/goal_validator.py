import logging
import math
from enum import Enum, unique
from typing import List, Optional

from shapely.geometry import Polygon
from shapely.ops import unary_union

from mission_planner.common.geometry.math_utils import angle_diff, deg2rad
from mission_planner.common.geometry.polygon_utils import distance_to_polygon, footprint_at, is_on, lanelet_angle_at
from mission_planner.common.scenario.lanelet import Segment
from mission_planner.common.scenario.road_network import RoadNetworkGraph
from mission_planner.common.scenario.route import Pose
from mission_planner.common.vehicle.vehicle import VehicleInfo

logger = logging.getLogger(__name__)


@unique
class GoalFailure(Enum):
    NONE = 'NONE'
    NO_ROAD_SEGMENT = 'NO_ROAD_SEGMENT'
    FOOTPRINT_EXCEEDS_LANE = 'FOOTPRINT_EXCEEDS_LANE'
    INVALID_ANGLE_OR_POSITION = 'INVALID_ANGLE_OR_POSITION'


class GoalValidator(object):
    """ Decides whether a goal pose is admissible

    The checks run in this order and stop at the first acceptance:

    1. the goal lies on a shoulder and is aligned with it
    2. the road segment at (or nearest to) the goal is resolved, no road segment means rejection
    3. optionally, the vehicle footprint at the goal must fit into the lanes leading to
       and following the goal, unless the goal is inside a parking lot
    4. the goal lies on the road segment and is aligned with it
    5. the goal lies in a parking space or a parking lot (any orientation)
    """
    def __init__(self, road_network: RoadNetworkGraph, vehicle_info: VehicleInfo,
                 goal_angle_threshold_deg: float = 45.0, check_footprint_inside_lanes: bool = True,
                 footprint_search_margin: float = 2.0):
        self.road_network = road_network
        self.vehicle_info = vehicle_info
        self.goal_angle_threshold_deg = goal_angle_threshold_deg
        self.check_footprint_inside_lanes = check_footprint_inside_lanes
        self.footprint_search_margin = footprint_search_margin
        # debug output of the last validation
        self.goal_footprint: Optional[Polygon] = None
        self.last_failure = GoalFailure.NONE

    def _is_aligned(self, segment: Segment, goal: Pose) -> bool:
        lane_yaw = lanelet_angle_at(segment.centerline, goal)
        return angle_diff(lane_yaw, goal.yaw) < deg2rad(self.goal_angle_threshold_deg)

    def find_nearest_road_segment(self, goal: Pose) -> Optional[Segment]:
        ''' Branch and bound search of the road segment closest to `goal` over the whole map '''
        closest = None
        closest_dist = math.inf

        def visit(bbox_distance: float, segment: Segment) -> bool:
            nonlocal closest, closest_dist
            # boxes come in increasing distance, none of the remaining ones can be closer
            if bbox_distance > closest_dist:
                return True
            dist = distance_to_polygon(segment.polygon, goal)
            if segment.is_road and dist < closest_dist:
                closest_dist = dist
                closest = segment
            return False

        self.road_network.nearest_until(goal, visit)
        return closest

    def combine_segments_with_shoulder(self, segment_ids: List[int]):
        ''' Union of the segment polygons and of the shoulders beside them '''
        polygons = []
        for segment_id in segment_ids:
            polygons.append(self.road_network.get_segment(segment_id).polygon)
            polygons.extend(s.polygon for s in self.road_network.get_adjacent_shoulders(segment_id))
        return unary_union(polygons)

    def check_goal_footprint_inside_lanes(self, current_id: int, combined_prev_polygon, goal_footprint: Polygon) -> bool:
        ''' Depth first search over the segments following `current_id`

        Every branch grows its own combined polygon and running length. A branch stops
        growing as soon as its length exceeds the front offset of the vehicle plus the
        search margin; the footprint is tested against the polygon at that point.
        '''
        max_length = self.vehicle_info.max_longitudinal_offset + self.footprint_search_margin
        # frame: (segment id, combined polygon, length added after the goal segment)
        stack = [(current_id, combined_prev_polygon, 0.0)]
        while stack:
            segment_id, combined, length = stack.pop()
            if goal_footprint.within(combined):
                return True
            following = self.road_network.get_next_segments(segment_id)
            # reversed so that the first successor is expanded first
            for next_segment in reversed(following):
                next_length = length + next_segment.length
                next_combined = unary_union([combined, self.combine_segments_with_shoulder([next_segment.id])])
                if max_length < next_length:
                    if goal_footprint.within(next_combined):
                        return True
                else:
                    stack.append((next_segment.id, next_combined, next_length))
        return False

    def is_in_parking_space(self, goal: Pose) -> bool:
        for parking_space in self.road_network.parking_spaces:
            polygon = parking_space.polygon
            if polygon is None:
                continue
            if is_on(polygon, goal):
                return True
        return False

    def is_in_parking_lot(self, goal: Pose) -> bool:
        return any(is_on(parking_lot.polygon, goal) for parking_lot in self.road_network.parking_lots)

    def is_goal_valid(self, goal: Pose, preceding_segment_ids: List[int]) -> bool:
        self.last_failure = GoalFailure.NONE

        # check if goal is in a shoulder segment
        shoulder = self.road_network.get_closest_segment(self.road_network.get_shoulder_segments_at(goal), goal)
        if shoulder is not None and self._is_aligned(shoulder, goal):
            return True

        closest = self.road_network.get_closest_segment(self.road_network.get_road_segments_at(goal), goal)
        if closest is None:
            # no road segment directly at the goal, find the closest one
            closest = self.find_nearest_road_segment(goal)
            if closest is None:
                logger.warning("No road segment found around the goal")
                self.last_failure = GoalFailure.NO_ROAD_SEGMENT
                return False

        self.goal_footprint = footprint_at(self.vehicle_info.create_footprint(), goal)

        # check if goal footprint exceeds lane when the goal isn't in a parking lot
        if self.check_footprint_inside_lanes:
            combined_prev_polygon = self.combine_segments_with_shoulder(preceding_segment_ids)
            if not self.check_goal_footprint_inside_lanes(closest.id, combined_prev_polygon, self.goal_footprint) \
                    and not self.is_in_parking_lot(goal):
                logger.warning("Goal's footprint exceeds lane!")
                self.last_failure = GoalFailure.FOOTPRINT_EXCEEDS_LANE
                return False

        if is_on(closest.polygon, goal) and self._is_aligned(closest, goal):
            return True

        if self.is_in_parking_space(goal):
            return True

        if self.is_in_parking_lot(goal):
            return True

        logger.warning(f"Goal {goal} is neither on a lane with an acceptable angle nor in a parking area")
        self.last_failure = GoalFailure.INVALID_ANGLE_OR_POSITION
        return False
