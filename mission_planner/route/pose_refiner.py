import logging
import math

from mission_planner.common.geometry.polygon_utils import (generate_fine_centerline, lanelet_angle_at,
                                                           nearest_index, project_to_linestring)
from mission_planner.common.scenario.road_network import RoadNetworkGraph
from mission_planner.common.scenario.route import Pose, RouteSection
from mission_planner.common.vehicle.vehicle import VehicleInfo

logger = logging.getLogger(__name__)


class PoseRefiner(object):
    """ Moves goal poses onto the lane they are placed on """
    def __init__(self, road_network: RoadNetworkGraph, lateral_resolution: float = 1.0,
                 elevation_resolution: float = 5.0):
        self.road_network = road_network
        self.lateral_resolution = lateral_resolution            # fine centerline sampling for the lateral correction [m]
        self.elevation_resolution = elevation_resolution        # fine centerline sampling for the elevation [m]

    def refine_lateral(self, pose: Pose, vehicle_info: VehicleInfo) -> Pose:
        ''' Snap `pose` to the closest centerline sample of the segment it lies on

        The sample is shifted along the lane normal by half the difference of the right
        and left overhangs so both sides of the vehicle keep the same clearance. The
        heading of the result is the lane heading. `pose` is returned unchanged when it
        is not on any segment.
        '''
        closest = self.road_network.get_closest_segment_with_constraints(
            self.road_network.all_segments(), pose, dist_threshold=0.0)
        if closest is None:
            logger.debug(f"{pose} is not on any segment, skip the correction")
            return pose

        fine_centerline = generate_fine_centerline(closest, self.lateral_resolution)
        lane_yaw = lanelet_angle_at(fine_centerline, pose)
        nearest_point = fine_centerline[nearest_index(fine_centerline, pose)]

        shift_length = (vehicle_info.right_overhang - vehicle_info.left_overhang) / 2.0
        delta_x = -shift_length * math.sin(lane_yaw)
        delta_y = shift_length * math.cos(lane_yaw)

        return Pose(nearest_point[0] + delta_x, nearest_point[1] + delta_y, nearest_point[2], lane_yaw)

    def refine_elevation(self, pose: Pose, last_section: RouteSection) -> Pose:
        ''' Take the elevation of `pose` from the centerline of the preferred goal segment '''
        goal_segment = self.road_network.get_segment(last_section.preferred_primitive)
        fine_centerline = generate_fine_centerline(goal_segment, self.elevation_resolution)
        projected = project_to_linestring(fine_centerline, pose)
        return pose.copy(z=float(projected[2]))
