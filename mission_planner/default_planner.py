import logging
from enum import Enum, unique
from typing import List, Optional

from mission_planner.common.scenario.road_network import RoadNetworkGraph
from mission_planner.common.scenario.route import Pose, Route
from mission_planner.common.vehicle.vehicle import VehicleInfo
from mission_planner.planner_plugin import PlannerPlugin
from mission_planner.route.goal_validator import GoalValidator
from mission_planner.route.pose_refiner import PoseRefiner
from mission_planner.route.route_sections import RouteSectionBuilder
from mission_planner.utils.config import DefaultPlannerSettings
from mission_planner.utils.errors import MapNotReadyError

logger = logging.getLogger(__name__)


@unique
class PlannerState(Enum):
    IDLE = 'IDLE'
    READY = 'READY'
    PLANNING = 'PLANNING'


@unique
class PlanningResult(Enum):
    NONE = 'NONE'
    SUCCESS = 'SUCCESS'
    SEARCH_FAILURE = 'SEARCH_FAILURE'
    GOAL_INVALID = 'GOAL_INVALID'
    LOOP_DETECTED = 'LOOP_DETECTED'


class RouteMarkers(object):
    """ Debug output of a route

    Attributes
    ------
        `route_lanelets` (`list[int]`): every segment of the route
        `goal_lanelets` (`list[int]`): preferred segments of the sections
        `end_lanelets` (`list[int]`): the other segments of the sections
        `goal_footprint` (`Polygon`): vehicle footprint at the last validated goal
    """
    def __init__(self):
        self.route_lanelets = []
        self.goal_lanelets = []
        self.end_lanelets = []
        self.goal_footprint = None


class DefaultPlanner(PlannerPlugin):
    def __init__(self, settings: DefaultPlannerSettings = None, vehicle_info: VehicleInfo = None):
        self.settings = settings if settings is not None else DefaultPlannerSettings()
        self.vehicle_info = vehicle_info if vehicle_info is not None else VehicleInfo()
        self.state = PlannerState.IDLE
        self.road_network: Optional[RoadNetworkGraph] = None
        self.goal_validator: Optional[GoalValidator] = None
        self.pose_refiner: Optional[PoseRefiner] = None
        self.section_builder: Optional[RouteSectionBuilder] = None
        # route currently followed, set by the caller
        self.route: Optional[Route] = None
        self.last_result = PlanningResult.NONE

    def ready(self) -> bool:
        return self.state != PlannerState.IDLE

    def set_map(self, road_network: RoadNetworkGraph) -> None:
        self.road_network = road_network
        self.goal_validator = GoalValidator(road_network, self.vehicle_info,
                                            goal_angle_threshold_deg=self.settings.goal_angle_threshold_deg,
                                            check_footprint_inside_lanes=self.settings.check_footprint_inside_lanes,
                                            footprint_search_margin=self.settings.footprint_search_margin)
        self.pose_refiner = PoseRefiner(road_network,
                                        lateral_resolution=self.settings.fine_centerline_resolution,
                                        elevation_resolution=self.settings.elevation_centerline_resolution)
        self.section_builder = RouteSectionBuilder(road_network)
        self.route = None
        self.state = PlannerState.READY
        logger.info(f"Map set with {len(road_network.segments)} segments")

    def is_goal_valid(self, goal: Pose, path_segment_ids: List[int]) -> bool:
        if not self.ready():
            raise MapNotReadyError("Cannot validate a goal before a map is set")
        return self.goal_validator.is_goal_valid(goal, path_segment_ids)

    def plan(self, checkpoints: List[Pose]) -> Route:
        ''' Plan a route through the checkpoints

        Parameters
        ----------

        `checkpoints` (`list[Pose]`): start pose, optional via poses and goal pose

        Returns
        -------
        (`Route`): the planned route, a route without sections if planning failed. The
        reason of a failure is kept in `last_result`.
        '''
        if not self.ready():
            logger.error("Map is not set, refusing to plan a route")
            raise MapNotReadyError("Cannot plan a route before a map is set")
        if len(checkpoints) < 2:
            raise ValueError(f"At least a start and a goal are needed, got {len(checkpoints)} checkpoints")

        logger.debug("start planning route with check points: " + ", ".join(f"x: {p.x} y: {p.y}" for p in checkpoints))

        self.state = PlannerState.PLANNING
        try:
            route, self.last_result = self._plan(checkpoints)
        finally:
            self.state = PlannerState.READY
        return route

    def _plan(self, checkpoints: List[Pose]):
        # work on one map snapshot for the whole request
        road_network = self.road_network
        goal_validator = self.goal_validator
        pose_refiner = self.pose_refiner
        section_builder = self.section_builder
        empty_route = Route()

        all_route_segments: List[int] = []
        for start_checkpoint, goal_checkpoint in zip(checkpoints[:-1], checkpoints[1:]):
            path = road_network.plan_path_between_checkpoints(start_checkpoint, goal_checkpoint,
                                                              self.settings.consider_no_drivable_lanes)
            if path is None:
                logger.warning("Failed to plan route.")
                return empty_route, PlanningResult.SEARCH_FAILURE
            for segment_id in path:
                if all_route_segments and segment_id == all_route_segments[-1]:
                    continue
                all_route_segments.append(segment_id)

        route_sections = section_builder.build(all_route_segments)

        goal_pose = checkpoints[-1]
        if self.settings.enable_correct_goal_pose:
            goal_pose = pose_refiner.refine_lateral(goal_pose, self.vehicle_info)

        if not goal_validator.is_goal_valid(goal_pose, all_route_segments):
            logger.warning("Goal is not valid! Please check position and angle of goal_pose")
            return empty_route, PlanningResult.GOAL_INVALID

        if section_builder.has_loop(route_sections):
            logger.warning("Loop detected within route!")
            return empty_route, PlanningResult.LOOP_DETECTED

        refined_goal = pose_refiner.refine_elevation(goal_pose, route_sections[-1])
        logger.debug(f"Goal Pose Z : {refined_goal.z}")

        return Route(checkpoints[0], refined_goal, route_sections), PlanningResult.SUCCESS

    def update_route(self, route: Route) -> None:
        self.route = route

    def clear_route(self) -> None:
        self.route = None

    def visualize(self, route: Route) -> RouteMarkers:
        markers = RouteMarkers()
        for section in route.segments:
            for segment_id in section.primitives:
                markers.route_lanelets.append(segment_id)
                if segment_id == section.preferred_primitive:
                    markers.goal_lanelets.append(segment_id)
                else:
                    markers.end_lanelets.append(segment_id)
        if self.goal_validator is not None:
            markers.goal_footprint = self.goal_validator.goal_footprint
        return markers
