from abc import ABC, abstractmethod
from typing import List

from mission_planner.common.scenario.road_network import RoadNetworkGraph
from mission_planner.common.scenario.route import Pose, Route


class PlannerPlugin(ABC):
    """
    Abstract base class of the mission planners.

    A planner receives a map with `set_map`, plans a route through ordered checkpoints
    with `plan`, and can hold the route currently followed by the vehicle.
    """

    @abstractmethod
    def ready(self) -> bool:
        """
        Returns true once a map is set.
        """
        pass

    @abstractmethod
    def set_map(self, road_network: RoadNetworkGraph) -> None:
        """
        (Re)initializes the planner with a new map.
        """
        pass

    @abstractmethod
    def plan(self, checkpoints: List[Pose]) -> Route:
        """
        Plans a route through the checkpoints, an empty route signals a failure.
        """
        pass

    @abstractmethod
    def is_goal_valid(self, goal: Pose, path_segment_ids: List[int]) -> bool:
        pass

    @abstractmethod
    def update_route(self, route: Route) -> None:
        pass

    @abstractmethod
    def clear_route(self) -> None:
        pass

    @abstractmethod
    def visualize(self, route: Route):
        """
        Returns the debug output of a route.
        """
        pass
