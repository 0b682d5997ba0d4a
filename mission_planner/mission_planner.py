from enum import Enum, unique

from mission_planner.common.vehicle.vehicle import VehicleInfo
from mission_planner.default_planner import DefaultPlanner
from mission_planner.planner_plugin import PlannerPlugin
from mission_planner.utils.config import DefaultPlannerSettings


@unique
class PlannerType(Enum):
    """
    Enumeration definition of the available planners.
    """
    DEFAULT = "default"


class MissionPlanner:
    """
    Class to select and instantiate the mission planner named in the configuration.
    """

    class NoSuchPlanner(KeyError):
        """
        Error message when the specified planner does not exist.
        """

        def __init__(self, message):
            super().__init__(message)
            self.message = message

    dict_planners = dict()
    dict_planners[PlannerType.DEFAULT] = DefaultPlanner

    @classmethod
    def create(cls, planner_type=PlannerType.DEFAULT, settings: DefaultPlannerSettings = None,
               vehicle_info: VehicleInfo = None) -> PlannerPlugin:
        """
        Method to instantiate the specified planner, `planner_type` is a `PlannerType` or its value.
        """
        try:
            planner_class = cls.dict_planners[PlannerType(planner_type)]
        except (KeyError, ValueError):
            raise cls.NoSuchPlanner(f"Planner with type <{planner_type}> does not exist.")
        return planner_class(settings=settings, vehicle_info=vehicle_info)
