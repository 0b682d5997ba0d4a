class MissionPlannerError(Exception):
    """
    Base class of the errors raised by the mission planner.
    """
    def __init__(self, message):
        super().__init__(message)
        self.message = message


class MapNotReadyError(MissionPlannerError):
    """
    Planning was requested before a map was set.
    """
    pass


class MapValidationError(MissionPlannerError):
    """
    The road network is inconsistent (unknown ids, degenerate segments, ...).
    """
    pass


class ConfigError(MissionPlannerError):
    """
    A configuration value is missing or has the wrong type.
    """
    pass
