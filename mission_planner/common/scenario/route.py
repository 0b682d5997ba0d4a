from typing import List

from mission_planner.common.geometry.math_utils import quat_to_yaw, yaw_to_quat

class Pose(object):
    def __init__(self, x: float = 0.0, y: float = 0.0, z: float = 0.0, yaw: float = 0.0):
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)
        self.yaw = float(yaw)

    @classmethod
    def from_quaternion(cls, x, y, z, quat):
        ''' Build a pose from a position and an (x, y, z, w) quaternion '''
        return cls(x, y, z, quat_to_yaw(quat))

    @property
    def quaternion(self):
        return yaw_to_quat(self.yaw)

    def copy(self, **changes) -> 'Pose':
        values = dict(x=self.x, y=self.y, z=self.z, yaw=self.yaw)
        values.update(changes)
        return Pose(**values)

    def __eq__(self, other):
        if not isinstance(other, Pose):
            return NotImplemented
        return (self.x, self.y, self.z, self.yaw) == (other.x, other.y, other.z, other.yaw)

    def __hash__(self):
        return hash((self.x, self.y, self.z, self.yaw))

    def __repr__(self):
        return f"Pose(x={self.x:.3f}, y={self.y:.3f}, z={self.z:.3f}, yaw={self.yaw:.3f})"


class RouteSection(object):
    """ Route section

    The segments that can be driven in parallel at one point along the route.

    Attributes
    ------
        `preferred_primitive` (`int`): id of the segment the route follows
        `primitives` (`list[int]`): ids of all segments of the section, including the preferred one
    """
    def __init__(self, preferred_primitive: int, primitives: List[int]):
        assert preferred_primitive in primitives, \
            f"preferred segment {preferred_primitive} is not a member of {primitives}"
        self.preferred_primitive = preferred_primitive
        self.primitives = list(primitives)

    def __eq__(self, other):
        if not isinstance(other, RouteSection):
            return NotImplemented
        return self.preferred_primitive == other.preferred_primitive and self.primitives == other.primitives

    def __repr__(self):
        return f"RouteSection(preferred={self.preferred_primitive}, primitives={self.primitives})"


class Route(object):
    """ Planning output: start pose, goal pose and ordered route sections.

    A route without sections is the failure signal of a planning request.
    """
    def __init__(self, start_pose: Pose = None, goal_pose: Pose = None, segments: List[RouteSection] = None):
        self.start_pose = start_pose
        self.goal_pose = goal_pose
        self.segments: List[RouteSection] = list(segments or [])

    def is_empty(self) -> bool:
        return len(self.segments) == 0

    def lanelet_ids(self) -> List[int]:
        return [section.preferred_primitive for section in self.segments]

    def __repr__(self):
        return f"Route(start={self.start_pose}, goal={self.goal_pose}, sections={len(self.segments)})"
