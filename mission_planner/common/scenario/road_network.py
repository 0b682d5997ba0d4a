import heapq
import logging
import math
from typing import Callable, Dict, Iterable, List, Optional

import networkx as nx
from shapely.geometry import Point, box
from shapely.strtree import STRtree

from mission_planner.common.geometry.math_utils import angle_diff
from mission_planner.common.geometry.polygon_utils import distance_to_polygon, lanelet_angle_at, to_xy
from mission_planner.common.scenario.lanelet import ParkingLot, ParkingSpace, Segment
from mission_planner.utils.errors import MapValidationError

logger = logging.getLogger(__name__)

# heading tolerance used to pick the start segment of a checkpoint pair [rad]
START_YAW_THRESHOLD = math.pi / 4


class RoadNetworkGraph(object):
    """ Road network snapshot

    Owns every segment, parking space and parking lot of a map and answers the queries
    of the planner: lookup by id, adjacency, segments at a point, nearest search and
    shortest path search between checkpoints.

    Adjacency is index based: `graph` is a `networkx.DiGraph` over road segment ids with
    `successor` edges (weight: length of the target segment) and `lane_change` edges
    (weight: `lane_change_cost`).
    """
    def __init__(self, segments: Iterable[Segment], parking_spaces: Iterable[ParkingSpace] = None,
                 parking_lots: Iterable[ParkingLot] = None, lane_change_cost: float = 2.0):
        self.segments: Dict[int, Segment] = {}
        for segment in segments:
            if segment.id in self.segments:
                raise MapValidationError(f"Duplicated segment id {segment.id}")
            self.segments[segment.id] = segment
        self.parking_spaces: List[ParkingSpace] = list(parking_spaces or [])
        self.parking_lots: List[ParkingLot] = list(parking_lots or [])
        self.lane_change_cost = lane_change_cost

        self._validate()
        self._link_predecessors()

        # spatial index over the segment polygons
        self._ids: List[int] = sorted(self.segments.keys())
        self._tree = STRtree([self.segments[i].polygon for i in self._ids])
        self._boxes = {i: box(*self.segments[i].bounding_box) for i in self._ids}

        # shoulders sharing a bound with a road segment
        self._shoulders: Dict[int, List[int]] = {i: [] for i in self._ids}
        for shoulder in self.shoulder_segments():
            for neighbor in (shoulder.adj_left, shoulder.adj_right):
                if neighbor is not None and shoulder.id not in self._shoulders[neighbor]:
                    self._shoulders[neighbor].append(shoulder.id)
        for segment in self.segments.values():
            for neighbor in (segment.adj_left, segment.adj_right):
                if neighbor is not None and self.segments[neighbor].is_shoulder \
                        and neighbor not in self._shoulders[segment.id]:
                    self._shoulders[segment.id].append(neighbor)

        self.graph: nx.DiGraph = self._build_routing_graph()
        logger.debug(f"Road network built with {len(self.segments)} segments, {self.graph.number_of_edges()} routing edges")

    def _validate(self):
        for segment in self.segments.values():
            if not math.isfinite(segment.length) or segment.length <= 0.0:
                raise MapValidationError(f"Segment {segment.id} has a non-positive length ({segment.length})")
            refs = segment.successors + segment.predecessors + [segment.adj_left, segment.adj_right]
            for ref in refs:
                if ref is not None and ref not in self.segments:
                    raise MapValidationError(f"Segment {segment.id} refers to unknown segment {ref}")

    def _link_predecessors(self):
        for segment in self.segments.values():
            for successor_id in segment.successors:
                successor = self.segments[successor_id]
                if segment.id not in successor.predecessors:
                    successor.predecessors.append(segment.id)
            for predecessor_id in segment.predecessors:
                predecessor = self.segments[predecessor_id]
                if segment.id not in predecessor.successors:
                    predecessor.successors.append(segment.id)

    def _build_routing_graph(self) -> nx.DiGraph:
        graph = nx.DiGraph()
        for segment in self.road_segments():
            graph.add_node(segment.id)
        for segment in self.road_segments():
            for successor_id in segment.successors:
                if self.segments[successor_id].is_road:
                    graph.add_edge(segment.id, successor_id, weight=self.segments[successor_id].length, relation='successor')
            for neighbor_id in self._lane_change_targets(segment):
                graph.add_edge(segment.id, neighbor_id, weight=self.lane_change_cost, relation='lane_change')
        return graph

    def _lane_change_targets(self, segment: Segment) -> List[int]:
        targets = []
        if segment.lane_change_left and segment.adj_left is not None and segment.adj_left_same_direction \
                and self.segments[segment.adj_left].is_road:
            targets.append(segment.adj_left)
        if segment.lane_change_right and segment.adj_right is not None and segment.adj_right_same_direction \
                and self.segments[segment.adj_right].is_road:
            targets.append(segment.adj_right)
        return targets

    # ---- lookup ----

    def get_segment(self, segment_id: int) -> Segment:
        return self.segments[segment_id]

    def all_segments(self) -> List[Segment]:
        return [self.segments[i] for i in self._ids]

    def road_segments(self) -> List[Segment]:
        return [s for s in self.all_segments() if s.is_road]

    def shoulder_segments(self) -> List[Segment]:
        return [s for s in self.all_segments() if s.is_shoulder]

    def is_road_segment(self, segment_id: int) -> bool:
        return segment_id in self.segments and self.segments[segment_id].is_road

    # ---- adjacency ----

    def get_next_segments(self, segment_id: int) -> List[Segment]:
        return [self.segments[i] for i in self.segments[segment_id].successors if self.segments[i].is_road]

    def get_previous_segments(self, segment_id: int) -> List[Segment]:
        return [self.segments[i] for i in self.segments[segment_id].predecessors if self.segments[i].is_road]

    def get_lane_change_neighbors(self, segment_id: int) -> List[int]:
        return self._lane_change_targets(self.segments[segment_id])

    def get_lateral_neighbors(self, segment_id: int) -> List[int]:
        ''' `segment_id` and all same-direction road segments beside it, ordered from left to right '''
        left = []
        current = self.segments[segment_id]
        while current.adj_left is not None and current.adj_left_same_direction \
                and self.segments[current.adj_left].is_road and current.adj_left not in left + [segment_id]:
            left.append(current.adj_left)
            current = self.segments[current.adj_left]
        right = []
        current = self.segments[segment_id]
        while current.adj_right is not None and current.adj_right_same_direction \
                and self.segments[current.adj_right].is_road and current.adj_right not in right + [segment_id]:
            right.append(current.adj_right)
            current = self.segments[current.adj_right]
        return left[::-1] + [segment_id] + [i for i in right if i not in left]

    def get_adjacent_shoulders(self, segment_id: int) -> List[Segment]:
        return [self.segments[i] for i in self._shoulders.get(segment_id, [])]

    # ---- spatial queries ----

    def get_segments_at(self, point) -> List[Segment]:
        ''' Segments whose polygon contains `point` (boundary included) '''
        indices = self._tree.query(Point(to_xy(point)), predicate='intersects')
        return [self.segments[self._ids[i]] for i in sorted(int(i) for i in indices)]

    def get_road_segments_at(self, pose) -> List[Segment]:
        return [s for s in self.get_segments_at(pose) if s.is_road]

    def get_shoulder_segments_at(self, pose) -> List[Segment]:
        return [s for s in self.get_segments_at(pose) if s.is_shoulder]

    def nearest_until(self, point, visitor: Callable[[float, Segment], bool]) -> Optional[Segment]:
        ''' Visit the segments in increasing bounding box distance to `point`

        `visitor(bbox_distance, segment)` is called for every segment until it returns
        True. Returns the segment the visit stopped at, `None` if it never stopped.
        '''
        p = Point(to_xy(point))
        heap = [(self._boxes[segment_id].distance(p), segment_id) for segment_id in self._ids]
        heapq.heapify(heap)
        while heap:
            bbox_distance, segment_id = heapq.heappop(heap)
            segment = self.segments[segment_id]
            if visitor(bbox_distance, segment):
                return segment
        return None

    @staticmethod
    def get_closest_segment(segments: List[Segment], pose) -> Optional[Segment]:
        ''' Closest segment to `pose`, ties (e.g. overlapping lanes) broken by heading '''
        closest = None
        min_distance = math.inf
        min_angle = math.inf
        for segment in segments:
            distance = distance_to_polygon(segment.polygon, pose)
            if distance > min_distance:
                continue
            angle = angle_diff(lanelet_angle_at(segment.centerline, pose), pose.yaw)
            if distance < min_distance or angle < min_angle:
                closest = segment
                min_distance = distance
                min_angle = angle
        return closest

    @staticmethod
    def get_closest_segment_with_constraints(segments: List[Segment], pose, dist_threshold: float = math.inf,
                                             yaw_threshold: float = math.inf) -> Optional[Segment]:
        ''' Closest segment within `dist_threshold` [m] whose heading differs less than `yaw_threshold` [rad] '''
        candidates = []
        for segment in segments:
            distance = distance_to_polygon(segment.polygon, pose)
            if distance > dist_threshold:
                continue
            angle = angle_diff(lanelet_angle_at(segment.centerline, pose), pose.yaw)
            if angle > abs(yaw_threshold):
                continue
            candidates.append((distance, angle, segment.id, segment))
        if not candidates:
            return None
        return min(candidates, key=lambda c: c[:3])[3]

    # ---- routing ----

    def _shortest_path(self, graph: nx.DiGraph, start_id: int, goal_id: int):
        try:
            cost, path = nx.single_source_dijkstra(graph, start_id, goal_id, weight='weight')
        except (nx.NetworkXNoPath, nx.NodeNotFound):
            return None, None
        return cost + self.segments[start_id].length, path

    def _best_path(self, graph: nx.DiGraph, start_ids: List[int], goal_ids: List[int]) -> Optional[List[int]]:
        best_cost = math.inf
        best_path = None
        for start_id in start_ids:
            for goal_id in goal_ids:
                cost, path = self._shortest_path(graph, start_id, goal_id)
                if path is not None and cost < best_cost:
                    best_cost = cost
                    best_path = path
        return best_path

    def _start_candidates(self, pose) -> List[int]:
        at_pose = [s.id for s in self.get_road_segments_at(pose)
                   if angle_diff(lanelet_angle_at(s.centerline, pose), pose.yaw) < START_YAW_THRESHOLD]
        if at_pose:
            return at_pose
        closest = self.get_closest_segment_with_constraints(self.road_segments(), pose, yaw_threshold=START_YAW_THRESHOLD)
        if closest is None:
            closest = self.get_closest_segment(self.road_segments(), pose)
        return [] if closest is None else [closest.id]

    def _goal_candidates(self, pose) -> List[int]:
        at_pose = [s.id for s in self.get_road_segments_at(pose)]
        if at_pose:
            return at_pose
        closest = self.get_closest_segment(self.road_segments(), pose)
        return [] if closest is None else [closest.id]

    def plan_path_between_checkpoints(self, start, goal, consider_no_drivable_lanes: bool = False) -> Optional[List[int]]:
        ''' Cheapest sequence of road segment ids leading from the `start` pose to the `goal` pose

        Parameters
        ----------

        `start`, `goal` (`Pose`): consecutive checkpoints
        `consider_no_drivable_lanes` (`bool`): avoid segments tagged as not drivable when a detour exists

        Returns
        -------
        (`list[int]`): segment ids, `None` if the checkpoints are not connected
        '''
        start_ids = self._start_candidates(start)
        goal_ids = self._goal_candidates(goal)
        if not start_ids or not goal_ids:
            logger.warning("No road segment found for checkpoint pair")
            return None

        path = self._best_path(self.graph, start_ids, goal_ids)
        if path is None:
            return None

        if consider_no_drivable_lanes and any(not self.segments[i].drivable for i in path):
            drivable_graph = nx.subgraph_view(self.graph, filter_node=lambda n: self.segments[n].drivable)
            drivable_path = self._best_path(drivable_graph, start_ids, goal_ids)
            if drivable_path is not None:
                return drivable_path
            logger.warning("No route avoiding no drivable lanes found, keeping the shortest route")
        return path
