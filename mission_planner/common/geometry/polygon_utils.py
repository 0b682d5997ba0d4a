import sys
import math

import numpy as np
from shapely.geometry import Point, Polygon

# smallest representable distance, used to absorb round-off on polygon boundaries
EPSILON = sys.float_info.epsilon


def to_xy(point) -> np.ndarray:
    ''' Planar coordinates of a `Pose`, shapely `Point`, or any sequence of at least 2 numbers '''
    if hasattr(point, 'x') and hasattr(point, 'y'):
        return np.array([float(point.x), float(point.y)])
    return np.asarray(point, dtype=float)[:2]


def distance_to_polygon(polygon: Polygon, point) -> float:
    ''' Euclidean distance from `point` to `polygon` (0 when inside or on the boundary) '''
    return polygon.distance(Point(to_xy(point)))


def is_on(polygon: Polygon, point, epsilon: float = EPSILON) -> bool:
    return distance_to_polygon(polygon, point) < epsilon


def nearest_index(points: np.ndarray, point) -> int:
    ''' Index of the sample in `points` (N x 2 or N x 3) closest to `point` in the plane '''
    xy = to_xy(point)
    dists = np.hypot(points[:, 0] - xy[0], points[:, 1] - xy[1])
    return int(np.argmin(dists))


def _closest_piece(linestring: np.ndarray, point):
    # returns (index of the piece start, parameter along the piece, planar distance)
    xy = to_xy(point)
    best = (0, 0.0, math.inf)
    for i in range(len(linestring) - 1):
        a = linestring[i, :2]
        b = linestring[i + 1, :2]
        ab = b - a
        sqr_len = float(np.dot(ab, ab))
        t = 0.0 if sqr_len == 0.0 else float(np.clip(np.dot(xy - a, ab) / sqr_len, 0.0, 1.0))
        dist = float(np.linalg.norm(a + t * ab - xy))
        if dist < best[2]:
            best = (i, t, dist)
    return best


def lanelet_angle_at(centerline: np.ndarray, point) -> float:
    ''' Heading of the centerline piece nearest to `point` '''
    if len(centerline) < 2:
        return 0.0
    i, _, _ = _closest_piece(centerline, point)
    d = centerline[i + 1] - centerline[i]
    return math.atan2(d[1], d[0])


def project_to_linestring(linestring: np.ndarray, point) -> np.ndarray:
    ''' Project `point` onto a 3D polyline

    The projection is made in the plane; the elevation of the result is interpolated
    with the same parameter along the piece it falls on.
    '''
    if len(linestring) == 1:
        return np.array(linestring[0], dtype=float)
    i, t, _ = _closest_piece(linestring, point)
    return linestring[i] + t * (linestring[i + 1] - linestring[i])


def arc_lengths(linestring: np.ndarray) -> np.ndarray:
    steps = np.hypot(np.diff(linestring[:, 0]), np.diff(linestring[:, 1]))
    return np.concatenate(([0.0], np.cumsum(steps)))


def resample_linestring(linestring: np.ndarray, resolution: float) -> np.ndarray:
    ''' Resample a polyline at a fixed planar arc-length resolution

    Every original vertex is kept, so the resampled polyline has the same shape
    (including the elevation profile) as the input.
    '''
    # drop repeated vertices so the arc length is strictly increasing
    keep = np.concatenate(([True], np.any(np.diff(linestring[:, :2], axis=0) != 0.0, axis=1)))
    linestring = linestring[keep]
    if len(linestring) < 2:
        return np.array(linestring, dtype=float)
    s = arc_lengths(linestring)
    num = max(int(math.ceil(s[-1] / resolution)), 1) + 1
    s_new = np.union1d(np.linspace(0.0, s[-1], num), s)
    return np.column_stack([np.interp(s_new, s, linestring[:, k]) for k in range(linestring.shape[1])])


def generate_fine_centerline(segment, resolution: float = 5.0) -> np.ndarray:
    return resample_linestring(segment.centerline, resolution)


def footprint_at(footprint, pose) -> Polygon:
    ''' Transform a local footprint ring into the map frame at `pose` '''
    ring = np.asarray(footprint, dtype=float)
    c, s = math.cos(pose.yaw), math.sin(pose.yaw)
    x = ring[:, 0] * c - ring[:, 1] * s + pose.x
    y = ring[:, 0] * s + ring[:, 1] * c + pose.y
    return Polygon(np.column_stack([x, y]))
