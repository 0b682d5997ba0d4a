import matplotlib.pyplot as plt
from shapely.geometry import Polygon
from shapely.plotting import plot_line, plot_polygon

from mission_planner.common.scenario.road_network import RoadNetworkGraph
from mission_planner.common.scenario.route import Route


def plot_route(road_network: RoadNetworkGraph, route: Route, goal_footprint: Polygon = None, ax=None):
    ''' Draw the map, the route sections and the goal footprint, returns the axes '''
    if ax is None:
        fig = plt.figure(1, figsize=(12, 12), dpi=90)
        ax = fig.add_subplot()

    preferred = set(route.lanelet_ids())
    members = {i for section in route.segments for i in section.primitives}
    for segment in road_network.all_segments():
        if segment.id in preferred:
            color, alpha = 'g', 0.5
        elif segment.id in members:
            color, alpha = 'c', 0.3
        elif segment.is_shoulder:
            color, alpha = 'y', 0.15
        else:
            color, alpha = 'grey', 0.15
        plot_polygon(segment.polygon, ax=ax, add_points=False, color=color, alpha=alpha)
    for parking_lot in road_network.parking_lots:
        plot_polygon(parking_lot.polygon, ax=ax, add_points=False, color='b', alpha=0.15)
    for parking_space in road_network.parking_spaces:
        if parking_space.polygon is not None:
            plot_polygon(parking_space.polygon, ax=ax, add_points=False, color='b', alpha=0.3)

    if goal_footprint is not None:
        plot_line(goal_footprint.exterior, ax=ax, add_points=False, color='r', label="goal_footprint")
    if route.start_pose is not None:
        ax.plot(route.start_pose.x, route.start_pose.y, 'bo', label="start")
    if route.goal_pose is not None:
        ax.plot(route.goal_pose.x, route.goal_pose.y, 'r*', label="goal")

    ax.set_aspect('equal', 'box')
    ax.set_title('route through %d sections' % len(route.segments))
    ax.legend(loc="upper left")
    return ax
