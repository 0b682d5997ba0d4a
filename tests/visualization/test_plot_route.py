import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt

from mission_planner.common.scenario.route import Pose
from mission_planner.default_planner import DefaultPlanner
from mission_planner.visualization.plot_route import plot_route


def test_plot_route(two_lane_road):
    planner = DefaultPlanner()
    planner.set_map(two_lane_road)
    route = planner.plan([Pose(5.0, -1.75), Pose(75.0, -4.5)])

    fig, ax = plt.subplots()
    assert plot_route(two_lane_road, route, planner.visualize(route).goal_footprint, ax=ax) is ax
    # segments, parking space and parking lot
    assert len(ax.patches) == 9
    assert ax.get_title() == 'route through 3 sections'
    plt.close(fig)
