import argparse
import os

import matplotlib.pyplot as plt

from mission_planner.common.scenario.route import Pose
from mission_planner.common.vehicle.vehicle import VehicleInfo
from mission_planner.interface.commonroad_map import load_commonroad_map
from mission_planner.interface.map_loader import load_map
from mission_planner.mission_planner import MissionPlanner
from mission_planner.utils.config import DefaultPlannerSettings, load_config_file
from mission_planner.utils.logger import initialize_logger
from mission_planner.visualization.plot_route import plot_route


def parse_checkpoint(text: str) -> Pose:
    x, y, yaw = (float(v) for v in text.split(','))
    return Pose(x, y, 0.0, yaw)


if __name__ == '__main__':
    repo_dir = os.getcwd()
    parser = argparse.ArgumentParser(description='Plan a route through checkpoints on a lanelet map')
    parser.add_argument('--map', type=str, default=os.path.join(repo_dir, 'data/two_lane_road.yaml'), help='YAML map or CommonRoad XML scenario')
    parser.add_argument('--cfg_file', type=str, default=os.path.join(repo_dir, 'config/default_planner.yaml'), help='specify the config file of the planner')
    parser.add_argument('--planner', type=str, default='default', help='planner type')
    parser.add_argument('--checkpoints', type=parse_checkpoint, nargs='+', required=True, help='x,y,yaw of the start, via points and goal')
    parser.add_argument('--plot', action='store_true', help='show the planned route')
    args = parser.parse_args()

    cfg = load_config_file(args.cfg_file)
    initialize_logger('mission_planner', cfg)
    settings = DefaultPlannerSettings.from_dict(cfg.get('planner', {}))
    vehicle_info = VehicleInfo.from_dict(cfg.get('vehicle', {}))

    if args.map.endswith('.xml'):
        road_network = load_commonroad_map(args.map, lane_change_cost=settings.lane_change_cost)
    else:
        road_network = load_map(args.map, lane_change_cost=settings.lane_change_cost)

    planner = MissionPlanner.create(args.planner, settings=settings, vehicle_info=vehicle_info)
    planner.set_map(road_network)
    route = planner.plan(args.checkpoints)

    if route.is_empty():
        print(f"Planning failed: {planner.last_result.value}")
    else:
        print(f"Goal: {route.goal_pose}")
        for i, section in enumerate(route.segments):
            print(f"section {i}: preferred {section.preferred_primitive}, primitives {section.primitives}")

    if args.plot:
        plot_route(road_network, route, planner.visualize(route).goal_footprint)
        plt.show()
