import numpy as np
from scipy.spatial.transform import Rotation

def deg2rad(x):
    return x*np.pi/180.0

def yaw_to_quat(yaw, degrees=False):
    rot = Rotation.from_euler('z', yaw, degrees=degrees)
    return rot.as_quat()

def quat_to_yaw(quat, degrees=False):
    rot = Rotation.from_quat(quat)
    euler = rot.as_euler('zyx', degrees=degrees)
    return euler[0]

def normalize_radian(angle):
    """ Wrap an angle into [-pi, pi) """
    new_angle = np.fmod(angle + np.pi, 2*np.pi)
    if new_angle < 0.0:
        new_angle += 2*np.pi
    return float(new_angle - np.pi)

def angle_diff(a, b):
    return abs(normalize_radian(a - b))
