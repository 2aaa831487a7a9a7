"""ROS 2 utility helpers"""
