#!/usr/bin/env python3
"""
JACO Interactive Manipulation Launch File

Launches the interactive manipulation node with its configuration.
"""

from launch import LaunchDescription
from launch.actions import DeclareLaunchArgument
from launch.substitutions import LaunchConfiguration, PathJoinSubstitution
from launch_ros.actions import Node
from launch_ros.substitutions import FindPackageShare


def generate_launch_description():
    # Declare launch arguments
    declare_config_file = DeclareLaunchArgument(
        'config_file',
        default_value=PathJoinSubstitution([
            FindPackageShare('jaco_interaction'),
            'config',
            'jaco_interaction.yaml'
        ]),
        description='Path to the interaction configuration file'
    )

    declare_update_rate = DeclareLaunchArgument(
        'update_rate',
        default_value='30.0',
        description='Marker pose update rate (Hz)'
    )

    interactive_manipulation_node = Node(
        package='jaco_interaction',
        executable='jaco_interactive_manipulation',
        name='jaco_interactive_manipulation',
        parameters=[{
            'config_file': LaunchConfiguration('config_file'),
            'update_rate': LaunchConfiguration('update_rate'),
        }],
        output='screen'
    )

    return LaunchDescription([
        declare_config_file,
        declare_update_rate,
        interactive_manipulation_node,
    ])
