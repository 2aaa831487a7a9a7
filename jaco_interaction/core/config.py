"""
Configuration loading for the interactive manipulation node
"""

import copy
import os
from typing import Dict, Optional

import yaml

from jaco_interaction.core.types import NUM_ARM_JOINTS


class ConfigError(ValueError):
    """Raised when a configuration file is missing or invalid"""


DEFAULT_CONFIG = {
    'topics': {
        'joint_states': 'jaco_arm/joint_states',
        'cartesian_cmd': 'jaco_arm/cartesian_cmd',
    },
    'services': {
        'erase_trajectories': 'jaco_arm/erase_trajectories',
        'forward_kinematics': 'jaco_arm/kinematics/fk',
        'quaternion_to_euler': 'jaco_conversions/quaternion_to_euler',
        'call_timeout_sec': 1.0,
    },
    'actions': {
        'grasp': 'jaco_arm/manipulation/grasp',
        'pickup': 'jaco_arm/manipulation/pickup',
        'home': 'jaco_arm/home_arm',
        'server_wait_log_period_sec': 5.0,
    },
    'marker': {
        'server_topic': 'jaco_interactive_manipulation',
        'frame_id': 'jaco_link_base',
        'name': 'jaco_hand_marker',
        'description': 'JACO Hand Control',
        'scale': 0.2,
        'origin_control': 'jaco_hand_origin_marker',
        'menu_control': 'jaco_hand_menu',
        'settle_delay_sec': 0.1,
    },
    'home': {
        'home_timeout_sec': 10.0,
        'retract_timeout_sec': 15.0,
        'retract_joints': [-2.57, 1.39, 0.377, -0.084, 0.515, -1.745],
    },
    'conversion': {
        'use_local_euler': False,
    },
    'node': {
        'update_rate': 30.0,
        'diagnostics_period_sec': 1.0,
    },
}


def get_default_config() -> Dict:
    return copy.deepcopy(DEFAULT_CONFIG)


def merge_config(base: Dict, overrides: Dict) -> Dict:
    """Recursively merge ``overrides`` into a copy of ``base``"""
    merged = copy.deepcopy(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = merge_config(merged[key], value)
        else:
            merged[key] = value
    return merged


def validate_config(config: Dict):
    joints = config['home']['retract_joints']
    if not isinstance(joints, (list, tuple)) or len(joints) != NUM_ARM_JOINTS:
        raise ConfigError(f"home.retract_joints must list {NUM_ARM_JOINTS} joint positions, got {joints!r}")
    try:
        config['home']['retract_joints'] = [float(j) for j in joints]
    except (TypeError, ValueError) as e:
        raise ConfigError(f"home.retract_joints must be numeric: {e}") from e

    for section, key in (('home', 'home_timeout_sec'),
                         ('home', 'retract_timeout_sec'),
                         ('services', 'call_timeout_sec'),
                         ('node', 'update_rate'),
                         ('marker', 'scale')):
        value = config[section][key]
        if isinstance(value, bool) or not isinstance(value, (int, float)) or value <= 0:
            raise ConfigError(f"{section}.{key} must be a positive number, got {value!r}")


def apply_update_rate(config: Dict, value) -> Dict:
    """Override ``node.update_rate`` from a node parameter; 0 keeps the configured rate"""
    try:
        rate = float(value)
    except (TypeError, ValueError) as e:
        raise ConfigError(f"update_rate must be a number, got {value!r}") from e
    if rate < 0.0:
        raise ConfigError(f"update_rate must not be negative, got {rate}")
    if rate > 0.0:
        config['node']['update_rate'] = rate
    return config


def load_config(config_file: Optional[str] = None) -> Dict:
    """Load configuration, overlaying an optional YAML file on the defaults"""
    config = get_default_config()

    if config_file:
        if not os.path.exists(config_file):
            raise ConfigError(f"Config file not found: {config_file}")
        try:
            with open(config_file, 'r') as f:
                overrides = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Failed to parse {config_file}: {e}") from e
        if not isinstance(overrides, dict):
            raise ConfigError(f"Top level of {config_file} must be a mapping")
        config = merge_config(config, overrides)

    validate_config(config)
    return config
