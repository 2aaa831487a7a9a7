"""
Orientation helpers for JACO Cartesian commands
"""

from typing import Sequence, Tuple

import numpy as np
from scipy.spatial.transform import Rotation as R


def quaternion_to_rpy(quat: Sequence[float]) -> Tuple[float, float, float]:
    """Convert an [x, y, z, w] quaternion to fixed-axis roll, pitch, yaw"""
    quat = np.asarray(quat, dtype=float)
    if quat.shape != (4,) or np.linalg.norm(quat) == 0.0:
        raise ValueError(f"Not a valid quaternion: {quat}")
    roll, pitch, yaw = R.from_quat(quat).as_euler('xyz')
    return float(roll), float(pitch), float(yaw)
