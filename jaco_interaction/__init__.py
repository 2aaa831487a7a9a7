"""Interactive marker teleoperation for the JACO arm"""

__version__ = '0.1.0'
