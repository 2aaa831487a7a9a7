"""Backends connecting the interaction adapter to the arm and marker widget"""

from jaco_interaction.backends.base import ArmBackend, MarkerDisplay

__all__ = ['ArmBackend', 'MarkerDisplay']
