"""
Hand marker description

Describes the single interactive marker used to drive the JACO hand: an
invisible sphere button at the end effector, six axis controls and a context
menu. The description is ROS-agnostic; the marker server turns it into
visualization_msgs messages.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from jaco_interaction.core.types import MenuEntry


class InteractionMode(Enum):
    BUTTON = 'button'
    MENU = 'menu'
    MOVE_AXIS = 'move_axis'
    ROTATE_AXIS = 'rotate_axis'


@dataclass
class SphereSpec:
    """Visual sphere attached to a control"""
    diameter: float
    color: Tuple[float, float, float, float]


@dataclass
class ControlSpec:
    name: str
    mode: InteractionMode
    # Control orientation quaternion (x, y, z, w)
    orientation: Tuple[float, float, float, float] = (0.0, 0.0, 0.0, 1.0)
    sphere: Optional[SphereSpec] = None


@dataclass
class MenuItemSpec:
    """Menu item; leaves carry an entry, submenus carry children"""
    title: str
    entry: Optional[MenuEntry] = None
    children: List['MenuItemSpec'] = field(default_factory=list)


@dataclass
class MarkerSpec:
    name: str
    description: str
    frame_id: str
    scale: float
    controls: List[ControlSpec]
    menu: List[MenuItemSpec]


AXIS_ORIENTATIONS = {
    'x': (1.0, 0.0, 0.0, 1.0),
    'y': (0.0, 1.0, 0.0, 1.0),
    'z': (0.0, 0.0, 1.0, 1.0),
}


def make_axis_controls() -> List[ControlSpec]:
    """Rotate and move controls about each axis, 6-DOF in total"""
    controls = []
    for axis, orientation in AXIS_ORIENTATIONS.items():
        controls.append(ControlSpec(f'rotate_{axis}', InteractionMode.ROTATE_AXIS, orientation))
        controls.append(ControlSpec(f'move_{axis}', InteractionMode.MOVE_AXIS, orientation))
    return controls


def make_hand_menu() -> List[MenuItemSpec]:
    return [
        MenuItemSpec('Fingers', children=[
            MenuItemSpec('Grasp', MenuEntry.GRASP),
            MenuItemSpec('Release', MenuEntry.RELEASE),
        ]),
        MenuItemSpec('Pickup', MenuEntry.PICKUP),
        MenuItemSpec('Home', MenuEntry.HOME),
        MenuItemSpec('Retract', MenuEntry.RETRACT_HOME),
    ]


def make_hand_marker(marker_config: Dict) -> MarkerSpec:
    """Build the hand marker description from the ``marker`` config section"""
    scale = marker_config['scale']

    # Transparent sphere at the end effector, clicking it stops the arm
    origin = ControlSpec(
        name=marker_config['origin_control'],
        mode=InteractionMode.BUTTON,
        sphere=SphereSpec(diameter=scale, color=(0.5, 0.5, 0.5, 0.0))
    )

    controls = [origin]
    controls.extend(make_axis_controls())
    controls.append(ControlSpec(marker_config['menu_control'], InteractionMode.MENU))

    return MarkerSpec(
        name=marker_config['name'],
        description=marker_config['description'],
        frame_id=marker_config['frame_id'],
        scale=scale,
        controls=controls,
        menu=make_hand_menu()
    )


def insert_menu(items: List[MenuItemSpec], insert_item: Callable, parent=None) -> Dict:
    """Insert a menu tree through ``insert_item(title, parent, is_leaf)``.

    ``insert_item`` returns the handle of the inserted item. Returns the
    handles of the leaf items mapped to their menu entries.
    """
    entries = {}
    for item in items:
        handle = insert_item(item.title, parent, not item.children)
        if item.children:
            entries.update(insert_menu(item.children, insert_item, parent=handle))
        else:
            entries[handle] = item.entry
    return entries
