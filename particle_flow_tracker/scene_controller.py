"""
Scene follower for the particle visualization.

Read-only consumer of the published hand state, evaluated once per display
frame. Eases the particle cloud's orientation and expansion toward the
hand-driven targets and idles with a slow spin when no hand is in view.
"""

from dataclasses import dataclass

from .config import (
    SCENE_EXPANSION_RATE,
    SCENE_FOLLOW_RATE,
    SCENE_IDLE_SPIN,
    SCENE_POSITION_GAIN,
    SCENE_RETURN_RATE,
)
from .hand_state import HandState


def lerp(current: float, target: float, factor: float) -> float:
    """Linear interpolation from current toward target."""
    return current + (target - current) * factor


@dataclass
class SceneTransform:
    """Orientation (radians) and expansion of the particle cloud."""
    rotation_x: float = 0.0
    rotation_y: float = 0.0
    rotation_z: float = 0.0
    expansion: float = 0.0


class SceneFollower:
    """
    Maps hand state to the particle cloud transform.

    Hand position x drives yaw, y drives pitch and the hand roll drives
    the cloud's roll. Tension drives expansion.
    """

    def __init__(
        self,
        follow_rate: float = SCENE_FOLLOW_RATE,
        return_rate: float = SCENE_RETURN_RATE,
        idle_spin: float = SCENE_IDLE_SPIN,
        position_gain: float = SCENE_POSITION_GAIN,
        expansion_rate: float = SCENE_EXPANSION_RATE
    ):
        self.follow_rate = follow_rate
        self.return_rate = return_rate
        self.idle_spin = idle_spin
        self.position_gain = position_gain
        self.expansion_rate = expansion_rate
        self.transform = SceneTransform()

    def update(self, state: HandState) -> SceneTransform:
        """
        Advance one display frame.

        Args:
            state: Latest published hand state.

        Returns:
            The updated transform.
        """
        t = self.transform
        t.expansion = lerp(t.expansion, state.hand_tension, self.expansion_rate)

        if state.is_hand_detected:
            target_y = -state.hand_position.x * self.position_gain
            target_x = state.hand_position.y * self.position_gain
            target_z = state.hand_rotation

            t.rotation_x = lerp(t.rotation_x, target_x, self.follow_rate)
            t.rotation_y = lerp(t.rotation_y, target_y, self.follow_rate)
            t.rotation_z = lerp(t.rotation_z, target_z, self.follow_rate)
        else:
            t.rotation_y += self.idle_spin
            t.rotation_x = lerp(t.rotation_x, 0.0, self.return_rate)
            t.rotation_z = lerp(t.rotation_z, 0.0, self.return_rate)

        return t

    def reset(self) -> None:
        """Return to the initial transform."""
        self.transform = SceneTransform()
