"""Game state dataclasses."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Optional

from models import SceneRecord


@dataclass
class GameState:
    """Represents the player's progress through the story."""

    history: List[str] = field(default_factory=list)
    scene: Optional[SceneRecord] = None
    image_uri: Optional[str] = None

    @property
    def scene_number(self) -> int:
        """1-based number of the current scene, ``0`` before the first."""
        return len(self.history)

    def record_scene(self, scene: SceneRecord) -> None:
        """Make *scene* current and append it to the history."""
        self.scene = scene
        self.image_uri = None
        self.history.append(scene.scene_description)
