"""Camera projection, sphere tracing and the per-frame render loop."""

from __future__ import annotations

import enum
import logging
import math
import time
from dataclasses import dataclass
from typing import Dict, List, Optional, Protocol, Tuple

from .color import BACKGROUND, glyph_for_color
from .errors import EmptySceneError
from .scene import Ray, Renderable, Scene
from .vector import Vec3

logger = logging.getLogger(__name__)

Frame = List[List[str]]


class Command(enum.Enum):
    """Discrete camera commands produced by an input source."""

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    FORWARD = "forward"
    BACK = "back"
    QUIT = "quit"
    NONE = "none"


# One world unit per command, no acceleration.
_COMMAND_OFFSETS: Dict[Command, Vec3] = {
    Command.UP: Vec3(0.0, -1.0, 0.0),
    Command.DOWN: Vec3(0.0, 1.0, 0.0),
    Command.LEFT: Vec3(-1.0, 0.0, 0.0),
    Command.RIGHT: Vec3(1.0, 0.0, 0.0),
    Command.BACK: Vec3(0.0, 0.0, -1.0),
    Command.FORWARD: Vec3(0.0, 0.0, 1.0),
}


class DisplaySurface(Protocol):
    def size(self) -> Tuple[int, int]: ...

    def write_glyph(self, row: int, col: int, char: str) -> None: ...

    def write_text(self, row: int, col: int, text: str) -> None: ...

    def refresh(self) -> None: ...


class InputSource(Protocol):
    def read_command(self) -> Command: ...


@dataclass
class Camera:
    """Pinhole camera looking down +z; only ``position`` changes at runtime."""

    width: int
    height: int
    fov_degrees: float = 30.0
    position: Vec3 = Vec3(0.0, 0.0, 0.0)

    def __post_init__(self) -> None:
        if self.width < 1 or self.height < 1:
            raise ValueError("Camera requires width and height >= 1")
        if not 0.0 < self.fov_degrees < 180.0:
            raise ValueError(f"Field of view must be in (0, 180) degrees, got {self.fov_degrees}")

    @classmethod
    def fit(cls, rows: int, cols: int, fov_degrees: float = 30.0) -> "Camera":
        """Size a camera from a display surface's reported ``(rows, cols)``."""

        return cls(cols, rows, fov_degrees)

    def projection_distance(self) -> float:
        return (self.width / 2.0) / math.tan(self.fov_degrees / 180.0 * math.pi / 2.0)

    def ray_for_pixel(self, i: int, j: int, projection_distance: Optional[float] = None) -> Ray:
        if projection_distance is None:
            projection_distance = self.projection_distance()
        direction = Vec3(i - self.width / 2.0, j - self.height / 2.0, projection_distance)
        return Ray(self.position, direction)

    def move(self, command: Command) -> None:
        offset = _COMMAND_OFFSETS.get(command)
        if offset is None:
            return
        self.position = self.position.add(offset)
        logger.debug("Camera moved %s to %s", command.value, self.position)

    def status_line(self) -> str:
        p = self.position
        return f"({p.x}, {p.y}, {p.z})"


@dataclass(frozen=True, slots=True)
class MarchSettings:
    """Tunable sphere-tracing constants."""

    max_steps: int = 10
    hit_threshold: float = 0.1

    def __post_init__(self) -> None:
        if self.max_steps < 1:
            raise ValueError("max_steps must be at least 1")
        if self.hit_threshold <= 0.0:
            raise ValueError("hit_threshold must be positive")


@dataclass(frozen=True, slots=True)
class Hit:
    obj: Renderable
    point: Vec3
    distance: float
    steps: int


class RayMarcher:
    """Sphere tracer over a scene's signed-distance functions."""

    def __init__(self, settings: MarchSettings | None = None) -> None:
        self.settings = settings or MarchSettings()

    def march(self, scene: Scene, ray: Ray) -> Optional[Hit]:
        threshold = self.settings.hit_threshold
        point = ray.origin
        for step in range(self.settings.max_steps):
            obj, distance = scene.find_nearest(point)
            if step == 0 and distance <= 0.0:
                # The ray starts inside an object; there is no outward surface to shade.
                return None
            if distance < threshold:
                return Hit(obj, point, distance, step + 1)
            # Nothing can be closer than ``distance``, so the step is safe.
            point = ray.step(point, distance)
        return None


class RenderEngine:
    """Renders a scene as a grid of brightness glyphs."""

    def __init__(self, settings: MarchSettings | None = None) -> None:
        self.marcher = RayMarcher(settings)

    @property
    def settings(self) -> MarchSettings:
        return self.marcher.settings

    def shade_pixel(self, scene: Scene, ray: Ray) -> str:
        hit = self.marcher.march(scene, ray)
        if hit is None:
            return BACKGROUND
        return glyph_for_color(hit.obj.shade(hit.point, scene.lights))

    def render(self, scene: Scene, camera: Camera) -> Frame:
        if not scene.objects:
            raise EmptySceneError("Cannot render a scene with no objects")

        started = time.perf_counter()
        projection_distance = camera.projection_distance()
        frame: Frame = []
        for j in range(camera.height):
            row: List[str] = []
            for i in range(camera.width):
                ray = camera.ray_for_pixel(i, j, projection_distance)
                row.append(self.shade_pixel(scene, ray))
            frame.append(row)

        logger.debug(
            "Rendered %dx%d frame in %.3fs",
            camera.width,
            camera.height,
            time.perf_counter() - started,
        )
        return frame

    @staticmethod
    def draw(frame: Frame, surface: DisplaySurface) -> None:
        for row_index, row in enumerate(frame):
            for col_index, char in enumerate(row):
                surface.write_glyph(row_index, col_index, char)

    def render_to(self, scene: Scene, camera: Camera, surface: DisplaySurface) -> Frame:
        """Render, draw and overlay the camera status line; the caller refreshes."""

        frame = self.render(scene, camera)
        self.draw(frame, surface)
        surface.write_text(0, 0, camera.status_line())
        return frame


def compose_frame(frame: Frame) -> str:
    return "\n".join("".join(row) for row in frame)
