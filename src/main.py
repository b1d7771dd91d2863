"""Interactive entry point for the terminal ray marcher."""

from __future__ import annotations

import argparse
import logging
import sys
import time
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

from .raymarch.engine import Camera, Command, DisplaySurface, InputSource, MarchSettings, RenderEngine
from .raymarch.errors import RenderError
from .raymarch.logging_config import setup_logging
from .raymarch.objects import SCENES
from .raymarch.scene import Scene
from .raymarch.terminal import BufferSurface, ScriptedInput, TerminalController, keys_to_commands, parse_size

logger = logging.getLogger(__name__)


def parse_arguments(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Sphere-traced 3D scene rendered in your terminal")
    parser.add_argument("--fov", type=float, default=30.0, help="Field of view in degrees (default: 30)")
    parser.add_argument(
        "--max-steps",
        type=int,
        default=10,
        help="Marching steps per pixel before giving up (default: 10)",
    )
    parser.add_argument(
        "--hit-threshold",
        type=float,
        default=0.1,
        help="Distance below which a ray counts as a hit (default: 0.1)",
    )
    parser.add_argument(
        "--scene",
        type=str,
        default="default",
        choices=sorted(SCENES),
        help="Which predefined scene to render",
    )
    parser.add_argument(
        "--frames",
        type=int,
        default=0,
        help="Stop after a fixed number of frames (0 = until quit)",
    )
    parser.add_argument(
        "--snapshot",
        action="store_true",
        help="Render a single frame to stdout without taking over the terminal",
    )
    parser.add_argument(
        "--size",
        type=str,
        default=None,
        metavar="COLSxROWS",
        help="Render size for --snapshot (default: current terminal size)",
    )
    parser.add_argument(
        "--script",
        type=str,
        default=None,
        metavar="KEYS",
        help="Replay camera keys (u/d/l/r/f/b, q to quit) instead of reading the keyboard",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging verbosity (default: WARNING)",
    )
    parser.add_argument("--log-file", type=str, default=None, help="Also write logs to this file")

    args = parser.parse_args(argv)
    if not 0.0 < args.fov < 180.0:
        parser.error("--fov must be between 0 and 180 degrees")
    if args.max_steps < 1:
        parser.error("--max-steps must be at least 1")
    if args.hit_threshold <= 0.0:
        parser.error("--hit-threshold must be positive")
    if args.frames < 0:
        parser.error("--frames must not be negative")
    if args.size is not None:
        try:
            parse_size(args.size)
        except ValueError as exc:
            parser.error(str(exc))
    return args


@dataclass
class RuntimeConfig:
    scene: Scene
    settings: MarchSettings
    fov: float
    max_frames: Optional[int]
    snapshot: bool
    snapshot_size: Optional[Tuple[int, int]]
    script: Optional[str]


def _setup_runtime(args: argparse.Namespace) -> RuntimeConfig:
    settings = MarchSettings(max_steps=args.max_steps, hit_threshold=args.hit_threshold)
    if settings.max_steps > 200:
        logger.warning("max-steps %d will make every frame slow", settings.max_steps)

    return RuntimeConfig(
        scene=SCENES[args.scene](),
        settings=settings,
        fov=args.fov,
        max_frames=args.frames or None,
        snapshot=args.snapshot,
        snapshot_size=parse_size(args.size) if args.size else None,
        script=args.script,
    )


def run_loop(
    engine: RenderEngine,
    scene: Scene,
    camera: Camera,
    surface: DisplaySurface,
    source: InputSource,
    max_frames: Optional[int] = None,
) -> int:
    """Render, refresh, read a command, move the camera; repeat until QUIT.

    Returns the number of frames drawn.
    """

    frames = 0
    while True:
        frame_start = time.perf_counter()
        engine.render_to(scene, camera, surface)
        surface.refresh()
        frames += 1
        logger.debug("Frame %d drawn in %.3fs", frames, time.perf_counter() - frame_start)

        if max_frames is not None and frames >= max_frames:
            break

        command = source.read_command()
        if command is Command.QUIT:
            break
        camera.move(command)
    return frames


def _run_snapshot(engine: RenderEngine, config: RuntimeConfig) -> None:
    rows, cols = config.snapshot_size or TerminalController.terminal_size()
    surface = BufferSurface(rows, cols)
    camera = Camera.fit(rows, cols, config.fov)
    if config.script:
        for command in keys_to_commands(config.script):
            if command is Command.QUIT:
                break
            camera.move(command)
    engine.render_to(config.scene, camera, surface)
    sys.stdout.write(surface.text() + "\n")
    sys.stdout.flush()


def _run_interactive(engine: RenderEngine, config: RuntimeConfig) -> None:
    controller = TerminalController()
    try:
        with controller as terminal:
            rows, cols = terminal.size()
            camera = Camera.fit(rows, cols, config.fov)
            logger.info("Rendering %dx%d at %.1f degrees", cols, rows, config.fov)
            source: InputSource = ScriptedInput.from_keys(config.script) if config.script else terminal
            frames = run_loop(engine, config.scene, camera, terminal, source, config.max_frames)
            logger.info("Drew %d frames", frames)
    except KeyboardInterrupt:  # pragma: no cover - interactive loop
        controller.restore()
        sys.stdout.write("\nInterrupted. Bye!\n")
        sys.stdout.flush()


def run(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_arguments(argv)
    setup_logging(getattr(logging, args.log_level), args.log_file)
    config = _setup_runtime(args)
    engine = RenderEngine(config.settings)

    try:
        if config.snapshot:
            _run_snapshot(engine, config)
        else:
            _run_interactive(engine, config)
    except RenderError as exc:
        logger.error("Rendering failed: %s", exc)
        return 1
    return 0


def main() -> None:
    sys.exit(run())


if __name__ == "__main__":
    main()
