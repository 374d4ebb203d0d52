# showroom/app.py
"""
Build a preset, hand its models to the background loader and run the frame
loop.

    python -m showroom --preset garage
    python -m showroom --headless --snapshot garage.png
"""
from __future__ import annotations

import sys
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

import numpy as np
import pybullet as p
from loguru import logger
from PIL import Image

from showroom.config import ShowroomConfig, read_config
from showroom.constants import CONTROLS_TARGET, FRAME_RATE, SNAPSHOT_HEIGHT, SNAPSHOT_WIDTH
from showroom.core.camera import OrbitControls, PerspectiveCamera
from showroom.core.graph import Placed, Scene
from showroom.core.loader import LoadedModel, LoadingManager, ModelLoader
from showroom.core.spawner import SceneLighting, SceneSpawner
from showroom.core.viewer import Viewer
from showroom.scenes import build_scene, list_presets, PRESETS
from showroom.utils.logging import ColoredLogger, setup_logging


@dataclass
class BuildSummary:
    preset: str
    meshes: int
    bodies: int
    models_requested: int
    models_loaded: int
    models_failed: int
    textures_missing: int
    seconds: float


# --------------------------------------------------------------------------
# Snapshot
# --------------------------------------------------------------------------
def snapshot(
    cli: int,
    camera: PerspectiveCamera,
    path,
    width: int = SNAPSHOT_WIDTH,
    height: int = SNAPSHOT_HEIGHT,
    lighting: Optional[SceneLighting] = None,
    target: Sequence[float] = CONTROLS_TARGET,
    shadows: bool = False,
) -> Path:
    """Render the camera's view with TinyRenderer and write it as a PNG."""
    lighting = lighting or SceneLighting()
    camera.set_size(width, height)
    w, h, rgba, _, _ = p.getCameraImage(
        width=width,
        height=height,
        viewMatrix=camera.view_matrix(target, cli),
        projectionMatrix=camera.projection_matrix(cli),
        lightDirection=list(lighting.light_position),
        lightColor=list(lighting.light_color),
        lightAmbientCoeff=lighting.ambient,
        lightDiffuseCoeff=lighting.diffuse,
        lightSpecularCoeff=0.0,
        shadow=1 if shadows else 0,
        renderer=p.ER_TINY_RENDERER,
        physicsClientId=cli,
    )
    image = np.reshape(np.asarray(rgba, dtype=np.uint8), (h, w, 4))
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    Image.fromarray(image[:, :, :3], "RGB").save(path)
    logger.info(f"Snapshot written to {path} ({w}x{h})")
    return path


# --------------------------------------------------------------------------
# Session
# --------------------------------------------------------------------------
class ShowroomSession:
    """One viewer, one preset and the loader feeding models into it."""

    def __init__(self, config: ShowroomConfig, viewer: Viewer, loader: Optional[ModelLoader] = None):
        self.config = config
        self.viewer = viewer
        self.manager = LoadingManager(
            on_load=lambda: logger.debug("No assets outstanding"),
            show_progress=not config.use_gui,
        )
        self.loader = loader or ModelLoader(config.asset_root, manager=self.manager)
        self.spawner = SceneSpawner(viewer.cli, config.asset_root, config.shadows, manager=self.loader.manager)
        self.camera = PerspectiveCamera()
        self.camera.set_size(config.width, config.height)
        self.controls = OrbitControls(self.camera, cli=viewer.cli if viewer.use_gui else None)
        self.scene: Optional[Scene] = None
        self.generation = 0
        self.models_requested = 0
        self.models_loaded = 0
        self.models_failed = 0
        self._build_started = 0.0

    def build(self) -> Scene:
        """Spawn the preset's meshes and request its models."""
        self._build_started = time.perf_counter()
        self.generation += 1
        scene = build_scene(self.config.preset)
        with self.viewer.turbo(self.config.turbo_build):
            self.spawner.spawn(scene)
        self.scene = scene
        self.models_requested = self.models_loaded = self.models_failed = 0
        for placed in scene.models():
            self._request(placed)
        self.controls.apply()
        return scene

    def rebuild(self) -> Scene:
        self.viewer.reset()
        self.spawner.reset()
        return self.build()

    def _request(self, placed: Placed) -> None:
        generation = self.generation
        node = placed.node

        def on_load(loaded: LoadedModel) -> None:
            if generation != self.generation:
                return
            self.spawner.spawn_model(loaded, placed.pose, node.name)
            self.models_loaded += 1

        def on_error(error: BaseException) -> None:
            if generation == self.generation:
                self.models_failed += 1

        load = self.loader.load_once if node.shared else self.loader.load
        load(node.path, on_load, on_error)
        self.models_requested += 1

    def summary(self) -> BuildSummary:
        return BuildSummary(
            preset=self.config.preset,
            meshes=len(self.scene.meshes()) if self.scene else 0,
            bodies=self.spawner.body_count,
            models_requested=self.models_requested,
            models_loaded=self.models_loaded,
            models_failed=self.models_failed,
            textures_missing=self.spawner.textures.missing,
            seconds=time.perf_counter() - self._build_started,
        )

    @property
    def models_outstanding(self) -> int:
        return self.models_requested - self.models_loaded - self.models_failed

    def shadows_enabled(self) -> bool:
        """The --shadows/--no-shadows override, else the preset's own setting."""
        if self.config.shadows is not None:
            return self.config.shadows
        return bool(self.scene and self.scene.shadows)

    def close(self) -> None:
        self.loader.shutdown()


def print_summary(summary: BuildSummary, show_controls: bool) -> None:
    line = "=" * 64
    print("\n" + line)
    print(f"🚗 Showroom Ready | preset {summary.preset}")
    print(line)
    print("📊 Build")
    print(f"  Time: {summary.seconds:.2f}s | Meshes: {summary.meshes} | Bodies: {summary.bodies}")
    print(
        f"  Models: {summary.models_loaded}/{summary.models_requested} loaded"
        f" | {summary.models_failed} failed | Missing textures: {summary.textures_missing}"
    )
    if show_controls:
        print(line)
        print("🎮 Controls")
        print("  Camera: LMB Drag Orbit | RMB Drag Pan | Z/X Zoom | WASD Pan | Q/E Up-Down | Shift Faster")
        print("  Render: 1 Wireframe | 2 Shadows")
        print("  Session: R Rebuild | ESC Quit")
    print(line)


# --------------------------------------------------------------------------
# Entry points
# --------------------------------------------------------------------------
def run(config: ShowroomConfig) -> BuildSummary:
    with Viewer(use_gui=config.use_gui) as viewer:
        session = ShowroomSession(config, viewer)
        try:
            session.build()
            if not config.use_gui:
                session.loader.wait(timeout=config.load_timeout)
                if session.models_outstanding:
                    ColoredLogger.warning(f"{session.models_outstanding} model(s) skipped in the summary")
                if config.snapshot is not None:
                    snapshot(
                        viewer.cli,
                        session.camera,
                        config.snapshot,
                        config.width,
                        config.height,
                        session.spawner.lighting,
                        shadows=session.shadows_enabled(),
                    )
                summary = session.summary()
                print_summary(summary, show_controls=False)
                return summary

            print_summary(session.summary(), show_controls=True)
            _frame_loop(session)
            return session.summary()
        finally:
            session.close()


def _frame_loop(session: ShowroomSession) -> None:
    cli = session.viewer.cli
    wireframe_enabled = False
    shadows_enabled = session.shadows_enabled()
    wireframe_pressed = False
    shadows_pressed = False
    r_pressed = False
    announced = False

    while session.viewer.is_connected():
        keys = p.getKeyboardEvents(physicsClientId=cli)

        if keys.get(27, 0) & p.KEY_WAS_TRIGGERED:
            break

        session.loader.poll()
        if not announced and session.models_outstanding == 0:
            announced = True
            s = session.summary()
            ColoredLogger.success(
                f"Models ready: {s.models_loaded} loaded, {s.models_failed} failed, {s.bodies} bodies"
            )

        session.controls.handle_events(keys)
        session.controls.update()

        if keys.get(ord("1"), 0) == 1:
            if not wireframe_pressed:
                wireframe_pressed = True
                wireframe_enabled = not wireframe_enabled
                p.configureDebugVisualizer(p.COV_ENABLE_WIREFRAME, 1 if wireframe_enabled else 0, physicsClientId=cli)
        else:
            wireframe_pressed = False

        if keys.get(ord("2"), 0) == 1:
            if not shadows_pressed:
                shadows_pressed = True
                shadows_enabled = not shadows_enabled
                p.configureDebugVisualizer(p.COV_ENABLE_SHADOWS, 1 if shadows_enabled else 0, physicsClientId=cli)
        else:
            shadows_pressed = False

        if keys.get(ord("r"), 0) == 1:
            if not r_pressed:
                r_pressed = True
                session.rebuild()
                announced = False
                ColoredLogger.info(f"Rebuilt {session.config.preset} in {session.summary().seconds:.2f}s")
        else:
            r_pressed = False

        p.stepSimulation(physicsClientId=cli)
        time.sleep(1.0 / FRAME_RATE)


def main(argv: Optional[Sequence[str]] = None) -> int:
    config = read_config(argv)
    if config.list_presets:
        for name in list_presets():
            doc = (sys.modules[PRESETS[name].__module__].__doc__ or "").strip().splitlines()
            print(f"{name:<10} {doc[0] if doc else ''}")
        return 0
    setup_logging(config.log_level, config.log_file)
    run(config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
