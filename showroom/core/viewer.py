# showroom/core/viewer.py
from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Optional

import pybullet as p
from loguru import logger

from showroom.constants import DEFAULT_BACKGROUND


class Viewer:
    """One pybullet connection: the GUI debug visualizer, or DIRECT when headless."""

    def __init__(self, use_gui: bool = True, background=DEFAULT_BACKGROUND):
        self.use_gui = use_gui
        options = ""
        if use_gui:
            r, g, b = background
            options = f"--background_color_red={r} --background_color_green={g} --background_color_blue={b}"
        self.cli: int = p.connect(p.GUI if use_gui else p.DIRECT, options=options)
        if self.cli < 0:
            raise RuntimeError("Could not connect to pybullet")
        logger.debug(f"Connected to pybullet ({'GUI' if use_gui else 'DIRECT'}), client {self.cli}")
        self.reset()

    def reset(self) -> None:
        p.resetSimulation(physicsClientId=self.cli)
        p.setRealTimeSimulation(0, physicsClientId=self.cli)
        if self.use_gui:
            p.configureDebugVisualizer(p.COV_ENABLE_GUI, 0, physicsClientId=self.cli)
            p.configureDebugVisualizer(p.COV_ENABLE_KEYBOARD_SHORTCUTS, 0, physicsClientId=self.cli)
            p.configureDebugVisualizer(p.COV_ENABLE_MOUSE_PICKING, 0, physicsClientId=self.cli)
            p.configureDebugVisualizer(p.COV_ENABLE_WIREFRAME, 0, physicsClientId=self.cli)
        self._disable_debug_previews()

    def _disable_debug_previews(self) -> None:
        if hasattr(p, "COV_ENABLE_RGB_BUFFER_PREVIEW"):
            p.configureDebugVisualizer(p.COV_ENABLE_RGB_BUFFER_PREVIEW, 0, physicsClientId=self.cli)
        if hasattr(p, "COV_ENABLE_DEPTH_BUFFER_PREVIEW"):
            p.configureDebugVisualizer(p.COV_ENABLE_DEPTH_BUFFER_PREVIEW, 0, physicsClientId=self.cli)
        if hasattr(p, "COV_ENABLE_SEGMENTATION_MARK_PREVIEW"):
            p.configureDebugVisualizer(p.COV_ENABLE_SEGMENTATION_MARK_PREVIEW, 0, physicsClientId=self.cli)

    @contextmanager
    def turbo(self, enabled: bool = True) -> Iterator[None]:
        """Pause GUI rendering while many bodies are created."""
        paused = enabled and self.use_gui
        if paused:
            p.configureDebugVisualizer(p.COV_ENABLE_RENDERING, 0, physicsClientId=self.cli)
        try:
            yield
        finally:
            if paused:
                p.configureDebugVisualizer(p.COV_ENABLE_RENDERING, 1, physicsClientId=self.cli)
            self._disable_debug_previews()

    def is_connected(self) -> bool:
        return self.cli >= 0 and p.isConnected(physicsClientId=self.cli)

    def disconnect(self) -> None:
        if self.is_connected():
            p.disconnect(physicsClientId=self.cli)
            logger.debug(f"Disconnected pybullet client {self.cli}")
        self.cli = -1

    def __enter__(self) -> "Viewer":
        return self

    def __exit__(self, *exc) -> Optional[bool]:
        self.disconnect()
        return None
