# showroom/core/camera.py
"""
Perspective camera and orbit controls for the PyBullet debug visualizer.

The camera keeps its position in scene (Y-up) coordinates.  The controls
orbit a target using pybullet's own distance / yaw / pitch parameters, so
pushing the pose to the GUI is a single ``resetDebugVisualizerCamera`` call.
"""
from __future__ import annotations

import math
from typing import Optional, Sequence, Tuple

import numpy as np
import pybullet as p

from showroom.constants import (
    CAMERA_FAR,
    CAMERA_FOV,
    CAMERA_NEAR,
    CAMERA_POSITION,
    CONTROLS_DAMPING,
    CONTROLS_DAMPING_FACTOR,
    CONTROLS_MAX_DISTANCE,
    CONTROLS_MIN_DISTANCE,
    CONTROLS_PAN_SPEED,
    CONTROLS_ROTATE_SPEED,
    CONTROLS_TARGET,
    CONTROLS_ZOOM_SPEED,
    PITCH_LIMIT_DEG,
)
from showroom.core.transforms import (
    offset_from_orbit,
    orbit_from_offset,
    to_yup_position,
    to_zup_position,
)

_EPS = 1e-6


class PerspectiveCamera:
    def __init__(
        self,
        fov: float = CAMERA_FOV,
        aspect: float = 16.0 / 9.0,
        near: float = CAMERA_NEAR,
        far: float = CAMERA_FAR,
        position: Sequence[float] = CAMERA_POSITION,
    ):
        if near <= 0 or far <= near:
            raise ValueError(f"invalid clip range near={near} far={far}")
        self.fov = float(fov)
        self.aspect = float(aspect)
        self.near = float(near)
        self.far = float(far)
        self.position: Tuple[float, float, float] = tuple(float(v) for v in position)

    def set_size(self, width: int, height: int) -> None:
        """Window resize: only the aspect ratio follows the new size."""
        if width <= 0 or height <= 0:
            raise ValueError(f"invalid viewport {width}x{height}")
        self.aspect = width / height

    def view_matrix(self, target: Sequence[float] = CONTROLS_TARGET, cli: int = 0):
        return p.computeViewMatrix(
            cameraEyePosition=list(to_zup_position(self.position)),
            cameraTargetPosition=list(to_zup_position(target)),
            cameraUpVector=[0, 0, 1],
            physicsClientId=cli,
        )

    def projection_matrix(self, cli: int = 0):
        return p.computeProjectionMatrixFOV(
            fov=self.fov,
            aspect=self.aspect,
            nearVal=self.near,
            farVal=self.far,
            physicsClientId=cli,
        )


class OrbitControls:
    """Orbit / zoom / pan around a target with optional damping.

    Input only accumulates deltas; :meth:`update` applies them once per frame.
    With damping a ``damping_factor`` share of the outstanding delta is
    applied each frame and the rest decays, so motion eases out.
    """

    def __init__(
        self,
        camera: PerspectiveCamera,
        target: Sequence[float] = CONTROLS_TARGET,
        enable_damping: bool = CONTROLS_DAMPING,
        damping_factor: float = CONTROLS_DAMPING_FACTOR,
        cli: Optional[int] = None,
        min_distance: float = CONTROLS_MIN_DISTANCE,
        max_distance: float = CONTROLS_MAX_DISTANCE,
        rotate_speed: float = CONTROLS_ROTATE_SPEED,
        zoom_speed: float = CONTROLS_ZOOM_SPEED,
        pan_speed: float = CONTROLS_PAN_SPEED,
    ):
        if not 0.0 < damping_factor <= 1.0:
            raise ValueError(f"damping_factor must be in (0, 1], got {damping_factor}")
        self.camera = camera
        self.enable_damping = enable_damping
        self.damping_factor = float(damping_factor)
        self.cli = cli
        self.min_distance = float(min_distance)
        self.max_distance = float(max_distance)
        self.rotate_speed = rotate_speed
        self.zoom_speed = zoom_speed
        self.pan_speed = pan_speed

        self.target = np.array(to_zup_position(target))
        offset = np.array(to_zup_position(camera.position)) - self.target
        self.distance, self.yaw, self.pitch = orbit_from_offset(offset)
        self.distance = min(self.max_distance, max(self.min_distance, self.distance))
        self.pitch = max(-PITCH_LIMIT_DEG, min(PITCH_LIMIT_DEG, self.pitch))

        self._d_yaw = 0.0
        self._d_pitch = 0.0
        self._d_zoom = 0.0                   # log-distance
        self._d_pan = np.zeros(3)

        self.last_mouse_x = 0
        self.last_mouse_y = 0
        self.lmb_held = False
        self.rmb_held = False

    # -- input accumulation --------------------------------------------------
    def rotate(self, d_yaw: float, d_pitch: float) -> None:
        """Queue an orbit step in degrees."""
        self._d_yaw += d_yaw
        self._d_pitch += d_pitch

    def zoom(self, steps: float) -> None:
        """Positive steps move in, negative move out."""
        self._d_zoom -= steps * self.zoom_speed

    def pan(self, right: float, forward: float, up: float = 0.0) -> None:
        """Queue a target shift in the camera's horizontal frame, scaled by distance."""
        rad_yaw = math.radians(self.yaw)
        f_x, f_y = -math.sin(rad_yaw), math.cos(rad_yaw)
        r_x, r_y = math.cos(rad_yaw), math.sin(rad_yaw)
        scale = self.pan_speed * max(1.0, self.distance) * 0.1
        self._d_pan += np.array(
            [f_x * forward + r_x * right, f_y * forward + r_y * right, up]
        ) * scale

    @property
    def settled(self) -> bool:
        return (
            abs(self._d_yaw) < _EPS
            and abs(self._d_pitch) < _EPS
            and abs(self._d_zoom) < _EPS
            and float(np.abs(self._d_pan).max()) < _EPS
        )

    # -- per frame -----------------------------------------------------------
    def update(self) -> bool:
        """Apply queued motion; returns True when the camera moved."""
        if self.settled:
            self._d_yaw = self._d_pitch = self._d_zoom = 0.0
            self._d_pan[:] = 0.0
            return False

        share = self.damping_factor if self.enable_damping else 1.0
        self.yaw = (self.yaw + self._d_yaw * share) % 360.0
        self.pitch = max(-PITCH_LIMIT_DEG, min(PITCH_LIMIT_DEG, self.pitch + self._d_pitch * share))
        self.distance = min(
            self.max_distance,
            max(self.min_distance, self.distance * math.exp(self._d_zoom * share)),
        )
        self.target = self.target + self._d_pan * share

        keep = 1.0 - share
        self._d_yaw *= keep
        self._d_pitch *= keep
        self._d_zoom *= keep
        self._d_pan *= keep

        self.camera.position = self.eye()
        self.apply()
        return True

    def eye(self) -> Tuple[float, float, float]:
        """Camera position in scene (Y-up) coordinates."""
        offset = np.array(offset_from_orbit(self.distance, self.yaw, self.pitch))
        return to_yup_position(self.target + offset)

    def apply(self) -> None:
        if self.cli is None:
            return
        p.resetDebugVisualizerCamera(
            self.distance, self.yaw, self.pitch, self.target.tolist(), physicsClientId=self.cli
        )

    def handle_events(self, keys=None, mouse=None) -> None:
        """Feed pybullet mouse and keyboard events into the controls.

        Left drag orbits, right drag pans, ``z``/``x`` zoom, WASD pans the
        target across the floor and Q/E lifts it.  Shift triples key speeds.
        """
        if keys is None:
            keys = p.getKeyboardEvents(physicsClientId=self.cli)
        if mouse is None:
            mouse = p.getMouseEvents(physicsClientId=self.cli)
        dx = 0
        dy = 0

        for e in mouse:
            if e[0] == 1:
                if self.lmb_held or self.rmb_held:
                    dx += e[1] - self.last_mouse_x
                    dy += e[2] - self.last_mouse_y
                self.last_mouse_x = e[1]
                self.last_mouse_y = e[2]
            if e[0] == 2:
                held = e[4] == 3 or e[4] == 1
                if e[3] == 0:
                    self.lmb_held = held
                elif e[3] == 2:
                    self.rmb_held = held
                if held:
                    self.last_mouse_x = e[1]
                    self.last_mouse_y = e[2]

        if self.lmb_held and (dx or dy):
            self.rotate(-dx * self.rotate_speed, -dy * self.rotate_speed)
        elif self.rmb_held and (dx or dy):
            self.pan(-dx * 0.1, dy * 0.1)

        boost = 3.0 if keys.get(p.B3G_SHIFT, 0) else 1.0
        fwd = (1 if keys.get(ord("w"), 0) else 0) - (1 if keys.get(ord("s"), 0) else 0)
        right = (1 if keys.get(ord("d"), 0) else 0) - (1 if keys.get(ord("a"), 0) else 0)
        up = (1 if keys.get(ord("e"), 0) else 0) - (1 if keys.get(ord("q"), 0) else 0)
        zoom = (1 if keys.get(ord("z"), 0) else 0) - (1 if keys.get(ord("x"), 0) else 0)
        if fwd or right or up:
            self.pan(right * boost, fwd * boost, up * boost)
        if zoom:
            self.zoom(zoom * boost)
