# showroom/scenes/sketch.py
"""Untextured room mock-up with box placeholders for the furniture and a car."""
from __future__ import annotations

import math

from showroom.core.geometry import box, plane
from showroom.core.graph import AmbientLight, DirectionalLight, Mesh, Scene
from showroom.core.materials import PhongMaterial, StandardMaterial

BACKGROUND = 0xF0F0F0
ROOM_SIZE = 30.0
WALL_HEIGHT = 10.0


def build() -> Scene:
    scene = Scene("sketch", background=BACKGROUND)
    scene.add(
        AmbientLight(name="ambient", intensity=0.3),
        DirectionalLight(name="sun", intensity=0.8).at(5, 10, 7.5),
    )

    floor = PhongMaterial(color=0x999999)
    scene.add(Mesh(name="floor", geometry=plane(ROOM_SIZE, ROOM_SIZE), material=floor).rotated(x=-math.pi / 2))

    wall = PhongMaterial(color=0xBBBBBB)
    side_geometry = box(1, WALL_HEIGHT, ROOM_SIZE)
    scene.add(
        Mesh(name="back_wall", geometry=box(ROOM_SIZE, WALL_HEIGHT, 1), material=wall).at(0, 0, -15),
        Mesh(name="left_wall", geometry=side_geometry, material=wall).at(-15, 0, 0),
        Mesh(name="right_wall", geometry=side_geometry, material=wall).at(15, 0, 0),
    )

    ceiling = StandardMaterial(color=0xFFFFFF, emissive=0x222222)
    scene.add(
        Mesh(name="ceiling", geometry=plane(ROOM_SIZE, ROOM_SIZE), material=ceiling)
        .at(0, WALL_HEIGHT, 0)
        .rotated(x=math.pi / 2)
    )

    glass = PhongMaterial(color=0xFFFFFF, transparent=True, opacity=0.5)
    scene.add(
        Mesh(name="glass_panel", geometry=plane(15, 8), material=glass).at(-15, 4, 0).rotated(y=math.pi / 2)
    )

    scene.add(
        Mesh(name="sofa", geometry=box(3, 1, 1), material=PhongMaterial(color=0x333333)).at(-5, 0.5, -10),
        Mesh(name="car_placeholder", geometry=box(3, 1, 1), material=PhongMaterial(color=0x555555)).at(0, 0.5, -5),
    )
    return scene.validate()
