# showroom/scenes/garage.py
"""The single-floor garage: the building shell without shadows and three cars."""
from __future__ import annotations

import math

from showroom.core.graph import AmbientLight, DirectionalLight, ModelRef, PointLight, Scene
from showroom.scenes.building import building, ground, make_palette, underground_ring

BACKGROUND = 0xADD8E6

# (name, path, position, scale, rotation about Y)
GARAGE_MODELS = [
    ("model", "model/scene.gltf", (-8, 6, 20), 1.0, math.pi / 2 + math.pi),
    ("model2", "model2/scene.gltf", (10, -5, -5), 1.0, math.pi / 2),
    ("model3", "model3/scene.gltf", (-11, -4.7, 7), 100.0, math.pi / 2 + math.pi),
]


def work_light() -> PointLight:
    return PointLight(name="work_light", intensity=50.0, distance=100.0, show_helper=True).at(-5, 2, 0)


def garage_models():
    return [
        ModelRef(name=name, path=path).at(*position).scaled(scale).rotated(y=rotation_y)
        for name, path, position, scale, rotation_y in GARAGE_MODELS
    ]


def build() -> Scene:
    scene = Scene("garage", background=BACKGROUND)
    scene.add(
        AmbientLight(name="ambient", intensity=0.3),
        DirectionalLight(name="sun", intensity=2.0).at(-5, 20, 7.5),
        work_light(),
        underground_ring().at(40, -20, -40),
    )
    palette = make_palette()
    scene.add(building(palette), ground(palette.grass))
    scene.add(*garage_models())
    return scene.validate()
