# showroom/scenes/showroom.py
"""The full multi-story showroom: building, lamps on both floors and the car catalog."""
from __future__ import annotations

import math
from typing import List, NamedTuple, Tuple

from showroom.core.graph import AmbientLight, DirectionalLight, ModelRef, PointLight, Scene
from showroom.scenes.building import building, ground, make_palette, underground_ring

BACKGROUND = 0xADD8E6

LAMP_MODEL = "ceiling_lamp_673/scene2.gltf"
LAMP_SCALE = 0.1
LAMP_LIGHT_INTENSITY = 50.0
LAMP_LIGHT_DISTANCE = 50.0
LAMP_POSITIONS: List[Tuple[float, float, float]] = [
    (25, 8.6, 17),
    (25, 8.6, 0),
    (20, 8.6, -15),
    (0, 8.6, -15),
    (-20, 8.6, -15),
    (25, 0.6, 17),
    (25, 0.6, 0),
    (20, 0.6, -15),
    (0, 0.6, -15),
    (-20, 0.6, -15),
]


class CarSpec(NamedTuple):
    path: str
    position: Tuple[float, float, float]
    scale: float
    rotation_y: float

    @property
    def name(self) -> str:
        return "car_" + self.path.split("/", 1)[0]


CAR_CATALOG: List[CarSpec] = [
    CarSpec("lamborghini_gallardo/scene.gltf", (-15, -5.5, -10), 1.1, math.pi / 6),
    CarSpec("g500/scene.gltf", (4, -4, -10), 0.6, math.pi / 6),
    CarSpec("mclaren/scene.gltf", (-23, -5.5, -7), 130, -math.pi / 6),
    CarSpec("gls_580/scene.gltf", (-10, -5.5, -7), 1.5, -math.pi / 6),
    CarSpec("chiron/scene.gltf", (20, -5.5, 15), 2.8, math.pi),
    CarSpec("jesko/scene.gltf", (20, -5.5, 25), 0.024, -math.pi / 2),
    CarSpec("911/scene.gltf", (19, -5.5, 35), 1.8, -math.pi / 2),
    CarSpec("r8/scene.gltf", (-47, -2.2, 113), 0.5, -math.pi / 2),
    CarSpec("pagani/scene.gltf", (20, -5.5, 3), 200, -math.pi / 2),
    CarSpec("bmw/scene.gltf", (27, 3, 17), 0.45, math.pi / 2),
    CarSpec("mazda/scene.gltf", (19, 3, 35), 200, 0.0),
    CarSpec("mustang/scene.gltf", (-12, 2.8, -10), 1.7, math.pi / 3),
    CarSpec("shelby/scene.gltf", (-28, 2.8, -13), 1.6, math.pi / 3),
    CarSpec("nfs/scene.gltf", (2, 2.8, -10), 0.08, math.pi / 2),
]


def build() -> Scene:
    scene = Scene("showroom", background=BACKGROUND)
    scene.add(
        AmbientLight(name="ambient", intensity=0.5),
        DirectionalLight(name="sun", intensity=2.0).at(-5, 20, 7.5),
        underground_ring().at(40, -20, -40),
    )

    palette = make_palette()
    scene.add(building(palette, shadows=True), ground(palette.grass, receive_shadow=True))

    # one lamp file, parsed once, cloned at every position
    for i, position in enumerate(LAMP_POSITIONS):
        scene.add(
            ModelRef(name=f"lamp_{i}", path=LAMP_MODEL, shared=True).at(*position).scaled(LAMP_SCALE),
            PointLight(
                name=f"lamp_light_{i}",
                intensity=LAMP_LIGHT_INTENSITY,
                distance=LAMP_LIGHT_DISTANCE,
                cast_shadow=True,
            ).at(*position),
        )

    for car in CAR_CATALOG:
        scene.add(
            ModelRef(name=car.name, path=car.path).at(*car.position).scaled(car.scale).rotated(y=car.rotation_y)
        )
    return scene.validate()
