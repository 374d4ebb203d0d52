# showroom/scenes/prototype.py
"""First textured prototype: one floor slab, a glass side wall and the ceiling."""
from __future__ import annotations

from showroom.core.geometry import box, cylinder
from showroom.core.graph import AmbientLight, DirectionalLight, Mesh, Scene
from showroom.core.materials import PhongMaterial, StandardMaterial
from showroom.scenes.building import glass, stairs, underground_ring
from showroom.scenes.garage import garage_models, work_light

BACKGROUND = 0xF0F0F0


def build() -> Scene:
    scene = Scene("prototype", background=BACKGROUND)
    scene.add(
        AmbientLight(name="ambient", intensity=0.3),
        DirectionalLight(name="sun", intensity=2.0).at(5, 10, 7.5),
        work_light(),
    )

    floor = PhongMaterial(texture="screen.png", repeat=(8, 8))
    scene.add(Mesh(name="floor", geometry=box(20, 1, 30), material=floor).at(-5.3, -5.5, 0))
    scene.add(underground_ring().at(0, -4, -50))
    scene.add(Mesh(name="left_wall", geometry=box(0.5, 8, 30), material=glass()).at(-15, -1, 0))

    ceiling = StandardMaterial(color=0xFFFFFF, emissive=0x222222)
    scene.add(Mesh(name="ceiling", geometry=box(30, 1, 30), material=ceiling).at(0, 2.5, 0))

    panel = PhongMaterial(color=0xFFFFFF, transparent=True, opacity=0.5)
    scene.add(Mesh(name="glass_panel", geometry=box(0.1, 4, 10), material=panel).at(15, 4, 0))

    pillar_geometry = cylinder(1, 1, 8, 32)
    pillar = StandardMaterial(color=0xFFFFFF)
    scene.add(
        Mesh(name="pillar", geometry=pillar_geometry, material=pillar).at(10, -2, 12),
        Mesh(name="pillar_2", geometry=pillar_geometry, material=pillar).at(10, -2, -12),
    )

    scene.add(stairs(StandardMaterial(color=0x808080)))
    scene.add(*garage_models())
    return scene.validate()
