# showroom/scenes/building.py
"""
Pieces shared by the presets: the material palette, the two-wing building
shell, the two-step staircase and the lathed underground ring.

All coordinates are Y-up scene units, relative to the group they are added
to.  The building group itself is shifted to ``BUILDING_OFFSET``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass

from showroom.core.geometry import box, cylinder, lathe, plane, scale_profile
from showroom.core.graph import Group, Mesh
from showroom.core.materials import (
    LambertMaterial,
    Material,
    PhysicalMaterial,
    StandardMaterial,
    textured,
)

# --------------------------------------------------------------------------
# Layout constants
# --------------------------------------------------------------------------
BUILDING_OFFSET = (30.0, -0.7, 20.0)

RING_PROFILE = [(4, 0), (5, 0), (5, 4), (4, 4), (4, 0)]
RING_WIDTH_SCALE = 5.0
RING_HEIGHT_SCALE = 2.0
RING_SEGMENTS = 600
RING_SWEEP = 1.9 * math.pi

STEP_WIDTH = 5.0
STEP_HEIGHT = 0.5
STEP_DEPTH = 1.0
NUMBER_OF_STEPS = 2
STAIRS_POSITION = (6.0, -6.0, 0.0)

OUTSIDE_PILLAR_Z = [12, -12, -36]
INSIDE_PILLAR_XZ = [(0, 14), (0, -12), (0, -36), (-20, -36), (-40, -36), (-60, -36)]
INSIDE_PILLAR_LEVELS = {"upper": 6.0, "lower": -2.0}

GROUND_SIZE = 200.0
GROUND_Y = -6.0


@dataclass(eq=False)
class Palette:
    brick: Material
    floor: Material
    panel: Material
    plaster: Material
    roof: Material
    logo: Material
    door: Material
    inside_pillar: Material
    outside_pillar: Material
    window: Material
    parking: Material
    grass: Material
    step: Material

    # Face order: right, left, top, bottom, front, back
    def bottom_platform(self):
        return [self.plaster, self.plaster, self.floor, self.plaster, self.plaster, self.plaster]

    def middle_platform(self):
        return [self.plaster, self.panel, self.floor, self.plaster, self.panel, self.plaster]

    def top_platform(self):
        return [self.plaster, self.panel, self.roof, self.plaster, self.panel, self.plaster]

    def outside_wall(self):
        return [self.brick, self.plaster, self.plaster, self.plaster, self.plaster, self.plaster]


def glass() -> PhysicalMaterial:
    return PhysicalMaterial(color=0xFFFFFF, transmission=0.9, reflectivity=0.5, roughness=0.0)


def make_palette() -> Palette:
    return Palette(
        brick=textured("brickwall.jpg", (4, 1)),
        floor=textured("screen.png", (8, 8)),
        panel=textured("panel.jpg", (2, 1)),
        plaster=textured("plasterwall.jpg", (4, 1)),
        roof=textured("roof.jpg", (2, 2)),
        logo=textured("VA.png"),
        door=textured("door.png"),
        inside_pillar=textured("pillar.jpg"),
        outside_pillar=StandardMaterial(color=0xFFFFFF),
        window=glass(),
        parking=textured("parking.jpg", (2, 2)),
        grass=textured("grass.jpg", (50, 50)),
        step=StandardMaterial(color=0x808080),
    )


# --------------------------------------------------------------------------
# Shared pieces
# --------------------------------------------------------------------------
def underground_ring(name: str = "underground_ring") -> Mesh:
    """Open lathed ring; the 0.1π gap is the ramp opening."""
    profile = scale_profile(RING_PROFILE, RING_WIDTH_SCALE, RING_HEIGHT_SCALE)
    return Mesh(
        name=name,
        geometry=lathe(profile, RING_SEGMENTS, 0.0, RING_SWEEP),
        material=LambertMaterial(double_sided=True),
    )


def stairs(material: Material, name: str = "stairs") -> Group:
    group = Group(name)
    step_geometry = box(STEP_WIDTH, STEP_HEIGHT, STEP_DEPTH)
    for i in range(NUMBER_OF_STEPS):
        step = Mesh(name=f"{name}_step_{i}", geometry=step_geometry, material=material)
        step.at(-i * STEP_DEPTH, STEP_HEIGHT / 2 + i * STEP_HEIGHT, 0).rotated(y=-math.pi / 2)
        group.add(step)
    group.at(*STAIRS_POSITION)
    return group


def ground(material: Material, receive_shadow: bool = False) -> Mesh:
    mesh = Mesh(
        name="ground",
        geometry=plane(GROUND_SIZE, GROUND_SIZE),
        material=material,
        receive_shadow=receive_shadow,
    )
    return mesh.at(0, GROUND_Y, 0).rotated(x=-math.pi / 2)


def building(palette: Palette, shadows: bool = False) -> Group:
    """Both wings, pillars, stairs and the parking slab.

    With *shadows* the slabs and walls receive shadows and the entrance
    (left glass wall, logo, door) casts them.
    """
    group = Group("building")
    quarter = math.pi / 2

    def add(name, geometry, material, x=0.0, y=0.0, z=0.0, ry=0.0, cast=False):
        mesh = Mesh(
            name=name,
            geometry=geometry,
            material=material,
            cast_shadow=shadows and cast,
            receive_shadow=shadows,
        )
        mesh.at(x, y, z).rotated(y=ry)
        group.add(mesh)
        return mesh

    # -- first wing ---------------------------------------------------------
    add("platform_1", box(21, 1, 50), palette.bottom_platform(), x=-5.3, y=-5.5)
    add("back_wall_1f", box(1, 9, 50), palette.outside_wall(), 5, -2, 0)
    add("front_wall_1f", box(0.5, 8, 50), palette.window, x=-15, y=-1)
    add("left_wall_1f", box(0.5, 8, 20), palette.window, -5, -1, 25, ry=quarter, cast=True)
    add("logo", box(0.1, 3, 5), palette.logo, x=5.5, y=0, cast=True)
    add("door", box(0.1, 3, 5), palette.door, x=5.6, y=-4, cast=True)

    pillar_geometry = cylinder(1, 1, 8, 32)
    for i, z in enumerate(OUTSIDE_PILLAR_Z):
        add(f"outside_pillar_{i}", pillar_geometry, palette.outside_pillar, 10, -2, z)

    inside_geometry = cylinder(1, 1, 8, 32)
    for level, y in INSIDE_PILLAR_LEVELS.items():
        for i, (x, z) in enumerate(INSIDE_PILLAR_XZ):
            add(f"inside_pillar_{level}_{i}", inside_geometry, palette.inside_pillar, x, y, z)

    group.add(stairs(palette.step))

    platform2_geometry = box(30, 2, 50)
    add("platform_2", platform2_geometry, palette.middle_platform(), y=2.5)
    add("back_wall_2f", box(0.5, 7, 50), palette.window, 14.7, 6, 0)
    add("front_wall_2f", box(0.5, 7, 50), palette.window, x=-14.7, y=6)
    add("left_wall_2f", box(0.5, 7, 29), palette.window, -0.1, 6, 24.8, ry=quarter)
    add("platform_3", platform2_geometry, palette.top_platform(), y=10.5)

    # -- second wing --------------------------------------------------------
    add("platform_4", box(70, 1, 20), palette.bottom_platform(), -30, -5.5, -35)
    add("left_wall_3", box(1, 9, 20), palette.outside_wall(), 5, -2, -35)
    add("back_wall_3", box(0.5, 7, 70), palette.outside_wall(), -30, -1.5, -44.8, ry=quarter)
    add("front_wall_3", box(0.5, 8, 50), palette.window, -40, -1, -25.2, ry=quarter)
    add("right_wall_1f", box(0.5, 7, 19.5), palette.window, -65, -1.5, -35)

    platform5_geometry = box(80, 2, 20)
    add("platform_5", platform5_geometry, palette.middle_platform(), -25, 2.5, -35)
    add("left_wall_4", box(0.5, 7, 20), palette.window, 14.7, 6, -35)
    add("front_wall_4", box(0.5, 7, 50), palette.window, -40, 6, -25, ry=quarter)
    add("right_wall_2f", box(0.5, 7, 19.5), palette.window, -65, 6, -35)
    add("back_wall_4", box(0.5, 7, 80), palette.window, -25, 6, -45, ry=quarter)
    add("platform_6", platform5_geometry, palette.top_platform(), -25, 10.5, -35)

    add("parking", box(50, 1, 50), palette.parking, -40.9, -5.5, 0)

    group.at(*BUILDING_OFFSET)
    return group
