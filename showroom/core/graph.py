# showroom/core/graph.py
"""
A small retained-mode scene graph.

pybullet only knows flat, world-space bodies, so the graph lives here in
plain dataclasses and the spawner realizes it once the scene is complete.
Groups compose their transforms onto their children the same way the scene
literals were authored (a staircase group inside the building group, the
building group shifted as a whole).
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterator, List, Optional, Sequence, Tuple, Union

from showroom.constants import SHADOWS_DEFAULT
from showroom.core.geometry import Geometry
from showroom.core.materials import Material
from showroom.core.transforms import Transform, WorldPose

MaterialSpec = Union[Material, Sequence[Material]]


@dataclass(eq=False)
class Node:
    name: str
    transform: Transform = field(default_factory=Transform)

    def at(self, x: float, y: float, z: float) -> "Node":
        self.transform.position = (float(x), float(y), float(z))
        return self

    def rotated(self, x: float = 0.0, y: float = 0.0, z: float = 0.0) -> "Node":
        self.transform.rotation = (float(x), float(y), float(z))
        return self

    def scaled(self, x: float, y: Optional[float] = None, z: Optional[float] = None) -> "Node":
        y = x if y is None else y
        z = x if z is None else z
        self.transform.scale = (float(x), float(y), float(z))
        return self


@dataclass(eq=False)
class Mesh(Node):
    geometry: Optional[Geometry] = None
    material: Optional[MaterialSpec] = None
    cast_shadow: bool = False
    receive_shadow: bool = False

    def __post_init__(self):
        if self.geometry is None or self.material is None:
            raise ValueError(f"mesh {self.name!r} needs a geometry and a material")
        if not isinstance(self.material, Material):
            self.material = list(self.material)
            slots = self.geometry.material_slots
            if len(self.material) != slots:
                raise ValueError(
                    f"mesh {self.name!r}: {self.geometry.kind} has {slots} material slots, "
                    f"got {len(self.material)} materials"
                )

    def material_for(self, slot: int) -> Material:
        if isinstance(self.material, Material):
            return self.material
        return self.material[slot]

    def material_groups(self) -> List[Tuple[Optional[Tuple[int, ...]], Material]]:
        """(slots, material) pairs, merging slots that share one material.

        A single material covers the whole geometry and reports ``None``.
        """
        if isinstance(self.material, Material):
            return [(None, self.material)]
        merged: List[Tuple[List[int], Material]] = []
        for slot, material in enumerate(self.material):
            for slots, seen in merged:
                if seen is material:
                    slots.append(slot)
                    break
            else:
                merged.append(([slot], material))
        return [(tuple(slots), material) for slots, material in merged]


@dataclass(eq=False)
class ModelRef(Node):
    """An external model file placed in the scene once the loader delivers it.

    ``shared`` refs with the same path are parsed once and cloned.
    """

    path: str = ""
    shared: bool = False

    def __post_init__(self):
        if not self.path:
            raise ValueError(f"model {self.name!r} needs a path")


@dataclass(eq=False)
class Light(Node):
    color: int = 0xFFFFFF
    intensity: float = 1.0


@dataclass(eq=False)
class AmbientLight(Light):
    pass


@dataclass(eq=False)
class DirectionalLight(Light):
    pass


@dataclass(eq=False)
class PointLight(Light):
    distance: float = 0.0          # 0 means unlimited range
    cast_shadow: bool = False
    show_helper: bool = False


@dataclass(eq=False)
class Group(Node):
    children: List[Node] = field(default_factory=list)

    def add(self, *nodes: Node) -> "Group":
        self.children.extend(nodes)
        return self


@dataclass(slots=True)
class Placed:
    node: Node
    pose: WorldPose
    parents: Tuple[str, ...]


@dataclass(eq=False)
class Scene:
    name: str
    background: int = 0xF0F0F0
    shadows: bool = SHADOWS_DEFAULT
    root: Group = field(default_factory=lambda: Group("root"))

    def add(self, *nodes: Node) -> "Scene":
        self.root.add(*nodes)
        return self

    def walk(self) -> Iterator[Placed]:
        """Pre-order traversal yielding every node (groups included) with its world pose."""
        return self._walk(self.root, WorldPose(), ())

    def _walk(self, group: Group, pose: WorldPose, parents: Tuple[str, ...]) -> Iterator[Placed]:
        group_pose = pose.then(group.transform)
        path = parents + (group.name,)
        for child in group.children:
            yield Placed(child, group_pose.then(child.transform), path)
            if isinstance(child, Group):
                yield from self._walk(child, group_pose, path)

    def nodes(self, kind: type = Node) -> List[Placed]:
        return [placed for placed in self.walk() if isinstance(placed.node, kind)]

    def meshes(self) -> List[Placed]:
        return self.nodes(Mesh)

    def models(self) -> List[Placed]:
        return self.nodes(ModelRef)

    def lights(self) -> List[Placed]:
        return self.nodes(Light)

    def find(self, name: str) -> Placed:
        for placed in self.walk():
            if placed.node.name == name:
                return placed
        raise KeyError(name)

    def validate(self) -> "Scene":
        seen = set()
        for placed in self.walk():
            if placed.node.name in seen:
                raise ValueError(f"duplicate node name {placed.node.name!r} in scene {self.name!r}")
            seen.add(placed.node.name)
        return self
