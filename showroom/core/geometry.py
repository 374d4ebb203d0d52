# showroom/core/geometry.py
"""
Primitive mesh builders: box, cylinder, lathe and plane.

Meshes are built in a Y-up local frame, centred on the origin and with the
same face order, UV layout and winding as the usual retained-mode engines, so
the literal sizes in the scene presets mean what they always meant.  Each
geometry keeps *groups* (index ranges tagged with a material slot) so a box
can carry a different material per face.

Pure numpy: pybullet only sees the arrays once the spawner converts them.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

import numpy as np

# Box material slots, in face order.
BOX_FACES = ("right", "left", "top", "bottom", "front", "back")


@dataclass(slots=True)
class DrawGroup:
    start: int            # first index (into Geometry.indices)
    count: int            # number of indices
    material_index: int


@dataclass(slots=True)
class SubMesh:
    vertices: np.ndarray
    normals: np.ndarray
    uvs: np.ndarray
    indices: np.ndarray


@dataclass(eq=False)
class Geometry:
    kind: str
    vertices: np.ndarray
    normals: np.ndarray
    uvs: np.ndarray
    indices: np.ndarray
    groups: List[DrawGroup] = field(default_factory=list)
    params: Dict[str, float] = field(default_factory=dict)

    def __post_init__(self):
        if not self.groups:
            self.groups = [DrawGroup(0, len(self.indices), 0)]

    @property
    def vertex_count(self) -> int:
        return int(self.vertices.shape[0])

    @property
    def triangle_count(self) -> int:
        return int(self.indices.shape[0] // 3)

    @property
    def material_slots(self) -> int:
        return max(g.material_index for g in self.groups) + 1

    def bounds(self) -> Tuple[np.ndarray, np.ndarray]:
        return self.vertices.min(axis=0), self.vertices.max(axis=0)

    def size(self) -> Tuple[float, float, float]:
        lo, hi = self.bounds()
        ext = hi - lo
        return (float(ext[0]), float(ext[1]), float(ext[2]))

    def submesh(
        self,
        slots: Optional[Iterable[int]] = None,
        repeat: Sequence[float] = (1.0, 1.0),
    ) -> SubMesh:
        """Compacted vertex/index arrays of the groups in material *slots*
        (every group when *slots* is None).

        UVs are multiplied by *repeat*, which is how a repeating texture is
        tiled across the surface.
        """
        wanted = None if slots is None else set(slots)
        chunks = [
            self.indices[g.start:g.start + g.count]
            for g in self.groups
            if wanted is None or g.material_index in wanted
        ]
        if not chunks:
            raise ValueError(f"{self.kind} has no group for material slots {sorted(wanted)}")
        picked = np.concatenate(chunks)
        used, remapped = np.unique(picked, return_inverse=True)
        return SubMesh(
            vertices=self.vertices[used],
            normals=self.normals[used],
            uvs=self.uvs[used] * np.asarray(repeat, dtype=float),
            indices=remapped.astype(np.int32),
        )


def _positive(name: str, value: float) -> float:
    value = float(value)
    if value <= 0.0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def compute_vertex_normals(vertices: np.ndarray, indices: np.ndarray) -> np.ndarray:
    tris = indices.reshape(-1, 3)
    v0, v1, v2 = vertices[tris[:, 0]], vertices[tris[:, 1]], vertices[tris[:, 2]]
    face_normals = np.cross(v1 - v0, v2 - v0)
    normals = np.zeros_like(vertices)
    for k in range(3):
        np.add.at(normals, tris[:, k], face_normals)
    lengths = np.linalg.norm(normals, axis=1)
    lengths[lengths == 0.0] = 1.0
    return normals / lengths[:, None]


# --------------------------------------------------------------------------
# Box
# --------------------------------------------------------------------------
def box(width: float, height: float, depth: float) -> Geometry:
    w = _positive("width", width)
    h = _positive("height", height)
    d = _positive("depth", depth)
    hx, hy, hz = w / 2, h / 2, d / 2

    # (outward normal, u axis, v axis); u x v == normal keeps triangles CCW
    faces = (
        ((1, 0, 0), (0, 0, -d), (0, h, 0)),
        ((-1, 0, 0), (0, 0, d), (0, h, 0)),
        ((0, 1, 0), (w, 0, 0), (0, 0, -d)),
        ((0, -1, 0), (w, 0, 0), (0, 0, d)),
        ((0, 0, 1), (w, 0, 0), (0, h, 0)),
        ((0, 0, -1), (-w, 0, 0), (0, h, 0)),
    )
    half = np.array([hx, hy, hz])

    vertices, normals, uvs, indices, groups = [], [], [], [], []
    for slot, (n, u, v) in enumerate(faces):
        n, u, v = np.array(n, float), np.array(u, float), np.array(v, float)
        centre = n * half
        base = len(vertices)
        for (su, sv) in ((0, 0), (1, 0), (1, 1), (0, 1)):
            vertices.append(centre + (su - 0.5) * u + (sv - 0.5) * v)
            normals.append(n)
            uvs.append((su, sv))
        groups.append(DrawGroup(len(indices), 6, slot))
        indices.extend((base, base + 1, base + 2, base, base + 2, base + 3))

    return Geometry(
        kind="box",
        vertices=np.array(vertices),
        normals=np.array(normals),
        uvs=np.array(uvs, dtype=float),
        indices=np.array(indices, dtype=np.int32),
        groups=groups,
        params={"width": w, "height": h, "depth": d},
    )


# --------------------------------------------------------------------------
# Cylinder
# --------------------------------------------------------------------------
def cylinder(
    radius_top: float,
    radius_bottom: float,
    height: float,
    radial_segments: int = 32,
) -> Geometry:
    h = _positive("height", height)
    rt, rb = float(radius_top), float(radius_bottom)
    if rt < 0.0 or rb < 0.0 or (rt == 0.0 and rb == 0.0):
        raise ValueError("cylinder needs a non-negative radius and at least one positive one")
    segs = int(radial_segments)
    if segs < 3:
        raise ValueError(f"radial_segments must be >= 3, got {segs}")

    half_h = h / 2
    slope = (rb - rt) / h
    vertices, normals, uvs, indices, groups = [], [], [], [], []

    # side wall: row 0 on top, row 1 at the bottom
    for row, (radius, y) in enumerate(((rt, half_h), (rb, -half_h))):
        for x in range(segs + 1):
            u = x / segs
            theta = u * 2 * math.pi
            s, c = math.sin(theta), math.cos(theta)
            vertices.append((radius * s, y, radius * c))
            n = np.array((s, slope, c))
            normals.append(n / np.linalg.norm(n))
            uvs.append((u, 1 - row))
    for x in range(segs):
        a, b = x, x + segs + 1
        c, d = x + segs + 2, x + 1
        indices.extend((a, b, d, b, c, d))
    groups.append(DrawGroup(0, len(indices), 0))

    # caps
    for top, radius, slot in ((True, rt, 1), (False, rb, 2)):
        if radius <= 0.0:
            continue
        sign = 1.0 if top else -1.0
        start = len(indices)
        centre_start = len(vertices)
        for x in range(segs):
            vertices.append((0.0, half_h * sign, 0.0))
            normals.append((0.0, sign, 0.0))
            uvs.append((0.5, 0.5))
        ring_start = len(vertices)
        for x in range(segs + 1):
            theta = x / segs * 2 * math.pi
            s, c = math.sin(theta), math.cos(theta)
            vertices.append((radius * s, half_h * sign, radius * c))
            normals.append((0.0, sign, 0.0))
            uvs.append((c * 0.5 + 0.5, s * 0.5 * sign + 0.5))
        for x in range(segs):
            centre, i = centre_start + x, ring_start + x
            if top:
                indices.extend((i, i + 1, centre))
            else:
                indices.extend((i + 1, i, centre))
        groups.append(DrawGroup(start, len(indices) - start, slot))

    return Geometry(
        kind="cylinder",
        vertices=np.array(vertices, dtype=float),
        normals=np.array(normals, dtype=float),
        uvs=np.array(uvs, dtype=float),
        indices=np.array(indices, dtype=np.int32),
        groups=groups,
        params={"radius_top": rt, "radius_bottom": rb, "height": h, "radial_segments": segs},
    )


# --------------------------------------------------------------------------
# Lathe
# --------------------------------------------------------------------------
def lathe(
    points: Sequence[Sequence[float]],
    segments: int = 12,
    phi_start: float = 0.0,
    phi_length: float = 2 * math.pi,
) -> Geometry:
    """Revolve a 2D profile ``(radius, y)`` around the Y axis.

    A sweep shorter than a full turn leaves an open slice, which is how the
    underground ramp ring gets its entrance.
    """
    profile = np.asarray(points, dtype=float)
    if profile.ndim != 2 or profile.shape[1] != 2:
        raise ValueError("lathe profile must be a sequence of (x, y) pairs")
    if len(profile) < 2:
        raise ValueError("lathe profile needs at least two points")
    segs = int(segments)
    if segs < 1:
        raise ValueError(f"segments must be >= 1, got {segs}")
    phi_length = min(max(float(phi_length), 0.0), 2 * math.pi)
    if phi_length == 0.0:
        raise ValueError("phi_length must be positive")

    n_pts = len(profile)
    vertices, uvs = [], []
    for i in range(segs + 1):
        phi = phi_start + i / segs * phi_length
        s, c = math.sin(phi), math.cos(phi)
        for j, (px, py) in enumerate(profile):
            vertices.append((px * s, py, px * c))
            uvs.append((i / segs, j / (n_pts - 1)))

    indices = []
    for i in range(segs):
        for j in range(n_pts - 1):
            base = j + i * n_pts
            a, b, c, d = base, base + n_pts, base + n_pts + 1, base + 1
            indices.extend((a, b, d, c, d, b))

    verts = np.array(vertices, dtype=float)
    idx = np.array(indices, dtype=np.int32)
    return Geometry(
        kind="lathe",
        vertices=verts,
        normals=compute_vertex_normals(verts, idx),
        uvs=np.array(uvs, dtype=float),
        indices=idx,
        params={"segments": segs, "phi_start": float(phi_start), "phi_length": phi_length},
    )


def scale_profile(points: Sequence[Sequence[float]], sx: float, sy: float) -> List[Tuple[float, float]]:
    """Stretch a lathe profile: *sx* widens the ring, *sy* raises it."""
    return [(float(x) * sx, float(y) * sy) for x, y in points]


# --------------------------------------------------------------------------
# Plane
# --------------------------------------------------------------------------
def plane(width: float, height: float) -> Geometry:
    """Quad in the local XY plane facing +Z; rotate by -90° about X to lay it flat."""
    hw = _positive("width", width) / 2
    hh = _positive("height", height) / 2
    vertices = np.array([(-hw, -hh, 0.0), (hw, -hh, 0.0), (hw, hh, 0.0), (-hw, hh, 0.0)])
    return Geometry(
        kind="plane",
        vertices=vertices,
        normals=np.tile((0.0, 0.0, 1.0), (4, 1)),
        uvs=np.array([(0, 0), (1, 0), (1, 1), (0, 1)], dtype=float),
        indices=np.array((0, 1, 2, 0, 2, 3), dtype=np.int32),
        params={"width": hw * 2, "height": hh * 2},
    )
