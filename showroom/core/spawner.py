# showroom/core/spawner.py
"""
Realize a :class:`~showroom.core.graph.Scene` as static pybullet bodies.

Every mesh becomes one mass-less multibody per distinct material (a box with
six face materials sharing two textures becomes two bodies).  Geometry is
handed to pybullet as raw vertex/index arrays, already turned Z-up; the node's
world scale goes through ``meshScale`` so one set of shapes serves every
instance of the same geometry.

Lights have no pybullet counterpart beyond the single debug-visualizer light,
so the directional light drives ``lightPosition`` and the ambient light is kept
on :class:`SceneLighting` for the snapshot renderer.  Point lights can show a
small marker sphere.
"""
from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import pybullet as p
from loguru import logger

from showroom.constants import POINT_LIGHT_HELPER_RADIUS, UNIFORM_SPECULAR_COLOR
from showroom.core.graph import AmbientLight, DirectionalLight, Mesh, PointLight, Scene
from showroom.core.loader import LoadedModel, LoadingManager
from showroom.core.materials import Material, hex_to_rgb
from showroom.core.transforms import WorldPose, to_zup_points, to_zup_position

Bodies = Dict[str, List[int]]


@dataclass(slots=True)
class SceneLighting:
    """What the snapshot renderer needs to light the scene like the viewer."""

    light_position: Tuple[float, float, float] = (-5.0, -7.5, 20.0)
    light_color: Tuple[float, float, float] = (1.0, 1.0, 1.0)
    ambient: float = 0.5
    diffuse: float = 0.6
    point_lights: int = 0


# --------------------------------------------------------------------------
# Texture loader (cache per client)
# --------------------------------------------------------------------------
class TextureCache:
    """Loads each texture file exactly once per pybullet client.

    A missing or unreadable file is logged and cached as ``-1`` so the mesh is
    drawn with its plain colour instead.
    """

    def __init__(self, cli: int, asset_root, manager: Optional[LoadingManager] = None):
        self.cli = cli
        self.asset_root = Path(asset_root)
        self.manager = manager
        self._ids: Dict[str, int] = {}

    def clear(self) -> None:
        self._ids = {}

    @property
    def missing(self) -> int:
        return sum(1 for tex_id in self._ids.values() if tex_id < 0)

    def get(self, name: str) -> int:
        if name in self._ids:
            return self._ids[name]
        path = Path(name)
        if not path.is_absolute():
            path = self.asset_root / path
        if self.manager is not None:
            self.manager.item_start(name)
        tex_id = -1
        if not path.exists():
            logger.warning(f"Texture not found at {path}")
        else:
            try:
                tex_id = p.loadTexture(str(path), physicsClientId=self.cli)
            except p.error as e:
                logger.warning(f"Error loading texture {path}: {e}")
        self._ids[name] = tex_id
        if self.manager is not None:
            self.manager.item_end(name, ok=tex_id >= 0)
        return tex_id


# --------------------------------------------------------------------------
# Shape cache
# --------------------------------------------------------------------------
class _ShapeCache:
    def __init__(self):
        self._cache: Dict = {}

    def clear(self):
        self._cache = {}

    def __len__(self) -> int:
        return len(self._cache)

    def get(self, cli: int, mesh: Mesh, slots, material: Material, scale_vec, with_collision: bool):
        key = (cli, id(mesh.geometry), slots, tuple(material.repeat), material.double_sided,
               tuple(scale_vec), with_collision)
        if key in self._cache:
            return self._cache[key]
        sub = mesh.geometry.submesh(slots, material.repeat)
        vertices = to_zup_points(sub.vertices).tolist()
        normals = to_zup_points(sub.normals).tolist()
        indices = sub.indices.tolist()
        kw = {}
        if material.double_sided and hasattr(p, "VISUAL_SHAPE_DOUBLE_SIDED"):
            kw["flags"] = p.VISUAL_SHAPE_DOUBLE_SIDED
        vis = p.createVisualShape(
            p.GEOM_MESH,
            vertices=vertices,
            indices=indices,
            uvs=sub.uvs.tolist(),
            normals=normals,
            meshScale=list(scale_vec),
            physicsClientId=cli,
            **kw,
        )
        col = -1
        if with_collision:
            col_kw = {}
            if hasattr(p, "GEOM_FORCE_CONCAVE_TRIMESH"):
                col_kw["flags"] = p.GEOM_FORCE_CONCAVE_TRIMESH
            col = p.createCollisionShape(
                p.GEOM_MESH,
                vertices=vertices,
                indices=indices,
                meshScale=list(scale_vec),
                physicsClientId=cli,
                **col_kw,
            )
        self._cache[key] = (vis, col)
        return vis, col


# --------------------------------------------------------------------------
# Spawner
# --------------------------------------------------------------------------
class SceneSpawner:
    def __init__(
        self,
        cli: int,
        asset_root,
        shadows: Optional[bool] = None,
        manager: Optional[LoadingManager] = None,
    ):
        self.cli = cli
        self.asset_root = Path(asset_root)
        self.shadows = shadows
        self.textures = TextureCache(cli, self.asset_root, manager)
        self.lighting = SceneLighting()
        self.bodies: Bodies = {}
        self._shapes = _ShapeCache()
        self._model_shapes: Dict[Tuple[str, Tuple[float, float, float]], int] = {}

    @property
    def body_count(self) -> int:
        return sum(len(ids) for ids in self.bodies.values())

    def reset(self) -> None:
        """Forget every cached id; call after ``resetSimulation``."""
        self.bodies = {}
        self.lighting = SceneLighting()
        self._shapes.clear()
        self._model_shapes = {}
        self.textures.clear()

    # -- meshes ------------------------------------------------------------
    def spawn_mesh(self, mesh: Mesh, pose: WorldPose) -> List[int]:
        scale_vec = pose.zup_scale()
        position = pose.zup_position()
        orientation = pose.zup_quaternion()
        created = []
        for slots, material in mesh.material_groups():
            with_collision = not material.translucent
            vis, col = self._shapes.get(self.cli, mesh, slots, material, scale_vec, with_collision)
            body = p.createMultiBody(
                baseMass=0.0,
                baseCollisionShapeIndex=col,
                baseVisualShapeIndex=vis,
                basePosition=list(position),
                baseOrientation=list(orientation),
                physicsClientId=self.cli,
            )
            visual_kwargs = {
                "rgbaColor": list(material.rgba()),
                "specularColor": list(UNIFORM_SPECULAR_COLOR),
            }
            if material.texture:
                tex_id = self.textures.get(material.texture)
                if tex_id >= 0:
                    visual_kwargs["textureUniqueId"] = tex_id
            p.changeVisualShape(body, -1, physicsClientId=self.cli, **visual_kwargs)
            created.append(body)
        self.bodies.setdefault(mesh.name, []).extend(created)
        return created

    # -- loaded models -----------------------------------------------------
    def spawn_model(self, loaded: LoadedModel, pose: WorldPose, name: Optional[str] = None) -> List[int]:
        """Place a parsed model; repeated calls for one file reuse its visual shape."""
        scale_vec = pose.zup_scale()
        key = (str(loaded.obj_path), scale_vec)
        vis = self._model_shapes.get(key)
        if vis is None:
            vis = p.createVisualShape(
                p.GEOM_MESH,
                fileName=str(loaded.obj_path),
                meshScale=list(scale_vec),
                physicsClientId=self.cli,
            )
            self._model_shapes[key] = vis
        body = p.createMultiBody(
            baseMass=0.0,
            baseCollisionShapeIndex=-1,
            baseVisualShapeIndex=vis,
            basePosition=list(pose.zup_position()),
            baseOrientation=list(pose.zup_quaternion()),
            physicsClientId=self.cli,
        )
        p.changeVisualShape(body, -1, specularColor=list(UNIFORM_SPECULAR_COLOR), physicsClientId=self.cli)
        self.bodies.setdefault(name or loaded.path, []).append(body)
        return [body]

    # -- lights ------------------------------------------------------------
    def _spawn_helper(self, light: PointLight, pose: WorldPose) -> int:
        r, g, b = hex_to_rgb(light.color)
        vis = p.createVisualShape(
            p.GEOM_SPHERE,
            radius=POINT_LIGHT_HELPER_RADIUS,
            rgbaColor=[r, g, b, 1.0],
            physicsClientId=self.cli,
        )
        body = p.createMultiBody(
            baseMass=0.0,
            baseCollisionShapeIndex=-1,
            baseVisualShapeIndex=vis,
            basePosition=list(pose.zup_position()),
            physicsClientId=self.cli,
        )
        self.bodies.setdefault(f"{light.name}_helper", []).append(body)
        return body

    def apply_lights(self, scene: Scene) -> SceneLighting:
        lighting = SceneLighting()
        ambient_total = 0.0
        for placed in scene.lights():
            light = placed.node
            if isinstance(light, AmbientLight):
                ambient_total += light.intensity
            elif isinstance(light, DirectionalLight):
                lighting.light_position = to_zup_position(placed.pose.position)
                lighting.light_color = hex_to_rgb(light.color)
                lighting.diffuse = min(1.0, 0.3 * light.intensity)
            elif isinstance(light, PointLight):
                lighting.point_lights += 1
                if light.show_helper:
                    self._spawn_helper(light, placed.pose)
        if ambient_total:
            lighting.ambient = min(1.0, ambient_total)

        p.configureDebugVisualizer(lightPosition=list(lighting.light_position), physicsClientId=self.cli)
        p.configureDebugVisualizer(rgbBackground=list(hex_to_rgb(scene.background)), physicsClientId=self.cli)
        shadows = scene.shadows if self.shadows is None else self.shadows
        p.configureDebugVisualizer(p.COV_ENABLE_SHADOWS, 1 if shadows else 0, physicsClientId=self.cli)
        self.lighting = lighting
        return lighting

    # -- whole scene -------------------------------------------------------
    def spawn(self, scene: Scene) -> Bodies:
        """Create bodies for every mesh in *scene*; models are left to the loader."""
        scene.validate()
        for placed in scene.meshes():
            self.spawn_mesh(placed.node, placed.pose)
        self.apply_lights(scene)
        logger.debug(
            f"Spawned {len(scene.meshes())} meshes of {scene.name!r} as {self.body_count} bodies "
            f"({len(self._shapes)} distinct shapes)"
        )
        return self.bodies
