import math

import pytest

p = pytest.importorskip("pybullet")

from showroom.core.geometry import box
from showroom.core.graph import Mesh, Scene
from showroom.core.loader import LoadedModel, LoadingManager
from showroom.core.materials import textured
from showroom.core.spawner import SceneSpawner
from showroom.core.transforms import Transform, compose
from showroom.scenes import build_scene


@pytest.fixture
def cli():
    client = p.connect(p.DIRECT)
    yield client
    p.disconnect(client)


def _base_position(cli, body):
    position, _ = p.getBasePositionAndOrientation(body, physicsClientId=cli)
    return position


def test_sketch_meshes_land_z_up(cli, tmp_path):
    spawner = SceneSpawner(cli, tmp_path)
    bodies = spawner.spawn(build_scene("sketch"))
    assert set(bodies) >= {"floor", "back_wall", "sofa", "car_placeholder", "glass_panel"}
    assert _base_position(cli, bodies["sofa"][0]) == pytest.approx((-5, 10, 0.5))
    assert spawner.lighting.light_position == pytest.approx((5, -7.5, 10))
    assert spawner.lighting.ambient == pytest.approx(0.3)


def test_showroom_spawns_without_textures(cli, tmp_path):
    manager = LoadingManager()
    spawner = SceneSpawner(cli, tmp_path / "empty", manager=manager)
    bodies = spawner.spawn(build_scene("showroom"))

    assert len(bodies["platform_1"]) == 2
    assert len(bodies["stairs_step_0"]) == 1
    assert spawner.textures.missing > 0
    assert manager.items_failed == spawner.textures.missing
    # pillars share geometry and scale, so their shapes are reused
    assert len(spawner._shapes) < spawner.body_count
    assert spawner.lighting.point_lights == 10
    assert not any(name.endswith("_helper") for name in bodies)


def test_building_offset_reaches_the_bodies(cli, tmp_path):
    spawner = SceneSpawner(cli, tmp_path)
    bodies = spawner.spawn(build_scene("showroom"))
    # stairs_step_0 sits at (36, -6.45, 20) in the Y-up scene
    assert _base_position(cli, bodies["stairs_step_0"][0]) == pytest.approx((36, -20, -6.45))


def test_garage_lighting_and_helper(cli, tmp_path):
    spawner = SceneSpawner(cli, tmp_path)
    bodies = spawner.spawn(build_scene("garage"))
    assert spawner.lighting.light_position == pytest.approx((-5, -7.5, 20))
    assert spawner.lighting.ambient == pytest.approx(0.3)
    assert spawner.lighting.diffuse == pytest.approx(0.6)
    assert "work_light_helper" in bodies
    assert _base_position(cli, bodies["work_light_helper"][0]) == pytest.approx((-5, 0, 2))


def test_texture_is_loaded_once(cli, tmp_path):
    Image = pytest.importorskip("PIL.Image")
    Image.new("RGB", (4, 4), (200, 30, 30)).save(tmp_path / "paint.png")

    paint = textured("paint.png", (2, 2))
    scene = Scene("textured").add(
        Mesh(name="a", geometry=box(1, 1, 1), material=paint),
        Mesh(name="b", geometry=box(1, 1, 1), material=paint).at(3, 0, 0),
    )
    spawner = SceneSpawner(cli, tmp_path)
    spawner.spawn(scene)
    assert spawner.textures.get("paint.png") >= 0
    assert spawner.textures.missing == 0


def test_reset_forgets_cached_shapes(cli, tmp_path):
    spawner = SceneSpawner(cli, tmp_path)
    spawner.spawn(build_scene("sketch"))
    assert spawner.body_count > 0
    p.resetSimulation(physicsClientId=cli)
    spawner.reset()
    assert spawner.body_count == 0
    assert len(spawner._shapes) == 0


def test_spawn_model_reuses_its_visual_shape(cli, tmp_path):
    obj = tmp_path / "tri.obj"
    obj.write_text("v 0 0 0\nv 1 0 0\nv 0 1 0\nf 1 2 3\n")
    loaded = LoadedModel("tri/scene.gltf", obj, obj, (0, 0, 0), (1, 1, 0), 3, 1)

    spawner = SceneSpawner(cli, tmp_path)
    pose_a = compose(Transform(position=(1, 0, 0), scale=(2, 2, 2)))
    pose_b = compose(Transform(position=(-1, 0, 0), rotation=(0, math.pi, 0), scale=(2, 2, 2)))
    spawner.spawn_model(loaded, pose_a, name="lamp_0")
    spawner.spawn_model(loaded, pose_b, name="lamp_1")

    assert spawner.body_count == 2
    assert len(spawner._model_shapes) == 1
    assert _base_position(cli, spawner.bodies["lamp_1"][0]) == pytest.approx((-1, 0, 0))
