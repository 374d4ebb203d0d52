import math

import numpy as np
import pytest

from showroom.core.graph import Mesh, ModelRef, PointLight
from showroom.core.materials import Material
from showroom.scenes import DEFAULT_PRESET, PRESETS, build_scene, list_presets
from showroom.scenes.building import BUILDING_OFFSET
from showroom.scenes.showroom import CAR_CATALOG, LAMP_MODEL, LAMP_POSITIONS


@pytest.fixture(scope="module")
def scenes():
    return {name: build_scene(name) for name in list_presets()}


def test_presets_registry():
    assert list_presets() == ["garage", "prototype", "showroom", "sketch"]
    assert DEFAULT_PRESET in PRESETS


def test_unknown_preset_lists_choices():
    with pytest.raises(KeyError) as excinfo:
        build_scene("penthouse")
    assert "garage" in str(excinfo.value)


def test_every_preset_builds_with_unique_names(scenes):
    for name, scene in scenes.items():
        assert scene.name == name
        scene.validate()
        assert scene.meshes()


def test_per_face_materials_have_six_entries(scenes):
    for scene in scenes.values():
        for placed in scene.meshes():
            material = placed.node.material
            if not isinstance(material, Material):
                assert placed.node.geometry.kind == "box"
                assert len(material) == 6


def test_showroom_car_catalog(scenes):
    scene = scenes["showroom"]
    cars = {p.node.name: p for p in scene.models() if p.node.name.startswith("car_")}
    assert len(cars) == len(CAR_CATALOG) == 14
    chiron = cars["car_chiron"]
    assert chiron.node.path == "chiron/scene.gltf"
    assert chiron.pose.position == pytest.approx((20, -5.5, 15))
    assert chiron.pose.scale == pytest.approx((2.8, 2.8, 2.8))
    assert cars["car_r8"].pose.position == pytest.approx((-47, -2.2, 113))


def test_showroom_lamps_share_one_model(scenes):
    scene = scenes["showroom"]
    lamps = [p for p in scene.models() if p.node.path == LAMP_MODEL]
    assert len(lamps) == len(LAMP_POSITIONS) == 10
    assert all(p.node.shared for p in lamps)
    assert [p.pose.position for p in lamps] == [pytest.approx(pos) for pos in LAMP_POSITIONS]
    assert lamps[0].pose.scale == pytest.approx((0.1, 0.1, 0.1))

    lights = [p.node for p in scene.lights() if isinstance(p.node, PointLight)]
    assert len(lights) == 10
    assert {(light.intensity, light.distance) for light in lights} == {(50.0, 50.0)}


def test_showroom_stairs_sit_inside_the_building(scenes):
    scene = scenes["showroom"]
    bx, by, bz = BUILDING_OFFSET
    step0 = scene.find("stairs_step_0")
    step1 = scene.find("stairs_step_1")
    assert step0.parents == ("root", "building", "stairs")
    assert step0.pose.position == pytest.approx((bx + 6, by - 6 + 0.25, bz))
    assert step1.pose.position == pytest.approx((bx + 6 - 1, by - 6 + 0.75, bz))
    # -90 degrees about Y turns the step's width along Z
    assert step0.pose.rotation_matrix @ np.array([1, 0, 0]) == pytest.approx((0, 0, 1), abs=1e-9)


def test_showroom_entrance_casts_shadows(scenes):
    scene = scenes["showroom"]
    assert scene.find("left_wall_1f").node.cast_shadow
    assert scene.find("platform_1").node.receive_shadow
    assert not scene.find("platform_1").node.cast_shadow


def test_ground_lies_flat_under_the_building(scenes):
    ground = scenes["showroom"].find("ground")
    assert ground.pose.position == pytest.approx((0, -6, 0))
    assert ground.pose.rotation_matrix @ np.array([0, 0, 1]) == pytest.approx((0, 1, 0), abs=1e-9)


def test_garage_models_and_work_light(scenes):
    scene = scenes["garage"]
    models = {p.node.name: p for p in scene.models()}
    assert set(models) == {"model", "model2", "model3"}
    assert models["model3"].pose.scale == pytest.approx((100, 100, 100))
    light = scene.find("work_light")
    assert light.node.show_helper
    assert light.pose.position == pytest.approx((-5, 2, 0))
    assert not any(p.node.cast_shadow or p.node.receive_shadow for p in scene.meshes())


def test_prototype_layout(scenes):
    scene = scenes["prototype"]
    assert scene.find("underground_ring").pose.position == pytest.approx((0, -4, -50))
    assert scene.find("stairs_step_1").pose.position == pytest.approx((5, -5.25, 0))
    assert len(scene.models()) == 3
    assert scene.find("glass_panel").node.material.alpha() == 0.5


def test_sketch_is_untextured(scenes):
    scene = scenes["sketch"]
    assert scene.models() == []
    assert all(isinstance(p.node, Mesh) and p.node.material.texture is None for p in scene.meshes())
    ceiling = scene.find("ceiling")
    assert ceiling.pose.rotation_matrix @ np.array([0, 0, 1]) == pytest.approx((0, -1, 0), abs=1e-9)
    assert isinstance(scene.find("car_placeholder").node, Mesh)
    assert not any(isinstance(p.node, ModelRef) for p in scene.walk())
    assert scene.find("glass_panel").pose.rotation_matrix[0, 2] == pytest.approx(math.sin(math.pi / 2))
