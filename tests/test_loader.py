import threading

import numpy as np
import pytest

trimesh = pytest.importorskip("trimesh")

from loguru import logger

from showroom.core.loader import LoadedModel, LoadingManager, ModelLoader


@pytest.fixture
def assets(tmp_path):
    root = tmp_path / "assets"
    (root / "crate").mkdir(parents=True)
    trimesh.creation.box(extents=(2, 1, 4)).export(str(root / "crate" / "scene.glb"))
    return root


@pytest.fixture
def loader(assets, tmp_path):
    with ModelLoader(assets, cache_dir=tmp_path / "cache", max_workers=2) as model_loader:
        yield model_loader


@pytest.fixture
def errors():
    messages = []
    handler = logger.add(messages.append, level="ERROR", format="{message}")
    yield messages
    logger.remove(handler)


def test_callbacks_run_on_the_polling_thread(loader):
    delivered = []
    future = loader.load("crate/scene.glb", lambda model: delivered.append((model, threading.current_thread())))
    future.result(timeout=30)
    assert delivered == []
    assert loader.pending == 1

    assert loader.wait(timeout=30) == 1
    model, thread = delivered[0]
    assert thread is threading.main_thread()
    assert loader.pending == 0
    assert loader.loaded == 1


def test_parsed_model_is_z_up(loader):
    delivered = []
    loader.load("crate/scene.glb", delivered.append)
    loader.wait(timeout=30)
    model = delivered[0]
    assert model.size == pytest.approx((2, 4, 1))
    assert model.obj_path.exists()
    assert model.obj_path.suffix == ".obj"
    assert model.face_count == 12


def test_missing_model_reports_and_carries_on(loader, errors):
    failures = []
    loader.load("nope/scene.gltf", lambda model: pytest.fail("should not load"), failures.append)
    loader.load("crate/scene.glb", lambda model: None)
    loader.wait(timeout=30)

    assert len(failures) == 1
    assert isinstance(failures[0], FileNotFoundError)
    assert loader.failed == 1
    assert loader.loaded == 1
    assert any("An error happened while loading the model: nope/scene.gltf" in m for m in errors)


def test_load_once_parses_a_shared_path_once(loader, monkeypatch, tmp_path):
    calls = []

    def fake_parse(path):
        calls.append(path)
        return LoadedModel(path, tmp_path / path, tmp_path / "lamp.obj", (0, 0, 0), (1, 1, 1), 8, 12)

    monkeypatch.setattr(loader, "_parse", fake_parse)
    delivered = []
    for _ in range(3):
        loader.load_once("lamp/scene.gltf", delivered.append)
    loader.wait(timeout=30)

    assert calls == ["lamp/scene.gltf"]
    assert len(delivered) == 3
    assert delivered[0] is delivered[2]


def test_failing_callback_counts_as_failed(loader):
    failures = []

    def explode(model):
        raise RuntimeError("boom")

    loader.load("crate/scene.glb", explode, failures.append)
    loader.wait(timeout=30)
    assert loader.failed == 1
    assert isinstance(failures[0], RuntimeError)
    assert loader.manager.items_failed == 1


def test_poll_without_finished_work_is_a_noop(loader):
    assert loader.poll() == 0
    assert loader.wait(timeout=0.1) == 0


def test_loading_manager_progress():
    progress = []
    finished = []
    manager = LoadingManager(
        on_progress=lambda url, loaded, total: progress.append((url, loaded, total)),
        on_load=lambda: finished.append(True),
    )
    manager.item_start("a")
    manager.item_start("b")
    manager.item_end("a")
    assert not manager.done
    manager.item_end("b", ok=False)

    assert progress == [("a", 1, 2), ("b", 2, 2)]
    assert finished == [True]
    assert (manager.items_loaded, manager.items_failed) == (1, 1)
    manager.close()


def test_unsupported_format_fails(loader, assets):
    (assets / "notes.txt").write_text("not a model")
    failures = []
    loader.load("notes.txt", lambda model: None, failures.append)
    loader.wait(timeout=30)
    assert isinstance(failures[0], ValueError)


def _textured_box(path, color):
    Image = pytest.importorskip("PIL.Image")
    mesh = trimesh.creation.box(extents=(1, 1, 1))
    uv = np.tile([[0.5, 0.5]], (len(mesh.vertices), 1))
    mesh.visual = trimesh.visual.TextureVisuals(uv=uv, image=Image.new("RGB", (4, 4), color))
    path.parent.mkdir(parents=True, exist_ok=True)
    mesh.export(str(path))


def test_textured_models_keep_their_own_textures(loader, assets):
    Image = pytest.importorskip("PIL.Image")
    colors = {"red/scene.glb": (255, 0, 0), "blue/scene.glb": (0, 0, 255)}
    for rel, color in colors.items():
        _textured_box(assets / rel, color)

    delivered = {}
    for rel in colors:
        loader.load(rel, lambda model: delivered.setdefault(model.path, model))
    loader.wait(timeout=30)

    dirs = {model.obj_path.parent for model in delivered.values()}
    assert len(dirs) == 2
    for rel, color in colors.items():
        textures = sorted(delivered[rel].obj_path.parent.glob("*.png"))
        assert textures
        with Image.open(textures[0]) as image:
            assert image.convert("RGB").getpixel((0, 0)) == color
