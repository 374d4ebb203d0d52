import pytest

pytest.importorskip("pybullet")
pytest.importorskip("trimesh")
Image = pytest.importorskip("PIL.Image")

from showroom.app import ShowroomSession, main, run
from showroom.config import ShowroomConfig
from showroom.core.viewer import Viewer


def test_headless_snapshot(tmp_path):
    out = tmp_path / "shots" / "sketch.png"
    config = ShowroomConfig(
        preset="sketch",
        asset_root=tmp_path,
        use_gui=False,
        snapshot=out,
        width=64,
        height=48,
    )
    summary = run(config)

    assert summary.models_requested == 0
    assert summary.bodies > 0
    with Image.open(out) as image:
        assert image.size == (64, 48)
        assert image.mode == "RGB"


def test_headless_garage_survives_missing_models(tmp_path):
    config = ShowroomConfig(preset="garage", asset_root=tmp_path / "empty", use_gui=False, load_timeout=60)
    summary = run(config)

    assert summary.models_requested == 3
    assert summary.models_failed == 3
    assert summary.models_loaded == 0
    assert summary.textures_missing > 0


def test_list_presets(capsys):
    assert main(["--list"]) == 0
    out = capsys.readouterr().out
    for name in ("garage", "prototype", "showroom", "sketch"):
        assert name in out


def _session(tmp_path, **overrides):
    settings = dict(preset="garage", asset_root=tmp_path / "empty", use_gui=False)
    settings.update(overrides)
    viewer = Viewer(use_gui=False)
    return viewer, ShowroomSession(ShowroomConfig(**settings), viewer)


def test_rebuild_counts_only_the_current_build(tmp_path):
    viewer, session = _session(tmp_path)
    try:
        session.build()
        session.rebuild()
        session.loader.wait(timeout=60)
        summary = session.summary()
    finally:
        session.close()
        viewer.disconnect()

    assert summary.models_requested == 3
    assert summary.models_failed == 3
    assert summary.models_loaded == 0
    assert session.models_outstanding == 0
    assert session.loader.failed == 6


def test_shadows_follow_the_preset_unless_overridden(tmp_path):
    viewer, session = _session(tmp_path, preset="sketch")
    try:
        session.build()
        assert session.shadows_enabled() is False
        session.scene.shadows = True
        assert session.shadows_enabled() is True
        session.config.shadows = False
        assert session.shadows_enabled() is False
    finally:
        session.close()
        viewer.disconnect()
