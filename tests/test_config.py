from pathlib import Path

import pytest

from showroom.config import ShowroomConfig, read_config
from showroom.constants import ASSET_ROOT, SNAPSHOT_HEIGHT, SNAPSHOT_WIDTH


def test_defaults():
    config = read_config([], env={})
    assert config == ShowroomConfig()
    assert config.preset == "showroom"
    assert config.asset_root == ASSET_ROOT
    assert config.use_gui
    assert config.shadows is None
    assert config.turbo_build
    assert (config.width, config.height) == (SNAPSHOT_WIDTH, SNAPSHOT_HEIGHT)


def test_environment_overrides_constants():
    env = {
        "SHOWROOM_PRESET": "garage",
        "SHOWROOM_ASSETS": "/srv/showroom",
        "SHOWROOM_HEADLESS": "yes",
        "SHOWROOM_LOG_LEVEL": "debug",
        "SHOWROOM_LOG_FILE": "showroom.log",
    }
    config = read_config([], env=env)
    assert config.preset == "garage"
    assert config.asset_root == Path("/srv/showroom")
    assert not config.use_gui
    assert config.log_level == "DEBUG"
    assert config.log_file == "showroom.log"


def test_flags_override_environment():
    env = {"SHOWROOM_PRESET": "garage", "SHOWROOM_HEADLESS": "0"}
    config = read_config(
        ["--preset", "sketch", "--headless", "--snapshot", "out/view.png", "--no-shadows", "--no-turbo",
         "--width", "320", "--height", "200", "--load-timeout", "5"],
        env=env,
    )
    assert config.preset == "sketch"
    assert not config.use_gui
    assert config.snapshot == Path("out/view.png")
    assert config.shadows is False
    assert not config.turbo_build
    assert (config.width, config.height) == (320, 200)
    assert config.load_timeout == 5.0


def test_shadows_flag_forces_on():
    assert read_config(["--shadows"], env={}).shadows is True


@pytest.mark.parametrize(
    "argv, env",
    [
        ([], {"SHOWROOM_PRESET": "penthouse"}),
        ([], {"SHOWROOM_LOG_LEVEL": "loud"}),
        (["--preset", "penthouse"], {}),
        (["--width", "0"], {}),
        (["--load-timeout", "-1"], {}),
    ],
)
def test_invalid_settings_exit(argv, env):
    with pytest.raises(SystemExit):
        read_config(argv, env=env)
