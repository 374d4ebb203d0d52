"""Scene presets, one per historical layout of the showroom."""
from typing import Callable, Dict, List

from showroom.core.graph import Scene
from showroom.scenes import garage, prototype, showroom, sketch

DEFAULT_PRESET = "showroom"

PRESETS: Dict[str, Callable[[], Scene]] = {
    "showroom": showroom.build,
    "garage": garage.build,
    "prototype": prototype.build,
    "sketch": sketch.build,
}


def list_presets() -> List[str]:
    return sorted(PRESETS)


def build_scene(name: str) -> Scene:
    try:
        builder = PRESETS[name]
    except KeyError:
        raise KeyError(f"Unknown preset {name!r}; choose one of: {', '.join(list_presets())}") from None
    return builder()
