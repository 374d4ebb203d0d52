# showroom/core/materials.py
"""
Surface descriptions for scene meshes.

pybullet has a single shading model, so every material boils down to an RGBA
colour, an optional texture file and a UV repeat.  The classes keep the names
the scene presets were designed around so the presets read naturally.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple

from showroom.constants import MIN_GLASS_ALPHA

RGB = Tuple[float, float, float]
RGBA = Tuple[float, float, float, float]


def hex_to_rgb(value: int) -> RGB:
    """``0xadd8e6`` -> ``(0.678, 0.847, 0.902)``."""
    if not 0 <= int(value) <= 0xFFFFFF:
        raise ValueError(f"colour out of range: {value!r}")
    value = int(value)
    return (
        ((value >> 16) & 0xFF) / 255.0,
        ((value >> 8) & 0xFF) / 255.0,
        (value & 0xFF) / 255.0,
    )


@dataclass(eq=False)
class Material:
    color: int = 0xFFFFFF
    texture: Optional[str] = None          # file name under the asset root
    repeat: Tuple[float, float] = (1.0, 1.0)
    opacity: float = 1.0
    double_sided: bool = False

    def rgba(self) -> RGBA:
        r, g, b = hex_to_rgb(self.color)
        return (r, g, b, self.alpha())

    def alpha(self) -> float:
        return max(0.0, min(1.0, float(self.opacity)))

    @property
    def translucent(self) -> bool:
        return self.alpha() < 1.0


@dataclass(eq=False)
class StandardMaterial(Material):
    emissive: int = 0x000000

    def rgba(self) -> RGBA:
        # pybullet has no emissive term; lift the base colour instead
        r, g, b = hex_to_rgb(self.color)
        er, eg, eb = hex_to_rgb(self.emissive)
        return (min(1.0, r + er), min(1.0, g + eg), min(1.0, b + eb), self.alpha())


@dataclass(eq=False)
class PhongMaterial(Material):
    transparent: bool = False

    def alpha(self) -> float:
        if not self.transparent:
            return 1.0
        return super().alpha()


@dataclass(eq=False)
class LambertMaterial(Material):
    pass


@dataclass(eq=False)
class PhysicalMaterial(Material):
    transmission: float = 0.0
    reflectivity: float = 0.5
    roughness: float = 1.0

    def alpha(self) -> float:
        return max(MIN_GLASS_ALPHA, min(1.0, 1.0 - float(self.transmission)))


def textured(texture: str, repeat: Tuple[float, float] = (1.0, 1.0)) -> StandardMaterial:
    """Standard material wrapping a repeating texture."""
    return StandardMaterial(texture=texture, repeat=(float(repeat[0]), float(repeat[1])))
