"""
Surface material model.

A single material type covers every surface: a diffuse base color, optional
emission, and a specular lobe chosen per bounce with probability
`specular_probability`. `smoothness` blends the specular bounce from fully
diffuse (0) to a perfect mirror (1).
"""

from __future__ import annotations
from dataclasses import dataclass, field

from .vec3 import Color


@dataclass(frozen=True)
class Material:
    """Immutable material attached to a primitive.

    Attributes:
        color: Diffuse reflectance, multiplied into the path on diffuse bounces
        emission_color: Color of emitted light
        emission_strength: Scale applied to emission_color (>= 0)
        smoothness: 0 = rough, 1 = mirror; only used on specular bounces
        specular_probability: Chance in [0, 1] that a bounce is specular
        specular_color: Reflectance used on specular bounces
    """
    color: Color
    emission_color: Color = field(default_factory=Color.zero)
    emission_strength: float = 0.0
    smoothness: float = 0.0
    specular_probability: float = 0.0
    specular_color: Color = field(default_factory=Color.one)

    @property
    def emitted_light(self) -> Color:
        """Radiance emitted by the surface."""
        return self.emission_color * self.emission_strength

    @property
    def is_emissive(self) -> bool:
        return self.emission_strength > 0 and not self.emission_color.is_zero()

    def attenuation(self, is_specular: bool) -> Color:
        """Throughput multiplier for a bounce of the given kind."""
        return self.specular_color if is_specular else self.color


def diffuse(color: Color) -> Material:
    """Plain matte material."""
    return Material(color=color)


def emissive(color: Color, strength: float = 1.0) -> Material:
    """Black light source emitting `color * strength`."""
    return Material(color=Color.zero(), emission_color=color, emission_strength=strength)


def glossy(color: Color, smoothness: float, specular_probability: float = 1.0,
           specular_color: Color = None) -> Material:
    """Material with a specular lobe."""
    return Material(
        color=color,
        smoothness=smoothness,
        specular_probability=specular_probability,
        specular_color=specular_color if specular_color is not None else Color.one(),
    )
