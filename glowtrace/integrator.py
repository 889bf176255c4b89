"""
Path tracing integrator.

Follows one camera path through the scene: at each hit the material picks a
diffuse or specular bounce, emitted light is added weighted by the path
throughput, and the throughput is attenuated by the surface color. A miss
picks up the sky and ends the path; so does a zero throughput or an
exhausted bounce budget.

No PDF weighting, next event estimation or Russian roulette.
"""

from __future__ import annotations

from .vec3 import Vec3, Color
from .ray import Ray
from .scene import Scene
from .sampling import RandomSource

MAX_BOUNCE_COUNT = 10

SKY_COLOR = Color(0.0, 152.0 / 255.0, 219.0 / 255.0)
GROUND_FACTOR = 0.5


def background(direction: Vec3) -> Color:
    """Radiance arriving from outside the scene along `direction`.

    Downward directions see a flat grey ground; upward ones see a sky that
    fades to white toward the horizon.
    """
    if direction.y < 0:
        return Color(GROUND_FACTOR, GROUND_FACTOR, GROUND_FACTOR)
    t = (1.0 - direction.y) * (1.0 - direction.y)
    return SKY_COLOR.lerp(Color.one(), t)


def scatter(ray: Ray, normal: Vec3, smoothness: float, specular_probability: float,
            rng: RandomSource) -> tuple[Vec3, bool]:
    """Pick the outgoing direction at a surface.

    The diffuse and specular directions are blended by
    `smoothness` on specular bounces. The blend is renormalized, unlike a
    plain lerp, so the next ray keeps a unit direction.

    Returns:
        (unit direction, whether the bounce was specular)
    """
    diffuse_direction = (normal + rng.unit_vector()).normalize()
    specular_direction = ray.direction.reflect(normal)
    is_specular = rng.uniform() < specular_probability
    direction = diffuse_direction.lerp(specular_direction, smoothness * float(is_specular))
    return direction.normalize(), is_specular


class Integrator:
    """Monte Carlo radiance estimator for single camera rays."""

    def __init__(self, max_bounce_count: int = MAX_BOUNCE_COUNT):
        """Create an integrator.

        Args:
            max_bounce_count: Bounces after the primary hit; a path visits
                at most max_bounce_count + 1 surfaces
        """
        self.max_bounce_count = max_bounce_count

    def trace(self, scene: Scene, ray: Ray, rng: RandomSource) -> Color:
        """Estimate the radiance arriving along `ray`.

        Args:
            scene: The scene to trace against
            ray: Camera ray with a unit direction
            rng: Random stream owned by the calling task

        Returns:
            RGB radiance, every component >= 0 for well-formed scenes
        """
        incoming_light = Color.zero()
        throughput = Color.one()

        for _ in range(self.max_bounce_count + 1):
            if throughput.is_zero():
                break

            hit = scene.intersect(ray)
            if hit is None:
                throughput = throughput * background(ray.direction)
                incoming_light = incoming_light + throughput
                break

            material = hit.material
            direction, is_specular = scatter(
                ray, hit.normal, material.smoothness, material.specular_probability, rng
            )
            ray = Ray(hit.position, direction)

            if material.is_emissive:
                incoming_light = incoming_light + material.emitted_light * throughput
            throughput = throughput * material.attenuation(is_specular)

        return incoming_light

    def __repr__(self) -> str:
        return f"Integrator(max_bounce_count={self.max_bounce_count})"


def trace(scene: Scene, ray: Ray, rng: RandomSource, max_bounce_count: int = MAX_BOUNCE_COUNT) -> Color:
    """Functional form of Integrator.trace."""
    return Integrator(max_bounce_count).trace(scene, ray, rng)
