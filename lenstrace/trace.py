"""
trace.py - Ray/surface interaction for 2D lens ray tracing

Sequential trace: every ray is tested against the surfaces in the order
they are given, not nearest-hit-first. At each surface the ray is
intersected, refracted with Snell's law and the refractive index in front
of the next surface is updated.

Author: Avinash Kumar Singh
Project: 2D Lens Ray Tracer
"""

import logging
import numpy as np
from typing import Iterable, List, Optional

from .rays import INTERSECTION_EPSILON, Ray
from .surfaces import AMBIENT_INDEX, SphereLens

logger = logging.getLogger(__name__)


def intersect_and_update_ray(
    ray: Ray,
    lens: SphereLens,
    refractive_index_before: float = AMBIENT_INDEX
) -> bool:
    """
    Intersect a ray with a circular surface and record the hit.

    Solves |O + tD - C|² = R² where C is the centre of the circle. The
    roots are tried smallest first; a root is accepted when t exceeds
    INTERSECTION_EPSILON and the point lies on the arc's side of the circle
    (x < apex_x for R > 0, x > apex_x for R < 0).

    Parameters
    ----------
    ray : Ray
        Ray to intersect, updated in place on a hit
    lens : SphereLens
        Surface to test
    refractive_index_before : float, optional
        Refractive index in front of the surface (default: ambient)

    Returns
    -------
    bool
        True if the ray hit the surface
    """
    oc = ray.origin - lens.circle_center

    a = np.dot(ray.direction, ray.direction)
    b = 2.0 * np.dot(oc, ray.direction)
    c = np.dot(oc, oc) - lens.radius**2

    discriminant = b**2 - 4.0 * a * c
    if discriminant < 0:
        return False

    sqrt_disc = np.sqrt(discriminant)
    t1 = (-b - sqrt_disc) / (2.0 * a)
    t2 = (-b + sqrt_disc) / (2.0 * a)

    for t in (t1, t2):
        if t <= INTERSECTION_EPSILON:
            continue
        hit_point = ray.point_at(t)
        if _on_surface_side(lens, hit_point):
            break
    else:
        return False

    ray.add_hit(
        hit_point,
        lens.normal_at(hit_point),
        refractive_index_before,
        lens.index_after,
        distance=float(t)
    )
    return True


def _on_surface_side(lens: SphereLens, point: np.ndarray) -> bool:
    if lens.radius > 0:
        return point[0] < lens.apex_x
    return point[0] > lens.apex_x


def refract_ray(ray: Ray, lens: SphereLens) -> bool:
    """
    Refract a ray at the surface it has just hit.

    Uses the vector form of Snell's law:
        T = η I + (η cosθi - cosθt) N,   η = n1 / n2

    Entering the material, n2 is the surface index at the ray's wavelength;
    leaving it, n1 is. The other index comes from the last hit record.

    Parameters
    ----------
    ray : Ray
        Ray with at least one hit, direction updated in place
    lens : SphereLens
        Surface that produced the last hit

    Returns
    -------
    bool
        False if the ray has no hit yet or if total internal reflection
        occurs; the direction is left unchanged in both cases
    """
    last_hit = ray.last_hit
    if last_hit is None:
        return False

    if lens.is_entrance:
        n1 = last_hit.refractive_index_before
        n2 = lens.refractive_index_at_wavelength(ray.wavelength)
    else:
        n1 = lens.refractive_index_at_wavelength(ray.wavelength)
        n2 = last_hit.refractive_index_after

    eta = n1 / n2

    normal = last_hit.normal
    cos_i = -np.dot(ray.direction, normal)

    # Normal must oppose the incident ray
    if cos_i < 0:
        cos_i = -cos_i
        normal = -normal

    sin_t2 = eta**2 * (1.0 - cos_i**2)
    if sin_t2 > 1.0:
        logger.debug("Total internal reflection at %r (n1=%.4f, n2=%.4f)", lens, n1, n2)
        return False

    cos_t = np.sqrt(1.0 - sin_t2)
    ray.set_direction(eta * ray.direction + (eta * cos_i - cos_t) * normal)
    return True


def fresnel_reflectance(
    incident: np.ndarray,
    normal: np.ndarray,
    n1: float,
    n2: float
) -> float:
    """
    Fraction of unpolarized light reflected at an interface.

    Averages the s and p reflectances from the Fresnel equations. Not used
    by the trace itself.

    Parameters
    ----------
    incident : np.ndarray
        Incident direction (unit vector)
    normal : np.ndarray
        Surface normal (unit vector, either orientation)
    n1 : float
        Refractive index on the incident side
    n2 : float
        Refractive index on the transmitted side

    Returns
    -------
    float
        Reflectance in [0, 1]; 1.0 under total internal reflection
    """
    cos_i = abs(float(np.dot(incident, normal)))

    sin_t2 = (n1 / n2)**2 * (1.0 - cos_i**2)
    if sin_t2 > 1.0:
        return 1.0

    cos_t = np.sqrt(1.0 - sin_t2)

    rs = (n1 * cos_i - n2 * cos_t) / (n1 * cos_i + n2 * cos_t)
    rp = (n1 * cos_t - n2 * cos_i) / (n1 * cos_t + n2 * cos_i)

    return float((rs**2 + rp**2) * 0.5)


def trace_ray(
    ray: Ray,
    lenses: Iterable[SphereLens],
    advance_index_on_tir: bool = True
) -> Ray:
    """
    Trace one ray through an ordered sequence of surfaces.

    Surfaces the ray misses are skipped without changing the index in
    front of the next surface. After a hit the index becomes the surface's
    index at the ray's wavelength (entrance) or the ambient index (exit).

    Parameters
    ----------
    ray : Ray
        Ray to trace, updated in place
    lenses : iterable of SphereLens
        Surfaces in trace order
    advance_index_on_tir : bool, optional
        If True (default) the index is advanced even when refraction
        reports total internal reflection. If False it is kept.

    Returns
    -------
    Ray
        The same ray object
    """
    refractive_index_before = AMBIENT_INDEX

    for lens in lenses:
        if not intersect_and_update_ray(ray, lens, refractive_index_before):
            logger.debug("Ray missed %r", lens)
            continue

        refracted = refract_ray(ray, lens)
        if not refracted and not advance_index_on_tir:
            continue

        if lens.is_entrance:
            refractive_index_before = lens.refractive_index_at_wavelength(ray.wavelength)
        else:
            refractive_index_before = AMBIENT_INDEX

    return ray


def trace_rays(
    rays: Iterable[Ray],
    lenses: Iterable[SphereLens],
    advance_index_on_tir: bool = True
) -> List[Ray]:
    """
    Trace every ray through the same sequence of surfaces.

    Rays are independent of each other; each is updated in place.

    Returns
    -------
    List[Ray]
        The traced rays, in input order
    """
    lenses = list(lenses)
    return [trace_ray(ray, lenses, advance_index_on_tir) for ray in rays]


class OpticsData:
    """
    Rays and lens surfaces passed between the stages of a scene.

    Combining two collections with ``+=`` appends the other collection's
    rays and lenses after this one's.

    Attributes
    ----------
    rays : list of Ray
    lenses : list of SphereLens
    """

    def __init__(
        self,
        rays: Optional[Iterable[Ray]] = None,
        lenses: Optional[Iterable[SphereLens]] = None
    ):
        self.rays: List[Ray] = list(rays) if rays is not None else []
        self.lenses: List[SphereLens] = list(lenses) if lenses is not None else []

    def __iadd__(self, other: 'OpticsData') -> 'OpticsData':
        if not isinstance(other, OpticsData):
            return NotImplemented
        self.rays.extend(other.rays)
        self.lenses.extend(other.lenses)
        return self

    def __add__(self, other: 'OpticsData') -> 'OpticsData':
        if not isinstance(other, OpticsData):
            return NotImplemented
        return OpticsData(self.rays + other.rays, self.lenses + other.lenses)

    def copy(self) -> 'OpticsData':
        """Copy with independent rays; lenses are immutable and shared."""
        return OpticsData([ray.copy() for ray in self.rays], self.lenses)

    def clear(self) -> None:
        self.rays.clear()
        self.lenses.clear()

    def __repr__(self) -> str:
        return f"OpticsData(rays={len(self.rays)}, lenses={len(self.lenses)})"


def refract_optics(
    light: OpticsData,
    lenses: OpticsData,
    advance_index_on_tir: bool = True
) -> OpticsData:
    """
    Trace the rays of one collection through the lenses of another.

    The input collections are not modified: rays are copied before tracing.

    Parameters
    ----------
    light : OpticsData
        Collection supplying the rays
    lenses : OpticsData
        Collection supplying the surfaces, in trace order
    advance_index_on_tir : bool, optional
        See trace_ray

    Returns
    -------
    OpticsData
        Traced rays and the surfaces they were traced through. Empty if
        either input has nothing to trace.
    """
    if not light.rays:
        logger.warning("No input light data")
        return OpticsData()
    if not lenses.lenses:
        logger.warning("No input lens data")
        return OpticsData()

    rays = [ray.copy() for ray in light.rays]
    trace_rays(rays, lenses.lenses, advance_index_on_tir)
    logger.debug("Traced %d rays through %d surfaces", len(rays), len(lenses.lenses))

    return OpticsData(rays, lenses.lenses)
