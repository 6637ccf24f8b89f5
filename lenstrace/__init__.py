"""
lenstrace - A 2D sequential ray tracer for circular lens surfaces

Traces rays through ordered sequences of refracting arcs with Snell's law,
Cauchy dispersion and total internal reflection detection, and derives
wavelength colours and polylines for display.

Author: Avinash Kumar Singh
"""

from .rays import Ray, RayHit, RGB, normalize, wavelength_to_rgb
from .rays import create_point_source, create_parallel_source

from .surfaces import SphereLens, InvalidGeometryError, AMBIENT_INDEX
from .surfaces import create_singlet

from .trace import intersect_and_update_ray, refract_ray, fresnel_reflectance
from .trace import trace_ray, trace_rays, refract_optics, OpticsData

__version__ = "0.1.0"
__author__ = "Avinash Kumar Singh"

__all__ = [
    # Rays
    "Ray",
    "RayHit",
    "RGB",
    "normalize",
    "wavelength_to_rgb",
    "create_point_source",
    "create_parallel_source",
    # Surfaces
    "SphereLens",
    "InvalidGeometryError",
    "AMBIENT_INDEX",
    "create_singlet",
    # Tracing
    "intersect_and_update_ray",
    "refract_ray",
    "fresnel_reflectance",
    "trace_ray",
    "trace_rays",
    "refract_optics",
    "OpticsData",
]
