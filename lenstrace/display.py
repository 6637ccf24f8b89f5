"""
display.py - Line geometry and plotting for traced scenes

Rays are drawn as polylines through their path vertices in their
wavelength colour; lens surfaces as semicircular arcs in a pale blue.

Author: Avinash Kumar Singh
Project: 2D Lens Ray Tracer
"""

import matplotlib.pyplot as plt
import numpy as np
from typing import List, NamedTuple, Optional

from .rays import RGB, Ray
from .surfaces import SphereLens
from .trace import OpticsData


LENS_COLOR = RGB(150, 150, 250)
LENS_SEGMENTS = 36


class Line(NamedTuple):
    """A polyline to draw, optionally continued along ``extend_direction``."""
    points: np.ndarray
    color: RGB
    extend_direction: Optional[np.ndarray] = None


def ray_polyline(ray: Ray) -> np.ndarray:
    """Path vertices of a ray as an (N, 2) array."""
    return np.array(ray.path)


def lens_polyline(lens: SphereLens, segments: int = LENS_SEGMENTS) -> np.ndarray:
    """
    Approximate the arc of a surface with a polyline.

    Sweeps half of the circle, from the point above its centre, through the
    apex, to the point below it.

    Parameters
    ----------
    lens : SphereLens
        Surface to draw
    segments : int, optional
        Number of line segments (default: 36)

    Returns
    -------
    np.ndarray
        (segments + 1, 2) array of points
    """
    if segments < 1:
        raise ValueError(f"segments must be at least 1, got {segments}")

    angles = np.linspace(0.0, np.pi, segments + 1)
    offsets = np.column_stack([-np.sin(angles), np.cos(angles)]) * lens.radius
    return lens.circle_center + offsets


def scene_lines(data: OpticsData) -> List[Line]:
    """Lines for every ray followed by every lens surface in ``data``."""
    lines = [
        Line(ray_polyline(ray), ray.color, ray.direction.copy())
        for ray in data.rays
    ]
    lines.extend(Line(lens_polyline(lens), LENS_COLOR) for lens in data.lenses)
    return lines


def _to_mpl_color(color: RGB) -> tuple:
    return tuple(channel / 255.0 for channel in color)


def plot_optics(
    data: OpticsData,
    ax=None,
    extend_length: float = 10.0,
    show: bool = False
):
    """
    Plot rays and lens surfaces with matplotlib.

    Parameters
    ----------
    data : OpticsData
        Scene to draw
    ax : matplotlib.axes.Axes, optional
        Axis to draw on; a new figure is created if omitted
    extend_length : float, optional
        Length of the segment drawn past each ray's last vertex
    show : bool, optional
        Call plt.show() after drawing

    Returns
    -------
    matplotlib.axes.Axes
        The axis drawn on
    """
    ax = plt.subplots(figsize=(8, 6))[1] if ax is None else ax

    for line in scene_lines(data):
        points = line.points
        if line.extend_direction is not None:
            tail = points[-1] + extend_length * line.extend_direction
            points = np.vstack([points, tail])
        ax.plot(points[:, 0], points[:, 1], color=_to_mpl_color(line.color), lw=1.0)

    ax.set_aspect('equal')
    ax.set_xlabel('x')
    ax.set_ylabel('y')

    if show:
        plt.show()
    return ax
