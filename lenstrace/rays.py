"""
rays.py - Ray class for 2D lens ray tracing

A ray is defined by:
    - Path history: the origin followed by every surface intersection
    - Direction (unit vector) from the last path vertex
    - Wavelength λ (in nanometers)
    - Intensity (0.0 to 1.0)
    - History of hit records, one per surface crossed

Author: Avinash Kumar Singh
Project: 2D Lens Ray Tracer
"""

import numpy as np
from typing import List, NamedTuple, Optional, Sequence


# Wavelength range mapped to a visible colour. The real visible range extends
# slightly beyond this; everything outside maps to black.
VISIBLE_RANGE = (380.0, 700.0)

# Gamma used when converting wavelength to RGB
GAMMA = 0.8

DEFAULT_WAVELENGTH = 550.0

# Hits closer than this to the current origin are treated as self-intersections
INTERSECTION_EPSILON = 1e-4


def normalize(vector: np.ndarray) -> np.ndarray:
    """
    Normalize a vector to unit length.

    Parameters
    ----------
    vector : np.ndarray
        Input vector of any dimension

    Returns
    -------
    np.ndarray
        Unit vector in same direction

    Raises
    ------
    ValueError
        If vector has zero magnitude
    """
    vector = np.asarray(vector, dtype=np.float64)
    magnitude = np.linalg.norm(vector)
    if magnitude < 1e-15:
        raise ValueError("Cannot normalize zero vector")
    return vector / magnitude


def as_vec2(value: Sequence[float] | np.ndarray) -> np.ndarray:
    """Convert a 2-element sequence to a float64 array of shape (2,)."""
    vec = np.array(value, dtype=np.float64)
    if vec.shape != (2,):
        raise ValueError(f"Expected a 2D vector, got shape {vec.shape}")
    return vec


class RGB(NamedTuple):
    """8-bit per channel colour."""
    r: int
    g: int
    b: int


class RayHit(NamedTuple):
    """
    One ray/surface intersection event.

    Attributes
    ----------
    point : np.ndarray
        Intersection point [x, y]
    normal : np.ndarray
        Surface normal at the intersection point
    distance : float
        Distance from the previous path vertex
    refractive_index_before : float
        Refractive index in front of the interface
    refractive_index_after : float
        Refractive index behind the interface
    """
    point: np.ndarray
    normal: np.ndarray
    distance: float
    refractive_index_before: float
    refractive_index_after: float


def wavelength_to_rgb(wavelength: float, intensity: float = 1.0) -> RGB:
    """
    Approximate the perceived colour of monochromatic light.

    The visible spectrum is split into six linear segments, dimmed towards
    the violet and red ends and gamma corrected. Wavelengths outside
    VISIBLE_RANGE are black.

    Parameters
    ----------
    wavelength : float
        Wavelength in nanometers
    intensity : float, optional
        Scale applied to every channel (default: 1.0)

    Returns
    -------
    RGB
        Colour with channels in [0, 255]
    """
    wl = wavelength
    if wl < VISIBLE_RANGE[0] or wl > VISIBLE_RANGE[1]:
        return RGB(0, 0, 0)

    if wl < 440.0:
        # Violet to blue
        r, g, b = -(wl - 440.0) / (440.0 - 380.0), 0.0, 1.0
    elif wl < 490.0:
        # Blue to cyan
        r, g, b = 0.0, (wl - 440.0) / (490.0 - 440.0), 1.0
    elif wl < 510.0:
        # Cyan to green
        r, g, b = 0.0, 1.0, -(wl - 510.0) / (510.0 - 490.0)
    elif wl < 580.0:
        # Green to yellow
        r, g, b = (wl - 510.0) / (580.0 - 510.0), 1.0, 0.0
    elif wl < 645.0:
        # Yellow to red
        r, g, b = 1.0, -(wl - 645.0) / (645.0 - 580.0), 0.0
    else:
        r, g, b = 1.0, 0.0, 0.0

    # Rough photopic falloff at the spectrum edges
    if wl < 420.0:
        factor = 0.3
    elif wl > 645.0:
        factor = 0.8
    else:
        factor = 1.0

    channels = []
    for c in (r, g, b):
        c = max(0.0, c) ** (1.0 / GAMMA) * factor
        channels.append(int(min(255.0, max(0.0, c * 255.0 * intensity))))

    return RGB(*channels)


class Ray:
    """
    Represents an optical ray traced through a sequence of 2D surfaces.

    The ray keeps every vertex it passed through. Its current origin is the
    last vertex of ``path`` and ``direction`` is always a unit vector.

    Attributes
    ----------
    path : list of np.ndarray
        Origin followed by every intersection point [x, y]
    direction : np.ndarray
        Unit propagation direction from the last path vertex
    wavelength : float
        Wavelength in nanometers (not validated)
    intensity : float
        Intensity of the ray, nominally 0.0 to 1.0 (not clamped)
    hits : list of RayHit
        One record per surface crossed, in crossing order.
        ``len(path) == len(hits) + 1`` at all times.

    Examples
    --------
    >>> ray = Ray(origin=[-10, 0], direction=[1, 0])
    >>> print(repr(ray))
    Ray at [-10.0000, 0.0000], direction [1.0000, 0.0000], λ=550.0 nm
    """

    # Standard wavelengths (Fraunhofer lines) in nanometers
    WAVELENGTH_F = 486.1  # F-line (hydrogen blue)
    WAVELENGTH_d = 587.6  # d-line (helium yellow)
    WAVELENGTH_C = 656.3  # C-line (hydrogen red)

    def __init__(
        self,
        origin: List[float] | np.ndarray,
        direction: List[float] | np.ndarray,
        wavelength: float = DEFAULT_WAVELENGTH,
        intensity: float = 1.0
    ):
        """
        Initialize a Ray object.

        Parameters
        ----------
        origin : array-like
            Starting position [x, y]
        direction : array-like
            Direction vector [dx, dy], will be normalized to unit length
        wavelength : float, optional
            Wavelength in nanometers (default: 550 nm)
        intensity : float, optional
            Ray intensity (default: 1.0)
        """
        self.path: List[np.ndarray] = [as_vec2(origin)]
        self.direction = normalize(as_vec2(direction))
        self.wavelength = float(wavelength)
        self.intensity = float(intensity)
        self.hits: List[RayHit] = []

    @property
    def origin(self) -> np.ndarray:
        """Current origin (last vertex of the path)."""
        return self.path[-1]

    @property
    def x(self) -> float:
        """Current x-coordinate."""
        return self.origin[0]

    @property
    def y(self) -> float:
        """Current y-coordinate."""
        return self.origin[1]

    @property
    def last_hit(self) -> Optional[RayHit]:
        """Most recent hit record, or None if no surface was crossed."""
        return self.hits[-1] if self.hits else None

    @property
    def color(self) -> RGB:
        """Display colour derived from wavelength and intensity."""
        return wavelength_to_rgb(self.wavelength, self.intensity)

    def point_at(self, t: float) -> np.ndarray:
        """
        Get the point along the ray at parameter t.

        The parametric ray equation is: P(t) = origin + t * direction

        Parameters
        ----------
        t : float
            Parameter value (distance along ray)

        Returns
        -------
        np.ndarray
            Point [x, y] at parameter t
        """
        return self.origin + t * self.direction

    def set_direction(self, direction: List[float] | np.ndarray) -> None:
        """Replace the propagation direction (normalized)."""
        self.direction = normalize(as_vec2(direction))

    def add_hit(
        self,
        point: np.ndarray,
        normal: np.ndarray,
        refractive_index_before: float,
        refractive_index_after: float,
        distance: float = 0.0
    ) -> None:
        """
        Append an intersection to the path and hit history.

        Parameters
        ----------
        point : np.ndarray
            Intersection point, becomes the new origin
        normal : np.ndarray
            Surface normal at the intersection point
        refractive_index_before : float
            Refractive index in front of the interface
        refractive_index_after : float
            Refractive index behind the interface
        distance : float, optional
            Distance from the previous vertex. Values below
            INTERSECTION_EPSILON are recomputed from the geometry.
        """
        point = as_vec2(point)
        if distance < INTERSECTION_EPSILON:
            distance = float(np.linalg.norm(point - self.origin))
        self.path.append(point)
        self.hits.append(RayHit(
            point=point.copy(),
            normal=as_vec2(normal),
            distance=float(distance),
            refractive_index_before=float(refractive_index_before),
            refractive_index_after=float(refractive_index_after),
        ))

    def copy(self) -> 'Ray':
        """
        Create a deep copy of the ray.

        Returns
        -------
        Ray
            Independent copy of this ray
        """
        new_ray = Ray(
            origin=self.path[0].copy(),
            direction=self.direction.copy(),
            wavelength=self.wavelength,
            intensity=self.intensity
        )
        new_ray.path = [p.copy() for p in self.path]
        new_ray.hits = list(self.hits)
        return new_ray

    def angle_from_axis_degrees(self) -> float:
        """Angle of the current direction from the +x axis in degrees."""
        return float(np.degrees(np.arctan2(self.direction[1], self.direction[0])))

    @classmethod
    def from_angle(
        cls,
        origin: List[float] | np.ndarray,
        angle: float,
        wavelength: float = DEFAULT_WAVELENGTH,
        intensity: float = 1.0,
        angle_in_degrees: bool = True
    ) -> 'Ray':
        """
        Create a ray travelling at ``angle`` from the +x axis.

        Parameters
        ----------
        origin : array-like
            Starting point [x, y]
        angle : float
            Counter-clockwise angle from the optical (x) axis
        wavelength : float, optional
            Wavelength in nanometers
        intensity : float, optional
            Ray intensity
        angle_in_degrees : bool, optional
            If True, angle is in degrees (default: True)

        Returns
        -------
        Ray
            New ray object
        """
        if angle_in_degrees:
            angle = np.radians(angle)
        direction = [np.cos(angle), np.sin(angle)]
        return cls(origin=origin, direction=direction,
                   wavelength=wavelength, intensity=intensity)

    @classmethod
    def from_two_points(
        cls,
        point1: List[float] | np.ndarray,
        point2: List[float] | np.ndarray,
        wavelength: float = DEFAULT_WAVELENGTH,
        intensity: float = 1.0
    ) -> 'Ray':
        """
        Create a ray starting at point1 and passing through point2.

        Raises
        ------
        ValueError
            If the two points coincide
        """
        p1 = as_vec2(point1)
        p2 = as_vec2(point2)
        return cls(origin=p1, direction=p2 - p1,
                   wavelength=wavelength, intensity=intensity)

    def __repr__(self) -> str:
        """String representation of the ray."""
        return (
            f"Ray at [{self.x:.4f}, {self.y:.4f}], "
            f"direction [{self.direction[0]:.4f}, {self.direction[1]:.4f}], "
            f"λ={self.wavelength} nm"
        )

    def __str__(self) -> str:
        """Human-readable string representation."""
        return (
            f"Ray:\n"
            f"  Position: ({self.x:.4f}, {self.y:.4f})\n"
            f"  Direction: ({self.direction[0]:.4f}, {self.direction[1]:.4f})\n"
            f"  Angle from axis: {self.angle_from_axis_degrees():.2f}°\n"
            f"  Wavelength: {self.wavelength} nm\n"
            f"  Intensity: {self.intensity:.3f}\n"
            f"  Surfaces hit: {len(self.hits)}"
        )


# =============================================================================
# Ray Generation Utilities
# =============================================================================

def _aperture_points(
    ray_count: int,
    aperture_x: float,
    aperture_size: float
) -> np.ndarray:
    """Evenly spaced points across a vertical aperture centred on the axis."""
    if ray_count < 1:
        raise ValueError(f"ray_count must be at least 1, got {ray_count}")
    if aperture_size < 0:
        raise ValueError(f"aperture_size must be non-negative, got {aperture_size}")

    if ray_count == 1:
        heights = np.array([0.0])
    else:
        heights = (np.arange(ray_count) / (ray_count - 1) - 0.5) * aperture_size

    return np.column_stack([np.full(ray_count, float(aperture_x)), heights])


def create_point_source(
    ray_count: int = 10,
    wavelength: float = DEFAULT_WAVELENGTH,
    aperture_x: float = 0.0,
    aperture_size: float = 1.0,
    center: List[float] | np.ndarray = (-10.0, 0.0),
    intensity: float = 1.0
) -> List[Ray]:
    """
    Create a fan of rays diverging from a single point.

    Each ray starts at ``center`` and passes through one of ``ray_count``
    evenly spaced points on the aperture line x = aperture_x.

    Parameters
    ----------
    ray_count : int, optional
        Number of rays (default: 10)
    wavelength : float, optional
        Wavelength in nanometers
    aperture_x : float, optional
        X position of the aperture line
    aperture_size : float, optional
        Full height of the aperture
    center : array-like, optional
        Position of the point source (default: [-10, 0])
    intensity : float, optional
        Intensity assigned to every ray

    Returns
    -------
    List[Ray]
        List of Ray objects
    """
    start = as_vec2(center)
    return [
        Ray(origin=start, direction=point - start,
            wavelength=wavelength, intensity=intensity)
        for point in _aperture_points(ray_count, aperture_x, aperture_size)
    ]


def create_parallel_source(
    ray_count: int = 10,
    wavelength: float = DEFAULT_WAVELENGTH,
    aperture_x: float = 0.0,
    aperture_size: float = 1.0,
    angle: float = 0.0,
    start_offset: float = 10.0,
    intensity: float = 1.0,
    angle_in_degrees: bool = True
) -> List[Ray]:
    """
    Create a collimated beam crossing the aperture at a given angle.

    Every ray passes through its aperture point and starts ``start_offset``
    before it along the beam direction.

    Parameters
    ----------
    ray_count : int, optional
        Number of rays (default: 10)
    wavelength : float, optional
        Wavelength in nanometers
    aperture_x : float, optional
        X position of the aperture line
    aperture_size : float, optional
        Full height of the aperture
    angle : float, optional
        Beam angle from the optical axis
    start_offset : float, optional
        Distance from the ray origins to the aperture (default: 10)
    intensity : float, optional
        Intensity assigned to every ray
    angle_in_degrees : bool, optional
        If True, angle is in degrees (default: True)

    Returns
    -------
    List[Ray]
        List of Ray objects
    """
    if angle_in_degrees:
        angle = np.radians(angle)

    offset = start_offset * np.array([np.cos(angle), np.sin(angle)])
    rays = []
    for point in _aperture_points(ray_count, aperture_x, aperture_size):
        start = point - offset
        rays.append(Ray(origin=start, direction=point - start,
                        wavelength=wavelength, intensity=intensity))

    return rays
