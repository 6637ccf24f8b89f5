"""
surfaces.py - Circular refracting surfaces for 2D lens ray tracing

In 2D a spherical surface becomes a circular arc. Each surface knows:
    - Its apex position and signed radius of curvature
    - How to compute surface normals
    - Its refractive index, including Cauchy dispersion
    - Whether rays enter the lens material or leave it

Author: Avinash Kumar Singh
Project: 2D Lens Ray Tracer
"""

import numpy as np
from typing import List, Tuple

from .rays import as_vec2, normalize


# Refractive index of the medium surrounding every lens
AMBIENT_INDEX = 1.0


class InvalidGeometryError(ValueError):
    """Raised when a surface cannot describe a circular arc."""


class SphereLens:
    """
    Circular refracting interface.

    Sign Convention:
        - ``center`` is the apex (vertex) of the arc on the optical axis,
          not the centre of the circle
        - Radius R > 0: centre of curvature to the RIGHT of the apex
        - Radius R < 0: centre of curvature to the LEFT of the apex
        - R = 0 is rejected with InvalidGeometryError

    Dispersion follows a simplified Cauchy equation:
        n(λ) = n0 + B / λ²    (λ in micrometers)

    Instances are immutable; a lens system is an ordered list of surfaces.

    Attributes
    ----------
    center : np.ndarray
        Apex of the arc [x, y]
    radius : float
        Signed radius of curvature
    refractive_index : float
        Base refractive index n0 of the lens material
    is_entrance : bool
        True if rays pass from the ambient medium into the material,
        False if they leave the material
    dispersive_coefficient : float
        Cauchy B coefficient in μm²
    """

    __slots__ = (
        "_center", "_radius", "_refractive_index",
        "_is_entrance", "_dispersive_coefficient",
    )

    def __init__(
        self,
        center: List[float] | np.ndarray = (0.0, 0.0),
        radius: float = 100.0,
        refractive_index: float = 1.5,
        is_entrance: bool = True,
        dispersive_coefficient: float = 0.0
    ):
        """
        Initialize a SphereLens.

        Parameters
        ----------
        center : array-like, optional
            Apex position [x, y] (default: origin)
        radius : float, optional
            Signed radius of curvature (default: 100)
        refractive_index : float, optional
            Base refractive index (default: 1.5)
        is_entrance : bool, optional
            Entrance (True) or exit (False) surface (default: True)
        dispersive_coefficient : float, optional
            Cauchy B coefficient in μm² (default: 0, no dispersion)

        Raises
        ------
        InvalidGeometryError
            If radius is zero or not finite
        """
        radius = float(radius)
        if radius == 0.0 or not np.isfinite(radius):
            raise InvalidGeometryError(
                f"Surface radius must be finite and non-zero, got {radius}"
            )

        center = as_vec2(center)
        center.flags.writeable = False

        self._center = center
        self._radius = radius
        self._refractive_index = float(refractive_index)
        self._is_entrance = bool(is_entrance)
        self._dispersive_coefficient = float(dispersive_coefficient)

    @property
    def center(self) -> np.ndarray:
        """Apex of the arc."""
        return self._center

    @property
    def radius(self) -> float:
        """Signed radius of curvature."""
        return self._radius

    @property
    def refractive_index(self) -> float:
        """Base refractive index."""
        return self._refractive_index

    @property
    def is_entrance(self) -> bool:
        return self._is_entrance

    @property
    def dispersive_coefficient(self) -> float:
        return self._dispersive_coefficient

    @property
    def R(self) -> float:
        """Shorthand for radius."""
        return self._radius

    @property
    def circle_center(self) -> np.ndarray:
        """Geometric centre of the circle, offset from the apex along x."""
        return self._center + np.array([self._radius, 0.0])

    @property
    def apex_x(self) -> float:
        """X threshold separating the valid half of the circle."""
        return self._center[0] + self._radius

    @property
    def index_after(self) -> float:
        """Base refractive index on the far side of the interface."""
        return self._refractive_index if self._is_entrance else AMBIENT_INDEX

    def normal_at(self, point: List[float] | np.ndarray) -> np.ndarray:
        """
        Calculate the surface normal at a point on the circle.

        The normal points from the centre of the circle toward the point,
        and is flipped for negative radii.

        Parameters
        ----------
        point : array-like
            Point on the surface [x, y]

        Returns
        -------
        np.ndarray
            Unit normal vector [nx, ny]
        """
        normal = normalize(as_vec2(point) - self.circle_center)
        return normal if self._radius > 0 else -normal

    def refractive_index_at_wavelength(self, wavelength: float) -> float:
        """
        Wavelength-dependent refractive index from Cauchy's equation.

        Parameters
        ----------
        wavelength : float
            Wavelength in nanometers. Non-positive values return the
            base index.

        Returns
        -------
        float
            n(λ) = n0 + B / λ_μm²
        """
        if wavelength <= 0.0:
            return self._refractive_index

        wavelength_um = wavelength / 1000.0
        return self._refractive_index + self._dispersive_coefficient / wavelength_um**2

    def _key(self) -> Tuple:
        return (
            float(self._center[0]), float(self._center[1]), self._radius,
            self._refractive_index, self._is_entrance, self._dispersive_coefficient,
        )

    def __eq__(self, other) -> bool:
        if not isinstance(other, SphereLens):
            return NotImplemented
        return self._key() == other._key()

    def __hash__(self) -> int:
        return hash(self._key())

    def __repr__(self) -> str:
        """String representation."""
        side = "entrance" if self._is_entrance else "exit"
        return (
            f"{self.__class__.__name__}("
            f"apex=[{self._center[0]:.2f}, {self._center[1]:.2f}], "
            f"R={self._radius:.2f}, "
            f"n={self._refractive_index:.4f}, "
            f"B={self._dispersive_coefficient:.5f}, "
            f"{side})"
        )


# =============================================================================
# Factory Functions
# =============================================================================

def create_singlet(
    position_x: float,
    thickness: float,
    front_radius: float,
    back_radius: float,
    refractive_index: float = 1.5,
    dispersive_coefficient: float = 0.0
) -> List[SphereLens]:
    """
    Create the two surfaces of a single lens element.

    Parameters
    ----------
    position_x : float
        Apex position of the front surface on the optical axis
    thickness : float
        Axial distance between the front and back apexes
    front_radius : float
        Radius of the entrance surface (positive for biconvex front)
    back_radius : float
        Radius of the exit surface (negative for biconvex back)
    refractive_index : float, optional
        Base refractive index of the material
    dispersive_coefficient : float, optional
        Cauchy B coefficient in μm²

    Returns
    -------
    List[SphereLens]
        [entrance surface, exit surface]
    """
    if thickness < 0:
        raise InvalidGeometryError(f"Lens thickness must be non-negative, got {thickness}")

    front = SphereLens(
        center=[position_x, 0.0],
        radius=front_radius,
        refractive_index=refractive_index,
        is_entrance=True,
        dispersive_coefficient=dispersive_coefficient
    )
    back = SphereLens(
        center=[position_x + thickness, 0.0],
        radius=back_radius,
        refractive_index=refractive_index,
        is_entrance=False,
        dispersive_coefficient=dispersive_coefficient
    )
    return [front, back]
