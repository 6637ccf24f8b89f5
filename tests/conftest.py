"""Pytest configuration and fixtures."""
import logging
import sys

import matplotlib

matplotlib.use("Agg")

import pytest

from lenstrace import SphereLens, create_singlet


def pytest_configure(config):
    """Configure logging for test runs."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%H:%M:%S",
        stream=sys.stderr,
    )


@pytest.fixture
def entrance_surface():
    """Convex entrance surface with its apex at the origin, R=10, n=1.5."""
    return SphereLens(center=[0.0, 0.0], radius=10.0, refractive_index=1.5, is_entrance=True)


@pytest.fixture
def biconvex_lens():
    """Entrance surface at x=0 (R=10) and exit surface at x=4 (R=-10), n=1.5."""
    return create_singlet(position_x=0.0, thickness=4.0, front_radius=10.0,
                          back_radius=-10.0, refractive_index=1.5)
