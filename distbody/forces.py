"""
This module implements the pairwise gravitational force kernel.

pair_force computes the Newtonian force exerted on body 1 by body 2 from scalar masses
and coordinates, in a fixed algebraic order (magnitude G*m1*m2/r^2, then magnitude*dx/r
per axis) so that every rank and every worker rounds identically.
force_reducer.reduce_rows evaluates the same expressions on whole rows of bodies at once.
gravitational_force is the same kernel for anything exposing mass/x/y (Body, BodyView).
Coincident positions make r^2 zero; instead of letting the division produce inf or NaN
the caller chooses a policy: "raise" signals DegenerateConfiguration, "zero" returns a
zero force. No softening is applied.
"""

from __future__ import annotations
import math
from typing import Tuple

from .constants import G as _G
from .errors import DegenerateConfiguration


Force2 = Tuple[float, float]

_ZERO: Force2 = (0.0, 0.0)


def pair_force(
    m1: float, x1: float, y1: float,
    m2: float, x2: float, y2: float,
    G: float = _G,
    on_coincident: str = "raise",
    *,
    pair: Tuple[int, int] = (-1, -1),
) -> Force2:
    dx = x2 - x1
    dy = y2 - y1
    distance_squared = dx * dx + dy * dy
    if distance_squared == 0.0:
        if on_coincident == "zero":
            return _ZERO
        raise DegenerateConfiguration(*pair)

    force_magnitude = G * m1 * m2 / distance_squared
    distance = math.sqrt(distance_squared)
    return (force_magnitude * dx / distance, force_magnitude * dy / distance)


def gravitational_force(a, b, G: float = _G, on_coincident: str = "raise") -> Force2:
    return pair_force(
        a.mass, a.x, a.y,
        b.mass, b.x, b.y,
        G, on_coincident,
        pair=(getattr(a, "index", -1), getattr(b, "index", -1)),
    )


__all__ = ["pair_force", "gravitational_force"]
