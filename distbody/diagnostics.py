from __future__ import annotations
import itertools, math
import time
import numpy as np
from typing import TYPE_CHECKING
from .physics_utils import total_momentum
if TYPE_CHECKING:
    from .body_set import BodySet

"""
This module computes conserved quantities of a BodySet for monitoring a run. The Diagnostics class provides kinetic and potential energy (exact pairwise, no softening; coincident pairs are skipped), linear momentum, center of mass position and a summary dict combining them. Drift of momentum relative to a reference captured at construction is available through momentum_drift, which is what the reporters print when diagnostics are enabled. It includes rate-limited diagnostic printing to avoid console spam on long runs; the limit is kept per instance, so two runs in one process do not silence each other. Diagnostics only read the body set and never mutate it.

"""




class Diagnostics:

	def __init__(self, bodies: "BodySet", G: float) -> None:
		self.bodies = bodies
		self.G = float(G)
		self._p0 = self.linear_momentum()
		self._last_print = {}

	def kinetic_energy(self) -> float:
		m = self.bodies.mass
		v = self.bodies.vel
		return 0.5 * float(np.sum(m * np.sum(v * v, axis=1)))

	def potential_energy(self) -> float:
		s = 0.0
		G = self.G
		for a, b in itertools.combinations(self.bodies, 2):
			dx = b.x - a.x
			dy = b.y - a.y
			r = math.sqrt(dx * dx + dy * dy)
			if r == 0.0:
				continue
			s -= G * a.mass * b.mass / r
		return s

	def energy(self) -> float:
		return self.kinetic_energy() + self.potential_energy()

	def linear_momentum(self) -> np.ndarray:
		return total_momentum(self.bodies.mass, self.bodies.vel)

	def momentum_drift(self) -> float:
		p = self.linear_momentum()
		scale = float(np.linalg.norm(self._p0))
		diff = float(np.linalg.norm(p - self._p0))
		if scale == 0.0:
			return diff
		return diff / scale

	def center_of_mass(self) -> np.ndarray:
		m = self.bodies.mass
		total = float(np.sum(m))
		if total == 0.0:
			return np.zeros(2, dtype=np.float64)
		return np.sum(m[:, None] * self.bodies.pos, axis=0) / total

	def summary(self) -> dict:
		p = self.linear_momentum()
		com = self.center_of_mass()
		return {
			"kinetic": self.kinetic_energy(),
			"potential": self.potential_energy(),
			"energy": self.energy(),
			"px": float(p[0]),
			"py": float(p[1]),
			"momentum_drift": self.momentum_drift(),
			"com_x": float(com[0]),
			"com_y": float(com[1]),
		}

	def rate_limited_print(self, key: str, msg: str, interval: float = 1.0) -> None:
		now = time.monotonic()
		last = self._last_print.get(key)
		if last is not None and now - last < interval:
			return
		self._last_print[key] = now
		print(msg)
