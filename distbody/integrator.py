from __future__ import annotations
import numpy as np

from .body_set import BodySet
from .errors import ProtocolMismatch
from .simulation_validator import SimulationValidator

"""
This module implements the Integrator that advances a BodySet by one unit timestep from an authoritative force array. The update is semi-implicit Euler: acceleration F/m is added to the velocity first and the position then moves by the new velocity. The ordering is part of the numerical contract; moving positions with the old velocity gives a different trajectory. All checks (masses positive and finite, force array matching the body count) run before the first array is touched, so a rejected step leaves every body exactly as it was.

"""


class Integrator:

	def __init__(self) -> None:
		self.steps_taken = 0

	def step(self, bodies: BodySet, forces: np.ndarray) -> None:
		forces = np.asarray(forces, dtype=np.float64)
		n = bodies.n_bodies
		if forces.shape != (n, 2):
			raise ProtocolMismatch(n, int(forces.shape[0]) if forces.ndim else 0)
		SimulationValidator.check_masses(bodies.mass)

		acc = forces / bodies.mass[:, None]
		bodies.vel[...] += acc
		bodies.pos[...] += bodies.vel
		self.steps_taken += 1
