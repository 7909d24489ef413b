"""
This module provides validation utilities for body set states.

The SimulationValidator class offers static methods to check state validity (positive
masses, finite values, correct dimensions). check_state raises on the first problem it
finds, with InvalidMass for mass problems and ConfigurationError for shapes or
non-finite coordinates. check_masses is the subset the Integrator runs before every
step, so that a mass corrupted between steps is caught before any body is moved.
"""

from __future__ import annotations
import numpy as np

from .errors import ConfigurationError, InvalidMass


class SimulationValidator:
	@staticmethod
	def check_masses(masses: np.ndarray) -> None:
		m = np.asarray(masses, dtype=float).ravel()
		bad = ~(np.isfinite(m) & (m > 0.0))
		if np.any(bad):
			i = int(np.flatnonzero(bad)[0])
			raise InvalidMass(i, float(m[i]))

	@staticmethod
	def check_state(masses: np.ndarray, positions: np.ndarray, velocities: np.ndarray) -> None:
		m = np.asarray(masses, dtype=float)
		r = np.asarray(positions, dtype=float)
		v = np.asarray(velocities, dtype=float)

		if m.ndim != 1:
			raise ConfigurationError(f"masses must be one-dimensional, got shape {m.shape}")
		if r.ndim != 2 or r.shape[1] != 2:
			raise ConfigurationError(f"positions must have shape (n, 2), got {r.shape}")
		if r.shape != v.shape:
			raise ConfigurationError(
				f"positions {r.shape} and velocities {v.shape} have different shapes"
			)
		if r.shape[0] != m.size:
			raise ConfigurationError(
				f"{m.size} masses given for {r.shape[0]} positions"
			)

		SimulationValidator.check_masses(m)

		if not np.all(np.isfinite(r)):
			raise ConfigurationError("positions must be finite")
		if not np.all(np.isfinite(v)):
			raise ConfigurationError("velocities must be finite")

