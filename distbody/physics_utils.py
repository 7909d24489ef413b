import numpy as np

"""
This module provides small conserved-quantity helpers on plain arrays. total_momentum sums mass times velocity over all bodies, and remove_center_of_mass_velocity expresses a velocity array relative to the center of mass, which is how initial_conditions.center_of_mass_frame keeps a loaded system from drifting as a whole. A single body or a zero total mass leaves the velocities as they are.


"""

def total_momentum(masses: np.ndarray, velocities: np.ndarray) -> np.ndarray:
	masses = np.asarray(masses, dtype=np.float64)
	velocities = np.asarray(velocities, dtype=np.float64).reshape(-1, 2)
	if masses.size == 0:
		return np.zeros(2, dtype=np.float64)
	return np.sum(masses[:, None] * velocities, axis=0)


def remove_center_of_mass_velocity(masses: np.ndarray, velocities: np.ndarray) -> np.ndarray:
	masses = np.asarray(masses, dtype=np.float64)
	velocities = np.asarray(velocities, dtype=np.float64).reshape(-1, 2)
	total_mass = float(np.sum(masses))
	if masses.size < 2 or total_mass <= 0.0:
		return velocities.copy()
	return velocities - total_momentum(masses, velocities) / total_mass
