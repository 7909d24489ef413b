"""
This module supplies the initial body sets a run can start from.

earth_moon builds the fixed two-body system the simulator has always shipped with: the
Earth at rest at the origin and the Moon at the mean Earth-Moon distance moving at
100 m/s along x. load_bodies reads a CSV file with mass, x, y, vx and vy columns (lines
starting with # are comments; vx and vy default to zero when absent) through pandas and
validates it into a BodySet, optionally moved into the center-of-mass frame so the
system as a whole stays put. Row order in the file becomes body index order, which is
the identity every rank relies on.
"""

import numpy as np
import pandas as pd
from typing import List

from .body import Body
from .body_set import BodySet
from .errors import ConfigurationError
from .physics_utils import remove_center_of_mass_velocity


EARTH_MASS = 5.972e24
MOON_MASS = 7.34767309e22
EARTH_MOON_DISTANCE = 384400000.0

REQUIRED_COLUMNS = ["mass", "x", "y"]
OPTIONAL_COLUMNS = ["vx", "vy"]


def earth_moon_bodies() -> List[Body]:
	return [
		Body(mass=EARTH_MASS, x=0.0, y=0.0, vx=0.0, vy=0.0),
		Body(mass=MOON_MASS, x=EARTH_MOON_DISTANCE, y=0.0, vx=100.0, vy=0.0),
	]


def earth_moon() -> BodySet:
	return BodySet.from_bodies(earth_moon_bodies())


def center_of_mass_frame(bodies: BodySet) -> BodySet:
	"""Copy of bodies with velocities taken relative to the center of mass."""
	out = bodies.copy()
	out.vel[...] = remove_center_of_mass_velocity(out.mass, out.vel)
	return out


def load_bodies(path: str, com_frame: bool = False) -> BodySet:
	try:
		df = pd.read_csv(path, comment='#', skipinitialspace=True)
	except FileNotFoundError:
		raise ConfigurationError(f"body file not found: {path}") from None
	except pd.errors.EmptyDataError:
		raise ConfigurationError(f"body file {path} is empty") from None

	df.columns = [str(c).strip().lower() for c in df.columns]
	missing = [c for c in REQUIRED_COLUMNS if c not in df.columns]
	if missing:
		raise ConfigurationError(f"body file {path} is missing column(s): {', '.join(missing)}")
	if len(df) == 0:
		raise ConfigurationError(f"body file {path} contains no bodies")

	for col in OPTIONAL_COLUMNS:
		if col not in df.columns:
			df[col] = 0.0

	try:
		data = df[REQUIRED_COLUMNS + OPTIONAL_COLUMNS].astype(np.float64).to_numpy()
	except ValueError as exc:
		raise ConfigurationError(f"body file {path} has non-numeric values: {exc}") from None

	bodies = BodySet(data[:, 0], data[:, 1:3], data[:, 3:5])
	if com_frame:
		return center_of_mass_frame(bodies)
	return bodies
