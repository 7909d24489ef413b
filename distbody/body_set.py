"""
This module manages the array representation of the bodies being simulated.

The BodySet class keeps numpy float64 arrays for masses (n,), positions (n,2) and
velocities (n,2), builds them from Body lists or raw arrays, hands out BodyView proxies
for indexed access and produces snapshots: full, read-only copies that the force reducer
works on while the Integrator owns the live arrays. Index identity is fixed at
construction; nothing in the package reorders, appends or removes bodies, which is what
allows body i on one rank to be matched with force row i received from another. The
rows representation (n,5) is the layout used to replicate the initial state across
ranks.
"""

from __future__ import annotations
import numpy as np
from typing import Iterable, Iterator, List, Sequence, Tuple

from .body import Body
from .body_view import BodyView
from .errors import ProtocolMismatch
from .simulation_validator import SimulationValidator


Vec2 = Tuple[float, float]

ROW_WIDTH = 5


class BodySet:

	def __init__(self, masses: np.ndarray, positions: np.ndarray, velocities: np.ndarray,
				 *, validate: bool = True) -> None:
		mass = np.array(masses, dtype=np.float64)
		pos = np.array(positions, dtype=np.float64)
		vel = np.array(velocities, dtype=np.float64)
		# an empty list has shape (0,), not (0, 2)
		if pos.size == 0:
			pos = pos.reshape(0, 2)
		if vel.size == 0:
			vel = vel.reshape(0, 2)
		if validate:
			SimulationValidator.check_state(mass, pos, vel)
		self._mass = mass.ravel()
		self._pos = pos.reshape(-1, 2)
		self._vel = vel.reshape(-1, 2)

	@classmethod
	def from_bodies(cls, bodies: Iterable[Body]) -> "BodySet":
		bodies = list(bodies)
		mass_list = []
		for b in bodies:
			mass_list.append(b.mass)

		pos_list = []
		for b in bodies:
			pos_list.append((b.x, b.y))

		vel_list = []
		for b in bodies:
			vel_list.append((b.vx, b.vy))

		return cls(
			np.array(mass_list, dtype=np.float64),
			np.array(pos_list, dtype=np.float64).reshape(-1, 2),
			np.array(vel_list, dtype=np.float64).reshape(-1, 2),
		)

	@classmethod
	def from_arrays(cls, masses: Sequence[float], positions: Sequence[Vec2],
					velocities: Sequence[Vec2] | None = None) -> "BodySet":
		masses = list(masses)
		if velocities is None:
			velocities = [(0.0, 0.0)] * len(masses)
		return cls(masses, positions, velocities)

	@classmethod
	def from_rows(cls, rows: np.ndarray, *, validate: bool = True) -> "BodySet":
		rows = np.asarray(rows, dtype=np.float64).reshape(-1, ROW_WIDTH)
		return cls(rows[:, 0], rows[:, 1:3], rows[:, 3:5], validate=validate)

	def to_rows(self) -> np.ndarray:
		return np.column_stack((self._mass, self._pos, self._vel))

	@property
	def mass(self) -> np.ndarray:
		return self._mass

	@property
	def pos(self) -> np.ndarray:
		return self._pos

	@property
	def vel(self) -> np.ndarray:
		return self._vel

	@property
	def n_bodies(self) -> int:
		return int(self._mass.shape[0])

	def __len__(self) -> int:
		return self.n_bodies

	def __getitem__(self, idx: int) -> BodyView:
		n = self.n_bodies
		i = int(idx)
		if i < 0:
			i += n
		if not 0 <= i < n:
			raise IndexError(f"body index {idx} out of range for {n} bodies")
		return BodyView(self, i)

	def __iter__(self) -> Iterator[BodyView]:
		for i in range(self.n_bodies):
			yield BodyView(self, i)

	def bodies(self) -> List[Body]:
		out = []
		for view in self:
			out.append(view.to_body())
		return out

	def copy(self) -> "BodySet":
		return BodySet(self._mass, self._pos, self._vel, validate=False)

	def snapshot(self) -> "BodySet":
		snap = self.copy()
		snap._mass.flags.writeable = False
		snap._pos.flags.writeable = False
		snap._vel.flags.writeable = False
		return snap

	def adopt(self, other: "BodySet") -> None:
		if other.n_bodies != self.n_bodies:
			raise ProtocolMismatch(self.n_bodies, other.n_bodies, "body set")
		self._mass[...] = other.mass
		self._pos[...] = other.pos
		self._vel[...] = other.vel

	def state_equal(self, other: "BodySet") -> bool:
		return (
			np.array_equal(self._mass, other.mass)
			and np.array_equal(self._pos, other.pos)
			and np.array_equal(self._vel, other.vel)
		)

	def __repr__(self) -> str:
		return f"BodySet(n_bodies={self.n_bodies})"
