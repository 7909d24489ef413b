"""
This module implements BodyView, a proxy class providing Body-like access to individual
bodies stored in a BodySet's numpy arrays.

The class uses properties with getters and setters to map attribute access (mass, x, y,
vx, vy) directly to the appropriate array indices in the parent set, maintaining the
same interface as Body while operating on the array storage. Setters write straight into
the arrays without validation; mass checks happen in the Integrator at the start of every
step so a bad value is rejected before anything moves. The view assumes the body index
remains within bounds, which holds because a BodySet never changes length.
"""

from __future__ import annotations
from typing import TYPE_CHECKING, Tuple
from .body import Body
if TYPE_CHECKING:
    from .body_set import BodySet




class BodyView:
	__slots__ = ("_set", "_i")

	def __init__(self, body_set: "BodySet", idx: int) -> None:
		self._set = body_set
		self._i = int(idx)

	@property
	def index(self) -> int:
		return self._i

	@property
	def mass(self) -> float:
		return float(self._set.mass[self._i])
	@mass.setter
	def mass(self, v: float) -> None:
		self._set.mass[self._i] = float(v)

	@property
	def x(self) -> float:
		return float(self._set.pos[self._i, 0])
	@x.setter
	def x(self, v: float) -> None:
		self._set.pos[self._i, 0] = float(v)

	@property
	def y(self) -> float:
		return float(self._set.pos[self._i, 1])
	@y.setter
	def y(self, v: float) -> None:
		self._set.pos[self._i, 1] = float(v)

	@property
	def vx(self) -> float:
		return float(self._set.vel[self._i, 0])
	@vx.setter
	def vx(self, v: float) -> None:
		self._set.vel[self._i, 0] = float(v)

	@property
	def vy(self) -> float:
		return float(self._set.vel[self._i, 1])
	@vy.setter
	def vy(self, v: float) -> None:
		self._set.vel[self._i, 1] = float(v)

	@property
	def position(self) -> Tuple[float, float]:
		return (self.x, self.y)

	@property
	def velocity(self) -> Tuple[float, float]:
		return (self.vx, self.vy)

	def to_body(self) -> Body:
		return Body(self.mass, self.x, self.y, self.vx, self.vy)

	def __repr__(self) -> str:
		return (f"Body(mass={self.mass}, x={self.x}, y={self.y}, "
				f"vx={self.vx}, vy={self.vy})")
