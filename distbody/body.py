"""
This module defines the Body class, a simple data container for individual point masses
in the simulation.

The class stores fundamental properties (mass, position x/y, velocity vx/vy) as
floating-point attributes, exposes position and velocity as 2-tuples and provides a
string representation used by the reporters. It serves as the basic building block for
writing initial conditions before conversion to the numpy array format of BodySet.
The class makes no assumptions about units; the default gravitational constant is SI.
"""
from typing import Tuple


class Body:
	def __init__(self, mass: float, x: float, y: float, vx: float = 0.0, vy: float = 0.0):
		self.mass = float(mass)
		self.x = float(x)
		self.y = float(y)
		self.vx = float(vx)
		self.vy = float(vy)

	@property
	def position(self) -> Tuple[float, float]:
		return (self.x, self.y)

	@property
	def velocity(self) -> Tuple[float, float]:
		return (self.vx, self.vy)

	def __eq__(self, other) -> bool:
		if not isinstance(other, Body):
			return NotImplemented
		return (self.mass, self.x, self.y, self.vx, self.vy) == (
			other.mass, other.x, other.y, other.vx, other.vy
		)

	def __repr__(self) -> str:
		return f"Body(mass={self.mass}, x={self.x}, y={self.y}, vx={self.vx}, vy={self.vy})"
