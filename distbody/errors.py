"""
This module defines the exception hierarchy raised by the simulation kernel.

Every error derives from SimulationError so callers (the CLI in particular) can turn
any fatal condition into a descriptive message and a non-zero exit status. Errors are
never recovered inside the kernel: a failed force reduction, integration or distribution
leaves the replicated body sets in an unknown relation to each other, so the run is
aborted instead of retried. Errors carrying body indices pickle with those indices so they
survive the trip back from a worker process.
"""

from __future__ import annotations


class SimulationError(Exception):
	pass


class ConfigurationError(SimulationError):
	pass


class DegenerateConfiguration(SimulationError):
	def __init__(self, i: int = -1, j: int = -1) -> None:
		if i < 0 or j < 0:
			super().__init__("two bodies occupy the same position; force is undefined")
		else:
			super().__init__(f"bodies {i} and {j} occupy the same position; force is undefined")
		self.i = i
		self.j = j

	def __reduce__(self):
		return (type(self), (self.i, self.j))


class InvalidMass(SimulationError):
	def __init__(self, index: int, mass: float) -> None:
		super().__init__(f"body {index} has non-positive or non-finite mass {mass!r}")
		self.index = index
		self.mass = mass

	def __reduce__(self):
		return (type(self), (self.index, self.mass))


class ProtocolMismatch(SimulationError):
	def __init__(self, expected: int, received: int, what: str = "force array") -> None:
		super().__init__(f"{what} length mismatch: expected {expected} bodies, received {received}")
		self.expected = expected
		self.received = received
		self.what = what

	def __reduce__(self):
		return (type(self), (self.expected, self.received, self.what))


class SerializationError(SimulationError):
	pass


class CommunicationError(SimulationError):
	pass


class CommunicationTimeout(CommunicationError):
	pass


__all__ = [
	"SimulationError",
	"ConfigurationError",
	"DegenerateConfiguration",
	"InvalidMass",
	"ProtocolMismatch",
	"SerializationError",
	"CommunicationError",
	"CommunicationTimeout",
]
