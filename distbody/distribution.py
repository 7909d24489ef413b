"""
This module implements the per-step force distribution between ranks.

DistributionProtocol makes every rank finish a step holding the coordinator's force
array. The exchange is fenced by two barriers: the first guarantees every rank has
finished its local reduction, the second that every rank holds the authoritative array
before anyone integrates. The first barrier waits for a computation rather than a
transfer, so it is bounded by compute_timeout when one is given. Between them the
coordinator broadcasts the encoded array and every other rank replaces whatever it
computed with the decoded copy. With partitioning
enabled each rank reduces only its own contiguous slice of body indices; the slices are
gathered to the coordinator, assembled in index order and broadcast the same way, so the
result is bit-identical to the coordinator computing everything. A single rank skips the
protocol entirely. Any failure aborts the communicator so that peers blocked in the
exchange fail too, then propagates.
"""

from __future__ import annotations
from typing import Optional

import numpy as np

from .body_set import BodySet
from .communicator import Communicator
from .wire import decode_forces, decode_state, encode_forces, encode_state


def partition_indices(n: int, size: int, rank: int) -> range:
	counts = [n // size] * size
	for r in range(n % size):
		counts[r] += 1
	start = sum(counts[:rank])
	return range(start, start + counts[rank])


class DistributionProtocol:

	def __init__(self, comm: Communicator, partition: bool = False,
				 compute_timeout: Optional[float] = None) -> None:
		self.comm = comm
		self.partition = bool(partition)
		self.compute_timeout = compute_timeout

	def local_indices(self, n: int) -> Optional[range]:
		comm = self.comm
		if comm.size == 1:
			return None
		if self.partition:
			return partition_indices(n, comm.size, comm.rank)
		if comm.is_coordinator:
			return None
		# the coordinator's array replaces ours anyway
		return range(0)

	def distribute(self, forces: np.ndarray, n: int) -> np.ndarray:
		comm = self.comm
		if comm.size == 1:
			return forces
		try:
			# peers may still be reducing, so this wait is bounded by compute_timeout
			comm.barrier(self.compute_timeout)
			if self.partition:
				forces = self._assemble(forces, n)
			if comm.is_coordinator:
				comm.broadcast(encode_forces(forces))
			else:
				forces = decode_forces(comm.broadcast(None), n)
			comm.barrier()
		except Exception as exc:
			comm.abort(f"rank {comm.rank} failed during force distribution: {exc}")
			raise
		return forces

	def _assemble(self, forces: np.ndarray, n: int) -> np.ndarray:
		comm = self.comm
		mine = partition_indices(n, comm.size, comm.rank)
		parts = comm.gather(encode_forces(forces[mine.start:mine.stop]))
		if parts is None:
			return forces
		full = np.zeros((n, 2), dtype=np.float64)
		for r, part in enumerate(parts):
			rows = partition_indices(n, comm.size, r)
			full[rows.start:rows.stop] = decode_forces(part, len(rows))
		return full

	def replicate(self, bodies: BodySet) -> BodySet:
		comm = self.comm
		if comm.size == 1:
			return bodies
		try:
			comm.barrier()
			if comm.is_coordinator:
				comm.broadcast(encode_state(bodies))
			else:
				bodies.adopt(decode_state(comm.broadcast(None), bodies.n_bodies))
			comm.barrier()
		except Exception as exc:
			comm.abort(f"rank {comm.rank} failed during initial state replication: {exc}")
			raise
		return bodies
