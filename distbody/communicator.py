"""
This module defines how cooperating ranks talk to each other.

Communicator is the interface the distribution protocol is written against: a rank and
a size, a blocking barrier, point-to-point send/recv of byte payloads, and broadcast and
gather built on top of those, plus abort for tearing the whole group down when one rank
fails. Every blocking call is bounded by the communicator's timeout and raises
CommunicationTimeout instead of hanging when a peer disappears. barrier() takes an
optional per-call timeout for waits that cover a peer's computation rather than a transfer.

SoloCommunicator is the single-rank case. LocalGroup runs several ranks as threads of
one process, sharing a threading.Barrier and one queue per (source, destination) pair;
it is what the CLI's --ranks option and the test-suite use, and it behaves like the
mpi4py-backed MPICommunicator from the point of view of the protocol. Aborting a
LocalGroup breaks its barrier and wakes blocked receivers, so a failure on one rank
surfaces as CommunicationError on all the others.
"""

from __future__ import annotations
import queue
import threading
import time
from typing import Dict, List, Optional, Tuple

from .constants import COORDINATOR_RANK, DEFAULT_TIMEOUT
from .errors import CommunicationError, CommunicationTimeout


_POLL_INTERVAL = 0.05


class Communicator:
	rank: int = COORDINATOR_RANK
	size: int = 1
	timeout: float = DEFAULT_TIMEOUT

	@property
	def is_coordinator(self) -> bool:
		return self.rank == COORDINATOR_RANK

	def barrier(self, timeout: Optional[float] = None) -> None:
		raise NotImplementedError

	def send(self, payload: bytes, dest: int) -> None:
		raise NotImplementedError

	def recv(self, source: int) -> bytes:
		raise NotImplementedError

	def abort(self, reason: str = "") -> None:
		raise NotImplementedError

	def broadcast(self, payload: Optional[bytes], root: int = COORDINATOR_RANK) -> bytes:
		if self.size == 1:
			return payload
		if self.rank == root:
			for dest in range(self.size):
				if dest != root:
					self.send(payload, dest)
			return payload
		return self.recv(root)

	def gather(self, payload: bytes, root: int = COORDINATOR_RANK) -> Optional[List[bytes]]:
		if self.size == 1:
			return [payload]
		if self.rank != root:
			self.send(payload, root)
			return None
		out: List[Optional[bytes]] = [None] * self.size
		out[root] = payload
		for source in range(self.size):
			if source != root:
				out[source] = self.recv(source)
		return out


class SoloCommunicator(Communicator):

	def __init__(self, timeout: float = DEFAULT_TIMEOUT) -> None:
		self.rank = COORDINATOR_RANK
		self.size = 1
		self.timeout = float(timeout)

	def barrier(self, timeout: Optional[float] = None) -> None:
		return None

	def send(self, payload: bytes, dest: int) -> None:
		raise CommunicationError(f"single-rank run has no rank {dest} to send to")

	def recv(self, source: int) -> bytes:
		raise CommunicationError(f"single-rank run has no rank {source} to receive from")

	def abort(self, reason: str = "") -> None:
		return None


class LocalGroup:

	def __init__(self, size: int, timeout: float = DEFAULT_TIMEOUT) -> None:
		if size < 1:
			raise ValueError(f"group size must be >= 1, got {size}")
		self.size = int(size)
		self.timeout = float(timeout)
		self._barrier = threading.Barrier(self.size)
		self._mailboxes: Dict[Tuple[int, int], queue.Queue] = {}
		for src in range(self.size):
			for dst in range(self.size):
				if src != dst:
					self._mailboxes[(src, dst)] = queue.Queue()
		self._aborted = threading.Event()
		self.abort_reason: str = ""

	@property
	def aborted(self) -> bool:
		return self._aborted.is_set()

	def communicator(self, rank: int) -> "LocalCommunicator":
		if not 0 <= rank < self.size:
			raise ValueError(f"rank {rank} out of range for group of {self.size}")
		return LocalCommunicator(self, rank)

	def communicators(self) -> List["LocalCommunicator"]:
		return [self.communicator(r) for r in range(self.size)]

	def abort(self, reason: str = "") -> None:
		if not self._aborted.is_set():
			self.abort_reason = reason
			self._aborted.set()
		self._barrier.abort()


class LocalCommunicator(Communicator):

	def __init__(self, group: LocalGroup, rank: int) -> None:
		self.group = group
		self.rank = int(rank)
		self.size = group.size
		self.timeout = group.timeout

	def _check_aborted(self) -> None:
		if self.group.aborted:
			raise CommunicationError(
				f"rank {self.rank}: group aborted ({self.group.abort_reason or 'no reason given'})"
			)

	def barrier(self, timeout: Optional[float] = None) -> None:
		limit = self.timeout if timeout is None else float(timeout)
		self._check_aborted()
		try:
			self.group._barrier.wait(limit)
		except threading.BrokenBarrierError:
			self._check_aborted()
			self.group.abort(f"rank {self.rank} timed out in barrier")
			raise CommunicationTimeout(
				f"rank {self.rank}: barrier not reached by all {self.size} ranks within {limit}s"
			) from None

	def send(self, payload: bytes, dest: int) -> None:
		self._check_aborted()
		box = self.group._mailboxes.get((self.rank, int(dest)))
		if box is None:
			raise CommunicationError(f"rank {self.rank}: invalid destination rank {dest}")
		box.put(bytes(payload))

	def recv(self, source: int) -> bytes:
		box = self.group._mailboxes.get((int(source), self.rank))
		if box is None:
			raise CommunicationError(f"rank {self.rank}: invalid source rank {source}")
		deadline = time.monotonic() + self.timeout
		while True:
			self._check_aborted()
			remaining = deadline - time.monotonic()
			if remaining <= 0.0:
				raise CommunicationTimeout(
					f"rank {self.rank}: nothing received from rank {source} within {self.timeout}s"
				)
			try:
				return box.get(timeout=min(remaining, _POLL_INTERVAL))
			except queue.Empty:
				continue

	def abort(self, reason: str = "") -> None:
		self.group.abort(reason or f"rank {self.rank} aborted")


__all__ = [
	"Communicator",
	"SoloCommunicator",
	"LocalGroup",
	"LocalCommunicator",
]
