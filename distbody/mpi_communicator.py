"""
This module adapts an mpi4py communicator to the Communicator interface so the same
simulation loop runs under mpiexec.

Payloads are sent as raw MPI.BYTE buffers. Blocking operations are expressed as
non-blocking requests (Ibarrier, Iprobe) polled against a deadline, which turns a peer
that died or hung into CommunicationTimeout rather than a deadlock. abort() calls
MPI Abort on the communicator, which terminates every rank of the job.
"""

from __future__ import annotations
import time
from typing import Optional

from mpi4py import MPI

from .communicator import Communicator
from .constants import DEFAULT_TIMEOUT
from .errors import CommunicationTimeout


FORCE_TAG = 17


class MPICommunicator(Communicator):

	def __init__(self, comm=None, timeout: float = DEFAULT_TIMEOUT, poll_interval: float = 1e-4) -> None:
		self._comm = comm if comm is not None else MPI.COMM_WORLD
		self.rank = int(self._comm.Get_rank())
		self.size = int(self._comm.Get_size())
		self.timeout = float(timeout)
		self.poll_interval = float(poll_interval)

	def _wait(self, request, what: str, timeout: Optional[float] = None) -> None:
		limit = self.timeout if timeout is None else float(timeout)
		deadline = time.monotonic() + limit
		while not request.Test():
			if time.monotonic() > deadline:
				raise CommunicationTimeout(f"rank {self.rank}: {what} did not complete within {limit}s")
			time.sleep(self.poll_interval)

	def barrier(self, timeout: Optional[float] = None) -> None:
		self._wait(self._comm.Ibarrier(), "barrier", timeout)

	def send(self, payload: bytes, dest: int) -> None:
		buf = bytes(payload)
		self._wait(self._comm.Isend([buf, MPI.BYTE], dest=int(dest), tag=FORCE_TAG), f"send to rank {dest}")

	def recv(self, source: int) -> bytes:
		status = MPI.Status()
		deadline = time.monotonic() + self.timeout
		while not self._comm.Iprobe(source=int(source), tag=FORCE_TAG, status=status):
			if time.monotonic() > deadline:
				raise CommunicationTimeout(
					f"rank {self.rank}: nothing received from rank {source} within {self.timeout}s"
				)
			time.sleep(self.poll_interval)
		buf = bytearray(status.Get_count(MPI.BYTE))
		self._comm.Recv([buf, MPI.BYTE], source=int(source), tag=FORCE_TAG)
		return bytes(buf)

	def abort(self, reason: str = "") -> None:
		if reason:
			print(f"[error] rank {self.rank} aborting: {reason}", flush=True)
		self._comm.Abort(1)
