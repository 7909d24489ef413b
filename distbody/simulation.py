"""
This module implements the simulation loop that ties force reduction, distribution and
integration together.

NBodySimulation owns one rank's replica of the BodySet and moves through the phases
INITIALIZING (initial state replicated from the coordinator, initial snapshot reported),
STEPPING (snapshot, reduce, distribute, integrate, strictly one step after another),
REPORTING (coordinator only, every report_every steps) and TERMINATED (final snapshot
reported, no further mutation). The reducer only ever reads a fresh snapshot while the
integrator is the only writer of the live arrays, so no locking is needed. Any exception
ends the run: the communicator is aborted so that peers stop instead of deadlocking in
the next barrier, and the error propagates to the caller.

run_local_group runs a whole group of ranks as threads of the current process and
returns every rank's final body set, which is how multi-rank runs are exercised without
an MPI launcher.
"""

from __future__ import annotations
from concurrent.futures import ThreadPoolExecutor, wait
from enum import Enum
from typing import List, Optional, Sequence, Union

import numpy as np

from .body_set import BodySet
from .communicator import Communicator, LocalGroup, SoloCommunicator
from .distribution import DistributionProtocol
from .errors import CommunicationError, CommunicationTimeout, SimulationError
from .force_reducer import ForceReducer
from .integrator import Integrator
from .reporters import NullReporter, Reporter
from .sim_config import SimConfig


class SimulationPhase(Enum):
	INITIALIZING = "initializing"
	STEPPING = "stepping"
	REPORTING = "reporting"
	TERMINATED = "terminated"


class NBodySimulation:

	def __init__(
		self,
		bodies: BodySet,
		cfg: SimConfig | None = None,
		comm: Communicator | None = None,
		reporter: Reporter | None = None,
	) -> None:
		self.cfg = (cfg.copy() if cfg is not None else SimConfig()).validate()
		self.bodies = bodies
		self.comm = comm if comm is not None else SoloCommunicator(timeout=self.cfg.timeout)
		self.reporter = reporter if reporter is not None else NullReporter()

		self._reducer = ForceReducer(
			self.cfg.G, self.cfg.workers, self.cfg.on_coincident, self.cfg.executor
		)
		self._protocol = DistributionProtocol(
			self.comm, partition=self.cfg.partition, compute_timeout=self.cfg.compute_timeout
		)
		self._integrator = Integrator()

		self.phase = SimulationPhase.INITIALIZING
		self.step_count = 0
		self.last_forces: Optional[np.ndarray] = None
		self._initialized = False

	@property
	def is_coordinator(self) -> bool:
		return self.comm.is_coordinator

	@property
	def n_bodies(self) -> int:
		return self.bodies.n_bodies

	def initialize(self) -> None:
		if self._initialized:
			return
		self.phase = SimulationPhase.INITIALIZING
		self._protocol.replicate(self.bodies)
		self._initialized = True
		if self.is_coordinator:
			self.reporter.initial(self.bodies)

	def compute_forces(self) -> np.ndarray:
		snapshot = self.bodies.snapshot()
		return self._reducer.reduce(snapshot, self._protocol.local_indices(snapshot.n_bodies))

	def step(self) -> None:
		if self.phase is SimulationPhase.TERMINATED:
			raise SimulationError("simulation has terminated; no further steps are allowed")
		if not self._initialized:
			self.initialize()

		self.phase = SimulationPhase.STEPPING
		forces = self.compute_forces()
		forces = self._protocol.distribute(forces, self.n_bodies)
		self._integrator.step(self.bodies, forces)
		self.last_forces = forces
		self.step_count += 1

		every = self.cfg.report_every
		if self.is_coordinator and every and self.step_count % every == 0:
			self.phase = SimulationPhase.REPORTING
			self.reporter.step(self.step_count - 1, self.bodies)
			self.phase = SimulationPhase.STEPPING

	def run(self) -> BodySet:
		if self.phase is SimulationPhase.TERMINATED:
			raise SimulationError("run() called on a simulation that has already terminated")
		try:
			self.initialize()
			for _ in range(self.cfg.steps):
				self.step()
		except Exception as exc:
			self.phase = SimulationPhase.TERMINATED
			self.comm.abort(f"rank {self.comm.rank} failed at step {self.step_count}: {exc}")
			raise
		finally:
			self._reducer.close()

		self.phase = SimulationPhase.TERMINATED
		if self.is_coordinator:
			self.reporter.final(self.bodies)
		return self.bodies


def root_cause(failures: Sequence[BaseException]) -> BaseException:
	"""
	Pick the error that started a group failure.

	Ranks torn down by an abort report a plain CommunicationError, so a rank's own
	failure wins over a CommunicationTimeout, which wins over the abort notices.
	"""
	def _rank(err: BaseException) -> int:
		if isinstance(err, CommunicationTimeout):
			return 1
		if isinstance(err, CommunicationError):
			return 2
		return 0

	return min(failures, key=_rank)


def run_local_group(
	bodies: Union[BodySet, Sequence[BodySet]],
	cfg: SimConfig | None = None,
	size: int = 2,
	reporter: Reporter | None = None,
) -> List[BodySet]:
	cfg = (cfg.copy() if cfg is not None else SimConfig()).validate()
	if isinstance(bodies, BodySet):
		replicas = [bodies.copy() for _ in range(size)]
	else:
		replicas = [b.copy() for b in bodies]
		if len(replicas) != size:
			raise ValueError(f"{len(replicas)} body sets given for a group of {size} ranks")

	group = LocalGroup(size, timeout=cfg.timeout)

	def _run_rank(rank: int) -> BodySet:
		sim = NBodySimulation(
			replicas[rank],
			cfg,
			group.communicator(rank),
			reporter if rank == 0 else None,
		)
		return sim.run()

	with ThreadPoolExecutor(max_workers=size, thread_name_prefix="distbody-rank") as pool:
		futures = [pool.submit(_run_rank, r) for r in range(size)]
		wait(futures)

	errors = [f.exception() for f in futures]
	failures = [e for e in errors if e is not None]
	if failures:
		raise root_cause(failures)
	return [f.result() for f in futures]


__all__ = ["SimulationPhase", "NBodySimulation", "root_cause", "run_local_group"]
