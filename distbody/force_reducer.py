"""
This module implements the data-parallel net force computation.

The ForceReducer class turns a BodySet snapshot into an (n,2) array whose row i is the
sum of pair_force(i, j) over every other body j, accumulated in ascending j so the
result is reproducible bit for bit. The body indices to compute are split into
contiguous chunks and fanned out to an executor; each chunk returns its rows and the
rows are written back by index, so the join order never affects the sums. Only the
summation order inside one row matters, which is why a row is never split across
workers.

reduce_rows is the per-chunk work. It evaluates a block of rows against every body with
whole-array numpy operations in the same algebraic order as pair_force and folds each row
with a cumulative sum along ascending j, so the numpy loops run without the interpreter
lock and a thread pool spreads them over several cores. The "process" executor runs the
same function in a spawned ProcessPoolExecutor instead. The reducer refuses live
(writeable) body sets to make sure the integrator of a previous step cannot race with it.
"""

from __future__ import annotations
import multiprocessing
from concurrent.futures import Executor, ProcessPoolExecutor, ThreadPoolExecutor
from typing import List, Sequence, Tuple

import numpy as np

from .body_set import BodySet
from .constants import G as _G
from .errors import DegenerateConfiguration


EXECUTORS = ("thread", "process")

# upper bound on the (rows x n) temporaries of one block
_BLOCK_ELEMENTS = 1 << 20


def chunk_indices(indices: Sequence[int], n_chunks: int) -> List[Sequence[int]]:
	n_chunks = max(1, min(int(n_chunks), len(indices)))
	size, extra = divmod(len(indices), n_chunks)
	chunks = []
	start = 0
	for c in range(n_chunks):
		stop = start + size + (1 if c < extra else 0)
		if stop > start:
			chunks.append(indices[start:stop])
		start = stop
	return chunks


def reduce_rows(
	rows: np.ndarray,
	m: np.ndarray,
	x: np.ndarray,
	y: np.ndarray,
	G: float = _G,
	on_coincident: str = "raise",
) -> Tuple[np.ndarray, np.ndarray]:
	"""
	Net force on each body in rows from all other bodies.

	Returns the fx and fy sums in the order of rows. A coincident pair raises
	DegenerateConfiguration naming the first (row, j) found in row-major order, or is
	skipped under the "zero" policy.
	"""
	rows = np.asarray(rows, dtype=np.intp)
	n = m.shape[0]
	fx_out = np.zeros(rows.size, dtype=np.float64)
	fy_out = np.zeros(rows.size, dtype=np.float64)
	if rows.size == 0 or n < 2:
		return fx_out, fy_out

	cols = np.arange(n)
	block_rows = max(1, _BLOCK_ELEMENTS // n)
	for start in range(0, rows.size, block_rows):
		block = rows[start:start + block_rows]
		dx = x[None, :] - x[block, None]
		dy = y[None, :] - y[block, None]
		r2 = dx * dx + dy * dy

		skip = cols[None, :] == block[:, None]
		coincident = (r2 == 0.0) & ~skip
		if coincident.any():
			if on_coincident != "zero":
				k, j = np.argwhere(coincident)[0]
				raise DegenerateConfiguration(int(block[k]), int(j))
			skip |= coincident
		r2 = np.where(skip, 1.0, r2)

		fm = G * m[block, None] * m[None, :] / r2
		dist = np.sqrt(r2)
		fx = np.where(skip, 0.0, fm * dx / dist)
		fy = np.where(skip, 0.0, fm * dy / dist)

		stop = start + block.size
		fx_out[start:stop] = np.cumsum(fx, axis=1)[:, -1]
		fy_out[start:stop] = np.cumsum(fy, axis=1)[:, -1]
	return fx_out, fy_out


class ForceReducer:

	def __init__(self, G: float = _G, workers: int = 1, on_coincident: str = "raise",
				 executor: str = "thread") -> None:
		if executor not in EXECUTORS:
			raise ValueError(f"executor must be one of {EXECUTORS}, got {executor!r}")
		self.G = float(G)
		self.workers = max(1, int(workers))
		self.on_coincident = on_coincident
		self.executor = executor
		self._pool: Executor | None = None

	def _executor(self) -> Executor:
		if self._pool is None:
			if self.executor == "process":
				self._pool = ProcessPoolExecutor(
					max_workers=self.workers,
					mp_context=multiprocessing.get_context("spawn"),
				)
			else:
				self._pool = ThreadPoolExecutor(
					max_workers=self.workers, thread_name_prefix="distbody-force"
				)
		return self._pool

	def reduce(self, snapshot: BodySet, indices: Sequence[int] | None = None) -> np.ndarray:
		if snapshot.pos.flags.writeable:
			raise ValueError("ForceReducer.reduce expects a read-only snapshot, not a live BodySet")

		n = snapshot.n_bodies
		forces = np.zeros((n, 2), dtype=np.float64)
		rows = np.arange(n) if indices is None else np.asarray(list(indices), dtype=np.intp)
		if n < 2 or rows.size == 0:
			return forces

		m = np.ascontiguousarray(snapshot.mass)
		x = np.ascontiguousarray(snapshot.pos[:, 0])
		y = np.ascontiguousarray(snapshot.pos[:, 1])

		chunks = chunk_indices(rows, self.workers)
		if len(chunks) == 1:
			results = [reduce_rows(chunks[0], m, x, y, self.G, self.on_coincident)]
		else:
			pool = self._executor()
			futures = [
				pool.submit(reduce_rows, c, m, x, y, self.G, self.on_coincident)
				for c in chunks
			]
			# result() re-raises the first worker failure, e.g. DegenerateConfiguration
			results = [f.result() for f in futures]

		for chunk, (fx, fy) in zip(chunks, results):
			forces[chunk, 0] = fx
			forces[chunk, 1] = fy
		return forces

	def close(self) -> None:
		if self._pool is not None:
			self._pool.shutdown(wait=True)
			self._pool = None

	def __enter__(self) -> "ForceReducer":
		return self

	def __exit__(self, *exc) -> None:
		self.close()
