from __future__ import annotations
from dataclasses import dataclass, field, replace as _dc_replace
import math
import os

from .constants import G as _G, MAX_STEPS, DEFAULT_STEPS, DEFAULT_TIMEOUT, DEFAULT_COMPUTE_TIMEOUT
from .errors import ConfigurationError

"""
This central configuration module defines all run parameters through the SimConfig dataclass. Key parameters include the gravitational constant, the number of steps to run, the reporting cadence, the size and kind of the per-process force worker pool, the blocking timeout for inter-rank transfers and the longer allowance for peers that are still reducing forces, the policy for coincident bodies and whether force reduction is partitioned across ranks. The class provides copy and replace helpers for configuration inheritance and a validate method that rejects out-of-range values before any rank starts stepping. It serves as the single source of truth for simulation behavior, with all components referencing this configuration.

"""

_ALLOWED_COINCIDENT_POLICIES = {
	"raise",
	"zero",
}

_ALLOWED_EXECUTORS = {
	"thread",
	"process",
}


def default_workers() -> int:
	return max(1, min(8, os.cpu_count() or 1))


@dataclass
class SimConfig:
	G: float = _G
	steps: int = DEFAULT_STEPS
	report_every: int = 1
	workers: int = field(default_factory=default_workers)
	timeout: float = DEFAULT_TIMEOUT
	compute_timeout: float = DEFAULT_COMPUTE_TIMEOUT
	executor: str = "thread"
	on_coincident: str = "raise"
	partition: bool = False
	diagnostics: bool = False

	def validate(self) -> "SimConfig":
		if not (isinstance(self.G, (int, float)) and math.isfinite(self.G) and self.G >= 0.0):
			raise ConfigurationError(f"G must be a finite non-negative number, got {self.G!r}")
		if isinstance(self.steps, bool) or not isinstance(self.steps, int):
			raise ConfigurationError(f"steps must be an integer, got {self.steps!r}")
		if self.steps < 0 or self.steps > MAX_STEPS:
			raise ConfigurationError(f"steps must be within [0, {MAX_STEPS}], got {self.steps}")
		if self.report_every < 0:
			raise ConfigurationError(f"report_every must be >= 0, got {self.report_every}")
		if self.workers < 1:
			raise ConfigurationError(f"workers must be >= 1, got {self.workers}")
		if not (self.timeout > 0.0 and math.isfinite(self.timeout)):
			raise ConfigurationError(f"timeout must be a positive number of seconds, got {self.timeout!r}")
		if not (self.compute_timeout > 0.0 and math.isfinite(self.compute_timeout)):
			raise ConfigurationError(
				f"compute_timeout must be a positive number of seconds, got {self.compute_timeout!r}"
			)
		if self.executor not in _ALLOWED_EXECUTORS:
			raise ConfigurationError(
				f"executor must be one of {sorted(_ALLOWED_EXECUTORS)}, got {self.executor!r}"
			)
		if self.on_coincident not in _ALLOWED_COINCIDENT_POLICIES:
			raise ConfigurationError(
				f"on_coincident must be one of {sorted(_ALLOWED_COINCIDENT_POLICIES)}, "
				f"got {self.on_coincident!r}"
			)
		return self

	def copy(self) -> "SimConfig":
		return _dc_replace(self)

	def replace(self, **changes) -> "SimConfig":
		return _dc_replace(self, **changes)
