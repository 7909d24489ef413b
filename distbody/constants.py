from __future__ import annotations

import os
from typing import Final

"""
This module defines the physical and numerical constants shared by the simulation. It includes the gravitational constant G, the upper bound on the number of steps a run may request, the default blocking timeout for inter-rank transfers (with environment variable override support through DISTBODY_COMM_TIMEOUT) and the separate, much longer allowance for waiting on a rank that is still reducing forces. The module provides centralized constant management with sensible defaults while allowing runtime configuration of the timeout, which depends on the machine and launcher rather than on the physics.


"""


def _parse_timeout(default: float = 30.0) -> float:
	env_val = os.getenv("DISTBODY_COMM_TIMEOUT", "")
	if env_val.strip() != "":
		if env_val.strip().replace(".", "", 1).isdigit():
			val = float(env_val)
			if val > 0.0:
				return val
		print(f"[warning] ignoring invalid DISTBODY_COMM_TIMEOUT={env_val!r}")
	return default


G: Final[float] = 6.67430e-11

# runs above this are almost certainly a typo
MAX_STEPS: Final[int] = 1_000_000_000
DEFAULT_STEPS: Final[int] = 100_000

DEFAULT_TIMEOUT: float = _parse_timeout()

# how long ranks wait at the first distribution barrier while the reduction runs
DEFAULT_COMPUTE_TIMEOUT: Final[float] = 3600.0

COORDINATOR_RANK: Final[int] = 0


__all__ = ["G", "MAX_STEPS", "DEFAULT_STEPS", "DEFAULT_TIMEOUT", "DEFAULT_COMPUTE_TIMEOUT", "COORDINATOR_RANK"]
