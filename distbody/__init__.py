"""
This initialization file serves as the main entry point for the distbody package,
exposing the public API through a clean namespace.

It imports and re-exports the body containers (Body, BodyView, BodySet), the pairwise
force kernel and the parallel ForceReducer, the wire codec, the communicators and the
DistributionProtocol that keep ranks in lockstep, the Integrator, the simulation loop
(NBodySimulation, run_local_group), configuration, diagnostics, reporters, initial
conditions and the error hierarchy. The mpi4py-backed MPICommunicator is not imported
here so that the package works without an MPI installation; import it from
distbody.mpi_communicator when running under mpiexec.
"""

from .constants import G, MAX_STEPS, DEFAULT_STEPS, DEFAULT_TIMEOUT, DEFAULT_COMPUTE_TIMEOUT, COORDINATOR_RANK
from .errors import (
    SimulationError,
    ConfigurationError,
    DegenerateConfiguration,
    InvalidMass,
    ProtocolMismatch,
    SerializationError,
    CommunicationError,
    CommunicationTimeout,
)
from .sim_config import SimConfig
from .simulation_validator import SimulationValidator

from .body import Body
from .body_view import BodyView
from .body_set import BodySet

from .forces import pair_force, gravitational_force
from .force_reducer import ForceReducer
from .wire import encode_forces, decode_forces, encode_state, decode_state
from .communicator import Communicator, SoloCommunicator, LocalGroup, LocalCommunicator
from .distribution import DistributionProtocol, partition_indices
from .integrator import Integrator
from .simulation import NBodySimulation, SimulationPhase, root_cause, run_local_group

from .physics_utils import total_momentum, remove_center_of_mass_velocity
from .diagnostics import Diagnostics
from .reporters import Reporter, NullReporter, PrintReporter
from .initial_conditions import earth_moon, earth_moon_bodies, load_bodies, center_of_mass_frame


__all__ = [
    "G",
    "MAX_STEPS",
    "DEFAULT_STEPS",
    "DEFAULT_TIMEOUT",
    "DEFAULT_COMPUTE_TIMEOUT",
    "COORDINATOR_RANK",
    "SimulationError",
    "ConfigurationError",
    "DegenerateConfiguration",
    "InvalidMass",
    "ProtocolMismatch",
    "SerializationError",
    "CommunicationError",
    "CommunicationTimeout",
    "SimConfig",
    "SimulationValidator",
    "Body",
    "BodyView",
    "BodySet",
    "pair_force",
    "gravitational_force",
    "ForceReducer",
    "encode_forces",
    "decode_forces",
    "encode_state",
    "decode_state",
    "Communicator",
    "SoloCommunicator",
    "LocalGroup",
    "LocalCommunicator",
    "DistributionProtocol",
    "partition_indices",
    "Integrator",
    "NBodySimulation",
    "SimulationPhase",
    "run_local_group",
    "root_cause",
    "total_momentum",
    "remove_center_of_mass_velocity",
    "Diagnostics",
    "Reporter",
    "NullReporter",
    "PrintReporter",
    "earth_moon",
    "earth_moon_bodies",
    "load_bodies",
    "center_of_mass_frame",
]
