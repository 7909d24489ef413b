"""
Command-line entry point for running a simulation.

`distbody run` builds the initial body set (the built-in Earth-Moon system or a CSV
file), a SimConfig from the options, and runs it either on a single rank, on a group of
in-process ranks (--ranks N) or under mpiexec (--mpi). Snapshots are printed by the
coordinator only. Any SimulationError ends the run with its message on stderr and exit
status 1.
"""

import sys
from pathlib import Path
from typing import Optional

import typer

from .constants import DEFAULT_STEPS, DEFAULT_TIMEOUT, DEFAULT_COMPUTE_TIMEOUT, G as _G
from .errors import SimulationError
from .initial_conditions import center_of_mass_frame, earth_moon, load_bodies
from .reporters import NullReporter, PrintReporter
from .sim_config import SimConfig, default_workers
from .simulation import NBodySimulation, run_local_group


app = typer.Typer(
	name="distbody",
	help="Exact pairwise N-body gravity with parallel force reduction and multi-rank force distribution",
	no_args_is_help=True,
)


@app.callback()
def _root() -> None:
	"""distbody command-line interface."""


@app.command()
def run(
	steps: int = typer.Option(DEFAULT_STEPS, "--steps", "-n", help="Number of steps to run"),
	report_every: int = typer.Option(1, "--report-every", help="Print a snapshot every N steps (0 disables)"),
	workers: int = typer.Option(default_workers(), "--workers", "-w", help="Force workers per rank"),
	executor: str = typer.Option("thread", "--executor", help="Force worker pool: 'thread' or 'process'"),
	ranks: int = typer.Option(1, "--ranks", "-r", help="Number of in-process ranks"),
	mpi: bool = typer.Option(False, "--mpi", help="Use MPI.COMM_WORLD (launch with mpiexec)"),
	bodies: Optional[Path] = typer.Option(None, "--bodies", "-b", help="CSV file with mass,x,y,vx,vy columns"),
	com_frame: bool = typer.Option(False, "--com-frame", help="Start in the center-of-mass frame"),
	on_coincident: str = typer.Option("raise", "--on-coincident", help="Coincident bodies: 'raise' or 'zero'"),
	partition: bool = typer.Option(False, "--partition", help="Split force reduction across ranks"),
	timeout: float = typer.Option(DEFAULT_TIMEOUT, "--timeout", help="Seconds before a blocked transfer fails"),
	compute_timeout: float = typer.Option(
		DEFAULT_COMPUTE_TIMEOUT, "--compute-timeout", help="Seconds ranks wait for a slower rank to finish its force reduction"
	),
	gravity: float = typer.Option(_G, "--gravity", "-G", help="Gravitational constant"),
	diagnostics: bool = typer.Option(False, "--diagnostics", help="Print energy and momentum with each snapshot"),
	quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress snapshot output"),
) -> None:
	"""Run a simulation and print initial, per-step and final snapshots."""
	try:
		cfg = SimConfig(
			G=gravity,
			steps=steps,
			report_every=report_every,
			workers=workers,
			timeout=timeout,
			compute_timeout=compute_timeout,
			executor=executor,
			on_coincident=on_coincident,
			partition=partition,
			diagnostics=diagnostics,
		).validate()
		if ranks < 1:
			raise SimulationError(f"--ranks must be >= 1, got {ranks}")
		if mpi and ranks != 1:
			raise SimulationError("--mpi and --ranks are mutually exclusive; mpiexec sets the rank count")

		initial = load_bodies(str(bodies)) if bodies is not None else earth_moon()
		if com_frame:
			initial = center_of_mass_frame(initial)
		if quiet:
			reporter = NullReporter()
		else:
			reporter = PrintReporter(diagnostics=cfg.diagnostics, G=cfg.G)

		if mpi:
			from .mpi_communicator import MPICommunicator
			comm = MPICommunicator(timeout=cfg.timeout)
			NBodySimulation(initial, cfg, comm, reporter if comm.is_coordinator else None).run()
		elif ranks > 1:
			run_local_group(initial, cfg, size=ranks, reporter=reporter)
		else:
			NBodySimulation(initial, cfg, reporter=reporter).run()
	except SimulationError as exc:
		print(f"[error] {exc}", file=sys.stderr)
		raise typer.Exit(code=1)


def main() -> None:
	try:
		app()
	except KeyboardInterrupt:
		print("\nSimulation interrupted.", file=sys.stderr)
		sys.exit(130)


if __name__ == "__main__":
	main()
