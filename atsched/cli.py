import json
from typing import Optional

import click

from atsched.config import Config
from atsched.ingestion.workload import WorkloadGenerator
from atsched.orchestrator.runner import CommandRunner
from atsched.orchestrator.scheduler import AirTrafficScheduler
from atsched.reporting.metrics import summarize
from atsched.utils.logging import set_level


LOG_LEVELS = click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False)


@click.group()
@click.option("--log-level", type=LOG_LEVELS, default=Config.log_level, show_default=True)
def main(log_level: str) -> None:
	"""Runway allocation scheduler CLI."""
	set_level(log_level)


@main.command()
@click.argument("input_file", type=click.Path(exists=True, dir_okay=False))
@click.option("--output", "output_file", type=click.Path(dir_okay=False), default=None, help="Defaults to <input>_output_file.txt")
def run(input_file: str, output_file: Optional[str]) -> None:
	"""Run a command file and write the report lines to the output file."""
	runner = CommandRunner(AirTrafficScheduler(), Config())
	dst = runner.run_file(input_file, output_file)
	click.echo(str(dst))


@main.command()
@click.argument("output_file", type=click.Path(dir_okay=False))
@click.option("--flights", type=int, default=40, show_default=True)
@click.option("--runways", type=int, default=2, show_default=True)
@click.option("--airlines", type=int, default=5, show_default=True)
@click.option("--seed", type=int, default=42, show_default=True)
def generate(output_file: str, flights: int, runways: int, airlines: int, seed: int) -> None:
	"""Write a synthetic command script."""
	cfg = Config(num_flights=flights, num_runways=runways, num_airlines=airlines, seed=seed)
	dst = WorkloadGenerator(cfg).write(output_file)
	click.echo(str(dst))


@main.command()
@click.option("--flights", type=int, default=40, show_default=True)
@click.option("--runways", type=int, default=2, show_default=True)
@click.option("--seed", type=int, default=42, show_default=True)
def simulate(flights: int, runways: int, seed: int) -> None:
	"""Generate a synthetic workload, run it in memory and print metrics."""
	cfg = Config(num_flights=flights, num_runways=runways, seed=seed)
	scheduler = AirTrafficScheduler()
	runner = CommandRunner(scheduler, cfg)
	output = runner.run_lines(WorkloadGenerator(cfg).simulate())
	metrics = summarize(scheduler.bus.log)
	res = {
		"commands": output.commands,
		"output_lines": len(output.lines),
		"final_time": scheduler.current_time,
		"active_flights": len(scheduler.active),
		"events": scheduler.bus.counts(),
		"metrics": metrics.to_dict(),
		"latency_seconds": output.latency_seconds,
	}
	click.echo(json.dumps(res, indent=2))


if __name__ == "__main__":
	main()
