from __future__ import annotations

import time
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Iterable, List, Optional, Union

from atsched.config import Config
from atsched.ingestion.commands import CommandParseError, UnknownCommandError, parse_command, read_commands
from atsched.orchestrator.scheduler import AirTrafficScheduler
from atsched.utils.logging import get_logger


logger = get_logger(__name__)

TERMINATED = "Program Terminated!!"


@dataclass
class RunOutput:
	lines: List[str]
	commands: int
	errors: int
	latency_seconds: float


class CommandRunner:
	def __init__(self, scheduler: Optional[AirTrafficScheduler] = None, config: Optional[Config] = None) -> None:
		self.config = config if config is not None else Config()
		self.scheduler = scheduler if scheduler is not None else AirTrafficScheduler()
		self.stopped = False
		self.errors = 0
		s = self.scheduler
		self._dispatch: Dict[str, Callable[..., List[str]]] = {
			"Initialize": s.initialize,
			"SubmitFlight": s.submit_flight,
			"CancelFlight": s.cancel_flight,
			"Reprioritize": s.reprioritize,
			"AddRunways": s.add_runways,
			"GroundHold": s.ground_hold,
			"PrintActive": s.print_active,
			"PrintSchedule": s.print_schedule,
			"Tick": s.tick,
		}

	def execute(self, line: str) -> List[str]:
		try:
			cmd = parse_command(line)
		except UnknownCommandError as exc:
			self.errors += 1
			logger.warning("Skipping %r: %s", line, exc)
			return [f"Error: Unknown command - {exc.name}"]
		except CommandParseError as exc:
			self.errors += 1
			logger.warning("Skipping %r: %s", line, exc)
			return [f"Error parsing command: {line.strip()} - {exc}"]
		if cmd.name == "Quit":
			self.stopped = True
			return [TERMINATED]
		return self._dispatch[cmd.name](*cmd.args)

	def run_lines(self, lines: Iterable[str]) -> RunOutput:
		start = time.time()
		self.stopped = False
		self.errors = 0
		out: List[str] = []
		count = 0
		for line in lines:
			if not line.strip():
				continue
			out.extend(self.execute(line))
			count += 1
			if self.stopped:
				break
		return RunOutput(lines=out, commands=count, errors=self.errors, latency_seconds=time.time() - start)

	def run_file(self, input_path: Union[str, Path], output_path: Optional[Union[str, Path]] = None) -> Path:
		src = Path(input_path)
		dst = Path(output_path) if output_path is not None else default_output_path(src, self.config)
		logger.info("Reading commands from %s", src)
		result = self.run_lines(read_commands(src))
		with open(dst, "w", encoding="utf-8") as fh:
			for line in result.lines:
				fh.write(line + "\n")
		logger.info(
			"Processed %d commands | errors=%d | t=%d | latency=%.3fs -> %s",
			result.commands, result.errors, self.scheduler.current_time, result.latency_seconds, dst,
		)
		return dst


def default_output_path(input_path: Union[str, Path], config: Optional[Config] = None) -> Path:
	cfg = config if config is not None else Config()
	src = Path(input_path)
	return src.with_name(src.stem + cfg.output_suffix)
