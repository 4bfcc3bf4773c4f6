from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterator, Tuple, Union


# Command name -> number of integer arguments
COMMAND_ARITY: Dict[str, int] = {
	"Initialize": 1,
	"SubmitFlight": 5,
	"CancelFlight": 2,
	"Reprioritize": 3,
	"AddRunways": 2,
	"GroundHold": 3,
	"PrintActive": 0,
	"PrintSchedule": 2,
	"Tick": 1,
	"Quit": 0,
}


class CommandParseError(ValueError):
	pass


class UnknownCommandError(CommandParseError):
	def __init__(self, name: str) -> None:
		super().__init__(f"unknown command {name!r}")
		self.name = name


@dataclass(frozen=True)
class Command:
	name: str
	args: Tuple[int, ...]

	def __str__(self) -> str:
		return f"{self.name}({', '.join(str(a) for a in self.args)})"


def parse_command(line: str) -> Command:
	text = line.strip()
	open_paren = text.find("(")
	close_paren = text.rfind(")")
	if open_paren == -1 or close_paren < open_paren:
		raise CommandParseError("expected Name(arg, ...)")

	name = text[:open_paren].strip()
	if name not in COMMAND_ARITY:
		raise UnknownCommandError(name)

	inner = text[open_paren + 1:close_paren].strip()
	try:
		args = tuple(int(tok.strip()) for tok in inner.split(",")) if inner else ()
	except ValueError:
		raise CommandParseError(f"non-integer argument in {inner!r}") from None

	expected = COMMAND_ARITY[name]
	if len(args) != expected:
		raise CommandParseError(f"{name} takes {expected} arguments, got {len(args)}")
	return Command(name, args)


def read_commands(path: Union[str, Path]) -> Iterator[str]:
	with open(path, "r", encoding="utf-8") as fh:
		for raw in fh:
			line = raw.strip()
			if line:
				yield line
