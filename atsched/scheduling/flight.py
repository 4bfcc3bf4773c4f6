from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Optional

if TYPE_CHECKING:
	from atsched.scheduling.pairing_heap import PairingNode


UNSET = -1


class FlightState(str, Enum):
	PENDING = "PENDING"          # submitted, no runway yet
	SCHEDULED = "SCHEDULED"      # runway and future start assigned
	IN_PROGRESS = "IN_PROGRESS"  # occupying its runway, non-preemptible
	COMPLETED = "COMPLETED"      # landed


@dataclass(eq=False)
class Flight:
	flight_id: int
	airline_id: int
	submit_time: int
	priority: int
	duration: int
	start_time: int = UNSET
	eta: int = UNSET
	runway_id: int = UNSET
	state: FlightState = FlightState.PENDING
	# Handles into the pending pairing heap and the completion timetable
	heap_node: Optional[PairingNode] = field(default=None, repr=False)
	timetable_index: int = field(default=UNSET, repr=False)

	def priority_key(self) -> tuple:
		# Larger key wins: higher priority, then earlier submission, then smaller id
		return (self.priority, -self.submit_time, -self.flight_id)

	def completion_key(self) -> tuple:
		return (self.eta, self.flight_id)

	def has_eta(self) -> bool:
		return self.eta >= 0

	def is_unsatisfied(self, now: int) -> bool:
		return self.state == FlightState.PENDING or (
			self.state == FlightState.SCHEDULED and self.start_time > now
		)

	def has_departed(self) -> bool:
		return self.state in (FlightState.IN_PROGRESS, FlightState.COMPLETED)

	def __str__(self) -> str:
		return (
			f"[flight{self.flight_id}, airline{self.airline_id}, runway{self.runway_id}, "
			f"start{self.start_time}, ETA{self.eta}]"
		)


@dataclass
class Runway:
	runway_id: int
	# Derived each scheduling pass; never durable state
	next_free_time: int = 0

	def availability_key(self) -> tuple:
		return (self.next_free_time, self.runway_id)
