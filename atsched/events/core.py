from __future__ import annotations

from collections import Counter
from dataclasses import dataclass
from typing import Any, Callable, Dict, List


FLIGHT_SUBMITTED = "flight.submitted"
FLIGHT_LANDED = "flight.landed"
FLIGHT_CANCELED = "flight.canceled"
FLIGHT_GROUNDED = "flight.grounded"
FLIGHT_REPRIORITIZED = "flight.reprioritized"
RUNWAYS_ADDED = "runways.added"
ETA_UPDATED = "eta.updated"
OPERATION_REJECTED = "operation.rejected"


@dataclass
class Event:
	type: str
	payload: Dict[str, Any]
	time: int


class EventBus:
	def __init__(self) -> None:
		self.subscribers: Dict[str, List[Callable[[Event], None]]] = {}
		self.log: List[Event] = []

	def subscribe(self, event_type: str, handler: Callable[[Event], None]) -> None:
		self.subscribers.setdefault(event_type, []).append(handler)

	def publish(self, evt: Event) -> None:
		self.log.append(evt)
		for handler in self.subscribers.get(evt.type, []):
			handler(evt)

	def of_type(self, event_type: str) -> List[Event]:
		return [e for e in self.log if e.type == event_type]

	def counts(self) -> Dict[str, int]:
		return dict(Counter(e.type for e in self.log))
