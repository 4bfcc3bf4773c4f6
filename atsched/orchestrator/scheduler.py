from __future__ import annotations

from typing import Dict, List, Optional

from atsched.events.core import (
	ETA_UPDATED,
	FLIGHT_CANCELED,
	FLIGHT_GROUNDED,
	FLIGHT_LANDED,
	FLIGHT_REPRIORITIZED,
	FLIGHT_SUBMITTED,
	OPERATION_REJECTED,
	RUNWAYS_ADDED,
	Event,
	EventBus,
)
from atsched.scheduling.completion_heap import CompletionTimetable
from atsched.scheduling.flight import Flight, FlightState, Runway
from atsched.scheduling.pairing_heap import PairingHeap
from atsched.scheduling.runway_heap import RunwayHeap
from atsched.utils.logging import get_logger


logger = get_logger(__name__)

INVALID_RUNWAY_COUNT = "Invalid input. Please provide a valid number of runways."
INVALID_AIRLINE_RANGE = "Invalid input. Please provide a valid airline range."
DUPLICATE_FLIGHT = "Duplicate FlightID"


class AirTrafficScheduler:
	"""Runway allocation engine.

	Owns every flight and runway record plus the three heaps. Each public
	operation returns the report lines it produced; rejected operations
	return a single explanatory line and never raise.

	Validation failures (non-positive runway counts, inverted airline
	ranges, duplicate flight ids) are checked before time advances and leave
	the clock untouched. Lookup failures (unknown or departed flights) are
	checked after advancing, since departure depends on the new time.
	"""

	def __init__(self, bus: Optional[EventBus] = None) -> None:
		self.bus = bus if bus is not None else EventBus()
		self.pending = PairingHeap()
		self.timetable = CompletionTimetable()
		self.active: Dict[int, Flight] = {}
		self.airline_index: Dict[int, Dict[int, Flight]] = {}
		self.runways: List[Runway] = []
		self.current_time = 0
		self._next_runway_id = 1

	# ------------------------------------------------------------------ operations

	def initialize(self, num_runways: int) -> List[str]:
		if num_runways <= 0:
			return self._reject("Initialize", INVALID_RUNWAY_COUNT)
		before = self._snapshot_etas()
		self._append_runways(num_runways)
		self.schedule_all()
		return [f"{num_runways} Runways are now available"] + self._eta_updates(before)

	def submit_flight(self, flight_id: int, airline_id: int, submit_time: int, priority: int, duration: int) -> List[str]:
		if flight_id in self.active:
			return self._reject("SubmitFlight", DUPLICATE_FLIGHT)
		out = self.advance(submit_time)

		flight = Flight(flight_id, airline_id, submit_time, priority, duration)
		self.active[flight_id] = flight
		self.airline_index.setdefault(airline_id, {})[flight_id] = flight
		self._publish(FLIGHT_SUBMITTED, flight)

		before = self._snapshot_etas()
		self.schedule_all()
		out.append(f"Flight {flight_id} scheduled - ETA: {flight.eta}")
		out.extend(self._eta_updates(before))
		return out

	def cancel_flight(self, flight_id: int, t: int) -> List[str]:
		out = self.advance(t)
		flight = self.active.get(flight_id)
		if flight is None:
			return out + self._reject("CancelFlight", f"Flight {flight_id} does not exist")
		if flight.has_departed():
			return out + self._reject("CancelFlight", f"Cannot cancel. Flight {flight_id} has already departed")

		before = self._snapshot_etas()
		self._purge(flight)
		self._publish(FLIGHT_CANCELED, flight)
		self.schedule_all()
		out.append(f"Flight {flight_id} has been canceled")
		out.extend(self._eta_updates(before))
		return out

	def reprioritize(self, flight_id: int, t: int, new_priority: int) -> List[str]:
		out = self.advance(t)
		flight = self.active.get(flight_id)
		if flight is None:
			return out + self._reject("Reprioritize", f"Flight {flight_id} not found")
		if flight.has_departed():
			return out + self._reject("Reprioritize", f"Cannot reprioritize. Flight {flight_id} has already departed")

		before = self._snapshot_etas()
		if flight.heap_node is not None:
			# Still waiting in the pending heap (no runway could take it)
			self.pending.update_priority(flight.heap_node, new_priority)
		else:
			flight.priority = new_priority
		self._publish(FLIGHT_REPRIORITIZED, flight)
		self.schedule_all()
		out.append(f"Priority of Flight {flight_id} has been updated to {new_priority}")
		out.extend(self._eta_updates(before))
		return out

	def add_runways(self, count: int, t: int) -> List[str]:
		if count <= 0:
			return self._reject("AddRunways", INVALID_RUNWAY_COUNT)
		out = self.advance(t)

		before = self._snapshot_etas()
		added = self._append_runways(count)
		self.bus.publish(Event(RUNWAYS_ADDED, {"runway_ids": added}, self.current_time))
		self.schedule_all()
		out.append(f"Additional {count} Runways are now available")
		out.extend(self._eta_updates(before))
		return out

	def ground_hold(self, airline_low: int, airline_high: int, t: int) -> List[str]:
		if airline_high < airline_low:
			return self._reject("GroundHold", INVALID_AIRLINE_RANGE)
		out = self.advance(t)

		before = self._snapshot_etas()
		held: List[Flight] = []
		for airline_id in sorted(a for a in self.airline_index if airline_low <= a <= airline_high):
			for flight in self.airline_index[airline_id].values():
				if flight.is_unsatisfied(self.current_time):
					held.append(flight)
		for flight in held:
			self._purge(flight)
			self._publish(FLIGHT_GROUNDED, flight)
		self.schedule_all()
		out.append(f"Flights of the airlines in the range [{airline_low}, {airline_high}] have been grounded")
		out.extend(self._eta_updates(before))
		return out

	def print_active(self) -> List[str]:
		if not self.active:
			return ["No active flights"]
		return [str(f) for f in self.active_flights()]

	def print_schedule(self, t1: int, t2: int) -> List[str]:
		flights = self.timetable.range_query(t1, t2, self.current_time)
		if not flights:
			return ["There are no flights in that time period"]
		return [f"[{f.flight_id}]" for f in flights]

	def tick(self, t: int) -> List[str]:
		return self.advance(t)

	# ------------------------------------------------------------------ engine

	def advance(self, t: int) -> List[str]:
		if t < self.current_time:
			return []
		out: List[str] = []

		# Settlement
		for flight in self.timetable.extract_all_up_to(t):
			if flight.state == FlightState.SCHEDULED:
				# started at start_time on its way to landing
				flight.state = FlightState.IN_PROGRESS
			flight.state = FlightState.COMPLETED
			self._purge(flight)
			self._publish(FLIGHT_LANDED, flight, time=flight.eta)
			out.append(f"Flight {flight.flight_id} has landed at time {flight.eta}")

		self.current_time = t

		# Promotion
		for flight in self.active.values():
			if flight.state == FlightState.SCHEDULED and flight.start_time <= t:
				flight.state = FlightState.IN_PROGRESS

		before = self._snapshot_etas()
		self.schedule_all()
		out.extend(self._eta_updates(before))
		return out

	def schedule_all(self) -> None:
		now = self.current_time
		self.pending.clear()
		for flight in self.active.values():
			if flight.is_unsatisfied(now):
				self.timetable.delete(flight)
				self.pending.insert(flight)

		runway_heap = RunwayHeap.build((r.runway_id for r in self.runways), self.active.values(), now)
		if runway_heap.is_empty():
			if not self.pending.is_empty():
				logger.debug("t=%d: no runways, %d flights left pending", now, len(self.pending))
			return

		assigned = 0
		while not self.pending.is_empty():
			flight = self.pending.extract_max()
			runway = runway_heap.extract_min()
			start = max(now, runway.next_free_time)
			flight.start_time = start
			flight.eta = start + flight.duration
			flight.runway_id = runway.runway_id
			flight.state = FlightState.IN_PROGRESS if start <= now else FlightState.SCHEDULED
			self.timetable.insert(flight)
			runway.next_free_time = flight.eta
			runway_heap.insert(runway)
			assigned += 1
		logger.debug("t=%d: rebuild assigned %d flights over %d runways", now, assigned, len(self.runways))

	# ------------------------------------------------------------------ queries
	# Returned flights are the engine's live records: read-only for callers.

	def flight(self, flight_id: int) -> Optional[Flight]:
		return self.active.get(flight_id)

	def active_flights(self) -> List[Flight]:
		return sorted(self.active.values(), key=lambda f: f.flight_id)

	def runway_ids(self) -> List[int]:
		return [r.runway_id for r in self.runways]

	# ------------------------------------------------------------------ helpers

	def _append_runways(self, count: int) -> List[int]:
		added = []
		for _ in range(count):
			self.runways.append(Runway(self._next_runway_id, self.current_time))
			added.append(self._next_runway_id)
			self._next_runway_id += 1
		return added

	def _purge(self, flight: Flight) -> None:
		self.active.pop(flight.flight_id, None)
		by_airline = self.airline_index.get(flight.airline_id)
		if by_airline is not None:
			by_airline.pop(flight.flight_id, None)
			if not by_airline:
				del self.airline_index[flight.airline_id]
		self.timetable.delete(flight)
		if flight.heap_node is not None:
			self.pending.delete(flight.heap_node)

	def _snapshot_etas(self) -> Dict[int, int]:
		return {fid: f.eta for fid, f in self.active.items() if f.has_eta()}

	def _eta_updates(self, before: Dict[int, int]) -> List[str]:
		changed = sorted(
			(fid, f.eta)
			for fid, f in self.active.items()
			if f.has_eta() and fid in before and before[fid] != f.eta
		)
		if not changed:
			return []
		for fid, eta in changed:
			self.bus.publish(Event(ETA_UPDATED, {"flight_id": fid, "old_eta": before[fid], "eta": eta}, self.current_time))
		return ["Updated ETAs: [" + ", ".join(f"{fid}: {eta}" for fid, eta in changed) + "]"]

	def _publish(self, event_type: str, flight: Flight, time: Optional[int] = None) -> None:
		payload = {
			"flight_id": flight.flight_id,
			"airline_id": flight.airline_id,
			"submit_time": flight.submit_time,
			"priority": flight.priority,
			"duration": flight.duration,
			"runway_id": flight.runway_id,
			"start_time": flight.start_time,
			"eta": flight.eta,
		}
		self.bus.publish(Event(event_type, payload, self.current_time if time is None else time))

	def _reject(self, operation: str, message: str) -> List[str]:
		logger.debug("%s rejected at t=%d: %s", operation, self.current_time, message)
		self.bus.publish(Event(OPERATION_REJECTED, {"operation": operation, "message": message}, self.current_time))
		return [message]
