from __future__ import annotations

from typing import List, Optional

from atsched.scheduling.flight import UNSET, Flight, FlightState


def _by_completion(flight: Flight) -> tuple:
	return flight.completion_key()


class CompletionTimetable:
	"""Binary min-heap of flights keyed by (ETA, flight id).

	Each flight stores its current slot in ``timetable_index``; every swap
	rewrites both indices so ``delete`` can find any flight in O(1) and
	restore the heap in O(log n).
	"""

	def __init__(self) -> None:
		self._heap: List[Flight] = []

	def __len__(self) -> int:
		return len(self._heap)

	def __contains__(self, flight: Flight) -> bool:
		idx = flight.timetable_index
		return 0 <= idx < len(self._heap) and self._heap[idx] is flight

	def is_empty(self) -> bool:
		return not self._heap

	def insert(self, flight: Flight) -> bool:
		if not flight.has_eta():
			return False
		self._heap.append(flight)
		flight.timetable_index = len(self._heap) - 1
		self._sift_up(flight.timetable_index)
		return True

	def find_min(self) -> Optional[Flight]:
		return self._heap[0] if self._heap else None

	def extract_min(self) -> Optional[Flight]:
		if not self._heap:
			return None
		return self._remove_at(0)

	def delete(self, flight: Flight) -> bool:
		if flight not in self:
			return False
		self._remove_at(flight.timetable_index)
		return True

	def extract_all_up_to(self, t: int) -> List[Flight]:
		done: List[Flight] = []
		while self._heap and self._heap[0].eta <= t:
			done.append(self._remove_at(0))
		# Heap order already yields this, sort keeps the contract explicit
		done.sort(key=_by_completion)
		return done

	def range_query(self, t1: int, t2: int, now: int) -> List[Flight]:
		# Array-backed heap: a full scan is the only option for ranges
		hits = [
			f for f in self._heap
			if t1 <= f.eta <= t2 and f.state == FlightState.SCHEDULED and f.start_time > now
		]
		hits.sort(key=_by_completion)
		return hits

	def flights(self) -> List[Flight]:
		return list(self._heap)

	def clear(self) -> None:
		for flight in self._heap:
			flight.timetable_index = UNSET
		self._heap = []

	def _remove_at(self, idx: int) -> Flight:
		heap = self._heap
		removed = heap[idx]
		last = heap.pop()
		if idx < len(heap):
			heap[idx] = last
			last.timetable_index = idx
			self._sift_up(idx)
			self._sift_down(last.timetable_index)
		removed.timetable_index = UNSET
		return removed

	def _swap(self, i: int, j: int) -> None:
		heap = self._heap
		heap[i], heap[j] = heap[j], heap[i]
		heap[i].timetable_index = i
		heap[j].timetable_index = j

	def _sift_up(self, idx: int) -> None:
		heap = self._heap
		while idx > 0:
			parent = (idx - 1) // 2
			if heap[idx].completion_key() < heap[parent].completion_key():
				self._swap(idx, parent)
				idx = parent
			else:
				break

	def _sift_down(self, idx: int) -> None:
		heap = self._heap
		n = len(heap)
		while True:
			left = 2 * idx + 1
			right = left + 1
			smallest = idx
			if left < n and heap[left].completion_key() < heap[smallest].completion_key():
				smallest = left
			if right < n and heap[right].completion_key() < heap[smallest].completion_key():
				smallest = right
			if smallest == idx:
				break
			self._swap(idx, smallest)
			idx = smallest
