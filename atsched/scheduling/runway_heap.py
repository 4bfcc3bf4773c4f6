from __future__ import annotations

import heapq
from typing import Dict, Iterable, List, Optional, Tuple

from atsched.scheduling.flight import Flight, FlightState, Runway


class RunwayHeap:
	"""Min-heap of runways by (next free time, runway id).

	Transient working state for one scheduling pass.
	"""

	def __init__(self) -> None:
		self._heap: List[Tuple[int, int, Runway]] = []

	def __len__(self) -> int:
		return len(self._heap)

	def is_empty(self) -> bool:
		return not self._heap

	def insert(self, runway: Runway) -> None:
		heapq.heappush(self._heap, (runway.next_free_time, runway.runway_id, runway))

	def find_min(self) -> Optional[Runway]:
		return self._heap[0][2] if self._heap else None

	def extract_min(self) -> Optional[Runway]:
		if not self._heap:
			return None
		return heapq.heappop(self._heap)[2]

	@classmethod
	def build(cls, runway_ids: Iterable[int], flights: Iterable[Flight], now: int) -> "RunwayHeap":
		free_at: Dict[int, int] = {rid: now for rid in runway_ids}
		for f in flights:
			if f.state == FlightState.IN_PROGRESS and f.runway_id in free_at:
				free_at[f.runway_id] = max(free_at[f.runway_id], f.eta)
		heap = cls()
		heap._heap = [(t, rid, Runway(rid, t)) for rid, t in free_at.items()]
		heapq.heapify(heap._heap)
		return heap
