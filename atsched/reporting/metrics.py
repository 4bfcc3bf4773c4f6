from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List

import pandas as pd

from atsched.events.core import (
	ETA_UPDATED,
	FLIGHT_CANCELED,
	FLIGHT_GROUNDED,
	FLIGHT_LANDED,
	OPERATION_REJECTED,
	Event,
)


LANDED_COLUMNS = ["flight_id", "airline_id", "runway_id", "priority", "submit_time", "start_time", "eta", "duration"]


@dataclass
class RunMetrics:
	landed: int
	canceled: int
	grounded: int
	eta_updates: int
	rejected: int
	mean_wait: float
	max_wait: int
	landings_per_runway: Dict[int, int]
	flights: pd.DataFrame  # one row per landed flight

	def to_dict(self) -> Dict[str, Any]:
		return {
			"landed": self.landed,
			"canceled": self.canceled,
			"grounded": self.grounded,
			"eta_updates": self.eta_updates,
			"rejected": self.rejected,
			"mean_wait": self.mean_wait,
			"max_wait": self.max_wait,
			"landings_per_runway": {str(k): v for k, v in self.landings_per_runway.items()},
		}


def landed_frame(events: Iterable[Event]) -> pd.DataFrame:
	rows = [{k: e.payload[k] for k in LANDED_COLUMNS} for e in events if e.type == FLIGHT_LANDED]
	df = pd.DataFrame(rows, columns=LANDED_COLUMNS)
	# queueing delay between submission and runway start
	df["wait"] = df["start_time"] - df["submit_time"]
	return df.sort_values(["eta", "flight_id"]).reset_index(drop=True)


def summarize(events: Iterable[Event]) -> RunMetrics:
	log: List[Event] = list(events)
	df = landed_frame(log)
	counts = pd.Series([e.type for e in log], dtype=object).value_counts()
	per_runway = df.groupby("runway_id").size() if not df.empty else pd.Series(dtype=int)
	return RunMetrics(
		landed=int(len(df)),
		canceled=int(counts.get(FLIGHT_CANCELED, 0)),
		grounded=int(counts.get(FLIGHT_GROUNDED, 0)),
		eta_updates=int(counts.get(ETA_UPDATED, 0)),
		rejected=int(counts.get(OPERATION_REJECTED, 0)),
		mean_wait=float(df["wait"].mean()) if not df.empty else 0.0,
		max_wait=int(df["wait"].max()) if not df.empty else 0,
		landings_per_runway={int(k): int(v) for k, v in per_runway.items()},
		flights=df,
	)
