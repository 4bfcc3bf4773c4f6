from __future__ import annotations

from pathlib import Path
from typing import List, Union

import numpy as np

from atsched.config import Config


class WorkloadGenerator:
	def __init__(self, config: Config) -> None:
		self.config = config

	def simulate(self) -> List[str]:
		cfg = self.config
		np.random.seed(cfg.seed)
		n = cfg.num_flights

		submit_times = np.sort(np.random.randint(0, max(1, cfg.submit_horizon), size=n))
		airlines = np.random.randint(1, cfg.num_airlines + 1, size=n)
		priorities = np.random.randint(cfg.min_priority, cfg.max_priority + 1, size=n)
		durations = np.random.randint(cfg.min_duration, cfg.max_duration + 1, size=n)
		action_draws = np.random.random(size=n)
		targets = np.random.randint(0, max(1, n), size=n)
		new_priorities = np.random.randint(cfg.min_priority, cfg.max_priority + 1, size=n)
		hold_spans = np.random.randint(0, 2, size=n)

		cancel_cut = cfg.cancel_rate
		reprio_cut = cancel_cut + cfg.reprioritize_rate
		hold_cut = reprio_cut + cfg.ground_hold_rate

		lines = [f"Initialize({cfg.num_runways})"]
		for i in range(n):
			fid = i + 1
			t = int(submit_times[i])
			lines.append(f"SubmitFlight({fid}, {int(airlines[i])}, {t}, {int(priorities[i])}, {int(durations[i])})")

			# Operator actions only ever target flights submitted so far
			target = 1 + int(targets[i]) % fid
			draw = float(action_draws[i])
			if draw < cancel_cut:
				lines.append(f"CancelFlight({target}, {t})")
			elif draw < reprio_cut:
				lines.append(f"Reprioritize({target}, {t}, {int(new_priorities[i])})")
			elif draw < hold_cut:
				lo = int(airlines[i])
				lines.append(f"GroundHold({lo}, {lo + int(hold_spans[i])}, {t})")

			if cfg.tick_every > 0 and fid % cfg.tick_every == 0:
				lines.append(f"Tick({t})")
				lines.append(f"PrintSchedule({t}, {t + 2 * cfg.max_duration})")
			if cfg.extra_runways > 0 and fid == max(1, n // 2):
				lines.append(f"AddRunways({cfg.extra_runways}, {t})")

		lines.append("PrintActive()")
		last = int(submit_times[-1]) if n > 0 else 0
		# Enough time for every flight to land even on a single runway
		lines.append(f"Tick({last + n * cfg.max_duration + 1})")
		lines.append("PrintActive()")
		lines.append("Quit()")
		return lines

	def write(self, path: Union[str, Path]) -> Path:
		dst = Path(path)
		with open(dst, "w", encoding="utf-8") as fh:
			for line in self.simulate():
				fh.write(line + "\n")
		return dst
