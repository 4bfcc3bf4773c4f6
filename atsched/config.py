from dataclasses import dataclass


@dataclass
class Config:
	# Command file handling
	output_suffix: str = "_output_file.txt"
	log_level: str = "INFO"

	# Synthetic workload sizes
	num_flights: int = 40
	num_runways: int = 2
	num_airlines: int = 5
	seed: int = 42

	# Flight parameter ranges (inclusive)
	min_priority: int = 1
	max_priority: int = 10
	min_duration: int = 2
	max_duration: int = 12

	# Submissions are spread over [0, submit_horizon)
	submit_horizon: int = 120

	# Per-submission probabilities of an operator action following it
	cancel_rate: float = 0.08
	reprioritize_rate: float = 0.1
	ground_hold_rate: float = 0.03

	# Emit a Tick after every N submissions (0 disables)
	tick_every: int = 5
	extra_runways: int = 1
