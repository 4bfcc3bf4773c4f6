import logging
import sys
from typing import Optional, Union


def get_logger(name: str, level: Optional[Union[int, str]] = None) -> logging.Logger:
	logger = logging.getLogger(name)
	if not logger.handlers:
		# stderr keeps scheduler report lines on stdout untouched
		handler = logging.StreamHandler(stream=sys.stderr)
		formatter = logging.Formatter(
			"%(asctime)s | %(levelname)s | %(name)s | %(message)s",
			datefmt="%H:%M:%S",
		)
		handler.setFormatter(formatter)
		logger.addHandler(handler)
		logger.setLevel(logging.INFO)
	if level is not None:
		logger.setLevel(level.upper() if isinstance(level, str) else level)
	logger.propagate = False
	return logger


def set_level(level: Union[int, str]) -> None:
	"""Apply one level to every logger created under the atsched namespace."""
	resolved = level.upper() if isinstance(level, str) else level
	for name, logger in logging.Logger.manager.loggerDict.items():
		if name.startswith("atsched") and isinstance(logger, logging.Logger):
			logger.setLevel(resolved)
