"""Logging configuration for the radiosim package."""

import coloredlogs


def setup_logging(level: str = "INFO") -> None:
  """Configure the root logger with a short, colored format.

  Library modules only create loggers; this is called once by the CLI entry
  point.

  Args:
    level: Logging level (e.g., "INFO", "DEBUG", "WARNING").
  """
  coloredlogs.install(
    level=level.upper(),
    fmt="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
    datefmt="%H:%M:%S",
    field_styles={"name": {"color": "blue"}, "asctime": {"color": "green"}},
  )
