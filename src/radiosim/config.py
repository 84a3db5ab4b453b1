"""Configuration module for the radio simulator."""

from collections.abc import Sequence
from typing import Any

from pydantic import BaseModel, Field, field_validator


class MultipathTap(BaseModel):
  """A single delayed, attenuated copy of the transmitted signal.

  Attributes:
    delay_sec: Delay of this path relative to the direct path in seconds.
    attenuation: Complex gain of this path (amplitude and phase offset).
  """

  delay_sec: float = Field(..., ge=0.0, description="Path delay in seconds.")
  attenuation: complex = Field(..., description="Complex gain of the path.")

  model_config = {"frozen": True, "allow_inf_nan": False}


class SimulatorConfig(BaseModel):
  """Configuration for a simulated transmitter/receiver pair.

  Every field must be supplied by the caller; none has a default.

  Attributes:
    max_start_time_offset: The receiver produces N zero samples before
      including signal from the transmitter, N drawn uniformly from
      [0, max_start_time_offset). Units are samples.
    samp_rate: Sample rate in samples/sec.
    start_freq: Center frequency at which we start, in Hz. Can only be edited
      afterwards through `RadioRx.set_freq`.
    max_cfo: The pair starts with a random CFO in [-max_cfo, max_cfo]
      radians/sample, and the CFO random walk never leaves that interval.
      1 radian/sample is equivalent to samp_rate / (2 pi) Hz.
    cfo_drift: Standard deviation of the CFO random walk step, in
      radians/sample. For real clocks cfo_drift << phase_noise << max_cfo.
    phase_noise: Standard deviation of the random per-sample phase jitter, in
      radians/sample.
    noise: Standard deviation of the Gaussian noise added to each of I and Q.
    multipath: Multipath components in addition to the direct path. Delays
      are in seconds, so the offset in samples changes with frequency.
  """

  max_start_time_offset: int = Field(..., ge=0)
  samp_rate: float = Field(..., gt=0.0)
  start_freq: float
  max_cfo: float = Field(..., ge=0.0)
  cfo_drift: float = Field(..., ge=0.0)
  phase_noise: float = Field(..., ge=0.0)
  noise: float = Field(..., ge=0.0)
  multipath: tuple[MultipathTap, ...]

  model_config = {"frozen": True, "allow_inf_nan": False}

  @field_validator("multipath", mode="before")
  @classmethod
  def _coerce_taps(cls, value: Any) -> Any:
    """Accept plain (delay, attenuation) pairs alongside MultipathTap."""
    if not isinstance(value, Sequence) or isinstance(value, str):
      return value
    taps = []
    for tap in value:
      if isinstance(tap, Sequence) and not isinstance(tap, str) and len(tap) == 2:
        delay, attenuation = tap
        taps.append({"delay_sec": delay, "attenuation": attenuation})
      else:
        taps.append(tap)
    return tuple(taps)

  @property
  def max_multipath(self) -> float:
    """Largest multipath delay in seconds, 0 when there are no taps."""
    return max((tap.delay_sec for tap in self.multipath), default=0.0)
