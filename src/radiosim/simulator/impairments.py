"""Per-sample channel impairment model.

Each received sample goes through, in order:
1. Start gating (handled by the receiver)
2. History update in a `DelayLine`
3. Multipath mixing (`mix_multipath`)
4. CFO drift and application (`drift_cfo`, `advance_phase`)
5. Additive Gaussian noise (drawn by the receiver)

The functions here are pure apart from `DelayLine`, so they can be tested
without a receiver or a random generator.
"""

import cmath
import math
from collections.abc import Iterable

import numpy as np

from radiosim.config import MultipathTap
from radiosim.radio import SimulatorConfigError

# Keep it sane
MAX_HISTORY_SAMPLES = 1_000_000


class DelayLine:
  """Fixed-capacity ring buffer of past samples, newest first.

  `delay_line[0]` is the most recently pushed sample, `delay_line[1]` the one
  before it, and so on. Once full, each push overwrites the oldest sample.
  """

  def __init__(self, capacity: int) -> None:
    if capacity < 1:
      msg = f"Delay line capacity must be positive, got {capacity}"
      raise ValueError(msg)
    self._buf = np.zeros(capacity, dtype=np.complex128)
    self._head = -1
    self._len = 0

  @property
  def capacity(self) -> int:
    return len(self._buf)

  def push(self, sample: complex) -> None:
    self._head = (self._head + 1) % len(self._buf)
    self._buf[self._head] = sample
    if self._len < len(self._buf):
      self._len += 1

  def __len__(self) -> int:
    return self._len

  def __getitem__(self, offset: int) -> complex:
    if not 0 <= offset < self._len:
      msg = f"Offset {offset} outside delay line history of {self._len}"
      raise IndexError(msg)
    return complex(self._buf[(self._head - offset) % len(self._buf)])


def history_capacity(max_delay_sec: float, samp_rate: float) -> int:
  """Number of delay line slots needed for `max_delay_sec` at `samp_rate`.

  At least one slot is always kept so the current sample is addressable.

  Raises:
    SimulatorConfigError: More than MAX_HISTORY_SAMPLES slots are needed.
  """
  span = max_delay_sec * samp_rate
  if not math.isfinite(span) or span > MAX_HISTORY_SAMPLES:
    msg = (
      f"Multipath delay {max_delay_sec}s at {samp_rate} samples/s needs "
      f"{span} history samples (limit {MAX_HISTORY_SAMPLES})"
    )
    raise SimulatorConfigError(msg)
  return max(math.ceil(span), 1)


def multipath_offset(delay_sec: float, freq: float) -> int:
  """Sample offset of a path, rounding halves away from zero.

  Scales with the current center frequency rather than the sample rate.
  """
  return math.floor(delay_sec * freq + 0.5)


def mix_multipath(
  sample: complex,
  delay_line: DelayLine,
  taps: Iterable[MultipathTap],
  freq: float,
) -> complex:
  """Add each tap's delayed, attenuated copy to `sample`.

  Taps whose offset reaches past the recorded history contribute nothing;
  the history may be short because it is still filling up or because the
  frequency increased recently.
  """
  for tap in taps:
    i = multipath_offset(tap.delay_sec, freq)
    if 0 <= i < len(delay_line):
      sample += tap.attenuation * delay_line[i]
  return sample


def drift_cfo(cfo: complex, angle: float, max_cfo: float) -> complex:
  """One step of the bounded CFO random walk.

  Args:
    cfo: Current unit-magnitude CFO (phase increment per sample).
    angle: Random rotation to apply, in radians.
    max_cfo: Bound on the CFO argument, in radians/sample.

  Returns:
    The new CFO, unit magnitude, with |arg| <= max_cfo.
  """
  cfo *= cmath.exp(1j * angle)
  phase = cmath.phase(cfo)
  if phase < -max_cfo:
    cfo = cmath.exp(-1j * max_cfo)
  elif phase > max_cfo:
    cfo = cmath.exp(1j * max_cfo)
  return cfo / abs(cfo)


def advance_phase(phase_offset: complex, cfo: complex, noise_angle: float) -> complex:
  """Advance the cumulative phase offset by phase noise and then the CFO."""
  phase_offset *= cmath.exp(1j * noise_angle)
  phase_offset *= cfo
  return phase_offset / abs(phase_offset)
