"""Unit tests for the per-sample impairment model.

Run with pytest: pytest impairments_test.py -v
"""

import cmath
import math

import numpy as np
import pytest

from radiosim.config import MultipathTap
from radiosim.radio import SimulatorConfigError
from radiosim.simulator.impairments import (
  MAX_HISTORY_SAMPLES,
  DelayLine,
  advance_phase,
  drift_cfo,
  history_capacity,
  mix_multipath,
  multipath_offset,
)


class TestDelayLine:
  """Tests for DelayLine."""

  def test_newest_first(self) -> None:
    line = DelayLine(4)
    for x in [1, 2, 3]:
      line.push(x)
    assert len(line) == 3
    assert [line[i] for i in range(3)] == [3, 2, 1]

  def test_length_never_exceeds_capacity(self) -> None:
    """Test that pushing past capacity evicts the oldest samples."""
    line = DelayLine(3)
    for x in range(10):
      line.push(complex(x))
      assert len(line) <= line.capacity
    assert [line[i] for i in range(3)] == [9, 8, 7]

  def test_missing_history_raises(self) -> None:
    line = DelayLine(3)
    line.push(1j)
    with pytest.raises(IndexError):
      line[1]

  def test_rejects_empty_capacity(self) -> None:
    with pytest.raises(ValueError):
      DelayLine(0)


class TestHistoryCapacity:
  """Tests for history_capacity."""

  @pytest.mark.parametrize(
    ("delay", "rate", "expected"),
    [(0.0, 1e6, 1), (0.25, 4.0, 1), (0.375, 4.0, 2), (0.5, 2000.0, 1000)],
  )
  def test_capacity(self, delay, rate, expected) -> None:
    assert history_capacity(delay, rate) == expected

  def test_sanity_bound(self) -> None:
    """Test that delays needing over a million slots are rejected."""
    assert history_capacity(1.0, MAX_HISTORY_SAMPLES) == MAX_HISTORY_SAMPLES
    with pytest.raises(SimulatorConfigError):
      history_capacity(1.0, MAX_HISTORY_SAMPLES + 1)

  def test_overflowing_delay_rejected(self) -> None:
    """Test that a delay too large to count in samples is a config error."""
    with pytest.raises(SimulatorConfigError):
      history_capacity(1e308, 1e6)


class TestMultipath:
  """Tests for multipath offsets and mixing."""

  def test_offset_scales_with_frequency(self) -> None:
    assert multipath_offset(1e-3, 1000.0) == 1
    assert multipath_offset(1e-3, 3000.0) == 3

  def test_offset_rounds_half_up(self) -> None:
    assert multipath_offset(0.5, 1.0) == 1
    assert multipath_offset(2.5, 1.0) == 3

  def test_zero_delay_unit_tap_doubles(self) -> None:
    """Test that a delay-0, attenuation-1 tap doubles the direct path."""
    line = DelayLine(1)
    line.push(0.5 - 0.25j)
    taps = [MultipathTap(delay_sec=0.0, attenuation=1.0)]
    assert mix_multipath(0.5 - 0.25j, line, taps, 915e6) == 1.0 - 0.5j

  def test_delayed_tap(self) -> None:
    line = DelayLine(4)
    for x in [1.0, 2.0, 3.0]:
      line.push(x)
    taps = [MultipathTap(delay_sec=2e-3, attenuation=0.5j)]
    # Offset 2 at 1 kHz reaches the first pushed sample
    assert mix_multipath(3.0, line, taps, 1000.0) == 3.0 + 0.5j

  def test_unpopulated_history_contributes_nothing(self) -> None:
    line = DelayLine(8)
    line.push(1.0)
    taps = [MultipathTap(delay_sec=5e-3, attenuation=1.0)]
    assert mix_multipath(1.0, line, taps, 1000.0) == 1.0


class TestDriftCfo:
  """Tests for the bounded CFO random walk."""

  def test_rotation_within_bounds(self) -> None:
    cfo = drift_cfo(1 + 0j, 0.01, max_cfo=0.1)
    assert cmath.phase(cfo) == pytest.approx(0.01)
    assert abs(cfo) == pytest.approx(1.0)

  @pytest.mark.parametrize("angle", [0.5, -0.5])
  def test_clamped_to_boundary(self, angle) -> None:
    cfo = drift_cfo(1 + 0j, angle, max_cfo=0.1)
    assert cmath.phase(cfo) == pytest.approx(math.copysign(0.1, angle))
    assert abs(cfo) == pytest.approx(1.0)

  def test_bounded_over_long_run(self) -> None:
    """Test that |arg(cfo)| <= max_cfo and |cfo| == 1 after every step."""
    rng = np.random.default_rng(42)
    max_cfo = 0.05
    cfo = cmath.exp(1j * rng.uniform(-max_cfo, max_cfo))
    for angle in rng.normal(0.0, 0.01, 100_000):
      cfo = drift_cfo(cfo, float(angle), max_cfo)
      assert abs(cmath.phase(cfo)) <= max_cfo + 1e-9
      assert abs(abs(cfo) - 1) < 1e-5

  def test_zero_bound_pins_cfo(self) -> None:
    cfo = drift_cfo(1 + 0j, 0.3, max_cfo=0.0)
    assert cfo == pytest.approx(1 + 0j)


class TestAdvancePhase:
  """Tests for cumulative phase offset updates."""

  def test_adds_noise_and_cfo(self) -> None:
    phase = advance_phase(cmath.exp(0.2j), cmath.exp(0.05j), 0.01)
    assert cmath.phase(phase) == pytest.approx(0.26)

  def test_unit_magnitude(self) -> None:
    rng = np.random.default_rng(0)
    phase = 1 + 0j
    cfo = cmath.exp(0.03j)
    for noise in rng.normal(0.0, 0.1, 10_000):
      phase = advance_phase(phase, cfo, float(noise))
      assert abs(abs(phase) - 1) < 1e-5
