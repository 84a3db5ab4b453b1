"""Test on a simulation of a radio rather than a real device.

`SimulatedRadioRx` and `SimulatedRadioTx` are generated from a
`SimulatorConfig` by `create_simulator`. The transmitter forwards samples
unmodified into a sample channel. The receiver pulls from it and applies the
channel impairments one sample at a time.

Typical Usage:
  ```python
  import numpy as np

  from radiosim.simulator import create_simulator
  from radiosim.simulator.channels import indoor

  tx, rx = create_simulator(indoor.LAB.config, rng=np.random.default_rng(7))
  tx.send(np.ones(1024, dtype=np.complex64))
  samples, timestamp_us = rx.recv(1024)
  ```
"""

import cmath
import logging
import math
from collections.abc import Sequence

import numpy as np
import numpy.typing as npt

from radiosim.config import SimulatorConfig
from radiosim.radio import ChannelClosedError, RadioRx, RadioTx
from radiosim.simulator.impairments import (
  DelayLine,
  advance_phase,
  drift_cfo,
  history_capacity,
  mix_multipath,
)
from radiosim.simulator.sample_channel import (
  SampleReceiver,
  SampleSender,
  open_channel,
)

logger = logging.getLogger(__name__)


class SimulatedRadioTx(RadioTx):
  """Transmit side of the simulator. Holds only the sending end."""

  def __init__(self, sender: SampleSender) -> None:
    self._sender = sender

  def send(self, data: Sequence[complex] | npt.NDArray[np.complexfloating]) -> None:
    """Forward samples to the receiver unmodified.

    Raises:
      ChannelClosedError: The receiver has been closed.
    """
    self._sender.send_many(np.asarray(data).ravel().tolist())

  def set_freq(self, freq: float) -> None:
    """Frequency changes take effect immediately; nothing to do here."""

  def close(self) -> None:
    """Stop transmitting. The receiver drains what was already sent."""
    self._sender.close()

  def __enter__(self) -> "SimulatedRadioTx":
    return self

  def __exit__(self, *exc_info: object) -> None:
    self.close()


class SimulatedRadioRx(RadioRx):
  """Receive side of the simulator.

  The receiver starts out priming: while fewer than `samps_before_start`
  samples have been produced it emits zeros without touching the channel.
  After that it streams, pulling each transmitted sample and applying
  multipath, CFO, phase noise and additive noise.
  """

  def __init__(
    self,
    config: SimulatorConfig,
    receiver: SampleReceiver,
    rng: np.random.Generator,
    *,
    cur_cfo: complex,
    cum_phase_offset: complex,
    samps_before_start: int,
  ) -> None:
    self._config = config
    self._receiver = receiver
    self._rng = rng
    self._taps = config.multipath
    # Current CFO per sample, may drift as a bounded random walk
    self._cur_cfo = cur_cfo
    # Cumulative phase offset so far due to CFO and phase noise
    self._cum_phase_offset = cum_phase_offset
    self._samps_before_start = samps_before_start
    # Samples generated, including ones lost to a failed recv
    self._num_produced = 0
    self._tot_num_samps = 0
    # Frequency changes apply immediately, imperfections are not modeled
    self._cur_freq = config.start_freq
    self._max_multipath = config.max_multipath
    self._past_samps = DelayLine(
      history_capacity(self._max_multipath, config.samp_rate)
    )
    self._buf = np.zeros(0, dtype=np.complex64)

  @property
  def cur_cfo(self) -> complex:
    return self._cur_cfo

  @property
  def cum_phase_offset(self) -> complex:
    return self._cum_phase_offset

  @property
  def samps_before_start(self) -> int:
    return self._samps_before_start

  @property
  def cur_freq(self) -> float:
    return self._cur_freq

  @property
  def max_multipath(self) -> float:
    """The largest multipath delay in seconds."""
    return self._max_multipath

  @property
  def is_priming(self) -> bool:
    return self._num_produced < self._samps_before_start

  def _next_sample(self, drift: float, jitter: float, noise: complex) -> complex:
    """Produce the next sample given this step's random draws."""
    if self._num_produced < self._samps_before_start:
      return 0j

    samp = self._receiver.recv()

    self._past_samps.push(samp)
    samp = mix_multipath(samp, self._past_samps, self._taps, self._cur_freq)

    self._cur_cfo = drift_cfo(self._cur_cfo, drift, self._config.max_cfo)
    self._cum_phase_offset = advance_phase(
      self._cum_phase_offset, self._cur_cfo, jitter
    )
    samp *= self._cum_phase_offset

    return samp + noise

  def recv(self, length: int) -> tuple[npt.NDArray[np.complex64], int]:
    """Return exactly `length` samples and the timestamp of the first one.

    The returned array is a view into a buffer reused by the next call.

    Raises:
      ChannelClosedError: The transmitter was closed and its samples ran out
        before `length` samples could be produced. Samples generated before
        the failure are not returned and not counted by `tot_num_samps`.
    """
    if length < 0:
      msg = f"Cannot receive a negative number of samples: {length}"
      raise ValueError(msg)
    if len(self._buf) < length:
      self._buf = np.zeros(length, dtype=np.complex64)

    timestamp_us = int(self._num_produced * 1e6 / self._config.samp_rate)

    cfg = self._config
    drift = self._rng.normal(0.0, cfg.cfo_drift, length).tolist()
    jitter = self._rng.normal(0.0, cfg.phase_noise, length).tolist()
    noise = self._rng.normal(0.0, cfg.noise, (length, 2)).tolist()

    buf = self._buf
    for i in range(length):
      try:
        buf[i] = self._next_sample(drift[i], jitter[i], complex(*noise[i]))
      except ChannelClosedError:
        logger.debug(
          f"Channel closed after {self._num_produced} samples "
          f"({i} of {length} in this block)"
        )
        raise
      self._num_produced += 1

    self._tot_num_samps += length
    return buf[:length], timestamp_us

  def tot_num_samps(self) -> int:
    return self._tot_num_samps

  def set_freq(self, freq: float) -> None:
    """Set the frequency used for multipath offsets. Never fails."""
    self._cur_freq = float(freq)

  def set_time_now(self, now: float) -> None:
    """No clock to synchronize in simulation."""

  def close(self) -> None:
    """Stop receiving. Further sends by the transmitter fail."""
    self._receiver.close()

  def __enter__(self) -> "SimulatedRadioRx":
    return self

  def __exit__(self, *exc_info: object) -> None:
    self.close()


def create_simulator(
  config: SimulatorConfig, rng: np.random.Generator | None = None
) -> tuple[SimulatedRadioTx, SimulatedRadioRx]:
  """Create a connected simulated transmitter and receiver.

  Args:
    config: Channel configuration. Copied into the receiver.
    rng: Random generator owned by the receiver from now on. A fresh,
      unseeded generator is used when None.

  Returns:
    The (transmitter, receiver) pair.

  Raises:
    SimulatorConfigError: The multipath delays need too much history at the
      configured sample rate.
  """
  if rng is None:
    rng = np.random.default_rng()

  # Fail before any endpoint exists
  history_capacity(config.max_multipath, config.samp_rate)

  cfo_angle = rng.uniform(-config.max_cfo, config.max_cfo)
  # A pair with neither CFO nor phase noise has locked oscillators
  if config.max_cfo == 0 and config.phase_noise == 0:
    start_phase = 0.0
  else:
    start_phase = rng.uniform(0.0, 2 * math.pi)
  if config.max_start_time_offset > 0:
    samps_before_start = int(rng.integers(0, config.max_start_time_offset))
  else:
    samps_before_start = 0

  logger.debug(
    f"Simulator start state: cfo={cfo_angle:.3g} rad/sample, "
    f"phase={start_phase:.3g} rad, samps_before_start={samps_before_start}"
  )

  sender, receiver = open_channel()
  rx = SimulatedRadioRx(
    config.model_copy(),
    receiver,
    rng,
    cur_cfo=cmath.exp(1j * cfo_angle),
    cum_phase_offset=cmath.exp(1j * start_phase),
    samps_before_start=samps_before_start,
  )
  return SimulatedRadioTx(sender), rx
