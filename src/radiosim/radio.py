"""Receive/transmit contract shared by simulated and real radios.

Code that processes samples talks to a `RadioRx` and a `RadioTx` only, so the
same receive/transmit chain can run against a software channel simulator or a
hardware-backed device.
"""

from abc import ABC, abstractmethod
from collections.abc import Sequence

import numpy as np
import numpy.typing as npt


class ChannelClosedError(OSError):
  """The peer endpoint of a sample stream has been closed.

  Recoverable: a test harness may end a session by closing one side.
  """


class SimulatorConfigError(ValueError):
  """A configuration that cannot produce a usable simulator."""


class RadioRx(ABC):
  """Abstract base class for radio receivers."""

  @abstractmethod
  def set_time_now(self, now: float) -> None:
    """Set the device clock to `now` seconds."""

  @abstractmethod
  def recv(self, length: int) -> tuple[npt.NDArray[np.complex64], int]:
    """Receive exactly `length` samples.

    Args:
      length: Number of samples to return.

    Returns:
      The samples and the timestamp (in microseconds) of the first sample.
      The array is only valid until the next call to `recv`; copy it to keep
      it.

    Raises:
      ChannelClosedError: The sample source went away before `length`
        samples were produced.
    """

  @abstractmethod
  def tot_num_samps(self) -> int:
    """Count of samples returned by `recv` since construction."""

  @abstractmethod
  def set_freq(self, freq: float) -> None:
    """Change the center frequency in Hz.

    A real oscillator might take some time to settle to the new frequency.

    Raises:
      OSError: The underlying medium rejected the change.
    """


class RadioTx(ABC):
  """Abstract base class for radio transmitters."""

  @abstractmethod
  def send(self, data: Sequence[complex] | npt.NDArray[np.complexfloating]) -> None:
    """Transmit the given samples in order.

    Raises:
      ChannelClosedError: The receiving side has gone away.
    """

  @abstractmethod
  def set_freq(self, freq: float) -> None:
    """Change the center frequency in Hz."""
