"""Unbounded single-producer/single-consumer conduit of complex samples.

`open_channel` returns a connected (sender, receiver) pair. Samples arrive in
the order they were sent. Closing an endpoint, explicitly or by letting it be
garbage collected, is visible to its peer:

- Once the sender is closed, samples already queued are still delivered, and
  the receiver raises `ChannelClosedError` when the queue runs dry.
- Once the receiver is closed, sending raises `ChannelClosedError`.
"""

import logging
import threading
import weakref
from collections import deque
from collections.abc import Iterable

from radiosim.radio import ChannelClosedError

logger = logging.getLogger(__name__)


class _ChannelState:
  """Queue and closure flags shared by both endpoints."""

  def __init__(self) -> None:
    self.queue: deque[complex] = deque()
    self.cond = threading.Condition()
    self.sender_closed = False
    self.receiver_closed = False

  def close_sender(self) -> None:
    with self.cond:
      self.sender_closed = True
      self.cond.notify_all()

  def close_receiver(self) -> None:
    with self.cond:
      self.receiver_closed = True
      self.queue.clear()
      self.cond.notify_all()


class SampleSender:
  """Sending end of a sample channel. Never blocks."""

  def __init__(self, state: _ChannelState) -> None:
    self._state = state
    self._finalizer = weakref.finalize(self, state.close_sender)

  def send_many(self, samples: Iterable[complex]) -> None:
    """Append samples to the channel in order.

    Raises:
      ChannelClosedError: The receiver was closed, or this sender was.
    """
    state = self._state
    with state.cond:
      if state.receiver_closed or state.sender_closed:
        msg = "Cannot send: sample channel is closed"
        raise ChannelClosedError(msg)
      state.queue.extend(complex(s) for s in samples)
      state.cond.notify()

  def close(self) -> None:
    """Close the sending end. Queued samples remain deliverable."""
    self._finalizer()

  @property
  def closed(self) -> bool:
    return not self._finalizer.alive


class SampleReceiver:
  """Receiving end of a sample channel."""

  def __init__(self, state: _ChannelState) -> None:
    self._state = state
    self._finalizer = weakref.finalize(self, state.close_receiver)

  def recv(self, timeout: float | None = None) -> complex:
    """Pop the oldest sample, blocking until one is available.

    Args:
      timeout: Seconds to wait for a sample. None waits forever.

    Raises:
      ChannelClosedError: The sender is closed and every queued sample has
        been delivered, or this receiver was closed, possibly while waiting.
      TimeoutError: No sample arrived within `timeout` seconds.
    """
    state = self._state
    with state.cond:
      ready = state.cond.wait_for(
        lambda: state.queue or state.sender_closed or state.receiver_closed,
        timeout=timeout,
      )
      if state.receiver_closed:
        msg = "Cannot receive: receiving end is closed"
        raise ChannelClosedError(msg)
      if not ready:
        msg = f"No sample arrived within {timeout}s"
        raise TimeoutError(msg)
      if state.queue:
        return state.queue.popleft()
      logger.debug("Sample channel drained after sender closed")
      msg = "Sample channel closed by sender"
      raise ChannelClosedError(msg)

  def pending(self) -> int:
    """Number of samples sent but not yet received."""
    with self._state.cond:
      return len(self._state.queue)

  def close(self) -> None:
    """Close the receiving end. Further sends fail."""
    self._finalizer()

  @property
  def closed(self) -> bool:
    return not self._finalizer.alive


def open_channel() -> tuple[SampleSender, SampleReceiver]:
  """Create a connected (sender, receiver) pair."""
  state = _ChannelState()
  return SampleSender(state), SampleReceiver(state)
