"""Simulator module for software-only radio links."""

from radiosim.simulator import channels
from radiosim.simulator.channels import (
  ChannelPreset,
  bench,
  get_preset,
  indoor,
  outdoor,
)
from radiosim.simulator.impairments import (
  DelayLine,
  advance_phase,
  drift_cfo,
  mix_multipath,
)
from radiosim.simulator.radio_simulator import (
  SimulatedRadioRx,
  SimulatedRadioTx,
  create_simulator,
)
from radiosim.simulator.sample_channel import (
  SampleReceiver,
  SampleSender,
  open_channel,
)

__all__ = [
  # Simulator components
  "DelayLine",
  "SampleReceiver",
  "SampleSender",
  "SimulatedRadioRx",
  "SimulatedRadioTx",
  "advance_phase",
  "create_simulator",
  "drift_cfo",
  "mix_multipath",
  "open_channel",
  # Channel presets
  "ChannelPreset",
  "bench",
  "channels",
  "get_preset",
  "indoor",
  "outdoor",
]
