"""Standard library of pre-configured simulator channels.

This module provides factory functions and constants for common test
scenarios, organized by environment (bench, indoor, outdoor). Each factory
returns a SimulatorConfig that can be passed to create_simulator.

Typical Usage:
  ```python
  from radiosim.simulator import create_simulator
  from radiosim.simulator.channels import indoor

  # Use factory function with custom parameters
  tx, rx = create_simulator(indoor.office(noise=0.05))

  # Or use pre-configured preset
  tx, rx = create_simulator(indoor.LAB.config)
  ```
"""

from pydantic import BaseModel

from radiosim.config import SimulatorConfig


class ChannelPreset(BaseModel):
  """A named simulator configuration with metadata.

  Attributes:
    name: Human-readable preset name.
    description: Detailed description of channel characteristics.
    config: Simulator configuration.
  """

  name: str
  description: str
  config: SimulatorConfig

  model_config = {"frozen": True}


# =============================================================================
# Bench Channels - Cabled or Ideal Links
# =============================================================================


class bench:  # noqa: N801
  """Bench presets: cabled links with no propagation effects.

  Useful for:
  - Checking a receive chain end to end before adding impairments
  - Noise threshold measurements
  """

  SAMPLE_RATE: float = 1e6  # Hz
  CENTER_FREQ: float = 915e6  # Hz

  # Pre-configured presets (assigned below)
  IDEAL: ChannelPreset
  CABLED: ChannelPreset

  @staticmethod
  def ideal(max_start_time_offset: int = 0) -> SimulatorConfig:
    """Identity channel: whatever is sent is received unchanged.

    Args:
      max_start_time_offset: Upper bound on leading zero samples
        (default: 0).

    Returns:
      Simulator configuration.
    """
    return SimulatorConfig(
      max_start_time_offset=max_start_time_offset,
      samp_rate=bench.SAMPLE_RATE,
      start_freq=bench.CENTER_FREQ,
      max_cfo=0.0,
      cfo_drift=0.0,
      phase_noise=0.0,
      noise=0.0,
      multipath=(),
    )

  @staticmethod
  def cabled(
    noise: float = 0.01, max_cfo: float = 1e-4, max_start_time_offset: int = 1000
  ) -> SimulatorConfig:
    """Cabled link between two free-running oscillators.

    Args:
      noise: Noise standard deviation per I/Q component (default: 0.01).
      max_cfo: Maximum CFO in radians/sample (default: 1e-4).
      max_start_time_offset: Upper bound on leading zero samples
        (default: 1000).

    Returns:
      Simulator configuration.
    """
    return SimulatorConfig(
      max_start_time_offset=max_start_time_offset,
      samp_rate=bench.SAMPLE_RATE,
      start_freq=bench.CENTER_FREQ,
      max_cfo=max_cfo,
      cfo_drift=max_cfo * 1e-3,
      phase_noise=max_cfo * 1e-1,
      noise=noise,
      multipath=(),
    )


bench.IDEAL = ChannelPreset(
  name="Bench Ideal",
  description="Identity channel: no offset, noise or multipath",
  config=bench.ideal(),
)

bench.CABLED = ChannelPreset(
  name="Bench Cabled",
  description="Cabled link: small CFO, low noise, no multipath",
  config=bench.cabled(),
)


# =============================================================================
# Indoor Channels - Short Multipath
# =============================================================================


class indoor:  # noqa: N801
  """Indoor presets: short reflections off walls and furniture.

  Multipath offsets are computed from the center frequency, so the delays
  below are scaled to land a few samples back at the preset frequency.
  """

  SAMPLE_RATE: float = 1e6  # Hz
  CENTER_FREQ: float = 2.4e3  # Hz

  # Pre-configured presets (assigned below)
  LAB: ChannelPreset
  OFFICE: ChannelPreset

  @staticmethod
  def lab(noise: float = 0.02, max_cfo: float = 1e-3) -> SimulatorConfig:
    """Open lab space: one weak reflection.

    Args:
      noise: Noise standard deviation per I/Q component (default: 0.02).
      max_cfo: Maximum CFO in radians/sample (default: 1e-3).

    Returns:
      Simulator configuration.
    """
    return SimulatorConfig(
      max_start_time_offset=5000,
      samp_rate=indoor.SAMPLE_RATE,
      start_freq=indoor.CENTER_FREQ,
      max_cfo=max_cfo,
      cfo_drift=max_cfo * 1e-3,
      phase_noise=max_cfo * 1e-1,
      noise=noise,
      multipath=((1.25e-3, 0.2 + 0.1j),),  # 3 samples
    )

  @staticmethod
  def office(noise: float = 0.05, max_cfo: float = 2e-3) -> SimulatorConfig:
    """Cluttered office: three reflections of falling strength.

    Args:
      noise: Noise standard deviation per I/Q component (default: 0.05).
      max_cfo: Maximum CFO in radians/sample (default: 2e-3).

    Returns:
      Simulator configuration.
    """
    return SimulatorConfig(
      max_start_time_offset=5000,
      samp_rate=indoor.SAMPLE_RATE,
      start_freq=indoor.CENTER_FREQ,
      max_cfo=max_cfo,
      cfo_drift=max_cfo * 1e-3,
      phase_noise=max_cfo * 1e-1,
      noise=noise,
      multipath=(
        (1.25e-3, 0.4 - 0.2j),  # 3 samples
        (2.5e-3, -0.2 + 0.1j),  # 6 samples
        (5e-3, 0.1j),  # 12 samples
      ),
    )


indoor.LAB = ChannelPreset(
  name="Indoor Lab",
  description="Open lab: one weak reflection, low noise",
  config=indoor.lab(),
)

indoor.OFFICE = ChannelPreset(
  name="Indoor Office",
  description="Cluttered office: three reflections, moderate noise",
  config=indoor.office(),
)


# =============================================================================
# Outdoor Channels - Long Multipath and Drifting Oscillators
# =============================================================================


class outdoor:  # noqa: N801
  """Outdoor presets: long echoes and oscillators drifting with temperature."""

  SAMPLE_RATE: float = 1e6  # Hz
  CENTER_FREQ: float = 2.4e3  # Hz

  # Pre-configured presets (assigned below)
  URBAN: ChannelPreset

  @staticmethod
  def urban(noise: float = 0.1, max_cfo: float = 5e-3) -> SimulatorConfig:
    """Urban street canyon: strong late echo, fast CFO drift.

    Args:
      noise: Noise standard deviation per I/Q component (default: 0.1).
      max_cfo: Maximum CFO in radians/sample (default: 5e-3).

    Returns:
      Simulator configuration.
    """
    return SimulatorConfig(
      max_start_time_offset=20000,
      samp_rate=outdoor.SAMPLE_RATE,
      start_freq=outdoor.CENTER_FREQ,
      max_cfo=max_cfo,
      cfo_drift=max_cfo * 1e-2,
      phase_noise=max_cfo * 1e-1,
      noise=noise,
      multipath=(
        (2.5e-3, 0.5 + 0.3j),  # 6 samples
        (2e-2, 0.4j),  # 48 samples
      ),
    )


outdoor.URBAN = ChannelPreset(
  name="Outdoor Urban",
  description="Street canyon: strong late echo, fast CFO drift",
  config=outdoor.urban(),
)


PRESETS: dict[str, ChannelPreset] = {
  "ideal": bench.IDEAL,
  "cabled": bench.CABLED,
  "lab": indoor.LAB,
  "office": indoor.OFFICE,
  "urban": outdoor.URBAN,
}


def get_preset(name: str) -> ChannelPreset:
  """Look up a preset by key.

  Raises:
    KeyError: Unknown preset name.
  """
  if name not in PRESETS:
    msg = f"Unknown preset: {name}. Available presets: {', '.join(PRESETS)}"
    raise KeyError(msg)
  return PRESETS[name]
