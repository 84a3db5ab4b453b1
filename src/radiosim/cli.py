"""Command line interface for running the radio simulator.

Runs a loopback session: a transmitter thread sends a test tone through a
simulated channel while the main thread receives it block by block.
"""

import logging
import threading
from pathlib import Path
from typing import Annotated

import numpy as np
import typer
from pydantic import ValidationError

from radiosim.config import SimulatorConfig
from radiosim.radio import ChannelClosedError, SimulatorConfigError
from radiosim.setup_logging import setup_logging
from radiosim.simulator.channels import PRESETS, get_preset
from radiosim.simulator.radio_simulator import SimulatedRadioTx, create_simulator

logger = logging.getLogger(__name__)

app = typer.Typer(help="Software stand-in for a radio transceiver pair.")


@app.callback()
def main(
  log_level: Annotated[
    str, typer.Option("--log-level", "-l", help="Logging level.")
  ] = "INFO",
) -> None:
  """Simulate a noisy, drifting, multipath radio link."""
  setup_logging(level=log_level)


def load_config(preset: str, config_file: Path | None) -> SimulatorConfig:
  """Load a configuration from a JSON file, or fall back to a preset."""
  if config_file is not None:
    logger.info(f"Loading configuration from {config_file}")
    try:
      return SimulatorConfig.model_validate_json(config_file.read_text())
    except ValidationError as e:
      logger.error(f"Invalid configuration in {config_file}:\n{e}")
      raise typer.Exit(code=1) from e
  try:
    channel_preset = get_preset(preset)
  except KeyError as e:
    logger.error(f"Unknown preset: {preset}")
    logger.error(f"Available presets: {', '.join(PRESETS)}")
    raise typer.Exit(code=1) from e
  logger.info(f"Using channel preset: {channel_preset.name}")
  logger.info(f"  {channel_preset.description}")
  return channel_preset.config


def make_tone(num_samples: int, tone: float) -> np.ndarray:
  """Unit-amplitude complex tone at `tone` cycles/sample."""
  n = np.arange(num_samples)
  return np.exp(2j * np.pi * tone * n).astype(np.complex64)


def transmit(tx: SimulatedRadioTx, signal: np.ndarray, block_size: int) -> None:
  """Send `signal` block by block, then close the transmitter."""
  with tx:
    for start in range(0, len(signal), block_size):
      try:
        tx.send(signal[start : start + block_size])
      except ChannelClosedError:
        logger.warning("Receiver closed before transmission finished")
        return


@app.command()
def loopback(
  preset: Annotated[
    str, typer.Option("--preset", "-p", help="Channel preset (e.g., lab, urban).")
  ] = "lab",
  config_file: Annotated[
    Path | None,
    typer.Option(
      "--config",
      "-c",
      help="JSON simulator configuration (overrides --preset).",
      exists=True,
      readable=True,
    ),
  ] = None,
  blocks: Annotated[
    int, typer.Option("--blocks", "-n", help="Number of blocks to receive.", min=1)
  ] = 10,
  block_size: Annotated[
    int, typer.Option("--block-size", "-b", help="Samples per block.", min=1)
  ] = 4096,
  tone: Annotated[
    float, typer.Option("--tone", help="Test tone in cycles/sample.")
  ] = 0.01,
  seed: Annotated[
    int | None, typer.Option("--seed", "-s", help="Random seed.")
  ] = None,
  output: Annotated[
    Path | None,
    typer.Option("--output", "-o", help="Save received samples to a .npy file."),
  ] = None,
) -> None:
  """Send a test tone through the simulator and receive it back."""
  config = load_config(preset, config_file)
  try:
    tx, rx = create_simulator(config, rng=np.random.default_rng(seed))
  except SimulatorConfigError as e:
    logger.error(f"Cannot create simulator: {e}")
    raise typer.Exit(code=1) from e
  logger.info(f"Receiver primes for {rx.samps_before_start} samples")

  total = blocks * block_size
  producer = threading.Thread(
    target=transmit, args=(tx, make_tone(total, tone), block_size), daemon=True
  )
  producer.start()

  received = np.zeros(total, dtype=np.complex64)
  with rx:
    for i in range(blocks):
      samples, timestamp_us = rx.recv(block_size)
      received[i * block_size : (i + 1) * block_size] = samples
      power = float(np.mean(np.abs(samples) ** 2))
      logger.info(f"Block {i}: t={timestamp_us}us, mean power {power:.4f}")
    producer.join()
    logger.info(f"Received {rx.tot_num_samps()} samples")

  if output is not None:
    np.save(output, received)
    logger.info(f"Saved output to {output}")
  typer.echo(f"received {rx.tot_num_samps()} samples")


@app.command()
def presets() -> None:
  """List available channel presets."""
  for key, channel_preset in PRESETS.items():
    typer.echo(f"{key}: {channel_preset.description}")


if __name__ == "__main__":
  app()
