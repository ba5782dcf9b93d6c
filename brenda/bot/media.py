"""
Local and remote media helpers for the voice transport client.

- Microphone capture through an aiortc ``MediaPlayer`` bound to the system
  audio input.
- A waveform sampler that turns microphone frames into a rolling window of
  float samples for level meters.
- A sink for the assistant's audio track.
"""

import asyncio
import logging
import os
import sys
from typing import Callable, Optional, Tuple

import av
from av.error import FFmpegError
import numpy as np
from aiortc.contrib.media import MediaBlackhole, MediaPlayer, MediaRecorder
from aiortc.mediastreams import MediaStreamError, MediaStreamTrack

from brenda.config.constants import ANALYSER_WINDOW, LOGGER_NAME
from brenda.errors import MicrophoneUnavailable

logger = logging.getLogger(LOGGER_NAME)


def default_microphone() -> Tuple[str, str]:
    """
    Device name and FFmpeg input format of the default microphone.

    Overridable with BRENDA_MIC_DEVICE / BRENDA_MIC_FORMAT.
    """
    if sys.platform == "darwin":
        device, fmt = ":0", "avfoundation"
    else:
        device, fmt = "default", "pulse"
    return os.getenv("BRENDA_MIC_DEVICE", device), os.getenv("BRENDA_MIC_FORMAT", fmt)


def open_microphone(device: Optional[str] = None, fmt: Optional[str] = None) -> MediaPlayer:
    """
    Start capturing from a microphone.

    Raises:
        MicrophoneUnavailable: The device cannot be opened (missing, busy or permission denied)
    """
    default_device, default_fmt = default_microphone()
    device = device or default_device
    fmt = fmt or default_fmt

    try:
        player = MediaPlayer(device, format=fmt)
    except (FFmpegError, OSError) as e:
        logger.error(f"Could not open microphone {device} ({fmt}): {e}")
        raise MicrophoneUnavailable(f"Microphone unavailable: {e}") from e

    if player.audio is None:
        raise MicrophoneUnavailable(f"Device {device} has no audio input")

    logger.info(f"Microphone opened: {device} ({fmt})")
    return player


def create_remote_sink(path: Optional[str] = None):
    """Recorder for the assistant's audio when ``path`` is given, otherwise a blackhole."""
    if path:
        logger.info(f"Recording assistant audio to {path}")
        return MediaRecorder(path)
    return MediaBlackhole()


def frame_to_samples(frame: av.AudioFrame) -> np.ndarray:
    """First channel of an audio frame as float32 samples in -1..1."""
    data = frame.to_ndarray()
    channels = len(frame.layout.channels)
    if frame.format.is_planar:
        mono = data[0]
    else:
        mono = data.reshape(-1)[::channels]

    if np.issubdtype(mono.dtype, np.integer):
        scale = float(np.iinfo(mono.dtype).max) + 1.0
        return mono.astype(np.float32) / scale
    return mono.astype(np.float32)


class WaveformSampler:
    """
    Reads frames from an audio track and publishes a rolling sample window.

    Each received frame produces one callback with a copy of the latest
    ``window`` samples.
    """

    def __init__(
        self,
        track: MediaStreamTrack,
        on_samples: Callable[[np.ndarray], None],
        window: int = ANALYSER_WINDOW,
    ):
        self.track = track
        self.on_samples = on_samples
        self.buffer = np.zeros(window, dtype=np.float32)
        self._task: Optional[asyncio.Task] = None

    def start(self) -> None:
        if self._task is None or self._task.done():
            self._task = asyncio.create_task(self._run())

    def push(self, samples: np.ndarray) -> np.ndarray:
        """Append samples to the window and return a copy of it."""
        n = len(samples)
        if n >= len(self.buffer):
            self.buffer[:] = samples[-len(self.buffer):]
        elif n:
            self.buffer = np.roll(self.buffer, -n)
            self.buffer[-n:] = samples
        return self.buffer.copy()

    async def _run(self) -> None:
        while True:
            try:
                frame = await self.track.recv()
            except MediaStreamError:
                logger.debug("Waveform source ended")
                break
            self.on_samples(self.push(frame_to_samples(frame)))

    async def stop(self) -> None:
        if self._task is None:
            return
        self._task.cancel()
        try:
            await self._task
        except asyncio.CancelledError:
            pass
        self._task = None
