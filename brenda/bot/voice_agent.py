"""
WebRTC transport client for OpenAI Realtime sessions.

The client captures the microphone, obtains an ephemeral key from the Brenda
backend, negotiates a peer connection directly with the provider and exchanges
control events over a data channel. Status changes, transcripts, microphone
levels and errors are delivered to listeners as ``VoiceEvent`` values.

Status flow: disconnected -> connecting -> connected <-> speaking -> disconnected.
Any fatal failure reports ``error`` and then tears the session down, which
always ends in ``disconnected``.
"""

import asyncio
import json
import logging
from typing import Any, Callable, Dict, List, Optional

import numpy as np
import requests
from aiortc import (
    RTCConfiguration,
    RTCIceServer,
    RTCPeerConnection,
    RTCSessionDescription,
)
from aiortc.contrib.media import MediaPlayer, MediaRelay

from brenda.bot.media import WaveformSampler, create_remote_sink, open_microphone
from brenda.bot.response_gate import ResponseGate
from brenda.config.constants import (
    ANONYMOUS_USER_ID,
    DATA_CHANNEL_LABEL,
    EVENT_ERROR,
    EVENT_INPUT_TRANSCRIPTION_COMPLETED,
    EVENT_RESPONSE_AUDIO_TRANSCRIPT_DELTA,
    EVENT_RESPONSE_CANCEL,
    EVENT_RESPONSE_CREATED,
    EVENT_RESPONSE_DONE,
    EVENT_SESSION_UPDATE,
    ICE_GATHERING_TIMEOUT,
    ICE_SERVERS,
    INPUT_TRANSCRIPTION_MODEL,
    LOGGER_NAME,
    REALTIME_MODALITIES,
)
from brenda.config.settings import Settings
from brenda.errors import BrendaError, TransportError
from brenda.locales import voice_instructions
from brenda.models.realtime_events import (
    AudioLevelEvent,
    ConnectionStatus,
    ErrorEvent,
    StatusEvent,
    TranscriptEvent,
    TranscriptRole,
    VoiceEvent,
)
from brenda.services import openai_client
from brenda.services.backend_client import BrendaBackendClient

logger = logging.getLogger(LOGGER_NAME)

Listener = Callable[[VoiceEvent], None]


class _Superseded(Exception):
    """A connect attempt was overtaken by disconnect()."""


def _object_field(data: Dict[str, Any], key: str) -> Dict[str, Any]:
    value = data.get(key)
    return value if isinstance(value, dict) else {}


def _text_field(data: Dict[str, Any], key: str) -> Optional[str]:
    value = data.get(key)
    return value if isinstance(value, str) else None


def build_session_update(locale_variant: str, voice: str, settings: Settings) -> Dict[str, Any]:
    """The session.update event sent once the data channel opens."""
    return {
        "type": EVENT_SESSION_UPDATE,
        "session": {
            "modalities": list(REALTIME_MODALITIES),
            "instructions": voice_instructions(locale_variant),
            "voice": voice,
            "input_audio_transcription": {"model": INPUT_TRANSCRIPTION_MODEL},
            "turn_detection": settings.turn_detection.to_payload(),
        },
    }


class VoiceAgent:
    """
    One realtime voice session at a time.

    ``connect`` and ``disconnect`` are the only methods that create or
    destroy session resources. Listeners registered with ``subscribe``
    receive every event the session produces.
    """

    def __init__(
        self,
        backend: BrendaBackendClient,
        settings: Optional[Settings] = None,
        microphone: Callable[[], MediaPlayer] = open_microphone,
        remote_audio_path: Optional[str] = None,
        ice_servers: Optional[List[str]] = None,
        ice_gathering_timeout: float = ICE_GATHERING_TIMEOUT,
    ):
        self.backend = backend
        self.settings = settings or Settings()
        self.model = self.settings.realtime_model
        self.voice = self.settings.voice
        self._microphone = microphone
        self._remote_audio_path = remote_audio_path
        self._ice_servers = ice_servers if ice_servers is not None else list(ICE_SERVERS)
        self.ice_gathering_timeout = ice_gathering_timeout

        self.pc: Optional[RTCPeerConnection] = None
        self.dc = None
        self.player: Optional[MediaPlayer] = None
        self.relay: Optional[MediaRelay] = None
        self.local_track = None
        self.sampler: Optional[WaveformSampler] = None
        self.remote_sink = None

        self.status = ConnectionStatus.DISCONNECTED
        self.gate = ResponseGate(self.settings.response_cooldown_ms)
        self._listeners: List[Listener] = []
        # bumped by disconnect(); a connect attempt only owns the session while it matches
        self._generation = 0

    # Event delivery

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener for session events.

        Returns:
            A function that removes the listener again
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _emit(self, event: VoiceEvent) -> None:
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception(f"Listener failed on {event.kind} event")

    def _set_status(self, status: ConnectionStatus) -> None:
        if status == self.status:
            return
        logger.info(f"Voice session status: {self.status.value} -> {status.value}")
        self.status = status
        self._emit(StatusEvent(status=status))

    def _handle_error(self, error: Exception) -> None:
        logger.error(f"Voice session error: {error}")
        self._emit(ErrorEvent(message=str(error), error=error))
        self._set_status(ConnectionStatus.ERROR)

    @property
    def is_connected(self) -> bool:
        return self.status in (ConnectionStatus.CONNECTED, ConnectionStatus.SPEAKING)

    # Connection lifecycle

    async def connect(self, user_id: str = ANONYMOUS_USER_ID, locale_variant: str = "en-US") -> None:
        """
        Open a voice session.

        Does nothing when a session is already open or being opened. On any
        failure the partial session is torn down, an error event is emitted
        and the error is raised to the caller. An attempt overtaken by
        ``disconnect`` closes what it created and returns without touching the
        session that replaced it.

        Raises:
            BrendaError: Microphone, backend, provider or peer connection failure
        """
        if self.pc is not None or self.status in (
            ConnectionStatus.CONNECTING,
            ConnectionStatus.CONNECTED,
            ConnectionStatus.SPEAKING,
        ):
            logger.debug("connect() ignored, session already active")
            return

        self._set_status(ConnectionStatus.CONNECTING)
        generation = self._generation
        pc: Optional[RTCPeerConnection] = None
        try:
            self._open_local_audio()

            ephemeral_key = await self.backend.mint_ephemeral_key(
                user_id=user_id,
                locale_variant=locale_variant,
                model=self.model,
                voice=self.voice,
            )
            self._ensure_current(generation)

            pc = RTCPeerConnection(
                RTCConfiguration(iceServers=[RTCIceServer(urls=url) for url in self._ice_servers])
            )
            self.pc = pc
            self.remote_sink = create_remote_sink(self._remote_audio_path)
            self._register_peer_handlers(pc)

            pc.addTrack(self.local_track)
            self._open_data_channel(pc, locale_variant)

            offer = await pc.createOffer()
            self._ensure_current(generation)
            await pc.setLocalDescription(offer)
            self._ensure_current(generation)
            await self._wait_for_ice_gathering(pc)
            self._ensure_current(generation)

            offer_sdp = pc.localDescription.sdp if pc.localDescription else None
            if not offer_sdp:
                raise TransportError("Missing local SDP offer")

            answer_sdp = await self._exchange_sdp(ephemeral_key, offer_sdp)
            self._ensure_current(generation)

            await pc.setRemoteDescription(RTCSessionDescription(sdp=answer_sdp, type="answer"))
            self._ensure_current(generation)
            logger.info("Remote description applied, waiting for data channel")
        except asyncio.CancelledError:
            if generation != self._generation:
                await self._close_stale_peer(pc)
                raise
            await self.disconnect()
            raise
        except Exception as e:
            if generation != self._generation:
                # disconnect() already released this attempt's session fields;
                # they may now belong to a newer attempt
                if not isinstance(e, _Superseded):
                    logger.info(f"Ignoring failure of superseded connect attempt: {e}")
                await self._close_stale_peer(pc)
                return
            error = e if isinstance(e, BrendaError) else TransportError(f"Voice connect failed: {e}")
            self._handle_error(error)
            await self.disconnect()
            if error is e:
                raise
            raise error from e

    def _ensure_current(self, generation: int) -> None:
        if generation != self._generation:
            raise _Superseded()

    async def _close_stale_peer(self, pc: Optional[RTCPeerConnection]) -> None:
        """Close a peer connection left behind by an attempt that disconnect() overtook."""
        if pc is None or pc is self.pc:
            return
        try:
            await pc.close()
        except Exception as e:
            logger.warning(f"Error closing superseded peer connection: {e}")

    def _open_local_audio(self) -> None:
        if self.player is not None:
            return
        self.player = self._microphone()
        self.relay = MediaRelay()
        self.local_track = self.relay.subscribe(self.player.audio)
        self.sampler = WaveformSampler(
            self.relay.subscribe(self.player.audio, buffered=False),
            self._on_samples,
        )
        self.sampler.start()

    def _on_samples(self, samples: np.ndarray) -> None:
        self._emit(AudioLevelEvent(samples=samples))

    def _register_peer_handlers(self, pc: RTCPeerConnection) -> None:
        @pc.on("track")
        async def on_track(track):
            logger.info(f"Received remote {track.kind} track")
            if track.kind == "audio" and self.remote_sink is not None:
                self.remote_sink.addTrack(track)
                await self.remote_sink.start()

        @pc.on("connectionstatechange")
        async def on_connectionstatechange():
            state = pc.connectionState
            logger.info(f"Peer connection state: {state}")
            if pc is not self.pc:
                return
            if state == "failed":
                self._handle_error(TransportError("Peer connection failed"))
                await self.disconnect()
            elif state == "closed":
                await self.disconnect()

    def _open_data_channel(self, pc: RTCPeerConnection, locale_variant: str) -> None:
        dc = pc.createDataChannel(DATA_CHANNEL_LABEL)
        self.dc = dc

        @dc.on("open")
        def on_open():
            if dc is not self.dc:
                return
            logger.info("Data channel open, sending session.update")
            self.send_event(build_session_update(locale_variant, self.voice, self.settings))
            self._set_status(ConnectionStatus.CONNECTED)

        @dc.on("message")
        def on_message(message):
            self.handle_event_message(message)

    async def _wait_for_ice_gathering(self, pc: RTCPeerConnection) -> None:
        """Wait for candidate gathering to finish, at most ``ice_gathering_timeout`` seconds."""
        if pc.iceGatheringState == "complete":
            return

        gathered = asyncio.Event()

        def on_gathering_change():
            if pc.iceGatheringState == "complete":
                gathered.set()

        pc.on("icegatheringstatechange", on_gathering_change)
        try:
            await asyncio.wait_for(gathered.wait(), timeout=self.ice_gathering_timeout)
        except asyncio.TimeoutError:
            logger.debug(f"ICE gathering still {pc.iceGatheringState}, sending offer as is")
        finally:
            pc.remove_listener("icegatheringstatechange", on_gathering_change)

    async def _exchange_sdp(self, ephemeral_key: str, offer_sdp: str) -> str:
        try:
            response = await openai_client.exchange_sdp(ephemeral_key, self.model, offer_sdp)
        except requests.RequestException as e:
            raise TransportError(f"Realtime SDP exchange failed: {e}") from e

        if not response.ok:
            raise TransportError(
                f"Realtime SDP exchange failed ({response.status_code}): {response.text}",
                status=response.status_code,
            )
        return response.text

    async def disconnect(self) -> None:
        """
        Tear the session down completely.

        Safe to call at any time and any number of times; always leaves the
        client in the disconnected state. A connect attempt still in progress
        is abandoned.
        """
        self._generation += 1
        dc, self.dc = self.dc, None
        if dc is not None:
            try:
                dc.close()
            except Exception as e:
                logger.warning(f"Error closing data channel: {e}")

        pc, self.pc = self.pc, None
        if pc is not None:
            try:
                await pc.close()
            except Exception as e:
                logger.warning(f"Error closing peer connection: {e}")

        sampler, self.sampler = self.sampler, None
        if sampler is not None:
            await sampler.stop()

        player, self.player = self.player, None
        for track in (self.local_track, sampler.track if sampler else None, player.audio if player else None):
            if track is not None:
                try:
                    track.stop()
                except Exception as e:
                    logger.warning(f"Error stopping microphone track: {e}")
        self.local_track = None
        self.relay = None

        sink, self.remote_sink = self.remote_sink, None
        if sink is not None:
            try:
                await sink.stop()
            except Exception as e:
                logger.warning(f"Error detaching remote audio: {e}")

        self.gate.reset()
        self._set_status(ConnectionStatus.DISCONNECTED)

    # Control events

    def send_event(self, event: Dict[str, Any]) -> bool:
        """
        Send a control event over the data channel.

        Returns:
            bool: False when the channel is not open and the event was dropped
        """
        if self.dc is None or self.dc.readyState != "open":
            logger.debug(f"Dropping {event.get('type')} event, data channel not open")
            return False
        self.dc.send(json.dumps(event))
        return True

    def handle_event_message(self, raw: str) -> None:
        """Dispatch one provider event received on the data channel."""
        try:
            data = json.loads(raw)
        except (TypeError, ValueError):
            logger.debug("Ignoring non-JSON data channel message")
            return
        if not isinstance(data, dict):
            return

        event_type = data.get("type")
        if event_type == EVENT_INPUT_TRANSCRIPTION_COMPLETED:
            transcript = _text_field(data, "transcript")
            if transcript:
                self._emit(TranscriptEvent(role=TranscriptRole.USER, text=transcript))

        elif event_type == EVENT_RESPONSE_CREATED:
            response_id = _text_field(_object_field(data, "response"), "id")
            if not response_id:
                return
            if not self.gate.admit(response_id):
                logger.info(f"Cancelling overlapping response {response_id}")
                self.send_event({"type": EVENT_RESPONSE_CANCEL, "response_id": response_id})
                return
            self._set_status(ConnectionStatus.SPEAKING)

        elif event_type == EVENT_RESPONSE_AUDIO_TRANSCRIPT_DELTA:
            delta = _text_field(data, "delta")
            if delta:
                self._emit(TranscriptEvent(role=TranscriptRole.ASSISTANT, text=delta))

        elif event_type == EVENT_RESPONSE_DONE:
            response_id = _text_field(_object_field(data, "response"), "id")
            if self.gate.complete(response_id):
                self._set_status(ConnectionStatus.CONNECTED)

        elif event_type == EVENT_ERROR:
            message = _text_field(_object_field(data, "error"), "message") or "Realtime error"
            logger.warning(f"Realtime error event: {message}")
            error = TransportError(message)
            self._emit(ErrorEvent(message=message, error=error))
