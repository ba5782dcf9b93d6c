"""
Command line front-end for the Brenda assistant.

Talk mode opens a realtime voice session through the backend's ephemeral key
flow and prints status changes and transcripts; text mode runs a chat loop
against the /chat relay.

Usage:
    python client.py talk [--server URL] [--locale VARIANT] [--user ID] [--record FILE]
    python client.py text [--server URL] [--locale VARIANT]
"""

import argparse
import asyncio
import os
import sys

import dotenv
import numpy as np

from brenda.bot import TextChat, VoiceAgent
from brenda.config.logging_config import configure_logging
from brenda.config.settings import load_settings
from brenda.errors import BrendaError
from brenda.locales import detect_locale
from brenda.models.realtime_events import VoiceEvent
from brenda.services.backend_client import BrendaBackendClient

dotenv.load_dotenv()
logger = configure_logging(os.getenv("LOG_LEVEL", "WARNING"))


def system_languages():
    """Language preferences from the POSIX locale variables, e.g. es_ES.UTF-8 -> es_ES."""
    for name in ("LANGUAGE", "LC_ALL", "LC_MESSAGES", "LANG"):
        value = os.getenv(name)
        if value:
            return [part.split(".")[0] for part in value.split(":")]
    return []


class TranscriptPrinter:
    """Prints voice events; assistant deltas are streamed onto one line."""

    def __init__(self, meter: bool = False):
        self.meter = meter
        self._assistant_open = False

    def __call__(self, event: VoiceEvent) -> None:
        if event.kind == "status":
            self._close_line()
            print(f"[{event.status.value}]")
        elif event.kind == "transcript" and event.role.value == "user":
            self._close_line()
            print(f"You: {event.text}")
        elif event.kind == "transcript":
            if not self._assistant_open:
                print("Brenda: ", end="")
                self._assistant_open = True
            print(event.text, end="", flush=True)
        elif event.kind == "error":
            self._close_line()
            print(f"Error: {event.message}", file=sys.stderr)
        elif event.kind == "audio" and self.meter:
            level = float(np.sqrt(np.mean(np.square(event.samples))))
            print(f"\r{'#' * int(min(1.0, level * 4) * 40):<40}", end="", flush=True)

    def _close_line(self) -> None:
        if self._assistant_open:
            print()
            self._assistant_open = False


async def run_talk(args) -> int:
    agent = VoiceAgent(
        BrendaBackendClient(args.server),
        settings=load_settings(),
        remote_audio_path=args.record,
    )
    agent.subscribe(TranscriptPrinter(meter=args.meter))

    try:
        await agent.connect(user_id=args.user, locale_variant=args.locale)
    except BrendaError as e:
        print(f"Voice connect failed: {e.message}", file=sys.stderr)
        return 1

    try:
        while agent.status.value != "disconnected":
            await asyncio.sleep(0.5)
    finally:
        await agent.disconnect()
    return 0


async def run_text(args) -> int:
    chat = TextChat(BrendaBackendClient(args.server), locale_variant=args.locale)
    loop = asyncio.get_running_loop()
    while True:
        text = await loop.run_in_executor(None, lambda: input("You: "))
        if text.strip().lower() in ("/quit", "/exit"):
            return 0
        if not text.strip():
            continue
        turn = await chat.send(text)
        print(f"Brenda: {turn.content}")


def parse_args():
    parser = argparse.ArgumentParser(description="Talk or chat with Brenda")
    parser.add_argument("mode", choices=["talk", "text"], help="Voice session or text chat")
    parser.add_argument("--server", default=os.getenv("BRENDA_SERVER", "http://localhost:8000"),
                        help="Backend URL (default: http://localhost:8000)")
    parser.add_argument("--locale", default=detect_locale(system_languages()).value,
                        help="Locale variant: en-US, en-GB, es-ES or es-419 (default: from system locale)")
    parser.add_argument("--user", default="anon", help="User id bound into the session token")
    parser.add_argument("--record", default=None, help="Record Brenda's audio to this file")
    parser.add_argument("--meter", action="store_true", help="Show a microphone level meter")
    return parser.parse_args()


if __name__ == "__main__":
    args = parse_args()
    runner = run_talk if args.mode == "talk" else run_text
    try:
        sys.exit(asyncio.run(runner(args)))
    except (KeyboardInterrupt, EOFError):
        print()
        sys.exit(0)
