"""
Walkup Voice terminal front-end.

Records from the local microphone and plays responses on the local speakers.

Usage:
    walkup-voice register --first Ada --last Lovelace
    walkup-voice speak "Hello world"
"""

import argparse
import asyncio
import logging
import sys

from src.core.config import get_settings
from src.core.utils import configure_logging
from src.services.api_client import VoiceAPIClient
from src.services.audio.recorder import RecorderController
from src.services.orchestrator import CaptureFlow, SynthesisFlow
from src.services.playback.handle import PlaybackSlot
from src.services.playback.store import TempFileResourceStore
from src.services.synthesis import SynthesisClient
from src.services.upload import UploadClient

logger = logging.getLogger(__name__)


def _notify(message: str) -> None:
    print(f"Error: {message}", file=sys.stderr)


async def _prompt(message: str) -> str:
    """Read a line from stdin without blocking the event loop."""
    return await asyncio.to_thread(input, message)


async def register(args: argparse.Namespace) -> int:
    """Record a name sample, upload it, and offer to play the response."""
    from src.services.audio.microphone import MicrophoneSource
    from src.services.playback.player import SoundDevicePlayer

    store = TempFileResourceStore()
    async with VoiceAPIClient(base_url=args.url) as api:
        uploader = UploadClient(api, PlaybackSlot("capture"), store, SoundDevicePlayer())
        recorder = RecorderController(lambda: MicrophoneSource(device=args.device))
        flow = CaptureFlow(recorder, uploader, notify=_notify)
        try:
            if not await flow.start(args.first, args.last):
                return 1
            await _prompt("Recording... press Enter to stop and send. ")
            print("Processing...")
            if await flow.stop_and_send() is None:
                return 1
            while (await _prompt("Press Enter to hear the voice, or q to quit: ")).strip() != "q":
                flow.play()
        finally:
            await flow.aclose()
            store.close()
    return 0


async def speak(args: argparse.Namespace) -> int:
    """Synthesize text and play it straight away."""
    from src.services.playback.player import SoundDevicePlayer

    text = args.text if args.text is not None else sys.stdin.read()
    store = TempFileResourceStore()
    async with VoiceAPIClient(base_url=args.url) as api:
        synthesizer = SynthesisClient(api, PlaybackSlot("synthesis"), store, SoundDevicePlayer())
        flow = SynthesisFlow(synthesizer, notify=_notify)
        try:
            if not text:
                return 0
            print("Generating...")
            handle = await flow.submit(text)
        finally:
            flow.close()
            store.close()
    return 0 if handle is not None else 1


def _device(value: str) -> int | str:
    return int(value) if value.isdigit() else value


def build_parser() -> argparse.ArgumentParser:
    settings = get_settings()
    parser = argparse.ArgumentParser(
        prog="walkup-voice",
        description="Register a spoken name or turn text into speech.",
    )
    parser.add_argument(
        "--url",
        default=settings.api_base_url,
        help=f"Voice backend URL (default: {settings.api_base_url})",
    )
    parser.add_argument(
        "--log-level",
        default=settings.log_level,
        help="Logging level (default: %(default)s)",
    )
    sub = parser.add_subparsers(dest="command", required=True)

    reg = sub.add_parser("register", help="Record a name sample and upload it")
    reg.add_argument("--first", required=True, help="First name")
    reg.add_argument("--last", required=True, help="Last name")
    reg.add_argument("--device", type=_device, default=None, help="Input device index or name")
    reg.set_defaults(handler=register)

    spk = sub.add_parser("speak", help="Convert text to voice and play it")
    spk.add_argument("text", nargs="?", default=None, help="Text to speak (default: read stdin)")
    spk.set_defaults(handler=speak)

    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)
    try:
        return asyncio.run(args.handler(args))
    except KeyboardInterrupt:
        return 130


if __name__ == "__main__":
    sys.exit(main())
