"""natural-tts command line: speak, save or synthesize one message."""

import argparse
import logging
import sys

from natural_tts.config import from_config, load_config
from natural_tts.errors import TTSError


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="natural-tts", description="Speak text with any configured TTS backend")
    parser.add_argument("--config", type=str, default="config.yaml", help="Path to config.yaml")
    parser.add_argument("--model", type=str, default=None, help="Default model (overrides config)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")

    commands = parser.add_subparsers(dest="command", required=True)
    say = commands.add_parser("say", help="Speak the message aloud")
    say.add_argument("text")
    save = commands.add_parser("save", help="Render the message to an audio file")
    save.add_argument("text")
    save.add_argument("path")
    synth = commands.add_parser("synth", help="Synthesize in memory and print the audio format")
    synth.add_argument("text")
    return parser


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        natural = from_config(load_config(args.config))
    except (FileNotFoundError, TTSError) as exc:
        print(f"\033[31m{exc}\033[0m", file=sys.stderr)
        return 1

    try:
        if args.model:
            natural.default_model = args.model
        if args.command == "say":
            natural.say(args.text)
        elif args.command == "save":
            natural.save(args.text, args.path)
            print(f"\033[32mSaved to {args.path}\033[0m")
        else:
            payload = natural.synthesize(args.text)
            duration = f"{payload.duration:.2f}s" if payload.duration is not None else "unknown"
            print(f"{type(payload.spec).__name__}: {payload.spec} ({len(payload.samples)} samples, {duration})")
    except ValueError as exc:
        print(f"\033[31m{exc}\033[0m", file=sys.stderr)
        return 1
    except TTSError as exc:
        print(f"\033[31m{type(exc).__name__}: {exc}\033[0m", file=sys.stderr)
        return 1
    finally:
        natural.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
