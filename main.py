# main.py
from __future__ import annotations

import argparse
import sys
from typing import List, Sequence

from debug import Debug
from enigma import Enigma
from errors import ConfigurationError, OperationalError
from settings import MachineSettings, load_config, save_config
from typist import group_letters, type_message
from utilities import (
    get_machine_settings,
    preprocess_message,
    reflector_names,
    rotor_names,
)

# ────────────────────────────────────────────────────────────────────────
#  0. Logging
# ────────────────────────────────────────────────────────────────────────


debug = Debug()

EXIT_OK = 0
EXIT_OPERATION = 1
EXIT_CONFIG = 2


def _csv(value: str) -> List[str]:
    return [item for item in value.split(",") if item.strip()]


# ────────────────────────────────────────────────────────────────────────
#  1. Settings from flags / JSON / prompts
# ────────────────────────────────────────────────────────────────────────


def settings_from_args(args: argparse.Namespace) -> MachineSettings:
    """A JSON file (if any) first, then every flag given on top of it."""
    if args.interactive:
        return get_machine_settings()

    base = load_config(args.config) if args.config else MachineSettings()
    return MachineSettings(
        reflector=args.reflector if args.reflector is not None else base.reflector,
        rotors=args.rotors if args.rotors is not None else base.rotors,
        ring_settings=args.ring_settings if args.ring_settings is not None else base.ring_settings,
        plug_pairs=args.plug_pairs if args.plug_pairs is not None else base.plug_pairs,
        positions=args.positions if args.positions is not None else base.positions,
    )


# ────────────────────────────────────────────────────────────────────────
#  2. Commands
# ────────────────────────────────────────────────────────────────────────


def _prepare(text: str, clean: bool) -> str:
    return preprocess_message(text) if clean else text.upper()


def _show(text: str, group: bool) -> str:
    return group_letters(text) if group else text


def crypt(args: argparse.Namespace) -> int:
    settings = settings_from_args(args)
    machine = Enigma.from_settings(settings)

    debug.logger.info("Reflector: %s", settings.reflector)
    debug.logger.info("Rotors: %s", list(settings.rotors))
    debug.logger.info("Ring settings: %s", list(settings.ring_settings))
    debug.logger.info("Plugboard: %s", list(settings.plug_pairs))
    debug.logger.info("Rotor positions: %s", list(settings.positions))

    if args.save_config:
        save_config(settings, args.save_config)

    # one‑shot mode ------------------------------------------------------
    if args.message:
        outputs = []
        for msg in args.message:
            out = type_message(machine, _prepare(msg, args.clean))
            debug.logger.info("%s = %s", msg, out)
            outputs.append(_show(out, args.group))
        print(" ".join(outputs))
        return EXIT_OK

    # interactive REPL ---------------------------------------------------
    print("Type blank line to quit.")
    while True:
        try:
            txt = input("\nMessage: ")
        except EOFError:
            break
        if not txt.strip():
            break
        machine.set_rotor_positions(settings.positions)    # back to the message key
        try:
            out = type_message(machine, _prepare(txt, args.clean))
        except OperationalError as exc:
            print(f"❌  {exc}")
            continue
        print(_show(out, args.group))
    return EXIT_OK


def list_wheels(args: argparse.Namespace) -> int:
    print("Rotors:    ", " ".join(rotor_names()))
    print("Reflectors:", " ".join(reflector_names()))
    return EXIT_OK


# ────────────────────────────────────────────────────────────────────────
#  3. CLI helpers
# ────────────────────────────────────────────────────────────────────────


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="enigma",
        description="An Enigma I (German Army, December 1938) simulator.",
    )
    p.add_argument("--debug", action="store_true", help="Trace every component to the log")
    p.add_argument("--log-file", metavar="FILE", help="Also write the debug log to FILE")
    sub = p.add_subparsers(dest="command", required=True)

    c = sub.add_parser(
        "crypt",
        help="Encrypt or decrypt a message",
        description="Encrypting and decrypting are the same operation on an Enigma: "
        "set the machine up as the code book says and type the message.",
    )
    c.add_argument("message", nargs="*", help="Message(s) to type. If omitted, an interactive REPL starts.")
    c.add_argument("--reflector", help=f"Reflector called for by the code book. Options are {reflector_names()}")
    c.add_argument("--rotors", type=_csv, metavar="I,II,III",
                   help=f"The 3 rotors, left to right. Options are {rotor_names()}")
    c.add_argument("--ring-settings", dest="ring_settings", type=_csv, metavar="A,A,A",
                   help="Ring settings, left to right, as letters (A) or numbers (1)")
    c.add_argument("--plug-pairs", dest="plug_pairs", type=_csv, metavar="AB,CD",
                   help="Plugboard cables, e.g. 'AB,CD' connects A<->B and C<->D")
    c.add_argument("--positions", type=_csv, metavar="A,A,A",
                   help="Starting rotor positions, also known as the message key")
    c.add_argument("--config", metavar="FILE", help="Load machine settings from JSON; flags override it")
    c.add_argument("--save-config", dest="save_config", metavar="FILE", help="Write the settings used to JSON")
    c.add_argument("--interactive", action="store_true", help="Ask for the settings instead of reading flags")
    c.add_argument("--group", action="store_true", help="Print the output in 5-letter groups")
    c.add_argument("--clean", action="store_true", help="Drop characters that are not letters or spaces")
    c.set_defaults(func=crypt)

    ls = sub.add_parser("list", help="List the available rotors and reflectors")
    ls.set_defaults(func=list_wheels)
    return p


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    return build_parser().parse_args(argv)


# ────────────────────────────────────────────────────────────────────────
#  4. Main entry point
# ────────────────────────────────────────────────────────────────────────


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)

    debug.toggle_global(args.debug)
    if args.debug:
        Debug.configure(log_to=args.log_file)
        debug.enable_all()
    else:
        debug.disable_all()

    try:
        return args.func(args)
    except ConfigurationError as exc:
        print(f"enigma: error: {exc}", file=sys.stderr)
        return EXIT_CONFIG
    except OperationalError as exc:
        print(f"enigma: error: {exc}", file=sys.stderr)
        return EXIT_OPERATION


if __name__ == "__main__":
    sys.exit(main())
