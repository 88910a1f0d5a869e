# settings.py
from __future__ import annotations

import json
from collections.abc import Sequence
from dataclasses import asdict, dataclass, field
from pathlib import Path

from debug import Debug
from errors import ConfigurationError
from rotor_and_reflector import ALPHABET, NUM_CONTACTS

debug = Debug()

ROTOR_COUNT = 3     # the Enigma I spindle takes three rotors
LIST_KEYS = {"rotors", "ring_settings", "plug_pairs", "positions"}
REQUIRED_KEYS = {"reflector"} | LIST_KEYS


# ────────────────────────────────────────────────────────────────────────
#  0. Token parsing
# ────────────────────────────────────────────────────────────────────────


def parse_ring_setting(token: str | int) -> str:
    """Return the ring letter for a numeral 1-26 (as the code books print
    them) or a single letter A-Z."""
    if isinstance(token, int):
        value = token
    else:
        text = str(token).strip().upper()
        if not text.isdecimal():
            if len(text) != 1 or text not in ALPHABET:
                raise ConfigurationError(f"Got invalid ring setting character: {token!r}")
            return text
        value = int(text)
    if not 1 <= value <= NUM_CONTACTS:
        raise ConfigurationError(f"Got invalid ring setting number: {value}")
    return ALPHABET[value - 1]


def parse_position(token: str) -> str:
    """Return the window letter for a rotor starting position."""
    text = str(token).strip().upper()
    if len(text) != 1 or text not in ALPHABET:
        raise ConfigurationError(
            f"Every rotor position should be a single letter, like 'A'. Got {token!r}"
        )
    return text


# ────────────────────────────────────────────────────────────────────────
#  1. Code-book entry
# ────────────────────────────────────────────────────────────────────────


@dataclass(slots=True)
class MachineSettings:
    """Everything the code book says about setting up one Enigma I."""

    reflector: str = "B"
    rotors: Sequence[str] = ("I", "II", "III")
    ring_settings: Sequence[str | int] = ("A", "A", "A")
    plug_pairs: Sequence[str] = field(default_factory=tuple)
    positions: Sequence[str] = ("A", "A", "A")

    def __post_init__(self) -> None:
        self.reflector = str(self.reflector).strip().upper()
        self.rotors = tuple(str(r).strip().upper() for r in self.rotors)
        self.ring_settings = tuple(parse_ring_setting(r) for r in self.ring_settings)
        self.plug_pairs = tuple(str(p).strip().upper() for p in self.plug_pairs)
        self.positions = tuple(parse_position(p) for p in self.positions)
        self.validate()

    def validate(self) -> None:
        if len(self.rotors) != ROTOR_COUNT:
            raise ConfigurationError(
                f"This Enigma needs {ROTOR_COUNT} rotors, but got rotors {list(self.rotors)}"
            )
        if len(self.ring_settings) != ROTOR_COUNT:
            raise ConfigurationError(
                f"This Enigma needs {ROTOR_COUNT} ring settings. "
                f"Got ring settings {list(self.ring_settings)}"
            )
        if len(self.positions) != ROTOR_COUNT:
            raise ConfigurationError(
                f"This Enigma needs {ROTOR_COUNT} rotor positions, got {list(self.positions)}"
            )
        for pair in self.plug_pairs:
            if len(pair) != 2:
                raise ConfigurationError(
                    f"All plug pairs must be 2 letters, such as 'AB'. Got: {pair!r}"
                )

    def to_dict(self) -> dict:
        return {key: list(value) if isinstance(value, tuple) else value
                for key, value in asdict(self).items()}


# ────────────────────────────────────────────────────────────────────────
#  2. JSON files
# ────────────────────────────────────────────────────────────────────────


def load_config(path: str | Path) -> MachineSettings:
    try:
        data = json.loads(Path(path).read_text(encoding="utf-8"))
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigurationError(f"Could not read config {str(path)!r}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config {str(path)!r} must hold a JSON object")
    missing = REQUIRED_KEYS - data.keys()
    if missing:
        raise ConfigurationError(f"Missing keys in config: {', '.join(sorted(missing))}")
    if not isinstance(data["reflector"], str):
        raise ConfigurationError(f"Config key 'reflector' must be a string, got {data['reflector']!r}")
    for key in sorted(LIST_KEYS):
        if not isinstance(data[key], list):
            raise ConfigurationError(f"Config key {key!r} must be a list, got {data[key]!r}")
    settings = MachineSettings(**{key: data[key] for key in REQUIRED_KEYS})
    debug.log("config", "loaded %s from %s", settings, path)
    return settings


def save_config(settings: MachineSettings, path: str | Path) -> None:
    Path(path).write_text(json.dumps(settings.to_dict(), indent=2), encoding="utf-8")
    debug.log("config", "wrote %s", path)
