# utilities.py
from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from typing import Callable, Dict, List

from errors import ConfigurationError
from keyboard_and_plugboard import Plugboard
from rotor_and_reflector import ALPHABET, Reflector, Rotor, make_reflector, make_rotor
from settings import ROTOR_COUNT, MachineSettings, parse_position, parse_ring_setting

# ────────────────────────────────────────────────────────────────────────
#  0. Regex & trivial helpers
# ────────────────────────────────────────────────────────────────────────

_roman_re = re.compile(r"^[IVX]+$")
_ROMAN = {"I": 1, "V": 5, "X": 10}


def ask(prompt: str) -> str:
    """Read & normalise an operator’s response (uppercase, trimmed)."""
    return input(prompt).strip().upper()


def _roman_value(numeral: str) -> int:
    total = 0
    for ch, nxt in zip(numeral, numeral[1:] + " "):
        value = _ROMAN[ch]
        total += -value if _ROMAN.get(nxt, 0) > value else value
    return total


def _nat_key(name: str):
    """Sort rotor names by their numeral so I, II, … IX, X come in order."""
    if _roman_re.match(name):
        return (0, _roman_value(name), name)
    return (1, 0, name)


# ────────────────────────────────────────────────────────────────────────
#  1. Wheel database
# ────────────────────────────────────────────────────────────────────────

# Enigma I / M3 rotors ---------------------------------------------------
base_rotors: Dict[str, Rotor] = {
    "I":    make_rotor("EKMFLGDQVZNTOWYHXUSPAIBRCJ", "Q"),
    "II":   make_rotor("AJDKSIRUXBLHWTMCQGZNPYFVOE", "E"),
    "III":  make_rotor("BDFHJLCPRTXVZNYEIWGAKMUSQO", "V"),
    "IV":   make_rotor("ESOVPZJAYQUIRHXLNFTGKDCMWB", "J"),
    "V":    make_rotor("VZBRGITYUPSDNHLXAWMJQOFECK", "Z"),
    "VI":   make_rotor("JPGVOUMFYQBENHZRDKASXLICTW", "ZM"),
    "VII":  make_rotor("NZJHGRCXMYSWBOUFAIVLPEKQDT", "ZM"),
    "VIII": make_rotor("FKQHTLXOCBJSPDZRAMEWNIUYGV", "ZM"),
}

# Reflectors -------------------------------------------------------------
base_reflectors: Dict[str, Reflector] = {
    "A": make_reflector("EJMZALYXVBWFCRQUONTSPIKHGD"),
    "B": make_reflector("YRUHQSLDPXNGOKMIEBFZCWVJAT"),
    "C": make_reflector("FVPJIAOYEDRZXWGCTKUQSBNMHL"),
}

rotor_dict: Dict[str, Rotor] = {}
for name, obj in base_rotors.items():
    rotor_dict[name] = rotor_dict[name.lower()] = obj  # uppercase + alias

reflector_dict: Dict[str, Reflector] = {}
for name, obj in base_reflectors.items():
    reflector_dict[name] = reflector_dict[name.lower()] = obj


def rotor_names(rotors: Mapping[str, Rotor] | None = None) -> List[str]:
    rotors = rotor_dict if rotors is None else rotors
    return sorted({n for n in rotors if n.isupper()}, key=_nat_key)


def reflector_names(reflectors: Mapping[str, Reflector] | None = None) -> List[str]:
    reflectors = reflector_dict if reflectors is None else reflectors
    return sorted({n for n in reflectors if n.isupper()})


def lookup_rotor(name: str, rotors: Mapping[str, Rotor] | None = None) -> Rotor:
    rotors = rotor_dict if rotors is None else rotors
    try:
        return rotors[name]
    except KeyError:
        raise ConfigurationError(
            f"Rotor {name!r} does not exist; options are {rotor_names(rotors)}"
        ) from None


def lookup_reflector(name: str, reflectors: Mapping[str, Reflector] | None = None) -> Reflector:
    reflectors = reflector_dict if reflectors is None else reflectors
    try:
        return reflectors[name]
    except KeyError:
        raise ConfigurationError(
            f"Reflector {name!r} does not exist; options are {reflector_names(reflectors)}"
        ) from None


# ────────────────────────────────────────────────────────────────────────
#  2. Plugboard & text helpers
# ────────────────────────────────────────────────────────────────────────


def parse_plug_pairs(tokens: Iterable[str]) -> Plugboard:
    """Build a Plugboard from tokens such as ["AB", "CD"]."""
    plugboard = Plugboard()
    for token in tokens:
        pair = token.strip().upper()
        if len(pair) != 2:
            raise ConfigurationError(
                f"All plug pairs must be 2 letters, such as 'AB'. Got: {token!r}"
            )
        try:
            plugboard.add_pair(pair[0], pair[1])
        except ConfigurationError as exc:
            raise ConfigurationError(f"Could not add plug pair {pair!r}: {exc}") from exc
    return plugboard


def preprocess_message(msg: str) -> str:
    """Upper‑case, keep spaces, and drop everything that is not on the keyboard."""
    text = msg.upper()
    return "".join(ch for ch in text if ch in ALPHABET or ch == " ")


# ────────────────────────────────────────────────────────────────────────
#  3. Interactive question helpers
# ────────────────────────────────────────────────────────────────────────


def _prompt_until(prompt: str, parse: Callable[[str], object], complaint: str):
    while True:
        raw = ask(prompt)
        try:
            return parse(raw)
        except ConfigurationError as exc:
            print(f"❌  {complaint} ({exc})")


def get_rotor_selection(count: int = ROTOR_COUNT, rotors: Mapping[str, Rotor] | None = None) -> List[str]:
    rotors = rotor_dict if rotors is None else rotors
    print("\nAvailable Rotors:", " ".join(rotor_names(rotors)))
    while True:
        sel = ask(f"Select {count} rotors in order: ").split()
        if len(sel) == count and all(r in rotors for r in sel):
            return sel
        print(f"❌  Need exactly {count} valid rotor names.")


def get_reflector_selection(reflectors: Mapping[str, Reflector] | None = None) -> str:
    reflectors = reflector_dict if reflectors is None else reflectors
    print("\nAvailable Reflectors: ", ", ".join(reflector_names(reflectors)))
    while True:
        ref = ask("Select reflector: ")
        if ref in reflectors:
            return ref
        print("❌  Not a valid reflector.")


def get_plugboard() -> List[str]:
    """Return a list of *validated* plugboard pairs (e.g. ["AB", "CD"])."""

    def parse(raw: str) -> List[str]:
        pairs = raw.split()
        parse_plug_pairs(pairs)
        return pairs

    print("\nPlugboard pairs (e.g. AB CD EF):")
    return _prompt_until("Pairs (Enter for none): ", parse, "Plug pairs rejected.")


def get_ring_settings(count: int = ROTOR_COUNT) -> List[str]:
    def parse(raw: str) -> List[str]:
        items = raw.split()
        if len(items) != count:
            raise ConfigurationError(f"got {len(items)} values")
        return [parse_ring_setting(item) for item in items]

    return _prompt_until(
        f"{count} ring settings (1-26 or A-Z): ", parse,
        f"Need exactly {count} ring settings.",
    )


def get_positions(count: int = ROTOR_COUNT) -> List[str]:
    def parse(raw: str) -> List[str]:
        letters = list(raw.replace(" ", ""))
        if len(letters) != count:
            raise ConfigurationError(f"got {len(letters)} letters")
        return [parse_position(letter) for letter in letters]

    return _prompt_until(
        f"Rotor positions ({count} letters): ", parse,
        f"Need exactly {count} letters A-Z.",
    )


# ––– orchestration –––––––––––––––––––––––––––––––––––––––––––––––

def get_machine_settings() -> MachineSettings:
    """Collect the day's settings from the operator, in code-book order."""
    reflector = get_reflector_selection()
    rotors = get_rotor_selection()
    rings = get_ring_settings()
    plugs = get_plugboard()
    positions = get_positions()
    return MachineSettings(
        reflector=reflector,
        rotors=rotors,
        ring_settings=rings,
        plug_pairs=plugs,
        positions=positions,
    )


__all__ = [
    "rotor_dict",
    "reflector_dict",
    "rotor_names",
    "reflector_names",
    "lookup_rotor",
    "lookup_reflector",
    "parse_plug_pairs",
    "preprocess_message",
    "get_machine_settings",
]
