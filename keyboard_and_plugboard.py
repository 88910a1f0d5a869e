# keyboard_and_plugboard.py
from __future__ import annotations

from collections.abc import Iterable, Mapping

from debug import Debug
from errors import ConfigurationError, OperationalError
from rotor_and_reflector import ALPHABET

debug = Debug()


# ── Keyboard ──────────────────────────────────────────────────────
class Keyboard:
    """Keys, lamps and the straight-wired stator between them and the rotors."""

    def __init__(self, alphabet: str = ALPHABET) -> None:
        self.alphabet: str = alphabet
        self.alpha_to_index: dict[str, int] = {
            ch: i for i, ch in enumerate(alphabet)
        }

    # letter → contact
    def forward(self, letter: str) -> int:
        try:
            contact = self.alpha_to_index[letter]
        except (KeyError, TypeError):
            raise OperationalError(
                f"Invalid key {letter!r}: only the letters A-Z are on the keyboard."
            ) from None
        debug.log("keyboard", "%s->%d", letter, contact)
        return contact

    # contact → letter
    def backward(self, signal: int) -> str:
        if not (0 <= signal < len(self.alphabet)):
            hi = len(self.alphabet) - 1
            raise OperationalError(f"Signal {signal} out of range 0–{hi}")
        return self.alphabet[signal]


# ── Plugboard ─────────────────────────────────────────────────────
def validate_plugboard(mapping: Mapping[str, str]) -> None:
    """Raise ConfigurationError unless *mapping* swaps letters in pairs, no letter with itself."""
    for a, b in mapping.items():
        for ch in (a, b):
            if not (isinstance(ch, str) and len(ch) == 1 and ch in ALPHABET):
                raise ConfigurationError(f"invalid plugboard {mapping}: {ch!r} is not a letter A-Z")
        if a == b:
            raise ConfigurationError(f"invalid plugboard {mapping}: {a!r} is plugged to itself")
        if mapping.get(b) != a:
            raise ConfigurationError(
                f"invalid plugboard {mapping}: {a!r} maps to {b!r}, "
                f"but {b!r} maps to {mapping.get(b, b)!r}"
            )


class Plugboard:
    """
    Cables swapping pairs of letters before and after the rotors.
    Letters without a cable pass straight through, so an empty
    Plugboard behaves exactly like having none.
    """

    def __init__(self, pairs: Iterable[str | tuple[str, str]] = ()) -> None:
        self.mapping: dict[str, str] = {}

        for raw in pairs:
            # normalise to (a, b)
            try:
                pair = tuple(raw)
            except TypeError:
                raise ConfigurationError(f"Pair {raw!r} must be exactly 2 letters") from None
            if len(pair) != 2:
                raise ConfigurationError(f"Pair {raw!r} must be exactly 2 letters")
            a, b = pair
            self.add_pair(a, b)

    def add_pair(self, left: str, right: str) -> None:
        """Connect *left* and *right*; the order of the two does not matter."""
        for ch in (left, right):
            if not (isinstance(ch, str) and len(ch) == 1 and ch in ALPHABET):
                raise ConfigurationError(f"Plug {ch!r} is not a letter A-Z")
        if left == right:
            raise ConfigurationError(f"Plugboard cannot map a letter to itself: {left}")
        if left in self.mapping or right in self.mapping:
            dup = left if left in self.mapping else right
            raise ConfigurationError(
                f"Letter {dup!r} already plugged to {self.mapping[dup]!r}"
            )

        # passed validation → commit swap
        self.mapping[left], self.mapping[right] = right, left
        debug.log("plugboard", "added %s<->%s", left, right)

    def map_letter(self, letter: str) -> str:
        mapped = self.mapping.get(letter, letter)
        debug.log("plugboard", "%s->%s", letter, mapped)
        return mapped

    def pairs(self) -> list[str]:
        return sorted(a + b for a, b in self.mapping.items() if a < b)

    def __len__(self) -> int:
        return len(self.mapping) // 2

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Plugboard):
            return NotImplemented
        return self.mapping == other.mapping

    # nicety for debugging
    def __repr__(self) -> str:
        return f"<Plugboard {' '.join(self.pairs())}>"
