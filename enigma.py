# enigma.py  ─────────────────────────────────────────────────────────
from __future__ import annotations

from collections.abc import Mapping, Sequence
from copy import deepcopy
from dataclasses import dataclass

from debug import Debug
from errors import ConfigurationError
from keyboard_and_plugboard import Keyboard, Plugboard, validate_plugboard
from rotor_and_reflector import ALPHABET, NUM_CONTACTS, Reflector, Rotor
from settings import MachineSettings
from utilities import lookup_reflector, lookup_rotor, parse_plug_pairs

debug = Debug()


@dataclass(slots=True)
class RotorSlot:
    """One place on the spindle: the wheel in it and how it is turned."""

    rotor: Rotor
    lr_mapping: tuple[int, ...]     # cached inverse, filled at install time
    ring_setting: int = 0           # 0-25, 'A' = 0
    rotation: int = 0               # 0-25, letter showing in the window

    @classmethod
    def install(cls, rotor: Rotor) -> "RotorSlot":
        return cls(rotor=rotor, lr_mapping=rotor.lr_mapping)

    def at_turnover(self) -> bool:
        return self.rotor.is_turnover(self.rotation)


def _add_rotation(rotation: int, ring_setting: int, contact: int) -> int:
    return (contact + rotation - ring_setting + NUM_CONTACTS) % NUM_CONTACTS


def _remove_rotation(rotation: int, ring_setting: int, contact: int) -> int:
    return (contact - rotation + ring_setting + 2 * NUM_CONTACTS) % NUM_CONTACTS


class Enigma:
    """
    An Enigma I: keyboard, plugboard, a spindle of rotors and a reflector.

    Setting up follows what an operator does with the code book: install the
    reflector and the rotors, set the rings, plug the cables, then turn the
    rotors to the message key. Installing rotors puts every ring and every
    rotor back to 'A'.

    A machine is not thread-safe; press_key() both reads and turns the rotors.
    Rotor and Reflector objects are immutable and can be shared freely.
    """

    def __init__(
        self,
        rotors: Sequence[Rotor] | None = None,
        reflector: Reflector | None = None,
        plugboard: Plugboard | None = None,
    ) -> None:
        self.keyboard = Keyboard()
        self.slots: list[RotorSlot] = []
        self.reflector: Reflector | None = None
        self.plugboard: Plugboard = Plugboard()

        if rotors is not None:
            self.install_rotors(rotors)
        if reflector is not None:
            self.install_reflector(reflector)
        if plugboard is not None:
            self.set_plugboard(plugboard)

    @classmethod
    def from_settings(
        cls,
        settings: MachineSettings,
        rotors: Mapping[str, Rotor] | None = None,
        reflectors: Mapping[str, Reflector] | None = None,
    ) -> "Enigma":
        """Build a machine from a code-book entry, looking wheels up by name."""
        settings.validate()
        machine = cls()
        machine.install_reflector(lookup_reflector(settings.reflector, reflectors))
        machine.install_rotors([lookup_rotor(name, rotors) for name in settings.rotors])
        machine.set_ring_settings(settings.ring_settings)
        machine.set_plugboard(parse_plug_pairs(settings.plug_pairs))
        machine.set_rotor_positions(settings.positions)
        debug.log("config", "machine ready: %r", machine)
        return machine

    # ── wheel & setting helpers ─────────────────────────────────

    def install_rotors(self, rotors: Sequence[Rotor]) -> None:
        """Place *rotors* (left to right) on the spindle, rings and rotors at 'A'."""
        rotors = list(rotors)
        if not rotors:
            raise ConfigurationError("at least one rotor must be installed")
        for rotor in rotors:
            if not isinstance(rotor, Rotor):
                raise ConfigurationError(f"{rotor!r} is not a Rotor")
        self.slots = [RotorSlot.install(rotor) for rotor in rotors]
        debug.log("config", "installed %d rotors", len(self.slots))

    def install_reflector(self, reflector: Reflector) -> None:
        if not isinstance(reflector, Reflector):
            raise ConfigurationError(f"{reflector!r} is not a Reflector")
        self.reflector = reflector
        debug.log("config", "installed %r", reflector)

    def set_plugboard(self, plugboard: Plugboard | None) -> None:
        """Replace the whole plugboard; the machine keeps its own copy."""
        if plugboard is None:
            plugboard = Plugboard()
        if not isinstance(plugboard, Plugboard):
            raise ConfigurationError(f"{plugboard!r} is not a Plugboard")
        validate_plugboard(plugboard.mapping)
        self.plugboard = deepcopy(plugboard)
        debug.log("config", "plugboard %r", self.plugboard)

    def set_ring_settings(self, settings: Sequence[str]) -> None:
        """Apply ring offsets, leftmost rotor first, 'A' meaning no offset."""
        offsets = self._letters_to_offsets(settings, "ring settings")
        for slot, offset in zip(self.slots, offsets):
            slot.ring_setting = offset
        debug.log("config", "ring settings %s", self.ring_settings())

    def set_rotor_positions(self, positions: Sequence[str]) -> None:
        """Turn each rotor to its window letter, leftmost first (the message key)."""
        offsets = self._letters_to_offsets(positions, "rotor positions")
        for slot, offset in zip(self.slots, offsets):
            slot.rotation = offset
        debug.log("config", "rotor positions %s", self.rotor_positions())

    def rotor_positions(self) -> str:
        return "".join(ALPHABET[slot.rotation] for slot in self.slots)

    def ring_settings(self) -> str:
        return "".join(ALPHABET[slot.ring_setting] for slot in self.slots)

    def _letters_to_offsets(self, letters: Sequence[str], what: str) -> list[int]:
        letters = list(letters)
        if len(letters) != len(self.slots):
            raise ConfigurationError(
                f"{len(self.slots)} rotors installed, but got {len(letters)} {what}: {letters}"
            )
        offsets = []
        for letter in letters:
            if not (isinstance(letter, str) and len(letter) == 1 and letter in ALPHABET):
                raise ConfigurationError(f"invalid {what} value {letter!r}: expected a letter A-Z")
            offsets.append(ALPHABET.index(letter))
        return offsets

    # ── stepping logic  ─────────────────────────────────────────

    def _step_rotors(self) -> None:
        """
        Advance the rotors for one key press. A rotor turns when
          - it is the rightmost rotor, or
          - its right neighbour sits on a notch and pushes it, or
          - it sits on a notch itself and has a rotor to its left to push;
            the pawl then drags it along, which is the middle rotor's
            double step.
        Every decision looks at the positions from before the key press.
        """
        last = len(self.slots) - 1
        turns = [
            i == last
            or self.slots[i + 1].at_turnover()
            or (i > 0 and self.slots[i].at_turnover())
            for i in range(len(self.slots))
        ]
        for slot, turn in zip(self.slots, turns):
            if turn:
                slot.rotation = (slot.rotation + 1) % NUM_CONTACTS

    # ── encipher one letter  ────────────────────────────────────

    def press_key(self, letter: str) -> str:
        """Press *letter* on the keyboard and return the lamp that lights."""
        if not self.slots:
            raise ConfigurationError("no rotors installed")
        if self.reflector is None:
            raise ConfigurationError("no reflector installed")

        # reject bad keys before anything turns
        self.keyboard.forward(letter)

        self._step_rotors()
        debug.log("stepping", "rotor positions %s", self.rotor_positions())

        # plugboard, then the stator turns letters into contacts
        signal = self.keyboard.forward(self.plugboard.map_letter(letter))

        # rotors, right to left
        for slot in reversed(self.slots):
            signal = _add_rotation(slot.rotation, slot.ring_setting, signal)
            signal = slot.rotor.rl_mapping[signal]
            signal = _remove_rotation(slot.rotation, slot.ring_setting, signal)

        signal = self.reflector.reflect(signal)

        # rotors, left to right
        for slot in self.slots:
            signal = _add_rotation(slot.rotation, slot.ring_setting, signal)
            signal = slot.lr_mapping[signal]
            signal = _remove_rotation(slot.rotation, slot.ring_setting, signal)

        out_ch = self.plugboard.map_letter(self.keyboard.backward(signal))
        debug.log("encipher", "%s->%s", letter, out_ch)
        return out_ch

    def __repr__(self) -> str:
        return (
            f"<Enigma rotors={len(self.slots)} rings={self.ring_settings()} "
            f"positions={self.rotor_positions()} {self.plugboard!r}>"
        )
