import unittest

from enigma import Enigma
from errors import OperationalError
from typist import group_letters, type_message
from utilities import reflector_dict, rotor_dict


class TypeMessageTest(unittest.TestCase):
    def setUp(self):
        self.enigma = Enigma(
            [rotor_dict["I"], rotor_dict["II"], rotor_dict["III"]],
            reflector_dict["B"],
        )

    def test_spaces_pass_through_without_a_key_press(self):
        self.assertEqual(type_message(self.enigma, "AA A  AA"), "BD Z  GO")
        self.assertEqual(self.enigma.rotor_positions(), "AAF")

    def test_only_spaces(self):
        self.assertEqual(type_message(self.enigma, "   "), "   ")
        self.assertEqual(self.enigma.rotor_positions(), "AAA")
        self.assertEqual(type_message(self.enigma, ""), "")

    def test_other_symbols_rejected(self):
        with self.assertRaises(OperationalError):
            type_message(self.enigma, "AB,C")


class GroupLettersTest(unittest.TestCase):
    def test_groups_of_five(self):
        self.assertEqual(group_letters("FEINDLIQEINFANT"), "FEIND LIQEI NFANT")
        self.assertEqual(group_letters("FEI NDLI"), "FEIND LI")
        self.assertEqual(group_letters("ABCDEFG", block=3), "ABC DEF G")
        self.assertEqual(group_letters(""), "")


if __name__ == "__main__":
    unittest.main()
