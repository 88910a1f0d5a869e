import io
import json
import re
import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from pathlib import Path
from unittest import mock

from debug import Debug
from main import EXIT_CONFIG, EXIT_OK, EXIT_OPERATION, main

CIPHERTEXT_1930 = (
    "GCDSE AHUGW TQGRK VLFGX UCALX VYMIG MMNMF DXTGN VHVRM "
    "MEVOU YFZSL RHDRR XFJWC FHUHM UNZEF RDISI KBGPM YVXUZ"
)
PLAINTEXT_1930 = (
    "FEIND LIQEI NFANT ERIEK OLONN EBEOB AQTET XANFA NGSUE "
    "DAUSG ANGBA ERWAL DEXEN DEDRE IKMOS TWAER TSNEU STADT"
)
SETTINGS_1930 = [
    "--reflector", "A",
    "--rotors", "II,I,III",
    "--ring-settings", "24,13,22",
    "--plug-pairs", "AM,FI,NV,PS,TU,WZ",
    "--positions", "A,B,L",
]


class MainTest(unittest.TestCase):
    def run_main(self, argv, answers=None):
        out, err = io.StringIO(), io.StringIO()
        with redirect_stdout(out), redirect_stderr(err):
            if answers is None:
                code = main(argv)
            else:
                with mock.patch("builtins.input", side_effect=answers):
                    code = main(argv)
        return code, out.getvalue(), err.getvalue()

    def tearDown(self):
        Debug().disable_all()
        Debug().toggle_global(True)

    def test_defaults(self):
        code, out, _ = self.run_main(["crypt", "AAAAA"])
        self.assertEqual(code, EXIT_OK)
        self.assertEqual(out, "BDZGO\n")

    def test_lower_case_input(self):
        _, out, _ = self.run_main(["crypt", "aaaaa"])
        self.assertEqual(out, "BDZGO\n")

    def test_numeric_ring_settings(self):
        _, out, _ = self.run_main(["crypt", "--ring-settings", "2,2,2", "AAAAA"])
        self.assertEqual(out, "EWTYX\n")

    def test_plugboard(self):
        _, out, _ = self.run_main(["crypt", "--plug-pairs", "AB,CD", "AAAAA"])
        self.assertEqual(out, "BJLDS\n")

    def test_historical_message(self):
        code, out, _ = self.run_main(["crypt", *SETTINGS_1930, CIPHERTEXT_1930])
        self.assertEqual(code, EXIT_OK)
        self.assertEqual(out, PLAINTEXT_1930 + "\n")

    def test_messages_share_one_machine(self):
        _, apart, _ = self.run_main(["crypt", "HELLO", "WORLD"])
        _, together, _ = self.run_main(["crypt", "HELLO WORLD"])
        self.assertEqual(apart, together)

    def test_group_and_clean(self):
        _, out, _ = self.run_main(["crypt", "--group", "--clean", "a-a a,a!a a a"])
        self.assertRegex(out, r"^BDZGO [A-Z]{2}\n$")

    def test_bad_character(self):
        code, out, err = self.run_main(["crypt", "AB1"])
        self.assertEqual(code, EXIT_OPERATION)
        self.assertEqual(out, "")
        self.assertIn("enigma: error:", err)

    def test_configuration_errors(self):
        cases = [
            ["crypt", "--rotors", "I,II", "A"],
            ["crypt", "--rotors", "I,II,IX", "A"],
            ["crypt", "--reflector", "D", "A"],
            ["crypt", "--ring-settings", "A,B,27", "A"],
            ["crypt", "--positions", "A,B", "A"],
            ["crypt", "--plug-pairs", "AB,BC", "A"],
            ["crypt", "--plug-pairs", "ABC", "A"],
            ["crypt", "--config", "/nonexistent/enigma.json", "A"],
            ["crypt", "--ring-settings", "²,A,A", "A"],
        ]
        for argv in cases:
            with self.subTest(argv=argv):
                code, out, err = self.run_main(argv)
                self.assertEqual(code, EXIT_CONFIG)
                self.assertEqual(out, "")
                self.assertIn("enigma: error:", err)

    def test_config_file_and_overrides(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "day.json"
            code, out, _ = self.run_main(
                ["crypt", *SETTINGS_1930, "--save-config", str(path), CIPHERTEXT_1930]
            )
            self.assertEqual(out, PLAINTEXT_1930 + "\n")
            self.assertEqual(json.loads(path.read_text(encoding="utf-8"))["ring_settings"], ["X", "M", "V"])

            _, out, _ = self.run_main(["crypt", "--config", str(path), CIPHERTEXT_1930])
            self.assertEqual(out, PLAINTEXT_1930 + "\n")

            # a flag wins over the file
            _, out, _ = self.run_main(["crypt", "--config", str(path), "--positions", "A,A,A", CIPHERTEXT_1930])
            self.assertNotEqual(out, PLAINTEXT_1930 + "\n")

    def test_badly_typed_config_file(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "day.json"
            path.write_text(json.dumps({
                "reflector": "B", "rotors": 3, "ring_settings": ["A", "A", "A"],
                "plug_pairs": None, "positions": ["A", "A", "A"],
            }), encoding="utf-8")
            code, out, err = self.run_main(["crypt", "--config", str(path), "A"])
        self.assertEqual(code, EXIT_CONFIG)
        self.assertEqual(out, "")
        self.assertIn("enigma: error:", err)

    def test_repl_rewinds_to_message_key(self):
        code, out, _ = self.run_main(["crypt"], answers=["AAAAA", "AAAAA", "A1", ""])
        self.assertEqual(code, EXIT_OK)
        self.assertEqual(out.count("BDZGO"), 2)
        self.assertIn("❌", out)

    def test_repl_stops_at_end_of_input(self):
        code, out, _ = self.run_main(["crypt"], answers=EOFError())
        self.assertEqual(code, EXIT_OK)

    def test_interactive_settings(self):
        answers = ["B", "I II III", "A A A", "AB CD", "AAA", "AAAAA", ""]
        code, out, _ = self.run_main(["crypt", "--interactive"], answers=answers)
        self.assertEqual(code, EXIT_OK)
        self.assertIn("BJLDS", out)

    def test_list(self):
        code, out, _ = self.run_main(["list"])
        self.assertEqual(code, EXIT_OK)
        self.assertIn("I II III IV V VI VII VIII", out)
        self.assertRegex(out, re.compile(r"^Reflectors: A B C$", re.M))

    def test_debug_output(self):
        Debug._root_configured = True      # keep the test from installing handlers
        try:
            with self.assertLogs("ENIGMA", level="DEBUG") as logs:
                code, out, _ = self.run_main(["--debug", "crypt", "A"])
        finally:
            Debug._root_configured = False
        self.assertEqual(code, EXIT_OK)
        self.assertEqual(out, "B\n")
        self.assertTrue(any("[ENCIPHER] A->B" in line for line in logs.output))
        self.assertTrue(any("A = B" in line for line in logs.output))


if __name__ == "__main__":
    unittest.main()
