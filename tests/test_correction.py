from __future__ import annotations

import unittest

from odovision.services.correction import correct_cluster, correct_text
from odovision.services.extraction import extract_numbers


class TestCharacterCorrection(unittest.TestCase):
    def test_clusters_without_digits_are_unchanged(self) -> None:
        for label in ["ODO", "MILES", "TRIP", "Odo", "km", "SOS", "|"]:
            self.assertEqual(correct_text(label), label)

    def test_label_yields_no_numbers(self) -> None:
        self.assertEqual(extract_numbers(correct_text("MILES")), [])
        self.assertEqual(extract_numbers(correct_text("ODO")), [])

    def test_zero_misread_in_numeric_cluster(self) -> None:
        self.assertEqual(correct_text("5O000"), "50000")

    def test_whole_cluster_is_corrected_once_a_digit_is_present(self) -> None:
        self.assertEqual(correct_text("Z3S977"), "235977")

    def test_substitution_table(self) -> None:
        cases = {
            "O": "0", "o": "0", "Q": "0", "D": "0",
            "l": "1", "I": "1", "i": "1", "|": "1",
            "Z": "2", "z": "2",
            "S": "5", "s": "5",
            "G": "6", "b": "6",
            "B": "8",
            "g": "9", "q": "9",
        }
        for misread, digit in cases.items():
            with self.subTest(misread=misread):
                self.assertEqual(correct_cluster(f"4{misread}"), f"4{digit}")

    def test_separators_and_labels_are_preserved(self) -> None:
        self.assertEqual(correct_text("ODO 5O,0O0"), "ODO 50,000")
        self.assertEqual(correct_text("TRIP A: 1Z.4"), "TRIP A: 12.4")

    def test_unit_suffix_glued_to_reading_is_kept(self) -> None:
        self.assertEqual(correct_text("52mi"), "52mi")
        self.assertEqual(correct_text("Z3S977km"), "235977km")
        self.assertEqual(correct_text("5O000 MILES"), "50000 MILES")

    def test_empty_text(self) -> None:
        self.assertEqual(correct_text(""), "")


if __name__ == "__main__":
    unittest.main()
