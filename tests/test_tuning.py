import unittest

from violin_tuner.tuner_types import PitchEstimate, TargetString, TuningStatus
from violin_tuner.tuning import (
    DEFAULT_TARGETS,
    TuningThresholds,
    calculate_cents,
    classify,
    find_closest_string,
    find_target,
    format_hz,
    targets_from_mapping,
)


class TestCalculateCents(unittest.TestCase):
    def test_octave_and_unison(self):
        self.assertAlmostEqual(calculate_cents(880.0, 440.0), 1200.0)
        self.assertAlmostEqual(calculate_cents(220.0, 440.0), -1200.0)
        self.assertEqual(calculate_cents(440.0, 440.0), 0.0)

    def test_sign_is_antisymmetric(self):
        for measured, target in [(445.0, 440.0), (190.0, 196.0), (300.0, 293.66)]:
            self.assertAlmostEqual(
                calculate_cents(measured, target), -calculate_cents(target, measured)
            )

    def test_semitone(self):
        self.assertAlmostEqual(calculate_cents(440.0 * 2 ** (1 / 12), 440.0), 100.0)

    def test_fractional_cents_are_recovered(self):
        for k in [-1234.5, -37.25, -4.99, -0.1, 0.3, 2.5, 17.75, 333.3, 1999.9]:
            for target in [196.0, 293.66, 659.26]:
                up = target * 2 ** (k / 1200)
                down = target * 2 ** (-k / 1200)
                self.assertAlmostEqual(calculate_cents(up, target), k, places=6)
                self.assertAlmostEqual(calculate_cents(down, target), -k, places=6)

    def test_non_positive_frequencies(self):
        self.assertEqual(calculate_cents(0.0, 440.0), 0.0)
        self.assertEqual(calculate_cents(440.0, 0.0), 0.0)


class TestClassify(unittest.TestCase):
    def test_limits_belong_to_the_better_category(self):
        self.assertEqual(classify(5.0), TuningStatus.IN_TUNE)
        self.assertEqual(classify(-5.0), TuningStatus.IN_TUNE)
        self.assertEqual(classify(5.0001), TuningStatus.SLIGHTLY_SHARP)
        self.assertEqual(classify(-5.0001), TuningStatus.SLIGHTLY_FLAT)
        self.assertEqual(classify(15.0), TuningStatus.SLIGHTLY_SHARP)
        self.assertEqual(classify(15.01), TuningStatus.SHARP)
        self.assertEqual(classify(-25.0), TuningStatus.FLAT)
        self.assertEqual(classify(25.01), TuningStatus.VERY_SHARP)
        self.assertEqual(classify(-25.01), TuningStatus.VERY_FLAT)

    def test_zero_is_in_tune(self):
        self.assertEqual(classify(0.0), TuningStatus.IN_TUNE)

    def test_severity_grows_with_deviation(self):
        previous = 0
        cents = 0.0
        while cents <= 100.0:
            for signed in (cents, -cents):
                severity = classify(signed).severity
                self.assertGreaterEqual(severity, previous)
            previous = classify(cents).severity
            cents += 0.5

    def test_direction(self):
        self.assertTrue(classify(10.0).is_sharp)
        self.assertTrue(classify(-10.0).is_flat)
        self.assertFalse(classify(0.0).is_sharp)
        self.assertFalse(classify(0.0).is_flat)

    def test_custom_thresholds(self):
        thresholds = TuningThresholds(in_tune=2.0, slight=4.0, acceptable=8.0)
        self.assertEqual(classify(3.0, thresholds), TuningStatus.SLIGHTLY_SHARP)
        self.assertEqual(classify(-9.0, thresholds), TuningStatus.VERY_FLAT)

    def test_invalid_thresholds(self):
        with self.assertRaises(ValueError):
            TuningThresholds(in_tune=10.0, slight=5.0, acceptable=25.0)
        with self.assertRaises(ValueError):
            TuningThresholds(in_tune=-1.0)


class TestFindClosestString(unittest.TestCase):
    def test_open_strings(self):
        self.assertEqual(find_closest_string(198.0, DEFAULT_TARGETS).name, "G")
        self.assertEqual(find_closest_string(290.0, DEFAULT_TARGETS).name, "D")
        self.assertEqual(find_closest_string(445.0, DEFAULT_TARGETS).name, "A")
        self.assertEqual(find_closest_string(700.0, DEFAULT_TARGETS).name, "E")

    def test_distance_is_measured_in_cents(self):
        # 362 Hz is nearer 293.66 in Hz but nearer 440 in cents
        self.assertEqual(find_closest_string(362.0, DEFAULT_TARGETS).name, "A")

    def test_tie_goes_to_first_target(self):
        low = TargetString("low", 100.0)
        high = TargetString("high", 400.0)
        self.assertIs(find_closest_string(200.0, [low, high]), low)
        self.assertIs(find_closest_string(200.0, [high, low]), high)

    def test_no_match(self):
        self.assertIsNone(find_closest_string(0.0, DEFAULT_TARGETS))
        self.assertIsNone(find_closest_string(440.0, []))


class TestTargets(unittest.TestCase):
    def test_default_targets(self):
        self.assertEqual([t.name for t in DEFAULT_TARGETS], ["G", "D", "A", "E"])
        self.assertEqual(DEFAULT_TARGETS[0].display_name, "G (196 Hz)")
        self.assertEqual(DEFAULT_TARGETS[1].display_name, "D (293.7 Hz)")
        self.assertEqual(str(DEFAULT_TARGETS[2]), "A (440 Hz)")

    def test_targets_from_mapping_keeps_order(self):
        targets = targets_from_mapping({"A": 442.5, "D": 295.0})
        self.assertEqual([t.name for t in targets], ["A", "D"])
        self.assertEqual(targets[0].display_name, "A (442.5 Hz)")

    def test_find_target(self):
        self.assertEqual(find_target("a", DEFAULT_TARGETS).frequency, 440.0)
        self.assertEqual(find_target(" E ", DEFAULT_TARGETS).name, "E")
        self.assertIsNone(find_target("C", DEFAULT_TARGETS))

    def test_display_name_defaults_to_name(self):
        self.assertEqual(TargetString("C", 130.81).display_name, "C")

    def test_target_frequency_must_be_positive(self):
        with self.assertRaises(ValueError):
            TargetString("G", 0.0)

    def test_format_hz(self):
        self.assertEqual(format_hz(196.0), "196 Hz")
        self.assertEqual(format_hz(659.26), "659.3 Hz")


class TestPitchEstimate(unittest.TestCase):
    def test_validity(self):
        self.assertTrue(PitchEstimate(440.0, 0.2, 0.31).is_valid)
        self.assertFalse(PitchEstimate(440.0, 0.2, 0.3).is_valid)
        self.assertFalse(PitchEstimate(0.0, 0.2, 0.9).is_valid)


if __name__ == "__main__":
    unittest.main()
