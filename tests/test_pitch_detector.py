import unittest

import numpy as np

from violin_tuner import detect
from violin_tuner.detection.pitch_detector import PitchDetector, calculate_rms
from violin_tuner.errors import InvalidInputError
from violin_tuner.tuner_types import EMPTY_ESTIMATE

SAMPLE_RATE = 44100
BUFFER_SIZE = 8192
BIN_WIDTH = SAMPLE_RATE / BUFFER_SIZE


def sine_block(frequency, amplitude=0.5, size=BUFFER_SIZE, sample_rate=SAMPLE_RATE):
    t = np.arange(size) / sample_rate
    return amplitude * np.sin(2 * np.pi * frequency * t)


class TestPitchDetector(unittest.TestCase):
    def setUp(self):
        self.detector = PitchDetector()

    def test_detects_open_strings(self):
        for frequency in [196.0, 293.66, 440.0, 659.26]:
            estimate = self.detector.detect(sine_block(frequency), SAMPLE_RATE)
            self.assertLess(abs(estimate.frequency - frequency), BIN_WIDTH)
            self.assertGreaterEqual(estimate.confidence, 0.9)
            self.assertTrue(estimate.is_valid)

    def test_amplitude_is_rms(self):
        estimate = self.detector.detect(sine_block(440.0, amplitude=0.5), SAMPLE_RATE)
        self.assertAlmostEqual(estimate.amplitude, 0.5 / np.sqrt(2), places=3)

    def test_silence_returns_empty_estimate(self):
        estimate = self.detector.detect(np.zeros(BUFFER_SIZE), SAMPLE_RATE)
        self.assertEqual(estimate, EMPTY_ESTIMATE)
        self.assertFalse(estimate.is_valid)

    def test_quiet_signal_is_gated(self):
        # RMS of 0.005 is below the 0.01 noise floor
        block = sine_block(440.0, amplitude=0.005 * np.sqrt(2))
        estimate = self.detector.detect(block, SAMPLE_RATE)
        self.assertEqual(estimate.frequency, 0.0)
        self.assertEqual(estimate.confidence, 0.0)

    def test_custom_noise_floor(self):
        detector = PitchDetector(min_amplitude=0.001)
        block = sine_block(440.0, amplitude=0.005 * np.sqrt(2))
        estimate = detector.detect(block, SAMPLE_RATE)
        self.assertLess(abs(estimate.frequency - 440.0), BIN_WIDTH)

    def test_non_power_of_two_is_rejected(self):
        with self.assertRaises(InvalidInputError):
            self.detector.detect(sine_block(440.0, size=1000), SAMPLE_RATE)

    def test_non_power_of_two_is_rejected_even_when_silent(self):
        with self.assertRaises(InvalidInputError):
            self.detector.detect(np.zeros(1000), SAMPLE_RATE)

    def test_multichannel_block_is_rejected(self):
        with self.assertRaises(InvalidInputError):
            self.detector.detect(np.zeros((BUFFER_SIZE, 2)), SAMPLE_RATE)

    def test_empty_block_returns_empty_estimate(self):
        self.assertEqual(self.detector.detect(np.array([]), SAMPLE_RATE), EMPTY_ESTIMATE)

    def test_input_block_is_not_modified(self):
        block = sine_block(440.0)
        original = block.copy()
        self.detector.detect(block, SAMPLE_RATE)
        np.testing.assert_array_equal(block, original)

    def test_detection_is_stateless(self):
        block = sine_block(293.66)
        first = self.detector.detect(block, SAMPLE_RATE)
        self.detector.detect(sine_block(659.26), SAMPLE_RATE)
        self.detector.detect(np.zeros(BUFFER_SIZE), SAMPLE_RATE)
        second = self.detector.detect(block, SAMPLE_RATE)
        self.assertEqual(first, second)

    def test_default_sample_rate_is_used(self):
        detector = PitchDetector(sample_rate=48000)
        block = sine_block(440.0, sample_rate=48000)
        estimate = detector.detect(block)
        self.assertLess(abs(estimate.frequency - 440.0), 48000 / BUFFER_SIZE)

    def test_noise_has_low_confidence(self):
        rng = np.random.default_rng(42)
        block = rng.uniform(-0.5, 0.5, BUFFER_SIZE)
        estimate = self.detector.detect(block, SAMPLE_RATE)
        self.assertLess(estimate.confidence, 0.5)

    def test_smaller_blocks_are_supported(self):
        estimate = self.detector.detect(sine_block(440.0, size=4096), SAMPLE_RATE)
        self.assertLess(abs(estimate.frequency - 440.0), SAMPLE_RATE / 4096)

    def test_module_level_detect(self):
        estimate = detect(sine_block(440.0), SAMPLE_RATE)
        self.assertLess(abs(estimate.frequency - 440.0), BIN_WIDTH)


class TestCalculateRms(unittest.TestCase):
    def test_rms(self):
        self.assertAlmostEqual(calculate_rms(np.array([0.5, -0.5, 0.5, -0.5])), 0.5)
        self.assertEqual(calculate_rms(np.zeros(4)), 0.0)
        self.assertEqual(calculate_rms(np.array([])), 0.0)


if __name__ == "__main__":
    unittest.main()
