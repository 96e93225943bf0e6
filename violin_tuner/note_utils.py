"""Utility functions for working with musical notes and frequencies."""

import math

NOTE_NAMES_SHARPS = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]
NOTE_NAMES_FLATS = ["C", "Db", "D", "Eb", "E", "F", "Gb", "G", "Ab", "A", "Bb", "B"]


def get_note_name(freq: float, use_flats: bool = False, reference: float = 440.0) -> str:
    """Convert frequency to note name using Scientific Pitch Notation (SPN).

    Args:
        freq: Frequency in Hz
        use_flats: If True, use flat notes (e.g., 'Bb') instead of sharps (e.g., 'A#')
        reference: Frequency of A4 in Hz

    Returns:
        Note name with octave in SPN (e.g., 'A4', 'C#4', 'Bb3'), or '---' for
        a non-positive frequency

    Note:
        - Middle C is C4 (261.63 Hz)
        - Octave numbers change between B and C (e.g., B3 -> C4)
    """
    if freq <= 0 or reference <= 0:
        return "---"

    # Calculate half steps from A4 (A4 is 69 in MIDI)
    half_steps = round(12 * math.log2(freq / reference))
    midi_number = 69 + half_steps

    # SPN octave calculation (C4 is middle C)
    octave = (midi_number // 12) - 1
    note_idx = midi_number % 12

    names = NOTE_NAMES_FLATS if use_flats else NOTE_NAMES_SHARPS
    return f"{names[note_idx]}{octave}"


def format_cents(cents: float) -> str:
    """Format a cents deviation the way the tuner display shows it ('+12 cents')."""
    if round(cents) > 0:
        return f"+{cents:.0f} cents"
    if round(cents) < 0:
        return f"{cents:.0f} cents"
    return "0 cents"
