"""Audio sources that feed blocks to the tuner.

Live capture needs the PortAudio library, so it is imported from
violin_tuner.audio.live_input on demand rather than here.
"""

from .wav_input import WavFileInput

__all__ = ["WavFileInput"]
