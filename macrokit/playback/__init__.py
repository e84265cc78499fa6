"""
OS-level playback of recorded macros.

Controls the actual mouse cursor and keyboard to replay a macro with its
recorded timing, as if a real user were operating the computer.

Supports macOS, Windows and X11.
"""

from macrokit.playback.synthesizer import InputSynthesizer, PynputSynthesizer
from macrokit.playback.player import CancellationToken, PlaybackReport, Player, scaled_delay

__all__ = [
    "InputSynthesizer",
    "PynputSynthesizer",
    "CancellationToken",
    "PlaybackReport",
    "Player",
    "scaled_delay",
]
