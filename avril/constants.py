"""MIDI and timing constants.

Time in a piece is counted in **milliseconds** (integer stream delays), so
splicing and looping never accumulate rounding error.  The player converts
to seconds only at the moment it sleeps.
"""

# MIDI Standards

MIDI_CHANNELS = 16
MIDI_VELOCITY = 0x40            # Fixed attack velocity for both voices

CC_ALL_SOUND_OFF = 120

# Channels used by the two voices (0-based, as mido counts them)

TREBLE_CHANNEL = 0
BASS_CHANNEL = 1

# Timing defaults (milliseconds)

SECONDS_PER_UNIT = 0.001
DEFAULT_BEAT_MS = 230
ACTIVE_SENSING_MS = 250         # Receivers expect a message at least every 300 ms
