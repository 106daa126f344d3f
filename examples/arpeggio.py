"""A looping arpeggio over a heartbeat, built directly from streams.

Plays for ten seconds to the first MIDI output whose name starts with
``FLUID``.  Shows the stream algebra without the melody generator: a phrase
is written once as timed events, looped with ``repeat_every``, merged with
the active-sensing heartbeat and bounded with ``take``.
"""

import logging

import avril.composition
import avril.midi
import avril.midi_utils
import avril.player
import avril.stream
import avril.theory
import avril.var


logging.basicConfig(level=logging.INFO)

STEP_MS = 150
CHANNEL = 0

key = avril.theory.Key.minor(avril.theory.Note.parse("A3"))
degrees = [0, 2, 4, 7, 4, 2]

phrase = avril.stream.Stream.from_pairs(
	(0 if i == 0 else STEP_MS, key.at(degree).note) for i, degree in enumerate(degrees)
)

notes = phrase.repeat_every(STEP_MS * len(degrees))
pitch = avril.var.Var.from_updates(None, notes)

messages = avril.stream.Stream.merge_all([
	avril.composition.play(CHANNEL, pitch),
	avril.composition.active_sensing(),
]).chain_at(10_000, avril.composition.silence([CHANNEL]))

_, midi_out = avril.midi_utils.select_output_device("FLUID")

if midi_out is not None:
	try:
		avril.player.play_stream(messages, midi_out)
	finally:
		midi_out.close()
