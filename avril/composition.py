"""The two-voice piece.

Two reseeded random-walk voices, a treble moving in beats and a bass in
half-time, each looping its current phrase until its seed changes.  Their
note changes become MIDI note-off/note-on pairs, merged with program
changes and an active-sensing heartbeat.  The whole stream is cut off at
the end of the last phrase, where both channels are silenced.

Time is in integer milliseconds throughout.
"""

import itertools
import logging
import typing

import avril.config
import avril.constants
import avril.melody
import avril.midi
import avril.seed
import avril.stream
import avril.theory
import avril.var


logger = logging.getLogger(__name__)

Pitch = typing.Optional[avril.theory.Note]

# Scale steps from the tonic where each voice starts.
TREBLE_START_STEP = 7
BASS_START_STEP = -10


def swap_pitch (old: Pitch, new: Pitch, channel: int) -> typing.List[avril.midi.MidiMessage]:

	"""Messages that take a channel from sounding ``old`` to sounding ``new`` (either may be silence)."""

	messages: typing.List[avril.midi.MidiMessage] = []

	if old is not None:
		messages.append(avril.midi.note_off(channel, old.midi()))

	if new is not None:
		messages.append(avril.midi.note_on(channel, new.midi()))

	return messages


def play (channel: int, pitch: avril.var.Var[Pitch]) -> avril.stream.Stream[avril.midi.MidiMessage]:

	"""
	Render a Var of pitches as MIDI on one channel.

	The channel is silenced first.  Each pitch change releases the previous
	note and strikes the new one; changes landing at the same instant collapse
	to the last of them.  If the pitch stream ends, the last note is released.
	"""

	current: Pitch = None

	def change_to (new_pitch: Pitch) -> typing.List[avril.midi.MidiMessage]:

		nonlocal current
		old, current = current, new_pitch
		return swap_pitch(old, new_pitch, channel)

	changes = (
		pitch.to_stream()
		.chain(avril.stream.Stream.immediate(None))
		.coalesce(lambda _, new: new)
		.flat_map(change_to)
	)

	return avril.stream.Stream.immediate(avril.midi.all_sound_off(channel)).chain(changes)


def active_sensing (interval: int = avril.constants.ACTIVE_SENSING_MS) -> avril.stream.Stream[avril.midi.MidiMessage]:

	"""An endless heartbeat so the receiver knows the sender is still alive."""

	return avril.stream.Stream.immediate(avril.midi.active_sensing()).repeat_every(interval)


def reseeding (seed: avril.seed.Seed, interval: int) -> avril.var.Var[avril.seed.Seed]:

	"""``seed.fork(0)`` now, then ``seed.fork(1)``, ``seed.fork(2)``... every ``interval``."""

	return avril.var.Var.from_updates(
		seed.fork(0),
		avril.stream.Stream.from_pairs((interval, seed.fork(i)) for i in itertools.count(1)),
	)


def voice (
	key: avril.theory.Key,
	start_step: int,
	quantum: int,
	seed: avril.seed.Seed,
	phrase: int,
	reseed_interval: int,
) -> avril.var.Var[Pitch]:

	"""
	One melodic line.

	Every ``reseed_interval`` a new melody is drawn from the next forked seed;
	whichever melody is current loops its first ``phrase``.
	"""

	melodies = reseeding(seed, reseed_interval).map(
		lambda melody_seed: avril.melody.melody(key, key.at(start_step), quantum, melody_seed).repeat_every(phrase)
	)

	return melodies.sequence().map(lambda note_in_key: note_in_key.note)


def silence (channels: typing.Iterable[int]) -> avril.stream.Stream[avril.midi.MidiMessage]:

	"""All-sound-off for each channel, all at once."""

	return avril.stream.Stream.from_pairs((0, avril.midi.all_sound_off(channel)) for channel in channels)


def build (settings: avril.config.Settings) -> avril.stream.Stream[avril.midi.MidiMessage]:

	"""The full, finite performance described by ``settings``."""

	seed = avril.seed.Seed.new(settings.seed)
	key = avril.theory.Key(avril.theory.Note.parse(settings.tonic), avril.theory.Scale.named(settings.scale))
	beat = settings.beat_ms
	phrase = settings.phrase_ms
	channels = (avril.constants.TREBLE_CHANNEL, avril.constants.BASS_CHANNEL)

	logger.info(
		f"Building piece: seed={settings.seed!r}, key={key.tonic} {settings.scale}, "
		f"{settings.num_phrases} phrases of {phrase} ms"
	)

	treble = voice(key, TREBLE_START_STEP, beat, seed.fork("treble"), phrase, settings.reseed_interval_ms)
	bass = voice(key, BASS_START_STEP, beat * 2, seed.fork("bass"), phrase, settings.reseed_interval_ms)

	messages = avril.stream.Stream.merge_all([
		avril.stream.Stream.immediate(avril.midi.program_change(avril.constants.TREBLE_CHANNEL, 0)),
		avril.stream.Stream.immediate(avril.midi.program_change(avril.constants.BASS_CHANNEL, 0)),
		play(avril.constants.TREBLE_CHANNEL, treble),
		play(avril.constants.BASS_CHANNEL, bass),
		active_sensing(settings.active_sensing_ms),
	])

	return messages.chain_at(settings.total_ms, silence(channels))
