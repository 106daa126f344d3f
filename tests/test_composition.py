import typing

import avril.composition
import avril.config
import avril.constants
import avril.midi
import avril.seed
import avril.stream
import avril.theory
import avril.var


Note = avril.theory.Note


def _absolute (events: typing.List[typing.Tuple[int, typing.Any]]) -> typing.List[typing.Tuple[int, typing.Any]]:

	now = 0
	result = []

	for delay, value in events:
		now += delay
		result.append((now, value))

	return result


def _note_ons (events: typing.List[typing.Tuple[int, avril.midi.MidiMessage]], channel: int) -> typing.List[typing.Tuple[int, int]]:

	return [
		(time, message.note)
		for time, message in _absolute(events)
		if message.message_type == 'note_on' and message.channel == channel
	]


def test_swap_pitch () -> None:

	assert avril.composition.swap_pitch(None, None, 0) == []
	assert avril.composition.swap_pitch(None, Note(0), 0) == [avril.midi.note_on(0, 60)]
	assert avril.composition.swap_pitch(Note(0), None, 1) == [avril.midi.note_off(1, 60)]
	assert avril.composition.swap_pitch(Note(0), Note(2), 0) == [avril.midi.note_off(0, 60), avril.midi.note_on(0, 62)]


def test_play_renders_pitch_changes () -> None:

	"""Same-instant changes collapse to the last one and a finite line releases its last note."""

	pitch = avril.var.Var.from_updates(
		Note(0),
		avril.stream.Stream.from_pairs([(100, Note(2)), (0, Note(4)), (50, None)]),
	)

	events = avril.composition.play(0, pitch).collect()

	assert events == [
		(0, avril.midi.all_sound_off(0)),
		(0, avril.midi.note_on(0, 60)),
		(100, avril.midi.note_off(0, 60)),
		(0, avril.midi.note_on(0, 64)),
		(50, avril.midi.note_off(0, 64)),
	]


def test_play_zero_length_note_is_never_struck () -> None:

	"""A constant pitch with no future ends at once, so its note lasts no time at all."""

	events = avril.composition.play(3, avril.var.Var.constant(Note(0))).collect()

	assert events == [(0, avril.midi.all_sound_off(3))]


def test_active_sensing_heartbeat () -> None:

	beat = avril.midi.active_sensing()

	assert avril.composition.active_sensing(250).collect(4) == [(0, beat), (250, beat), (250, beat), (250, beat)]


def test_reseeding () -> None:

	seed = avril.seed.Seed.new("voice")
	seeds = avril.composition.reseeding(seed, 1000).to_stream().collect(3)

	assert seeds == [(0, seed.fork(0)), (1000, seed.fork(1)), (1000, seed.fork(2))]


def test_voice_loops_phrase_until_reseed () -> None:

	key = avril.theory.Key.pentatonic(Note.parse("D4"))
	phrase = 1000
	pitch = avril.composition.voice(key, 7, 100, avril.seed.Seed.new("loop"), phrase, phrase * 3)

	assert pitch.value == key.at(7).note

	changes = _absolute(pitch.to_stream().take(phrase * 3 - 1).coalesce(lambda _, new: new).collect())
	periods = [
		[(time - n * phrase, note) for time, note in changes if n * phrase <= time < (n + 1) * phrase]
		for n in range(3)
	]

	assert periods[0]
	assert periods[0] == periods[1] == periods[2]


def test_silence () -> None:

	assert avril.composition.silence([0, 1]).collect() == [
		(0, avril.midi.all_sound_off(0)),
		(0, avril.midi.all_sound_off(1)),
	]


# ---------------------------------------------------------------------------
# The whole piece
# ---------------------------------------------------------------------------

def _short_settings () -> avril.config.Settings:

	return avril.config.Settings(num_phrases=2)


def test_build_is_reproducible () -> None:

	first = avril.composition.build(_short_settings()).collect()
	second = avril.composition.build(_short_settings()).collect()

	assert first == second


def test_build_depends_on_seed () -> None:

	first = avril.composition.build(avril.config.Settings(num_phrases=2, seed="one")).collect()
	second = avril.composition.build(avril.config.Settings(num_phrases=2, seed="two")).collect()

	assert first != second


def test_build_opening () -> None:

	settings = _short_settings()
	key = avril.theory.Key(Note.parse(settings.tonic), avril.theory.Scale.named(settings.scale))

	opening = avril.composition.build(settings).collect(7)

	assert all(delay == 0 for delay, _ in opening)
	assert [message for _, message in opening] == [
		avril.midi.program_change(avril.constants.TREBLE_CHANNEL, 0),
		avril.midi.program_change(avril.constants.BASS_CHANNEL, 0),
		avril.midi.all_sound_off(avril.constants.TREBLE_CHANNEL),
		avril.midi.note_on(avril.constants.TREBLE_CHANNEL, key.at(7).note.midi()),
		avril.midi.all_sound_off(avril.constants.BASS_CHANNEL),
		avril.midi.note_on(avril.constants.BASS_CHANNEL, key.at(-10).note.midi()),
		avril.midi.active_sensing(),
	]


def test_build_ends_in_silence_at_total_duration () -> None:

	settings = _short_settings()
	events = avril.composition.build(settings).collect()

	assert sum(delay for delay, _ in events) == settings.total_ms
	assert [message for _, message in events[-2:]] == [
		avril.midi.all_sound_off(avril.constants.TREBLE_CHANNEL),
		avril.midi.all_sound_off(avril.constants.BASS_CHANNEL),
	]


def test_build_voices_are_monophonic () -> None:

	"""Each channel sounds at most one note at a time."""

	sounding: typing.Dict[int, typing.Optional[int]] = {}

	for _, message in avril.composition.build(_short_settings()):

		if message.message_type == 'note_on':
			assert sounding.get(message.channel) is None
			sounding[message.channel] = message.note

		elif message.message_type == 'note_off':
			assert sounding.get(message.channel) == message.note
			sounding[message.channel] = None

		elif message.message_type == 'all_sound_off':
			sounding[message.channel] = None


def test_build_heartbeat_never_lapses () -> None:

	settings = _short_settings()
	times = [
		time
		for time, message in _absolute(avril.composition.build(settings).collect())
		if message.message_type == 'active_sensing'
	]

	assert times[0] == 0
	assert all(b - a == settings.active_sensing_ms for a, b in zip(times, times[1:]))


def test_build_treble_repeats_first_phrase () -> None:

	settings = _short_settings()
	phrase = settings.phrase_ms
	notes = _note_ons(avril.composition.build(settings).collect(), avril.constants.TREBLE_CHANNEL)

	first = [(time, note) for time, note in notes if time < phrase]
	second = [(time - phrase, note) for time, note in notes if phrase <= time < 2 * phrase]

	assert first
	assert first == second
