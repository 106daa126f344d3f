import pytest

import avril.melody
import avril.seed
import avril.theory


def _key () -> avril.theory.Key:

	return avril.theory.Key.pentatonic(avril.theory.Note.parse("D4"))


def _events (seed_label: str, count: int = 50, quantum: int = 230) -> list:

	key = _key()
	var = avril.melody.melody(key, key.at(7), quantum, avril.seed.Seed.new(seed_label))
	return var.to_stream().collect(count)


def test_present_is_first_note () -> None:

	key = _key()
	var = avril.melody.melody(key, key.at(7), 230, avril.seed.Seed.new("x"))

	assert var.value == key.at(7)


def test_same_seed_same_melody () -> None:

	assert _events("frosted glass") == _events("frosted glass")


def test_different_seed_different_melody () -> None:

	assert _events("frosted glass") != _events("lead balloon")


def test_durations_are_whole_quanta () -> None:

	events = _events("durations", count=200, quantum=100)

	assert events[0][0] == 0

	for delay, _ in events[1:]:
		assert delay >= 100
		assert delay % 100 == 0


def test_notes_stay_in_key_and_always_move () -> None:

	key = _key()
	notes = [note for _, note in _events("walk", count=200)]

	for previous, current in zip(notes, notes[1:]):
		assert current.key == key
		assert current.note == key.at(current.scale_steps_from_tonic).note
		assert current.scale_steps_from_tonic != previous.scale_steps_from_tonic


def test_walk_is_pulled_toward_the_tonic () -> None:

	"""A melody starting far from the tonic drifts back rather than away."""

	key = _key()
	var = avril.melody.melody(key, key.at(20), 230, avril.seed.Seed.new("gravity"))
	steps = [note.scale_steps_from_tonic for _, note in var.to_stream().collect(60)]

	assert sum(abs(s) for s in steps[-20:]) / 20 < 20


def test_next_step_is_pure () -> None:

	key = _key()
	seed = avril.seed.Seed.new("step")

	assert avril.melody.next_step(key.at(0), seed, 100) == avril.melody.next_step(key.at(0), seed, 100)


def test_first_note_must_be_in_key () -> None:

	key = _key()
	other = avril.theory.Key.major(avril.theory.Note.parse("C4"))

	with pytest.raises(ValueError):
		avril.melody.melody(key, other.at(0), 230, avril.seed.Seed.new("x"))
