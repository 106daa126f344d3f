import mido
import pytest

import avril.midi_utils
import conftest


def test_prefix_match (patch_midi: None) -> None:

	name, port = avril.midi_utils.select_output_device("FLUID")

	assert name == conftest.FAKE_OUTPUT_NAMES[1]
	assert port is conftest._current_fake_output
	assert port.name == name


def test_exact_match_wins (patch_midi: None) -> None:

	name, port = avril.midi_utils.select_output_device("Dummy MIDI")

	assert name == "Dummy MIDI"
	assert port is not None


def test_no_match (patch_midi: None) -> None:

	assert avril.midi_utils.select_output_device("Moog") == (None, None)


def test_no_outputs (monkeypatch: pytest.MonkeyPatch) -> None:

	monkeypatch.setattr(mido, "get_output_names", lambda: [])

	assert avril.midi_utils.select_output_device("FLUID") == (None, None)


def test_open_failure_is_reported (patch_midi: None, monkeypatch: pytest.MonkeyPatch) -> None:

	def broken_open (name: str) -> None:
		raise OSError("device busy")

	monkeypatch.setattr(mido, "open_output", broken_open)

	assert avril.midi_utils.select_output_device("FLUID") == (None, None)
