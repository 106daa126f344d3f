import typing

import mido
import pytest


class FakeMidiOut:

	"""Minimal MIDI output stub for tests that remembers what it was sent."""

	def __init__ (self, name: str = "Dummy MIDI") -> None:

		"""Start with an empty log."""

		self.name = name
		self.sent: typing.List[mido.Message] = []
		self.panicked = False
		self.closed = False


	def send (self, message: mido.Message) -> None:

		"""Record an outgoing MIDI message."""

		self.sent.append(message)


	def close (self) -> None:

		"""Mark the fake device closed."""

		self.closed = True


	def panic (self) -> None:

		"""Remember that a panic was requested."""

		self.panicked = True


FAKE_OUTPUT_NAMES = ["Dummy MIDI", "FLUID Synth (4321):Synth input port (4321:0) 128:0"]

# Module-level reference so tests can access the most recently opened FakeMidiOut.
_current_fake_output: typing.Optional[FakeMidiOut] = None


def _fake_get_output_names () -> list[str]:

	"""Return a fixed list of MIDI output names for tests."""

	return list(FAKE_OUTPUT_NAMES)


def _fake_open_output (name: str) -> FakeMidiOut:

	"""Return a fake MIDI output regardless of the name."""

	global _current_fake_output
	fake = FakeMidiOut(name)
	_current_fake_output = fake
	return fake


@pytest.fixture
def patch_midi (monkeypatch: pytest.MonkeyPatch) -> None:

	"""Patch mido to use fake MIDI outputs for all tests that need it."""

	monkeypatch.setattr(mido, "get_output_names", _fake_get_output_names)
	monkeypatch.setattr(mido, "open_output", _fake_open_output)
