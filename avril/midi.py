"""Abstract MIDI messages and their wire encoding.

Streams carry :class:`MidiMessage` values rather than ``mido`` objects so
they stay immutable and cheap to replay.  :meth:`MidiMessage.to_mido`
builds the message actually sent to a port.
"""

import dataclasses
import typing

import mido

import avril.constants


@dataclasses.dataclass(frozen=True)
class MidiMessage:

	"""A channel-scoped MIDI message (or a system message when ``channel`` is None)."""

	message_type: str
	channel: typing.Optional[int] = None
	note: int = 0
	velocity: int = 0
	program: int = 0


	def to_mido (self) -> mido.Message:

		"""Build the equivalent ``mido.Message``."""

		if self.message_type in ('note_on', 'note_off'):
			return mido.Message(
				self.message_type,
				channel = self.channel,
				note = self.note,
				velocity = self.velocity
			)

		if self.message_type == 'program_change':
			return mido.Message(
				'program_change',
				channel = self.channel,
				program = self.program
			)

		if self.message_type == 'all_sound_off':
			return mido.Message(
				'control_change',
				channel = self.channel,
				control = avril.constants.CC_ALL_SOUND_OFF,
				value = 0
			)

		if self.message_type == 'active_sensing':
			return mido.Message('active_sensing')

		raise ValueError(f"Unknown MIDI message type: {self.message_type!r}")


	def encode (self) -> bytes:

		"""Raw MIDI bytes for this message."""

		return bytes(self.to_mido().bytes())


	def __str__ (self) -> str:

		if self.channel is None:
			return self.message_type

		if self.message_type in ('note_on', 'note_off'):
			return f"{self.message_type} ch={self.channel} note={self.note} vel={self.velocity}"

		if self.message_type == 'program_change':
			return f"program_change ch={self.channel} program={self.program}"

		return f"{self.message_type} ch={self.channel}"


def note_on (channel: int, note: int, velocity: int = avril.constants.MIDI_VELOCITY) -> MidiMessage:
	return MidiMessage('note_on', channel=channel, note=note, velocity=velocity)


def note_off (channel: int, note: int, velocity: int = avril.constants.MIDI_VELOCITY) -> MidiMessage:
	return MidiMessage('note_off', channel=channel, note=note, velocity=velocity)


def program_change (channel: int, program: int) -> MidiMessage:
	return MidiMessage('program_change', channel=channel, program=program)


def all_sound_off (channel: int) -> MidiMessage:
	return MidiMessage('all_sound_off', channel=channel)


def active_sensing () -> MidiMessage:
	return MidiMessage('active_sensing')
