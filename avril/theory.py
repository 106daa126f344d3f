"""Pitch classes, notes, scales and keys.

Notes are counted in semitones from middle C (MIDI 60), so ``Note(0)`` is
C4 and ``Note(-12)`` is C3.  A :class:`Key` pairs a tonic note with a
:class:`Scale` and walks the scale in either direction; a
:class:`NoteInKey` remembers how many scale steps it sits from the tonic so
melodies can move by scale steps rather than semitones.
"""

import dataclasses
import enum
import itertools
import re
import typing


NOTE_NAME_TO_PC: typing.Dict[str, int] = {
	"C": 0,
	"C#": 1,
	"Db": 1,
	"D": 2,
	"D#": 3,
	"Eb": 3,
	"E": 4,
	"F": 5,
	"F#": 6,
	"Gb": 6,
	"G": 7,
	"G#": 8,
	"Ab": 8,
	"A": 9,
	"A#": 10,
	"Bb": 10,
	"B": 11,
}

_NOTE_PATTERN = re.compile(r"^([A-G][#b]?)(-?\d+)$")


class PitchClass (enum.IntEnum):

	"""The twelve pitch classes, valued by semitones above C."""

	C = 0
	C_SHARP = 1
	D = 2
	D_SHARP = 3
	E = 4
	F = 5
	F_SHARP = 6
	G = 7
	G_SHARP = 8
	A = 9
	A_SHARP = 10
	B = 11

	@classmethod
	def parse (cls, name: str) -> "PitchClass":

		"""Look up a pitch class by name (``"C"``, ``"F#"``, ``"Bb"``).

		Raises:
			ValueError: If the name is not recognised.
		"""

		if name not in NOTE_NAME_TO_PC:
			raise ValueError(f"Unknown pitch class: {name!r}. Expected e.g. 'C', 'F#', 'Bb'.")

		return cls(NOTE_NAME_TO_PC[name])

	def __str__ (self) -> str:
		return self.name.replace("_SHARP", "#")


@dataclasses.dataclass(frozen=True, order=True)
class Note:

	"""A pitch, as semitones relative to middle C."""

	semitones: int

	@classmethod
	def of (cls, pitch_class: PitchClass, octave: int) -> "Note":
		return cls(int(pitch_class) + (octave - 4) * 12)

	@classmethod
	def parse (cls, name: str) -> "Note":

		"""Parse scientific pitch notation such as ``"D4"`` or ``"Bb2"``."""

		match = _NOTE_PATTERN.match(name.strip())

		if match is None:
			raise ValueError(f"Invalid note name: {name!r}. Expected e.g. 'D4', 'F#3', 'Bb2'.")

		return cls.of(PitchClass.parse(match.group(1)), int(match.group(2)))

	@property
	def pitch_class (self) -> PitchClass:
		return PitchClass(self.semitones % 12)

	@property
	def octave (self) -> int:
		return self.semitones // 12 + 4

	def offset (self, semitones: int) -> "Note":
		return Note(self.semitones + semitones)

	def midi (self) -> int:

		"""MIDI note number.  Raises ``ValueError`` outside 0-127."""

		value = self.semitones + 60

		if not 0 <= value <= 127:
			raise ValueError(f"Note {self} is outside the MIDI range")

		return value

	def __str__ (self) -> str:
		return str(self.pitch_class) + str(self.octave)


SCALE_INTERVALS: typing.Dict[str, typing.Tuple[int, ...]] = {
	"major": (2, 2, 1, 2, 2, 2, 1),
	"minor": (2, 1, 2, 2, 1, 2, 2),
	"pentatonic": (4, 1, 2, 4, 1),
}


@dataclasses.dataclass(frozen=True)
class Scale:

	"""Successive semitone steps of one octave."""

	intervals: typing.Tuple[int, ...]

	def __post_init__ (self) -> None:

		if sum(self.intervals) != 12:
			raise ValueError(f"Scale intervals must span one octave (12 semitones), got {list(self.intervals)}")

		if any(step <= 0 for step in self.intervals):
			raise ValueError(f"Scale intervals must be positive, got {list(self.intervals)}")

	@classmethod
	def named (cls, name: str) -> "Scale":

		if name not in SCALE_INTERVALS:
			raise ValueError(f"Unknown scale: {name!r}. Expected one of {sorted(SCALE_INTERVALS)}.")

		return cls(SCALE_INTERVALS[name])

	@classmethod
	def major (cls) -> "Scale":
		return cls.named("major")

	@classmethod
	def minor (cls) -> "Scale":
		return cls.named("minor")

	@classmethod
	def pentatonic (cls) -> "Scale":
		return cls.named("pentatonic")

	@property
	def num_intervals (self) -> int:
		return len(self.intervals)

	def intervals_ascending (self) -> typing.Iterator[int]:

		"""Upward steps, cycling forever."""

		return itertools.cycle(self.intervals)

	def intervals_descending (self) -> typing.Iterator[int]:

		"""Downward steps (negative), cycling forever from the top of the octave."""

		return itertools.cycle([-step for step in reversed(self.intervals)])


@dataclasses.dataclass(frozen=True)
class Key:

	"""A tonic and a scale."""

	tonic: Note
	scale: Scale

	@classmethod
	def major (cls, tonic: Note) -> "Key":
		return cls(tonic, Scale.major())

	@classmethod
	def minor (cls, tonic: Note) -> "Key":
		return cls(tonic, Scale.minor())

	@classmethod
	def pentatonic (cls, tonic: Note) -> "Key":
		return cls(tonic, Scale.pentatonic())

	def offset_tonic (self, scale_steps: int) -> "Key":

		"""The same scale starting ``scale_steps`` away from this tonic."""

		return Key(self.at(scale_steps).note, self.scale)

	def notes_ascending (self) -> typing.Iterator["NoteInKey"]:
		return self._walk(self.scale.intervals_ascending(), 1)

	def notes_descending (self) -> typing.Iterator["NoteInKey"]:
		return self._walk(self.scale.intervals_descending(), -1)

	def _walk (self, intervals: typing.Iterator[int], direction: int) -> typing.Iterator["NoteInKey"]:

		note = self.tonic

		for steps, interval in enumerate(intervals):
			yield NoteInKey(self, note, steps * direction)
			note = note.offset(interval)

	def at (self, scale_steps: int) -> "NoteInKey":

		"""The note ``scale_steps`` scale degrees above (or below, if negative) the tonic."""

		notes = self.notes_ascending() if scale_steps >= 0 else self.notes_descending()
		return next(itertools.islice(notes, abs(scale_steps), None))


@dataclasses.dataclass(frozen=True)
class NoteInKey:

	"""A note together with its position in a key."""

	key: Key
	note: Note
	scale_steps: int

	def offset (self, scale_steps: int) -> "NoteInKey":
		return self.key.at(self.scale_steps + scale_steps)

	@property
	def scale_steps_from_tonic (self) -> int:
		return self.scale_steps

	def __str__ (self) -> str:
		return str(self.note)
