"""Random-walk melodies.

A melody is an unfold over ``(previous note, seed)``: each step moves by a
whole number of scale steps drawn from a normal distribution whose mean
pulls back toward the tonic, and holds for a number of quanta drawn from an
exponential distribution.  Every draw uses its own forked seed, so the same
seed always produces the same melody.  The stream cannot be rewound;
replaying a melody means calling :func:`melody` again with the same seed.
"""

import math
import typing

import avril.seed
import avril.stream
import avril.theory
import avril.var


# Rate of the exponential distribution for note lengths, in quanta.
NUM_QUANTA_RATE = 2.0


def next_step (
	prev_note: avril.theory.NoteInKey,
	seed: avril.seed.Seed,
	quantum_duration: int,
) -> typing.Tuple[avril.theory.NoteInKey, avril.seed.Seed, int]:

	"""Pick the note after ``prev_note``.  Returns ``(note, next seed, duration)``."""

	# Normal step, centred halfway back toward the tonic.  Zero steps are redrawn.
	mean = math.trunc(-prev_note.scale_steps_from_tonic / 2)
	std_dev = prev_note.key.scale.num_intervals / 2.0
	delta_rng = seed.fork("delta").rng()
	delta = 0

	while delta == 0:
		delta = round(delta_rng.normalvariate(mean, std_dev))

	note = prev_note.offset(delta)

	num_quanta = max(1, math.ceil(seed.fork("num_quanta").rng().expovariate(NUM_QUANTA_RATE)))

	return note, seed.fork("next"), quantum_duration * num_quanta


def melody (
	key: avril.theory.Key,
	first_note: avril.theory.NoteInKey,
	quantum_duration: int,
	seed: avril.seed.Seed,
) -> avril.var.Var[avril.theory.NoteInKey]:

	"""An endless melody in ``key`` starting on ``first_note``, as a Var of notes."""

	if first_note.key != key:
		raise ValueError(f"First note {first_note} does not belong to the melody's key")

	def walk () -> typing.Iterator[typing.Tuple[int, avril.theory.NoteInKey]]:

		note = first_note
		step_seed = seed.fork("notes")

		while True:
			note, step_seed, duration = next_step(note, step_seed, quantum_duration)
			yield duration, note

	return avril.var.Var.from_updates(first_note, avril.stream.Stream.from_pairs(walk()))
