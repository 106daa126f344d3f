"""Values that change over time.

A :class:`Var` is a present value plus a :class:`~avril.stream.Stream` of
future replacements.  At time 0 the value is ``present``; each future event
``(delay, value)`` replaces it, ``delay`` after the previous replacement.

Like streams, a Var has a single owner: every operation that transforms or
advances it takes it over, and the old handle raises
:class:`VarConsumedError` afterwards.  :attr:`Var.value` is the one
read-only accessor.
"""

import typing

import avril.stream


T = typing.TypeVar("T")
U = typing.TypeVar("U")


class VarConsumedError (RuntimeError):

	"""Raised when a Var is used after an operation has taken it over."""


class Var (typing.Generic[T]):

	"""A present value followed by a timed stream of replacement values."""

	def __init__ (self, present: T, future: avril.stream.Stream[T]) -> None:

		self._present = present
		self._future: typing.Optional[avril.stream.Stream[T]] = future


	@classmethod
	def constant (cls, value: T) -> "Var[T]":

		"""A Var that never changes."""

		return cls(value, avril.stream.Stream.empty())


	@classmethod
	def from_updates (cls, initial: T, updates: avril.stream.Stream[T]) -> "Var[T]":

		"""A Var starting at ``initial`` and replaced by each event of ``updates``."""

		return cls(initial, updates)


	@property
	def value (self) -> T:

		"""The present value.  A snapshot only; it does not advance the Var."""

		self._check_live()
		return self._present


	def __repr__ (self) -> str:

		if self._future is None:
			return "<Var consumed>"

		return f"<Var present={self._present!r}>"


	def to_stream (self) -> avril.stream.Stream[T]:

		"""Every value the Var takes, including the present one at delay 0."""

		present, future = self._release()
		return avril.stream.Stream.immediate(present).chain(future)


	def map (self, func: typing.Callable[[T], U]) -> "Var[U]":

		"""Apply ``func`` to the present value and to every future value."""

		present, future = self._release()
		return Var(func(present), future.map(func))


	def repeat_every (self, interval: avril.stream.Delay) -> "Var[T]":

		"""Loop the first ``interval`` of this Var's history forever."""

		present, future = self._release()
		updates = avril.stream.Stream.immediate(present).chain(future)
		return Var(present, updates.repeat_every(interval))


	def sequence (self) -> typing.Any:

		"""
		Flatten a Var whose values are themselves streams or Vars.

		For a ``Var[Stream[X]]`` the result is a ``Stream[X]``: the present
		stream plays until the next replacement arrives, then the replacement
		takes over with its clock starting at the switch time.  Events of the
		outgoing stream at or after the switch are dropped.

		For a ``Var[Var[X]]`` the result is a ``Var[X]`` built the same way
		from each inner Var's stream of values.  The flattened stream must
		begin at delay 0 with the inner present value; anything else is a
		usage error and raises ``ValueError``.
		"""

		self._check_live()

		if isinstance(self._present, avril.stream.Stream):
			present, future = self._release()
			return _sequence_streams(present, future)

		if isinstance(self._present, Var):
			return self._sequence_vars()

		raise TypeError(f"sequence() needs a Var of streams or Vars, got a Var of {type(self._present).__name__}")


	def _sequence_vars (self) -> "Var[typing.Any]":

		stream = _sequence_streams(*self.map(lambda inner: inner.to_stream())._release())
		first = stream.next()

		if first is None:
			raise ValueError("Sequenced Var produced no values")

		delay, present = first

		if delay != 0:
			raise ValueError(f"Sequenced Var must start at delay 0, first value arrived after {delay!r}")

		return Var(present, stream)


	def _check_live (self) -> None:

		if self._future is None:
			raise VarConsumedError("Var has already been consumed")


	def _release (self) -> typing.Tuple[T, avril.stream.Stream[T]]:

		self._check_live()
		future = typing.cast(avril.stream.Stream[T], self._future)
		self._future = None
		return self._present, future


def _sequence_streams (
	present: avril.stream.Stream[typing.Any],
	future: avril.stream.Stream[avril.stream.Stream[typing.Any]],
) -> avril.stream.Stream[typing.Any]:

	"""Play ``present`` until the next stream arrives on ``future``, then recurse (lazily) on that one."""

	def build () -> avril.stream.Stream[typing.Any]:

		pair = future.next()

		if pair is None:
			return present

		delay, replacement = pair
		return present.chain_at(delay, _sequence_streams(replacement, future))

	return avril.stream.Stream.lazy(build)
