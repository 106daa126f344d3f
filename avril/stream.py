"""Lazy timed event streams.

A :class:`Stream` is a possibly infinite sequence of ``(delay, value)``
pairs where each delay is measured from the *previous* event in the same
stream, not from a fixed origin.  The absolute time of an event is the
running sum of all delays up to and including its own.  Every combinator
here preserves that schedule: splicing, trimming and merging always yield
non-negative relative delays that add up to the intended absolute times.

Streams are single-owner.  Passing a stream into a combinator hands it
over; the original handle is marked consumed and any further use raises
:class:`StreamConsumedError`.  Reading with :meth:`Stream.next` (or plain
iteration) advances the stream without giving it away.

Nothing is computed until a consumer pulls the next event.  Internally
each stream is driven by a *producer*.  A producer can answer a pull with
an event, with ``None`` (exhausted), or by handing over to another
producer ("from now on, I am that stream").  The stream swaps producers in
place, which keeps self-referential streams such as
:meth:`Stream.repeat_every` at a constant stack depth however long they
play.

Delays may be any non-negative number (``int``, ``float``,
``fractions.Fraction``).  Integer units keep repeated splicing exact.
"""

import fractions
import functools
import typing


E = typing.TypeVar("E")
R = typing.TypeVar("R")

Delay = typing.Union[int, float, fractions.Fraction]
Event = typing.Tuple[Delay, E]


class StreamConsumedError (RuntimeError):

	"""Raised when a stream is used after being handed to a combinator."""


class _Handoff:

	"""Pull result telling the driving stream to continue with another producer."""

	__slots__ = ("producer",)

	def __init__ (self, producer: "_Producer") -> None:
		self.producer = producer


PullResult = typing.Union[typing.Tuple[Delay, typing.Any], None, _Handoff]


class _Producer:

	"""Base class for stream producers."""

	def pull (self) -> PullResult:

		"""Return the next event, ``None`` when exhausted, or a handoff."""

		raise NotImplementedError


class _Empty (_Producer):

	def pull (self) -> PullResult:
		return None


class _FromPairs (_Producer):

	def __init__ (self, pairs: typing.Iterable[typing.Tuple[Delay, typing.Any]]) -> None:
		self._iterator = iter(pairs)

	def pull (self) -> PullResult:

		pair = next(self._iterator, None)

		if pair is None:
			return None

		delay, value = pair

		if delay < 0:
			raise ValueError(f"Stream delays must be non-negative, got {delay!r}")

		return delay, value


class _Lazy (_Producer):

	"""Builds the real stream on first pull, then hands over to it."""

	def __init__ (self, factory: typing.Callable[[], "Stream[typing.Any]"]) -> None:
		self._factory = factory

	def pull (self) -> PullResult:

		# The stream replaces this producer after the handoff, so the factory runs once.
		return _Handoff(self._factory()._take_producer())


class _Map (_Producer):

	def __init__ (self, source: "Stream[typing.Any]", func: typing.Callable[[typing.Any], typing.Any]) -> None:
		self._source = source
		self._func = func

	def pull (self) -> PullResult:

		pair = self._source.next()

		if pair is None:
			return None

		return pair[0], self._func(pair[1])


_MISSING = object()


class _Flatten (_Producer):

	"""Explodes each batch into events; the first carries the batch delay, the rest are simultaneous."""

	def __init__ (self, source: "Stream[typing.Any]") -> None:
		self._source = source
		self._batch: typing.Optional[typing.Iterator[typing.Any]] = None
		self._carry: Delay = 0

	def pull (self) -> PullResult:

		while True:

			if self._batch is not None:
				value = next(self._batch, _MISSING)

				if value is not _MISSING:
					delay, self._carry = self._carry, 0
					return delay, value

				self._batch = None

			pair = self._source.next()

			if pair is None:
				return None

			# An empty batch emits nothing; its delay moves onto the next event.
			self._carry += pair[0]
			self._batch = iter(pair[1])


class _Chain (_Producer):

	def __init__ (self, first: "Stream[typing.Any]", second: "Stream[typing.Any]") -> None:
		self._first = first
		self._second = second

	def pull (self) -> PullResult:

		pair = self._first.next()

		if pair is not None:
			return pair

		return _Handoff(self._second._take_producer())


class _ChainAt (_Producer):

	def __init__ (self, first: "Stream[typing.Any]", second: "Stream[typing.Any]", threshold: Delay) -> None:
		self._first: typing.Optional[Stream[typing.Any]] = first
		self._second = second
		self._threshold = threshold
		self._switched = False

	def pull (self) -> PullResult:

		if self._first is not None:
			pair = self._first.next()

			if pair is not None and pair[0] <= self._threshold:
				self._threshold -= pair[0]
				return pair

			# The event crossing the threshold is dropped along with the rest of the stream.
			self._first = None

		if self._switched:
			return _Handoff(self._second._take_producer())

		self._switched = True
		pair = self._second.next()

		if pair is None:
			return None

		return pair[0] + self._threshold, pair[1]


class _Drop (_Producer):

	def __init__ (self, source: "Stream[typing.Any]", duration: Delay) -> None:
		self._source = source
		self._remaining = duration
		self._done = False

	def pull (self) -> PullResult:

		if self._done:
			return _Handoff(self._source._take_producer())

		while True:
			pair = self._source.next()

			if pair is None:
				return None

			delay, value = pair

			if delay >= self._remaining:
				self._done = True
				return delay - self._remaining, value

			self._remaining -= delay


class _Coalesce (_Producer):

	def __init__ (self, source: "Stream[typing.Any]", reduce: typing.Callable[[typing.Any, typing.Any], typing.Any]) -> None:
		self._source = source
		self._reduce = reduce
		self._head: typing.Optional[typing.Tuple[Delay, typing.Any]] = None
		self._started = False

	def pull (self) -> PullResult:

		if not self._started:
			self._started = True
			self._head = self._source.next()

		head = self._head

		if head is None:
			return None

		while True:
			pair = self._source.next()

			if pair is not None and pair[0] == 0:
				head = (head[0], self._reduce(head[1], pair[1]))
				continue

			self._head = pair
			return head


class _Merge (_Producer):

	def __init__ (self, left: "Stream[typing.Any]", right: "Stream[typing.Any]") -> None:
		self._left = left
		self._right = right
		self._left_head: typing.Optional[typing.Tuple[Delay, typing.Any]] = None
		self._right_head: typing.Optional[typing.Tuple[Delay, typing.Any]] = None
		self._started = False
		self._remainder: typing.Optional[Stream[typing.Any]] = None

	def pull (self) -> PullResult:

		if self._remainder is not None:
			return _Handoff(self._remainder._take_producer())

		if not self._started:
			self._started = True
			self._left_head = self._left.next()
			self._right_head = self._right.next()

		left_head = self._left_head
		right_head = self._right_head

		# Once a side runs dry the other side's pending delay is already relative to "now".
		if right_head is None:
			if left_head is None:
				return None
			self._remainder = self._left
			return left_head

		if left_head is None:
			self._remainder = self._right
			return right_head

		# Ties go to the left; the right head is left pending with zero delay.
		if left_head[0] <= right_head[0]:
			self._right_head = (right_head[0] - left_head[0], right_head[1])
			self._left_head = self._left.next()
			return left_head

		self._left_head = (left_head[0] - right_head[0], left_head[1])
		self._right_head = self._right.next()
		return right_head


class Stream (typing.Generic[E]):

	"""A lazy, single-owner sequence of ``(delay, value)`` events."""

	def __init__ (self, producer: _Producer) -> None:

		"""Wrap a producer.  Use the class constructors rather than calling this directly."""

		self._producer: typing.Optional[_Producer] = producer


	# -- Construction ---------------------------------------------------------

	@classmethod
	def empty (cls) -> "Stream[E]":

		"""A stream with no events."""

		return cls(_Empty())


	@classmethod
	def immediate (cls, value: E) -> "Stream[E]":

		"""A single event at delay 0."""

		return cls(_FromPairs([(0, value)]))


	@classmethod
	def from_pairs (cls, pairs: typing.Iterable[typing.Tuple[Delay, E]]) -> "Stream[E]":

		"""
		Wrap any iterable of ``(delay, value)`` pairs.

		The iterable is read lazily, one pair per pull, so generators and
		other infinite sources are fine.  A negative delay raises
		``ValueError`` when it is reached.
		"""

		return cls(_FromPairs(pairs))


	@classmethod
	def lazy (cls, factory: typing.Callable[[], "Stream[E]"]) -> "Stream[E]":

		"""
		Defer building a stream until its first event is requested.

		``factory`` is called exactly once, on the first pull, and the result
		takes over this stream.  This is how self-referential infinite streams
		are built without recursing at construction time.
		"""

		return cls(_Lazy(factory))


	# -- Reading --------------------------------------------------------------

	def next (self) -> typing.Optional[typing.Tuple[Delay, E]]:

		"""Pull the next ``(delay, value)`` pair, or ``None`` once the stream is exhausted."""

		producer = self._live()

		while True:
			result = producer.pull()

			if isinstance(result, _Handoff):
				producer = result.producer
				self._producer = producer
				continue

			if result is None:
				self._producer = _Empty()

			return result


	def __iter__ (self) -> "Stream[E]":
		return self


	def __next__ (self) -> typing.Tuple[Delay, E]:

		pair = self.next()

		if pair is None:
			raise StopIteration

		return pair


	def collect (self, limit: typing.Optional[int] = None) -> typing.List[typing.Tuple[Delay, E]]:

		"""Read up to ``limit`` events (all of them when ``limit`` is None) into a list."""

		events: typing.List[typing.Tuple[Delay, E]] = []

		while limit is None or len(events) < limit:
			pair = self.next()

			if pair is None:
				break

			events.append(pair)

		return events


	@property
	def consumed (self) -> bool:

		"""True once this handle has been given to a combinator."""

		return self._producer is None


	def __repr__ (self) -> str:
		state = "consumed" if self._producer is None else type(self._producer).__name__.lstrip("_").lower()
		return f"<Stream {state}>"


	# -- Transformation -------------------------------------------------------

	def map (self, func: typing.Callable[[E], R]) -> "Stream[R]":

		"""Apply ``func`` to every value; delays are unchanged."""

		return Stream(_Map(self._detach(), func))


	def flatten (self) -> "Stream[typing.Any]":

		"""
		Turn a stream of batches into a stream of values.

		``(d, [v1, v2, v3])`` becomes ``(d, v1), (0, v2), (0, v3)``.  An empty
		batch produces no events and its delay is added to the next event.
		"""

		return Stream(_Flatten(self._detach()))


	def flat_map (self, func: typing.Callable[[E], typing.Iterable[R]]) -> "Stream[R]":

		"""``map(func)`` followed by ``flatten()``."""

		return self.map(func).flatten()


	def chain (self, other: "Stream[E]") -> "Stream[E]":

		"""All of this stream's events, then all of ``other``'s.  This stream must be finite."""

		return Stream(_Chain(self._detach(), other._detach()))


	def chain_at (self, threshold: Delay, other: "Stream[E]") -> "Stream[E]":

		"""
		Play this stream up to ``threshold``, then switch to ``other``.

		Events are taken from this stream while their cumulative time stays
		within ``threshold``.  The first event that would land past it is
		dropped, together with everything after it.  ``other`` then starts
		exactly ``threshold`` after this stream's origin: its first delay is
		increased by whatever time was left over.
		"""

		return Stream(_ChainAt(self._detach(), other._detach(), threshold))


	def take (self, duration: Delay) -> "Stream[E]":

		"""Keep only events up to ``duration``; an event crossing the boundary is dropped, not split."""

		return self.chain_at(duration, Stream.empty())


	def drop (self, duration: Delay) -> "Stream[E]":

		"""
		Discard events that fall before ``duration``.

		The first surviving event has its delay shortened so it keeps its
		position relative to the new origin at ``duration``.
		"""

		return Stream(_Drop(self._detach(), duration))


	def delay (self, duration: Delay) -> "Stream[E]":

		"""Shift every event later by ``duration``."""

		return Stream.empty().chain_at(duration, self)


	def coalesce (self, reduce: typing.Callable[[E, E], E]) -> "Stream[E]":

		"""
		Fold runs of simultaneous events into one.

		Each event with delay 0 is combined into its predecessor with
		``reduce(previous, new)``.  The run keeps the delay of its first event.
		"""

		return Stream(_Coalesce(self._detach(), reduce))


	def merge (self, other: "Stream[E]") -> "Stream[E]":

		"""
		Interleave two streams by absolute time.

		Simultaneous events keep this stream's before ``other``'s.  Only one
		event per side is read ahead, so infinite streams merge fine.
		"""

		return Stream(_Merge(self._detach(), other._detach()))


	@staticmethod
	def merge_all (streams: typing.Iterable["Stream[E]"]) -> "Stream[E]":

		"""Merge any number of streams, left to right.  No streams gives an empty stream."""

		return functools.reduce(Stream.merge, streams, Stream.empty())


	def repeat_every (self, interval: Delay) -> "Stream[E]":

		"""
		Loop the first ``interval`` of this stream forever.

		The first ``interval`` worth of events is read once and replayed back
		to back, one copy every ``interval``.  The same value objects are
		replayed each time, so they should be immutable.
		"""

		if interval <= 0:
			raise ValueError(f"Repeat interval must be positive, got {interval!r}")

		sample = self.take(interval).collect()

		if not sample:
			return Stream.empty()

		return Stream._replay_every(sample, interval)


	@staticmethod
	def _replay_every (sample: typing.List[typing.Tuple[Delay, E]], interval: Delay) -> "Stream[E]":

		return Stream.lazy(
			lambda: Stream.from_pairs(sample).chain_at(interval, Stream._replay_every(sample, interval))
		)


	# -- Ownership ------------------------------------------------------------

	def _live (self) -> _Producer:

		if self._producer is None:
			raise StreamConsumedError("Stream has already been handed to another stream or var")

		return self._producer


	def _take_producer (self) -> _Producer:

		"""Hand this stream's producer over and mark the handle consumed."""

		producer = self._live()
		self._producer = None
		return producer


	def _detach (self) -> "Stream[E]":

		"""Move this stream into a fresh handle owned by a combinator."""

		return Stream(self._take_producer())
