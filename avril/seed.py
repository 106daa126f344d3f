"""Deterministic seed hierarchy.

Every random decision in a piece draws from its own :class:`Seed`, derived
from a parent seed and a label with :meth:`Seed.fork`.  Derivation is a pure
function of the parent and the label (a keyed FNV-1a hash), so the same
labels always give the same seeds, run after run, and forking one branch
never disturbs another.  There is no global random state.
"""

import dataclasses
import random
import typing


Label = typing.Union[str, int]

_FNV_PRIME = 0x100000001b3
_MASK = 0xffffffffffffffff

# Separates the parent key from the label bytes.
_DELIMITER = 0xe16013eafc14eeed


def _label_bytes (label: Label) -> bytes:

	"""Encode a fork label.  Strings are terminated so that ``"ab", "c"`` and ``"a", "bc"`` differ."""

	if isinstance(label, bool):
		raise TypeError("Seed labels must be str or int, not bool")

	if isinstance(label, str):
		return label.encode("utf-8") + b"\xff"

	if isinstance(label, int):
		return (label & _MASK).to_bytes(8, "little")

	raise TypeError(f"Seed labels must be str or int, not {type(label).__name__}")


def _fnv1a (key: int, data: bytes) -> int:

	state = key

	for byte in data:
		state ^= byte
		state = (state * _FNV_PRIME) & _MASK

	return state


@dataclasses.dataclass(frozen=True)
class Seed:

	"""An immutable 64-bit seed."""

	state: int

	@classmethod
	def new (cls, label: Label) -> "Seed":

		"""Root seed for a piece, e.g. ``Seed.new("frosted glass")``."""

		return cls(0).fork(label)


	def fork (self, label: Label) -> "Seed":

		"""Derive the child seed for ``label``."""

		data = _DELIMITER.to_bytes(8, "little") + _label_bytes(label)
		return Seed(_fnv1a(self.state, data))


	def rng (self) -> random.Random:

		"""A fresh random source for this seed.  Calling it twice gives two identical sources."""

		return random.Random(_fnv1a(self.state, _DELIMITER.to_bytes(8, "little")))


	def __repr__ (self) -> str:
		return f"Seed(0x{self.state:016x})"
