"""Piece settings loaded from YAML.

Example ``config.yaml``::

    seed: frosted glass
    beat_ms: 230
    phrase_beats: 16
    phrase_repetitions: 2
    num_phrases: 6
    tonic: D4
    scale: pentatonic
    midi:
      device_prefix: FLUID

Every key is optional.  A missing file means all defaults.
"""

import dataclasses
import logging
import os
import typing

import yaml

import avril.constants
import avril.theory


logger = logging.getLogger(__name__)


@dataclasses.dataclass
class Settings:

	"""Everything that shapes a performance.  Durations are in milliseconds."""

	seed: typing.Union[str, int] = "frosted glass"
	beat_ms: int = avril.constants.DEFAULT_BEAT_MS
	phrase_beats: int = 16
	phrase_repetitions: int = 2
	num_phrases: int = 6
	tonic: str = "D4"
	scale: str = "pentatonic"
	device_prefix: str = "FLUID"
	active_sensing_ms: int = avril.constants.ACTIVE_SENSING_MS

	@property
	def phrase_ms (self) -> int:
		return self.beat_ms * self.phrase_beats

	@property
	def reseed_interval_ms (self) -> int:

		"""How long each melody seed lasts before the voice moves on to the next one."""

		return self.phrase_ms * self.phrase_repetitions

	@property
	def total_ms (self) -> int:
		return self.phrase_ms * self.num_phrases


	@classmethod
	def from_dict (cls, data: typing.Dict[str, typing.Any]) -> "Settings":

		"""Build settings from a parsed config mapping.

		The ``midi`` section is flattened (``midi.device_prefix`` becomes
		``device_prefix``).

		Raises:
			ValueError: On unknown keys or any value :meth:`validate` rejects.
		"""

		values = dict(data)
		midi = values.pop("midi", None) or {}

		if not isinstance(midi, dict):
			raise ValueError("The 'midi' config section must be a mapping")

		values.update(midi)

		known = {field.name for field in dataclasses.fields(cls)}
		unknown = sorted(set(values) - known)

		if unknown:
			raise ValueError(f"Unknown config keys: {unknown}")

		settings = cls(**values)
		settings.validate()
		return settings


	def validate (self) -> None:

		"""
		Check field types and values.

		Raises:
			ValueError: On a field of the wrong type, a non-positive duration or an unknown note or scale name.
		"""

		for name in ("beat_ms", "phrase_beats", "phrase_repetitions", "num_phrases", "active_sensing_ms"):
			value = getattr(self, name)

			if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
				raise ValueError(f"{name} must be a positive integer, got {value!r}")

		# Seeds are labelled by text or integers only.
		if isinstance(self.seed, bool) or not isinstance(self.seed, (str, int)):
			raise ValueError(f"seed must be text or an integer, got {self.seed!r}")

		for name in ("tonic", "scale", "device_prefix"):
			value = getattr(self, name)

			if not isinstance(value, str):
				raise ValueError(f"{name} must be text, got {value!r}")

		# Raise ValueError for unknown note or scale names.
		avril.theory.Note.parse(self.tonic)
		avril.theory.Scale.named(self.scale)


def load_config (config_path: str = 'config.yaml') -> Settings:

	"""
	Load settings from a YAML file, falling back to defaults.
	"""

	if not os.path.exists(config_path):
		logger.warning(f"Config file {config_path} not found. Using defaults.")
		return Settings()

	with open(config_path, 'r') as f:
		data = yaml.safe_load(f)

	return Settings.from_dict(data or {})
