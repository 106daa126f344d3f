import argparse
import logging
import sys
import typing

import avril.composition
import avril.config
import avril.midi_utils
import avril.player


# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def parse_args (argv: typing.Optional[typing.List[str]] = None) -> argparse.Namespace:

	parser = argparse.ArgumentParser(prog="avril", description="Play an endless two-voice generative melody to a MIDI synth")
	parser.add_argument("--config", default="config.yaml", help="YAML settings file (default: config.yaml)")
	parser.add_argument("--device", default=None, help="MIDI output name or name prefix (overrides the config)")
	parser.add_argument("--seed", default=None, help="Seed phrase (overrides the config)")
	parser.add_argument("--verbose", action="store_true", help="Log every message as it is sent")
	return parser.parse_args(argv)


def main (argv: typing.Optional[typing.List[str]] = None) -> int:

	"""
	Main entry point for the avril application.
	"""

	args = parse_args(argv)

	if args.verbose:
		logging.getLogger().setLevel(logging.DEBUG)

	logger.info("Avril starting...")

	try:
		settings = avril.config.load_config(args.config)
	except ValueError as e:
		logger.error(f"Invalid config {args.config}: {e}")
		return 2

	if args.device is not None:
		settings.device_prefix = args.device

	if args.seed is not None:
		settings.seed = args.seed

	device_name, midi_out = avril.midi_utils.select_output_device(settings.device_prefix)

	if midi_out is None:
		return 1

	logger.info(f"Playing to {device_name}")

	try:
		messages = avril.composition.build(settings)
		avril.player.play_stream(messages, midi_out)
	finally:
		midi_out.close()

	return 0


if __name__ == "__main__":
	sys.exit(main())
