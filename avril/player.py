"""Real-time playback of a message stream.

Events are played strictly one after another: sleep for the event's delay,
then send it.  Timing is best effort; lateness in one send is not made up
later, since every delay is relative to the previous event.
"""

import logging
import time
import typing

import avril.constants
import avril.midi
import avril.stream


logger = logging.getLogger(__name__)


def play_stream (
	messages: avril.stream.Stream[avril.midi.MidiMessage],
	midi_out: typing.Any,
	seconds_per_unit: float = avril.constants.SECONDS_PER_UNIT,
	sleep: typing.Callable[[float], None] = time.sleep,
) -> int:

	"""Play ``messages`` to ``midi_out`` and return how many were sent.

	Parameters:
		messages: The stream to perform.  It is read to the end, so it must be
			finite (bound it with ``take()`` first).
		midi_out: An open mido output port (anything with ``send()`` and
			``panic()``).
		seconds_per_unit: Length of one delay unit in seconds; the default
			treats delays as milliseconds.
		sleep: Blocking sleep function, replaceable for tests and rendering.

	Ctrl+C stops playback early and silences the port.  Closing the port is
	left to the caller.
	"""

	sent = 0

	try:
		for delay, message in messages:
			logger.debug(f"{delay} {message}")

			if delay:
				sleep(delay * seconds_per_unit)

			midi_out.send(message.to_mido())
			sent += 1

	except KeyboardInterrupt:
		logger.info("Stopping...")

		try:
			midi_out.panic()
		except Exception:
			logger.exception("MIDI panic failed (device may be disconnected)")

	logger.info(f"Playback finished ({sent} messages sent)")
	return sent
