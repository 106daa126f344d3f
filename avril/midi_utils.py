import logging
import typing

import mido

logger = logging.getLogger(__name__)

def select_output_device(device_prefix: str) -> typing.Tuple[typing.Optional[str], typing.Optional[typing.Any]]:
    """
    Select and open a MIDI output device by name.

    An output whose name equals `device_prefix` is preferred; otherwise the
    first output whose name starts with `device_prefix` is opened (synth
    ports usually carry a client number suffix, e.g. "FLUID Synth (1234):0").

    Returns:
        A tuple of (device_name, midi_out_object) or (None, None) on failure.
    """
    try:
        outputs = mido.get_output_names()
        logger.info(f"Available MIDI outputs: {outputs}")

        if not outputs:
            logger.error("No MIDI output devices found.")
            return None, None

        if device_prefix in outputs:
            selected_name = device_prefix
        else:
            matches = [name for name in outputs if name.startswith(device_prefix)]
            if not matches:
                logger.error(
                    f"No MIDI output device matching '{device_prefix}'. "
                    f"Available devices: {outputs}"
                )
                return None, None
            selected_name = matches[0]

        midi_out = mido.open_output(selected_name)
        logger.info(f"Opened MIDI output: {selected_name}")
        return selected_name, midi_out

    except Exception as e:
        logger.error(f"Failed to open MIDI output: {e}")
        return None, None
