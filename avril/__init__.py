"""
Avril - an endless, reproducible two-voice melody for a MIDI synth.

Avril composes as it plays.  Two random-walk voices wander a key, each
looping its current phrase until its seed changes, and the resulting note
changes are streamed to a synthesizer in real time.  The same seed phrase
always gives the same piece.

The heart of the package is a small algebra of lazy timed streams:

- **Stream** (``avril.stream``) - a possibly infinite sequence of
  ``(delay, value)`` events where each delay is relative to the previous
  event.  Combinators map, flatten, splice (``chain_at``), trim
  (``take``/``drop``), shift, coalesce, merge and loop (``repeat_every``)
  streams without ever materialising them.
- **Var** (``avril.var``) - a present value plus a stream of future
  replacements.  ``Var.sequence()`` flattens a time-varying choice of
  streams (or of Vars) into a single timeline.

Around it:

- ``avril.seed`` - a pure, label-based seed hierarchy.
- ``avril.theory`` / ``avril.melody`` - notes, scales, keys and the
  random-walk melody generator.
- ``avril.midi`` / ``avril.midi_utils`` - MIDI messages (via mido) and
  output port selection.
- ``avril.composition`` / ``avril.player`` - the piece itself and the
  sequential playback loop.

Minimal example:

    ```python
    import avril.stream

    beeps = avril.stream.Stream.immediate("beep").repeat_every(250)
    boops = avril.stream.Stream.from_pairs([(100, "boop")])

    for delay, value in beeps.merge(boops).take(600):
        print(delay, value)
    ```

Run ``python -m avril`` to play the piece to a synth whose port name starts
with ``FLUID`` (see ``config.yaml``).

Package-level exports: ``Stream``, ``Var``, ``Seed``.
"""

import avril.seed
import avril.stream
import avril.var


Seed = avril.seed.Seed
Stream = avril.stream.Stream
Var = avril.var.Var
