"""
Uzu - a mini-notation parser for live-coding music patterns.

Uzu reads the compact pattern language used by Tidal and Strudel and turns
one line of text into the exact onset times, durations and metadata of the
events in a single cycle. It makes no sound and keeps no clock: every call is
a pure function of the pattern string, so a scheduler or audio layer can call
it as often as the performer edits.

What it understands:

- **Sequences and weights.** ``"bd sd hh sd"`` divides the cycle evenly;
  ``bd@2``, ``bd _ _`` and ``~`` adjust or silence a slot.
- **Groups.** ``[...]`` subdivides (``,`` inside stacks voices), ``<...>``
  alternates per cycle, ``{...}`` layers independent meters and
  ``{...}%4`` fixes the step count.
- **Modifiers.** Sample (``:3``), Euclidean rhythms (``(3,8,2)``),
  probability (``?0.5``), repeat (``*2``), replicate (``!2``), division
  (``/2``) and playback ratio (``%2``).
- **Choices and parameters.** ``bd|sd|hh`` picks at random downstream;
  ``bd|gain:0.8|pan:0.2`` attaches sound parameters.
- **Harmony.** Scale degrees (``^b7``), chord symbols (``@Dm7``) and roman
  numerals (``@V7``).
- **Forgiving input.** An invalid modifier value keeps the word as a literal
  sound name instead of failing; structural problems come back as a
  ``ParseError`` value with a line and column.

Minimal example:

    import uzu

    for event in uzu.parse("bd(3,8) [~ sd]*2"):
        print(event.time, event.duration, event.sound)

Package-level exports: ``parse``, ``parse_ast``, ``Event``, ``ParseError``, ``MiniNotationError``.
"""

import uzu.event
import uzu.mini_notation


parse = uzu.mini_notation.parse
parse_ast = uzu.mini_notation.parse_ast
Event = uzu.event.Event
ParseError = uzu.mini_notation.ParseError
MiniNotationError = uzu.mini_notation.MiniNotationError
