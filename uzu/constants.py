"""Notation-wide constants.

- `SUBDIVISION_MODIFIERS` / `ALTERNATION_MODIFIERS` / `POLYMETRIC_MODIFIERS`: Suffix
  operators each kind of group accepts after its closing delimiter, mapped to
  the field they set.
- `OPENERS` / `CLOSERS`: Grouping delimiters, keyed by opener.
- `KNOWN_PARAMS`: Sound parameter names accepted after `|` (e.g. `bd|gain:0.8`).
- `DEFAULT_PROBABILITY`: Probability used by a bare `?`.
- `DEFAULT_MAX_DEPTH`: Nesting limit for `[]`, `<>` and `{}` groups.
- `MAX_DEPTH_LIMIT`: Largest nesting limit a caller may request.
"""

import typing


SUBDIVISION_MODIFIERS: typing.Dict[str, str] = {
	"*": "repeat",
	"/": "division",
	"%": "ratio",
}

ALTERNATION_MODIFIERS: typing.Dict[str, str] = {
	"*": "repeat",
	"/": "division",
}

POLYMETRIC_MODIFIERS: typing.Dict[str, str] = {
	"%": "steps",
}

OPENERS: typing.Dict[str, str] = {
	"[": "]",
	"<": ">",
	"{": "}",
}

CLOSERS: typing.FrozenSet[str] = frozenset(OPENERS.values())

KNOWN_PARAMS: typing.FrozenSet[str] = frozenset({
	"gain",
	"speed",
	"pan",
	"cutoff",
	"resonance",
	"delay",
	"room",
})

DEFAULT_PROBABILITY = 0.5

DEFAULT_MAX_DEPTH = 64

# Upper bound for a caller-supplied depth, keeping recursion well inside the interpreter stack.
MAX_DEPTH_LIMIT = 128

REST = "~"
ELONGATION = "_"
