"""Immutable AST nodes produced by `uzu.grammar`.

Every node class carries a `type` discriminator and exports itself with
`to_dict()` for tools outside this package (pattern transformation layers,
editor highlighting). Leaves and groups record the half-open character span
`[source_start, source_end)` they were parsed from; a group's span includes its
delimiters and any modifier suffix.

Node kinds:
- Leaves: `Atom`, `Rest`, `Elongation`, `ScaleDegree`, `ChordSymbol`, `RomanNumeral`
- Structure: `Sequence`, `Stack`, `Subdivision`, `Alternation`, `Polymetric`, `RandomChoice`
"""

import dataclasses
import typing


ParamPairs = typing.Tuple[typing.Tuple[str, float], ...]


@dataclasses.dataclass(frozen=True)
class Euclid:

	"""
	Euclidean rhythm arguments from `sound(pulses,steps[,rotation])`.
	"""

	pulses: int
	steps: int
	rotation: int = 0


	def to_list (self) -> typing.List[int]:

		"""Return `[pulses, steps, rotation]`."""

		return [self.pulses, self.steps, self.rotation]


@dataclasses.dataclass(frozen=True)
class Node:

	"""
	Base class for AST nodes.
	"""

	type: typing.ClassVar[str] = "node"


	def to_dict (self) -> typing.Dict[str, typing.Any]:

		"""
		Export the node as plain data: `{"type": ..., <fields>...}`.
		"""

		data: typing.Dict[str, typing.Any] = {"type": self.type}

		for field in dataclasses.fields(self):
			data[field.name] = _export(getattr(self, field.name))

		return data


def _export (value: typing.Any) -> typing.Any:

	if isinstance(value, Node):
		return value.to_dict()

	if isinstance(value, Euclid):
		return value.to_list()

	if isinstance(value, tuple):
		return [_export(item) for item in value]

	return value


@dataclasses.dataclass(frozen=True)
class Atom (Node):

	"""
	A sound name with its modifiers, e.g. `bd:1*2?0.5|gain:0.8`.
	"""

	type: typing.ClassVar[str] = "atom"

	value: str
	sample: typing.Optional[int] = None
	weight: float = 1.0
	repeat: typing.Optional[int] = None
	replicate: typing.Optional[int] = None
	probability: typing.Optional[float] = None
	division: typing.Optional[float] = None
	ratio: typing.Optional[float] = None
	euclidean: typing.Optional[Euclid] = None
	params: ParamPairs = ()
	source_start: typing.Optional[int] = None
	source_end: typing.Optional[int] = None


	def to_dict (self) -> typing.Dict[str, typing.Any]:

		"""Export the atom, with `params` as a mapping."""

		data = super().to_dict()
		data["params"] = dict(self.params)
		return data


@dataclasses.dataclass(frozen=True)
class Rest (Node):

	"""Silence (`~`). Takes up its slot but produces no event."""

	type: typing.ClassVar[str] = "rest"

	source_start: typing.Optional[int] = None
	source_end: typing.Optional[int] = None


@dataclasses.dataclass(frozen=True)
class Elongation (Node):

	"""A standalone `_` that lengthens the item before it by one step."""

	type: typing.ClassVar[str] = "elongation"

	source_start: typing.Optional[int] = None
	source_end: typing.Optional[int] = None


@dataclasses.dataclass(frozen=True)
class ScaleDegree (Node):

	"""
	A scale degree such as `^3` or `^b7`.

	`value` is an int for a plain degree and the text after `^` when an
	accidental is present.
	"""

	type: typing.ClassVar[str] = "scale_degree"

	value: typing.Union[int, str]
	text: str = ""
	source_start: typing.Optional[int] = None
	source_end: typing.Optional[int] = None


@dataclasses.dataclass(frozen=True)
class ChordSymbol (Node):

	"""A chord symbol such as `@Dm7` (`value` is `"Dm7"`)."""

	type: typing.ClassVar[str] = "chord_symbol"

	value: str
	text: str = ""
	source_start: typing.Optional[int] = None
	source_end: typing.Optional[int] = None


@dataclasses.dataclass(frozen=True)
class RomanNumeral (Node):

	"""A roman numeral such as `@V7` or `@bVII` (`value` is the text after `@`)."""

	type: typing.ClassVar[str] = "roman_numeral"

	value: str
	text: str = ""
	source_start: typing.Optional[int] = None
	source_end: typing.Optional[int] = None


@dataclasses.dataclass(frozen=True)
class Sequence (Node):

	"""Items that share their window in proportion to their weights."""

	type: typing.ClassVar[str] = "sequence"

	children: typing.Tuple[Node, ...] = ()


@dataclasses.dataclass(frozen=True)
class Stack (Node):

	"""Comma-separated sequences inside `[...]` that play at the same time."""

	type: typing.ClassVar[str] = "stack"

	groups: typing.Tuple[Sequence, ...] = ()


@dataclasses.dataclass(frozen=True)
class Subdivision (Node):

	"""A `[...]` group, optionally followed by `*repeat`, `/division` or `%ratio`."""

	type: typing.ClassVar[str] = "subdivision"

	inner: Node = dataclasses.field(default_factory=Sequence)
	repeat: typing.Optional[int] = None
	division: typing.Optional[float] = None
	ratio: typing.Optional[float] = None
	source_start: typing.Optional[int] = None
	source_end: typing.Optional[int] = None


@dataclasses.dataclass(frozen=True)
class Alternation (Node):

	"""A `<...>` group: one option per cycle, chosen downstream."""

	type: typing.ClassVar[str] = "alternation"

	options: typing.Tuple[Node, ...] = ()
	repeat: typing.Optional[int] = None
	division: typing.Optional[float] = None
	source_start: typing.Optional[int] = None
	source_end: typing.Optional[int] = None


@dataclasses.dataclass(frozen=True)
class Polymetric (Node):

	"""A `{...}` group of sequences with independent step timing, optionally `%steps`."""

	type: typing.ClassVar[str] = "polymetric"

	groups: typing.Tuple[Sequence, ...] = ()
	steps: typing.Optional[int] = None
	source_start: typing.Optional[int] = None
	source_end: typing.Optional[int] = None


@dataclasses.dataclass(frozen=True)
class RandomChoice (Node):

	"""Pipe-separated options (`bd|sd|hh`): one is picked at random downstream."""

	type: typing.ClassVar[str] = "random_choice"

	options: typing.Tuple[Node, ...] = ()
	source_start: typing.Optional[int] = None
	source_end: typing.Optional[int] = None


HarmonyLeaf = typing.Union[ScaleDegree, ChordSymbol, RomanNumeral]

HARMONY_TYPES: typing.Dict[typing.Type[Node], str] = {
	ScaleDegree: "degree",
	ChordSymbol: "chord",
	RomanNumeral: "roman",
}
