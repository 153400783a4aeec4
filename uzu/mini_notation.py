import dataclasses
import typing

import uzu.constants
import uzu.event
import uzu.grammar
import uzu.interpreter
import uzu.lexer
import uzu.nodes


MiniNotationError = uzu.grammar.MiniNotationError


@dataclasses.dataclass(frozen=True)
class ParseError:

	"""
	Describes why a pattern could not be parsed.

	Returned (never raised) by `parse` and `parse_ast`, so a live-coding host
	can show the problem and keep playing the previous pattern.
	"""

	message: str
	remaining: str
	offset: int
	line: int
	column: int


	def __str__ (self) -> str:

		return f"{self.message} (line {self.line}, column {self.column})"


	def to_dict (self) -> typing.Dict[str, typing.Any]:

		"""Export the error as plain data."""

		return dataclasses.asdict(self)


def _check_arguments (notation: typing.Any, max_depth: int) -> None:

	if not isinstance(notation, str):
		raise TypeError(f"notation must be a str, not {type(notation).__name__}")

	if not 1 <= max_depth <= uzu.constants.MAX_DEPTH_LIMIT:
		raise ValueError(f"max_depth must be between 1 and {uzu.constants.MAX_DEPTH_LIMIT}")


def _error (notation: str, exc: MiniNotationError) -> ParseError:

	line, column = uzu.lexer.line_column(notation, exc.offset)

	return ParseError(
		message = exc.message,
		remaining = notation[exc.offset:],
		offset = exc.offset,
		line = line,
		column = column
	)


def parse_ast (notation: str, max_depth: int = uzu.constants.DEFAULT_MAX_DEPTH) -> typing.Union[uzu.nodes.Sequence, ParseError]:

	"""
	Parse mini-notation into an AST without interpreting it.

	Parameters:
		notation: The pattern text.
		max_depth: How deeply `[]`, `<>` and `{}` groups may nest.

	Returns:
		The top-level `Sequence` node, or a `ParseError`.

	Example:
		```python
		tree = parse_ast("bd [sd sd]")
		tree.to_dict()["children"][1]["type"]  # "subdivision"
		```
	"""

	_check_arguments(notation, max_depth)

	try:
		return uzu.grammar.parse(notation, max_depth)

	except MiniNotationError as exc:
		return _error(notation, exc)


def parse (notation: str, max_depth: int = uzu.constants.DEFAULT_MAX_DEPTH) -> typing.Union[typing.List[uzu.event.Event], ParseError]:

	"""
	Parse a mini-notation string into the events of one cycle.

	Items separated by whitespace (or a `.`) share the cycle `[0, 1)` in
	proportion to their weights; groups subdivide, alternate or layer their
	slot.

	**Syntax:**
	- `bd sd`: Sequence. `~` is a rest, `_` extends the previous item.
	- `[bd sd]`, `[bd, sd]`: Subdivision and stack. `*n`, `/v` or `%r` may follow.
	- `<bd sd>`: Alternation, one option per cycle (chosen downstream).
	- `{bd sd hh, cp}`, `{bd sd}%4`: Polymetric groups.
	- `bd|sd`: Random choice. `bd|gain:0.8`: Sound parameters.
	- `bd:3`, `bd(3,8,2)`, `bd?0.5`, `bd@2`, `bd*2`, `bd!2`, `bd/2`, `bd%2`:
	  Sample, Euclidean rhythm, probability, weight, repeat, replicate,
	  division and playback ratio.
	- `^3`, `^b7`, `@Dm7`, `@V7`: Scale degrees, chord symbols and roman numerals.

	Parameters:
		notation: The pattern text.
		max_depth: How deeply `[]`, `<>` and `{}` groups may nest.

	Returns:
		Events sorted by `time` (events at the same time keep their source
		order), or a `ParseError` describing the first problem found.

	Raises:
		TypeError: If `notation` is not a string.
		ValueError: If `max_depth` is outside 1 to 128.

	Example:
		```python
		# Kick on the quarters, snare on 2 and 4
		parse("bd sd bd sd")

		# Three kicks spread over eight steps
		parse("bd(3,8)")
		```
	"""

	tree = parse_ast(notation, max_depth)

	if isinstance(tree, ParseError):
		return tree

	events = uzu.interpreter.interpret(tree)

	return sorted(events, key=lambda event: event.time)
