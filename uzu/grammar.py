"""Recursive-descent parser from mini-notation text to an AST.

Rules, outermost first:

- `pattern  -> sequence`
- `sequence -> item (separator item)*`
- `item     -> '[' sequence (',' sequence)* ']' ('*' int | '/' number | '%' number)?`
- `item     -> '<' sequence '>' ('*' int | '/' number)?`
- `item     -> '{' sequence (',' sequence)* '}' ('%' int)?`
- `item     -> word`

A word is whatever `Scanner.scan_word` returns. It is classified as a rest,
an elongation, a harmony leaf, a random choice, an atom with `|key:value`
parameters, or a plain atom with modifier suffixes.

Invalid modifier values never fail the parse: the whole word is kept as a
literal sound name instead, so a pattern typed half way through an edit still
plays. Structural problems (unterminated or mismatched groups, trailing input,
excessive nesting) raise `MiniNotationError`.
"""

import dataclasses
import logging
import re
import typing

import uzu.constants
import uzu.lexer
import uzu.nodes


logger = logging.getLogger(__name__)


DEGREE_RE = re.compile(r"\^([b#]?)(\d+)")
CHORD_RE = re.compile(r"@([A-G][A-Za-z0-9#]*)")
ROMAN_RE = re.compile(r"@([b#]?[iIvV][A-Za-z0-9#]*)")

MIN_DEGREE = 1
MAX_DEGREE = 13

ModifierResult = typing.Optional[typing.Tuple[str, typing.Any, int]]
ModifierParser = typing.Callable[[str, int], ModifierResult]


class MiniNotationError (Exception):

	"""
	Raised by the parser when a pattern cannot be read.

	`offset` is the character index in the pattern where the problem was found.
	"""

	def __init__ (self, message: str, offset: int = 0) -> None:

		super().__init__(message)

		self.message = message
		self.offset = offset


def _sample_modifier (text: str, index: int) -> ModifierResult:

	"""`:n` - sample index, a non-negative integer."""

	match = uzu.lexer.NUMBER_RE.match(text, index + 1)

	if match is None or not uzu.lexer.is_integer_literal(match.group(0)):
		return None

	value = int(match.group(0))

	if value < 0:
		return None

	return "sample", value, match.end()


def _count_modifier (field: str) -> ModifierParser:

	"""Build a parser for an integer modifier that must be at least 1 (`*n`, `!n`)."""

	def parse_count (text: str, index: int) -> ModifierResult:

		match = uzu.lexer.NUMBER_RE.match(text, index + 1)

		if match is None or not uzu.lexer.is_integer_literal(match.group(0)):
			return None

		value = int(match.group(0))

		if value < 1:
			return None

		return field, value, match.end()

	return parse_count


def _positive_modifier (field: str) -> ModifierParser:

	"""Build a parser for a numeric modifier that must be greater than zero (`@w`, `/v`, `%r`)."""

	def parse_positive (text: str, index: int) -> ModifierResult:

		match = uzu.lexer.NUMBER_RE.match(text, index + 1)

		if match is None:
			return None

		value = float(match.group(0))

		if value <= 0:
			return None

		return field, value, match.end()

	return parse_positive


def _probability_modifier (text: str, index: int) -> ModifierResult:

	"""`?` or `?p` - play probability, defaulting to 0.5 when no value follows."""

	match = uzu.lexer.NUMBER_RE.match(text, index + 1)

	if match is None:
		return "probability", uzu.constants.DEFAULT_PROBABILITY, index + 1

	value = float(match.group(0))

	if not 0.0 <= value <= 1.0:
		return None

	return "probability", value, match.end()


def _euclidean_modifier (text: str, index: int) -> ModifierResult:

	"""`(k,n)` or `(k,n,offset)` - Euclidean rhythm with 0 < k <= n."""

	match = uzu.lexer.EUCLID_RE.match(text, index)

	if match is None:
		return None

	pulses = int(match.group(1))
	steps = int(match.group(2))
	rotation = int(match.group(3)) if match.group(3) is not None else 0

	if pulses <= 0 or pulses > steps:
		return None

	return "euclidean", uzu.nodes.Euclid(pulses, steps, rotation), match.end()


MODIFIERS: typing.Dict[str, ModifierParser] = {
	":": _sample_modifier,
	"(": _euclidean_modifier,
	"?": _probability_modifier,
	"@": _positive_modifier("weight"),
	"*": _count_modifier("repeat"),
	"!": _count_modifier("replicate"),
	"/": _positive_modifier("division"),
	"%": _positive_modifier("ratio"),
}


def _parse_modifiers (text: str, index: int) -> typing.Optional[typing.Dict[str, typing.Any]]:

	"""
	Read modifier suffixes from `index` to the end of `text`.

	Returns the atom fields they set, or None if any suffix is unknown,
	malformed, out of range or repeated.
	"""

	fields: typing.Dict[str, typing.Any] = {}

	while index < len(text):

		handler = MODIFIERS.get(text[index])

		if handler is None:
			return None

		result = handler(text, index)

		if result is None:
			return None

		field, value, index = result

		if field in fields:
			return None

		fields[field] = value

	return fields


def _split_atom (text: str) -> typing.Optional[typing.Tuple[str, typing.Dict[str, typing.Any]]]:

	"""Split a word into its sound name and modifier fields, or None if it is not a well-formed atom."""

	end = 0

	while end < len(text) and uzu.lexer.is_sound_char(text, end):
		end += 1

	if end == 0:
		return None

	fields = _parse_modifiers(text, end)

	if fields is None:
		return None

	return text[:end], fields


def _literal (text: str, start: int) -> uzu.nodes.Atom:

	logger.debug(f"Keeping {text!r} at offset {start} as a literal sound name")

	return uzu.nodes.Atom(value=text, source_start=start, source_end=start + len(text))


def _atom (text: str, start: int) -> uzu.nodes.Atom:

	"""Build an atom from a word, falling back to a literal when its modifiers are invalid."""

	parsed = _split_atom(text)

	if parsed is None:
		return _literal(text, start)

	name, fields = parsed

	return uzu.nodes.Atom(value=name, source_start=start, source_end=start + len(text), **fields)


def _harmony_leaf (text: str, start: int) -> typing.Optional[uzu.nodes.Node]:

	"""
	Recognise a whole word as a scale degree (`^3`, `^b7`), chord symbol
	(`@Dm7`) or roman numeral (`@V7`, `@bVII`).

	Returns None for anything else, including out-of-range degrees (`^0`,
	`^14`) and `@` followed by a digit, which are left to the atom rules.
	"""

	end = start + len(text)

	match = DEGREE_RE.fullmatch(text)

	if match is not None:

		accidental, digits = match.groups()

		if not MIN_DEGREE <= int(digits) <= MAX_DEGREE:
			return None

		value: typing.Union[int, str] = accidental + digits if accidental else int(digits)

		return uzu.nodes.ScaleDegree(value=value, text=text, source_start=start, source_end=end)

	match = CHORD_RE.fullmatch(text)

	if match is not None:
		return uzu.nodes.ChordSymbol(value=match.group(1), text=text, source_start=start, source_end=end)

	match = ROMAN_RE.fullmatch(text)

	if match is not None:
		return uzu.nodes.RomanNumeral(value=match.group(1), text=text, source_start=start, source_end=end)

	return None


def _is_param_segment (segment: str) -> bool:

	match = uzu.lexer.PARAM_KEY_RE.match(segment)

	return match is not None and match.group(1) in uzu.constants.KNOWN_PARAMS


def _atom_with_params (word: str, start: int, segments: typing.List[typing.Tuple[str, int]]) -> uzu.nodes.Atom:

	"""
	Build an atom from `head|key:value|key:value`.

	Unknown keys are skipped. A segment that is not `key:number`, or a head
	that is not a well-formed atom, turns the whole word into a literal.
	"""

	head = segments[0][0]
	parsed = _split_atom(head)

	if parsed is None:
		return _literal(word, start)

	params: typing.Dict[str, float] = {}

	for segment, offset in segments[1:]:

		if not segment:
			continue

		match = uzu.lexer.PARAM_RE.fullmatch(segment)

		if match is None:
			return _literal(word, start)

		key = match.group(1)

		if key not in uzu.constants.KNOWN_PARAMS:
			logger.debug(f"Ignoring unknown sound parameter {key!r} at offset {start + offset}")
			continue

		params[key] = float(match.group(2))

	name, fields = parsed

	return uzu.nodes.Atom(
		value = name,
		params = tuple(params.items()),
		source_start = start,
		source_end = start + len(word),
		**fields
	)


def _choice_option (segment: str, start: int) -> uzu.nodes.Node:

	end = start + len(segment)

	if segment in (uzu.constants.REST, uzu.constants.ELONGATION):
		return uzu.nodes.Rest(source_start=start, source_end=end)

	leaf = _harmony_leaf(segment, start)

	if leaf is not None:
		return leaf

	return _atom(segment, start)


def _piped_node (word: str, start: int) -> uzu.nodes.Node:

	"""
	Resolve a word containing a top-level `|`.

	If any segment after the first starts with a known parameter name and a
	colon, the word is an atom with parameters. Otherwise every non-empty
	segment is an option of a random choice. A single option stands alone,
	keeping the span of the whole word.
	"""

	segments = uzu.lexer.split_top_level(word, "|")

	if any(_is_param_segment(segment) for segment, _ in segments[1:]):
		return _atom_with_params(word, start, segments)

	options = [_choice_option(segment, start + offset) for segment, offset in segments if segment]

	if not options:
		return _literal(word, start)

	if len(options) == 1:
		return dataclasses.replace(options[0], source_start=start, source_end=start + len(word))

	return uzu.nodes.RandomChoice(options=tuple(options), source_start=start, source_end=start + len(word))


def word_node (word: str, start: int) -> uzu.nodes.Node:

	"""
	Classify one scanned word.

	Example:
		```python
		word_node("bd:3*2", 0)      # Atom(value="bd", sample=3, repeat=2, ...)
		word_node("bd|sd", 0)       # RandomChoice of two atoms
		word_node("bd|gain:0.8", 0) # Atom with params (("gain", 0.8),)
		word_node("^b7", 0)         # ScaleDegree(value="b7")
		word_node("bd*0", 0)        # Atom(value="bd*0"), the literal fallback
		```
	"""

	end = start + len(word)

	if word == uzu.constants.REST:
		return uzu.nodes.Rest(source_start=start, source_end=end)

	if word == uzu.constants.ELONGATION:
		return uzu.nodes.Elongation(source_start=start, source_end=end)

	leaf = _harmony_leaf(word, start)

	if leaf is not None:
		return leaf

	if len(uzu.lexer.split_top_level(word, "|")) > 1:
		return _piped_node(word, start)

	return _atom(word, start)


class Parser:

	"""
	Parses one pattern string.

	A parser holds the scanner and the current nesting depth for a single
	call; create a new one for every pattern.
	"""

	def __init__ (self, text: str, max_depth: int = uzu.constants.DEFAULT_MAX_DEPTH) -> None:

		self.scanner = uzu.lexer.Scanner(text)
		self.max_depth = max_depth
		self.depth = 0


	def parse_pattern (self) -> uzu.nodes.Sequence:

		"""Parse the whole text as one top-level sequence."""

		sequence = self._parse_sequence()

		self.scanner.skip_separators()

		if not self.scanner.at_end():
			raise MiniNotationError(f"Unexpected input remaining: {self.scanner.remaining()!r}", self.scanner.pos)

		return sequence


	def _enter_group (self, offset: int) -> None:

		if self.depth >= self.max_depth:
			raise MiniNotationError(f"Groups nested deeper than {self.max_depth} levels", offset)

		self.depth += 1


	def _at_sequence_end (self) -> bool:

		char = self.scanner.peek()

		return self.scanner.at_end() or char in uzu.constants.CLOSERS or char in ",)"


	def _parse_sequence (self) -> uzu.nodes.Sequence:

		"""
		Parse items up to a closing delimiter, a comma or the end of input.

		Items must be separated by whitespace or a `.`, except that an opening
		delimiter may follow an item directly. Anything else after an item
		ends the sequence, leaving the caller to report it.
		"""

		children: typing.List[uzu.nodes.Node] = []

		while True:

			self.scanner.skip_separators()

			if self._at_sequence_end():
				break

			children.append(self._parse_item())

			if not (self.scanner.at_separator() or self.scanner.peek() in uzu.constants.OPENERS):
				break

		return uzu.nodes.Sequence(children=tuple(children))


	def _parse_item (self) -> uzu.nodes.Node:

		char = self.scanner.peek()

		if char == "[":
			return self._parse_subdivision()

		if char == "<":
			return self._parse_alternation()

		if char == "{":
			return self._parse_polymetric()

		start = self.scanner.pos
		word = self.scanner.scan_word()

		return word_node(word, start)


	def _parse_groups (self) -> typing.List[uzu.nodes.Sequence]:

		"""Parse comma-separated sequences inside `[]` or `{}`."""

		groups = [self._parse_sequence()]

		while self.scanner.peek() == ",":
			self.scanner.advance()
			groups.append(self._parse_sequence())

		return groups


	def _parse_subdivision (self) -> uzu.nodes.Subdivision:

		start = self.scanner.pos
		self._enter_group(start)

		try:
			self.scanner.advance()
			groups = self._parse_groups()
			self._expect_closer(start)
		finally:
			self.depth -= 1

		inner: uzu.nodes.Node = groups[0] if len(groups) == 1 else uzu.nodes.Stack(groups=tuple(groups))
		modifiers = self._parse_group_modifier(start, uzu.constants.SUBDIVISION_MODIFIERS)

		return uzu.nodes.Subdivision(
			inner = inner,
			repeat = modifiers.get("repeat"),
			division = modifiers.get("division"),
			ratio = modifiers.get("ratio"),
			source_start = start,
			source_end = self.scanner.pos
		)


	def _parse_alternation (self) -> uzu.nodes.Alternation:

		start = self.scanner.pos
		self._enter_group(start)

		try:
			self.scanner.advance()
			sequence = self._parse_sequence()
			self._expect_closer(start)
		finally:
			self.depth -= 1

		modifiers = self._parse_group_modifier(start, uzu.constants.ALTERNATION_MODIFIERS)
		options = tuple(child for child in sequence.children if not isinstance(child, uzu.nodes.Elongation))

		return uzu.nodes.Alternation(
			options = options,
			repeat = modifiers.get("repeat"),
			division = modifiers.get("division"),
			source_start = start,
			source_end = self.scanner.pos
		)


	def _parse_polymetric (self) -> uzu.nodes.Polymetric:

		start = self.scanner.pos
		self._enter_group(start)

		try:
			self.scanner.advance()
			groups = self._parse_groups()
			self._expect_closer(start)
		finally:
			self.depth -= 1

		modifiers = self._parse_group_modifier(start, uzu.constants.POLYMETRIC_MODIFIERS)

		return uzu.nodes.Polymetric(
			groups = tuple(groups),
			steps = modifiers.get("steps"),
			source_start = start,
			source_end = self.scanner.pos
		)


	def _expect_closer (self, start: int) -> None:

		"""Consume the delimiter that closes the group opened at `start`."""

		opener = self.scanner.text[start]
		closer = uzu.constants.OPENERS[opener]

		if self.scanner.at_end():
			raise MiniNotationError(f"Unterminated {opener!r}: expected {closer!r} before the end of the pattern", start)

		char = self.scanner.peek()

		if char != closer:
			raise MiniNotationError(f"Expected {closer!r} to close {opener!r} at offset {start} but found {char!r}", self.scanner.pos)

		self.scanner.advance()


	def _parse_group_modifier (self, start: int, accepted: typing.Dict[str, str]) -> typing.Dict[str, typing.Any]:

		"""
		Read an optional modifier such as `*n`, `/v` or `%s` directly after a closing delimiter.

		`accepted` maps the operators this kind of group takes to the field they
		set. An operator the group does not take, or one without a number, is
		left in place so the caller reports it as unexpected input. A number
		that is out of range is consumed and dropped so the group still plays.
		"""

		op = self.scanner.peek()
		field = accepted.get(op)

		if field is None:
			return {}

		offset = self.scanner.pos
		self.scanner.advance()

		match = self.scanner.match(uzu.lexer.NUMBER_RE)

		if match is None:
			self.scanner.pos = offset
			return {}

		literal = self.scanner.advance(len(match.group(0)))
		value = uzu.lexer.to_number(literal)

		if field in ("division", "ratio"):
			valid = value > 0
			value = float(value)

		else:
			valid = isinstance(value, int) and value >= 1

		if not valid:
			logger.debug(f"Dropping {op + literal!r} after the group at offset {start}: invalid {field}")
			return {}

		return {field: value}


def parse (text: str, max_depth: int = uzu.constants.DEFAULT_MAX_DEPTH) -> uzu.nodes.Sequence:

	"""
	Parse mini-notation into its top-level `Sequence`.

	Raises:
		MiniNotationError: On an unterminated or mismatched group, input left
			over after the pattern, or groups nested deeper than `max_depth`.
	"""

	return Parser(text, max_depth).parse_pattern()
