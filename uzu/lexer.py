"""Lexical primitives for mini-notation.

Character classes for sound names, number literals, the separator rules and a
`Scanner` cursor that the grammar threads through every rule.

Separator rules:
- One or more whitespace characters.
- A bare `.` that is not immediately followed by a digit (`bd . sd`, `bd.sd`).
  A `.` followed by a digit belongs to the surrounding token (`bd?0.5`).
- An opening `[`, `<` or `{` directly after an item (handled by the grammar).
"""

import re
import typing


WHITESPACE = " \t\n\r"

# Characters that always end a word, even inside parentheses.
GROUP_BREAKS = "[]<>{}"

SOUND_PUNCTUATION = "-#^_"

NUMBER_RE = re.compile(r"-?\d+(?:\.\d+)?")
PARAM_RE = re.compile(r"([a-z][A-Za-z0-9_]*):(-?\d+(?:\.\d+)?)")
PARAM_KEY_RE = re.compile(r"([a-z][A-Za-z0-9_]*):")
EUCLID_RE = re.compile(r"\(\s*(-?\d+)\s*,\s*(-?\d+)\s*(?:,\s*(-?\d+)\s*)?\)")


def is_digit (char: str) -> bool:

	"""Return True for an ASCII digit."""

	return len(char) == 1 and "0" <= char <= "9"


def is_decimal_dot (text: str, index: int) -> bool:

	"""Return True if the `.` at `index` is followed by a digit."""

	return text[index] == "." and index + 1 < len(text) and is_digit(text[index + 1])


def is_separator_dot (text: str, index: int) -> bool:

	"""Return True if the `.` at `index` separates items rather than forming a decimal."""

	return text[index] == "." and not is_decimal_dot(text, index)


def is_sound_char (text: str, index: int) -> bool:

	"""
	Return True if the character at `index` can continue a sound name.

	Letters, digits and `- # ^ _` always can. A `.` only can when a digit
	follows it, otherwise it is a separator.
	"""

	char = text[index]

	if char.isascii() and char.isalnum():
		return True

	if char == ".":
		return is_decimal_dot(text, index)

	return char in SOUND_PUNCTUATION


def to_number (literal: str) -> typing.Union[int, float]:

	"""Convert a matched number literal to an int, or a float when it has a fractional part."""

	if "." in literal:
		return float(literal)

	return int(literal)


def is_integer_literal (literal: str) -> bool:

	"""Return True if a matched number literal has no fractional part."""

	return "." not in literal


def line_column (text: str, offset: int) -> typing.Tuple[int, int]:

	"""Return the 1-based (line, column) of a character offset."""

	offset = max(0, min(offset, len(text)))
	line = text.count("\n", 0, offset) + 1
	line_start = text.rfind("\n", 0, offset) + 1

	return line, offset - line_start + 1


class Scanner:

	"""
	A cursor over the pattern text.

	The grammar reads through one scanner per parse, so every offset recorded
	on the AST is an index into the original string.
	"""

	def __init__ (self, text: str) -> None:

		"""Start scanning at the beginning of `text`."""

		self.text = text
		self.pos = 0


	def at_end (self) -> bool:

		"""Return True when no input remains."""

		return self.pos >= len(self.text)


	def peek (self, ahead: int = 0) -> str:

		"""Return the character `ahead` positions from the cursor, or an empty string past the end."""

		index = self.pos + ahead

		if index >= len(self.text):
			return ""

		return self.text[index]


	def advance (self, count: int = 1) -> str:

		"""Consume and return the next `count` characters."""

		consumed = self.text[self.pos:self.pos + count]
		self.pos += len(consumed)
		return consumed


	def remaining (self) -> str:

		"""Return the unconsumed text."""

		return self.text[self.pos:]


	def at_separator (self) -> bool:

		"""Return True if whitespace or a separator dot is next."""

		return not self.at_end() and (self.peek() in WHITESPACE or is_separator_dot(self.text, self.pos))


	def skip_separators (self) -> bool:

		"""Consume any run of whitespace and separator dots. Returns True if anything was consumed."""

		start = self.pos

		while not self.at_end():

			if self.peek() in WHITESPACE or is_separator_dot(self.text, self.pos):
				self.pos += 1

			else:
				break

		return self.pos > start


	def match (self, pattern: typing.Pattern[str]) -> typing.Optional[typing.Match[str]]:

		"""Match a compiled regex at the cursor without consuming anything."""

		return pattern.match(self.text, self.pos)


	def scan_word (self) -> str:

		"""
		Consume one word: a sound name with its modifier and parameter suffixes.

		A word ends at whitespace, a separator dot, a comma or any grouping
		delimiter. Inside parentheses (Euclidean arguments) commas and
		whitespace do not end the word, grouping delimiters still do. A `)`
		without a matching `(` also ends the word and is left unconsumed.
		"""

		start = self.pos
		depth = 0

		while not self.at_end():

			char = self.peek()

			if char in GROUP_BREAKS:
				break

			if char == "(":
				depth += 1

			elif char == ")":

				if depth == 0:
					break

				depth -= 1

			elif depth == 0 and (char in WHITESPACE or char == "," or is_separator_dot(self.text, self.pos)):
				break

			self.pos += 1

		return self.text[start:self.pos]


def split_top_level (word: str, delimiter: str) -> typing.List[typing.Tuple[str, int]]:

	"""
	Split a word on `delimiter` outside parentheses.

	Returns `(segment, offset)` pairs, where `offset` is the segment's index in `word`.
	"""

	segments: typing.List[typing.Tuple[str, int]] = []
	depth = 0
	segment_start = 0

	for index, char in enumerate(word):

		if char == "(":
			depth += 1

		elif char == ")" and depth > 0:
			depth -= 1

		elif char == delimiter and depth == 0:
			segments.append((word[segment_start:index], segment_start))
			segment_start = index + 1

	segments.append((word[segment_start:], segment_start))

	return segments
