import uzu.lexer


def test_decimal_dot_versus_separator () -> None:

	"""A dot followed by a digit is part of a number; any other dot separates."""

	assert uzu.lexer.is_decimal_dot("0.5", 1)
	assert not uzu.lexer.is_decimal_dot("bd.sd", 2)
	assert uzu.lexer.is_separator_dot("bd.sd", 2)
	assert uzu.lexer.is_separator_dot("bd.", 2)


def test_sound_characters () -> None:

	"""Letters, digits, `- # ^ _` and decimal dots continue a sound name."""

	text = "a1-#^_.5?"

	assert all(uzu.lexer.is_sound_char(text, i) for i in range(8))
	assert not uzu.lexer.is_sound_char(text, 8)


def test_to_number () -> None:

	"""Integers stay integers, anything with a fractional part becomes a float."""

	assert uzu.lexer.to_number("3") == 3
	assert isinstance(uzu.lexer.to_number("3"), int)
	assert uzu.lexer.to_number("-0.25") == -0.25


def test_line_column () -> None:

	"""Line and column are 1-based and count from the last newline."""

	text = "bd sd\n  [hh"

	assert uzu.lexer.line_column(text, 0) == (1, 1)
	assert uzu.lexer.line_column(text, 3) == (1, 4)
	assert uzu.lexer.line_column(text, 8) == (2, 3)
	assert uzu.lexer.line_column(text, len(text)) == (2, 6)


def test_scan_word_stops_at_separators () -> None:

	"""Words end at whitespace, a separator dot, a comma or a grouping delimiter."""

	scanner = uzu.lexer.Scanner("bd?0.5.sd,hh[")

	assert scanner.scan_word() == "bd?0.5"
	assert scanner.skip_separators()
	assert scanner.scan_word() == "sd"
	assert scanner.peek() == ","
	scanner.advance()
	assert scanner.scan_word() == "hh"
	assert scanner.peek() == "["


def test_scan_word_keeps_euclidean_arguments () -> None:

	"""Commas and spaces inside parentheses belong to the word."""

	scanner = uzu.lexer.Scanner("bd(3, 8, 2) sd")

	assert scanner.scan_word() == "bd(3, 8, 2)"
	assert scanner.remaining() == " sd"


def test_scan_word_stops_at_unmatched_parenthesis () -> None:

	"""A `)` that closes nothing is not part of the word."""

	scanner = uzu.lexer.Scanner("sd) bd")

	assert scanner.scan_word() == "sd"
	assert scanner.peek() == ")"
	assert not scanner.at_separator()

	scanner.advance()

	assert scanner.at_separator()


def test_split_top_level_ignores_parenthesised_delimiters () -> None:

	"""Delimiters inside parentheses do not split."""

	assert uzu.lexer.split_top_level("bd(3,8)|sd", "|") == [("bd(3,8)", 0), ("sd", 8)]
	assert uzu.lexer.split_top_level("bd", "|") == [("bd", 0)]
	assert uzu.lexer.split_top_level("bd|", "|") == [("bd", 0), ("", 3)]


def test_scanner_match_does_not_consume () -> None:

	"""Matching a pattern leaves the cursor where it was."""

	scanner = uzu.lexer.Scanner("12.5x")

	match = scanner.match(uzu.lexer.NUMBER_RE)

	assert match is not None
	assert match.group(0) == "12.5"
	assert scanner.pos == 0
	assert scanner.advance(4) == "12.5"
	assert scanner.peek() == "x"
	assert scanner.peek(1) == ""
