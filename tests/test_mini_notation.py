import typing

import pytest

import uzu.constants
import uzu.event
import uzu.mini_notation
import uzu.nodes


def test_basic_parsing (events, summary) -> None:

	"""Four items share the cycle evenly, in source order."""

	assert summary(events("bd sd hh sd")) == [
		("bd", 0.0, 0.25),
		("sd", 0.25, 0.25),
		("hh", 0.5, 0.25),
		("sd", 0.75, 0.25),
	]


def test_rests_take_time (events, summary) -> None:

	"""Rests consume their slot but produce nothing."""

	assert summary(events("bd ~ sd ~")) == [("bd", 0.0, 0.25), ("sd", 0.5, 0.25)]


def test_weight_and_elongation (events) -> None:

	"""`@` and `_` both lengthen an item relative to its neighbours."""

	weighted = events("bd@2 sd")

	assert weighted[0].duration == pytest.approx(2 / 3)
	assert weighted[1].duration == pytest.approx(1 / 3)

	elongated = events("bd _ _ sd")

	assert elongated[0].duration == pytest.approx(0.75)
	assert elongated[1].duration == pytest.approx(0.25)
	assert elongated[1].time == pytest.approx(0.75)


def test_stack_is_simultaneous (events) -> None:

	"""Stacked sounds share time and duration."""

	result = events("[bd,sd,hh]")

	assert [event.sound for event in result] == ["bd", "sd", "hh"]
	assert len({(event.time, event.duration) for event in result}) == 1


def test_polymetric_is_not_time_divided (events) -> None:

	"""Each polymetric group spans the whole cycle."""

	result = events("{bd sd hh, cp}")
	first = [event for event in result if event.sound != "cp"]
	cp, = [event for event in result if event.sound == "cp"]

	assert len(first) == 3
	assert all(event.duration == pytest.approx(1 / 3) for event in first)
	assert cp.time == 0.0
	assert cp.duration == 1.0


@pytest.mark.parametrize("notation", ["bd*0", "bd@0", "bd?1.5", "bd(5,3)", "bd(0,8)", "bd:-1", "bd%0", "bd(3,)"])
def test_fallback_to_literal (events, notation: str) -> None:

	"""An invalid modifier plays the full text as a plain sound."""

	result = events(notation)

	assert len(result) == 1
	assert result[0].sound == notation
	assert result[0].sample is None
	assert result[0].params == {}
	assert (result[0].time, result[0].duration) == (0.0, 1.0)


@pytest.mark.parametrize("notation, slices", [
	("bd:3 sd*2 ~ hh(3,8)", ["bd:3", "sd*2", "sd*2", "hh(3,8)", "hh(3,8)", "hh(3,8)"]),
	("[bd sd, hh!2] cp?0.5", ["bd", "hh!2", "sd", "hh!2", "cp?0.5"]),
	("bd|sd|hh <a:1 b> {c d, e}%3", ["bd|sd|hh", "<a:1 b>", "c", "e", "d", "e", "c", "e"]),
	("kick snare@2 _ clap|gain:0.8", ["kick", "snare@2", "clap|gain:0.8"]),
	("bd . sd . [hh hh]/2", ["bd", "sd", "hh", "hh"]),
	("<bd sd>*2 ^3 @Dm7", ["<bd sd>*2", "<bd sd>*2", "^3", "@Dm7"]),
	("bd| sd:1?", ["bd|", "sd:1?"]),
	("bd:3 [sd*2 hh|gain:1]", ["bd:3", "sd*2", "sd*2", "hh|gain:1"]),
])
def test_source_positions_round_trip (events, notation: str, slices: typing.List[str]) -> None:

	"""Every event's span is exactly the text it came from, modifiers and parameters included."""

	assert [notation[event.source_start:event.source_end] for event in events(notation)] == slices


def test_idempotence () -> None:

	"""Parsing the same text twice gives equal, independent results."""

	first = uzu.mini_notation.parse("bd(3,8) <sd cp> [hh hh]/2")
	second = uzu.mini_notation.parse("bd(3,8) <sd cp> [hh hh]/2")

	assert first == second
	assert first is not second

	first[0].params["gain"] = 0.1

	assert "gain" not in second[0].params


def test_events_are_sorted_by_time (events) -> None:

	"""Events come back in time order, stable for simultaneous ones."""

	result = events("{bd bd, sd sd sd}")

	times = [event.time for event in result]

	assert times == sorted(times)
	assert result[0].sound == "bd"
	assert result[1].sound == "sd"


def test_unterminated_group_error () -> None:

	"""An unclosed group returns an error located at its opening delimiter."""

	error = uzu.mini_notation.parse("bd sd\n[hh hh")

	assert isinstance(error, uzu.mini_notation.ParseError)
	assert error.offset == 6
	assert (error.line, error.column) == (2, 1)
	assert error.remaining == "[hh hh"
	assert "line 2, column 1" in str(error)


def test_trailing_input_error () -> None:

	"""Text left after a complete pattern is reported with its position."""

	error = uzu.mini_notation.parse("bd sd } hh")

	assert isinstance(error, uzu.mini_notation.ParseError)
	assert error.remaining == "} hh"
	assert error.column == 7


@pytest.mark.parametrize("notation, remaining", [
	("[a]bd", "bd"),
	("[a]*2x", "x"),
	("[a]*bd", "*bd"),
	("bd sd)", ")"),
])
def test_unseparated_input_error (notation: str, remaining: str) -> None:

	"""Text stuck to the end of a group, or a stray `)`, is an error rather than a new sound."""

	error = uzu.mini_notation.parse(notation)

	assert isinstance(error, uzu.mini_notation.ParseError)
	assert error.remaining == remaining
	assert error.offset == len(notation) - len(remaining)


def test_parse_ast_error () -> None:

	"""The AST entry point reports errors the same way."""

	error = uzu.mini_notation.parse_ast("<bd sd]")

	assert isinstance(error, uzu.mini_notation.ParseError)
	assert error.remaining == "]"
	assert error.to_dict()["column"] == 7


def test_parse_ast_returns_sequence (tree) -> None:

	"""The AST entry point returns the top-level sequence."""

	result = tree("bd [sd sd]")

	assert isinstance(result, uzu.nodes.Sequence)
	assert result.to_dict()["children"][1]["type"] == "subdivision"


def test_nesting_depth () -> None:

	"""Deep nesting is a structured error, not a crash."""

	deep = "[" * 200 + "bd" + "]" * 200

	error = uzu.mini_notation.parse(deep)

	assert isinstance(error, uzu.mini_notation.ParseError)
	assert error.offset == uzu.constants.DEFAULT_MAX_DEPTH

	shallow = "[" * 3 + "bd" + "]" * 3

	assert isinstance(uzu.mini_notation.parse(shallow, max_depth=3), list)
	assert isinstance(uzu.mini_notation.parse(shallow, max_depth=2), uzu.mini_notation.ParseError)


def test_invalid_arguments () -> None:

	"""Only a string pattern and a sensible depth are accepted."""

	with pytest.raises(TypeError):
		uzu.mini_notation.parse(typing.cast(str, None))

	with pytest.raises(ValueError):
		uzu.mini_notation.parse("bd", max_depth=0)

	with pytest.raises(ValueError):
		uzu.mini_notation.parse("bd", max_depth=uzu.constants.MAX_DEPTH_LIMIT + 1)


def test_event_export (events) -> None:

	"""`Event.to_dict` gives plain data for a scheduler."""

	event, = events("bd:2?0.5")

	assert event.to_dict() == {
		"sound": "bd",
		"sample": 2,
		"time": 0.0,
		"duration": 1.0,
		"params": {"probability": 0.5},
		"source_start": 0,
		"source_end": 8,
	}


def test_package_exports () -> None:

	"""The package root exposes the public entry points."""

	import uzu

	assert uzu.parse is uzu.mini_notation.parse
	assert uzu.ParseError is uzu.mini_notation.ParseError
	assert isinstance(uzu.parse("bd")[0], uzu.event.Event)
