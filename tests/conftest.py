import typing

import pytest

import uzu.event
import uzu.mini_notation
import uzu.nodes


def _parse_events (notation: str) -> typing.List[uzu.event.Event]:

	"""Parse a pattern that is expected to succeed."""

	result = uzu.mini_notation.parse(notation)

	assert not isinstance(result, uzu.mini_notation.ParseError), f"{notation!r} failed: {result}"

	return result


def _parse_tree (notation: str) -> uzu.nodes.Sequence:

	"""Parse a pattern to its AST, expecting success."""

	result = uzu.mini_notation.parse_ast(notation)

	assert not isinstance(result, uzu.mini_notation.ParseError), f"{notation!r} failed: {result}"

	return result


@pytest.fixture
def events () -> typing.Callable[[str], typing.List[uzu.event.Event]]:

	"""Return a helper that parses a pattern into events and fails the test on a ParseError."""

	return _parse_events


@pytest.fixture
def tree () -> typing.Callable[[str], uzu.nodes.Sequence]:

	"""Return a helper that parses a pattern into its AST and fails the test on a ParseError."""

	return _parse_tree


def summarize (events: typing.List[uzu.event.Event]) -> typing.List[typing.Tuple[str, float, float]]:

	"""Reduce events to `(sound, time, duration)` with times rounded for comparison."""

	return [(event.sound, round(event.time, 6), round(event.duration, 6)) for event in events]


@pytest.fixture
def summary () -> typing.Callable[[typing.List[uzu.event.Event]], typing.List[typing.Tuple[str, float, float]]]:

	"""Return the event summarizer."""

	return summarize
