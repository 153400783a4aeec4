"""Turns an AST into timed events within one cycle.

Every node is interpreted over a window `[start_time, start_time + duration)`.
Sequences share their window between children by weight, groups subdivide or
replay it, and leaves emit events at the window they are given.
"""

import logging
import typing

import uzu.event
import uzu.nodes
import uzu.sequence_utils


logger = logging.getLogger(__name__)


WeightedItem = typing.Tuple[uzu.nodes.Node, float]


def interpret (node: uzu.nodes.Node, start_time: float = 0.0, duration: float = 1.0) -> typing.List[uzu.event.Event]:

	"""
	Interpret a node over a time window.

	Parameters:
		node: Any AST node, normally the `Sequence` returned by the parser.
		start_time: Start of the window, as a fraction of the cycle.
		duration: Length of the window, as a fraction of the cycle.

	Returns:
		Events in traversal order. Simultaneous events (stacks, polymetric
		groups) are not interleaved; sort by `time` for playback order.

	Example:
		```python
		interpret(uzu.grammar.parse("bd [sd sd]"))
		# bd at 0.0 (0.5), sd at 0.5 (0.25), sd at 0.75 (0.25)
		```
	"""

	if isinstance(node, uzu.nodes.Sequence):
		return _sequence_events(node.children, start_time, duration)

	if isinstance(node, uzu.nodes.Atom):
		return _atom_events(node, start_time, duration)

	if isinstance(node, (uzu.nodes.ScaleDegree, uzu.nodes.ChordSymbol, uzu.nodes.RomanNumeral)):
		return [_harmony_event(node, start_time, duration)]

	if isinstance(node, uzu.nodes.Stack):
		return [event for group in node.groups for event in interpret(group, start_time, duration)]

	if isinstance(node, uzu.nodes.Subdivision):
		events = _divided(_repeated(node.inner, node.repeat, start_time, duration), node.division)

		if node.ratio is not None:
			for event in events:
				event.params["speed"] = event.params.get("speed", 1.0) / node.ratio

		return events

	if isinstance(node, uzu.nodes.Alternation):
		return _alternation_events(node, start_time, duration)

	if isinstance(node, uzu.nodes.RandomChoice):
		return _choice_events(node, node.options, "random_choice", start_time, duration)

	if isinstance(node, uzu.nodes.Polymetric):
		return _polymetric_events(node, start_time, duration)

	# Rests and stray elongations take up time but make no sound.
	return []


def weighted_items (children: typing.Iterable[uzu.nodes.Node]) -> typing.List[WeightedItem]:

	"""
	Fold elongations into the weight of the item before them.

	An elongation with nothing before it becomes a rest of weight 1, and any
	elongations after that extend the rest.
	"""

	items: typing.List[WeightedItem] = []

	for child in children:

		if isinstance(child, uzu.nodes.Elongation):

			if items:
				previous, weight = items[-1]
				items[-1] = (previous, weight + 1.0)

			else:
				items.append((uzu.nodes.Rest(source_start=child.source_start, source_end=child.source_end), 1.0))

			continue

		weight = child.weight if isinstance(child, uzu.nodes.Atom) else 1.0
		items.append((child, weight))

	return items


def _sequence_events (children: typing.Iterable[uzu.nodes.Node], start_time: float, duration: float) -> typing.List[uzu.event.Event]:

	items = weighted_items(children)
	total_weight = sum(weight for _, weight in items)

	events: typing.List[uzu.event.Event] = []
	cursor = start_time

	for child, weight in items:

		slot = weight / total_weight * duration
		events.extend(interpret(child, cursor, slot))
		cursor += slot

	return events


def _repeated (node: uzu.nodes.Node, repeat: typing.Optional[int], start_time: float, duration: float) -> typing.List[uzu.event.Event]:

	"""Replay `node` in `repeat` equal consecutive windows."""

	count = repeat or 1
	slot = duration / count

	events: typing.List[uzu.event.Event] = []

	for i in range(count):
		events.extend(interpret(node, start_time + i * slot, slot))

	return events


def _divided (events: typing.List[uzu.event.Event], division: typing.Optional[float]) -> typing.List[uzu.event.Event]:

	"""Multiply each event's `division` parameter by a group's `/v` factor."""

	if division is None:
		return events

	for event in events:
		event.params["division"] = event.params.get("division", 1.0) * division

	return events


def _atom_event (atom: uzu.nodes.Atom, start_time: float, duration: float) -> uzu.event.Event:

	params: typing.Dict[str, typing.Any] = dict(atom.params)

	if atom.probability is not None:
		params["probability"] = atom.probability

	if atom.division is not None:
		params["division"] = atom.division

	if atom.ratio is not None:
		params["speed"] = 1.0 / atom.ratio

	return uzu.event.Event(
		sound = atom.value,
		time = start_time,
		duration = duration,
		sample = atom.sample,
		params = params,
		source_start = atom.source_start,
		source_end = atom.source_end
	)


def _euclidean_events (atom: uzu.nodes.Atom, euclid: uzu.nodes.Euclid, start_time: float, duration: float) -> typing.List[uzu.event.Event]:

	"""Place one event on each onset of the Euclidean rhythm, dividing the window into `steps` slots."""

	sequence = uzu.sequence_utils.generate_euclidean_sequence(euclid.steps, euclid.pulses, euclid.rotation)
	step = duration / euclid.steps

	return [_atom_event(atom, start_time + i * step, step) for i in uzu.sequence_utils.sequence_to_indices(sequence)]


def _atom_events (atom: uzu.nodes.Atom, start_time: float, duration: float) -> typing.List[uzu.event.Event]:

	"""
	Emit an atom's events.

	The window is split into `repeat` parts, each part into `replicate`
	copies, and a Euclidean rhythm (if any) is laid out inside every copy.
	"""

	count = (atom.repeat or 1) * (atom.replicate or 1)
	slot = duration / count

	events: typing.List[uzu.event.Event] = []

	for i in range(count):

		slot_start = start_time + i * slot

		if atom.euclidean is not None:
			events.extend(_euclidean_events(atom, atom.euclidean, slot_start, slot))

		else:
			events.append(_atom_event(atom, slot_start, slot))

	return events


def _harmony_event (leaf: uzu.nodes.HarmonyLeaf, start_time: float, duration: float) -> uzu.event.Event:

	return uzu.event.Event(
		sound = leaf.text,
		time = start_time,
		duration = duration,
		params = {
			"harmony_type": uzu.nodes.HARMONY_TYPES[type(leaf)],
			"harmony_value": leaf.value,
		},
		source_start = leaf.source_start,
		source_end = leaf.source_end
	)


def option_data (option: uzu.nodes.Node) -> typing.Dict[str, typing.Any]:

	"""
	Describe one alternation or random-choice option for the consumer that picks between them.

	Atoms give their sound, sample and probability, harmony leaves their
	literal text. Anything else (rests, nested groups) is all None.
	"""

	if isinstance(option, uzu.nodes.Atom):
		return {"sound": option.value, "sample": option.sample, "probability": option.probability}

	if isinstance(option, (uzu.nodes.ScaleDegree, uzu.nodes.ChordSymbol, uzu.nodes.RomanNumeral)):
		return {"sound": option.text, "sample": None, "probability": None}

	return {"sound": None, "sample": None, "probability": None}


def _choice_events (
	node: typing.Union[uzu.nodes.Alternation, uzu.nodes.RandomChoice],
	options: typing.Sequence[uzu.nodes.Node],
	key: str,
	start_time: float,
	duration: float
) -> typing.List[uzu.event.Event]:

	"""
	Collapse a set of options into one event over the whole window.

	The event sounds like the first option that has a sound; `params[key]`
	lists every option so a downstream consumer can choose per cycle.
	"""

	described = [option_data(option) for option in options]
	default = next((data for data in described if data["sound"] is not None), None)

	if default is None:
		logger.debug(f"No playable option in {node.type} at offset {node.source_start}")
		return []

	return [uzu.event.Event(
		sound = default["sound"],
		time = start_time,
		duration = duration,
		sample = default["sample"],
		params = {key: described},
		source_start = node.source_start,
		source_end = node.source_end
	)]


def _alternation_events (node: uzu.nodes.Alternation, start_time: float, duration: float) -> typing.List[uzu.event.Event]:

	if len(node.options) == 1:
		events = _repeated(node.options[0], node.repeat, start_time, duration)
		return _divided(events, node.division)

	count = node.repeat or 1
	slot = duration / count

	events = []

	for i in range(count):
		events.extend(_choice_events(node, node.options, "alternate", start_time + i * slot, slot))

	return _divided(events, node.division)


def _polymetric_events (node: uzu.nodes.Polymetric, start_time: float, duration: float) -> typing.List[uzu.event.Event]:

	"""
	Interpret a `{...}` group.

	Without steps every group plays over the whole window with its own
	subdivision. With `%steps` the window has that many equal slots and each
	group fills them round-robin from its items; an elongation extends the
	item before it by one slot.
	"""

	if node.steps is None:
		return [event for group in node.groups for event in interpret(group, start_time, duration)]

	step = duration / node.steps
	events: typing.List[uzu.event.Event] = []

	for group in node.groups:

		items = group.children

		if not items:
			continue

		for i in range(node.steps):

			item = items[i % len(items)]

			if isinstance(item, (uzu.nodes.Elongation, uzu.nodes.Rest)):
				continue

			length = 1

			while i + length < node.steps and isinstance(items[(i + length) % len(items)], uzu.nodes.Elongation):
				length += 1

			events.extend(interpret(item, start_time + i * step, step * length))

	return events
