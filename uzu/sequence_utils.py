import typing


def bjorklund (pulses: int, steps: int) -> typing.List[int]:

	"""
	Distribute `pulses` onsets over `steps` positions as evenly as possible.

	Uses Bjorklund's construction: start with `pulses` groups of `[1]` and
	`steps - pulses` groups of `[0]`, then repeatedly append one remainder
	group to each leading group until at most one remainder group is left.
	The first onset is always at index 0.

	Example:
		```python
		bjorklund(3, 8)  # [1, 0, 0, 1, 0, 0, 1, 0]
		bjorklund(5, 8)  # [1, 0, 1, 1, 0, 1, 1, 0]
		```
	"""

	if steps <= 0:
		raise ValueError(f"Steps ({steps}) must be positive")

	if pulses < 0 or pulses > steps:
		raise ValueError(f"Pulses ({pulses}) must be between 0 and steps ({steps})")

	if pulses == 0:
		return [0] * steps

	if pulses == steps:
		return [1] * steps

	groups: typing.List[typing.List[int]] = [[1] for _ in range(pulses)]
	remainders: typing.List[typing.List[int]] = [[0] for _ in range(steps - pulses)]

	while len(remainders) > 1:

		count = min(len(groups), len(remainders))

		combined = [groups[i] + remainders[i] for i in range(count)]
		leftover = groups[count:] + remainders[count:]

		groups, remainders = combined, leftover

	return [bit for group in groups + remainders for bit in group]


def rotate (sequence: typing.List[int], offset: int) -> typing.List[int]:

	"""Rotate a sequence left by `offset` positions (modulo its length)."""

	if not sequence:
		return []

	shift = offset % len(sequence)

	return sequence[shift:] + sequence[:shift]


def generate_euclidean_sequence (steps: int, pulses: int, rotation: int = 0) -> typing.List[int]:

	"""
	Generate a Euclidean rhythm using Bjorklund's algorithm, rotated left by `rotation` steps.
	"""

	return rotate(bjorklund(pulses, steps), rotation)


def sequence_to_indices (sequence: typing.List[int]) -> typing.List[int]:

	"""Extract step indices where hits occur in a binary sequence."""

	return [i for i, v in enumerate(sequence) if v]
