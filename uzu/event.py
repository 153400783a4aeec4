import dataclasses
import typing


@dataclasses.dataclass
class Event:

	"""
	A single sound placed within one cycle.

	`time` and `duration` are fractions of the cycle. `params` holds anything
	the scheduler should pass on to the voice: probability, division, speed,
	sound parameters, harmony information, or the option lists of an
	alternation / random choice.
	"""

	sound: str
	time: float
	duration: float
	sample: typing.Optional[int] = None
	params: typing.Dict[str, typing.Any] = dataclasses.field(default_factory=dict)
	source_start: typing.Optional[int] = None
	source_end: typing.Optional[int] = None


	def to_dict (self) -> typing.Dict[str, typing.Any]:

		"""
		Export the event as plain data.
		"""

		return {
			"sound": self.sound,
			"sample": self.sample,
			"time": self.time,
			"duration": self.duration,
			"params": dict(self.params),
			"source_start": self.source_start,
			"source_end": self.source_end,
		}
