import uzu

PATTERNS = [
	# Kick on the quarters, snare on 2 and 4
	"bd sd bd sd",
	# Tresillo kick under an off-beat hat, hats doubled
	"[bd(3,8), [~ hh]*4]",
	# Snare alternates with a clap each cycle; open hat half the time
	"bd <sd cp> bd oh?",
	# Three against four
	"{bd sd hh, cp cp cp cp}",
	# Chord changes with a louder, brighter stab
	"@Dm7 @G7 @Cmaj7 stab|gain:1.2|cutoff:2000",
]

if __name__ == "__main__":

	for notation in PATTERNS:

		print(notation)

		result = uzu.parse(notation)

		if isinstance(result, uzu.ParseError):
			print(f"  error: {result}")
			continue

		for event in result:
			sample = "" if event.sample is None else f":{event.sample}"
			print(f"  {event.time:.3f} +{event.duration:.3f}  {event.sound}{sample}  {event.params or ''}")

		print()
