import re


# Product and client names that must not appear in published text.
# Order matters: later rules see the output of earlier ones.
DEFAULT_ANONYMIZE_RULES = [
	("ActionTree", "the platform"),
	("Anchor Fitness", "a client"),
	("StreamFit", "a third-party service"),
	("for ActionTree's", "for the platform's"),
	("for the platform's agent system", "for the agent system"),
	("demo scripts for the platform", "demo scripts for the product"),
]

# Second person to first person. Object-position rules must run before
# the bare You/you fallback at the end.
PERSON_RULES = [
	(re.compile(r"\bYou are\b"), "I'm"),
	(re.compile(r"\byou are\b"), "I'm"),
	(re.compile(r"\bYour\b"), "My"),
	(re.compile(r"\byour\b"), "my"),
	(re.compile(r"\byourself\b"), "myself"),
	(re.compile(r"\bYourself\b"), "Myself"),
	(
		re.compile(
			r"\b(forcing|asking|telling|giving|showing|helping|letting|making|costing) you\b",
			re.IGNORECASE,
		),
		r"\1 me",
	),
	(
		re.compile(r"\b(for|to|from|with|about|at|by|into|onto|upon) you\b", re.IGNORECASE),
		r"\1 me",
	),
	(re.compile(r"\bYou\b"), "I"),
	(re.compile(r"\byou\b"), "I"),
]


#============================================
def compile_rules(raw_rules: list) -> list[tuple[re.Pattern, str]]:
	"""
	Compile anonymization rules from (pattern, replacement) pairs or
	{pattern, replacement} mappings into case-insensitive regexes.
	"""
	compiled = []
	for index, entry in enumerate(raw_rules):
		if isinstance(entry, dict):
			pattern_text = str(entry.get("pattern", "")).strip()
			replacement = str(entry.get("replacement", ""))
		else:
			pattern_text, replacement = entry
		if not pattern_text:
			raise RuntimeError(f"Anonymize rule {index} has an empty pattern.")
		try:
			pattern = re.compile(pattern_text, re.IGNORECASE)
		except re.error as error:
			raise RuntimeError(
				f"Anonymize rule {index} has an invalid pattern {pattern_text!r}: {error}"
			) from error
		compiled.append((pattern, replacement))
	return compiled


ANONYMIZE_RULES = compile_rules(DEFAULT_ANONYMIZE_RULES)


#============================================
def anonymize(text: str, rules: list | None = None) -> str:
	"""
	Replace identifying names with generic descriptions.
	"""
	if rules is None:
		rules = ANONYMIZE_RULES
	result = text
	for pattern, replacement in rules:
		result = pattern.sub(replacement, result)
	return result


#============================================
def second_to_first_person(text: str) -> str:
	"""
	Rewrite 'you/your' phrasing into 'I/my' phrasing.
	"""
	result = text
	for pattern, replacement in PERSON_RULES:
		result = pattern.sub(replacement, result)
	return result


#============================================
def clean(text: str, rules: list | None = None) -> str:
	"""
	Anonymize, then convert to first person.
	"""
	return second_to_first_person(anonymize(text or "", rules))


#============================================
def find_leaks(text: str, rules: list | None = None) -> list[str]:
	"""
	Return source patterns of rules that still match the given text.
	"""
	if rules is None:
		rules = ANONYMIZE_RULES
	leaks = []
	for pattern, _replacement in rules:
		if pattern.search(text):
			leaks.append(pattern.pattern)
	return leaks
