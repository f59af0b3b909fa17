import math


DEFAULT_WORDS_PER_MINUTE = 200


#============================================
def count_words(text: str) -> int:
	"""
	Count whitespace-separated words.
	"""
	words = text.split()
	count = len(words)
	return count


#============================================
def estimate_reading_time(text: str, words_per_minute: int = DEFAULT_WORDS_PER_MINUTE) -> str:
	"""
	Return a reading-time label such as '3 min read'.
	"""
	if words_per_minute <= 0:
		raise ValueError(f"words_per_minute must be positive: {words_per_minute}")
	count = max(1, count_words(text))
	minutes = math.ceil(count / words_per_minute)
	return f"{minutes} min read"


#============================================
def cut_to_length(text: str, char_limit: int) -> str:
	"""
	Cut text to a maximum character count without adding a marker.
	"""
	if char_limit <= 0:
		return ""
	return text[:char_limit]


#============================================
def trim_to_char_limit(text: str, char_limit: int) -> str:
	"""
	Trim text to a maximum character count, ending with '...' when cut.
	"""
	clean = text.strip()
	if char_limit <= 0:
		return ""
	if len(clean) <= char_limit:
		return clean
	if char_limit <= 3:
		return clean[:char_limit]
	result = clean[:char_limit - 3].rstrip() + "..."
	return result
