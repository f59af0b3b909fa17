import re
from dataclasses import dataclass

from postlib import insights_fields


FACT_PATTERNS = {
	"commits": re.compile(r"(\d+)\s+commits"),
	"hours": re.compile(r"(\d[\d,]+)\s+hours?\s+of\s+usage"),
	"buggy_code": re.compile(r"(\d+)\s+buggy\s*code", re.IGNORECASE),
	"wrong_approach": re.compile(r"(\d+)\s+wrong\s*approach", re.IGNORECASE),
	"file_touches": re.compile(r"(\d[\d,]+)\s+file\s+touches", re.IGNORECASE),
	"messages": re.compile(r"(\d[\d,]+)\s+messages"),
}

DEFAULT_DATE_RANGE = "Dec 31 - Feb 24"

# Used when the narrative does not state a fact.
FACT_DEFAULTS = {
	"commits": "256",
	"hours": "974",
	"buggy_code": "53",
	"wrong_approach": "47",
	"file_touches": "4,169",
	"messages": "3084",
}


#============================================
@dataclass(frozen=True)
class SessionFacts:
	total_sessions: int
	project_count: int
	commits: str
	hours: str
	buggy_code: str
	wrong_approach: str
	file_touches: str
	messages: str


#============================================
def extract_number(text: str, pattern: re.Pattern) -> str | None:
	"""
	Return the first capture group of pattern in text, or None.
	"""
	match = pattern.search(text or "")
	if match is None:
		return None
	return match.group(1)


#============================================
def extract_fact(text: str, fact_name: str, defaults: dict | None = None) -> str:
	"""
	Extract one named fact from prose, falling back to its default.
	"""
	value = extract_number(text, FACT_PATTERNS[fact_name])
	if value is not None:
		return value
	merged_defaults = dict(FACT_DEFAULTS)
	merged_defaults.update(defaults or {})
	return merged_defaults[fact_name]


#============================================
def parse_count(display: str) -> int:
	"""
	Parse a display count like '4,169' into an int.
	"""
	return int(str(display).replace(",", "").strip())


#============================================
def compute_session_facts(insights: dict, defaults: dict | None = None) -> SessionFacts:
	"""
	Compute the numeric facts shared by posts, timeline and stats.
	"""
	areas = insights_fields.get_project_areas(insights)
	total_sessions = sum(insights_fields.session_count(area) for area in areas)
	narrative = insights_fields.get_text(insights, "interaction_style", "narrative")
	extracted = {}
	for fact_name in FACT_PATTERNS:
		extracted[fact_name] = extract_fact(narrative, fact_name, defaults)
	return SessionFacts(
		total_sessions=total_sessions,
		project_count=len(areas),
		**extracted,
	)


#============================================
def build_site_stats(facts: SessionFacts, date_range: str) -> dict:
	"""
	Build the site-wide stats record read by the renderer.
	"""
	return {
		"totalSessions": facts.total_sessions,
		"totalMessages": parse_count(facts.messages),
		"totalHours": parse_count(facts.hours),
		"totalCommits": parse_count(facts.commits),
		"dateRange": date_range,
		"projectCount": facts.project_count,
	}
