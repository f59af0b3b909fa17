"""
Defaulting accessors for insights snapshot dicts.

Every list in a snapshot may be empty and any key may be missing, so
readers go through these helpers instead of indexing directly.
"""


#============================================
def get_section(insights: dict, section: str) -> dict:
	"""
	Return one top-level section, or an empty dict.
	"""
	value = insights.get(section) if isinstance(insights, dict) else None
	if not isinstance(value, dict):
		return {}
	return value


#============================================
def get_text(insights: dict, section: str, key: str) -> str:
	"""
	Return one text field of a section, or an empty string.
	"""
	value = get_section(insights, section).get(key)
	if value is None:
		return ""
	return str(value)


#============================================
def get_items(insights: dict, section: str, key: str) -> list:
	"""
	Return one list field of a section, or an empty list.
	"""
	value = get_section(insights, section).get(key)
	if not isinstance(value, list):
		return []
	return value


#============================================
def get_project_areas(insights: dict) -> list[dict]:
	"""
	Return project area entries, skipping anything that is not a mapping.
	"""
	areas = []
	for area in get_items(insights, "project_areas", "areas"):
		if isinstance(area, dict):
			areas.append(area)
	return areas


#============================================
def session_count(area: dict) -> int:
	"""
	Return an area's session count as an int (0 when unusable).
	"""
	try:
		return int(area.get("session_count", 0) or 0)
	except (TypeError, ValueError):
		return 0
