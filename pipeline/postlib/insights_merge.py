"""
Fold archived insights runs into one snapshot.

Stats and narrative come from the latest run. Lists accumulate across
all runs, with duplicates removed by a normalized prefix of each entry's
natural key. Nothing here touches the filesystem.
"""

from postlib import insights_fields


DEDUPE_PREFIX_LEN = 60

# (section, list key, natural key field) for lists merged newest-first.
ACCUMULATED_LISTS = [
	("what_works", "impressive_workflows", "title"),
	("suggestions", "usage_patterns", "title"),
	("suggestions", "features_to_try", "feature"),
	("suggestions", "claude_md_additions", "addition"),
	("on_the_horizon", "opportunities", "title"),
]


#============================================
def normalize_key(text: str, prefix_len: int = DEDUPE_PREFIX_LEN) -> str:
	"""
	Lowercase, cut to prefix_len characters, strip.
	"""
	return str(text or "").lower()[:prefix_len].strip()


#============================================
def dedupe_by_key(items: list, key_fn) -> list:
	"""
	Keep the first item for each key, preserving order.
	"""
	seen = set()
	result = []
	for item in items:
		key = key_fn(item)
		if key in seen:
			continue
		seen.add(key)
		result.append(item)
	return result


#============================================
def dedupe_strings(items: list[str], prefix_len: int = DEDUPE_PREFIX_LEN) -> list[str]:
	"""
	Deduplicate strings by their normalized prefix.
	"""
	return dedupe_by_key(items, lambda item: normalize_key(item, prefix_len))


#============================================
def accumulate_entries(runs: list[dict], section: str, list_key: str, key_field: str) -> list[dict]:
	"""
	Union one list across runs, newest run first so its entries win.
	"""
	candidates = []
	for run in reversed(runs):
		for entry in insights_fields.get_items(run, section, list_key):
			if isinstance(entry, dict):
				candidates.append(entry)
	return dedupe_by_key(candidates, lambda entry: normalize_key(entry.get(key_field, "")))


#============================================
def merge_friction_categories(runs: list[dict]) -> list[dict]:
	"""
	Merge friction categories by name: latest description, union of examples.
	"""
	merged = {}
	for run in runs:
		for category in insights_fields.get_items(run, "friction_analysis", "categories"):
			if not isinstance(category, dict):
				continue
			name = str(category.get("category", ""))
			key = name.lower()
			examples = [str(example) for example in category.get("examples", []) or []]
			if key in merged:
				existing = merged[key]
				existing["examples"].extend(examples)
				existing["description"] = category.get("description", "")
				continue
			merged[key] = {
				"category": name,
				"description": category.get("description", ""),
				"examples": list(examples),
			}
	result = []
	for category in merged.values():
		category["examples"] = dedupe_strings(category["examples"])
		result.append(category)
	return result


#============================================
def pick_fun_ending(runs: list[dict]) -> dict:
	"""
	Pick the fun ending whose detail text is longest; ties keep the earliest.
	"""
	best = insights_fields.get_section(runs[0], "fun_ending")
	best_detail = insights_fields.get_text(runs[0], "fun_ending", "detail")
	for run in runs[1:]:
		detail = insights_fields.get_text(run, "fun_ending", "detail")
		if len(detail) > len(best_detail):
			best = insights_fields.get_section(run, "fun_ending")
			best_detail = detail
	return best


#============================================
def merge_insights(runs: list[dict]) -> dict:
	"""
	Merge insights runs, oldest first, into one snapshot.
	"""
	if not runs:
		raise RuntimeError("No insights data to merge")
	if len(runs) == 1:
		return runs[0]

	latest = runs[-1]
	lists = {}
	for section, list_key, key_field in ACCUMULATED_LISTS:
		lists[(section, list_key)] = accumulate_entries(runs, section, list_key, key_field)

	merged = {
		"project_areas": latest.get("project_areas", {"areas": []}),
		"interaction_style": latest.get("interaction_style", {}),
		"at_a_glance": latest.get("at_a_glance", {}),
		"what_works": {
			"intro": insights_fields.get_text(latest, "what_works", "intro"),
			"impressive_workflows": lists[("what_works", "impressive_workflows")],
		},
		"friction_analysis": {
			"intro": insights_fields.get_text(latest, "friction_analysis", "intro"),
			"categories": merge_friction_categories(runs),
		},
		"suggestions": {
			"claude_md_additions": lists[("suggestions", "claude_md_additions")],
			"features_to_try": lists[("suggestions", "features_to_try")],
			"usage_patterns": lists[("suggestions", "usage_patterns")],
		},
		"on_the_horizon": {
			"intro": insights_fields.get_text(latest, "on_the_horizon", "intro"),
			"opportunities": lists[("on_the_horizon", "opportunities")],
		},
		"fun_ending": pick_fun_ending(runs),
	}
	return merged


#============================================
def merge_summary(merged: dict) -> dict:
	"""
	Count merged content for progress output.
	"""
	example_count = 0
	for category in insights_fields.get_items(merged, "friction_analysis", "categories"):
		if isinstance(category, dict):
			example_count += len(category.get("examples", []) or [])
	return {
		"workflows": len(insights_fields.get_items(merged, "what_works", "impressive_workflows")),
		"friction_examples": example_count,
		"usage_patterns": len(insights_fields.get_items(merged, "suggestions", "usage_patterns")),
	}
