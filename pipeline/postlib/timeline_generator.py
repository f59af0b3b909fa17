import copy
import os
import re

from postlib import artifact_io
from postlib import fact_extraction
from postlib import insights_fields
from postlib import pipeline_text_utils
from postlib import text_cleaner


EVENT_KEY_LEN = 40
STATS_TITLE_RE = re.compile(r"^\d+ commits shipped$")
EVENT_TYPES = ("milestone", "win", "friction", "insight")


#============================================
def event_key(title: str) -> str:
	"""
	Normalize an event title for duplicate checks.
	"""
	return str(title or "").lower()[:EVENT_KEY_LEN].strip()


#============================================
def make_event(title: str, description: str, event_type: str) -> dict:
	if event_type not in EVENT_TYPES:
		raise ValueError(f"Unknown timeline event type: {event_type}")
	return {"title": title, "description": description, "type": event_type}


#============================================
def extract_events(insights: dict, rules: list | None = None) -> list[dict]:
	"""
	Build candidate timeline events from an insights snapshot.
	"""
	events = []
	for area in insights_fields.get_project_areas(insights):
		title = f"{insights_fields.session_count(area)} sessions: {text_cleaner.anonymize(str(area.get('name', '')), rules)}"
		description = pipeline_text_utils.cut_to_length(text_cleaner.clean(area.get("description"), rules), 120)
		events.append(make_event(title, description, "milestone"))

	for workflow in insights_fields.get_items(insights, "what_works", "impressive_workflows"):
		if not isinstance(workflow, dict):
			continue
		title = text_cleaner.anonymize(str(workflow.get("title", "")), rules)
		description = pipeline_text_utils.cut_to_length(text_cleaner.clean(workflow.get("description"), rules), 150)
		events.append(make_event(title, description, "win"))

	for category in insights_fields.get_items(insights, "friction_analysis", "categories"):
		if not isinstance(category, dict):
			continue
		title = text_cleaner.anonymize(str(category.get("category", "")), rules)
		description = pipeline_text_utils.cut_to_length(text_cleaner.clean(category.get("description"), rules), 150)
		events.append(make_event(title, description, "friction"))

	key_pattern = insights_fields.get_text(insights, "interaction_style", "key_pattern")
	if key_pattern:
		events.append(make_event("Key pattern identified", text_cleaner.clean(key_pattern, rules), "insight"))

	headline = insights_fields.get_text(insights, "fun_ending", "headline")
	if headline:
		detail = insights_fields.get_text(insights, "fun_ending", "detail")
		events.append(
			make_event(
				pipeline_text_utils.trim_to_char_limit(text_cleaner.clean(headline, rules), 80),
				pipeline_text_utils.cut_to_length(text_cleaner.clean(detail, rules), 150),
				"insight",
			)
		)
	return events


#============================================
def dedupe_events(events: list[dict]) -> list[dict]:
	"""
	Keep the first event for each normalized title.
	"""
	seen = set()
	result = []
	for event in events:
		key = event_key(event.get("title", ""))
		if key in seen:
			continue
		seen.add(key)
		result.append(event)
	return result


#============================================
def build_stats_event(facts: fact_extraction.SessionFacts) -> dict:
	"""
	Build the floating 'N commits shipped' summary event.
	"""
	# Digits only: STATS_TITLE_RE has to match this title.
	commits = fact_extraction.parse_count(facts.commits)
	return make_event(
		f"{commits} commits shipped",
		f"{facts.total_sessions} sessions, {facts.project_count} project areas, building with Claude Code",
		"win",
	)


#============================================
def is_stats_event(event: dict) -> bool:
	return bool(STATS_TITLE_RE.match(str(event.get("title", ""))))


#============================================
def generate_timeline(
	insights: dict,
	existing: list[dict],
	facts: fact_extraction.SessionFacts,
	today: str,
	rules: list | None = None,
) -> list[dict]:
	"""
	Return the timeline with new events appended as one dated group.

	Existing groups are kept in order and never merged; only the stats
	event is moved so exactly one copy survives. The input is not mutated.
	"""
	timeline = copy.deepcopy(existing)

	seen_titles = set()
	for group in timeline:
		for event in group.get("events", []):
			seen_titles.add(event_key(event.get("title", "")))

	candidates = extract_events(insights, rules)
	new_events = dedupe_events(
		[event for event in candidates if event_key(event["title"]) not in seen_titles]
	)

	for group in timeline:
		group["events"] = [event for event in group.get("events", []) if not is_stats_event(event)]

	stats_event = build_stats_event(facts)
	if not new_events:
		if timeline:
			timeline[-1]["events"].append(stats_event)
		return timeline

	timeline.append(
		{
			"day": today,
			"label": f"Update - {len(new_events)} new events",
			"events": dedupe_events(new_events + [stats_event]),
		}
	)
	return timeline


#============================================
def count_new_events(before: list[dict], after: list[dict]) -> int:
	"""
	Count events in groups appended after the existing ones, not
	counting the floating stats event.
	"""
	total = 0
	for group in after[len(before):]:
		for event in group.get("events", []):
			if not is_stats_event(event):
				total += 1
	return total


#============================================
def load_timeline(path: str) -> list[dict]:
	"""
	Load the timeline JSON, or an empty list when absent.
	"""
	if not os.path.isfile(path):
		return []
	timeline = artifact_io.read_json(path)
	if not isinstance(timeline, list):
		raise RuntimeError(f"Timeline file must contain a list: {path}")
	return timeline


#============================================
def save_timeline(path: str, timeline: list[dict]) -> str:
	return artifact_io.write_json(path, timeline)
