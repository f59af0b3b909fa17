import copy
import os
import sys


REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
PIPELINE_DIR = os.path.join(REPO_ROOT, "pipeline")
if PIPELINE_DIR not in sys.path:
	sys.path.insert(0, PIPELINE_DIR)

from postlib import fact_extraction
from postlib import text_cleaner
from postlib import timeline_generator


#============================================
def sample_insights() -> dict:
	"""
	Create a compact insights snapshot for timeline tests.
	"""
	return {
		"project_areas": {
			"areas": [
				{"name": "Acme Corp", "session_count": 42, "description": "You are doing great work for Acme Corp."},
			]
		},
		"interaction_style": {"narrative": "I made 300 commits.", "key_pattern": "You verify everything."},
		"what_works": {"impressive_workflows": [{"title": "Ship In One Pass", "description": "x" * 400}]},
		"friction_analysis": {"categories": [{"category": "Buggy Code", "description": "Bugs were shipped to you."}]},
		"fun_ending": {"headline": "H" * 100, "detail": "Short detail."},
	}


#============================================
def acme_rules() -> list:
	return text_cleaner.compile_rules([("Acme Corp", "a client")])


#============================================
def facts_for(insights: dict):
	return fact_extraction.compute_session_facts(insights)


#============================================
def count_stats_events(timeline: list[dict]) -> int:
	total = 0
	for group in timeline:
		for event in group["events"]:
			if timeline_generator.STATS_TITLE_RE.match(event["title"]):
				total += 1
	return total


#============================================
def test_extract_events_types_and_cleaning() -> None:
	"""
	Events should be built per area, workflow, category, key pattern and fun ending.
	"""
	events = timeline_generator.extract_events(sample_insights(), acme_rules())
	assert [event["type"] for event in events] == ["milestone", "win", "friction", "insight", "insight"]
	milestone = events[0]
	assert milestone["title"] == "42 sessions: a client"
	assert milestone["description"] == "I'm doing great work for a client."
	assert len(events[1]["description"]) == 150
	assert events[2]["description"] == "Bugs were shipped to me."
	assert events[3] == {"title": "Key pattern identified", "description": "I verify everything.", "type": "insight"}
	assert len(events[4]["title"]) == 80
	assert events[4]["title"].endswith("...")


#============================================
def test_milestone_description_cut_to_120() -> None:
	"""
	Milestone descriptions should be cut to 120 characters.
	"""
	insights = sample_insights()
	insights["project_areas"]["areas"][0]["description"] = "y" * 300
	events = timeline_generator.extract_events(insights)
	assert events[0]["description"] == "y" * 120


#============================================
def test_first_timeline_run_appends_dated_group() -> None:
	"""
	An empty timeline gets one dated group ending with the stats event.
	"""
	insights = sample_insights()
	timeline = timeline_generator.generate_timeline(insights, [], facts_for(insights), "2026-02-24", acme_rules())
	assert len(timeline) == 1
	group = timeline[0]
	assert group["day"] == "2026-02-24"
	assert group["label"] == "Update - 5 new events"
	assert group["events"][-1]["title"] == "300 commits shipped"
	assert group["events"][-1]["description"] == "42 sessions, 1 project areas, building with Claude Code"
	assert "Acme Corp" not in str(timeline)


#============================================
def test_repeat_runs_keep_one_stats_event() -> None:
	"""
	Re-running with the same data adds no groups and one stats marker.
	"""
	insights = sample_insights()
	facts = facts_for(insights)
	timeline = timeline_generator.generate_timeline(insights, [], facts, "2026-02-24")
	for day in ["2026-02-25", "2026-02-26", "2026-02-27"]:
		timeline = timeline_generator.generate_timeline(insights, timeline, facts, day)
		assert len(timeline) == 1
		assert count_stats_events(timeline) == 1
	assert timeline[-1]["events"][-1]["title"] == "300 commits shipped"


#============================================
def test_new_content_adds_group_and_moves_stats() -> None:
	"""
	New events land in a new group; the old stats marker is removed.
	"""
	insights = sample_insights()
	timeline = timeline_generator.generate_timeline(insights, [], facts_for(insights), "2026-02-24")
	insights["what_works"]["impressive_workflows"].append({"title": "Parallel Agents", "description": "Two at once."})
	insights["interaction_style"]["narrative"] = "Now 320 commits."
	updated = timeline_generator.generate_timeline(insights, timeline, facts_for(insights), "2026-03-01")
	assert len(updated) == 2
	assert updated[1]["day"] == "2026-03-01"
	assert updated[1]["label"] == "Update - 1 new events"
	assert [event["title"] for event in updated[1]["events"]] == ["Parallel Agents", "320 commits shipped"]
	assert count_stats_events(updated) == 1
	assert updated[0]["events"] == timeline[0]["events"][:-1]


#============================================
def test_existing_titles_block_near_duplicates() -> None:
	"""
	Titles equal in their first 40 lowercase characters count as seen.
	"""
	existing = [
		{
			"day": "2026-01-01",
			"label": "Manual",
			"events": [{"title": "SHIP IN ONE PASS", "description": "manual", "type": "win"}],
		}
	]
	insights = sample_insights()
	timeline = timeline_generator.generate_timeline(insights, existing, facts_for(insights), "2026-02-24")
	new_titles = [event["title"] for event in timeline[1]["events"]]
	assert "Ship In One Pass" not in new_titles
	assert timeline[0]["events"][0]["description"] == "manual"


#============================================
def test_generate_timeline_does_not_mutate_input() -> None:
	"""
	The caller's timeline list should be left as it was.
	"""
	existing = [
		{
			"day": "2026-01-01",
			"label": "Old",
			"events": [{"title": "12 commits shipped", "description": "", "type": "win"}],
		}
	]
	snapshot = copy.deepcopy(existing)
	insights = sample_insights()
	timeline_generator.generate_timeline(insights, existing, facts_for(insights), "2026-02-24")
	assert existing == snapshot


#============================================
def test_no_candidates_and_no_history_returns_empty() -> None:
	"""
	Nothing to add and nothing existing yields an empty timeline.
	"""
	facts = facts_for({})
	assert timeline_generator.generate_timeline({}, [], facts, "2026-02-24") == []


#============================================
def test_load_and_save_timeline(tmp_path) -> None:
	"""
	Timeline should round-trip through disk; a missing file loads empty.
	"""
	path = str(tmp_path / "timeline.json")
	assert timeline_generator.load_timeline(path) == []
	timeline = [{"day": "2026-02-24", "label": "x", "events": []}]
	timeline_generator.save_timeline(path, timeline)
	assert timeline_generator.load_timeline(path) == timeline


#============================================
def test_count_new_events() -> None:
	"""
	Only events in appended groups are counted, and the stats event is not.
	"""
	before = [{"events": [{"title": "Old win"}]}]
	after = [
		{"events": [{"title": "Old win"}]},
		{"events": [{"title": "New win"}, {"title": "Another win"}, {"title": "300 commits shipped"}]},
	]
	assert timeline_generator.count_new_events(before, after) == 2


#============================================
def test_count_new_events_matches_group_label() -> None:
	"""
	The logged count should agree with the label of the new group.
	"""
	insights = sample_insights()
	timeline = timeline_generator.generate_timeline(insights, [], facts_for(insights), "2026-02-24")
	assert timeline_generator.count_new_events([], timeline) == 5
	assert timeline[0]["label"] == "Update - 5 new events"


#============================================
def test_comma_commits_default_keeps_one_stats_event() -> None:
	"""
	A configured commits default with a thousands separator still floats.
	"""
	insights = sample_insights()
	insights["interaction_style"]["narrative"] = "No counts here."
	facts = fact_extraction.compute_session_facts(insights, {"commits": "1,024"})
	timeline = []
	for day in ["2026-02-24", "2026-02-25", "2026-02-26"]:
		timeline = timeline_generator.generate_timeline(insights, timeline, facts, day)
		assert count_stats_events(timeline) == 1
	assert timeline[-1]["events"][-1]["title"] == "1024 commits shipped"
