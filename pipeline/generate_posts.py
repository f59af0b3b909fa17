#!/usr/bin/env python3
import argparse
import json
import os
from datetime import datetime

import rich.console
import rich.table

from postlib import artifact_io
from postlib import directive_markup
from postlib import fact_extraction
from postlib import insights_archive
from postlib import insights_merge
from postlib import pipeline_settings
from postlib import pipeline_text_utils
from postlib import post_generator
from postlib import text_cleaner
from postlib import timeline_generator


#============================================
def log_step(console: rich.console.Console, message: str, style: str = "cyan") -> None:
	"""
	Print one timestamped progress line with color.
	"""
	now_text = datetime.now().strftime("%H:%M:%S")
	console.print(f"[generate_posts {now_text}] {message}", style=style)


#============================================
def parse_args() -> argparse.Namespace:
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Generate blog posts, stats and timeline from archived insights runs."
	)
	parser.add_argument(
		"--settings",
		default="settings.yaml",
		help="YAML settings path for data paths and generator defaults.",
	)
	args = parser.parse_args()
	return args


#============================================
def resolve_rules(settings: dict) -> list:
	"""
	Compile anonymization rules from settings, or use the built-in set.
	"""
	raw_rules = pipeline_settings.get_anonymize_rules(settings)
	if raw_rules is None:
		return text_cleaner.ANONYMIZE_RULES
	return text_cleaner.compile_rules(raw_rules)


#============================================
def write_posts(posts_dir: str, posts: list) -> list[str]:
	"""
	Write one JSON artifact per post.
	"""
	written = []
	for post in posts:
		path = os.path.join(posts_dir, f"{post.slug}.json")
		written.append(artifact_io.write_json(path, post.to_dict()))
	return written


#============================================
def check_directives(console: rich.console.Console, posts: list) -> int:
	"""
	Warn about directive markers the parser could not match.
	"""
	problem_count = 0
	for post in posts:
		nodes = directive_markup.parse_markup(post.content)
		for line in directive_markup.find_stray_markers(nodes):
			problem_count += 1
			log_step(console, f"Warning: unmatched directive in {post.slug}: {line}", style="yellow")
	return problem_count


#============================================
def check_leaks(console: rich.console.Console, posts: list, timeline: list, rules: list) -> list[str]:
	"""
	Warn when any anonymization pattern still matches generated output.
	"""
	all_content = "\n".join(post.content for post in posts)
	all_content += "\n" + json.dumps(timeline, ensure_ascii=False)
	leaks = text_cleaner.find_leaks(all_content, rules)
	if leaks:
		log_step(console, "Warning: sensitive names still present in output:", style="yellow")
		for pattern_text in leaks:
			console.print(f"   - Pattern: {pattern_text}", style="yellow")
	else:
		log_step(console, "No sensitive names detected in output", style="green")
	return leaks


#============================================
def render_post_table(console: rich.console.Console, posts: list) -> None:
	"""
	Render generated post summary table.
	"""
	table = rich.table.Table(title="Generated Posts")
	table.add_column("Slug", style="bold cyan")
	table.add_column("Title")
	table.add_column("Reading time", justify="right")
	for post in posts:
		table.add_row(post.slug, post.title, post.reading_time)
	console.print(table)


#============================================
def run_generation(
	settings: dict,
	console: rich.console.Console,
	today: str | None = None,
) -> dict:
	"""
	Archive, merge, generate and write every artifact.

	Returns a summary with the posts, timeline, stats and leak patterns.
	"""
	paths = pipeline_settings.resolve_data_paths(settings)
	insights_path = paths["insights"]
	if not os.path.isfile(insights_path):
		raise FileNotFoundError(f"No insights.json found at {insights_path}")
	if today is None:
		today = insights_archive.today_stamp()

	rules = resolve_rules(settings)
	words_per_minute = pipeline_settings.get_int(
		settings,
		"generator.words_per_minute",
		pipeline_text_utils.DEFAULT_WORDS_PER_MINUTE,
	)
	date_range = pipeline_settings.get_str(
		settings,
		"generator.date_range",
		fact_extraction.DEFAULT_DATE_RANGE,
	)
	fact_defaults = pipeline_settings.get_fact_defaults(settings)

	archived_path = insights_archive.archive_insights(insights_path, paths["archive_dir"], today)
	if archived_path:
		log_step(console, f"Archived insights -> {os.path.basename(archived_path)}")

	runs = insights_archive.load_all_insights(paths["archive_dir"])
	log_step(console, f"Found {len(runs)} archived insights run(s)")
	merged = insights_merge.merge_insights(runs)
	summary = insights_merge.merge_summary(merged)
	log_step(
		console,
		f"Merged: {summary['workflows']} workflows, "
		+ f"{summary['friction_examples']} friction examples, "
		+ f"{summary['usage_patterns']} usage patterns",
	)

	facts = fact_extraction.compute_session_facts(merged, fact_defaults)
	posts = post_generator.generate_posts(merged, facts, today, rules, words_per_minute)

	existing_timeline = timeline_generator.load_timeline(paths["timeline"])
	timeline = timeline_generator.generate_timeline(merged, existing_timeline, facts, today, rules)
	new_event_count = timeline_generator.count_new_events(existing_timeline, timeline)
	if new_event_count:
		log_step(console, f"Timeline: {new_event_count} new events added for {today}")
	else:
		log_step(console, "Timeline: no new events, updated stats")

	stats = fact_extraction.build_site_stats(facts, date_range)

	write_posts(paths["posts_dir"], posts)
	artifact_io.write_json(paths["posts_index"], post_generator.post_index_records(posts))
	artifact_io.write_json(paths["site_stats"], stats)
	timeline_generator.save_timeline(paths["timeline"], timeline)
	log_step(console, f"Generated {len(posts)} blog posts + timeline in {paths['data_dir']}", style="green")

	check_directives(console, posts)
	leaks = check_leaks(console, posts, timeline, rules)
	return {
		"posts": posts,
		"timeline": timeline,
		"stats": stats,
		"leaks": leaks,
	}


#============================================
def main() -> None:
	"""
	Generate all blog artifacts from the live insights export.
	"""
	args = parse_args()
	console = rich.console.Console()
	settings, settings_path = pipeline_settings.load_settings(args.settings)
	log_step(console, f"Using settings file: {settings_path}")
	log_step(console, "Generating blog posts from insights data...")
	try:
		result = run_generation(settings, console)
	except FileNotFoundError as error:
		log_step(console, str(error), style="red")
		raise SystemExit(1) from error
	render_post_table(console, result["posts"])


if __name__ == "__main__":
	main()
