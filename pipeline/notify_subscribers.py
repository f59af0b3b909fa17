#!/usr/bin/env python3
import argparse
import glob
import html
import os
from datetime import datetime

import rich.console

from postlib import artifact_io
from postlib import pipeline_settings
from postlib import resend_client


DEFAULT_FROM_ADDRESS = "insights.codes <hello@insights.codes>"


#============================================
def log_step(console: rich.console.Console, message: str, style: str = "cyan") -> None:
	"""
	Print one timestamped progress line with color.
	"""
	now_text = datetime.now().strftime("%H:%M:%S")
	console.print(f"[notify_subscribers {now_text}] {message}", style=style)


#============================================
def parse_args() -> argparse.Namespace:
	"""
	Parse command-line arguments.
	"""
	parser = argparse.ArgumentParser(
		description="Announce newly published posts to email subscribers."
	)
	parser.add_argument(
		"--settings",
		default="settings.yaml",
		help="YAML settings path for data paths and notification defaults.",
	)
	parser.add_argument(
		"--send",
		action="store_true",
		help="Send broadcasts. Without this flag only a preview is printed.",
	)
	return parser.parse_args()


#============================================
def post_meta(record: dict) -> dict | None:
	"""
	Reduce a post record to the fields a notification needs.
	"""
	if not isinstance(record, dict):
		return None
	slug = str(record.get("slug", "")).strip()
	if not slug:
		return None
	return {
		"slug": slug,
		"title": str(record.get("title", "")),
		"subtitle": str(record.get("subtitle", "")),
	}


#============================================
def load_published_posts(index_path: str, personal_posts_dir: str) -> list[dict]:
	"""
	Load generated posts from the index plus any personal posts.
	"""
	posts = []
	if os.path.isfile(index_path):
		index = artifact_io.read_json(index_path)
		if not isinstance(index, list):
			raise RuntimeError(f"Posts index must contain a list: {index_path}")
		for record in index:
			meta = post_meta(record)
			if meta is not None:
				posts.append(meta)
	if os.path.isdir(personal_posts_dir):
		for path in sorted(glob.glob(os.path.join(personal_posts_dir, "*.json"))):
			meta = post_meta(artifact_io.read_json(path))
			if meta is not None:
				posts.append(meta)
	return posts


#============================================
def load_notified_slugs(path: str) -> list[str]:
	"""
	Load slugs already announced; a missing file means none.
	"""
	if not os.path.isfile(path):
		return []
	slugs = artifact_io.read_json(path)
	if not isinstance(slugs, list):
		raise RuntimeError(f"Notified slugs file must contain a list: {path}")
	return [str(slug) for slug in slugs]


#============================================
def find_new_posts(posts: list[dict], notified: list[str]) -> list[dict]:
	"""
	Return posts whose slug has not been announced, once each.
	"""
	seen = set(notified)
	new_posts = []
	for post in posts:
		if post["slug"] in seen:
			continue
		seen.add(post["slug"])
		new_posts.append(post)
	return new_posts


#============================================
def build_post_url(site_url: str, slug: str) -> str:
	return f"{site_url.rstrip('/')}/posts/{slug}"


#============================================
def build_broadcast_html(post: dict, site_url: str) -> str:
	"""
	Build the HTML body of one new-post email.
	"""
	title = html.escape(post["title"])
	subtitle = html.escape(post["subtitle"])
	url = html.escape(build_post_url(site_url, post["slug"]), quote=True)
	return (
		'<div style="font-family: system-ui, sans-serif; max-width: 480px; margin: 0 auto; padding: 40px 20px;">\n'
		'  <p style="color: #737373; font-size: 13px; margin-bottom: 20px;">insights.codes</p>\n'
		f'  <h2 style="color: #e5e5e5; font-size: 20px; margin-bottom: 8px;">{title}</h2>\n'
		f'  <p style="color: #a3a3a3; line-height: 1.6; margin-bottom: 24px;">{subtitle}</p>\n'
		f'  <a href="{url}" style="display: inline-block; padding: 12px 24px; background: #10b981; '
		'color: #000; text-decoration: none; border-radius: 6px; font-weight: 600;">Read post</a>\n'
		"</div>\n"
	)


#============================================
def print_preview(console: rich.console.Console, new_posts: list[dict], site_url: str) -> None:
	"""
	Print the posts that would be announced.
	"""
	log_step(console, f"Found {len(new_posts)} new post(s):")
	for post in new_posts:
		console.print(f"  - {post['title']}", style="bold")
		console.print(f"    {post['subtitle']}")
		console.print(f"    {build_post_url(site_url, post['slug'])}")


#============================================
def send_notifications(
	console: rich.console.Console,
	client: resend_client.ResendClient,
	new_posts: list[dict],
	audience_id: str,
	from_address: str,
	site_url: str,
) -> list[str]:
	"""
	Create and send one broadcast per post; return slugs that were sent.
	"""
	sent_slugs = []
	for post in new_posts:
		log_step(console, f"Sending notification for: {post['title']}...")
		try:
			broadcast_id = client.create_broadcast(
				audience_id,
				from_address,
				f"New post: {post['title']}",
				build_broadcast_html(post, site_url),
			)
			client.send_broadcast(broadcast_id)
		except resend_client.ResendError as error:
			log_step(console, f"Failed to notify for {post['slug']}: {error}", style="red")
			continue
		log_step(console, "  Sent!", style="green")
		sent_slugs.append(post["slug"])
	return sent_slugs


#============================================
def read_resend_credentials() -> tuple[str, str]:
	"""
	Read Resend API key and audience id from the environment.
	"""
	api_key = os.environ.get("RESEND_API_KEY", "").strip()
	audience_id = os.environ.get("RESEND_AUDIENCE_ID", "").strip()
	if not api_key or not audience_id:
		raise RuntimeError("Missing RESEND_API_KEY or RESEND_AUDIENCE_ID")
	return api_key, audience_id


#============================================
def run_notify(
	settings: dict,
	console: rich.console.Console,
	send: bool,
	client: resend_client.ResendClient | None = None,
	audience_id: str = "",
) -> list[str]:
	"""
	Diff published posts against notified slugs and optionally send.

	Returns the slugs newly recorded as notified.
	"""
	paths = pipeline_settings.resolve_data_paths(settings)
	site_url = pipeline_settings.get_site_url(settings)
	posts = load_published_posts(paths["posts_index"], paths["personal_posts_dir"])
	notified = load_notified_slugs(paths["notified_slugs"])
	new_posts = find_new_posts(posts, notified)
	if not new_posts:
		log_step(console, "No new posts to notify about.", style="green")
		return []

	print_preview(console, new_posts, site_url)
	if not send:
		log_step(console, "Run with --send to send notifications to all subscribers.", style="yellow")
		return []
	if client is None:
		raise RuntimeError("A Resend client is required when sending.")

	from_address = pipeline_settings.get_str(
		settings,
		"notify.from_address",
		DEFAULT_FROM_ADDRESS,
	)
	sent_slugs = send_notifications(console, client, new_posts, audience_id, from_address, site_url)
	if sent_slugs:
		artifact_io.write_json(paths["notified_slugs"], notified + sent_slugs)
		log_step(
			console,
			f"Updated notified-slugs.json with {len(sent_slugs)} new slug(s).",
			style="green",
		)
	return sent_slugs


#============================================
def main() -> None:
	"""
	Preview or send new-post notifications.
	"""
	args = parse_args()
	console = rich.console.Console()
	settings, _ = pipeline_settings.load_settings(args.settings)
	client = None
	audience_id = ""
	if args.send:
		api_key, audience_id = read_resend_credentials()
		client = resend_client.ResendClient(api_key)
	run_notify(settings, console, args.send, client, audience_id)


if __name__ == "__main__":
	main()
