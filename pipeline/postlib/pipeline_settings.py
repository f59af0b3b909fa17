import os

import yaml


DEFAULT_DATA_DIR = "data"
# Two levels up from pipeline/postlib/.
REPO_ROOT = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))


#============================================
def resolve_settings_path(path_text: str) -> str:
	"""
	Return the first existing candidate (as given, then under the repo
	root), or the as-given absolute path when neither exists.
	"""
	candidates = [os.path.abspath(path_text)]
	if not os.path.isabs(path_text):
		candidates.append(os.path.join(REPO_ROOT, path_text))
	for candidate in candidates:
		if os.path.isfile(candidate):
			return candidate
	return candidates[0]


#============================================
def load_settings(path_text: str) -> tuple[dict, str]:
	"""
	Load settings YAML; a missing or empty file gives an empty mapping.
	"""
	resolved_path = resolve_settings_path(path_text)
	if not os.path.isfile(resolved_path):
		return {}, resolved_path
	with open(resolved_path, "r", encoding="utf-8") as handle:
		data = yaml.safe_load(handle) or {}
	if not isinstance(data, dict):
		raise RuntimeError(f"Settings file must contain a mapping: {resolved_path}")
	return data, resolved_path


#============================================
def get_value(settings: dict, dotted_path: str, default_value=None):
	"""
	Look up a dotted path such as 'generator.words_per_minute'. Missing
	keys and explicit nulls both yield the default.
	"""
	current = settings
	for key in dotted_path.split("."):
		if not isinstance(current, dict) or current.get(key) is None:
			return default_value
		current = current[key]
	return current


#============================================
def get_str(settings: dict, dotted_path: str, default_value: str) -> str:
	return str(get_value(settings, dotted_path, default_value)).strip()


#============================================
def get_int(settings: dict, dotted_path: str, default_value: int) -> int:
	value = get_value(settings, dotted_path, default_value)
	try:
		return int(value)
	except (TypeError, ValueError) as error:
		raise RuntimeError(f"Setting {dotted_path} must be an integer, got {value!r}") from error


#============================================
def get_fact_defaults(settings: dict) -> dict:
	"""
	Read per-fact fallback strings used when narrative extraction misses.
	"""
	value = get_value(settings, "generator.fact_defaults", {})
	if not isinstance(value, dict):
		raise RuntimeError("Invalid settings: generator.fact_defaults must be a mapping.")
	return {str(key): str(item).strip() for key, item in value.items()}


#============================================
def get_anonymize_rules(settings: dict) -> list[dict] | None:
	"""
	Read raw anonymization rule entries, or None to use built-in rules.
	"""
	value = get_value(settings, "anonymize.rules")
	if value is None:
		return None
	if not isinstance(value, list):
		raise RuntimeError("Invalid settings: anonymize.rules must be a list.")
	return value


#============================================
def get_site_url(settings: dict, default_value: str = "https://insights.codes") -> str:
	"""
	Resolve public site URL, letting SITE_URL override settings.
	"""
	env_value = os.environ.get("SITE_URL", "").strip()
	if env_value:
		return env_value.rstrip("/")
	value = get_str(settings, "notify.site_url", default_value)
	return (value or default_value).rstrip("/")


#============================================
def resolve_data_paths(settings: dict) -> dict:
	"""
	Build every input and artifact path from paths.data_dir.
	"""
	data_dir = get_str(settings, "paths.data_dir", DEFAULT_DATA_DIR)
	if not data_dir:
		data_dir = DEFAULT_DATA_DIR
	paths = {
		"data_dir": data_dir,
		"insights": os.path.join(data_dir, "insights.json"),
		"archive_dir": os.path.join(data_dir, "insights-archive"),
		"posts_dir": os.path.join(data_dir, "posts"),
		"personal_posts_dir": os.path.join(data_dir, "personal-posts"),
		"posts_index": os.path.join(data_dir, "posts-index.json"),
		"site_stats": os.path.join(data_dir, "site-stats.json"),
		"timeline": os.path.join(data_dir, "timeline.json"),
		"notified_slugs": os.path.join(data_dir, "notified-slugs.json"),
	}
	return paths
