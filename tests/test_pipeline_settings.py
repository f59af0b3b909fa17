import os
import sys

import pytest


REPO_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
PIPELINE_DIR = os.path.join(REPO_ROOT, "pipeline")
if PIPELINE_DIR not in sys.path:
	sys.path.insert(0, PIPELINE_DIR)

from postlib import pipeline_settings
from postlib import text_cleaner


#============================================
def test_load_settings_missing_file(tmp_path) -> None:
	"""
	Missing settings file should return empty settings.
	"""
	settings, resolved_path = pipeline_settings.load_settings(str(tmp_path / "missing.yaml"))
	assert settings == {}
	assert resolved_path.endswith("missing.yaml")


#============================================
def test_load_settings_reads_yaml(tmp_path) -> None:
	"""
	YAML settings should be parsed into nested mapping values.
	"""
	settings_path = tmp_path / "settings.yaml"
	settings_path.write_text(
		"paths:\n"
		"  data_dir: site/data\n"
		"generator:\n"
		"  words_per_minute: 250\n",
		encoding="utf-8",
	)
	settings, _ = pipeline_settings.load_settings(str(settings_path))
	assert pipeline_settings.get_str(settings, "paths.data_dir", "") == "site/data"
	assert pipeline_settings.get_int(settings, "generator.words_per_minute", 200) == 250


#============================================
def test_load_settings_non_mapping_raises(tmp_path) -> None:
	"""
	A YAML list at the top level is not a valid settings file.
	"""
	settings_path = tmp_path / "settings.yaml"
	settings_path.write_text("- one\n- two\n", encoding="utf-8")
	with pytest.raises(RuntimeError):
		pipeline_settings.load_settings(str(settings_path))


#============================================
def test_get_int_invalid_value_raises() -> None:
	"""
	Invalid integer setting should raise RuntimeError.
	"""
	settings = {"generator": {"words_per_minute": "fast"}}
	with pytest.raises(RuntimeError):
		pipeline_settings.get_int(settings, "generator.words_per_minute", 200)


#============================================
def test_get_fact_defaults() -> None:
	"""
	Fact defaults should come back as trimmed strings.
	"""
	settings = {"generator": {"fact_defaults": {"commits": 300, "hours": " 1,000 "}}}
	assert pipeline_settings.get_fact_defaults(settings) == {"commits": "300", "hours": "1,000"}
	assert pipeline_settings.get_fact_defaults({}) == {}
	with pytest.raises(RuntimeError):
		pipeline_settings.get_fact_defaults({"generator": {"fact_defaults": ["commits"]}})


#============================================
def test_get_anonymize_rules() -> None:
	"""
	Absent rules mean built-in rules; a non-list is rejected.
	"""
	assert pipeline_settings.get_anonymize_rules({}) is None
	rules = [{"pattern": "Acme", "replacement": "a client"}]
	assert pipeline_settings.get_anonymize_rules({"anonymize": {"rules": rules}}) == rules
	with pytest.raises(RuntimeError):
		pipeline_settings.get_anonymize_rules({"anonymize": {"rules": "Acme"}})


#============================================
def test_resolve_data_paths_default_and_custom() -> None:
	"""
	Every artifact path should hang off the data directory.
	"""
	paths = pipeline_settings.resolve_data_paths({})
	assert paths["data_dir"] == "data"
	assert paths["insights"] == os.path.join("data", "insights.json")
	custom = pipeline_settings.resolve_data_paths({"paths": {"data_dir": "src/data"}})
	assert custom["archive_dir"] == os.path.join("src/data", "insights-archive")
	assert custom["notified_slugs"] == os.path.join("src/data", "notified-slugs.json")


#============================================
def test_get_site_url_env_override(monkeypatch) -> None:
	"""
	SITE_URL should win over settings, and trailing slashes are dropped.
	"""
	settings = {"notify": {"site_url": "https://from-settings.test/"}}
	monkeypatch.delenv("SITE_URL", raising=False)
	assert pipeline_settings.get_site_url(settings) == "https://from-settings.test"
	assert pipeline_settings.get_site_url({}) == "https://insights.codes"
	monkeypatch.setenv("SITE_URL", "https://from-env.test/")
	assert pipeline_settings.get_site_url(settings) == "https://from-env.test"


#============================================
def test_repo_settings_file_loads() -> None:
	"""
	The shipped settings.yaml should load and its rules should compile.
	"""
	settings, resolved_path = pipeline_settings.load_settings(os.path.join(REPO_ROOT, "settings.yaml"))
	assert os.path.isfile(resolved_path)
	raw_rules = pipeline_settings.get_anonymize_rules(settings)
	compiled = text_cleaner.compile_rules(raw_rules)
	assert len(compiled) == len(text_cleaner.DEFAULT_ANONYMIZE_RULES)
	assert pipeline_settings.get_fact_defaults(settings)["file_touches"] == "4,169"


#============================================
def test_get_value_dotted_path_and_nulls() -> None:
	"""
	Dotted lookups should fall back on missing keys, nulls and non-mappings.
	"""
	settings = {"generator": {"date_range": None, "words_per_minute": 180}, "paths": "flat"}
	assert pipeline_settings.get_value(settings, "generator.words_per_minute") == 180
	assert pipeline_settings.get_str(settings, "generator.date_range", "Jan 1 - Jan 2") == "Jan 1 - Jan 2"
	assert pipeline_settings.get_value(settings, "paths.data_dir", "data") == "data"
	assert pipeline_settings.get_value(settings, "notify.site_url") is None


#============================================
def test_relative_settings_path_falls_back_to_repo_root(tmp_path, monkeypatch) -> None:
	"""
	A relative name missing from cwd should resolve under the repo root.
	"""
	monkeypatch.chdir(tmp_path)
	settings, resolved_path = pipeline_settings.load_settings("settings.yaml")
	assert resolved_path == os.path.join(pipeline_settings.REPO_ROOT, "settings.yaml")
	assert pipeline_settings.get_str(settings, "notify.site_url", "") == "https://insights.codes"
