import glob
import os
import shutil
from datetime import datetime
from datetime import timezone

from postlib import artifact_io


#============================================
def today_stamp() -> str:
	"""
	Return today's UTC date as YYYY-MM-DD.
	"""
	return datetime.now(timezone.utc).date().isoformat()


#============================================
def build_archive_path(archive_dir: str, date_text: str) -> str:
	"""
	Build the archive file path for one calendar day.
	"""
	# Validate date format early for safer path handling.
	datetime.strptime(date_text, "%Y-%m-%d")
	return os.path.join(archive_dir, f"{date_text}.json")


#============================================
def archive_insights(insights_path: str, archive_dir: str, today: str | None = None) -> str | None:
	"""
	Copy the live insights file into the dated archive.

	Returns the new archive path, or None when there was nothing to do:
	the live file is missing or today's copy already exists.
	"""
	if not os.path.isfile(insights_path):
		return None
	if today is None:
		today = today_stamp()
	os.makedirs(archive_dir, exist_ok=True)
	archive_path = build_archive_path(archive_dir, today)
	if os.path.exists(archive_path):
		return None
	shutil.copyfile(insights_path, archive_path)
	return archive_path


#============================================
def list_archive_files(archive_dir: str) -> list[str]:
	"""
	List archived run files in chronological (filename) order.
	"""
	if not os.path.isdir(archive_dir):
		return []
	pattern = os.path.join(archive_dir, "*.json")
	files = [path for path in glob.glob(pattern) if os.path.isfile(path)]
	files.sort(key=os.path.basename)
	return files


#============================================
def list_archive_dates(archive_dir: str) -> list[str]:
	"""
	List archived run dates in chronological order.
	"""
	dates = []
	for path in list_archive_files(archive_dir):
		name = os.path.basename(path)
		dates.append(name[:-len(".json")])
	return dates


#============================================
def load_all_insights(archive_dir: str) -> list[dict]:
	"""
	Load every archived insights run, oldest first.
	"""
	runs = []
	for path in list_archive_files(archive_dir):
		runs.append(artifact_io.read_json(path))
	return runs
