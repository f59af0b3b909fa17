import json
import os


#============================================
def read_json(path: str):
	"""
	Load one JSON document from disk.
	"""
	with open(path, "r", encoding="utf-8") as handle:
		return json.load(handle)


#============================================
def write_json(path: str, payload) -> str:
	"""
	Write one JSON artifact with two-space indent and a trailing newline.
	"""
	parent_dir = os.path.dirname(path)
	if parent_dir:
		os.makedirs(parent_dir, exist_ok=True)
	with open(path, "w", encoding="utf-8") as handle:
		json.dump(payload, handle, ensure_ascii=True, indent=2)
		handle.write("\n")
	return path
