import importlib.util

# The API layer needs a Frappe install; the rest of the package does not.
collect_ignore_glob = []
if importlib.util.find_spec("frappe") is None:
    collect_ignore_glob.append("translation_sheet_sync/api/test_*.py")
