MERGE_COMMIT_PREFIXES = ("merge pull request", "merge branch")


def is_merge_commit(message: str) -> bool:
	"""
	Prefix heuristic on the commit message. Structural merges whose message was
	rewritten are not detected; parent counts are never inspected.
	"""
	return (message or "").lower().startswith(MERGE_COMMIT_PREFIXES)
