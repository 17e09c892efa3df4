from typing import Any

from ..storage.json_store import load_json, update_json

CATALOG_DOC = "organizations.json"
TRACKED_DOC = "tracked_organizations.json"


def save_catalog(organizations: list[dict[str, Any]]) -> None:
	def mutate(catalog: dict[str, Any]) -> dict[str, Any]:
		for org in organizations:
			catalog[str(org["id"])] = {
				"github_id": int(org["id"]),
				"login": org["login"],
				"avatar_url": org.get("avatar_url") or "",
				"name": org.get("description") or org["login"],
			}
		return catalog

	update_json(CATALOG_DOC, {}, mutate)


def replace_tracked(user_id: str, organizations: list[dict[str, Any]]) -> None:
	"""
	Replace the user's tracked set: every known link is deactivated and the
	selected ones reactivated in the same document write.
	"""
	save_catalog(organizations)
	selected = {str(org["id"]) for org in organizations}

	def mutate(tracked: dict[str, dict[str, bool]]) -> dict[str, dict[str, bool]]:
		links = {org_id: False for org_id in tracked.get(user_id) or {}}
		links.update({org_id: True for org_id in selected})
		tracked[user_id] = links
		return tracked

	update_json(TRACKED_DOC, {}, mutate)


def list_tracked(user_id: str) -> list[dict[str, Any]]:
	tracked: dict[str, dict[str, bool]] = load_json(TRACKED_DOC, {})
	catalog: dict[str, Any] = load_json(CATALOG_DOC, {})
	out: list[dict[str, Any]] = []
	for org_id, active in (tracked.get(user_id) or {}).items():
		org = catalog.get(org_id)
		if not active or not org:
			continue
		out.append(
			{
				"id": org["github_id"],
				"login": org["login"],
				"name": org.get("name") or org["login"],
				"avatarUrl": org.get("avatar_url") or "",
			}
		)
	return out
