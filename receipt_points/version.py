from __future__ import annotations

import importlib.metadata
from functools import lru_cache

from .config import SERVICE_NAME, Settings


@lru_cache(maxsize=1)
def package_version() -> str:
	"""Version of the installed distribution, or "unknown" from a source checkout."""
	try:
		return importlib.metadata.version(SERVICE_NAME)
	except importlib.metadata.PackageNotFoundError:
		return "unknown"


def get_version_info(settings: Settings) -> dict[str, str]:
	return {
		"version": package_version(),
		"build_time": settings.build_time,
		"git_commit": settings.git_commit,
		"git_branch": settings.git_branch,
	}
