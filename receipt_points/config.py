from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Callable

SERVICE_NAME = "receipt-points"


def _bool(raw: str) -> bool:
	value = raw.strip().lower()
	if value in ("1", "true", "yes", "on"):
		return True
	if value in ("0", "false", "no", "off", ""):
		return False
	raise ValueError(raw)


def _env(name: str, default: Any, cast: Callable[[str], Any]):
	raw = os.getenv(name)
	if raw is None:
		return default
	try:
		return cast(raw)
	except Exception as e:
		raise ValueError(
			f"env var {name!r}={raw!r} not valid for {cast.__name__}"
		) from e


@dataclass(frozen=True)
class Settings:
	service: str = SERVICE_NAME
	log_level: str = "INFO"
	json_logs: bool = False
	otlp_endpoint: str | None = None
	host: str = "0.0.0.0"
	port: int = 8080
	# reject receipts whose item prices do not parse instead of scoring them as 0
	strict_prices: bool = False
	# stamped into the environment by the release build
	build_time: str = "unknown"
	git_commit: str = "unknown"
	git_branch: str = "unknown"


def load_settings() -> Settings:
	otlp_endpoint = _env("OTLP_ENDPOINT", None, str)
	loki_url = _env("LOKI_URL", None, str)  # presence toggles json logs, no direct emission
	return Settings(
		log_level=_env("LOG_LEVEL", "INFO", str),
		json_logs=bool(otlp_endpoint or loki_url),
		otlp_endpoint=otlp_endpoint,
		host=_env("HOST", "0.0.0.0", str).strip(),
		port=_env("PORT", 8080, int),
		strict_prices=_env("STRICT_PRICES", False, _bool),
		build_time=_env("BUILD_TIME", "unknown", str),
		git_commit=_env("GIT_COMMIT", "unknown", str),
		git_branch=_env("GIT_BRANCH", "unknown", str),
	)
