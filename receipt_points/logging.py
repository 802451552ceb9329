"""Log output for the service.

One stdout handler is installed on the root logger and shared with
uvicorn. In JSON mode every line carries the service name, the running
version and, inside a request span, the OpenTelemetry trace and span ids
so log lines can be joined with traces in Loki/Tempo.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any

from opentelemetry import trace
from pythonjsonlogger import jsonlogger

from .config import Settings
from .version import package_version

JSON_FORMAT = "%(timestamp)s %(level)s %(service)s %(name)s %(message)s"
PLAIN_FORMAT = "%(levelname)s %(name)s - %(message)s"

# fields python-json-logger or uvicorn add that the JSON lines replace
NOISY_FIELDS = ("levelname", "color_message", "asctime")


class ServiceJSONFormatter(jsonlogger.JsonFormatter):
	def __init__(self, *args, service: str, version: str, **kwargs) -> None:
		super().__init__(*args, **kwargs)
		self.service = service
		self.version = version

	def add_fields(
		self,
		log_record: dict[str, Any],
		record: logging.LogRecord,
		message_dict: dict[str, Any],
	):
		super().add_fields(log_record, record, message_dict)

		log_record["timestamp"] = datetime.fromtimestamp(
			record.created, timezone.utc
		).isoformat(timespec="milliseconds")
		log_record["level"] = record.levelname.lower()
		log_record["service"] = log_record.get("service") or self.service
		log_record.setdefault("version", self.version)
		for key in NOISY_FIELDS:
			log_record.pop(key, None)

		ctx = trace.get_current_span().get_span_context()
		if ctx.is_valid:
			log_record["trace_id"] = f"{ctx.trace_id:032x}"
			log_record["span_id"] = f"{ctx.span_id:016x}"

		return log_record


def build_handler(settings: Settings) -> logging.Handler:
	handler = logging.StreamHandler(sys.stdout)
	if settings.json_logs:
		handler.setFormatter(
			ServiceJSONFormatter(
				JSON_FORMAT, service=settings.service, version=package_version()
			)
		)
	else:
		handler.setFormatter(logging.Formatter(fmt=PLAIN_FORMAT))
	return handler


def configure_logging(settings: Settings) -> logging.Logger:
	"""Install the service handler once; later calls keep the existing setup."""
	root = logging.getLogger()
	if root.handlers:
		return logging.getLogger(settings.service)

	handler = build_handler(settings)
	root.setLevel(settings.log_level.upper())
	root.addHandler(handler)

	# uvicorn installs its own handlers unless they are replaced here
	for name in ("uvicorn", "uvicorn.access", "uvicorn.error"):
		ul = logging.getLogger(name)
		ul.handlers = [handler]
		ul.propagate = False

	return logging.getLogger(settings.service)
