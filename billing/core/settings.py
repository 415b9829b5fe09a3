from __future__ import annotations

from dataclasses import dataclass, asdict, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union
import json
import logging

from billing.core.paths import settings_path

logger = logging.getLogger(__name__)


@dataclass
class Settings:
	business_name: str = "E2W"
	# Shown in the FROM block on the first page
	from_address_lines: List[str] = field(
		default_factory=lambda: ["316 Wensley Road", "Reading, RG1 6DR", "United Kingdom"]
	)
	website: str = "e2w.global"
	# Footer wordmark; falls back to business_name when empty
	footer_name: str = "E2W Global"
	# Optional absolute/relative path to a PNG/JPEG logo; None draws the business name instead
	logo_path: Optional[str] = None
	default_currency: str = "GBP"

	@classmethod
	def from_dict(cls, data: Dict[str, Any]) -> "Settings":
		# Merge provided values over defaults, ignore unknown keys
		defaults = asdict(cls())
		merged: Dict[str, Any] = {**defaults, **{k: v for k, v in data.items() if k in defaults}}
		if not isinstance(merged.get("from_address_lines"), list):
			merged["from_address_lines"] = defaults["from_address_lines"]
		return cls(**merged)

	def to_dict(self) -> Dict[str, Any]:
		return asdict(self)


def _coerce_path(path: Optional[Union[str, Path]]) -> Path:
	return Path(path) if path is not None else settings_path()


def load_settings(path: Optional[Union[str, Path]] = None) -> Settings:
	"""
	Load settings from JSON (UTF-8). If the file is missing, write defaults and return them.
	"""
	p = _coerce_path(path)
	if not p.exists():
		settings = Settings()
		save_settings(settings, p)
		return settings

	try:
		with p.open("r", encoding="utf-8") as f:
			raw: Dict[str, Any] = json.load(f)
	except (json.JSONDecodeError, OSError):
		# Unreadable/corrupt: use defaults, do not overwrite the file
		logger.warning("Could not read settings from %s; using defaults", p)
		return Settings()

	return Settings.from_dict(raw if isinstance(raw, dict) else {})


def save_settings(settings: Settings, path: Optional[Union[str, Path]] = None) -> None:
	"""Save settings to JSON (UTF-8), creating parent dirs if needed."""
	p = _coerce_path(path)
	p.parent.mkdir(parents=True, exist_ok=True)
	tmp = p.with_suffix(p.suffix + ".tmp")
	with tmp.open("w", encoding="utf-8", newline="\n") as f:
		json.dump(settings.to_dict(), f, indent=2, ensure_ascii=False)
		f.write("\n")
	tmp.replace(p)
