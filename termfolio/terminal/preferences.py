"""Persisted terminal preferences (theme, snake high score) in a JSON file."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)

THEME_KEY = "terminal-theme"
HIGH_SCORE_KEY = "snakeHighScore"
THEMES = ("light", "dark")
DEFAULT_THEME = "light"


class PreferenceStore:
    def __init__(self, path: str | Path) -> None:
        self._path = Path(path).expanduser()
        self._values: dict[str, Any] = self._read()

    @property
    def path(self) -> Path:
        return self._path

    def _read(self) -> dict[str, Any]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text(encoding="utf-8"))
        except (OSError, ValueError):
            logger.warning("preferences unreadable, using defaults", extra={"path": str(self._path)}, exc_info=True)
            return {}
        return data if isinstance(data, dict) else {}

    def _write(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_text(json.dumps(self._values, indent=2), encoding="utf-8")

    @property
    def theme(self) -> str:
        theme = self._values.get(THEME_KEY)
        return theme if theme in THEMES else DEFAULT_THEME

    def set_theme(self, theme: str) -> None:
        if theme not in THEMES:
            raise ValueError(f"unknown theme {theme!r}")
        self._values[THEME_KEY] = theme
        self._write()

    def toggle_theme(self) -> str:
        new_theme = "dark" if self.theme == "light" else "light"
        self.set_theme(new_theme)
        return new_theme

    @property
    def high_score(self) -> int:
        try:
            return int(self._values.get(HIGH_SCORE_KEY, 0))
        except (TypeError, ValueError):
            return 0

    def record_score(self, score: int) -> bool:
        """Keep *score* if it beats the stored high score; returns whether it did."""
        if score <= self.high_score:
            return False
        self._values[HIGH_SCORE_KEY] = score
        self._write()
        return True
