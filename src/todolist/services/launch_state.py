"""First-launch flag stored outside the task database.

State is persisted as JSON in the config directory, so wiping the store does
not re-trigger the initial import.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from todolist.utils.logger import get_logger

HAS_LAUNCHED_BEFORE = "has_launched_before"

logger = get_logger("launch_state")


class LaunchState:
    """Durable per-install launch flags.

    Args:
        config_dir: Directory holding ``launch-state.json``. Defaults to the
            platform config directory.
    """

    def __init__(self, config_dir: Path | str | None = None):
        if config_dir is None:
            config_dir = user_config_dir("todolist")
        self.config_dir = Path(config_dir)
        self.state_file = self.config_dir / "launch-state.json"
        self._state: dict[str, Any] = {}
        self._load()

    def _load(self) -> None:
        if not self.state_file.exists():
            self._state = {}
            return
        try:
            with open(self.state_file, encoding="utf-8") as f:
                data = json.load(f)
            self._state = data if isinstance(data, dict) else {}
        except (OSError, json.JSONDecodeError) as e:
            # A corrupted file counts as launched, so the import never repeats
            logger.warning("launch state unreadable (%s); assuming launched", e)
            self._state = {HAS_LAUNCHED_BEFORE: True}

    def _save(self) -> None:
        self.config_dir.mkdir(parents=True, exist_ok=True)
        with open(self.state_file, "w", encoding="utf-8") as f:
            json.dump(self._state, f, indent=2)

    @property
    def has_launched_before(self) -> bool:
        return bool(self._state.get(HAS_LAUNCHED_BEFORE, False))

    def check_first_launch(self) -> bool:
        """Return True on the first call for this install, False afterwards.

        The flag is persisted before returning, so an import interrupted by a
        crash is not retried on the next launch.
        """
        if self.has_launched_before:
            return False
        self._state[HAS_LAUNCHED_BEFORE] = True
        self._save()
        logger.info("first launch detected")
        return True

    def reset(self) -> None:
        """Forget the flag so the next launch counts as the first."""
        self._state.pop(HAS_LAUNCHED_BEFORE, None)
        self._save()
