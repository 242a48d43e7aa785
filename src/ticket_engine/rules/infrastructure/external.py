"""
Rules External Integrations
===========================

- YAML rules file loading
- Watchdog hot-reload of the rules file
"""

import threading
from pathlib import Path
from typing import Optional

import yaml
from pydantic import ValidationError
from watchdog.events import FileSystemEventHandler
from watchdog.observers import Observer

from ticket_engine.core import ConfigurationException
from ticket_engine.rules.application import IRulesProvider
from ticket_engine.rules.domain import EngineRules
from ticket_engine.shared.infrastructure.logging import get_logger

logger = get_logger(__name__)


class RulesFileHandler(FileSystemEventHandler):
    """Watchdog event handler for rules file changes."""

    def __init__(self, config_manager: "RulesConfigManager", config_path: Path):
        self.config_manager = config_manager
        self.config_path = config_path
        super().__init__()

    def on_modified(self, event):
        """Handle file modification event."""
        if event.is_directory:
            return
        if Path(event.src_path).resolve() == self.config_path.resolve():
            logger.info("Rules file changed", extra={"path": str(event.src_path)})
            self.config_manager.reload()


class RulesConfigManager(IRulesProvider):
    """
    Thread-safe rules manager with hot-reload support.

    Uses watchdog to monitor file changes and swap the rule set
    without restarting the engine.
    """

    def __init__(self):
        self._rules: Optional[EngineRules] = None
        self._lock = threading.Lock()
        self._path: Optional[Path] = None
        self._observer = None

    def load(self, path: Path) -> EngineRules:
        """Initial rules load. Raises ConfigurationException on a bad file."""
        self._path = Path(path)
        try:
            rules = self._load_from_file(self._path)
        except (OSError, yaml.YAMLError, ValidationError, TypeError) as e:
            raise ConfigurationException(
                f"Invalid rules file {self._path}: {e}",
                {"path": str(self._path)}
            ) from e
        with self._lock:
            self._rules = rules
        return rules

    def _load_from_file(self, path: Path) -> EngineRules:
        """Load and parse YAML rules file."""
        if not path.exists():
            logger.warning("Rules file not found, using defaults", extra={"path": str(path)})
            return EngineRules()

        with open(path, "r") as f:
            data = yaml.safe_load(f) or {}

        return EngineRules(**data)

    def reload(self) -> bool:
        """Reload rules from file, keeping the current set if the new one is invalid."""
        if self._path is None:
            return False

        try:
            new_rules = self._load_from_file(self._path)
        except (OSError, yaml.YAMLError, ValidationError, TypeError) as e:
            logger.error("Failed to reload rules", extra={"error": str(e)})
            return False

        with self._lock:
            self._rules = new_rules
        logger.info("Rules reloaded successfully")
        return True

    def start_watching(self) -> None:
        """
        Start watching the rules file for changes.

        Skips watching if the file doesn't exist or the platform
        does not support file system notifications.
        """
        if self._path is None:
            raise RuntimeError("Rules not loaded. Call load() first.")

        if not self._path.exists():
            logger.info(
                "Rules file doesn't exist, skipping file watch",
                extra={"path": str(self._path)}
            )
            return

        try:
            self._observer = Observer()
            handler = RulesFileHandler(self, self._path)
            self._observer.schedule(
                handler,
                str(self._path.parent),
                recursive=False
            )
            self._observer.start()
            logger.info("Started watching rules file", extra={"path": str(self._path)})
        except OSError as e:
            logger.warning(f"File watching not available, using static rules: {e}")
            self._observer = None

    def stop_watching(self) -> None:
        """Stop watching the rules file (safe to call even if not watching)."""
        if self._observer is not None:
            self._observer.stop()
            self._observer.join(timeout=5)
            self._observer = None

    @property
    def is_watching(self) -> bool:
        return self._observer is not None

    def get_rules(self) -> EngineRules:
        """Get current rules."""
        with self._lock:
            if self._rules is None:
                raise RuntimeError("Rules not loaded")
            return self._rules
