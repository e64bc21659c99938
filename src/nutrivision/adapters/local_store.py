"""Device-local key/value storage backed by a JSON file."""

import json
import logging
from dataclasses import dataclass
from pathlib import Path

from nutrivision.services.streak import LocalStore

_logger = logging.getLogger(__name__)


@dataclass
class JsonFileStore(LocalStore):
    """Stores JSON objects under string keys in a single file."""

    path: Path

    def get(self, key: str) -> dict[str, object] | None:
        value = self._read().get(key)
        return value if isinstance(value, dict) else None

    def set(self, key: str, value: dict[str, object]) -> None:
        data = self._read()
        data[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(data, indent=2), encoding="utf-8")

    def _read(self) -> dict[str, object]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except json.JSONDecodeError:
            _logger.warning(
                "Ignoring unreadable local store", extra={"path": str(self.path)}
            )
            return {}
        return data if isinstance(data, dict) else {}
