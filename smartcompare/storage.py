# smartcompare/storage.py
import json
import logging
from pathlib import Path
from typing import Any, Dict, Optional, Union

from pydantic import ValidationError

from smartcompare.core.schemas import ComparisonSession

logger = logging.getLogger(__name__)


class SessionStore:
    """
    JSON file used as a small key-value store.

    The whole session (product type, use case, catalog, products) is kept as a
    single blob under one key. Anything unreadable on load is treated as "no
    prior session".
    """

    def __init__(self, path: Union[str, Path], key: str = "aiComparisonData"):
        self.path = Path(path)
        self.key = key

    def _read_all(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        with open(self.path, "r", encoding="utf-8") as f:
            data = json.load(f)
        if not isinstance(data, dict):
            raise ValueError(f"expected a JSON object in {self.path}, found {type(data).__name__}")
        return data

    def _write_all(self, data: Dict[str, Any]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        with open(tmp_path, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        tmp_path.replace(self.path)

    def load(self) -> Optional[ComparisonSession]:
        try:
            blob = self._read_all().get(self.key)
            if blob is None:
                return None
            session = ComparisonSession.model_validate(blob)
            logger.info(f"Loaded session for '{session.product_type}' with {len(session.products)} products")
            return session
        except (OSError, ValueError, ValidationError) as e:
            logger.warning(f"Could not load saved session from {self.path}: {e}")
            return None

    def save(self, session: ComparisonSession) -> None:
        try:
            data = self._read_all()
        except (OSError, ValueError) as e:
            logger.warning(f"Overwriting unreadable store {self.path}: {e}")
            data = {}
        data[self.key] = session.model_dump(mode="json")
        self._write_all(data)
        logger.info(f"Saved session for '{session.product_type}' to {self.path}")

    def clear(self) -> None:
        try:
            data = self._read_all()
        except (OSError, ValueError) as e:
            logger.warning(f"Resetting unreadable store {self.path}: {e}")
            data = {}
        data.pop(self.key, None)
        self._write_all(data)
        logger.info(f"Cleared saved session under '{self.key}'")
