"""
JSON storage implementation.
"""
from datetime import datetime
import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError

from ..errors import PersistenceError
from .models import RejectionData

logger = logging.getLogger(__name__)

DATA_KEY = "rejection-insights"

class JsonStorageManager:
    """Blob key-value store keeping one JSON file per key."""

    def __init__(self, storage_dir: str = "data/active"):
        """Initialize storage manager."""
        self.storage_dir = Path(storage_dir)
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def _path(self, key: str) -> Path:
        return self.storage_dir / f"{key}.json"

    def get(self, key: str) -> Optional[str]:
        """Get the blob stored under a key.

        Args:
            key: Storage key

        Returns:
            Stored text, or None if nothing is stored under the key

        Raises:
            PersistenceError: If the file exists but cannot be read
        """
        path = self._path(key)
        if not path.exists():
            return None
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            raise PersistenceError(f"Could not read {path}: {e}") from e

    def set(self, key: str, value: str):
        """Store a blob under a key, replacing the previous one in a single step.

        Args:
            key: Storage key
            value: Text to store

        Raises:
            PersistenceError: If the blob cannot be written
        """
        path = self._path(key)
        try:
            fd, tmp_name = tempfile.mkstemp(dir=self.storage_dir, prefix=f".{key}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(value)
                os.replace(tmp_name, path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Could not write {path}: {e}") from e

    def load_data(self) -> RejectionData:
        """Load rejections, insights and profile.

        Missing or unreadable data starts an empty session instead of failing.
        """
        try:
            raw = self.get(DATA_KEY)
        except PersistenceError as e:
            logger.warning("Starting empty, stored data unreadable: %s", e)
            return RejectionData()

        if raw is None or not raw.strip():
            return RejectionData()

        try:
            return RejectionData.model_validate_json(raw)
        except ValidationError as e:
            logger.warning("Starting empty, stored data is invalid: %s", e.error_count())
            return RejectionData()

    def save_data(self, data: RejectionData):
        """Save rejections, insights and profile with one write.

        Raises:
            PersistenceError: If the blob cannot be written
        """
        self.set(DATA_KEY, data.model_dump_json(indent=2))

    def backup(self, backup_dir: str = "data/backups", max_backups: int = 5) -> Path:
        """Copy every stored blob into a new backup directory.

        Backups are named after their creation time, so name order is age
        order. Only the newest ``max_backups`` are kept.

        Args:
            backup_dir: Directory holding the backups
            max_backups: Number of backups to keep

        Returns:
            Path of the new backup directory
        """
        root = Path(backup_dir)
        created = datetime.now()
        target = root / f"backup_{created:%Y%m%d_%H%M%S_%f}"
        target.mkdir(parents=True)

        for blob in self.storage_dir.glob("*.json"):
            shutil.copy2(blob, target / blob.name)

        info = {"created_at": created.isoformat(), **self.get_storage_stats()}
        (target / "backup_info.json").write_text(json.dumps(info, indent=2), encoding="utf-8")

        backups = sorted(d for d in root.glob("backup_*") if d.is_dir())
        for old in backups[:max(len(backups) - max_backups, 0)]:
            shutil.rmtree(old)
        return target

    def restore_from_backup(self, backup_dir: str):
        """Restore stored blobs from a backup.

        Args:
            backup_dir: Path to backup directory to restore from
        """
        backup_path = Path(backup_dir)
        if not backup_path.exists():
            raise ValueError(f"Backup directory not found: {backup_dir}")

        for blob in backup_path.glob("*.json"):
            if blob.name == "backup_info.json":
                continue
            shutil.copy2(blob, self.storage_dir / blob.name)

    def get_storage_stats(self) -> Dict[str, int]:
        """Get current storage statistics.

        Returns:
            Dictionary containing:
            - num_rejections: Number of stored rejection records
            - num_skill_gaps: Number of skill gaps in the profile
            - num_improvement_tracks: Number of improvement tracks started
        """
        data = self.load_data()
        return {
            "num_rejections": len(data.rejections),
            "num_skill_gaps": len(data.profile.skill_gaps),
            "num_improvement_tracks": len(data.profile.improvement_tracking)
        }
