from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from typing import Any, Optional

from migration import MigrationError, migrate
from models import AppState, WorkoutDraft

logger = logging.getLogger(__name__)

STATE_FILE = "state.json"
DRAFT_FILE = "draft.json"
CORRUPT_SUFFIX = ".corrupt"


class JsonStore:
    """Keeps the state document and the draft document as JSON files."""

    def __init__(self, data_dir: str = "data") -> None:
        self.data_dir = data_dir
        self.state_path = os.path.join(data_dir, STATE_FILE)
        self.draft_path = os.path.join(data_dir, DRAFT_FILE)

    def _read(self, path: str) -> Optional[Any]:
        if not os.path.exists(path):
            return None
        with open(path, "r", encoding="utf-8") as f:
            return json.load(f)

    def _write(self, path: str, document: Any) -> None:
        os.makedirs(self.data_dir, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=self.data_dir, suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                json.dump(document, f, ensure_ascii=False, indent=2)
            os.replace(tmp, path)
        except BaseException:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise

    def load(self) -> Optional[Any]:
        """Return the raw state document, ``None`` when nothing was saved yet.

        Raises :class:`json.JSONDecodeError` for a corrupt file.
        """
        return self._read(self.state_path)

    def keep_unreadable(self) -> Optional[str]:
        """Copy the state file aside before it gets overwritten."""
        if not os.path.exists(self.state_path):
            return None
        backup = self.state_path + CORRUPT_SUFFIX
        shutil.copyfile(self.state_path, backup)
        return backup

    def save(self, state: AppState) -> None:
        self._write(self.state_path, state.to_document())

    def load_draft(self) -> Optional[Any]:
        return self._read(self.draft_path)

    def save_draft(self, draft: Optional[WorkoutDraft]) -> None:
        if draft is None:
            if os.path.exists(self.draft_path):
                os.remove(self.draft_path)
            return
        self._write(self.draft_path, draft.to_document())


class StateRepository:
    """In-memory owner of the application state, written through to a store.

    The repository is the only holder of the active draft. ``draft`` is
    ``None`` while no workout is in progress.
    """

    def __init__(self, store: JsonStore) -> None:
        self.store = store
        self.state = self._load_state()
        self.draft = self._load_draft()

    def _load_state(self) -> AppState:
        try:
            raw = self.store.load()
        except (OSError, ValueError) as e:
            logger.warning("Could not read state document, starting fresh: %s", e)
            return self._fresh_state()
        if raw is None:
            return AppState()
        try:
            return migrate(raw)
        except MigrationError as e:
            logger.warning("Could not migrate state document, starting fresh: %s", e)
            return self._fresh_state()

    def _fresh_state(self) -> AppState:
        try:
            kept = self.store.keep_unreadable()
        except OSError as e:
            logger.warning("Could not keep a copy of the unreadable state: %s", e)
        else:
            if kept:
                logger.warning("Unreadable state document kept as %s", kept)
        return AppState()

    def _load_draft(self) -> Optional[WorkoutDraft]:
        try:
            raw = self.store.load_draft()
            if raw is None:
                return None
            return WorkoutDraft.model_validate(raw)
        except (OSError, ValueError) as e:
            logger.warning("Discarding unreadable workout draft: %s", e)
            return None

    def commit(self) -> None:
        self.store.save(self.state)

    def commit_draft(self) -> None:
        self.store.save_draft(self.draft)

    def replace_state(self, state: AppState) -> None:
        self.state = state
        self.commit()
