from __future__ import annotations

import datetime
import json
import logging
import os
from typing import Any, List

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from migration import MigrationError, migrate
from models import AppState
from storage import StateRepository

logger = logging.getLogger(__name__)

EXPORT_PREFIX = "meutreino-backup"


class InvalidImportError(ValueError):
    """The import file could not be used; nothing was changed."""


class ImportEnvelope(BaseModel):
    """Minimal structure an import document must have."""

    model_config = ConfigDict(extra="allow")

    categories: List[Any]
    exercises: List[Any]

    @field_validator("categories", "exercises")
    @classmethod
    def _not_empty(cls, value: List[Any]) -> List[Any]:
        if not value:
            raise ValueError("must not be empty")
        return value


def export_filename(today: datetime.date | None = None) -> str:
    today = today or datetime.date.today()
    return f"{EXPORT_PREFIX}-{today.isoformat()}.json"


def export_state(state: AppState) -> str:
    return json.dumps(state.to_document(), ensure_ascii=False, indent=2)


def write_export(state: AppState, out_dir: str = ".", today: datetime.date | None = None) -> str:
    os.makedirs(out_dir, exist_ok=True)
    path = os.path.join(out_dir, export_filename(today))
    with open(path, "w", encoding="utf-8") as f:
        f.write(export_state(state))
    return path


def import_state(text: str) -> AppState:
    """Parse and migrate an exported document.

    Raises :class:`InvalidImportError` when the text is not JSON, lacks
    non-empty ``categories``/``exercises`` or cannot be migrated.
    """
    try:
        raw = json.loads(text)
    except ValueError as e:
        raise InvalidImportError(f"not a JSON document: {e}") from e
    if not isinstance(raw, dict):
        raise InvalidImportError("import document must be a JSON object")
    try:
        ImportEnvelope.model_validate(raw)
    except ValidationError as e:
        raise InvalidImportError(f"missing required data: {e}") from e
    try:
        return migrate(raw)
    except MigrationError as e:
        raise InvalidImportError(str(e)) from e


class BackupService:
    """Export, import and reset the whole application state."""

    def __init__(self, repository: StateRepository) -> None:
        self.repository = repository

    def export(self, out_dir: str = ".", today: datetime.date | None = None) -> str:
        return write_export(self.repository.state, out_dir, today)

    def import_text(self, text: str) -> AppState:
        state = import_state(text)
        self.repository.replace_state(state)
        logger.info(
            "Imported %d categories, %d exercises, %d sessions",
            len(state.categories),
            len(state.exercises),
            len(state.sessions),
        )
        return state

    def import_file(self, path: str) -> AppState:
        try:
            with open(path, "r", encoding="utf-8") as f:
                text = f.read()
        except OSError as e:
            raise InvalidImportError(f"cannot read {path}: {e}") from e
        return self.import_text(text)

    def reset(self, confirm: bool = False) -> bool:
        """Replace everything with an empty state when ``confirm`` is set."""
        if not confirm:
            return False
        self.repository.replace_state(AppState())
        logger.info("All data reset")
        return True
