import sys
from dataclasses import dataclass, replace

import pytest

# Ensure project root is importable (so `import main` works reliably across environments)
import os as _os
_project_root = _os.path.dirname(_os.path.dirname(__file__))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from mcr import journal  # noqa: E402


@dataclass
class TextBlock:
    body: str = ""


@dataclass
class ImageBlock:
    src: str = ""


class LegacyRows:
    """Iterable over keys and subscriptable, but not a Mapping."""

    def __init__(self, items):
        self._items = dict(items)

    def __iter__(self):
        return iter(self._items)

    def __getitem__(self, key):
        return self._items[key]

    def __delitem__(self, key):
        del self._items[key]

    def to_dict(self):
        return dict(self._items)


CONFIGS = {
    "text": {"type": "text_block", "options": {"label": "Text"}},
    "image": {"type": "image_block", "options": {"property_path": "[picture]"}},
}


@pytest.fixture
def configs():
    return CONFIGS


@pytest.fixture
def journal_db(tmp_path, monkeypatch):
    """Enable the SQLite journal against an isolated database."""
    monkeypatch.setattr(
        journal, "settings", replace(journal.settings, enable_journal=True, db_path=str(tmp_path / "events.db"))
    )
    journal.init_db()
    return tmp_path / "events.db"
