import os
import tempfile

from tallybot.db import ensure_db


class TempDatabaseMixin:
    """Points the store at a fresh sqlite file for every test."""

    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self._old_path = os.environ.get("BOT_DB_PATH")
        os.environ["BOT_DB_PATH"] = os.path.join(self._tmp.name, "test.sqlite3")
        ensure_db()

    def tearDown(self):
        if self._old_path is None:
            os.environ.pop("BOT_DB_PATH", None)
        else:
            os.environ["BOT_DB_PATH"] = self._old_path
        self._tmp.cleanup()


class FakeUsers:
    """Stands in for UserResolver with a fixed id -> name table."""

    def __init__(self, names):
        self.names = dict(names)

    async def resolve_name(self, user_id):
        return self.names.get(user_id, str(user_id))

    def resolve_id(self, name):
        for uid, known in self.names.items():
            if known == name:
                return uid
        return None
