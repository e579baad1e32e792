"""Tests for the out-of-band provisioning script (the only path to an admin account)."""

import tempfile
import unittest
from contextlib import redirect_stderr, redirect_stdout
from io import StringIO
from pathlib import Path
from unittest.mock import patch

from sqlalchemy import create_engine

from dailydone.core.config import Settings
from dailydone.models import Base
from dailydone.repositories import build_user_repository
from dailydone.schemas.user import Role
from dailydone.scripts import create_user


def _run(argv: list[str], settings: Settings) -> tuple[int, str, str]:
    out, err = StringIO(), StringIO()
    with patch.object(create_user, "get_settings", return_value=settings):
        with redirect_stdout(out), redirect_stderr(err):
            code = create_user.main(argv)
    return code, out.getvalue(), err.getvalue()


class TestCreateUser(unittest.TestCase):
    def setUp(self) -> None:
        tmp = tempfile.TemporaryDirectory()
        self.addCleanup(tmp.cleanup)
        url = f"sqlite:///{Path(tmp.name) / 'users.db'}"
        engine = create_engine(url)
        Base.metadata.create_all(engine)
        engine.dispose()
        self.settings = Settings(
            _env_file=None,
            USER_STORE="database",
            DATABASE_URL=url,
            BCRYPT_ROUNDS=4,
        )

    def test_creates_admin(self) -> None:
        code, out, _ = _run(["ops", "Ops@DailyDone.com", "a-long-password", "Ops Team", "admin"], self.settings)
        self.assertEqual(code, 0)
        self.assertIn("role 'admin'", out)
        user = build_user_repository(self.settings).find_by_email("ops@dailydone.com")
        self.assertEqual(user.role, Role.ADMIN)

    def test_duplicate_is_reported(self) -> None:
        _run(["ops", "ops@dailydone.com", "a-long-password", "Ops"], self.settings)
        code, _, err = _run(["ops", "other@dailydone.com", "a-long-password", "Ops"], self.settings)
        self.assertEqual(code, 1)
        self.assertIn("Username already taken", err)

    def test_validation_failures(self) -> None:
        cases = [
            ["x", "ops@dailydone.com", "a-long-password", "Ops"],
            ["ops", "not-an-email", "a-long-password", "Ops"],
            ["ops", "ops@dailydone.com", "short", "Ops"],
            ["ops\n", "ops@dailydone.com", "a-long-password", "Ops"],
            ["ops", "ops@dailydone.com\n", "a-long-password", "Ops"],
        ]
        for argv in cases:
            with self.subTest(argv=argv):
                code, _, err = _run(argv, self.settings)
                self.assertEqual(code, 1)
                self.assertTrue(err)

    def test_requires_database_store(self) -> None:
        settings = Settings(_env_file=None, USER_STORE="memory")
        code, _, err = _run(["ops", "ops@dailydone.com", "a-long-password", "Ops"], settings)
        self.assertEqual(code, 1)
        self.assertIn("USER_STORE", err)


if __name__ == "__main__":
    unittest.main()
