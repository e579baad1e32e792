"""Tests for the credential store: in-memory list and SQLAlchemy table share one contract."""

import threading
import unittest

from sqlalchemy import create_engine
from sqlalchemy.pool import StaticPool

from dailydone.core.database import create_session_factory
from dailydone.core.exceptions import DuplicateKeyError, UserNotFoundError
from dailydone.models import Base
from dailydone.repositories import InMemoryUserRepository, SqlAlchemyUserRepository
from dailydone.schemas.user import NewUser, Role


def _new_user(username: str = "alice", email: str = "alice@x.com", **kwargs: object) -> NewUser:
    """Build a NewUser with a dummy hash for tests."""
    defaults: dict[str, object] = {"name": "Alice", "password_hash": "$2b$04$dummy"}
    defaults.update(kwargs)
    return NewUser(username=username, email=email, **defaults)


class RepositoryContract:
    """Cases every UserRepository must pass. Subclasses provide make_repository()."""

    def make_repository(self):
        raise NotImplementedError

    def setUp(self) -> None:
        self.repo = self.make_repository()

    def test_insert_assigns_distinct_ids_and_defaults(self) -> None:
        first = self.repo.insert(_new_user())
        second = self.repo.insert(_new_user("bob", "bob@x.com", name="Bob"))
        self.assertNotEqual(first.id, second.id)
        self.assertEqual(first.role, Role.USER)
        self.assertEqual(first.rating, 5.0)
        self.assertEqual(first.completed_tasks, 0)
        self.assertEqual(first.money_saved, 0)

    def test_lookups_are_case_insensitive(self) -> None:
        created = self.repo.insert(_new_user())
        self.assertEqual(self.repo.find_by_email("ALICE@X.COM").id, created.id)
        self.assertEqual(self.repo.find_by_username("Alice").id, created.id)
        self.assertEqual(self.repo.find_by_id(created.id).username, "alice")

    def test_missing_lookups_return_none(self) -> None:
        self.assertIsNone(self.repo.find_by_email("nobody@x.com"))
        self.assertIsNone(self.repo.find_by_username("nobody"))
        self.assertIsNone(self.repo.find_by_id("999"))
        self.assertIsNone(self.repo.find_by_id("not-an-id"))

    def test_duplicate_email_rejected_without_mutation(self) -> None:
        self.repo.insert(_new_user())
        with self.assertRaises(DuplicateKeyError) as ctx:
            self.repo.insert(_new_user("alice2", "Alice@X.com"))
        self.assertEqual(ctx.exception.field, "email")
        self.assertEqual(len(self.repo.list_users()), 1)

    def test_duplicate_username_rejected_without_mutation(self) -> None:
        self.repo.insert(_new_user())
        with self.assertRaises(DuplicateKeyError) as ctx:
            self.repo.insert(_new_user("ALICE", "other@x.com"))
        self.assertEqual(ctx.exception.field, "username")
        self.assertEqual(len(self.repo.list_users()), 1)

    def test_update_merges_fields(self) -> None:
        created = self.repo.insert(_new_user())
        updated = self.repo.update(created.id, {"name": "Alice B", "completed_tasks": 3})
        self.assertEqual(updated.name, "Alice B")
        self.assertEqual(updated.completed_tasks, 3)
        self.assertEqual(updated.email, "alice@x.com")
        self.assertEqual(updated.created_at, created.created_at)
        self.assertEqual(self.repo.find_by_id(created.id).name, "Alice B")

    def test_update_unknown_user_raises_not_found(self) -> None:
        with self.assertRaises(UserNotFoundError):
            self.repo.update("999", {"name": "Ghost"})

    def test_update_email_collision_raises_duplicate(self) -> None:
        self.repo.insert(_new_user())
        bob = self.repo.insert(_new_user("bob", "bob@x.com"))
        with self.assertRaises(DuplicateKeyError):
            self.repo.update(bob.id, {"email": "ALICE@x.com"})
        self.assertEqual(self.repo.find_by_id(bob.id).email, "bob@x.com")

    def test_update_own_email_case_change_is_allowed(self) -> None:
        created = self.repo.insert(_new_user())
        updated = self.repo.update(created.id, {"email": "Alice@X.com"})
        self.assertEqual(updated.email, "alice@x.com")

    def test_update_rejects_immutable_fields(self) -> None:
        created = self.repo.insert(_new_user())
        with self.assertRaises(ValueError):
            self.repo.update(created.id, {"role": Role.ADMIN})
        with self.assertRaises(ValueError):
            self.repo.update(created.id, {"password_hash": "x"})

    def test_list_users_in_insertion_order(self) -> None:
        self.repo.insert(_new_user())
        self.repo.insert(_new_user("bob", "bob@x.com"))
        self.assertEqual([u.username for u in self.repo.list_users()], ["alice", "bob"])


class TestInMemoryUserRepository(RepositoryContract, unittest.TestCase):
    def make_repository(self):
        return InMemoryUserRepository()

    def test_ids_are_sequential_strings(self) -> None:
        self.assertEqual(self.repo.insert(_new_user()).id, "1")
        self.assertEqual(self.repo.insert(_new_user("bob", "bob@x.com")).id, "2")

    def test_returned_records_are_copies(self) -> None:
        created = self.repo.insert(_new_user())
        created.name = "Mallory"
        self.assertEqual(self.repo.find_by_id(created.id).name, "Alice")

    def test_concurrent_inserts_of_same_username_admit_exactly_one(self) -> None:
        barrier = threading.Barrier(8)
        outcomes: list[str] = []
        lock = threading.Lock()

        def worker(i: int) -> None:
            barrier.wait()
            try:
                self.repo.insert(_new_user("bob", f"bob{i}@x.com"))
                result = "ok"
            except DuplicateKeyError:
                result = "duplicate"
            with lock:
                outcomes.append(result)

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        self.assertEqual(outcomes.count("ok"), 1)
        self.assertEqual(outcomes.count("duplicate"), 7)


class TestSqlAlchemyUserRepository(RepositoryContract, unittest.TestCase):
    def make_repository(self):
        engine = create_engine(
            "sqlite://",
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )
        Base.metadata.create_all(engine)
        self.addCleanup(engine.dispose)
        return SqlAlchemyUserRepository(create_session_factory(engine))

    def test_stores_lowercased_username_and_email(self) -> None:
        created = self.repo.insert(_new_user("Alice", "Alice@X.com"))
        self.assertEqual(created.username, "alice")
        self.assertEqual(created.email, "alice@x.com")

    def test_ids_are_string_rendered_integers(self) -> None:
        created = self.repo.insert(_new_user())
        self.assertTrue(created.id.isdigit())


if __name__ == "__main__":
    unittest.main()
