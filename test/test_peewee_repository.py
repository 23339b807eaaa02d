import os
import unittest
from datetime import date
from uuid import uuid4

os.environ["DATABASE_URL"] = "sqlite:///:memory:"

from core.domain.models.task import TaskPriority, TaskStatus
from infrastructure.peewee.model.models import TaskModel
from infrastructure.peewee.repository.task_repository import PeeweeTaskRepository
from infrastructure.peewee.session.db import db


class PeeweeTaskRepositoryTests(unittest.TestCase):
    def setUp(self) -> None:
        if db.is_closed():
            db.connect()
        db.create_tables([TaskModel], safe=True)
        TaskModel.delete().execute()
        self.repo = PeeweeTaskRepository()
        self.owner_id = uuid4()

    def tearDown(self) -> None:
        db.drop_tables([TaskModel])
        db.close()

    def _create(self, **overrides):
        fields = {
            "owner_id": self.owner_id,
            "title": "Tarea Peewee",
            "description": "desc",
            "status": TaskStatus.IN_PROGRESS,
            "priority": TaskPriority.HIGH,
            "due_date": "2026-12-31",
        }
        fields.update(overrides)
        return self.repo.create(**fields)

    def test_create_and_get(self) -> None:
        task = self._create()
        loaded = self.repo.get(task.id)

        self.assertIsNotNone(loaded)
        self.assertEqual(loaded, task)
        self.assertEqual(loaded.due_date, date(2026, 12, 31))
        self.assertEqual(loaded.user_id, self.owner_id)

    def test_create_without_optionals_stores_nulls(self) -> None:
        task = self._create(description=None, due_date=None)
        loaded = self.repo.get(task.id)

        self.assertIsNone(loaded.description)
        self.assertIsNone(loaded.due_date)

    def test_update_changes_only_given_fields_and_touches_updated_at(self) -> None:
        task = self._create()

        self.repo.update(task.id, {"status": TaskStatus.COMPLETED})
        loaded = self.repo.get(task.id)

        self.assertEqual(loaded.status, TaskStatus.COMPLETED)
        self.assertEqual(loaded.title, task.title)
        self.assertEqual(loaded.created_at, task.created_at)
        self.assertGreaterEqual(loaded.updated_at, task.updated_at)

    def test_update_can_clear_due_date(self) -> None:
        task = self._create()

        self.repo.update(task.id, {"due_date": None, "description": None})

        self.assertIsNone(self.repo.get(task.id).due_date)

    def test_get_missing_returns_none(self) -> None:
        self.assertIsNone(self.repo.get(uuid4()))

    def test_delete(self) -> None:
        task = self._create()

        self.assertTrue(self.repo.delete(task.id))
        self.assertIsNone(self.repo.get(task.id))
        self.assertFalse(self.repo.delete(task.id))

    def test_list_for_owner_only_returns_owner_tasks(self) -> None:
        first = self._create(title="Primera")
        second = self._create(title="Segunda")
        self._create(owner_id=uuid4(), title="Ajena")

        tasks = self.repo.list_for_owner(self.owner_id)

        self.assertEqual({task.id for task in tasks}, {first.id, second.id})


if __name__ == "__main__":
    unittest.main()
