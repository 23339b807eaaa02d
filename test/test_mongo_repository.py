from datetime import date, datetime
from unittest.mock import MagicMock
from uuid import uuid4

import pytest
from pymongo.errors import AutoReconnect, DuplicateKeyError

from core.domain.errors import PersistenceError
from core.domain.models.task import TaskPriority, TaskStatus
from infrastructure.mongo.repository.task_repository import MongoTaskRepository


@pytest.fixture
def mock_mongo_collection():
    return MagicMock()


@pytest.fixture
def mongo_repository(mock_mongo_collection):
    repo = MongoTaskRepository()
    repo.collection = mock_mongo_collection
    return repo


def _doc(**overrides):
    now = datetime(2026, 10, 1, 8, 0, 0)
    doc = {
        "_id": str(uuid4()),
        "user_id": str(uuid4()),
        "title": "Found Task",
        "description": "Found Description",
        "status": "pending",
        "priority": "high",
        "due_date": "2026-12-31",
        "created_at": now,
        "updated_at": now,
    }
    doc.update(overrides)
    return doc


def test_create_upserts_full_document(mongo_repository, mock_mongo_collection):
    task = mongo_repository.create(
        owner_id=uuid4(),
        title="Test Task",
        description=None,
        status=TaskStatus.PENDING,
        priority=TaskPriority.MEDIUM,
        due_date="2026-12-31",
    )

    mock_mongo_collection.update_one.assert_called_once()
    args, kwargs = mock_mongo_collection.update_one.call_args
    assert args[0] == {"_id": str(task.id)}
    document = args[1]["$set"]
    assert document["user_id"] == str(task.user_id)
    assert document["status"] == "pending"
    assert document["due_date"] == "2026-12-31"
    assert kwargs["upsert"] is True


def test_update_sets_only_changed_fields(mongo_repository, mock_mongo_collection):
    task_id = uuid4()

    mongo_repository.update(task_id, {"status": TaskStatus.COMPLETED, "due_date": date(2027, 1, 2)})

    args, _ = mock_mongo_collection.update_one.call_args
    assert args[0] == {"_id": str(task_id)}
    changes = args[1]["$set"]
    assert changes["status"] == "completed"
    assert changes["due_date"] == "2027-01-02"
    assert isinstance(changes["updated_at"], datetime)
    assert "title" not in changes


def test_get_task_found(mongo_repository, mock_mongo_collection):
    doc = _doc()
    mock_mongo_collection.find_one.return_value = doc

    result = mongo_repository.get(doc["_id"])

    assert result is not None
    assert str(result.id) == doc["_id"]
    assert result.title == "Found Task"
    assert result.priority is TaskPriority.HIGH
    assert result.due_date == date(2026, 12, 31)


def test_get_task_not_found(mongo_repository, mock_mongo_collection):
    mock_mongo_collection.find_one.return_value = None

    assert mongo_repository.get(uuid4()) is None


def test_list_for_owner_filters_and_sorts(mongo_repository, mock_mongo_collection):
    owner_id = uuid4()
    docs = [
        _doc(user_id=str(owner_id), title="Task 1"),
        _doc(user_id=str(owner_id), title="Task 2", due_date=None),
    ]
    mock_mongo_collection.find.return_value.sort.return_value = docs

    results = mongo_repository.list_for_owner(owner_id)

    mock_mongo_collection.find.assert_called_once_with({"user_id": str(owner_id)})
    assert [task.title for task in results] == ["Task 1", "Task 2"]
    assert results[1].due_date is None


@pytest.mark.parametrize("deleted_count, expected", [(1, True), (0, False)])
def test_delete_reports_whether_document_was_removed(
    mongo_repository, mock_mongo_collection, deleted_count, expected
):
    task_id = uuid4()
    mock_mongo_collection.delete_one.return_value.deleted_count = deleted_count

    assert mongo_repository.delete(task_id) is expected
    mock_mongo_collection.delete_one.assert_called_once_with({"_id": str(task_id)})


@pytest.mark.parametrize(
    "error, transient",
    [(AutoReconnect("lost"), True), (DuplicateKeyError("dup"), False)],
)
def test_driver_errors_become_persistence_errors(
    mongo_repository, mock_mongo_collection, error, transient
):
    mock_mongo_collection.delete_one.side_effect = error

    with pytest.raises(PersistenceError) as exc_info:
        mongo_repository.delete(uuid4())

    assert exc_info.value.transient is transient
    assert exc_info.value.__cause__ is error
