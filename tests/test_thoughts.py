"""
Thought lifecycle: record store first, vector index second, index failures logged not raised.
"""

import json
import logging
import sqlite3

import pytest
from unittest.mock import MagicMock, patch

from thoughtbank.core import dao
from thoughtbank.core.errors import (
    SubjectResolutionError,
    ThoughtNotFoundError,
    ThoughtValidationError,
)
from thoughtbank.core.schema import SubjectKind, ThoughtKind
from thoughtbank.core.thoughts import ThoughtService
from thoughtbank.vector.projector import project_document

NON_TENSOR_FIELDS = ["type", "bot_id", "subject_id", "subject_type", "importance"]


@pytest.fixture
def index_client():
    return MagicMock()


@pytest.fixture
def logger():
    return MagicMock()


@pytest.fixture
def service(index_client, logger):
    return ThoughtService(index_client, logger=logger)


@pytest.fixture
def params(bot):
    return {
        "brief": "The Hands Down project involves working with AI vision models.",
        "content": {"text": "Vision models can read hand signs.", "source": "chat"},
        "importance": 55,
        "bot_id": bot.id,
    }


class TestCreateThought:

    def test_persists_thought(self, service, params):
        thought = service.create_thought(params)

        stored = dao.get_thought(thought.id)
        assert stored is not None
        assert stored.brief == params["brief"]
        assert stored.content == params["content"]
        assert stored.importance == 55
        assert stored.kind is ThoughtKind.BASE
        assert stored.subject is None
        assert stored.created_at == thought.created_at

    def test_importance_defaults_to_50(self, service, params):
        del params["importance"]
        thought = service.create_thought(params)
        assert dao.get_thought(thought.id).importance == 50

    def test_stores_it_in_the_index(self, service, index_client, params):
        thought = service.create_thought(params)

        expected_doc = dict(params["content"])
        expected_doc.update({
            "type": None,
            "brief": params["brief"],
            "bot_id": params["bot_id"],
            "subject_id": None,
            "subject_type": None,
            "importance": 55,
        })
        index_client.store.assert_called_once_with(
            index="thoughts",
            id=thought.id,
            doc=expected_doc,
            non_tensor_fields=NON_TENSOR_FIELDS,
        )

    def test_creates_a_new_subject(self, service, index_client, params):
        params.update({"subject_type": "Project", "subject_name": "Hands Down"})

        before = dao.count_subjects(SubjectKind.PROJECT)
        thought = service.create_thought(params)

        assert dao.count_subjects(SubjectKind.PROJECT) == before + 1
        project = dao.find_subject_by_name(SubjectKind.PROJECT, "Hands Down")
        assert thought.subject_id == project.id
        assert thought.subject_type == "Project"

        doc = index_client.store.call_args.kwargs["doc"]
        assert doc["subject_id"] == project.id
        assert doc["subject_type"] == "Project"

    def test_reuses_existing_subject(self, service, params):
        params.update({"subject_type": "Project", "subject_name": "Hands Down"})
        first = service.create_thought(params)
        second = service.create_thought(params)

        assert dao.count_subjects(SubjectKind.PROJECT) == 1
        assert first.subject_id == second.subject_id

    def test_subject_id_used_as_is(self, service, params):
        params.update({"subject_type": "Person", "subject_id": "some-person-id"})
        thought = service.create_thought(params)

        assert thought.subject_id == "some-person-id"
        assert dao.count_subjects(SubjectKind.PERSON) == 0

    def test_reflection_kind(self, service, index_client, params):
        params["type"] = "Reflection"
        thought = service.create_thought(params)

        assert dao.get_thought(thought.id).kind is ThoughtKind.REFLECTION
        assert index_client.store.call_args.kwargs["doc"]["type"] == "Reflection"

    def test_logs_error_when_index_store_fails(self, service, index_client, logger, params):
        index_client.store.side_effect = RuntimeError("Failed")

        thought = service.create_thought(params)

        assert dao.get_thought(thought.id) is not None
        logger.error.assert_called_once_with(f"Failed to store vector for thought {thought.id}")

    def test_missing_brief_is_rejected(self, service, index_client, params):
        params["brief"] = "   "

        with pytest.raises(ThoughtValidationError):
            service.create_thought(params)

        assert dao.count_thoughts() == 0
        index_client.store.assert_not_called()

    @pytest.mark.parametrize("missing", ["content", "bot_id"])
    def test_required_fields(self, service, params, missing):
        del params[missing]

        with pytest.raises(ThoughtValidationError) as exc_info:
            service.create_thought(params)

        assert any(missing in e["loc"] for e in exc_info.value.errors)
        assert dao.count_thoughts() == 0

    def test_subject_type_without_id_or_name_is_rejected(self, service, params):
        params["subject_type"] = "Project"

        with pytest.raises(ThoughtValidationError):
            service.create_thought(params)
        assert dao.count_thoughts() == 0

    def test_unknown_subject_type(self, service, index_client, params):
        params.update({"subject_type": "Planet", "subject_name": "Mars"})

        with pytest.raises(SubjectResolutionError):
            service.create_thought(params)

        assert dao.count_thoughts() == 0
        index_client.store.assert_not_called()


class TestUpdateThought:

    def test_updates_record_and_restores_document(self, service, index_client, params):
        thought = service.create_thought(params)
        index_client.store.reset_mock()

        updated = service.update_thought(thought.id, brief="New brief", importance=80)

        stored = dao.get_thought(thought.id)
        assert stored.brief == "New brief"
        assert stored.importance == 80
        assert stored.content == params["content"]
        assert stored.updated_at >= thought.created_at

        doc, non_tensor_fields = project_document(updated)
        index_client.store.assert_called_once_with(
            index="thoughts", id=thought.id, doc=doc, non_tensor_fields=non_tensor_fields
        )
        assert doc["brief"] == "New brief"
        assert doc["importance"] == 80

    def test_sets_and_clears_subject(self, service, params):
        thought = service.create_thought(params)

        updated = service.update_thought(thought.id, subject_type="Person", subject_name="Ada")
        assert updated.subject_type == "Person"
        assert dao.get_thought(thought.id).subject_id == updated.subject_id

        cleared = service.update_thought(thought.id, subject_type=None)
        assert cleared.subject is None
        assert dao.get_thought(thought.id).subject is None

    def test_null_brief_is_rejected(self, service, params):
        thought = service.create_thought(params)

        with pytest.raises(ThoughtValidationError):
            service.update_thought(thought.id, brief=None)

    def test_unknown_field_is_rejected(self, service, params):
        thought = service.create_thought(params)

        with pytest.raises(ThoughtValidationError):
            service.update_thought(thought.id, bot_id="someone-else")

    def test_missing_thought(self, service):
        with pytest.raises(ThoughtNotFoundError):
            service.update_thought("missing", brief="x")

    def test_logs_error_when_index_store_fails(self, service, index_client, logger, params):
        thought = service.create_thought(params)
        index_client.store.side_effect = RuntimeError("Failed")

        service.update_thought(thought.id, importance=1)

        assert dao.get_thought(thought.id).importance == 1
        logger.error.assert_called_once_with(f"Failed to store vector for thought {thought.id}")


class TestDestroyThought:

    def test_deletes_from_index(self, service, index_client, params):
        thought = service.create_thought(params)

        service.destroy_thought(thought.id)

        assert dao.get_thought(thought.id) is None
        index_client.delete.assert_called_once_with("thoughts", thought.id)

    def test_logs_error_when_index_delete_fails(self, service, index_client, logger, params):
        thought = service.create_thought(params)
        index_client.delete.side_effect = RuntimeError("Failed")

        service.destroy_thought(thought.id)

        assert dao.get_thought(thought.id) is None
        logger.error.assert_called_once_with(f"Failed to delete vector for thought {thought.id}")

    def test_missing_thought(self, service, index_client):
        with pytest.raises(ThoughtNotFoundError):
            service.destroy_thought("missing")
        index_client.delete.assert_not_called()


def test_failure_reaches_real_logger(index_client, params, caplog):
    """Default logger writes the failure message at ERROR level."""
    index_client.store.side_effect = ConnectionError("index down")
    service = ThoughtService(index_client)

    with caplog.at_level("ERROR", logger="thoughtbank"):
        thought = service.create_thought(params)

    assert f"Failed to store vector for thought {thought.id}" in caplog.messages


def test_content_round_trips_as_json(service, params):
    params["content"] = {"nested": {"list": [1, 2, 3]}, "flag": True}
    thought = service.create_thought(params)

    stored = dao.get_thought(thought.id)
    assert json.dumps(stored.content, sort_keys=True) == json.dumps(params["content"], sort_keys=True)


def test_list_and_count_by_bot(service, params):
    service.create_thought(params)
    other = dict(params, bot_id=dao.create_bot("other").id)
    service.create_thought(other)

    assert service.count_thoughts() == 2
    assert service.count_thoughts(params["bot_id"]) == 1
    assert [t.bot_id for t in service.list_thoughts(params["bot_id"])] == [params["bot_id"]]


class ErrorOnlyLogger:
    """Collaborator exposing nothing but error()."""

    def __init__(self):
        self.messages = []

    def error(self, message):
        self.messages.append(message)


@pytest.mark.parametrize("make_logger", [lambda: logging.getLogger("thoughtbank.test.plain"), ErrorOnlyLogger])
def test_lifecycle_with_minimal_logger(index_client, params, make_logger):
    service = ThoughtService(index_client, logger=make_logger())

    thought = service.create_thought(params)
    service.update_thought(thought.id, importance=70)
    service.destroy_thought(thought.id)

    assert index_client.store.call_count == 2
    index_client.delete.assert_called_once_with("thoughts", thought.id)


def test_minimal_logger_receives_failures(index_client, params):
    logger = ErrorOnlyLogger()
    index_client.store.side_effect = RuntimeError("Failed")
    index_client.delete.side_effect = RuntimeError("Failed")
    service = ThoughtService(index_client, logger=logger)

    thought = service.create_thought(params)
    service.destroy_thought(thought.id)

    assert logger.messages == [
        f"Failed to store vector for thought {thought.id}",
        f"Failed to delete vector for thought {thought.id}",
    ]


def test_subject_survives_failed_thought_insert(service, index_client, params):
    """Subject creation commits on its own and is not rolled back."""
    params.update({"subject_type": "Project", "subject_name": "Hands Down"})
    projects_before = dao.count_subjects(SubjectKind.PROJECT)

    with patch("thoughtbank.core.thoughts.dao.insert_thought",
               side_effect=sqlite3.OperationalError("database is locked")):
        with pytest.raises(sqlite3.OperationalError):
            service.create_thought(params)

    assert dao.count_subjects(SubjectKind.PROJECT) == projects_before + 1
    assert dao.find_subject_by_name(SubjectKind.PROJECT, "Hands Down") is not None
    assert dao.count_thoughts() == 0
    index_client.store.assert_not_called()
