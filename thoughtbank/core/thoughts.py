"""
Thought lifecycle: record store write first, vector index sync second.

The record store is canonical. Each create, update or destroy makes exactly one
index call after the row is committed; if that call fails the failure is
logged and the record operation stands. Nothing retries; a lagging index is
repaired with the rebuild utility (thoughtbank.core.reindex).
"""

from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from thoughtbank.api.schemas import ThoughtCreateRequest, ThoughtUpdateRequest
from thoughtbank.util.logging import logger as default_logger
from thoughtbank.vector.index import IVectorIndexClient
from thoughtbank.vector.projector import project_document
from . import dao
from .dao import THOUGHTS_TABLE
from .errors import ThoughtNotFoundError, ThoughtValidationError
from .schema import Thought, ThoughtKind
from .subjects import SubjectResolver

_REQUIRED_ON_UPDATE = ('brief', 'content', 'importance')


class ThoughtService:
    """Creates, updates and destroys thoughts while mirroring them into a vector index."""

    index_name = THOUGHTS_TABLE

    def __init__(self, index_client: IVectorIndexClient, resolver: SubjectResolver = None, logger=None):
        """`logger` receives index sync failures and only needs an `error(message)` method.

        Operation logging always goes through the structured module logger.
        """
        self.index_client = index_client
        self.resolver = resolver or SubjectResolver()
        self.logger = logger or default_logger

    # Index sync

    def store_vector(self, thought: Thought) -> bool:
        """Push the thought's document to the index. Never raises."""
        doc, non_tensor_fields = project_document(thought)
        try:
            self.index_client.store(
                index=self.index_name,
                id=thought.id,
                doc=doc,
                non_tensor_fields=non_tensor_fields,
            )
        except Exception as e:
            self.logger.error(f"Failed to store vector for thought {thought.id}")
            default_logger.debug(f"Vector store error for thought {thought.id}: {e!r}")
            return False

        default_logger.log_vector_operation("stored", thought.id, {"index": self.index_name})
        return True

    def delete_vector(self, thought_id: str) -> bool:
        """Remove the thought's document from the index. Never raises."""
        try:
            self.index_client.delete(self.index_name, thought_id)
        except Exception as e:
            self.logger.error(f"Failed to delete vector for thought {thought_id}")
            default_logger.debug(f"Vector delete error for thought {thought_id}: {e!r}")
            return False

        default_logger.log_vector_operation("deleted", thought_id, {"index": self.index_name})
        return True

    # Lifecycle

    def create_thought(self, params: Dict[str, Any]) -> Thought:
        """Validate, resolve the subject, insert, then index.

        Raises ThoughtValidationError or SubjectResolutionError before anything
        is written to the thoughts table.
        """
        try:
            request = ThoughtCreateRequest.model_validate(params)
        except ValidationError as e:
            raise ThoughtValidationError.from_pydantic(e) from e

        subject = self.resolver.resolve(request.subject_type, request.subject_id, request.subject_name)

        thought = dao.insert_thought(
            brief=request.brief,
            content=request.content,
            bot_id=request.bot_id,
            importance=request.importance,
            kind=ThoughtKind.from_type(request.type),
            subject=subject,
        )
        default_logger.log_thought_operation("created", thought.id, {"bot_id": thought.bot_id})

        self.store_vector(thought)
        return thought

    def update_thought(self, thought_id: str, **changes) -> Thought:
        """Apply a partial update and re-store the index document."""
        try:
            request = ThoughtUpdateRequest.model_validate(changes)
        except ValidationError as e:
            raise ThoughtValidationError.from_pydantic(e) from e

        fields_set = request.model_fields_set
        for name in _REQUIRED_ON_UPDATE:
            if name in fields_set and getattr(request, name) is None:
                raise ThoughtValidationError(f"{name} cannot be null", [{"loc": (name,), "msg": "cannot be null"}])

        thought = dao.get_thought(thought_id)
        if thought is None:
            raise ThoughtNotFoundError(thought_id)

        if 'brief' in fields_set:
            thought.brief = request.brief
        if 'content' in fields_set:
            thought.content = request.content
        if 'importance' in fields_set:
            thought.importance = request.importance
        if 'type' in fields_set:
            thought.kind = ThoughtKind.from_type(request.type)
        if 'subject_type' in fields_set:
            # subject_type=None clears the subject
            thought.subject = self.resolver.resolve(request.subject_type, request.subject_id, request.subject_name)

        dao.update_thought(thought)
        default_logger.log_thought_operation("updated", thought.id, {"fields": sorted(fields_set)})

        self.store_vector(thought)
        return thought

    def destroy_thought(self, thought_id: str) -> Thought:
        """Delete the record, then its index document."""
        thought = dao.get_thought(thought_id)
        if thought is None or not dao.delete_thought(thought.id):
            raise ThoughtNotFoundError(thought_id)
        default_logger.log_thought_operation("deleted", thought.id)

        self.delete_vector(thought.id)
        return thought

    # Reads

    def get_thought(self, thought_id: str) -> Optional[Thought]:
        return dao.get_thought(thought_id)

    def list_thoughts(self, bot_id: str = None) -> List[Thought]:
        return dao.list_thoughts(bot_id)

    def count_thoughts(self, bot_id: str = None) -> int:
        return dao.count_thoughts(bot_id)
