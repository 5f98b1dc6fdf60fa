"""
Caller-facing parameter models for thought creation and update.
"""

import json
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator, model_validator

from thoughtbank.core.schema import ThoughtKind


def _check_subject_params(subject_type, subject_id, subject_name):
    if subject_type is not None and subject_id is None and subject_name is None:
        raise ValueError('subject_type requires subject_id or subject_name')
    if subject_type is None and (subject_id is not None or subject_name is not None):
        raise ValueError('subject_id and subject_name require subject_type')


class ThoughtCreateRequest(BaseModel):
    model_config = ConfigDict(extra='forbid')

    brief: str
    content: Dict[str, Any]
    bot_id: str
    importance: int = 50
    type: Optional[str] = None
    subject_type: Optional[str] = None
    subject_id: Optional[str] = None
    subject_name: Optional[str] = None

    @field_validator('brief')
    @classmethod
    def brief_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('brief cannot be empty')
        return v

    @field_validator('bot_id')
    @classmethod
    def bot_id_must_not_be_empty(cls, v):
        if not v.strip():
            raise ValueError('bot_id cannot be empty')
        return v

    @field_validator('content')
    @classmethod
    def content_must_be_serializable(cls, v):
        try:
            json.dumps(v)
        except (TypeError, ValueError):
            raise ValueError('content must be JSON serializable')
        return v

    @field_validator('type')
    @classmethod
    def type_must_be_known(cls, v):
        ThoughtKind.from_type(v)
        return v

    @field_validator('subject_name')
    @classmethod
    def subject_name_must_not_be_empty(cls, v):
        if v is not None and not v.strip():
            raise ValueError('subject_name cannot be empty')
        return v

    @model_validator(mode='after')
    def subject_params_must_be_complete(self):
        _check_subject_params(self.subject_type, self.subject_id, self.subject_name)
        return self


class ThoughtUpdateRequest(BaseModel):
    """Partial update; fields left unset keep their stored value."""
    model_config = ConfigDict(extra='forbid')

    brief: Optional[str] = None
    content: Optional[Dict[str, Any]] = None
    importance: Optional[int] = None
    type: Optional[str] = None
    subject_type: Optional[str] = None
    subject_id: Optional[str] = None
    subject_name: Optional[str] = None

    @field_validator('brief')
    @classmethod
    def brief_must_not_be_empty(cls, v):
        if v is not None and not v.strip():
            raise ValueError('brief cannot be empty')
        return v

    @field_validator('content')
    @classmethod
    def content_must_be_serializable(cls, v):
        if v is None:
            return v
        try:
            json.dumps(v)
        except (TypeError, ValueError):
            raise ValueError('content must be JSON serializable')
        return v

    @field_validator('type')
    @classmethod
    def type_must_be_known(cls, v):
        ThoughtKind.from_type(v)
        return v

    @model_validator(mode='after')
    def subject_params_must_be_complete(self):
        _check_subject_params(self.subject_type, self.subject_id, self.subject_name)
        return self
