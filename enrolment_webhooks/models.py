"""Tally form submission models.

Records are decoded leniently: unknown keys are kept and only keys that were
present (or set during a merge) are written back, so a stored record survives
a decode/encode cycle without gaining or losing attributes.
"""

import json
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class FormField(BaseModel):
    """One answer in a form submission. ``label`` is stable across form versions, ``key`` is not."""
    model_config = ConfigDict(extra="allow")

    key: Any = None
    label: Any = None
    type: Any = None
    value: Any = None
    options: Any = None


class SubmissionData(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    response_id: Any = Field(None, alias="responseId")
    submission_id: Any = Field(None, alias="submissionId")
    respondent_id: Any = Field(None, alias="respondentId")
    form_id: Any = Field(None, alias="formId")
    form_name: Any = Field(None, alias="formName")
    created_at: Any = Field(None, alias="createdAt")
    fields: list[FormField] = []


class SubmissionRecord(BaseModel):
    """A stored form submission event, optionally linked to the record it supersedes."""
    model_config = ConfigDict(extra="allow", populate_by_name=True)

    event_id: Any = Field(None, alias="eventId")
    event_type: Any = Field(None, alias="eventType")
    created_at: Any = Field(None, alias="createdAt")
    data: SubmissionData | None = None
    previous_team_state: Any = Field(None, alias="previous-team-state")

    @property
    def identifier(self) -> Any:
        """The submissionId, falling back to responseId."""
        if self.data is None:
            return None
        return self.data.submission_id or self.data.response_id

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_unset=True)


def decode_entry(raw: Any) -> Any:
    """Decode a list-store entry into its JSON value.

    Entries are normally JSON text, but ones already stored as decoded values
    are passed through. Raises ValueError when the text is not valid JSON.
    """
    if isinstance(raw, bytes):
        raw = raw.decode("utf-8")
    if isinstance(raw, str):
        raw = json.loads(raw)
    return raw
