"""Pydantic models for tool call parameters, as sent by the agent loop."""

from typing import Optional
from pydantic import BaseModel, Field, field_validator


class TextEditorCommand(BaseModel):
    command: str                                # view | create | str_replace | insert | undo_edit
    path: str
    file_text: Optional[str] = None             # create
    old_str: Optional[str] = None               # str_replace
    new_str: Optional[str] = None               # str_replace, insert
    insert_line: Optional[int] = None           # insert; defaults to 0
    view_range: Optional[list[int]] = None      # view; [start, end], 1-based inclusive, end=-1 → EOF
    new_path: Optional[str] = None              # accepted for schema parity, unused

    model_config = {"extra": "ignore"}

    @field_validator("view_range")
    @classmethod
    def _two_bounds(cls, value: Optional[list[int]]) -> Optional[list[int]]:
        if value is not None and len(value) != 2:
            raise ValueError("view_range must be [start, end]")
        return value


class FileManagerCommand(BaseModel):
    command: str                                # rename | delete
    path: str = Field(..., min_length=1)
    new_path: Optional[str] = None

    model_config = {"extra": "ignore"}
