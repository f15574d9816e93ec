"""Pydantic request/response models for the board API."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from ..constants import TITLE_MAX_LENGTH, TITLE_MIN_LENGTH


class ProjectRequest(BaseModel):
    userId: str = Field(..., min_length=1)
    title: str = Field(..., min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    description: str = Field(..., min_length=1)


class TaskRequest(BaseModel):
    title: str = Field(..., min_length=TITLE_MIN_LENGTH, max_length=TITLE_MAX_LENGTH)
    description: str = Field(..., min_length=1)


class BoardItem(BaseModel):
    """A task reference inside a board column; extra card fields are ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="allow")

    id: str = Field(..., alias="_id")


class BoardColumn(BaseModel):
    model_config = ConfigDict(extra="allow")

    name: str
    items: list[BoardItem] = Field(default_factory=list)


class ProjectResponse(BaseModel):
    data: dict[str, Any]


class TaskResponse(BaseModel):
    task: dict[str, Any]


class DeleteResponse(BaseModel):
    deletedCount: int


class BoardResponse(BaseModel):
    columns: dict[str, list[dict[str, Any]]]
