"""
Input validation for server listing mutations.

Each schema is a small pydantic model; the ``validate_*`` helpers run it and
raise ``serverlist.errors.ValidationError`` carrying the first violation.
"""

from __future__ import annotations

import re
from typing import Any

from pydantic import BaseModel, ValidationInfo, field_validator
from pydantic import ValidationError as PydanticValidationError

from .errors import ValidationError

TITLE_MIN_LENGTH = 10
TITLE_MAX_LENGTH = 280
CONTENT_MIN_LENGTH = 280
CONTENT_MAX_LENGTH = 10000
TAG_NAME_MAX_LENGTH = 100

COVER_URL_PATTERN = re.compile(r"^https?://[^\s/$.?#][^\s]*$", re.IGNORECASE)
COVER_IMAGE_PATTERN = re.compile(r"[/.](gif|jpg|jpeg|tiff|png)$")


class TitleInput(BaseModel):
    title: str

    @field_validator("title")
    @classmethod
    def check_length(cls, value: str) -> str:
        if len(value) < TITLE_MIN_LENGTH:
            raise ValueError(f"Title must be at least {TITLE_MIN_LENGTH} characters long.")
        if len(value) > TITLE_MAX_LENGTH:
            raise ValueError(f"Title must be less than {TITLE_MAX_LENGTH} characters long.")
        return value


class ContentInput(BaseModel):
    content: str | None = None

    @field_validator("content")
    @classmethod
    def check_length(cls, value: str | None) -> str | None:
        if value is None:
            return value
        if len(value) < CONTENT_MIN_LENGTH:
            raise ValueError(f"Content must be at least {CONTENT_MIN_LENGTH} characters long.")
        if len(value) > CONTENT_MAX_LENGTH:
            raise ValueError(f"Content must be less than {CONTENT_MAX_LENGTH} characters long.")
        return value


class CoverInput(BaseModel):
    cover: str | None = None

    @field_validator("cover")
    @classmethod
    def check_image_url(cls, value: str | None) -> str | None:
        if value is None:
            return value
        if not COVER_URL_PATTERN.match(value):
            raise ValueError("Cover needs to be an url.")
        if not COVER_IMAGE_PATTERN.search(value):
            raise ValueError("Cover needs to be an image.")
        return value


class TagsInput(BaseModel):
    tags: list[str]

    @field_validator("tags")
    @classmethod
    def check_tags(cls, value: list[str], info: ValidationInfo) -> list[str]:
        action = (info.context or {}).get("action", "add")
        if len(value) < 1:
            raise ValueError(f"You need to specify at least one tag to {action}.")
        cleaned = [tag.strip() for tag in value]
        if any(not tag for tag in cleaned):
            raise ValueError("Tag names cannot be empty.")
        if any(len(tag) > TAG_NAME_MAX_LENGTH for tag in cleaned):
            raise ValueError(f"Tag names must be less than {TAG_NAME_MAX_LENGTH} characters long.")
        return cleaned


def _run(model: type[BaseModel], data: dict[str, Any], context: dict | None = None) -> BaseModel:
    try:
        return model.model_validate(data, context=context)
    except PydanticValidationError as e:
        first = e.errors()[0]
        message = first.get("ctx", {}).get("error") or first["msg"]
        raise ValidationError(str(message)) from e


def validate_title(title: str) -> str:
    return _run(TitleInput, {"title": title}).title  # type: ignore[attr-defined]


def validate_content(content: str | None) -> str | None:
    return _run(ContentInput, {"content": content}).content  # type: ignore[attr-defined]


def validate_cover(cover: str | None) -> str | None:
    return _run(CoverInput, {"cover": cover}).cover  # type: ignore[attr-defined]


def validate_tags(tags: list[str], action: str = "add") -> list[str]:
    """Validate a tag list; ``action`` only changes the wording of the error."""
    return _run(TagsInput, {"tags": tags}, context={"action": action}).tags  # type: ignore[attr-defined]


def validate_server_fields(
    title: str, content: str | None, cover: str | None, tags: list[str]
) -> dict[str, Any]:
    """Validate every listing field in order, stopping at the first violation."""
    return {
        "title": validate_title(title),
        "content": validate_content(content),
        "cover": validate_cover(cover),
        "tags": validate_tags(tags),
    }
