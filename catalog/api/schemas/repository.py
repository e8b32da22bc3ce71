"""
Pydantic schemas for Repository API operations.

Request fields are all optional and untyped: whatever JSON value a client sends
for title, url or techs is stored and echoed back unchanged, and an omitted
field is stored as null.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class RepositoryBase(BaseModel):
    """Fields a client may set on create and update."""

    title: Any = Field(
        default=None,
        description="Display title of the repository",
        examples=["Desafio Node.js"],
    )
    url: Any = Field(
        default=None,
        description="Link to the repository (not validated)",
        examples=["https://github.com/example/desafio-node"],
    )
    techs: Any = Field(
        default=None,
        description="Technology tags, order preserved",
        examples=[["Node.js", "Express"]],
    )

    # id and likes in a request body are ignored
    model_config = ConfigDict(extra="ignore")


class RepositoryCreate(RepositoryBase):
    """Schema for creating a repository."""

    pass


class RepositoryUpdate(RepositoryBase):
    """Schema for replacing title, url and techs of a repository."""

    pass


class RepositoryResponse(BaseModel):
    """Schema for repository responses."""

    id: str = Field(..., description="UUID assigned at creation")
    title: Any = None
    url: Any = None
    techs: Any = None
    likes: int = Field(..., ge=0, description="Number of likes received")

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "examples": [
                {
                    "id": "9f1c2d3e-4b5a-4c6d-8e7f-0a1b2c3d4e5f",
                    "title": "Desafio Node.js",
                    "url": "https://github.com/example/desafio-node",
                    "techs": ["Node.js", "Express"],
                    "likes": 0,
                }
            ]
        },
    )


class ErrorResponse(BaseModel):
    """Body returned for rejected requests."""

    error: str
