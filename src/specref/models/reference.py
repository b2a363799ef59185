from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


class SourceFile(BaseModel):
    """One local file that references an external term, and how."""

    file: str
    type: Literal["xref", "tref"]


class ReferenceIndexEntry(BaseModel):
    """Single entry of ``allXTrefs.xtrefs`` / ``xtrefs-data.json``.

    The index is written by the build in camelCase; attributes are
    snake_case and either spelling is accepted on input.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    external_spec: str = Field(alias="externalSpec")
    term: str
    gh_page_url: str | None = Field(default=None, alias="ghPageUrl")
    content: str | None = None
    source_files: list[SourceFile] = Field(default_factory=list, alias="sourceFiles")

    commit_hash: str | None = Field(default=None, alias="commitHash")
    repo_url: str | None = Field(default=None, alias="repoUrl")
    owner: str | None = None
    repo: str | None = None
    terms_dir: str | None = Field(default=None, alias="termsDir")
    avatar_url: str | None = Field(default=None, alias="avatarUrl")

    def has_source_type(self, source_type: str) -> bool:
        return any(sf.type == source_type for sf in self.source_files)


class ReferenceIndex(BaseModel):
    """The precomputed reference index. Entry order is significant."""

    model_config = ConfigDict(extra="ignore")

    xtrefs: list[ReferenceIndexEntry] = Field(default_factory=list)


class ExternalSpecDescriptor(BaseModel):
    """A distinct external specification referenced from the index."""

    url: str
    spec_name: str
