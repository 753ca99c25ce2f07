"""Core data models for refmirror.

This module defines the value types used to describe refs, the refspecs
pushed to a destination, and the outcome of a mirror run.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field

HEAD_REF = "HEAD"
DEFAULT_BRANCH = "refs/heads/master"


@dataclass(frozen=True)
class RefSpec:
    """A git refspec of the form ``[+]<source>:<destination>``.

    A spec with an empty source (``:refs/heads/old``) deletes the
    destination ref. A leading ``+`` forces non fast-forward updates.
    """

    spec: str

    def __str__(self) -> str:
        return self.spec

    @classmethod
    def force(cls, name: str) -> "RefSpec":
        """Build a forced update spec mapping ``name`` onto itself."""
        return cls(f"+{name}:{name}")

    @classmethod
    def delete(cls, name: str) -> "RefSpec":
        """Build a spec deleting ``name`` on the destination."""
        return cls(f":{name}")

    @property
    def is_force(self) -> bool:
        return self.spec.startswith("+")

    @property
    def source(self) -> str:
        body = self.spec[1:] if self.is_force else self.spec
        return body.split(":", 1)[0]

    @property
    def destination(self) -> str:
        body = self.spec[1:] if self.is_force else self.spec
        parts = body.split(":", 1)
        return parts[1] if len(parts) == 2 else ""

    @property
    def is_delete(self) -> bool:
        return self.source == "" and self.destination != ""

    def validate(self) -> None:
        """Check the spec is well formed.

        Raises:
            ValueError: If the separator is missing or repeated, the
                destination is empty, or wildcards do not pair up.
        """
        body = self.spec[1:] if self.is_force else self.spec
        if body.count(":") != 1:
            raise ValueError(f"refspec {self.spec!r} must contain exactly one ':'")
        if not self.destination:
            raise ValueError(f"refspec {self.spec!r} has an empty destination")
        if self.is_delete and self.is_force:
            raise ValueError(f"delete refspec {self.spec!r} cannot be forced")
        src_wildcards = self.source.count("*")
        dst_wildcards = self.destination.count("*")
        if src_wildcards > 1 or dst_wildcards > 1:
            raise ValueError(f"refspec {self.spec!r} has more than one wildcard per side")
        if not self.is_delete and src_wildcards != dst_wildcards:
            raise ValueError(f"refspec {self.spec!r} has mismatched wildcards")


@dataclass(frozen=True)
class Ref:
    """A named pointer in a repository.

    For hash refs ``target`` is the hex commit id; for symbolic refs
    (such as ``HEAD``) it is the name of the ref pointed to.
    """

    name: str
    target: str = ""
    symbolic: bool = False

    def __str__(self) -> str:
        return self.name


class MirrorResult(BaseModel):
    """Outcome of a mirror run."""

    source: str = Field(..., description="Repository the refs were fetched from")
    destination: str = Field(..., description="Repository the refs were pushed to")
    updated: list[str] = Field(default_factory=list, description="Refs created or moved on the destination")
    deleted: list[str] = Field(default_factory=list, description="Refs pruned from the destination")
    unchanged: list[str] = Field(default_factory=list, description="Refs already up to date")
    specs: list[str] = Field(default_factory=list, description="Refspecs sent to the destination")
    dry_run: bool = Field(default=False, description="Whether the push was skipped")
    duration: float = Field(default=0.0, description="Duration of the run in seconds")
