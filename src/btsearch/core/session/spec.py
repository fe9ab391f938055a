from __future__ import annotations

import hashlib
import json
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from btsearch.problems.standard import ProblemKind


class SeedSpec(BaseModel):
    """
    Starting prefix for a search: values[offset : offset + length].

    Bounds and domain are checked by the engine when the seed is applied.
    """
    values: list[int] = Field(..., description="Source sequence")
    offset: int = Field(default=0, description="Start of the seeded window in values")
    length: Optional[int] = Field(default=None, description="Window length (defaults to the rest of values)")


class SearchSpec(BaseModel):
    """
    Canonical description of a search session.

    - deterministic config hash
    - versioned schema
    - explicit problem kind and size
    """
    schema_version: int = Field(default=1, description="SearchSpec schema version")

    problem: ProblemKind = Field(default="queens")
    n: int = Field(..., ge=1, description="Number of positions (and size of the value domain)")
    seed: Optional[SeedSpec] = Field(default=None, description="Optional starting prefix")

    tags: dict[str, str] = Field(default_factory=dict, description="Arbitrary session tags")

    @model_validator(mode="after")
    def _validate_seed_fits(self) -> "SearchSpec":
        if self.seed is not None and self.seed.length is not None and self.seed.length > self.n:
            raise ValueError("seed.length cannot exceed n")
        return self

    def to_canonical_dict(self) -> dict:
        return self.model_dump()

    def config_hash(self) -> str:
        """
        Deterministic hash of the spec (session fingerprint).
        """
        blob = json.dumps(self.to_canonical_dict(), sort_keys=True, separators=(",", ":"), ensure_ascii=False)
        return hashlib.sha256(blob.encode("utf-8")).hexdigest()
