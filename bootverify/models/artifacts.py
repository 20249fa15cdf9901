"""Artifact identity, ledger records, and per-attempt parameters."""

from __future__ import annotations

from nacl.signing import SigningKey
from pydantic import BaseModel, ConfigDict, Field


class ArtifactMetadata(BaseModel):
    """Identity of one image-producing catalog entry.

    ``describe()`` is the stable key used in the results ledger.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    version: str
    description: str = ""

    def describe(self) -> str:
        """Return the ledger key, ``"<name>:<version>"``."""
        return f"{self.name}:{self.version}"


class ArtifactResult(BaseModel):
    """Persisted verification outcome for one artifact.

    Written by the publishing step with ``verified=False`` and the tags
    that were pushed; overwritten with ``verified=True`` once every
    in-guest check has passed.
    """

    model_config = ConfigDict(frozen=True)

    tags: list[str] = Field(default_factory=list)
    verified: bool = False


class UserData(BaseModel):
    """Account hints rendered into guest-init data by each artifact."""

    model_config = ConfigDict(frozen=True)

    username: str
    authorized_keys: list[str] = Field(default_factory=list)


class ArtifactTestParams(BaseModel):
    """Credentials handed to every in-guest test function.

    The private key lives only for the duration of one verification
    attempt and is never serialized.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    username: str
    private_key: SigningKey = Field(repr=False)


class WorkerResult(BaseModel):
    """One artifact's new ledger record, sent from a worker to the collector."""

    model_config = ConfigDict(frozen=True)

    key: str
    value: ArtifactResult
