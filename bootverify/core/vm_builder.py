"""VM definition construction for one verification attempt."""

from __future__ import annotations

import posixpath
import secrets

from bootverify.catalog.base import Artifact
from bootverify.models.vm import VirtualMachine

# Kubernetes' random-string alphabet: no vowels, no confusable digits.
NAME_ALPHABET = "bcdfghjklmnpqrstvwxz2456789"
NAME_SUFFIX_LENGTH = 5


def random_name(base: str, length: int = NAME_SUFFIX_LENGTH) -> str:
    """Return ``"<base>-<suffix>"`` with a random lowercase suffix.

    Collision-resistant, not collision-proof: names only need to be unique
    within one namespace for the lifetime of a run.
    """
    suffix = "".join(secrets.choice(NAME_ALPHABET) for _ in range(length))
    return f"{base}-{suffix}"


def image_reference(registry: str, tag: str) -> str:
    """Join *registry* and an image *tag*, e.g. ``quay.io/containerdisks/fedora:39``."""
    if not registry:
        return tag
    return posixpath.join(registry, tag)


def build_vm(artifact: Artifact, image_ref: str, user_data: str) -> VirtualMachine:
    """Name a new instance and let *artifact* shape its definition."""
    name = random_name(artifact.metadata().name)
    return artifact.vm(name, image_ref, user_data)
