"""
Song identifier shapes.

A score always points at exactly one song, which is either a song the user
uploaded (identified by a canonical UUID) or a song from the builtin catalog
(identified by a stable string key). Identifiers are told apart purely by
shape: anything that looks like a UUID is an uploaded song, everything else is
a builtin key.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Union

UUID_RE = re.compile(
    r"^[0-9a-f]{8}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{4}-[0-9a-f]{12}$", re.IGNORECASE
)


@dataclass(frozen=True)
class UploadedTarget:
    song_id: str

    @property
    def identifier(self) -> str:
        return self.song_id


@dataclass(frozen=True)
class BuiltinTarget:
    builtin_id: str

    @property
    def identifier(self) -> str:
        return self.builtin_id


Target = Union[UploadedTarget, BuiltinTarget]


def is_uploaded_id(identifier: str) -> bool:
    return UUID_RE.fullmatch(identifier) is not None
