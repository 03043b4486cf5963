from datetime import datetime
from typing import List, Optional

from pydantic import Field

from schemas.common import CamelModel


class SongUpdate(CamelModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=255)


class SongOut(CamelModel):
    id: str
    title: str
    file_name: Optional[str] = None
    uploaded_at: datetime


class SongResponse(CamelModel):
    song: SongOut


class SongListResponse(CamelModel):
    songs: List[SongOut]
