"""Pydantic schemas for API responses.

Every list field defaults to an empty list and upstream nulls are coerced to
empty lists, so clients never see ``null`` where a sequence is expected.
"""

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ResponseModel(BaseModel):
    """Base model that turns upstream nulls into empty lists."""

    @model_validator(mode="before")
    @classmethod
    def null_lists_to_empty(cls, data):
        if not isinstance(data, dict):
            return data
        return {
            key: value
            for key, value in data.items()
            if not (value is None and key in cls.model_fields
                    and isinstance(cls.model_fields[key].default, list))
        }


# ============ Shared ============

class ExtLink(ResponseModel):
    """External link attached to a VN or release."""
    url: str | None = None
    label: str | None = None


# ============ Search Schemas ============

class SearchTag(ResponseModel):
    """Tag as shown on search cards."""
    name: str | None = None
    score: float | None = None  # VNDB tag rating, 0-3
    spoiler: int | None = None  # 0=none, 1=minor, 2=major


class ReleaseSummary(ResponseModel):
    """Release summary nested in a search result."""
    id: str | None = None
    title: str | None = None
    languages: list[str] = []
    extlinks: list[ExtLink] = []


class SearchResultItem(ResponseModel):
    """Single VN in a search response."""
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str | None = None
    aliases: list[str] = []
    description: str | None = None
    released: str | None = None
    image: str | None = None  # Thumbnail URL, falls back to full image
    rating: float | None = None  # VNDB "average", 10-100 scale
    votecount: int | None = None
    length_minutes: int | None = Field(default=None, alias="lengthMinutes")
    platforms: list[str] = []
    languages: list[str] = []
    tags: list[SearchTag] = []
    extlinks: list[ExtLink] = []
    releases: list[ReleaseSummary] = []


class SearchResponse(ResponseModel):
    """Search results."""
    results: list[SearchResultItem] = []


# ============ VN Detail Schemas ============

class VNImage(ResponseModel):
    url: str | None = None
    thumbnail: str | None = None


class VNTag(ResponseModel):
    """Tag information for a VN detail record."""
    name: str | None = None
    description: str | None = None
    category: str | None = None  # cont, ero, tech
    spoiler: int | None = None  # 0=none, 1=minor, 2=major
    rating: float | None = None


class VNRelation(ResponseModel):
    """Related VN entry."""
    id: str | None = None
    title: str | None = None
    relation: str | None = None  # seq, preq, set, alt, char, side, par, ser, fan, orig
    relation_official: bool | None = None


class Developer(ResponseModel):
    id: str | None = None
    name: str | None = None


class StaffCredit(ResponseModel):
    id: str | None = None
    role: str | None = None
    note: str | None = None


class NamedRef(ResponseModel):
    id: str | None = None
    name: str | None = None


class VoiceCredit(ResponseModel):
    """Voice actor credit: staff member voicing a character."""
    note: str | None = None
    staff: NamedRef | None = None
    character: NamedRef | None = None


class VNDetailResponse(ResponseModel):
    """Detailed VN record, field names as VNDB returns them."""
    id: str
    title: str | None = None
    aliases: list[str] = []
    alttitle: str | None = None
    olang: str | None = None
    description: str | None = None
    released: str | None = None
    length: int | None = None  # Length tier 1-5
    length_minutes: int | None = None
    average: float | None = None
    rating: float | None = None
    votecount: int | None = None
    languages: list[str] = []
    platforms: list[str] = []
    devstatus: int | None = None  # 0=finished, 1=in development, 2=cancelled
    image: VNImage | None = None
    screenshots: list[VNImage] = []
    tags: list[VNTag] = []
    extlinks: list[ExtLink] = []
    relations: list[VNRelation] = []
    developers: list[Developer] = []
    staff: list[StaffCredit] = []
    va: list[VoiceCredit] = []


# ============ Release Schemas ============

class Release(ResponseModel):
    """Release belonging to a VN."""
    id: str | None = None
    title: str | None = None
    languages: list[str] = []  # Plain language codes
    platforms: list[str] = []
    official: bool | None = None
    freeware: bool | None = None
    patch: bool | None = None
    released: str | None = None
    extlinks: list[ExtLink] = []


class ReleasesResponse(ResponseModel):
    releases: list[Release] = []


# ============ Torrent Schemas ============

class TorrentResult(ResponseModel):
    """Torrent entry with a usable magnet link."""
    name: str | None = None
    magnet: str
    size: str | None = None  # Human readable, e.g. "1.50 GB"
    seeders: int | None = None
    leechers: int | None = None


class TorrentSearchResponse(ResponseModel):
    results: list[TorrentResult] = []
