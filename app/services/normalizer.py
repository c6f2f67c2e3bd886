"""Mapping of upstream VNDB / torrent index payloads into response schemas.

Upstream payloads are treated as untrusted dictionaries: any field may be
missing or null, and nested lists default to empty lists.
"""

from app import schemas
from app.services.size_utils import format_size

MAGNET_PREFIX = "magnet:?xt=urn:btih:"


def normalize_vn_id(vn_id: str) -> str:
    """Ensure a VN id carries its "v" type prefix ("18" -> "v18")."""
    vn_id = vn_id.strip()
    return vn_id if vn_id.startswith("v") else f"v{vn_id}"


def _extlinks(links: list[dict] | None) -> list[schemas.ExtLink]:
    return [
        schemas.ExtLink(url=link.get("url"), label=link.get("label"))
        for link in links or []
    ]


def release_languages(languages: list | None) -> list[str]:
    """Flatten release languages to plain codes.

    The release endpoint returns objects (``{"lang": "ja", "mtl": false}``)
    while nested release fields may already be plain strings.
    """
    codes = []
    for lang in languages or []:
        if isinstance(lang, dict):
            code = lang.get("lang")
            if code:
                codes.append(code)
        elif lang:
            codes.append(lang)
    return codes


def search_item(base: dict, detail: dict | None = None) -> schemas.SearchResultItem:
    """Merge a ranked search hit with its (optional) detail record."""
    detail = detail or {}
    image = base.get("image") or {}

    return schemas.SearchResultItem(
        id=base["id"],
        title=base.get("title"),
        aliases=base.get("aliases"),
        description=base.get("description"),
        released=base.get("released"),
        image=image.get("thumbnail") or image.get("url"),
        rating=base.get("average"),
        votecount=base.get("votecount"),
        length_minutes=base.get("length_minutes"),
        platforms=base.get("platforms"),
        languages=base.get("languages"),
        tags=[
            schemas.SearchTag(
                name=tag.get("name"),
                score=tag.get("rating"),
                spoiler=tag.get("spoiler"),
            )
            for tag in detail.get("tags") or []
        ],
        extlinks=_extlinks(detail.get("extlinks")),
        releases=[
            schemas.ReleaseSummary(
                id=release.get("id"),
                title=release.get("title"),
                languages=release_languages(release.get("languages")),
                extlinks=_extlinks(release.get("extlinks")),
            )
            for release in detail.get("releases") or []
        ],
    )


def vn_detail(raw: dict) -> schemas.VNDetailResponse:
    """Validate a raw VN record; field names are kept as VNDB sends them."""
    return schemas.VNDetailResponse.model_validate(raw)


def release(raw: dict) -> schemas.Release:
    return schemas.Release(
        id=raw.get("id"),
        title=raw.get("title"),
        languages=release_languages(raw.get("languages")),
        platforms=raw.get("platforms"),
        official=raw.get("official"),
        freeware=raw.get("freeware"),
        patch=raw.get("patch"),
        released=raw.get("released"),
        extlinks=_extlinks(raw.get("extlinks")),
    )


def magnet_link(infohash: str | None) -> str | None:
    """Build a magnet URI from an infohash, or None without one."""
    if not infohash:
        return None
    return f"{MAGNET_PREFIX}{infohash}"


def _is_byte_count(value) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool) and value > 0


def torrent(raw: dict) -> schemas.TorrentResult | None:
    """Normalize a torrent entry. Entries without an infohash yield None."""
    magnet = magnet_link(raw.get("infohash"))
    if magnet is None:
        return None

    size_bytes = raw.get("size_bytes")
    return schemas.TorrentResult(
        name=raw.get("name"),
        magnet=magnet,
        size=format_size(size_bytes) if _is_byte_count(size_bytes) else None,
        seeders=raw.get("seeders"),
        leechers=raw.get("leechers"),
    )
