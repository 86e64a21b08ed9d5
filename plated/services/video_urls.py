# plated/services/video_urls.py
from __future__ import annotations

import re
from typing import Callable, Optional
from urllib.parse import SplitResult, parse_qs, urlsplit

from plated.app.domain.models import Platform, VideoReference

# Checked in order; the first family whose domain appears in the hostname wins.
PLATFORM_DOMAINS: tuple[tuple[Platform, tuple[str, ...]], ...] = (
    (Platform.YOUTUBE, ("youtube.com", "youtu.be")),
    (Platform.TIKTOK, ("tiktok.com",)),
    (Platform.INSTAGRAM, ("instagram.com",)),
)

_YOUTUBE_PATH_PREFIXES = ("shorts", "embed", "live")
_INSTAGRAM_PATH_PREFIXES = ("reel", "reels", "p")
# Same charset as youtube, tiktok and instagram ids; anything else is discarded.
_ASSET_ID_RE = re.compile(r"[A-Za-z0-9_-]+")


def _path_segments(parts: SplitResult) -> list[str]:
    return [segment for segment in parts.path.split("/") if segment]


def _segment_after(parts: SplitResult, markers: tuple[str, ...]) -> Optional[str]:
    segments = _path_segments(parts)
    for index, segment in enumerate(segments[:-1]):
        if segment in markers:
            return segments[index + 1]
    return None


def _youtube_asset_id(parts: SplitResult) -> Optional[str]:
    hostname = parts.hostname or ""
    if "youtu.be" in hostname:
        segments = _path_segments(parts)
        return segments[0] if segments else None

    video_ids = parse_qs(parts.query).get("v")
    if video_ids and video_ids[0]:
        return video_ids[0]
    return _segment_after(parts, _YOUTUBE_PATH_PREFIXES)


def _tiktok_asset_id(parts: SplitResult) -> Optional[str]:
    return _segment_after(parts, ("video",))


def _instagram_asset_id(parts: SplitResult) -> Optional[str]:
    return _segment_after(parts, _INSTAGRAM_PATH_PREFIXES)


ASSET_ID_EXTRACTORS: dict[Platform, Callable[[SplitResult], Optional[str]]] = {
    Platform.YOUTUBE: _youtube_asset_id,
    Platform.TIKTOK: _tiktok_asset_id,
    Platform.INSTAGRAM: _instagram_asset_id,
}


def _split(url: str) -> SplitResult:
    candidate = url.strip()
    if "://" not in candidate:
        candidate = f"https://{candidate}"
    return urlsplit(candidate)


def detect_platform(hostname: str) -> Platform:
    host = hostname.lower()
    for platform, domains in PLATFORM_DOMAINS:
        if any(domain in host for domain in domains):
            return platform
    return Platform.UNKNOWN


def classify(url: str) -> VideoReference:
    """Retorna a plataforma e o id do video. Nunca levanta excecao."""
    if not isinstance(url, str):
        return VideoReference(url=str(url), platform=Platform.UNKNOWN)

    try:
        parts = _split(url)
        hostname = parts.hostname
    except ValueError:
        return VideoReference(url=url, platform=Platform.UNKNOWN)

    if not hostname:
        return VideoReference(url=url, platform=Platform.UNKNOWN)

    platform = detect_platform(hostname)
    if platform is Platform.UNKNOWN:
        return VideoReference(url=url, platform=platform)

    try:
        asset_id = ASSET_ID_EXTRACTORS[platform](parts)
    except ValueError:
        asset_id = None

    if not asset_id or not _ASSET_ID_RE.fullmatch(asset_id):
        asset_id = None
    return VideoReference(url=url, platform=platform, asset_id=asset_id)
