"""Platform-specific ad configuration for player apps.

Two ad shapes exist. iOS-family players consume ad rules through a VMAP
template, every other ad-bearing platform requests prerolls through a VAST
tag. Placement paths configured on a player app are rewritten so that each
shape receives inventory units with the leaf names it expects.
"""

from __future__ import annotations

import logging
import re
from enum import Enum
from typing import Iterable

from ..models import (
    DEFAULT_VIDEO_PREROLL_SIZE,
    AdLock,
    AdRoute,
    Placements,
    PlayerApp,
    PrerollPlacement,
    PrivacyDefaults,
    RulesPlacement,
    VastAdBlock,
    VastPlacements,
    VmapAdBlock,
    VmapPlacements,
)
from ..utils import normalize_platform_key

logger = logging.getLogger(__name__)

IOS_VMAP_URL = (
    "https://pubads.g.doubleclick.net/gampad/ads?iu={iu}&env=vp&gdfp_req=1"
    "&output=vmap&ad_rule=1&description_url={encoded_page_url}"
    "&cust_params={encoded_cust_params}&npa={npa}&tfcd={tfcd}&us_privacy={us_privacy}"
)
ANDROID_VAST_TEMPLATE = (
    "https://pubads.g.doubleclick.net/gampad/ads?iu={iu}&env=vp&gdfp_req=1"
    "&unviewed_position_start=1&output=vast&sz={size}"
    "&description_url={encoded_page_url}&cust_params={encoded_cust_params}"
    "&npa={npa}&tfcd={tfcd}&us_privacy={us_privacy}"
)

DEFAULT_PLACEMENT_SLUG = "webradio"
AUDIO_PREROLL_LEAF = "audio_preroll"
VIDEO_PREROLL_LEAF = "video_preroll"
AUDIO_RULES_LEAF = "audio_adrules"
VIDEO_RULES_LEAF = "video_adrules"
AUDIO_PREROLL_SIZE = "1x1"

NETWORK_CODE_RE = re.compile(r"/(\d{3,})\b")
LEAF_RE = re.compile(r"^(.*/)?([^/]+)$")
PREROLL_RE = re.compile(r"_preroll\b", re.IGNORECASE)
MIDROLL_RE = re.compile(r"_midroll\b", re.IGNORECASE)
ADRULES_RE = re.compile(r"_adrules\b", re.IGNORECASE)
RADIO_SEGMENT_RE = re.compile(r"/radio/", re.IGNORECASE)


class AdShape(str, Enum):
    VMAP = "vmap"
    VAST = "vast"


def classify_platform(platform: str | None) -> AdShape:
    """Return the ad shape a platform consumes; only iOS uses VMAP."""

    if normalize_platform_key(platform) == "ios":
        return AdShape.VMAP
    return AdShape.VAST


def compute_default_network_code(apps: Iterable[PlayerApp]) -> str:
    """Return the network code shared by every app, or ``""`` when they disagree."""

    codes = {app.network_code.strip() for app in apps if app.network_code.strip()}
    if len(codes) == 1:
        return next(iter(codes))
    return ""


def extract_network_code(placement: str | None) -> str | None:
    if not placement:
        return None
    match = NETWORK_CODE_RE.search(placement.strip())
    return match.group(1) if match else None


def resolve_network_code(
    network_code: str | None,
    placements: Placements,
    default_network_code: str = "",
) -> str:
    """Prefer the configured code, then one embedded in a placement, then the default."""

    configured = (network_code or "").strip()
    if configured:
        return configured
    for candidate in (placements.preroll, placements.midroll, placements.rewarded):
        extracted = extract_network_code(candidate)
        if extracted:
            return extracted
    return default_network_code


def _split_leaf(path: str) -> tuple[str, str]:
    match = LEAF_RE.match(path)
    if match is None:
        return "", path
    return match.group(1) or "", match.group(2)


def _default_path(network_code: str, leaf: str) -> str:
    if not network_code:
        return ""
    return f"/{network_code}/{DEFAULT_PLACEMENT_SLUG}/{leaf}"


def normalize_vmap_placement(
    raw: str | None, fallback: str, expected: str | None = None
) -> str:
    """Rewrite a placement into its ad-rules form.

    ``_preroll`` and ``_midroll`` leaves become ``_adrules``. When an expected
    leaf is given and the leaf still is not an ad-rules leaf, it is replaced.
    A ``/radio/`` segment on an ad-rules path becomes ``/webradio/``.
    """

    fallback = fallback.strip()
    base = (raw or "").strip() or fallback
    if not base:
        return ""

    normalized = MIDROLL_RE.sub("_adrules", PREROLL_RE.sub("_adrules", base))
    if expected:
        prefix, leaf = _split_leaf(normalized)
        if not ADRULES_RE.search(leaf):
            leaf = expected
            if not prefix and fallback:
                prefix = _split_leaf(fallback)[0]
        normalized = f"{prefix}{leaf}"

    if ADRULES_RE.search(normalized) and RADIO_SEGMENT_RE.search(normalized):
        normalized = RADIO_SEGMENT_RE.sub("/webradio/", normalized, count=1)
    return normalized


def normalize_vast_placement(
    raw: str | None, fallback: str, expected: str | None = None
) -> str:
    """Rewrite a placement into its preroll form.

    Only the last segment changes: ``_adrules`` and ``_midroll`` become
    ``_preroll``, a leaf differing from ``expected`` is replaced by it, and
    without an expectation a non-preroll leaf becomes ``preroll``. The prefix
    comes from the source path, else from the fallback.
    """

    fallback = fallback.strip()
    source = (raw or "").strip() or fallback
    if not source:
        return ""

    prefix, leaf = _split_leaf(source)
    leaf = MIDROLL_RE.sub("_preroll", ADRULES_RE.sub("_preroll", leaf))

    if expected:
        if leaf.lower() != expected.lower():
            leaf = expected
    elif not PREROLL_RE.search(leaf):
        leaf = "preroll"

    if not prefix and fallback:
        prefix = _split_leaf(fallback)[0]

    normalized = f"{prefix}{leaf}"
    if PREROLL_RE.search(leaf) and RADIO_SEGMENT_RE.search(normalized):
        normalized = RADIO_SEGMENT_RE.sub("/webradio/", normalized)
    return normalized


def _video_source(placements: Placements) -> str:
    return placements.midroll or placements.rewarded


def _build_vmap(
    placements: Placements, network_code: str
) -> VmapAdBlock:
    audio_rules = normalize_vmap_placement(
        placements.preroll,
        _default_path(network_code, AUDIO_RULES_LEAF),
        AUDIO_RULES_LEAF,
    )
    video_rules = normalize_vmap_placement(
        _video_source(placements),
        _default_path(network_code, VIDEO_RULES_LEAF),
        VIDEO_RULES_LEAF,
    )
    return VmapAdBlock(
        network_code=network_code,
        privacy_defaults=PrivacyDefaults(),
        ad_lock=AdLock(),
        vmap_url=IOS_VMAP_URL,
        placements=VmapPlacements(
            audio_rules=RulesPlacement(
                iu=audio_rules or None, enabled=bool(audio_rules)
            ),
            video_rules=RulesPlacement(
                iu=video_rules or None, enabled=bool(video_rules)
            ),
        ),
        route=AdRoute(audio="audio_rules", video="video_rules"),
    )


def _build_vast(
    placements: Placements, network_code: str, video_size: str
) -> VastAdBlock:
    audio_preroll = normalize_vast_placement(
        placements.preroll,
        _default_path(network_code, AUDIO_PREROLL_LEAF),
        AUDIO_PREROLL_LEAF,
    )
    video_preroll = normalize_vast_placement(
        _video_source(placements),
        _default_path(network_code, VIDEO_PREROLL_LEAF),
        VIDEO_PREROLL_LEAF,
    )
    return VastAdBlock(
        network_code=network_code,
        privacy_defaults=PrivacyDefaults(),
        ad_lock=AdLock(),
        ad_tag_template=ANDROID_VAST_TEMPLATE,
        placements=VastPlacements(
            audio_preroll=PrerollPlacement(
                iu=audio_preroll or None,
                default_size=AUDIO_PREROLL_SIZE,
                enabled=bool(audio_preroll),
            ),
            video_preroll=PrerollPlacement(
                iu=video_preroll or None,
                default_size=video_size,
                enabled=bool(video_preroll),
            ),
        ),
        route=AdRoute(audio="audio_preroll", video="video_preroll"),
    )


def build_ads_payload(
    player: PlayerApp | None,
    platform: str | None,
    *,
    default_network_code: str = "",
) -> VmapAdBlock | VastAdBlock | None:
    """Synthesize the ad block a player app needs on ``platform``.

    Returns ``None`` when there is no player or IMA is disabled for it.
    """

    if player is None or not player.ima_enabled:
        return None

    placements = player.placements
    network_code = resolve_network_code(
        player.network_code, placements, default_network_code
    )
    shape = classify_platform(platform)
    if not network_code:
        logger.debug("Player %s has no resolvable network code", player.id)

    if shape is AdShape.VMAP:
        return _build_vmap(placements, network_code)
    video_size = (
        player.video_preroll_default_size.strip() or DEFAULT_VIDEO_PREROLL_SIZE
    )
    return _build_vast(placements, network_code, video_size)
