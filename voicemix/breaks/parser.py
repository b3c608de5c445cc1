"""
Break marker parsing: where in the speech should a break effect play?

Expected pauses come from <break/> tags in the markup. Positions are taken
from the silence the speech engine actually rendered when every expected
pause can be matched; otherwise they are estimated from word counts.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Sequence
import logging
import re

from voicemix.pcm import PcmAsset
from voicemix.silence import SilenceConfig, SilenceSegment, detect_silence
from .config import BreakConfig, DEFAULT_CONFIG


logger = logging.getLogger("voicemix.breaks")

BREAK_TAG_RE = re.compile(r"<break\b([^>]*?)/?>", re.IGNORECASE)
TIME_ATTR_RE = re.compile(r"""\btime\s*=\s*["']\s*([0-9]*\.?[0-9]+)\s*(ms|s)?\s*["']""", re.IGNORECASE)
# a bare "<" in running text is not a tag
ANY_TAG_RE = re.compile(r"<[A-Za-z/!?][^<>]*>")


@dataclass(frozen=True)
class BreakMarker:
    """A pause in the speech: seconds from speech start, and its length."""

    position: float
    duration: float


@dataclass(frozen=True)
class BreakTag:
    """A pause tag as written in the markup."""

    duration: float
    words_before: int


def count_words(text: str) -> int:
    """Count whitespace-separated words after removing all markup tags."""
    return len(ANY_TAG_RE.sub(" ", text).split())


def parse_break_time(attrs: str, default_seconds: float) -> float:
    """Read the time attribute of a break tag; unitless values are seconds."""
    match = TIME_ATTR_RE.search(attrs or "")
    if not match:
        return default_seconds
    value = float(match.group(1))
    unit = (match.group(2) or "s").lower()
    return value / 1000.0 if unit == "ms" else value


def extract_breaks(markup_text: str, config: Optional[BreakConfig] = None) -> List[BreakTag]:
    """Find every break tag and the number of spoken words preceding it."""
    cfg = config or DEFAULT_CONFIG
    tags: List[BreakTag] = []
    words = 0
    cursor = 0
    for match in BREAK_TAG_RE.finditer(markup_text or ""):
        words += count_words(markup_text[cursor:match.start()])
        cursor = match.end()
        tags.append(BreakTag(
            duration=parse_break_time(match.group(1), cfg.default_break_seconds),
            words_before=words,
        ))
    return tags


def speaking_rate(
    total_words: int,
    total_break_seconds: float,
    speech_duration: Optional[float],
    config: Optional[BreakConfig] = None,
) -> float:
    """Words per second, derived from the measured duration when one is known."""
    cfg = config or DEFAULT_CONFIG
    if speech_duration is None or total_words <= 0:
        return cfg.words_per_second
    speaking = max(speech_duration - total_break_seconds, cfg.min_speaking_seconds)
    return total_words / speaking


def estimate_positions(
    markup_text: str,
    speech_duration: Optional[float] = None,
    config: Optional[BreakConfig] = None,
) -> List[BreakMarker]:
    """
    Word-rate estimate of break positions.

    Position of marker i is the estimated speaking time of the words before it
    plus the durations of all earlier breaks, so positions always increase.
    """
    cfg = config or DEFAULT_CONFIG
    tags = extract_breaks(markup_text, cfg)
    if not tags:
        return []
    rate = speaking_rate(
        count_words(markup_text),
        sum(t.duration for t in tags),
        speech_duration,
        cfg,
    )
    markers: List[BreakMarker] = []
    prior_breaks = 0.0
    for tag in tags:
        markers.append(BreakMarker(position=tag.words_before / rate + prior_breaks, duration=tag.duration))
        prior_breaks += tag.duration
    return markers


def align_breaks(
    expected: Sequence[float],
    segments: Sequence[SilenceSegment],
    match_ratio: float = DEFAULT_CONFIG.match_ratio,
) -> Optional[List[BreakMarker]]:
    """
    Match expected break durations to detected silences.

    Each expected duration greedily takes the unused segment closest in
    duration among those at least `match_ratio` of it long (first scanned wins
    ties). Returns None unless every expected break finds a segment.
    """
    used = set()
    markers: List[BreakMarker] = []
    for duration in expected:
        best_idx = None
        best_diff = 0.0
        for idx, seg in enumerate(segments):
            if idx in used or seg.duration < match_ratio * duration:
                continue
            diff = abs(seg.duration - duration)
            if best_idx is None or diff < best_diff:
                best_idx, best_diff = idx, diff
        if best_idx is not None:
            used.add(best_idx)
            markers.append(BreakMarker(position=segments[best_idx].start, duration=duration))

    if len(markers) != len(expected):
        logger.warning(
            "Break alignment matched %d of %d pauses; falling back to word-rate estimate",
            len(markers),
            len(expected),
        )
        return None
    return sorted(markers, key=lambda m: m.position)


def parse_breaks(
    markup_text: str,
    speech_asset: Optional[PcmAsset] = None,
    config: Optional[BreakConfig] = None,
    silence_config: Optional[SilenceConfig] = None,
) -> List[BreakMarker]:
    """
    Break markers for a piece of markup, aligned to the speech when possible.

    Args:
        markup_text: The SSML/markup text sent to the synthesis service
        speech_asset: The synthesized speech; enables silence alignment
        config: Break parsing settings
        silence_config: Silence detector settings used for alignment

    Returns:
        Markers sorted by position; empty when the text has no break tags
    """
    cfg = config or DEFAULT_CONFIG
    tags = extract_breaks(markup_text, cfg)
    if not tags:
        return []

    speech_duration = None
    if speech_asset is not None:
        speech_duration = speech_asset.duration_seconds
        segments = detect_silence(speech_asset, silence_config)
        aligned = align_breaks([t.duration for t in tags], segments, cfg.match_ratio)
        if aligned is not None:
            logger.info("Aligned %d break markers to detected silence", len(aligned))
            return aligned

    markers = estimate_positions(markup_text, speech_duration, cfg)
    logger.info("Estimated %d break markers from word rate", len(markers))
    return markers
