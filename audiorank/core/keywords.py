"""
Static keyword and pattern tables used by the synthesizer.

All tables are built once at import time and exposed read-only
(MappingProxyType / tuples) so they can be shared by every worker
thread without locking.

Weights are heuristics: each keyword hit contributes its weight as one
feature value, and each content type has a fixed 10-value pattern that
is written into the leading block of audio-domain vectors.
"""

import re
from types import MappingProxyType
from typing import Mapping, Tuple

from audiorank.core.models import ContentType


# Size of the reserved leading block overwritten by domain patterns
PATTERN_BLOCK = 10

# General audio vocabulary, applied to every content type
AUDIO_KEYWORDS: Mapping[str, float] = MappingProxyType({
    "vocal": 0.9, "voice": 0.9, "singing": 0.8,
    "drum": 0.8, "drums": 0.8, "percussion": 0.7,
    "bass": 0.8, "guitar": 0.8, "piano": 0.7,
    "mix": 0.9, "mixing": 0.9, "master": 0.9, "mastering": 0.9,
    "compressor": 0.8, "eq": 0.8, "reverb": 0.7, "delay": 0.7,
    "plugin": 0.7, "daw": 0.6, "studio": 0.6,
    "tracking": 0.8, "recording": 0.8, "editing": 0.7,
    "loudness": 0.8, "volume": 0.7, "level": 0.6,
    "frequency": 0.8, "hz": 0.7, "khz": 0.7,
    "saturation": 0.7, "distortion": 0.7, "warmth": 0.6,
    "clarity": 0.8, "presence": 0.7, "definition": 0.7,
})

_SESSION_KEYWORDS = {
    "engineer": 0.8, "producer": 0.8, "artist": 0.7,
    "microphone": 0.9, "mic": 0.8, "preamp": 0.8,
    "interface": 0.7, "converter": 0.7, "daw": 0.6,
    "take": 0.8, "comp": 0.7, "punch": 0.6,
    "setup": 0.7, "teardown": 0.6, "session": 0.9,
}

_PLUGIN_KEYWORDS = {
    "vst": 0.8, "au": 0.8, "aax": 0.7, "rtas": 0.6,
    "analog": 0.8, "digital": 0.7, "vintage": 0.8, "modern": 0.7,
    "tube": 0.8, "solid": 0.7, "class": 0.8, "a": 0.8,
    "b": 0.8, "ab": 0.7, "fidelity": 0.7,
    "dynamics": 0.9, "eq": 0.8, "equalizer": 0.8,
    "frequency": 0.8, "band": 0.7, "multiband": 0.8,
    "sidechain": 0.8, "parallel": 0.7, "mid": 0.8, "side": 0.8,
    "price": 0.6, "cost": 0.6, "free": 0.5,
    "professional": 0.8, "pro": 0.7, "studio": 0.7,
}

_FEEDBACK_KEYWORDS = {
    "love": 0.9, "like": 0.8, "great": 0.8, "good": 0.7,
    "perfect": 0.9, "excellent": 0.9, "amazing": 0.9,
    "hate": 0.9, "dislike": 0.8, "terrible": 0.8, "bad": 0.7,
    "loud": 0.8, "quiet": 0.7, "soft": 0.6, "hard": 0.6,
    "bright": 0.8, "dark": 0.7, "muddy": 0.8, "clear": 0.9,
    "warm": 0.7, "cold": 0.6, "harsh": 0.8, "smooth": 0.8,
    "need": 0.8, "want": 0.7, "require": 0.8, "should": 0.7,
    "more": 0.6, "less": 0.6, "increase": 0.7, "decrease": 0.7,
    "boost": 0.7, "cut": 0.7, "add": 0.6, "remove": 0.6,
}

_TECHNICAL_KEYWORDS = {
    "khz": 0.8, "hz": 0.7, "frequency": 0.9,
    "db": 0.8, "decibel": 0.7, "gain": 0.8,
    "ms": 0.7, "millisecond": 0.6, "time": 0.6,
    "sample": 0.8, "rate": 0.7, "bit": 0.7,
    "latency": 0.8, "delay": 0.7, "buffer": 0.6,
    "thd": 0.8, "distortion": 0.7, "noise": 0.7,
    "dynamic": 0.8, "range": 0.7, "headroom": 0.7,
    "stereo": 0.7, "mono": 0.6, "width": 0.7,
    "phase": 0.7, "coherent": 0.8, "correlation": 0.7,
    "lufs": 0.8, "loudness": 0.8, "integrated": 0.7,
    "true": 0.7, "peak": 0.7, "rms": 0.6,
}

# Content-type specific keyword tables (second feature pass)
CONTENT_TYPE_KEYWORDS: Mapping[ContentType, Mapping[str, float]] = MappingProxyType({
    ContentType.SESSION_NOTES: MappingProxyType(_SESSION_KEYWORDS),
    ContentType.PLUGIN_DESCRIPTION: MappingProxyType(_PLUGIN_KEYWORDS),
    ContentType.FEEDBACK: MappingProxyType(_FEEDBACK_KEYWORDS),
    ContentType.TECHNICAL_SPEC: MappingProxyType(_TECHNICAL_KEYWORDS),
})

# Bias tokens appended to audio-domain text before tokenizing
BIAS_TOKENS: Mapping[ContentType, str] = MappingProxyType({
    ContentType.SESSION_NOTES: "session recording tracking microphone preamp setup teardown",
    ContentType.PLUGIN_DESCRIPTION: "plugin vst au aax digital analog vintage modern processing effects",
    ContentType.FEEDBACK: "feedback revision change adjustment like dislike love perfect",
    ContentType.TECHNICAL_SPEC: "specification technical parameters frequency amplitude phase thd latency",
})

# Leading-block domain patterns for audio-domain vectors
DOMAIN_PATTERNS: Mapping[ContentType, Tuple[float, ...]] = MappingProxyType({
    ContentType.SESSION_NOTES: (0.7, 0.8, 0.6, 0.9, 0.7, 0.5, 0.6, 0.7, 0.8, 0.6),
    ContentType.PLUGIN_DESCRIPTION: (0.8, 0.7, 0.9, 0.6, 0.8, 0.7, 0.6, 0.8, 0.7, 0.9),
    ContentType.FEEDBACK: (0.9, 0.6, 0.7, 0.8, 0.7, 0.8, 0.7, 0.6, 0.9, 0.8),
    ContentType.TECHNICAL_SPEC: (0.6, 0.9, 0.8, 0.7, 0.6, 0.8, 0.7, 0.9, 0.6, 0.8),
})
DEFAULT_DOMAIN_PATTERN: Tuple[float, ...] = (0.5,) * PATTERN_BLOCK

# Technical-model overlay patterns, written into dimensions 20-29
TECHNICAL_PATTERNS: Mapping[ContentType, Tuple[float, ...]] = MappingProxyType({
    ContentType.TECHNICAL_SPEC: (0.9, 0.8, 0.9, 0.7, 0.8, 0.9, 0.7, 0.8, 0.9, 0.8),
    ContentType.PLUGIN_DESCRIPTION: (0.7, 0.8, 0.6, 0.8, 0.7, 0.6, 0.8, 0.7, 0.6, 0.7),
    ContentType.EQUIPMENT_LIST: (0.8, 0.6, 0.7, 0.9, 0.6, 0.7, 0.8, 0.6, 0.7, 0.8),
})
DEFAULT_TECHNICAL_PATTERN: Tuple[float, ...] = (0.4,) * PATTERN_BLOCK

# Vocabulary for the technical model: units, frequencies and timing,
# bare or attached to a number ("44.1 khz", "-14 lufs", "10ms").
TECHNICAL_TERM_PATTERN = re.compile(
    r"\b(?:\d+(?:\.\d+)?\s?(?:khz|hz|dbfs|db|ms|lufs|bit)"
    r"|khz|hz|dbfs|db|ms|bit|sample|latency|thd|frequency|amplitude"
    r"|phase|correlation|dynamic|range|lufs|rms|peak|bpm|buffer)\b",
    re.IGNORECASE,
)

# Words counted by the technical overlay score
TECHNICAL_WORDS = frozenset({
    "khz", "hz", "db", "ms", "bit", "sample", "latency", "thd",
    "frequency", "amplitude", "phase", "correlation", "dynamic", "range",
})

# Words counted by the semantic model's context-relevance score
AUDIO_CONTEXT_WORDS = frozenset({
    "recording", "mixing", "mastering", "studio", "audio", "sound",
    "music", "track", "song", "album", "production", "engineering",
})

# Content types with dedicated tables; others get a confidence penalty
WELL_SUPPORTED_TYPES = frozenset({
    ContentType.SESSION_NOTES,
    ContentType.PLUGIN_DESCRIPTION,
    ContentType.FEEDBACK,
    ContentType.TECHNICAL_SPEC,
})
