"""Loads and validates the simulation tables (profiles.yaml)."""

import math
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml

from docguard.analysis.exceptions import ProfileError
from docguard.analysis.models import Category, Severity, Verdict

_DEFAULT_PROFILES_PATH = Path(__file__).parent / "profiles.yaml"

FLAG_NAMES: tuple[str, ...] = (
    "text_extracted",
    "metadata_check",
    "font_consistency",
    "watermark_present",
    "suspicious_edits",
    "hidden_text_detected",
)
LIST_NAMES: tuple[str, ...] = (
    "font_mismatches",
    "typos_detected",
    "anomalies",
    "ai_suggestions",
)
_TIMESTAMP_OVERRIDES = frozenset({"creation_date", "last_modified"})
_TEXT_OVERRIDES = frozenset({"software", "author", "producer"})
_WEIGHT_TOLERANCE = 1e-9


@dataclass(frozen=True)
class Candidate:
    text: str
    probability: float


@dataclass(frozen=True)
class VerdictProfile:
    confidence_low: float
    confidence_high: float
    flags: tuple[tuple[str, float], ...]
    lists: tuple[tuple[str, tuple[Candidate, ...]], ...]
    verified_probability: float
    legacy_hash_probability: float | None
    metadata_overrides: tuple[tuple[str, str], ...]
    heatmap_limit: int | None


@dataclass(frozen=True)
class RegionTemplate:
    severity: Severity
    width_min: float
    width_max: float
    height_min: float
    height_max: float


@dataclass(frozen=True)
class EvidenceProfile:
    ocr_samples: tuple[str, ...]
    software: tuple[tuple[Category, tuple[str, ...]], ...]
    authors: tuple[str, ...]
    producers: tuple[tuple[Category, str], ...]
    creation_window_days: int
    modification_window_days: int
    tampering_probability: float
    canvas_width: float
    canvas_height: float
    regions: tuple[RegionTemplate, ...]

    def software_for(self, category: Category) -> tuple[str, ...]:
        return dict(self.software)[category]

    def producer_for(self, category: Category) -> str | None:
        return dict(self.producers).get(category)


@dataclass(frozen=True)
class Profiles:
    category_weights: tuple[tuple[Category, tuple[float, ...]], ...]
    verdicts: tuple[tuple[Verdict, VerdictProfile], ...]
    evidence: EvidenceProfile

    def weights_for(self, category: Category) -> tuple[float, ...]:
        return dict(self.category_weights)[category]

    def verdict(self, status: Verdict) -> VerdictProfile:
        return dict(self.verdicts)[status]


def load_profiles(path: Path | None = None) -> Profiles:
    """Load simulation tables from YAML.

    Args:
        path: Path to a profiles file. Defaults to the bundled profiles.yaml.

    Raises:
        ProfileError: if the file cannot be read or violates a table invariant.
    """
    if path is None:
        path = _DEFAULT_PROFILES_PATH
    try:
        raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ProfileError(f"Failed to load profiles: {exc}") from exc
    except yaml.YAMLError as exc:
        raise ProfileError(f"Invalid profiles YAML: {exc}") from exc
    if not isinstance(raw, dict):
        raise ProfileError("Profiles file must contain a mapping")
    for key in ("category_weights", "evidence", "verdicts"):
        if key not in raw:
            raise ProfileError(f"Missing required top-level section: {key}")
    return Profiles(
        category_weights=_build_weights(raw["category_weights"]),
        verdicts=_build_verdicts(raw["verdicts"]),
        evidence=_build_evidence(raw["evidence"]),
    )


def _build_weights(raw: Any) -> tuple[tuple[Category, tuple[float, ...]], ...]:
    if not isinstance(raw, dict):
        raise ProfileError("'category_weights' must be a mapping")
    weights: list[tuple[Category, tuple[float, ...]]] = []
    for category in Category:
        vector = raw.get(category.value)
        if not isinstance(vector, list) or len(vector) != len(Verdict):
            raise ProfileError(
                f"Weights for '{category.value}' must list {len(Verdict)} numbers"
            )
        values = tuple(_probability(v, f"category_weights.{category.value}") for v in vector)
        if not math.isclose(sum(values), 1.0, abs_tol=_WEIGHT_TOLERANCE):
            raise ProfileError(
                f"Weights for '{category.value}' sum to {sum(values)}, expected 1.0"
            )
        weights.append((category, values))
    return tuple(weights)


def _build_verdicts(raw: Any) -> tuple[tuple[Verdict, VerdictProfile], ...]:
    if not isinstance(raw, dict):
        raise ProfileError("'verdicts' must be a mapping")
    profiles: list[tuple[Verdict, VerdictProfile]] = []
    for status in Verdict:
        if status.value not in raw:
            raise ProfileError(f"Missing verdict profile: {status.value}")
        profiles.append((status, _build_verdict(status.value, raw[status.value])))
    return tuple(profiles)


def _build_verdict(name: str, raw: Any) -> VerdictProfile:
    if not isinstance(raw, dict):
        raise ProfileError(f"Verdict profile '{name}' must be a mapping")
    low, high = _band(raw.get("confidence"), f"{name}.confidence")

    flags_raw = raw.get("flags")
    if not isinstance(flags_raw, dict) or set(flags_raw) != set(FLAG_NAMES):
        raise ProfileError(f"'{name}.flags' must define exactly: {list(FLAG_NAMES)}")
    flags = tuple(
        (flag, _probability(flags_raw[flag], f"{name}.flags.{flag}")) for flag in FLAG_NAMES
    )

    lists_raw = raw.get("lists")
    if not isinstance(lists_raw, dict) or set(lists_raw) != set(LIST_NAMES):
        raise ProfileError(f"'{name}.lists' must define exactly: {list(LIST_NAMES)}")
    lists = tuple(
        (list_name, _build_candidates(lists_raw[list_name], f"{name}.lists.{list_name}"))
        for list_name in LIST_NAMES
    )

    blockchain = raw.get("blockchain") or {}
    if not isinstance(blockchain, dict):
        raise ProfileError(f"'{name}.blockchain' must be a mapping")
    verified = _probability(blockchain.get("verified", 0.0), f"{name}.blockchain.verified")
    legacy_hash = blockchain.get("legacy_hash")
    if legacy_hash is not None:
        legacy_hash = _probability(legacy_hash, f"{name}.blockchain.legacy_hash")

    heatmap_limit = raw.get("heatmap_limit")
    if heatmap_limit is not None and (not isinstance(heatmap_limit, int) or heatmap_limit < 0):
        raise ProfileError(f"'{name}.heatmap_limit' must be a non-negative integer or null")

    return VerdictProfile(
        confidence_low=low,
        confidence_high=high,
        flags=flags,
        lists=lists,
        verified_probability=verified,
        legacy_hash_probability=legacy_hash,
        metadata_overrides=_build_overrides(raw.get("metadata_overrides") or {}, name),
        heatmap_limit=heatmap_limit,
    )


def _build_candidates(raw: Any, where: str) -> tuple[Candidate, ...]:
    if not isinstance(raw, dict):
        raise ProfileError(f"'{where}' must be a mapping with probability and candidates")
    probability = _probability(raw.get("probability", 0.0), f"{where}.probability")
    texts = raw.get("candidates") or []
    if not isinstance(texts, list) or not all(isinstance(t, str) for t in texts):
        raise ProfileError(f"'{where}.candidates' must be a list of strings")
    return tuple(Candidate(text=t, probability=probability) for t in texts)


def _build_overrides(raw: Any, name: str) -> tuple[tuple[str, str], ...]:
    if not isinstance(raw, dict):
        raise ProfileError(f"'{name}.metadata_overrides' must be a mapping")
    overrides: list[tuple[str, str]] = []
    for key, value in raw.items():
        if key in _TIMESTAMP_OVERRIDES:
            if value != "now":
                raise ProfileError(f"'{name}.metadata_overrides.{key}' only supports 'now'")
        elif key not in _TEXT_OVERRIDES:
            raise ProfileError(f"Unknown metadata override '{key}' in '{name}'")
        overrides.append((key, str(value)))
    return tuple(overrides)


def _build_evidence(raw: Any) -> EvidenceProfile:
    if not isinstance(raw, dict):
        raise ProfileError("'evidence' must be a mapping")
    ocr_samples = _non_empty_strings(raw.get("ocr_samples"), "evidence.ocr_samples")
    authors = _strings(raw.get("authors"), "evidence.authors")
    if not authors:
        raise ProfileError("'evidence.authors' must not be empty")

    software_raw = raw.get("software")
    if not isinstance(software_raw, dict):
        raise ProfileError("'evidence.software' must be a mapping")
    software = tuple(
        (c, _non_empty_strings(software_raw.get(c.value), f"evidence.software.{c.value}"))
        for c in Category
    )
    producers_raw = raw.get("producers") or {}
    if not isinstance(producers_raw, dict):
        raise ProfileError("'evidence.producers' must be a mapping")
    try:
        producers = tuple(
            (Category(key), str(value)) for key, value in producers_raw.items()
        )
    except ValueError as exc:
        raise ProfileError(f"'evidence.producers' has an unknown category: {exc}") from exc

    tampering = raw.get("tampering")
    if not isinstance(tampering, dict):
        raise ProfileError("'evidence.tampering' must be a mapping")
    canvas = tampering.get("canvas") or {}
    regions = tuple(
        _build_region(r, f"evidence.tampering.regions[{i}]")
        for i, r in enumerate(tampering.get("regions") or [])
    )

    return EvidenceProfile(
        ocr_samples=ocr_samples,
        software=software,
        authors=authors,
        producers=producers,
        creation_window_days=int(raw.get("creation_window_days", 365)),
        modification_window_days=int(raw.get("modification_window_days", 30)),
        tampering_probability=_probability(
            tampering.get("probability", 0.0), "evidence.tampering.probability"
        ),
        canvas_width=float(canvas.get("width", 300)),
        canvas_height=float(canvas.get("height", 200)),
        regions=regions,
    )


def _build_region(raw: Any, where: str) -> RegionTemplate:
    if not isinstance(raw, dict):
        raise ProfileError(f"'{where}' must be a mapping")
    try:
        severity = Severity(raw.get("severity"))
    except ValueError as exc:
        raise ProfileError(f"'{where}.severity' is invalid: {exc}") from exc
    width_min, width_max = _range(raw.get("width"), f"{where}.width")
    height_min, height_max = _range(raw.get("height"), f"{where}.height")
    return RegionTemplate(
        severity=severity,
        width_min=width_min,
        width_max=width_max,
        height_min=height_min,
        height_max=height_max,
    )


def _probability(value: Any, where: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ProfileError(f"'{where}' must be a number")
    if not 0.0 <= value <= 1.0:
        raise ProfileError(f"'{where}' must be within [0, 1], got {value}")
    return float(value)


def _band(value: Any, where: str) -> tuple[float, float]:
    low, high = _range(value, where)
    if low < 0.0 or high > 1.0:
        raise ProfileError(f"'{where}' must lie within [0, 1]")
    return low, high


def _range(value: Any, where: str) -> tuple[float, float]:
    if (
        not isinstance(value, list)
        or len(value) != 2
        or not all(isinstance(v, (int, float)) and not isinstance(v, bool) for v in value)
    ):
        raise ProfileError(f"'{where}' must be a [min, max] pair of numbers")
    low, high = float(value[0]), float(value[1])
    if low > high:
        raise ProfileError(f"'{where}' has min greater than max")
    return low, high


def _strings(value: Any, where: str) -> tuple[str, ...]:
    if not isinstance(value, list) or not all(isinstance(v, str) for v in value):
        raise ProfileError(f"'{where}' must be a list of strings")
    return tuple(value)


def _non_empty_strings(value: Any, where: str) -> tuple[str, ...]:
    result = _strings(value, where)
    if not result:
        raise ProfileError(f"'{where}' must not be empty")
    return result
