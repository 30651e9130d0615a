"""
Analysis cache: normalization and storage of face analysis results.

Keeps exactly one analysis per (image, user). Raw provider output is
normalized into a fixed shape so that readers never have to null-check
nested sections, then upserted in full.
"""
import json
import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Union

from sqlalchemy.orm import Session

from aiface.db.models.analysis import Analysis
from aiface.db.upsert import insert_for

logger = logging.getLogger(__name__)

DEFAULT_CONFIDENCE = 0.95
MAX_TRAIT_LENGTH = 50

RawOutput = Union[str, bytes, Dict[str, Any], None]

# Columns rewritten on every upsert
ANALYSIS_FIELDS = (
    "message",
    "positive_traits",
    "negative_traits",
    "personality_analysis",
    "age_health_analysis",
    "beauty_analysis",
    "confidence",
    "created_at",
)


# ============================================
# Normalization helpers
# ============================================

def _text(value: Any) -> str:
    return value if isinstance(value, str) else ""


def _number(value: Any) -> Union[int, float]:
    # Scores are stored as given, numeric strings keep their value
    if isinstance(value, bool):
        logger.debug(f"Non-numeric score replaced with 0: {value!r}")
        return 0
    if isinstance(value, (int, float)):
        return value
    if isinstance(value, str):
        try:
            return float(value.strip())
        except ValueError:
            pass
    if value is not None:
        logger.debug(f"Non-numeric score replaced with 0: {value!r}")
    return 0


def _dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _list(value: Any) -> List[Any]:
    return value if isinstance(value, list) else []


def _strings(value: Any) -> List[str]:
    return [item for item in _list(value) if isinstance(item, str)]


def clean_traits(traits: Any) -> List[str]:
    """
    Deduplicate and tidy a list of trait labels.

    Trims whitespace, drops empty strings and anything longer than
    MAX_TRAIT_LENGTH (the model sometimes answers with full sentences),
    and keeps the first occurrence of each exact label.
    """
    cleaned: List[str] = []
    seen = set()
    for trait in _list(traits):
        if not isinstance(trait, str):
            continue
        trait = trait.strip()
        if not trait or len(trait) > MAX_TRAIT_LENGTH or trait in seen:
            continue
        seen.add(trait)
        cleaned.append(trait)
    return cleaned


def _scored(value: Any, score_key: str = "value") -> Dict[str, Any]:
    section = _dict(value)
    return {
        score_key: _number(section.get(score_key)),
        "interpretation": _text(section.get("interpretation")),
    }


def normalize_personality(raw: Any) -> Dict[str, Any]:
    section = _dict(raw)
    mian_xiang = _dict(section.get("mian_xiang"))
    physiognomy = _dict(section.get("physiognomy"))
    return {
        "facial_features": [
            {
                "feature": _text(item.get("feature")),
                "interpretation": _text(item.get("interpretation")),
            }
            for item in _list(section.get("facial_features"))
            if isinstance(item, dict)
        ],
        "mian_xiang": {
            "elements": _strings(mian_xiang.get("elements")),
            "interpretation": _text(mian_xiang.get("interpretation")),
        },
        "physiognomy": {
            "traits": _strings(physiognomy.get("traits")),
            "interpretation": _text(physiognomy.get("interpretation")),
        },
    }


def normalize_age_health(raw: Any) -> Dict[str, Any]:
    section = _dict(raw)
    return {
        "estimated_age": _number(section.get("estimated_age")),
        "biological_age": _number(section.get("biological_age")),
        "health_indicators": [
            {
                "indicator": _text(item.get("indicator")),
                "status": _text(item.get("status")),
            }
            for item in _list(section.get("health_indicators"))
            if isinstance(item, dict)
        ],
        "stress_level": _scored(section.get("stress_level")),
        "fatigue_level": _scored(section.get("fatigue_level")),
        "hydration_level": _scored(section.get("hydration_level")),
    }


def normalize_beauty(raw: Any, celebrity_matches: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    section = _dict(raw)
    return {
        "symmetry_score": _number(section.get("symmetry_score")),
        "golden_ratio_score": _number(section.get("golden_ratio_score")),
        "aesthetic_balance": _scored(section.get("aesthetic_balance"), score_key="score"),
        "celebrity_matches": list(celebrity_matches or []),
    }


def _parse_object(raw_output: RawOutput) -> Optional[Dict[str, Any]]:
    """Return the raw output as a dict, or None when it is not a JSON object."""
    if isinstance(raw_output, dict):
        return raw_output
    if isinstance(raw_output, bytes):
        raw_output = raw_output.decode("utf-8", errors="replace")
    if not isinstance(raw_output, str):
        return None
    try:
        parsed = json.loads(raw_output)
    except ValueError:
        return None
    return parsed if isinstance(parsed, dict) else None


def normalize_celebrity_matches(raw_output: RawOutput) -> List[Dict[str, Any]]:
    """
    Normalize the celebrity-likeness payload.

    Accepts {"celebrity_matches": [...]} or a bare list. Anything
    unparseable yields an empty list.
    """
    if isinstance(raw_output, list):
        matches = raw_output
    else:
        if isinstance(raw_output, str):
            try:
                parsed = json.loads(raw_output)
            except ValueError:
                logger.warning("Celebrity match payload is not valid JSON; storing no matches")
                return []
            if isinstance(parsed, list):
                return normalize_celebrity_matches(parsed)
            raw_output = parsed
        matches = _list(_dict(raw_output).get("celebrity_matches"))

    return [
        {
            "name": _text(match.get("name")),
            "similarity": _number(match.get("similarity")),
            "features": _strings(match.get("features")),
        }
        for match in matches
        if isinstance(match, dict)
    ]


def degenerate_analysis(raw_text: str, celebrity_matches: Optional[List[Dict[str, Any]]] = None) -> Dict[str, Any]:
    """Analysis for provider output that could not be parsed at all."""
    return {
        "message": raw_text,
        "positive_traits": [],
        "negative_traits": [],
        "personality_analysis": normalize_personality(None),
        "age_health_analysis": normalize_age_health(None),
        "beauty_analysis": normalize_beauty(None, celebrity_matches),
        "confidence": DEFAULT_CONFIDENCE,
    }


def normalize_analysis(
    raw_output: RawOutput,
    celebrity_matches: Optional[List[Dict[str, Any]]] = None
) -> Dict[str, Any]:
    """
    Convert raw provider output into the canonical analysis shape.

    Args:
        raw_output: JSON string or parsed mapping from the analysis call
        celebrity_matches: Already-normalized matches from the likeness call

    Returns:
        Dictionary with message, trait lists, the three structured
        sections and confidence
    """
    data = _parse_object(raw_output)
    if data is None:
        if isinstance(raw_output, bytes):
            raw_text = raw_output.decode("utf-8", errors="replace")
        else:
            raw_text = raw_output if isinstance(raw_output, str) else ""
        logger.warning("Provider output is not a JSON object; using degenerate analysis")
        return degenerate_analysis(raw_text, celebrity_matches)

    message = data.get("analysis")
    if message is None:
        message = ""
    elif not isinstance(message, str):
        message = json.dumps(message)

    confidence = data.get("confidence")
    if isinstance(confidence, bool) or not isinstance(confidence, (int, float)):
        confidence = DEFAULT_CONFIDENCE

    return {
        "message": message,
        "positive_traits": clean_traits(data.get("positive_traits")),
        "negative_traits": clean_traits(data.get("negative_traits")),
        "personality_analysis": normalize_personality(data.get("personality_analysis")),
        "age_health_analysis": normalize_age_health(data.get("age_health_analysis")),
        "beauty_analysis": normalize_beauty(data.get("beauty_analysis"), celebrity_matches),
        "confidence": confidence,
    }


# ============================================
# Cache operations
# ============================================

def fetch(db: Session, image_id: int, user_id: int) -> Optional[Analysis]:
    """
    Look up the stored analysis for an (image, user) pair.

    Returns:
        Analysis, or None when the image has not been analyzed yet
    """
    return db.query(Analysis).filter(
        Analysis.image_id == image_id,
        Analysis.user_id == user_id
    ).first()


def store(
    db: Session,
    image_id: int,
    user_id: int,
    raw_output: RawOutput,
    celebrity_matches: Optional[List[Dict[str, Any]]] = None
) -> Analysis:
    """
    Normalize provider output and upsert it as the analysis for (image, user).

    Any previous analysis for the pair is replaced in full.

    Returns:
        The stored Analysis
    """
    values = normalize_analysis(raw_output, celebrity_matches)
    values["created_at"] = datetime.now(timezone.utc)

    stmt = insert_for(db, Analysis).values(image_id=image_id, user_id=user_id, **values)
    stmt = stmt.on_conflict_do_update(
        index_elements=["image_id", "user_id"],
        set_={field: stmt.excluded[field] for field in ANALYSIS_FIELDS}
    )
    db.execute(stmt)
    db.commit()

    logger.info(
        f"Analysis stored: image_id={image_id}, user_id={user_id}, "
        f"positive_traits={len(values['positive_traits'])}, "
        f"negative_traits={len(values['negative_traits'])}"
    )

    return fetch(db, image_id, user_id)
