"""
Model router for selecting the model used by each provider call.
"""
from aiface.core import config

FACE_ANALYSIS = "face_analysis"
CELEBRITY_MATCH = "celebrity_match"

# Feature -> model override; None means the configured vision model
MODEL_ROUTING = {
    FACE_ANALYSIS: None,
    CELEBRITY_MATCH: None,
}


def get_model_for_feature(feature: str) -> str:
    """
    Get appropriate model for a feature.
    
    Args:
        feature: Feature name ("face_analysis" or "celebrity_match")
        
    Returns:
        Model identifier string
    """
    return MODEL_ROUTING.get(feature) or config.OPENAI_VISION_MODEL


def is_model_available() -> bool:
    """Check if a vision model can be called (OpenAI configured)."""
    return bool(config.OPENAI_API_KEY)
