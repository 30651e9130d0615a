"""
Vision provider interface for abstracting model implementations.
"""
from abc import ABC, abstractmethod
from typing import Dict, Any
from dataclasses import dataclass


@dataclass
class LLMResponse:
    """Standardized LLM response."""
    content: str
    tokens_in: int = 0
    tokens_out: int = 0
    model: str = ""
    cost_estimate: float = 0.0
    metadata: Dict[str, Any] = None

    def __post_init__(self):
        if self.metadata is None:
            self.metadata = {}


class LLMProvider(ABC):
    """Abstract base class for face analysis providers."""
    
    @abstractmethod
    def analyze_face(self, image_b64: str, mimetype: str) -> LLMResponse:
        """
        Run the structured face analysis on one image.
        
        Args:
            image_b64: Base64-encoded image bytes
            mimetype: Media type of the image (e.g. "image/jpeg")
            
        Returns:
            LLMResponse whose content is the raw analysis payload
            (a JSON object string, or free text)
        """
        pass
    
    @abstractmethod
    def match_celebrities(self, image_b64: str, mimetype: str) -> LLMResponse:
        """
        Find celebrities with similar facial features.
        
        Args:
            image_b64: Base64-encoded image bytes
            mimetype: Media type of the image
            
        Returns:
            LLMResponse whose content is a JSON object with "celebrity_matches"
        """
        pass
    
    def estimate_cost(self, tokens_in: int, tokens_out: int, model: str) -> float:
        """
        Estimate cost for a request.
        
        Args:
            tokens_in: Input tokens
            tokens_out: Output tokens
            model: Model identifier
            
        Returns:
            Estimated cost in USD
        """
        # Providers should override with actual pricing
        return 0.0
