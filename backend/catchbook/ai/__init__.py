"""External model integration: receipt OCR, fish recognition, business advice.

The model is an opaque capability behind AIClient; nothing here
reimplements recognition.
"""

from .groq_client import AIClient, GroqAIClient
from .analysis_schema import FishAnalysis, ReceiptAnalysis

__all__ = ["AIClient", "GroqAIClient", "FishAnalysis", "ReceiptAnalysis"]
