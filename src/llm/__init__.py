"""
Model Layer

Role-based access to the language models used by the research pipeline.
"""

from .client import ClaudeClient, CompletionResponse, TokenUsage
from .errors import ModelInvocationError, ParseError
from .invoker import ModelInvoker
from .json_utils import clean_json_response, parse_json_response, parse_model_response
from .router import ModelHandle, ModelProvider, ModelRole, ModelRouter

__all__ = [
    "ClaudeClient",
    "CompletionResponse",
    "TokenUsage",
    "ModelInvocationError",
    "ParseError",
    "ModelInvoker",
    "clean_json_response",
    "parse_json_response",
    "parse_model_response",
    "ModelHandle",
    "ModelProvider",
    "ModelRole",
    "ModelRouter",
]
