"""
Transform steps - The step model and the built-in steps.
"""

from .base import StepLike, TransformStep, define_step
from .case import camel_case_step, camel_to_snake, snake_to_camel
from .headers import headers_step
from .parsing import content_step, json_format_step, json_step, parse_body
from .retry import RetryCoordinator, retry_step

__all__ = [
    # Model
    "StepLike",
    "TransformStep",
    "define_step",
    # Parsing
    "json_step",
    "json_format_step",
    "content_step",
    "parse_body",
    # Payload shaping
    "camel_case_step",
    "snake_to_camel",
    "camel_to_snake",
    # Request shaping
    "headers_step",
    # Retry
    "RetryCoordinator",
    "retry_step",
]
