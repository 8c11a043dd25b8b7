"""
Shared pipeline components for reuse across different pipelines.
"""

from . import config_loader
from . import pipeline_logging
from . import rich_utils

__all__ = [
    "config_loader",
    "pipeline_logging",
    "rich_utils"
]
