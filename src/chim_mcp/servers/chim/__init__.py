"""CHIM API tools: change notifications, outages, retrospectives and status."""

from .client import ApiResponse, ChimClient, RequestOptions
from .providers import ChimToolProvider
from .tools import (
    ChangeFreezeStatusTool,
    CreateRecordTool,
    ListRecordsTool,
    SaveApiKeyTool,
)

__all__ = [
    "ApiResponse",
    "ChimClient",
    "RequestOptions",
    "ChimToolProvider",
    "ChangeFreezeStatusTool",
    "CreateRecordTool",
    "ListRecordsTool",
    "SaveApiKeyTool",
]
