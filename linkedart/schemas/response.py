from typing import Any, Dict, List, Optional
from pydantic import BaseModel


class AnalyzeRequest(BaseModel):
    url: Optional[str] = None
    urls: Optional[List[str]] = None


class ParseRequest(BaseModel):
    url: str
    depth: Optional[int] = None
    resolve: bool = True


class AnalysisResult(BaseModel):
    success: bool
    url: Optional[str] = None
    entity_type: Optional[str] = None
    results: Dict[str, List[str]] = {}
    log_messages: List[str] = []
    error: Optional[str] = None
    cancelled: bool = False


class AnalyzeResponse(BaseModel):
    total: int
    results: Dict[str, AnalysisResult]


class ParsedEntityStats(BaseModel):
    type: Optional[str] = None
    label: Optional[str] = None
    id: Optional[str] = None
    property_count: int
    property_names: List[str]
    has_references: bool
    nested_entity_count: int
    array_count: int
    literal_count: int
    max_depth: int


class HierarchyRow(BaseModel):
    key: str
    path: str
    type: str
    entity_type: Optional[str] = None
    label: Optional[str] = None
    id: Optional[str] = None
    is_array: bool = False
    array_length: int = 0
    has_children: bool = False
    truncated: bool = False


class ParseResponse(BaseModel):
    success: bool
    url: str
    parsed: Optional[Dict[str, Any]] = None
    stats: Optional[ParsedEntityStats] = None
    hierarchy: List[HierarchyRow] = []
    log_messages: List[str] = []
    error: Optional[str] = None
    cancelled: bool = False
