"""Analysis engine: prompt construction, model call and reply parsing."""

from browserlens.analysis.engine import AnalysisEngine
from browserlens.analysis.parser import parse_analysis_response
from browserlens.analysis.prompts import SYSTEM_PROMPT, build_analysis_prompt

__all__ = [
    "AnalysisEngine",
    "SYSTEM_PROMPT",
    "build_analysis_prompt",
    "parse_analysis_response",
]
