"""
Prompt-templated plugins invoked by the orchestrator
"""

from counsel.plugins.examine_plugin import ExaminePlugin
from counsel.plugins.paralegal_plugin import ParalegalPlugin
from counsel.plugins.research_plugin import ResearchPlugin

__all__ = ["ExaminePlugin", "ParalegalPlugin", "ResearchPlugin"]
