"""
FastAPI dependency providers for the service layer.

Routes depend on these functions rather than on the module-level instances
so tests can swap them through `app.dependency_overrides`.
"""

from counsel.plugins.examine_plugin import ExaminePlugin, examine_plugin
from counsel.plugins.paralegal_plugin import ParalegalPlugin, paralegal_plugin
from counsel.plugins.research_plugin import ResearchPlugin, research_plugin
from counsel.services.calendar_service import CalendarService, calendar_service
from counsel.services.document_service import DocumentService, document_service
from counsel.services.orchestrator_service import OrchestratorService, orchestrator_service
from counsel.services.search_service import DocumentSearchService, search_service


def get_orchestrator() -> OrchestratorService:
    return orchestrator_service


def get_document_service() -> DocumentService:
    return document_service


def get_search_service() -> DocumentSearchService:
    return search_service


def get_paralegal_plugin() -> ParalegalPlugin:
    return paralegal_plugin


def get_research_plugin() -> ResearchPlugin:
    return research_plugin


def get_examine_plugin() -> ExaminePlugin:
    return examine_plugin


def get_calendar_service() -> CalendarService:
    return calendar_service
