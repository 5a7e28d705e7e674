"""
Counsel Backend Application Package
"""

__version__ = "1.0.0"
__app_name__ = "Counsel Backend"

# counsel/__init__.py
# This file makes the counsel directory a Python package

# counsel/api/routes
"""
API route modules: counsel (mode-routed queries), documents, calendar
"""

# counsel/plugins
"""
Prompt-templated plugins: research, examine, paralegal
"""

# counsel/services
"""
LLM client, vector search, ingestion, web search, orchestration, calendar
"""
