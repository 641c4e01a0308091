"""AI gateway for job analysis and resume tailoring.

Main Entry Point:
    LLMGateway - analyze_job, tailor and check_connection over LiteLLM

Example:
    from resume_matcher.ai import LLMGateway

    gateway = LLMGateway()
    analysis = await gateway.analyze_job(description)
    if analysis.success:
        outcome = await gateway.tailor(resume, analysis.requirements)
"""

from resume_matcher.ai.config import AIConfig, AIProvider, get_ai_config, reset_ai_config
from resume_matcher.ai.gateway import AIGateway, LLMGateway
from resume_matcher.ai.llm import LLMClient, LLMError
from resume_matcher.ai.models import ConnectionTestResult, JobAnalysisResult, TailoringOutcome
from resume_matcher.ai.providers import BACKENDS, ProviderBackend, get_backend

__all__ = [
    "AIGateway",
    "LLMGateway",
    "LLMClient",
    "LLMError",
    "AIConfig",
    "AIProvider",
    "get_ai_config",
    "reset_ai_config",
    "JobAnalysisResult",
    "TailoringOutcome",
    "ConnectionTestResult",
    "ProviderBackend",
    "BACKENDS",
    "get_backend",
]
