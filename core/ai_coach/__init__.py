from core.ai_coach.client import GenerationClient
from core.ai_coach.orchestrator import RoutineOrchestrator

__all__ = ["GenerationClient", "RoutineOrchestrator"]
