from ..core.config import settings
from ..services import provider

def get_completion() -> provider.Completion:
    return provider.complete

def get_model_id() -> str:
    return settings.AI_MODEL
