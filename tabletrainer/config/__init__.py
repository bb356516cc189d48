from .config import load_config, validate_config
from .settings import PracticeSettings

__all__ = ["load_config", "validate_config", "PracticeSettings"]
