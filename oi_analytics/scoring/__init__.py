from .base import FactorScorer, ScoreContext
from .config import DEFAULT_SIGNAL_CONFIG, FACTOR_ORDER, merge_config
from .engine import SCORER_REGISTRY, CompositeSignalScorer
from .safety import apply_technical_warnings


__all__ = [
    "CompositeSignalScorer",
    "DEFAULT_SIGNAL_CONFIG",
    "FACTOR_ORDER",
    "FactorScorer",
    "SCORER_REGISTRY",
    "ScoreContext",
    "apply_technical_warnings",
    "merge_config",
]
