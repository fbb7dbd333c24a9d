"""Safety engine — decisions, adaptations, recommendations, durations, integration.

Architecture
------------
1. **Decision** (`decision.py`) — ordered precedence chain mapping
   (exercise, profile, context) to allow / block / adapt.
2. **Adaptation** (`adaptation.py`) — pure pattern transforms used by
   ``adapt`` decisions.
3. **Recommendation** (`recommendation.py`) — scans the calming category
   through the decision function.
4. **Duration** (`duration.py`) and **integration** (`integration.py`) —
   session length and cool-down, scaled by the same risk factors.

All of it is synchronous and free of I/O.
"""

from breath_guard.safety.decision import decide, evaluate_category, to_legacy_result
from breath_guard.safety.duration import recommend_duration
from breath_guard.safety.engine import SafetyEngine, create_safety_engine
from breath_guard.safety.integration import configure_integration
from breath_guard.safety.models import (
    AdaptationType,
    AdaptDecision,
    AllowDecision,
    BlockDecision,
    BlockReason,
    CategoryEntry,
    DisplayStatus,
    DurationRecommendation,
    IntegrationConfig,
    Recommendation,
    SafetyCheckResult,
    SafetyDecision,
)
from breath_guard.safety.recommendation import recommend

__all__ = [
    "AdaptationType",
    "AdaptDecision",
    "AllowDecision",
    "BlockDecision",
    "BlockReason",
    "CategoryEntry",
    "DisplayStatus",
    "DurationRecommendation",
    "IntegrationConfig",
    "Recommendation",
    "SafetyCheckResult",
    "SafetyDecision",
    "SafetyEngine",
    "configure_integration",
    "create_safety_engine",
    "decide",
    "evaluate_category",
    "recommend",
    "recommend_duration",
    "to_legacy_result",
]
