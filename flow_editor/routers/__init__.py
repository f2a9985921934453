"""
Router Forms and Exit Resolution.
"""

from .exits import CaseProps, ResolvedExits, resolve_exits, resolve_named_exits
from .expression import ExpressionRouterForm
from .random import RandomRouterForm
from .response import ResponseRouterForm
from .webhook import Header, WebhookRouterForm

__all__ = [
    "CaseProps",
    "ResolvedExits",
    "resolve_exits",
    "resolve_named_exits",
    "ExpressionRouterForm",
    "RandomRouterForm",
    "ResponseRouterForm",
    "Header",
    "WebhookRouterForm",
]
