"""
Client-side engines for the Binder swipe deck.

- GestureEngine: drag/button state machine over the current deck
- BinderApiClient: HTTP backend the engine talks to
- card_stack: stack layout and drag physics
"""
from .api_client import BinderApiClient, BinderApiError
from .card_stack import CardTransform, CardView, layout_stack, resolve_release
from .gesture_engine import (
    DeckPhase,
    GestureConfig,
    GestureEngine,
    GestureState,
    SwipeAction,
)

__all__ = [
    # Engine
    'GestureEngine', 'GestureConfig', 'GestureState', 'DeckPhase', 'SwipeAction',
    # Backend
    'BinderApiClient', 'BinderApiError',
    # Stack
    'CardTransform', 'CardView', 'layout_stack', 'resolve_release',
]
