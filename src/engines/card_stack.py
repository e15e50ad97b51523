"""
Card stack layout and drag physics.

Pure functions over immutable values: the gesture engine owns the state and
asks this module how the stack should look.
"""

from dataclasses import dataclass
from typing import List, Optional, Sequence

from binder.models import Candidate, Direction
from config.constants import STACK_STYLE, StackStyle


@dataclass(frozen=True)
class CardTransform:
    """Translation in px and rotation in degrees applied to the front card."""
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0

    @classmethod
    def for_drag(cls, dx: float, dy: float, style: StackStyle = STACK_STYLE) -> "CardTransform":
        rotation = max(-style.MAX_ROTATION_DEG, min(style.MAX_ROTATION_DEG, dx * style.ROTATION_PER_PX))
        return cls(x=dx, y=dy, rotation=rotation)

    @classmethod
    def off_screen(
        cls, direction: Direction, dy: float = 0.0, style: StackStyle = STACK_STYLE
    ) -> "CardTransform":
        sign = 1.0 if direction is Direction.POSITIVE else -1.0
        return cls(
            x=sign * style.EXIT_DISTANCE_PX,
            y=dy,
            rotation=sign * style.MAX_ROTATION_DEG,
        )


IDENTITY = CardTransform()


@dataclass(frozen=True)
class CardView:
    """One rendered card. Depth 0 is the front of the stack."""
    candidate: Candidate
    depth: int
    scale: float
    opacity: float
    offset_y: float
    interactive: bool
    transform: CardTransform = IDENTITY


@dataclass
class DragTracker:
    """Pointer positions of one drag, from pointer-down to release."""
    start_x: float
    start_y: float
    x: float = 0.0
    y: float = 0.0

    def __post_init__(self) -> None:
        self.x = self.start_x
        self.y = self.start_y

    def move(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    @property
    def dx(self) -> float:
        return self.x - self.start_x

    @property
    def dy(self) -> float:
        return self.y - self.start_y


def resolve_release(dx: float, threshold: float) -> Optional[Direction]:
    """
    Direction committed by releasing a drag at horizontal displacement ``dx``.

    Returns None below the threshold (the card snaps back).
    """
    if dx == 0 or abs(dx) < threshold:
        return None
    return Direction.POSITIVE if dx > 0 else Direction.NEGATIVE


def layout_stack(
    cards: Sequence[Candidate],
    front_transform: CardTransform = IDENTITY,
    visible_depth: int = 3,
    style: StackStyle = STACK_STYLE,
) -> List[CardView]:
    """
    Lay out the top of the stack, front card first.

    Cards below the front are shrunk, faded and pushed down, and never
    accept input.
    """
    views = []
    for depth, candidate in enumerate(cards[:visible_depth]):
        views.append(CardView(
            candidate=candidate,
            depth=depth,
            scale=round(1.0 - style.SCALE_STEP * depth, 4),
            opacity=round(max(0.0, 1.0 - style.OPACITY_STEP * depth), 4),
            offset_y=style.OFFSET_STEP_PX * depth,
            interactive=depth == 0,
            transform=front_transform if depth == 0 else IDENTITY,
        ))
    return views
