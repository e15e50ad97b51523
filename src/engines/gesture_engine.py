"""
Gesture Interaction Engine for the Binder swipe deck.

Turns pointer drags and button presses into committed decisions, one card at
a time.

State machine (per front card):

    IDLE --pointer_down--> DRAGGING --pointer_up (|dx| < threshold)--> IDLE
                               |
                               +--pointer_up (|dx| >= threshold)--> RESOLVING
    IDLE --swipe(direction)-------------------------------------> RESOLVING
    RESOLVING --exit animation done--> COMMITTED --> IDLE

Once RESOLVING, the commit is certain: the decision is sent fire-and-forget,
the card leaves the pending queue and is never put back, even if the write
later fails. When the queue runs dry a new deck is fetched after a short
delay, once every queued decision write has finished. Cards already decided
in this session are dropped from any deck that still contains them.

Statistics that could not be fetched are unknown (``stats_for`` returns
None), never zero; ``retry_stats`` fetches them again for the pending cards.

Everything runs on one asyncio event loop. Blocking backend calls are
off-loaded with ``asyncio.to_thread`` and their results are applied back on
the loop, so no two state transitions ever interleave.
"""

import asyncio
from collections import deque
from dataclasses import dataclass
from enum import Enum
from typing import Coroutine, Deque, Dict, List, Optional, Protocol, Set, Tuple

from binder.models import (
    Candidate,
    CandidateStats,
    Decision,
    Direction,
    StatsSnapshot,
    normalize_category,
)
from config.constants import ALL_CATEGORIES, STACK_STYLE, StackStyle
from config.settings import Settings
from core.logging import LoggerMixin
from engines.card_stack import (
    IDENTITY,
    CardTransform,
    CardView,
    DragTracker,
    layout_stack,
    resolve_release,
)


class GestureState(str, Enum):
    IDLE = "idle"
    DRAGGING = "dragging"
    RESOLVING = "resolving"
    COMMITTED = "committed"


class DeckPhase(str, Enum):
    """What the deck area shows."""
    LOADING = "loading"
    READY = "ready"
    EMPTY = "empty"    # nothing left to swipe on; not an error
    ERROR = "error"    # last fetch failed; previous cards stay, retry() available


class SwipeAction(str, Enum):
    """Action buttons under the stack."""
    PASS = "left"
    LIKE = "right"
    DETAILS = "up"


class DeckBackend(Protocol):
    """What the engine needs from the Binder API (see BinderApiClient)."""

    def compose_deck(self, category: Optional[str] = None) -> List[Candidate]: ...

    def aggregate_stats(self, candidate_ids: List[str]) -> StatsSnapshot: ...

    def record_decision(self, candidate_id: str, direction: Direction) -> Decision: ...


@dataclass
class GestureConfig:
    """Tunables of the swipe interaction."""
    threshold_px: float = 100.0
    exit_animation_seconds: float = 0.3
    replenish_delay_seconds: float = 0.5
    visible_depth: int = 3

    @classmethod
    def from_settings(cls, settings: Settings) -> "GestureConfig":
        return cls(
            threshold_px=settings.swipe_threshold_px,
            exit_animation_seconds=settings.exit_animation_seconds,
            replenish_delay_seconds=settings.replenish_delay_seconds,
            visible_depth=settings.visible_stack_depth,
        )


class GestureEngine(LoggerMixin):
    """
    Client-side swipe deck.

    Owns the last composed deck, the ordered queue of candidate ids not yet
    swiped, the statistics shown on the cards, and the gesture state of the
    front card. Only the front card is interactive, so decisions are
    committed strictly in the order the actor resolves cards.
    """

    def __init__(
        self,
        backend: DeckBackend,
        category: str = ALL_CATEGORIES,
        config: Optional[GestureConfig] = None,
        style: StackStyle = STACK_STYLE,
    ) -> None:
        self._backend = backend
        self._config = config or GestureConfig()
        self._style = style

        self.category = normalize_category(category)
        self.state = GestureState.IDLE
        self.phase = DeckPhase.LOADING
        self.deck: List[Candidate] = []
        self.stats: StatsSnapshot = {}
        self.last_error: Optional[str] = None
        self.stats_error: Optional[str] = None
        self.last_direction: Optional[Direction] = None
        self.detail_candidate: Optional[Candidate] = None
        # (candidate_id, direction) in commit order
        self.history: List[Tuple[str, Direction]] = []

        self._queue: Deque[str] = deque()
        self._by_id: Dict[str, Candidate] = {}
        self._drag: Optional[DragTracker] = None
        self._transform: CardTransform = IDENTITY
        self._incoming: Optional[Tuple[List[Candidate], StatsSnapshot]] = None
        self._generation = 0
        self._replenish_pending = False
        self._decided: Set[str] = set()
        self._tasks: Set[asyncio.Task] = set()
        self._sends: Set[asyncio.Task] = set()
        self._send_lock = asyncio.Lock()

    # =========================================================================
    # Queries
    # =========================================================================

    @property
    def front(self) -> Optional[Candidate]:
        if not self._queue:
            return None
        return self._by_id[self._queue[0]]

    @property
    def pending_ids(self) -> List[str]:
        return list(self._queue)

    @property
    def is_exhausted(self) -> bool:
        """True once every card of the last composed deck has been swiped."""
        return bool(self.deck) and not self._queue

    @property
    def transform(self) -> CardTransform:
        return self._transform

    def stats_for(self, candidate_id: str) -> Optional[CandidateStats]:
        """Counts for a card, or None while they are unknown (stats fetch failed)."""
        return self.stats.get(candidate_id)

    def render_stack(self) -> List[CardView]:
        cards = [self._by_id[cid] for cid in self._queue]
        return layout_stack(cards, self._transform, self._config.visible_depth, self._style)

    # =========================================================================
    # Deck loading
    # =========================================================================

    async def load_deck(self) -> bool:
        """
        Compose a fresh deck and fetch statistics for it.

        On failure the previous deck and statistics stay in place and the
        phase becomes ERROR. A deck that arrives mid-gesture is held until
        the gesture finishes. Returns True when a new deck was accepted.
        """
        self._generation += 1
        generation = self._generation
        if not self.deck or self.is_exhausted:
            self.phase = DeckPhase.LOADING

        try:
            deck = await asyncio.to_thread(self._backend.compose_deck, self.category)
        except Exception as e:
            if generation != self._generation:
                return False
            self.phase = DeckPhase.ERROR
            self.last_error = str(e)
            self.logger.warning("Deck fetch failed", category=self.category, error=str(e))
            return False

        stats: StatsSnapshot = {}
        self.stats_error = None
        if deck:
            try:
                stats = await asyncio.to_thread(
                    self._backend.aggregate_stats, [c.id for c in deck]
                )
            except Exception as e:
                self.stats_error = str(e)
                self.logger.warning("Stats fetch failed", candidates=len(deck), error=str(e))

        if generation != self._generation:
            # a newer load_deck superseded this one
            return False

        self.last_error = None
        if self.state in (GestureState.DRAGGING, GestureState.RESOLVING):
            self._incoming = (deck, stats)
        else:
            self._apply_deck(deck, stats)
        return True

    async def retry(self) -> bool:
        return await self.load_deck()

    async def select_category(self, category: Optional[str]) -> bool:
        self.category = normalize_category(category)
        return await self.load_deck()

    async def retry_stats(self) -> bool:
        """Fetch statistics again for the cards still pending. The deck is left alone."""
        ids = self.pending_ids
        if not ids:
            self.stats_error = None
            return True
        try:
            stats = await asyncio.to_thread(self._backend.aggregate_stats, ids)
        except Exception as e:
            self.stats_error = str(e)
            self.logger.warning("Stats retry failed", candidates=len(ids), error=str(e))
            return False
        self.stats.update(stats)
        self.stats_error = None
        return True

    def _apply_deck(self, deck: List[Candidate], stats: StatsSnapshot) -> None:
        # the server may not have seen the latest writes yet
        stale = [c.id for c in deck if c.id in self._decided]
        if stale:
            self.logger.debug("Dropping already decided cards", candidate_ids=stale)
            deck = [c for c in deck if c.id not in self._decided]

        self.deck = list(deck)
        self._by_id = {c.id: c for c in deck}
        self._queue = deque(c.id for c in deck)
        # failed stats keep the last known counts on screen
        self.stats.update(stats)
        self._transform = IDENTITY
        self.detail_candidate = None
        self.phase = DeckPhase.READY if deck else DeckPhase.EMPTY
        self.logger.info("Deck ready", category=self.category, size=len(deck))

    # =========================================================================
    # Pointer input
    # =========================================================================

    def pointer_down(self, candidate_id: str, x: float, y: float) -> bool:
        """Start dragging; only the front card accepts input, and only when idle."""
        front = self.front
        if self.state is not GestureState.IDLE or front is None or front.id != candidate_id:
            return False
        self._drag = DragTracker(start_x=x, start_y=y)
        self.state = GestureState.DRAGGING
        return True

    def pointer_move(self, x: float, y: float) -> CardTransform:
        """Cosmetic feedback only; nothing is committed until release."""
        if self.state is GestureState.DRAGGING and self._drag is not None:
            self._drag.move(x, y)
            self._transform = CardTransform.for_drag(self._drag.dx, self._drag.dy, self._style)
        return self._transform

    def pointer_up(self, x: float, y: float) -> Optional[Direction]:
        """
        Release the drag.

        Returns the resolved direction, or None when the card snapped back.
        """
        if self.state is not GestureState.DRAGGING or self._drag is None:
            return None

        drag = self._drag
        drag.move(x, y)
        self._drag = None

        direction = resolve_release(drag.dx, self._config.threshold_px)
        if direction is None:
            self._transform = IDENTITY
            self._enter_idle()
            return None

        self._resolve(direction, dy=drag.dy)
        return direction

    # =========================================================================
    # Buttons
    # =========================================================================

    def swipe(self, direction: Direction) -> bool:
        """Resolve the front card without a drag, as the action buttons do."""
        if self.state is not GestureState.IDLE or self.front is None:
            return False
        self._resolve(Direction.parse(direction))
        return True

    def show_details(self) -> Optional[Candidate]:
        """Open the front card's details. The card stays in place."""
        if self.state is not GestureState.IDLE or self.front is None:
            return None
        self.detail_candidate = self.front
        return self.detail_candidate

    def close_details(self) -> None:
        self.detail_candidate = None

    def press(self, action: SwipeAction) -> bool:
        action = SwipeAction(action)
        if action is SwipeAction.DETAILS:
            return self.show_details() is not None
        direction = Direction.POSITIVE if action is SwipeAction.LIKE else Direction.NEGATIVE
        return self.swipe(direction)

    # =========================================================================
    # Resolve / commit
    # =========================================================================

    def _resolve(self, direction: Direction, dy: float = 0.0) -> None:
        card = self.front
        self.state = GestureState.RESOLVING
        self.last_direction = direction
        self.detail_candidate = None
        self._transform = CardTransform.off_screen(direction, dy, self._style)
        self._spawn(self._finish_resolve(card, direction))

    async def _finish_resolve(self, card: Candidate, direction: Direction) -> None:
        if self._config.exit_animation_seconds > 0:
            await asyncio.sleep(self._config.exit_animation_seconds)
        self._commit(card, direction)

    def _commit(self, card: Candidate, direction: Direction) -> None:
        self.state = GestureState.COMMITTED
        send = self._spawn(self._send_decision(card.id, direction))
        self._sends.add(send)
        send.add_done_callback(self._sends.discard)

        if self._queue and self._queue[0] == card.id:
            self._queue.popleft()
        elif card.id in self._queue:
            self._queue.remove(card.id)

        self.history.append((card.id, direction))
        self._decided.add(card.id)
        known = self.stats.get(card.id)
        if known is not None:
            known.record(direction)
        self._transform = IDENTITY
        self._enter_idle()

        if self.is_exhausted and not self._replenish_pending:
            self._replenish_pending = True
            self._spawn(self._replenish())

    async def _send_decision(self, candidate_id: str, direction: Direction) -> None:
        # one write at a time, in commit order
        async with self._send_lock:
            try:
                await asyncio.to_thread(self._backend.record_decision, candidate_id, direction)
            except Exception as e:
                self.logger.warning(
                    "Decision write failed; card stays dismissed",
                    candidate_id=candidate_id,
                    direction=direction.value,
                    error=str(e),
                )

    async def _replenish(self) -> None:
        try:
            if self._config.replenish_delay_seconds > 0:
                await asyncio.sleep(self._config.replenish_delay_seconds)
            # compose only once the server has every decision made so far
            if self._sends:
                await asyncio.gather(*list(self._sends), return_exceptions=True)
            await self.load_deck()
        finally:
            self._replenish_pending = False

    def _enter_idle(self) -> None:
        self.state = GestureState.IDLE
        if self._incoming is not None:
            deck, stats = self._incoming
            self._incoming = None
            self._apply_deck(deck, stats)

    # =========================================================================
    # Task bookkeeping
    # =========================================================================

    def _spawn(self, coro: Coroutine) -> asyncio.Task:
        task = asyncio.get_running_loop().create_task(coro)
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def wait_until_settled(self) -> None:
        """Wait for animations, writes and replenishment scheduled so far (and what they schedule)."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def close(self) -> None:
        for task in list(self._tasks):
            task.cancel()
        await asyncio.gather(*list(self._tasks), return_exceptions=True)
