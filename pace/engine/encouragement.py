"""Encouragement messages shown when a block is completed.

Kept apart from the scheduler: the only randomness in PACE lives here, and
the random source is always passed in so callers (and tests) can seed it.
"""

import random
from enum import Enum
from types import MappingProxyType
from typing import Optional, Sequence, Tuple, Union

from pydantic import BaseModel, Field

from pace.models.task import BlockType, Intensity


class MessageKind(str, Enum):
    """Tone of an encouragement message."""
    CELEBRATION = "celebration"
    MOTIVATION = "motivation"
    ACKNOWLEDGMENT = "acknowledgment"
    HUMOR = "humor"


class EncouragementMessage(BaseModel):
    """A congratulatory message."""

    text: str = Field(..., description="Message text")
    emoji: str = Field(..., description="Accompanying emoji")
    kind: MessageKind = Field(..., description="Tone of the message")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
        frozen = True


def _pool(*entries: Tuple[str, str, MessageKind]) -> Tuple[EncouragementMessage, ...]:
    return tuple(EncouragementMessage(text=text, emoji=emoji, kind=kind) for text, emoji, kind in entries)


C, M, A, H = MessageKind.CELEBRATION, MessageKind.MOTIVATION, MessageKind.ACKNOWLEDGMENT, MessageKind.HUMOR

WORK_MESSAGES = _pool(
    ("Deep work done! Your brain is a powerhouse.", "🧠", C),
    ("Focus block crushed. That's how champions work.", "💪", M),
    ("Another task conquered. You're unstoppable today.", "🔥", C),
    ("Excellent focus session. The results will show.", "✨", A),
    ("Work complete! Your future self just sent a thank you.", "🙏", H),
    ("Boom! One less thing standing between you and success.", "💥", C),
    ("Productive energy is flowing. Keep riding the wave!", "🌊", M),
    ("That task never stood a chance against you.", "⚡", H),
    ("Focus mode: activated and dominated.", "🎯", C),
    ("You just made progress most people only dream about.", "🚀", M),
)

BREAK_MESSAGES = _pool(
    ("Recharged and ready. Let's go again!", "🔋", M),
    ("Rest is part of the process. Smart move.", "🧘", A),
    ("Break well spent. Your brain thanks you.", "☕", A),
    ("Refreshed! Now back to being awesome.", "✨", H),
    ("Strategic pause complete. Energy restored.", "⚡", A),
)

MOVEMENT_MESSAGES = _pool(
    ("Body moving, mind grooving! Great job.", "🏃", C),
    ("Exercise complete! Endorphins are your friend now.", "💪", C),
    ("Movement done. You just invested in yourself.", "🌟", M),
    ("Physical activity crushed. Mind and body aligned!", "🧠", C),
    ("Your body just thanked you in endorphins.", "🎉", H),
    ("Movement matters, and you showed up. Respect.", "👏", A),
)

ESSENTIAL_MESSAGES = _pool(
    ("Life admin handled. One less thing to worry about.", "✅", A),
    ("Essential task done! Adulting level: expert.", "🎓", H),
    ("Responsibility completed. You're on top of things.", "📋", A),
    ("That needed doing, and you did it. Simple excellence.", "💫", A),
    ("Checked off! Your organized self is showing.", "📝", A),
)

PHONE_MESSAGES = _pool(
    ("Connected and present. Social battery charged.", "📱", A),
    ("Good conversations fuel the soul.", "💬", A),
    ("Human connection time well spent.", "🤝", A),
    ("Social time done! Back to the mission.", "🎯", M),
)

LEISURE_MESSAGES = _pool(
    ("You deserve this downtime. Enjoy it guilt-free.", "🌴", A),
    ("Rest is productive too. Balance achieved.", "⚖️", A),
    ("Free time well utilized. Refreshed and ready.", "🎮", A),
    ("Leisure complete. You've earned every minute.", "🏆", C),
)

MEAL_MESSAGES = _pool(
    ("Fueled up! Your body has the energy it needs.", "🍽️", A),
    ("Good food, good mood. Back to greatness.", "😋", H),
    ("Nutrition check: complete. Energy levels: rising.", "📈", A),
)

FIRST_MESSAGES = _pool(
    ("First one down! The momentum starts now.", "🚀", M),
    ("And so it begins. You're officially crushing it.", "💥", C),
    ("Task #1 complete. This is going to be a good day.", "🌅", M),
)

HALFWAY_MESSAGES = _pool(
    ("Halfway there! You're in the zone now.", "🎯", C),
    ("50% done. The second half is all downhill.", "⛷️", M),
    ("Half your day conquered. Keep this energy going!", "⚡", C),
)

ALMOST_DONE_MESSAGES = _pool(
    ("Almost there! The finish line is in sight.", "🏁", M),
    ("Just a little more. You've got this!", "💪", M),
    ("So close! Push through to the end.", "🔥", M),
)

COMPLETE_MESSAGES = _pool(
    ("ALL DONE! You absolutely crushed today.", "🏆", C),
    ("100% complete. You're officially a legend.", "👑", C),
    ("Every single task done. Take a bow!", "🎉", C),
    ("Day complete! Rest well, you've earned it.", "🌙", A),
)

HIGH_INTENSITY_MESSAGES = _pool(
    ("High intensity mode paying off. Warrior status.", "⚔️", M),
    ("Pushing hard today. The results will be worth it.", "💎", M),
    ("Maximum effort, maximum results. Keep going!", "🔥", C),
)

MESSAGES_BY_TYPE = MappingProxyType({
    BlockType.WORK: WORK_MESSAGES,
    BlockType.BREAK: BREAK_MESSAGES,
    BlockType.MOVEMENT: MOVEMENT_MESSAGES,
    BlockType.ESSENTIAL: ESSENTIAL_MESSAGES,
    BlockType.PHONE: PHONE_MESSAGES,
    BlockType.SOCIAL: PHONE_MESSAGES,
    BlockType.LEISURE: LEISURE_MESSAGES,
    BlockType.MEAL: MEAL_MESSAGES,
})

HIGH_INTENSITY_BONUS_CHANCE = 0.2
STREAK_MINIMUM = 3


def _choice(rng: random.Random, pool: Sequence[EncouragementMessage]) -> EncouragementMessage:
    return pool[rng.randrange(len(pool))]


def get_encouragement_message(
    block_type: Union[BlockType, str],
    completed_count: int,
    total_count: int,
    intensity: Union[Intensity, str],
    rng: random.Random,
) -> EncouragementMessage:
    """Pick a message for a just-completed block.

    Milestones win over everything else (first completion, all done, almost
    done, halfway). At high intensity there is a bonus pool; otherwise the
    message matches the block type.
    """
    progress = completed_count / total_count if total_count > 0 else 0.0

    if completed_count == 1:
        return _choice(rng, FIRST_MESSAGES)
    if progress == 1:
        return _choice(rng, COMPLETE_MESSAGES)
    if 0.9 <= progress < 1:
        return _choice(rng, ALMOST_DONE_MESSAGES)
    if 0.45 <= progress <= 0.55:
        return _choice(rng, HALFWAY_MESSAGES)

    if Intensity(intensity) == Intensity.HIGH and rng.random() < HIGH_INTENSITY_BONUS_CHANCE:
        return _choice(rng, HIGH_INTENSITY_MESSAGES)

    pool = MESSAGES_BY_TYPE.get(BlockType(block_type), ESSENTIAL_MESSAGES)
    return _choice(rng, pool)


def get_streak_message(streak: int, rng: random.Random) -> Optional[EncouragementMessage]:
    """Message for consecutive completions, or None for short streaks."""
    if streak < STREAK_MINIMUM:
        return None
    pool = _pool(
        (f"{streak} in a row! You're on fire!", "🔥", C),
        (f"{streak}-task streak! Unstoppable energy.", "⚡", C),
        (f"Streak of {streak}! Who's going to stop you?", "💪", M),
    )
    return _choice(rng, pool)
