"""
Slot Resolution: choosing a concrete workout for each slot.

Each slot goes through an ordered list of attempts sharing one result type
(``Optional[WorkoutTemplate]``):

    1. effort match   templates within one effort point of the target and
                      under the slot ceiling, not used recently, closest
                      to the effort-derived level
    2. level match    any template under the ceiling, closest to the level
                      implied by progress through the phase, unused first
    3. generic        a synthesised session (never fails)

Anti-repetition memory (last template id per category) is passed in and
returned explicitly, so separate plan generations never share state.
"""

from dataclasses import dataclass, field
import math
from typing import Optional, Dict, List, Set, Tuple, Callable

from loguru import logger

from library.templates import TemplateLibrary, WorkoutCategory, WorkoutTemplate

from .config import TrainingPhase
from .fitness import PaceZones
from .sessions import Session, build_generic_session, build_session
from .slots import SessionSlot, progress_ratio


@dataclass(frozen=True)
class RepetitionMemory:
    """Last template id used per workout category."""
    last_used: Dict[WorkoutCategory, str] = field(default_factory=dict)

    def excluded_ids(self) -> Set[str]:
        return set(self.last_used.values())

    def remember(self, category: WorkoutCategory, template_id: str) -> 'RepetitionMemory':
        updated = dict(self.last_used)
        updated[category] = template_id
        return RepetitionMemory(last_used=updated)


def effort_target_level(templates: List[WorkoutTemplate], target_effort: int) -> float:
    """
    Level implied by a target effort.

    Maps the target linearly from the lowest to the highest effort onto
    levels 1..max level.
    """
    if not templates:
        return 1.0
    efforts = [t.effort for t in templates]
    max_level = max(t.level for t in templates)
    low, high = min(efforts), max(efforts)
    if high == low or max_level <= 1:
        return 1.0
    position = (min(max(target_effort, low), high) - low) / (high - low)
    return 1 + position * (max_level - 1)


def ratio_target_level(max_level: int, ratio: float) -> int:
    """Level implied by progress through the phase."""
    if max_level <= 1:
        return 1
    return 1 + math.floor(ratio * (max_level - 1) + 0.5)


def _try_effort_match(
    slot: SessionSlot,
    phase: TrainingPhase,
    ratio: float,
    library: TemplateLibrary,
    used_ids: Set[str]
) -> Optional[WorkoutTemplate]:
    candidates = library.query(
        slot.category,
        phase,
        effort=slot.target_effort,
        tolerance=1,
        max_effort=slot.max_effort,
        exclude_ids=used_ids,
        target_race=slot.target_race,
    )
    if not candidates:
        return None

    target_level = effort_target_level(library.for_category(slot.category, phase), slot.target_effort)
    return min(
        candidates,
        key=lambda t: (abs(t.level - target_level), abs(t.effort - slot.target_effort), t.id),
    )


def _try_level_match(
    slot: SessionSlot,
    phase: TrainingPhase,
    ratio: float,
    library: TemplateLibrary,
    used_ids: Set[str]
) -> Optional[WorkoutTemplate]:
    candidates = library.query(
        slot.category,
        phase,
        max_effort=slot.max_effort,
        target_race=slot.target_race,
    )
    if not candidates:
        return None

    target_level = ratio_target_level(library.max_level(slot.category, phase), ratio)
    return min(
        candidates,
        key=lambda t: (t.id in used_ids, abs(t.level - target_level), t.id),
    )


ATTEMPTS: List[Tuple[str, Callable[..., Optional[WorkoutTemplate]]]] = [
    ("effort", _try_effort_match),
    ("level", _try_level_match),
]


def resolve_slot(
    slot: SessionSlot,
    phase: TrainingPhase,
    week_in_phase: int,
    weeks_in_phase: int,
    zones: Optional[PaceZones],
    library: TemplateLibrary,
    used_ids: Set[str] = frozenset()
) -> Session:
    """
    Resolve one slot into a Session (distance still 0).

    Args:
        slot: Slot to fill
        phase: Training phase of the week
        week_in_phase: 1-based week within the phase
        weeks_in_phase: Number of weeks in the phase
        zones: Athlete pace zones
        library: Template library
        used_ids: Template ids to avoid

    Returns:
        Session built from the chosen template, or a generic session
    """
    ratio = progress_ratio(week_in_phase, weeks_in_phase)

    for name, attempt in ATTEMPTS:
        template = attempt(slot, phase, ratio, library, used_ids)
        if template is not None:
            if name != "effort":
                logger.debug(
                    "Template fallback",
                    method=name,
                    category=slot.category.value,
                    phase=phase.value,
                    template=template.id,
                )
            return build_session(template, slot, zones, phase)

    logger.debug(
        "No template available, using generic session",
        category=slot.category.value,
        phase=phase.value,
    )
    return build_generic_session(slot, zones, phase)


def resolve_week(
    slots: List[SessionSlot],
    phase: TrainingPhase,
    week_in_phase: int,
    weeks_in_phase: int,
    zones: Optional[PaceZones],
    library: TemplateLibrary,
    memory: Optional[RepetitionMemory] = None
) -> Tuple[List[Session], RepetitionMemory]:
    """
    Resolve every slot of a week.

    Templates chosen earlier in the week and the last template of each
    category from previous weeks are avoided.

    Returns:
        Tuple of (sessions in slot order, updated memory)
    """
    memory = memory if memory is not None else RepetitionMemory()
    used_ids = memory.excluded_ids()
    sessions = []

    for slot in slots:
        session = resolve_slot(
            slot, phase, week_in_phase, weeks_in_phase, zones, library, used_ids
        )
        if session.template_id is not None:
            used_ids.add(session.template_id)
            memory = memory.remember(slot.category, session.template_id)
        sessions.append(session)

    return sessions, memory
