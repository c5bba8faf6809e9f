"""
Workout Templates: the read-only library the session resolver queries.

Templates are keyed by workout category, training phase and difficulty
level, and carry a native perceived-effort (1-10). Phases, pace zones and
race distances are plain string keys ("base", "tempo", "10km"), so any
enum whose values match can be passed straight to a query.

Each template carries one of four internal structures:
    IntervalStructure    reps x work with recoveries, optionally in sets
    PyramidStructure     distance segments up and down
    ContinuousStructure  a single block at a fixed duration
    SegmentStructure     distance fractions per zone (long runs, easy runs)
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple, Union, Iterable


# Rough effort time per 100m for distance-only interval segments
SECONDS_PER_100M = 18


class WorkoutCategory(Enum):
    """Workout families in the template library."""
    VO2_SHORT = "vo2_short"           # Short intervals (< 400m), hills
    VO2_LONG = "vo2_long"             # 1-6 min intervals at 5k-10k pace
    THRESHOLD = "threshold"           # Lactate threshold blocks
    TEMPO = "tempo"                   # Sustained tempo running
    RACE_SPECIFIC = "race_specific"   # Goal-pace work for a target race
    LONG_RUN = "long_run"             # Weekly long run
    EASY = "easy"                     # Easy and recovery runs


def _key(value: Union[str, Enum, None]) -> Optional[str]:
    if value is None:
        return None
    return value.value if isinstance(value, Enum) else str(value)


@dataclass
class IntervalStructure:
    """reps x work_sec (or distance) with jog recoveries, optionally in sets."""
    reps: int
    work_sec: int
    recovery_sec: int = 60
    distance_m: Optional[int] = None
    sets: int = 1
    set_recovery_sec: int = 180

    @property
    def is_distance_based(self) -> bool:
        return False

    def main_duration_minutes(self) -> float:
        effort = self.sets * self.reps * self.work_sec
        intra = (self.reps - 1) * self.recovery_sec * self.sets
        inter = (self.sets - 1) * self.set_recovery_sec
        return (effort + intra + inter) / 60


@dataclass
class PyramidStructure:
    """Distance segments (m) with recovery proportional to effort time."""
    segments_m: List[int]
    recovery_ratio: float = 1.0

    @property
    def is_distance_based(self) -> bool:
        return False

    def main_duration_minutes(self) -> float:
        effort = sum(d / 100 * SECONDS_PER_100M for d in self.segments_m)
        return effort * (1 + self.recovery_ratio) / 60


@dataclass
class ContinuousStructure:
    """One continuous effort block."""
    duration_sec: int

    @property
    def is_distance_based(self) -> bool:
        return False

    def main_duration_minutes(self) -> float:
        return self.duration_sec / 60


@dataclass
class SegmentStructure:
    """
    Distance split into fractions run in given pace zones.

    Duration depends on the distance assigned later, so
    ``main_duration_minutes`` has nothing to report.
    """
    segments: List[Tuple[float, str]] = field(default_factory=lambda: [(1.0, "easy")])

    @property
    def is_distance_based(self) -> bool:
        return True

    def main_duration_minutes(self) -> Optional[float]:
        return None


Structure = Union[IntervalStructure, PyramidStructure, ContinuousStructure, SegmentStructure]


@dataclass
class WorkoutTemplate:
    """
    A workout blueprint from the library.

    Attributes:
        id: Stable identifier, used for anti-repetition
        category: Workout family
        phase: Phase key ("base", "build", "peak", "taper")
        level: Difficulty level within (category, phase), starting at 1
        effort: Native perceived effort (1-10)
        pace_zone: Zone key of the main effort
        target_race: Race distance key for race-specific templates
    """
    id: str
    name: str
    category: WorkoutCategory
    phase: str
    level: int
    effort: int
    structure: Structure
    description: str
    pace_zone: str = "easy"
    recovery_desc: str = ""
    notes: str = ""
    coach_tips: List[str] = field(default_factory=list)
    target_race: Optional[str] = None

    @property
    def is_distance_based(self) -> bool:
        return self.structure.is_distance_based

    def main_duration_minutes(self) -> Optional[float]:
        return self.structure.main_duration_minutes()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'category': self.category.value,
            'phase': self.phase,
            'level': self.level,
            'effort': self.effort,
            'pace_zone': self.pace_zone,
            'description': self.description,
            'target_race': self.target_race,
        }


class TemplateLibrary:
    """
    In-memory template lookup by (category, phase, effort, race).

    The library is read-only once built; queries never mutate it.
    """

    def __init__(self, templates: Iterable[WorkoutTemplate] = ()):
        self._by_key: Dict[Tuple[WorkoutCategory, str], List[WorkoutTemplate]] = {}
        self._ids = set()
        for template in templates:
            self._add(template)

    def _add(self, template: WorkoutTemplate):
        if template.id in self._ids:
            raise ValueError(f"Duplicate template id: {template.id}")
        self._ids.add(template.id)
        bucket = self._by_key.setdefault((template.category, template.phase), [])
        bucket.append(template)
        bucket.sort(key=lambda t: (t.level, t.id))

    def __len__(self) -> int:
        return len(self._ids)

    def __contains__(self, template_id: str) -> bool:
        return template_id in self._ids

    def for_category(
        self,
        category: WorkoutCategory,
        phase: Union[str, Enum]
    ) -> List[WorkoutTemplate]:
        """All templates for a category and phase, ordered by level."""
        return list(self._by_key.get((category, _key(phase)), []))

    def max_level(self, category: WorkoutCategory, phase: Union[str, Enum]) -> int:
        templates = self._by_key.get((category, _key(phase)), [])
        return max((t.level for t in templates), default=0)

    def query(
        self,
        category: WorkoutCategory,
        phase: Union[str, Enum],
        effort: Optional[int] = None,
        tolerance: int = 1,
        max_effort: Optional[int] = None,
        exclude_ids: Iterable[str] = (),
        target_race: Union[str, Enum, None] = None
    ) -> List[WorkoutTemplate]:
        """
        Templates matching a category and phase.

        Args:
            category: Workout family
            phase: Phase key or enum
            effort: Target effort; keeps templates within ``tolerance``
            tolerance: Allowed effort difference
            max_effort: Hard effort ceiling
            exclude_ids: Template ids to leave out
            target_race: Prefer templates for this race, then generic ones

        Returns:
            Matching templates ordered by level (possibly empty)
        """
        excluded = set(exclude_ids)
        candidates = [
            t for t in self._by_key.get((category, _key(phase)), [])
            if t.id not in excluded
        ]

        race = _key(target_race)
        if race is not None:
            for_race = [t for t in candidates if t.target_race == race]
            generic = [t for t in candidates if t.target_race is None]
            candidates = for_race or generic or candidates

        if max_effort is not None:
            candidates = [t for t in candidates if t.effort <= max_effort]
        if effort is not None:
            candidates = [t for t in candidates if abs(t.effort - effort) <= tolerance]

        return candidates
