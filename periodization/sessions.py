"""
Sessions: concrete, dated workouts.

A Session is what the athlete actually runs: type, title, distance,
duration, warmup / main / cooldown blocks, notes and coach tips. Rest days
are Sessions too (``Session.rest``), so a week is always seven entries.

Sessions are built from a library template (``build_session``) or
synthesised when the library has nothing suitable
(``build_generic_session``). Distance is filled in later by the volume
distributor through ``apply_distance``, which keeps distance-based
durations consistent.
"""

from dataclasses import dataclass, field, replace
from datetime import date
from enum import Enum
from typing import Optional, Dict, Any, List, Tuple

from library.templates import WorkoutCategory, WorkoutTemplate

from .config import TrainingPhase
from .fitness import (
    PaceZoneName,
    PaceZones,
    format_pace_range,
)
from .slots import SessionSlot, SlotRole


class SessionType(Enum):
    """Session type tags."""
    EASY = "easy"
    LONG_RUN = "long_run"
    THRESHOLD = "threshold"
    VO2MAX = "vo2max"
    TEMPO = "tempo"
    RECOVERY = "recovery"
    REST = "rest"


QUALITY_TYPES = {SessionType.THRESHOLD, SessionType.VO2MAX, SessionType.TEMPO}

CATEGORY_SESSION_TYPE: Dict[WorkoutCategory, SessionType] = {
    WorkoutCategory.VO2_SHORT: SessionType.VO2MAX,
    WorkoutCategory.VO2_LONG: SessionType.VO2MAX,
    WorkoutCategory.THRESHOLD: SessionType.THRESHOLD,
    WorkoutCategory.TEMPO: SessionType.TEMPO,
    WorkoutCategory.RACE_SPECIFIC: SessionType.THRESHOLD,
    WorkoutCategory.LONG_RUN: SessionType.LONG_RUN,
    WorkoutCategory.EASY: SessionType.EASY,
}

CATEGORY_ZONE: Dict[WorkoutCategory, PaceZoneName] = {
    WorkoutCategory.VO2_SHORT: PaceZoneName.VO2_SHORT,
    WorkoutCategory.VO2_LONG: PaceZoneName.VO2_LONG,
    WorkoutCategory.THRESHOLD: PaceZoneName.THRESHOLD_2,
    WorkoutCategory.TEMPO: PaceZoneName.TEMPO,
    WorkoutCategory.RACE_SPECIFIC: PaceZoneName.THRESHOLD_2,
    WorkoutCategory.LONG_RUN: PaceZoneName.EASY,
    WorkoutCategory.EASY: PaceZoneName.EASY,
}

# Used when no pace zones are available
DEFAULT_EASY_PACE = 360

# Generic main block for synthesised quality sessions
GENERIC_QUALITY_MINUTES = 20

ZONE_TIPS: Dict[PaceZoneName, List[str]] = {
    PaceZoneName.EASY: ["You should be able to talk in full sentences"],
    PaceZoneName.ACTIVE: ["Steady and relaxed, breathing still under control"],
    PaceZoneName.THRESHOLD_1: ["Comfortably hard: short sentences only"],
    PaceZoneName.TEMPO: ["Find a rhythm you could hold for an hour"],
    PaceZoneName.THRESHOLD_2: ["Uncomfortable but sustainable, breathe in three steps"],
    PaceZoneName.VO2_LONG: ["Hard but controlled, keep every rep at the same pace"],
    PaceZoneName.VO2_SHORT: ["Fast and relaxed, stop the set if form breaks down"],
}

PHASE_NOTES: Dict[TrainingPhase, str] = {
    TrainingPhase.BASE: "Aerobic foundation: keep it controlled.",
    TrainingPhase.BUILD: "Intensity is coming in: respect the recoveries.",
    TrainingPhase.PEAK: "Race-specific block: rehearse the goal pace.",
    TrainingPhase.TAPER: "Taper: freshness matters more than fitness now.",
}

PHASE_OBJECTIVES: Dict[TrainingPhase, str] = {
    TrainingPhase.BASE: "Endurance focus: build the aerobic foundation",
    TrainingPhase.BUILD: "Strength focus: introduce intensity",
    TrainingPhase.PEAK: "Goal-pace focus: prepare for the race",
    TrainingPhase.TAPER: "Freshness focus: absorb the work and recover",
}


@dataclass
class WorkoutBlock:
    """
    One block of a session.

    ``kind`` is "warmup", "main", "recovery" or "cooldown".
    """
    kind: str
    description: str
    duration_min: Optional[float] = None
    pace_zone: Optional[PaceZoneName] = None
    pace: str = ""
    reps: Optional[int] = None
    sets: Optional[int] = None
    distance_m: Optional[int] = None
    recovery_sec: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'kind': self.kind,
            'description': self.description,
            'duration_min': self.duration_min,
            'pace_zone': self.pace_zone.value if self.pace_zone else None,
            'pace': self.pace,
            'reps': self.reps,
            'sets': self.sets,
            'distance_m': self.distance_m,
            'recovery_sec': self.recovery_sec,
        }


# (max effort, warmup blocks as (minutes, zone, description), cooldown minutes)
WARMUP_TABLE: List[Tuple[int, List[Tuple[float, PaceZoneName, str]], float]] = [
    (3, [], 0),
    (5, [(10, PaceZoneName.EASY, "Progressive easy running")], 5),
    (7, [
        (10, PaceZoneName.EASY, "Easy running"),
        (3, PaceZoneName.EASY, "Running drills"),
        (2, PaceZoneName.ACTIVE, "2-3 progressive 20s accelerations"),
    ], 10),
    (10, [
        (12, PaceZoneName.EASY, "Easy running"),
        (3, PaceZoneName.EASY, "Running drills"),
        (3, PaceZoneName.ACTIVE, "3-4 progressive 80m strides"),
        (2, PaceZoneName.EASY, "Easy jog before the effort"),
    ], 10),
]


def warmup_blocks(effort: int, zones: Optional[PaceZones] = None) -> List[WorkoutBlock]:
    """Warmup for an effort: none up to 3, then 10 / 15 / 20 minutes."""
    for max_effort, blocks, _ in WARMUP_TABLE:
        if effort <= max_effort:
            return [
                WorkoutBlock(
                    kind="warmup",
                    description=description,
                    duration_min=minutes,
                    pace_zone=zone,
                    pace=_pace_text(zones, zone),
                )
                for minutes, zone, description in blocks
            ]
    return []


def cooldown_blocks(effort: int, zones: Optional[PaceZones] = None) -> List[WorkoutBlock]:
    """Cooldown for an effort: none up to 3, then 5 or 10 minutes."""
    for max_effort, _, minutes in WARMUP_TABLE:
        if effort <= max_effort:
            if minutes <= 0:
                return []
            return [WorkoutBlock(
                kind="cooldown",
                description="Easy jog back to calm",
                duration_min=minutes,
                pace_zone=PaceZoneName.EASY,
                pace=_pace_text(zones, PaceZoneName.EASY),
            )]
    return []


@dataclass
class Session:
    """
    A concrete workout, or a rest day when ``session_type`` is REST.

    Attributes:
        session_type: Type tag
        title: Display title
        effort: Perceived effort (1-10)
        distance_km: Target distance (0 until distributed)
        duration_min: Estimated total duration
        warmup / main / cooldown: Structured blocks
        pace_segments: (fraction, zone) split for distance-based sessions
        fixed_main_min: Main-block duration for structured sessions
        template_id: Source template, None when synthesised
    """
    session_type: SessionType
    title: str
    effort: int = 0
    distance_km: float = 0.0
    duration_min: float = 0.0
    warmup: List[WorkoutBlock] = field(default_factory=list)
    main: List[WorkoutBlock] = field(default_factory=list)
    cooldown: List[WorkoutBlock] = field(default_factory=list)
    notes: str = ""
    coach_tips: List[str] = field(default_factory=list)
    session_date: Optional[date] = None
    weekday: Optional[str] = None
    role: Optional[SlotRole] = None
    category: Optional[WorkoutCategory] = None
    variant: Optional[str] = None
    volume_share: float = 0.0
    main_zone: PaceZoneName = PaceZoneName.EASY
    pace_segments: List[Tuple[float, PaceZoneName]] = field(default_factory=list)
    fixed_main_min: Optional[float] = None
    template_id: Optional[str] = None
    main_description: str = ""

    @classmethod
    def rest(cls, session_date: Optional[date] = None, weekday: Optional[str] = None) -> 'Session':
        return cls(
            session_type=SessionType.REST,
            title="Rest",
            session_date=session_date,
            weekday=weekday,
        )

    @property
    def is_rest(self) -> bool:
        return self.session_type == SessionType.REST

    @property
    def is_quality(self) -> bool:
        return self.session_type in QUALITY_TYPES

    @property
    def is_long_run(self) -> bool:
        return self.session_type == SessionType.LONG_RUN

    @property
    def is_distance_based(self) -> bool:
        return bool(self.pace_segments) and self.fixed_main_min is None

    @property
    def distance_range(self) -> Optional[Tuple[int, int]]:
        """(low, high) whole kilometres for display."""
        if self.is_rest:
            return None
        low = max(1, int(round(self.distance_km)))
        return low, low + 1

    @property
    def duration_text(self) -> str:
        return format_duration(self.duration_min)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'type': self.session_type.value,
            'title': self.title,
            'effort': self.effort,
            'distance_km': self.distance_km,
            'distance_range': list(self.distance_range) if self.distance_range else None,
            'duration_min': round(self.duration_min),
            'duration': self.duration_text if not self.is_rest else "",
            'warmup': [b.to_dict() for b in self.warmup],
            'main': [b.to_dict() for b in self.main],
            'cooldown': [b.to_dict() for b in self.cooldown],
            'notes': self.notes,
            'coach_tips': list(self.coach_tips),
            'date': self.session_date.isoformat() if self.session_date else None,
            'weekday': self.weekday,
            'role': self.role.value if self.role else None,
            'template_id': self.template_id,
        }

    def to_steps(self, zones: Optional[PaceZones] = None) -> List[Dict[str, Any]]:
        """
        Flatten the session into ordered step rows for persistence.

        Each row carries its pace bounds in sec/km when zones are given.
        """
        steps = []
        for order, block in enumerate(self.warmup + self.main + self.cooldown):
            band = zones.get(block.pace_zone) if zones and block.pace_zone else None
            steps.append({
                'sort_order': order,
                'step_type': block.kind,
                'label': block.description,
                'duration_sec': int(round(block.duration_min * 60)) if block.duration_min else None,
                'reps': block.reps,
                'sets': block.sets,
                'distance_m': block.distance_m,
                'recovery_sec': block.recovery_sec,
                'pace_zone': block.pace_zone.value if block.pace_zone else None,
                'pace_min_sec_km': band.fast if band else None,
                'pace_max_sec_km': band.slow if band else None,
            })
        return steps


def format_duration(minutes: float) -> str:
    """Format minutes as "45min" or "1h15"."""
    total = int(round(minutes))
    if total >= 60:
        hours, rest = divmod(total, 60)
        return f"{hours}h{rest:02d}" if rest else f"{hours}h"
    return f"{total}min"


def session_type_for(slot: SessionSlot) -> SessionType:
    if slot.role == SlotRole.RECOVERY:
        return SessionType.RECOVERY
    return CATEGORY_SESSION_TYPE[slot.category]


def zone_mid_pace(zones: Optional[PaceZones], zone: PaceZoneName) -> float:
    if zones and zone in zones:
        return zones[zone].mid
    if zones and PaceZoneName.EASY in zones:
        return zones[PaceZoneName.EASY].mid
    return DEFAULT_EASY_PACE


def segment_pace(
    segments: List[Tuple[float, PaceZoneName]],
    zones: Optional[PaceZones]
) -> float:
    """Distance-weighted mid pace (sec/km) of a segment split."""
    total = sum(fraction for fraction, _ in segments)
    if total <= 0:
        return zone_mid_pace(zones, PaceZoneName.EASY)
    return sum(fraction * zone_mid_pace(zones, zone) for fraction, zone in segments) / total


def build_session(
    template: WorkoutTemplate,
    slot: SessionSlot,
    zones: Optional[PaceZones],
    phase: TrainingPhase
) -> Session:
    """Turn a library template into a Session with no distance yet."""
    main_zone = _zone(template.pace_zone, CATEGORY_ZONE[slot.category])
    effort = template.effort
    session = Session(
        session_type=session_type_for(slot),
        title=template.name,
        effort=effort,
        warmup=warmup_blocks(effort, zones),
        cooldown=cooldown_blocks(effort, zones),
        notes=template.notes or PHASE_NOTES[phase],
        coach_tips=list(template.coach_tips) or list(ZONE_TIPS[main_zone]),
        role=slot.role,
        category=slot.category,
        variant=slot.variant,
        volume_share=slot.volume_share,
        main_zone=main_zone,
        template_id=template.id,
        main_description=template.description,
    )

    structure = template.structure
    if template.is_distance_based:
        session.pace_segments = [
            (fraction, _zone(zone, PaceZoneName.EASY)) for fraction, zone in structure.segments
        ]
    else:
        session.fixed_main_min = template.main_duration_minutes()
        session.main = [WorkoutBlock(
            kind="main",
            description=template.description,
            duration_min=round(session.fixed_main_min, 1),
            pace_zone=main_zone,
            pace=_pace_text(zones, main_zone),
            reps=getattr(structure, 'reps', None),
            sets=getattr(structure, 'sets', None),
            distance_m=getattr(structure, 'distance_m', None),
            recovery_sec=getattr(structure, 'recovery_sec', None),
        )]
        if template.recovery_desc:
            session.main.append(WorkoutBlock(
                kind="recovery",
                description=f"Recovery: {template.recovery_desc}",
                pace_zone=PaceZoneName.EASY,
                pace=_pace_text(zones, PaceZoneName.EASY),
            ))

    refresh_duration(session, zones)
    return session


def build_generic_session(
    slot: SessionSlot,
    zones: Optional[PaceZones],
    phase: TrainingPhase
) -> Session:
    """
    Synthesise a minimal session for a slot the library cannot fill.

    Quality slots get a single 20-minute block at the category's zone,
    everything else a continuous easy run.
    """
    main_zone = CATEGORY_ZONE[slot.category]
    effort = min(slot.target_effort, slot.max_effort)
    session_type = session_type_for(slot)
    session = Session(
        session_type=session_type,
        title=_TITLES[session_type],
        effort=effort,
        warmup=warmup_blocks(effort, zones),
        cooldown=cooldown_blocks(effort, zones),
        notes=PHASE_NOTES[phase],
        coach_tips=list(ZONE_TIPS[main_zone]),
        role=slot.role,
        category=slot.category,
        variant=slot.variant,
        volume_share=slot.volume_share,
        main_zone=main_zone,
    )

    if slot.is_quality:
        session.fixed_main_min = GENERIC_QUALITY_MINUTES
        session.main_description = f"{GENERIC_QUALITY_MINUTES}min continuous"
        session.main = [WorkoutBlock(
            kind="main",
            description=session.main_description,
            duration_min=GENERIC_QUALITY_MINUTES,
            pace_zone=main_zone,
            pace=_pace_text(zones, main_zone),
        )]
    else:
        session.main_description = "Continuous easy running"
        session.pace_segments = [(1.0, PaceZoneName.EASY)]

    refresh_duration(session, zones)
    return session


_TITLES: Dict[SessionType, str] = {
    SessionType.EASY: "Easy run",
    SessionType.LONG_RUN: "Long run",
    SessionType.THRESHOLD: "Threshold session",
    SessionType.VO2MAX: "Interval session",
    SessionType.TEMPO: "Tempo run",
    SessionType.RECOVERY: "Recovery run",
    SessionType.REST: "Rest",
}


def apply_distance(
    session: Session,
    distance_km: float,
    zones: Optional[PaceZones] = None
) -> Session:
    """Set the session distance and rebuild distance-driven blocks and duration."""
    session.distance_km = round(max(distance_km, 0.0), 1)
    refresh_duration(session, zones)
    return session


def refresh_duration(session: Session, zones: Optional[PaceZones] = None):
    """
    Recompute total duration.

    Distance-based sessions: distance x weighted pace. Structured sessions
    keep their fixed main duration.
    """
    if session.is_rest:
        session.duration_min = 0.0
        return

    extra = sum(b.duration_min or 0 for b in session.warmup + session.cooldown)
    if session.is_distance_based:
        session.main = _segment_blocks(session, zones)
        main_min = session.distance_km * segment_pace(session.pace_segments, zones) / 60
    else:
        main_min = session.fixed_main_min or 0.0
    session.duration_min = round(extra + main_min, 1)


def scale_session(session: Session, factor: float, zones: Optional[PaceZones] = None) -> Session:
    """Copy of a session with its distance scaled."""
    scaled = replace(
        session,
        warmup=list(session.warmup),
        main=list(session.main),
        cooldown=list(session.cooldown),
        coach_tips=list(session.coach_tips),
    )
    return apply_distance(scaled, session.distance_km * factor, zones)


def _segment_blocks(session: Session, zones: Optional[PaceZones]) -> List[WorkoutBlock]:
    if len(session.pace_segments) == 1:
        _, zone = session.pace_segments[0]
        minutes = session.distance_km * zone_mid_pace(zones, zone) / 60
        return [WorkoutBlock(
            kind="main",
            description=session.main_description or "Continuous running",
            duration_min=round(minutes, 1),
            pace_zone=zone,
            pace=_pace_text(zones, zone),
        )]

    blocks = []
    for fraction, zone in session.pace_segments:
        km = round(session.distance_km * fraction, 1)
        minutes = km * zone_mid_pace(zones, zone) / 60
        blocks.append(WorkoutBlock(
            kind="main",
            description=f"{round(fraction * 100)}% {zone.value.replace('_', ' ')} (~{km}km)",
            duration_min=round(minutes, 1),
            pace_zone=zone,
            pace=_pace_text(zones, zone),
        ))
    return blocks


def _zone(key: Optional[str], default: PaceZoneName) -> PaceZoneName:
    if key is None:
        return default
    try:
        return PaceZoneName(key)
    except ValueError:
        return default


def _pace_text(zones: Optional[PaceZones], zone: PaceZoneName) -> str:
    if not zones:
        return ""
    return format_pace_range(zones, zone)
