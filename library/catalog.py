"""
Default workout catalog, organised category x phase x level.

Efforts are chosen so that every slot the session builder can emit has at
least one template within one effort point of its target and under its
ceiling.
"""

from typing import List

from .templates import (
    ContinuousStructure,
    IntervalStructure,
    PyramidStructure,
    SegmentStructure,
    TemplateLibrary,
    WorkoutCategory,
    WorkoutTemplate,
)


PHASES = ("base", "build", "peak", "taper")


# =============================================================================
# Short intervals
# =============================================================================

VO2_SHORT = [
    WorkoutTemplate(
        id="vo2s_base_1", name="Hill strides", category=WorkoutCategory.VO2_SHORT,
        phase="base", level=1, effort=5,
        structure=IntervalStructure(reps=8, work_sec=20, recovery_sec=90),
        description="8 x 20s uphill", pace_zone="vo2_short",
        recovery_desc="walk back down",
        notes="Short, relaxed hill efforts to wake up the legs.",
        coach_tips=["Stay tall and drive the arms", "Stop before the form breaks down"],
    ),
    WorkoutTemplate(
        id="vo2s_base_2", name="Introduction to speed", category=WorkoutCategory.VO2_SHORT,
        phase="base", level=2, effort=5,
        structure=IntervalStructure(reps=10, work_sec=45, recovery_sec=45, distance_m=200),
        description="10 x 200m", pace_zone="vo2_short",
        recovery_desc="200m jog (~45s)",
        notes="First speed session of the cycle. Find the rhythm, don't force it.",
        coach_tips=[
            "Start at 95% of the target pace",
            "The last three reps should match the first ones",
        ],
    ),
    WorkoutTemplate(
        id="vo2s_base_3", name="300m progression", category=WorkoutCategory.VO2_SHORT,
        phase="base", level=3, effort=6,
        structure=IntervalStructure(reps=8, work_sec=60, recovery_sec=60, distance_m=300),
        description="8 x 300m", pace_zone="vo2_short",
        recovery_desc="1min jog",
        notes="Slightly longer efforts.",
        coach_tips=["Don't rush the first 100 metres"],
    ),
    WorkoutTemplate(
        id="vo2s_build_1", name="30/30", category=WorkoutCategory.VO2_SHORT,
        phase="build", level=1, effort=6,
        structure=IntervalStructure(reps=12, work_sec=30, recovery_sec=30),
        description="12 x 30s fast / 30s easy", pace_zone="vo2_short",
        recovery_desc="30s jog",
        notes="Classic short intervals. Keep every rep at the same speed.",
        coach_tips=["The jog is part of the work: keep moving"],
    ),
    WorkoutTemplate(
        id="vo2s_build_2", name="Classic 400m", category=WorkoutCategory.VO2_SHORT,
        phase="build", level=2, effort=7,
        structure=IntervalStructure(reps=10, work_sec=80, recovery_sec=90, distance_m=400),
        description="10 x 400m", pace_zone="vo2_short",
        recovery_desc="1min15-1min30 jog",
        notes="The reference interval session. 400m = one lap of the track.",
        coach_tips=[
            "Aim for even splits (+/- 2s)",
            "Jog the recoveries, don't walk",
        ],
    ),
    WorkoutTemplate(
        id="vo2s_build_3", name="Speed sets", category=WorkoutCategory.VO2_SHORT,
        phase="build", level=3, effort=8,
        structure=IntervalStructure(
            reps=6, work_sec=55, recovery_sec=60, distance_m=300, sets=2, set_recovery_sec=180
        ),
        description="2 x (6 x 300m)", pace_zone="vo2_short",
        recovery_desc="1min between reps, 3min between sets",
        notes="Sets train repeated efforts under fatigue.",
        coach_tips=["The second set should be as fast as the first"],
    ),
]


# =============================================================================
# Long intervals
# =============================================================================

VO2_LONG = [
    WorkoutTemplate(
        id="vo2l_build_1", name="800m repeats", category=WorkoutCategory.VO2_LONG,
        phase="build", level=1, effort=6,
        structure=IntervalStructure(reps=5, work_sec=180, recovery_sec=120, distance_m=800),
        description="5 x 800m", pace_zone="vo2_long",
        recovery_desc="2min jog",
        notes="Introduces longer efforts at 5k-10k pace.",
        coach_tips=["Run the first rep controlled, not flat out"],
    ),
    WorkoutTemplate(
        id="vo2l_build_2", name="Long pyramid", category=WorkoutCategory.VO2_LONG,
        phase="build", level=2, effort=7,
        structure=PyramidStructure(segments_m=[400, 800, 1200, 800, 400], recovery_ratio=0.5),
        description="Pyramid 400-800-1200-800-400m", pace_zone="vo2_long",
        recovery_desc="jog half the effort time",
        notes="The 1200 in the middle is the crux.",
        coach_tips=["Come back down the pyramid at the same pace"],
    ),
    WorkoutTemplate(
        id="vo2l_build_3", name="1000m repeats", category=WorkoutCategory.VO2_LONG,
        phase="build", level=3, effort=8,
        structure=IntervalStructure(reps=6, work_sec=225, recovery_sec=150, distance_m=1000),
        description="6 x 1000m", pace_zone="vo2_long",
        recovery_desc="2min30 jog",
        notes="A demanding session. Arrive rested.",
        coach_tips=["If you fade by more than 5s, shorten the set"],
    ),
]


# =============================================================================
# Threshold
# =============================================================================

THRESHOLD = [
    WorkoutTemplate(
        id="thr_build_1", name="Threshold intro", category=WorkoutCategory.THRESHOLD,
        phase="build", level=1, effort=5,
        structure=IntervalStructure(reps=3, work_sec=480, recovery_sec=120),
        description="3 x 8min at threshold", pace_zone="threshold_2",
        recovery_desc="2min jog",
        notes="Uncomfortable but sustainable.",
        coach_tips=["Breathe on a three-step rhythm"],
    ),
    WorkoutTemplate(
        id="thr_build_2", name="Threshold blocks", category=WorkoutCategory.THRESHOLD,
        phase="build", level=2, effort=6,
        structure=IntervalStructure(reps=3, work_sec=600, recovery_sec=180),
        description="3 x 10min at threshold", pace_zone="threshold_2",
        recovery_desc="3min jog",
        notes="The staple threshold session.",
        coach_tips=["Hold the pace, not the heart rate"],
    ),
    WorkoutTemplate(
        id="thr_build_3", name="Long threshold", category=WorkoutCategory.THRESHOLD,
        phase="build", level=3, effort=6,
        structure=IntervalStructure(reps=2, work_sec=900, recovery_sec=180),
        description="2 x 15min at threshold", pace_zone="threshold_1",
        recovery_desc="3min jog",
        notes="Longer blocks at a slightly easier pace.",
        coach_tips=["The second block should not be slower"],
    ),
]


# =============================================================================
# Tempo
# =============================================================================

TEMPO = [
    WorkoutTemplate(
        id="tempo_base_1", name="Steady run", category=WorkoutCategory.TEMPO,
        phase="base", level=1, effort=4,
        structure=ContinuousStructure(duration_sec=1200),
        description="20min steady", pace_zone="threshold_1",
        notes="Comfortably hard, conversation in short sentences.",
        coach_tips=["Settle into the pace over the first 3 minutes"],
    ),
    WorkoutTemplate(
        id="tempo_base_2", name="Split tempo", category=WorkoutCategory.TEMPO,
        phase="base", level=2, effort=4,
        structure=IntervalStructure(reps=2, work_sec=720, recovery_sec=120),
        description="2 x 12min steady", pace_zone="threshold_1",
        recovery_desc="2min jog",
        coach_tips=["Keep the effort even across both blocks"],
    ),
    WorkoutTemplate(
        id="tempo_base_3", name="Continuous tempo", category=WorkoutCategory.TEMPO,
        phase="base", level=3, effort=5,
        structure=ContinuousStructure(duration_sec=1500),
        description="25min tempo", pace_zone="tempo",
        notes="First real tempo of the cycle.",
        coach_tips=["Finish feeling you could do five more minutes"],
    ),
    WorkoutTemplate(
        id="tempo_peak_1", name="Tempo pairs", category=WorkoutCategory.TEMPO,
        phase="peak", level=1, effort=5,
        structure=IntervalStructure(reps=2, work_sec=900, recovery_sec=180),
        description="2 x 15min tempo", pace_zone="tempo",
        recovery_desc="3min jog",
        notes="Memorise the feel of the pace.",
        coach_tips=["Relax the shoulders when the pace bites"],
    ),
    WorkoutTemplate(
        id="tempo_peak_2", name="Long tempo", category=WorkoutCategory.TEMPO,
        phase="peak", level=2, effort=6,
        structure=ContinuousStructure(duration_sec=1800),
        description="30min tempo", pace_zone="tempo",
        coach_tips=["Fuel beforehand if the run goes past an hour"],
    ),
    WorkoutTemplate(
        id="tempo_peak_3", name="Tempo triple", category=WorkoutCategory.TEMPO,
        phase="peak", level=3, effort=6,
        structure=IntervalStructure(reps=3, work_sec=720, recovery_sec=120),
        description="3 x 12min tempo", pace_zone="tempo",
        recovery_desc="2min jog",
        coach_tips=["Treat the last block as a rehearsal of race focus"],
    ),
]


# =============================================================================
# Race specific
# =============================================================================

RACE_SPECIFIC = [
    # Generic, used when no template targets the race
    WorkoutTemplate(
        id="race_peak_1", name="Race-pace repeats", category=WorkoutCategory.RACE_SPECIFIC,
        phase="peak", level=1, effort=7,
        structure=IntervalStructure(reps=5, work_sec=300, recovery_sec=120),
        description="5 x 5min at race pace", pace_zone="threshold_2",
        recovery_desc="2min jog",
        coach_tips=["Lock onto race pace from the first rep"],
    ),
    WorkoutTemplate(
        id="race_peak_2", name="Race-pace blocks", category=WorkoutCategory.RACE_SPECIFIC,
        phase="peak", level=2, effort=8,
        structure=IntervalStructure(reps=3, work_sec=600, recovery_sec=180),
        description="3 x 10min at race pace", pace_zone="threshold_2",
        recovery_desc="3min jog",
        coach_tips=["Practise race-day drinking on this one"],
    ),
    WorkoutTemplate(
        id="race_peak_3", name="Race simulation", category=WorkoutCategory.RACE_SPECIFIC,
        phase="peak", level=3, effort=9,
        structure=IntervalStructure(reps=2, work_sec=1200, recovery_sec=240),
        description="2 x 20min at race pace", pace_zone="threshold_2",
        recovery_desc="4min jog",
        coach_tips=["Arrive fresh: this is the key session of the block"],
    ),
    WorkoutTemplate(
        id="race_5k_1", name="5k pace kilometres", category=WorkoutCategory.RACE_SPECIFIC,
        phase="peak", level=1, effort=7, target_race="5km",
        structure=IntervalStructure(reps=5, work_sec=240, recovery_sec=120, distance_m=1000),
        description="5 x 1000m at 5k pace", pace_zone="vo2_long",
        recovery_desc="2min jog",
        coach_tips=["Even splits beat a fast first rep"],
    ),
    WorkoutTemplate(
        id="race_5k_2", name="5k pace long reps", category=WorkoutCategory.RACE_SPECIFIC,
        phase="peak", level=2, effort=8, target_race="5km",
        structure=IntervalStructure(reps=4, work_sec=290, recovery_sec=150, distance_m=1200),
        description="4 x 1200m at 5k pace", pace_zone="vo2_long",
        recovery_desc="2min30 jog",
        coach_tips=["Stay relaxed through the last 200m of each rep"],
    ),
    WorkoutTemplate(
        id="race_10k_1", name="10k pace 2000s", category=WorkoutCategory.RACE_SPECIFIC,
        phase="peak", level=1, effort=7, target_race="10km",
        structure=IntervalStructure(reps=4, work_sec=480, recovery_sec=120, distance_m=2000),
        description="4 x 2000m at 10k pace", pace_zone="threshold_2",
        recovery_desc="2min jog",
        coach_tips=["Run the reps at goal pace, not faster"],
    ),
    WorkoutTemplate(
        id="race_10k_2", name="10k pace 3000s", category=WorkoutCategory.RACE_SPECIFIC,
        phase="peak", level=2, effort=8, target_race="10km",
        structure=IntervalStructure(reps=3, work_sec=720, recovery_sec=180, distance_m=3000),
        description="3 x 3000m at 10k pace", pace_zone="threshold_2",
        recovery_desc="3min jog",
        coach_tips=["Focus on cadence when the legs get heavy"],
    ),
    WorkoutTemplate(
        id="race_half_1", name="Half marathon pace", category=WorkoutCategory.RACE_SPECIFIC,
        phase="peak", level=1, effort=7, target_race="Semi Marathon",
        structure=IntervalStructure(reps=3, work_sec=780, recovery_sec=180, distance_m=3000),
        description="3 x 3km at half marathon pace", pace_zone="threshold_2",
        recovery_desc="3min jog",
        coach_tips=["Race pace should feel controlled today"],
    ),
    WorkoutTemplate(
        id="race_half_2", name="Half marathon blocks", category=WorkoutCategory.RACE_SPECIFIC,
        phase="peak", level=2, effort=8, target_race="Semi Marathon",
        structure=IntervalStructure(reps=2, work_sec=1320, recovery_sec=240, distance_m=5000),
        description="2 x 5km at half marathon pace", pace_zone="threshold_2",
        recovery_desc="4min jog",
        coach_tips=["Practise your race-day gels"],
    ),
    WorkoutTemplate(
        id="race_marathon_1", name="Marathon pace", category=WorkoutCategory.RACE_SPECIFIC,
        phase="peak", level=1, effort=7, target_race="Marathon",
        structure=IntervalStructure(reps=2, work_sec=1200, recovery_sec=180),
        description="2 x 20min at marathon pace", pace_zone="tempo",
        recovery_desc="3min jog",
        coach_tips=["Marathon pace must feel easy here"],
    ),
    WorkoutTemplate(
        id="race_marathon_2", name="Marathon pace long block", category=WorkoutCategory.RACE_SPECIFIC,
        phase="peak", level=2, effort=8, target_race="Marathon",
        structure=IntervalStructure(reps=3, work_sec=1200, recovery_sec=180),
        description="3 x 20min at marathon pace", pace_zone="tempo",
        recovery_desc="3min jog",
        coach_tips=["Take a drink every 20 minutes, as on race day"],
    ),
    WorkoutTemplate(
        id="race_taper_1", name="Sharpening", category=WorkoutCategory.RACE_SPECIFIC,
        phase="taper", level=1, effort=7,
        structure=IntervalStructure(reps=4, work_sec=180, recovery_sec=120),
        description="4 x 3min at race pace", pace_zone="threshold_2",
        recovery_desc="2min jog",
        notes="Short and sharp. Keep the legs fresh.",
        coach_tips=["Stop while it still feels easy"],
    ),
    WorkoutTemplate(
        id="race_taper_2", name="Race rehearsal", category=WorkoutCategory.RACE_SPECIFIC,
        phase="taper", level=2, effort=8,
        structure=IntervalStructure(reps=3, work_sec=300, recovery_sec=180),
        description="3 x 5min at race pace", pace_zone="threshold_2",
        recovery_desc="3min jog",
        coach_tips=["Rehearse the race routine: kit, breakfast, warmup"],
    ),
]


# =============================================================================
# Long runs
# =============================================================================

LONG_RUN = [
    WorkoutTemplate(
        id="long_base_1", name="Easy long run", category=WorkoutCategory.LONG_RUN,
        phase="base", level=1, effort=3,
        structure=SegmentStructure([(1.0, "easy")]),
        description="Continuous easy running", pace_zone="easy",
        notes="Carry water beyond one hour. Stay comfortable throughout.",
        coach_tips=["Start slower than you think"],
    ),
    WorkoutTemplate(
        id="long_base_2", name="Long run with active finish", category=WorkoutCategory.LONG_RUN,
        phase="base", level=2, effort=3,
        structure=SegmentStructure([(0.8, "easy"), (0.2, "active")]),
        description="Easy running, last fifth at active pace", pace_zone="easy",
        coach_tips=["Pick up the pace only if the first part felt easy"],
    ),
    WorkoutTemplate(
        id="long_build_1", name="Steady long run", category=WorkoutCategory.LONG_RUN,
        phase="build", level=1, effort=4,
        structure=SegmentStructure([(0.7, "easy"), (0.3, "active")]),
        description="Easy then steady running", pace_zone="easy",
        coach_tips=["Eat something every 45 minutes"],
    ),
    WorkoutTemplate(
        id="long_build_2", name="Progressive long run", category=WorkoutCategory.LONG_RUN,
        phase="build", level=2, effort=4,
        structure=SegmentStructure([(0.6, "easy"), (0.25, "active"), (0.15, "tempo")]),
        description="Progressive long run finishing at tempo", pace_zone="easy",
        notes="Finishing fast teaches the body to perform on tired legs.",
        coach_tips=["The tempo finish is controlled, not a race"],
    ),
    WorkoutTemplate(
        id="long_peak_1", name="Long run with race-pace finish", category=WorkoutCategory.LONG_RUN,
        phase="peak", level=1, effort=5,
        structure=SegmentStructure([(0.6, "easy"), (0.25, "active"), (0.15, "tempo")]),
        description="Easy, steady, then tempo", pace_zone="easy",
        coach_tips=["Rehearse race-day fuelling"],
    ),
    WorkoutTemplate(
        id="long_peak_2", name="Specific long run", category=WorkoutCategory.LONG_RUN,
        phase="peak", level=2, effort=5,
        structure=SegmentStructure([(0.5, "easy"), (0.3, "active"), (0.2, "tempo")]),
        description="Long run with a sustained tempo section", pace_zone="easy",
        coach_tips=["Hold form in the final kilometres"],
    ),
    WorkoutTemplate(
        id="long_taper_1", name="Short long run", category=WorkoutCategory.LONG_RUN,
        phase="taper", level=1, effort=3,
        structure=SegmentStructure([(1.0, "easy")]),
        description="Relaxed long run", pace_zone="easy",
        notes="Volume comes down, freshness goes up.",
        coach_tips=["Resist the urge to test yourself"],
    ),
]


# =============================================================================
# Easy runs
# =============================================================================

def _easy_templates(phase: str) -> List[WorkoutTemplate]:
    return [
        WorkoutTemplate(
            id=f"easy_{phase}_1", name="Recovery jog", category=WorkoutCategory.EASY,
            phase=phase, level=1, effort=2,
            structure=SegmentStructure([(1.0, "easy")]),
            description="Very easy running", pace_zone="easy",
            notes="Active recovery. Rest instead if you feel tired.",
            coach_tips=["Slower than you think is right"],
        ),
        WorkoutTemplate(
            id=f"easy_{phase}_2", name="Easy run", category=WorkoutCategory.EASY,
            phase=phase, level=2, effort=3,
            structure=SegmentStructure([(1.0, "easy")]),
            description="Continuous easy running", pace_zone="easy",
            notes="You should be able to hold a conversation.",
            coach_tips=["Slow down if you get out of breath"],
        ),
        WorkoutTemplate(
            id=f"easy_{phase}_3", name="Easy run with strides", category=WorkoutCategory.EASY,
            phase=phase, level=3, effort=3,
            structure=SegmentStructure([(0.9, "easy"), (0.1, "active")]),
            description="Easy running plus 4 x 100m strides", pace_zone="easy",
            notes="Strides recruit fast fibres without fatigue.",
            coach_tips=["Strides are relaxed accelerations, not sprints"],
        ),
    ]


EASY = [t for phase in PHASES for t in _easy_templates(phase)]


def default_templates() -> List[WorkoutTemplate]:
    return VO2_SHORT + VO2_LONG + THRESHOLD + TEMPO + RACE_SPECIFIC + LONG_RUN + EASY


def default_library() -> TemplateLibrary:
    """Library holding the built-in catalog."""
    return TemplateLibrary(default_templates())
