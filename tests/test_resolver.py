"""
Tests for template resolution and the anti-repetition memory.

Run with: python -m pytest tests/test_resolver.py -v
"""

import pytest

from library.catalog import default_library, default_templates
from library.templates import (
    ContinuousStructure,
    IntervalStructure,
    TemplateLibrary,
    WorkoutCategory,
    WorkoutTemplate,
)
from periodization.config import RaceDistance, TrainingPhase
from periodization.fitness import compute_all_pace_zones
from periodization.resolver import (
    RepetitionMemory,
    effort_target_level,
    ratio_target_level,
    resolve_slot,
    resolve_week,
)
from periodization.sessions import SessionType
from periodization.slots import SessionSlot, SlotRole, build_session_slots


@pytest.fixture
def library():
    return default_library()


@pytest.fixture
def zones():
    return compute_all_pace_zones(50.0)


def interval_slot(target=6, ceiling=8):
    return SessionSlot(
        role=SlotRole.HIGH_QUALITY,
        category=WorkoutCategory.VO2_SHORT,
        target_effort=target,
        max_effort=ceiling,
        volume_share=0.18,
    )


def single_template(effort):
    return WorkoutTemplate(
        id="only", name="Only option", category=WorkoutCategory.VO2_SHORT,
        phase="build", level=1, effort=effort,
        structure=IntervalStructure(reps=6, work_sec=60, recovery_sec=60),
        description="6 x 1min", pace_zone="vo2_short",
    )


def leveled_template(template_id, level, effort):
    return WorkoutTemplate(
        id=template_id, name=template_id, category=WorkoutCategory.VO2_SHORT,
        phase="build", level=level, effort=effort,
        structure=IntervalStructure(reps=6, work_sec=60, recovery_sec=60),
        description="6 x 1min", pace_zone="vo2_short",
    )


# =============================================================================
# Memory
# =============================================================================

class TestRepetitionMemory:
    """Tests for the explicit anti-repetition state."""

    def test_remember_returns_new_memory(self):
        memory = RepetitionMemory()
        updated = memory.remember(WorkoutCategory.TEMPO, "tempo_base_1")
        assert memory.last_used == {}
        assert updated.last_used == {WorkoutCategory.TEMPO: "tempo_base_1"}

    def test_latest_id_per_category(self):
        memory = (
            RepetitionMemory()
            .remember(WorkoutCategory.TEMPO, "a")
            .remember(WorkoutCategory.TEMPO, "b")
            .remember(WorkoutCategory.EASY, "c")
        )
        assert memory.excluded_ids() == {"b", "c"}


class TestTargetLevels:
    """Tests for the level metrics."""

    def test_ratio_level(self):
        assert ratio_target_level(3, 0.0) == 1
        assert ratio_target_level(3, 0.5) == 2
        assert ratio_target_level(3, 1.0) == 3
        assert ratio_target_level(1, 0.7) == 1

    def test_effort_level(self, library):
        templates = library.for_category(WorkoutCategory.VO2_SHORT, "build")
        assert effort_target_level(templates, 6) == pytest.approx(1.0)
        assert effort_target_level(templates, 8) == pytest.approx(3.0)
        assert effort_target_level([], 5) == 1.0


# =============================================================================
# Resolution
# =============================================================================

class TestResolveSlot:
    """Tests for the resolution cascade."""

    def test_effort_match(self, library, zones):
        session = resolve_slot(interval_slot(6), TrainingPhase.BUILD, 1, 5, zones, library)
        assert session.template_id == "vo2s_build_1"
        assert session.session_type == SessionType.VO2MAX
        assert session.distance_km == 0.0
        assert session.duration_min > 0

    def test_used_ids_excluded(self, library, zones):
        session = resolve_slot(
            interval_slot(6), TrainingPhase.BUILD, 1, 5, zones, library, {"vo2s_build_1"}
        )
        assert session.template_id == "vo2s_build_2"

    def test_level_fallback(self, zones):
        """Nothing within one effort point: fall back to the nearest level."""
        library = TemplateLibrary([single_template(3)])
        session = resolve_slot(interval_slot(7), TrainingPhase.BUILD, 1, 5, zones, library)
        assert session.template_id == "only"

    def test_level_fallback_scales_to_whole_library(self, zones):
        """Progress is measured against every level, including ones too hard this week."""
        library = TemplateLibrary([
            leveled_template("easy_l1", 1, 3),
            leveled_template("easy_l2", 2, 4),
            leveled_template("hard_l3", 3, 9),
        ])
        session = resolve_slot(interval_slot(7, 7), TrainingPhase.BUILD, 2, 5, zones, library)
        assert session.template_id == "easy_l2"

    def test_generic_when_library_empty(self, zones):
        session = resolve_slot(interval_slot(7), TrainingPhase.BUILD, 1, 5, zones, TemplateLibrary())
        assert session.template_id is None
        assert session.session_type == SessionType.VO2MAX
        assert session.effort == 7
        assert session.fixed_main_min == 20

    def test_generic_when_every_template_too_hard(self, zones):
        library = TemplateLibrary([single_template(9)])
        session = resolve_slot(interval_slot(7, 8), TrainingPhase.BUILD, 1, 5, zones, library)
        assert session.template_id is None
        assert session.effort <= 8

    def test_generic_easy_is_distance_based(self):
        slot = SessionSlot(
            role=SlotRole.EASY, category=WorkoutCategory.EASY,
            target_effort=3, max_effort=3, variant="long",
        )
        session = resolve_slot(slot, TrainingPhase.BASE, 1, 4, None, TemplateLibrary())
        assert session.is_distance_based
        assert session.session_type == SessionType.EASY

    def test_race_specific_prefers_target_race(self, library, zones):
        slot = SessionSlot(
            role=SlotRole.HIGH_QUALITY, category=WorkoutCategory.RACE_SPECIFIC,
            target_effort=7, max_effort=8, volume_share=0.18,
            target_race=RaceDistance.MARATHON,
        )
        session = resolve_slot(slot, TrainingPhase.PEAK, 1, 4, zones, library)
        assert session.template_id.startswith("race_marathon")
        assert session.session_type == SessionType.THRESHOLD

    def test_structured_session_has_warmup(self, library, zones):
        session = resolve_slot(interval_slot(7), TrainingPhase.BUILD, 1, 5, zones, library)
        assert session.warmup
        assert session.cooldown
        assert session.main[0].pace.endswith("/km")


class TestResolveWeek:
    """Tests for whole-week resolution."""

    def test_every_slot_resolved_under_ceiling(self, library, zones):
        for phase in TrainingPhase:
            slots = build_session_slots(phase, 0.5, 6, distance=RaceDistance.TEN_K, week_volume=45)
            sessions, _ = resolve_week(slots, phase, 2, 4, zones, library)
            assert len(sessions) == len(slots)
            for slot, session in zip(slots, sessions):
                assert session.effort <= slot.max_effort
                assert session.role == slot.role

    def test_no_repeat_within_week(self, library, zones):
        slots = build_session_slots(TrainingPhase.BASE, 0.0, 6, week_volume=40)
        sessions, _ = resolve_week(slots, TrainingPhase.BASE, 1, 6, zones, library)
        ids = [s.template_id for s in sessions if s.template_id]
        assert len(ids) == len(set(ids))

    def test_memory_avoids_last_week(self, library, zones):
        slots = [interval_slot(6)]
        first, memory = resolve_week(slots, TrainingPhase.BUILD, 1, 5, zones, library)
        second, memory = resolve_week(slots, TrainingPhase.BUILD, 2, 5, zones, library, memory)
        assert first[0].template_id != second[0].template_id
        assert memory.last_used[WorkoutCategory.VO2_SHORT] == second[0].template_id

    def test_fresh_memory_per_call(self, library, zones):
        """Separate calls without memory make the same choices."""
        slots = [interval_slot(6)]
        a, _ = resolve_week(slots, TrainingPhase.BUILD, 1, 5, zones, library)
        b, _ = resolve_week(slots, TrainingPhase.BUILD, 1, 5, zones, library)
        assert a[0].template_id == b[0].template_id


class TestTemplateLibrary:
    """Tests for the library query object."""

    def test_duplicate_ids_rejected(self):
        with pytest.raises(ValueError):
            TemplateLibrary([single_template(5), single_template(6)])

    def test_query_filters(self, library):
        results = library.query(WorkoutCategory.VO2_SHORT, TrainingPhase.BUILD, effort=7, max_effort=7)
        assert {t.id for t in results} == {"vo2s_build_1", "vo2s_build_2"}

    def test_catalog_loaded(self, library):
        assert len(library) == len(default_templates())
        assert "vo2s_build_1" in library

    def test_max_level(self, library):
        templates = library.for_category(WorkoutCategory.VO2_SHORT, "build")
        assert library.max_level(WorkoutCategory.VO2_SHORT, "build") == max(t.level for t in templates)
        assert TemplateLibrary().max_level(WorkoutCategory.VO2_SHORT, "build") == 0

    def test_continuous_duration(self):
        assert ContinuousStructure(duration_sec=1200).main_duration_minutes() == 20
