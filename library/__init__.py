"""Workout template library: template structures, query object and built-in catalog."""

from .templates import (
    WorkoutCategory,
    IntervalStructure,
    PyramidStructure,
    ContinuousStructure,
    SegmentStructure,
    WorkoutTemplate,
    TemplateLibrary,
)
from .catalog import default_templates, default_library

__all__ = [
    'WorkoutCategory',
    'IntervalStructure',
    'PyramidStructure',
    'ContinuousStructure',
    'SegmentStructure',
    'WorkoutTemplate',
    'TemplateLibrary',
    'default_templates',
    'default_library',
]
