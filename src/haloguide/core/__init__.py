# Guidance event bus and hint trigger scheduling

from .event_bus import GuidanceEventBus, GuidanceEvent, GuidanceEventType
from .hint_scheduler import (
    HintTriggerScheduler, ThreadingHintScheduler, ManualHintScheduler,
    ScheduledTask, TaskState
)

__all__ = [
    'GuidanceEventBus',
    'GuidanceEvent',
    'GuidanceEventType',
    'HintTriggerScheduler',
    'ThreadingHintScheduler',
    'ManualHintScheduler',
    'ScheduledTask',
    'TaskState'
]
