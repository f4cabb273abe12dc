"""Event bus for domain notifications"""
from student_hub.events.bus import EventBus, Topic

__all__ = ["EventBus", "Topic"]
