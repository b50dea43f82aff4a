from .status import Status, normalize_task_status
from .priority import Priority, PRIORITY_KEYWORDS, parse_priority
from .project import Project, INBOX_PROJECT_ID, INBOX_PROJECT_NAME, INBOX_PROJECT_COLOR
from .tag import Tag, TAG_MARKER, normalize_tag_name
from .time_entry import TimeEntry
from .task import Task
from .palette import PROJECT_COLORS, TAG_COLORS, project_color, tag_color
from .dependency_validator import (
    DependencyError,
    build_dependency_graph,
    detect_cycle,
    validate_new_dependency,
    blocking_dependencies,
    is_blocked,
)

__all__ = [
    "Status",
    "normalize_task_status",
    "Priority",
    "PRIORITY_KEYWORDS",
    "parse_priority",
    "Project",
    "INBOX_PROJECT_ID",
    "INBOX_PROJECT_NAME",
    "INBOX_PROJECT_COLOR",
    "Tag",
    "TAG_MARKER",
    "normalize_tag_name",
    "TimeEntry",
    "Task",
    "PROJECT_COLORS",
    "TAG_COLORS",
    "project_color",
    "tag_color",
    # Dependencies
    "DependencyError",
    "build_dependency_graph",
    "detect_cycle",
    "validate_new_dependency",
    "blocking_dependencies",
    "is_blocked",
]
