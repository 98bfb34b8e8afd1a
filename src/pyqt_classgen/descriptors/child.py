"""Template child descriptors."""

from dataclasses import dataclass
from typing import Optional

CHILD_PREFIX = "_"


@dataclass(frozen=True)
class ChildDescriptor:
    """A named sub-object resolved from the class template at construction time."""

    expected_type: Optional[type] = None


def Child(expected_type: Optional[type] = None) -> ChildDescriptor:
    """
    Declare an internal template child.

    The field name must start with an underscore; the child is looked up in the
    loaded template by the field name without that underscore.

    Example:
        @qclass(template="panel.ui")
        class Panel(template(QWidget, {"_ok_button": Child(QPushButton)})):
            pass
    """
    return ChildDescriptor(expected_type)


def child_object_name(field_name: str) -> str:
    """'_ok_button' -> 'ok_button'."""
    if field_name.startswith(CHILD_PREFIX):
        return field_name[len(CHILD_PREFIX):]
    return field_name
