"""
Error classes shared by the utility modules.

**Conceptual**: The helpers in this package have almost no failure modes.
The one family of errors they do raise is the caller bug: handing a filter a
missing extension, copying a timestamp from nothing, asking for a negative
maximum. Those are reported immediately, at construction time, so the bug
surfaces where it was made rather than somewhere downstream.
"""


class PreconditionError(ValueError):
    """
    Raised when a caller violates a documented precondition.

    **Usage**: Not meant to be caught and recovered from. It subclasses
    ValueError so generic argument validation in calling code keeps working.
    """
    pass
