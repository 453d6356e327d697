from ..models import Enumeration, IssueStatus, Query, Role, Tracker


def no_data() -> bool:
    """Return True when none of the tables a default data load writes to hold configuration.

    Evaluated on every call; any of these tables holding rows means an earlier
    load or hand-authored configuration that must not be overwritten.
    """
    return not (
        Role.objects.givable().exists()
        or Tracker.objects.exists()
        or IssueStatus.objects.exists()
        or Enumeration.objects.exists()
        or Query.objects.exists()
    )


is_empty = no_data
