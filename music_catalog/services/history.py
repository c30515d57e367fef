"""Previous-name history for renamed artists."""
from typing import List, Optional, Sequence


def next_previous_names(
    old_name: str,
    new_name: str,
    current: Optional[Sequence[str]],
    limit: Optional[int] = None,
) -> List[str]:
    """
    Compute the previous-names list after a rename.

    The new name is removed from the history, so reverting to an earlier name
    does not leave it listed as a previous one, and the old name is put in
    front. The list is ordered most recent first.

    Args:
        old_name: The name being replaced
        new_name: The name being applied
        current: The existing previous names, most recent first
        limit: Keep at most this many entries, dropping the oldest

    Returns:
        A new list; ``current`` is not modified.
    """
    names = [name for name in (current or []) if name != new_name]
    if old_name and old_name.strip() and old_name != new_name:
        names.insert(0, old_name)
    if limit is not None:
        names = names[:limit]
    return names
