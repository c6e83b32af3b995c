from typing import List, Tuple


def pagination_targets(page: int, total_pages: int) -> List[Tuple[str, int]]:
    """
    Navigation relations that apply to a page, paired with the page index
    each one points to. Recomputed per response; holds no state.

    Order is self, next, prev, first, last.
    """
    targets = [("self", page)]

    # next (not on last page)
    if page < total_pages - 1:
        targets.append(("next", page + 1))

    # prev and first (not on first page)
    if page > 0:
        targets.append(("prev", page - 1))
        targets.append(("first", 0))

    # last (at least one page, not already on it)
    if total_pages > 0 and page < total_pages - 1:
        targets.append(("last", total_pages - 1))

    return targets
