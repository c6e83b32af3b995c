"""Unit tests for pagination relation selection."""

from utils.pagination import pagination_targets


class TestPaginationTargets:
    """Test which navigation relations apply to a page."""

    def test_single_page_only_self(self):
        """A listing with one page links only to itself."""
        assert pagination_targets(0, 1) == [("self", 0)]

    def test_empty_listing_only_self(self):
        """Zero total pages still yields a self link."""
        assert pagination_targets(0, 0) == [("self", 0)]

    def test_first_of_many(self):
        """First page has next and last, but no prev or first."""
        assert pagination_targets(0, 3) == [("self", 0), ("next", 1), ("last", 2)]

    def test_middle_page_has_all_relations(self):
        """A middle page links everywhere, in fixed order."""
        assert pagination_targets(2, 5) == [
            ("self", 2),
            ("next", 3),
            ("prev", 1),
            ("first", 0),
            ("last", 4),
        ]

    def test_last_page(self):
        """Last page has prev and first, but no next or last."""
        assert pagination_targets(2, 3) == [("self", 2), ("prev", 1), ("first", 0)]

    def test_second_of_two(self):
        assert pagination_targets(1, 2) == [("self", 1), ("prev", 0), ("first", 0)]
