"""Tests for vote, like and view toggles."""

from toggles import add_view, push_capped, toggle_like, toggle_vote


class TestVotes:
    def test_upvote_adds(self):
        r = toggle_vote([], [], "ann", "upvote")
        assert r.up_votes == ["ann"]
        assert r.down_votes == []
        assert r.msg == "Question upvoted successfully"

    def test_upvote_twice_round_trips(self):
        up, down = ["bo"], ["cy"]
        first = toggle_vote(up, down, "ann", "upvote")
        second = toggle_vote(first.up_votes, first.down_votes, "ann", "upvote")
        assert second.up_votes == up
        assert second.down_votes == down
        assert second.msg == "Upvote cancelled successfully"

    def test_upvote_moves_downvote(self):
        r = toggle_vote([], ["ann", "bo"], "ann", "upvote")
        assert r.up_votes == ["ann"]
        assert r.down_votes == ["bo"]

    def test_downvote_moves_upvote(self):
        r = toggle_vote(["ann"], [], "ann", "downvote")
        assert r.up_votes == []
        assert r.down_votes == ["ann"]
        assert r.msg == "Question downvoted successfully"

    def test_downvote_cancel(self):
        r = toggle_vote([], ["ann"], "ann", "downvote")
        assert r.down_votes == []
        assert r.msg == "Downvote cancelled successfully"

    def test_never_in_both_lists(self):
        up, down = [], []
        for kind in ("upvote", "downvote", "downvote", "upvote", "upvote", "downvote"):
            r = toggle_vote(up, down, "ann", kind)
            up, down = r.up_votes, r.down_votes
            assert not ("ann" in up and "ann" in down)

    def test_inputs_untouched(self):
        up, down = ["ann"], []
        toggle_vote(up, down, "ann", "downvote")
        assert up == ["ann"]
        assert down == []

    def test_none_lists(self):
        r = toggle_vote(None, None, "ann", "upvote")
        assert r.up_votes == ["ann"]


class TestLikes:
    def test_like_and_unlike(self):
        liked = toggle_like([], "ann")
        assert liked.likes == ["ann"]
        assert liked.msg == "Message liked successfully"
        unliked = toggle_like(liked.likes, "ann")
        assert unliked.likes == []
        assert unliked.msg == "Like removed successfully"


class TestViews:
    def test_views_only_grow(self):
        r = add_view(["ann"], "ann")
        assert r.views == ["ann"]
        r = add_view(r.views, "bo")
        assert r.views == ["ann", "bo"]
        assert r.msg == "View added successfully"


class TestPushCapped:
    def test_prepends(self):
        assert push_capped([2, 1], 3) == [3, 2, 1]

    def test_drops_oldest_past_limit(self):
        refs = list(range(300, 0, -1))
        result = push_capped(refs, 301)
        assert len(result) == 300
        assert result[0] == 301
        assert 1 not in result

    def test_custom_limit(self):
        assert push_capped([1, 2], 0, limit=2) == [0, 1]
