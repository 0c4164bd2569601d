"""
Tests for services/query/search.py against a real SQLite database
"""
import pytest

from services.query.search import search, recent_posts_feed
from utils.errors import BadRequestError
from tests.conftest import create_test_post


def ids(posts):
    return [post.id for post in posts]


@pytest.mark.unit
class TestTagFilters:

    def test_empty_query_returns_visible_posts_newest_first(self, populated_db):
        posts, page_count = search("")
        p = populated_db
        assert ids(posts) == [p['untagged'], p['dog_outdoor'], p['cat_indoor'], p['cat_outdoor']]
        assert page_count == 1

    def test_single_tag(self, populated_db):
        posts, _ = search("cat")
        assert set(ids(posts)) == {populated_db['cat_outdoor'], populated_db['cat_indoor']}

    def test_all_included_tags_required(self, populated_db):
        posts, _ = search("cat outdoor")
        assert ids(posts) == [populated_db['cat_outdoor']]

    def test_three_included_tags_need_full_coverage(self, db_connection, users):
        alice = users['alice'].id
        full = create_test_post(db_connection, alice, 'x y z')
        superset = create_test_post(db_connection, alice, 'x y z w')
        create_test_post(db_connection, alice, 'x y')
        create_test_post(db_connection, alice)

        posts, page_count = search("x y z")
        assert ids(posts) == [superset, full]
        assert page_count == 1

    def test_tag_matching_ignores_case(self, populated_db):
        posts, _ = search("CAT Outdoor")
        assert ids(posts) == [populated_db['cat_outdoor']]

    def test_unknown_tag_matches_nothing(self, populated_db):
        posts, page_count = search("cat nonexistent")
        assert posts == []
        assert page_count == 0

    def test_exclusion_keeps_untagged_posts(self, populated_db):
        posts, _ = search("-cat")
        assert set(ids(posts)) == {populated_db['dog_outdoor'], populated_db['untagged']}

    def test_exclusion_of_any_listed_tag(self, populated_db):
        posts, _ = search("-cat -dog")
        assert ids(posts) == [populated_db['untagged']]

    def test_include_and_exclude(self, populated_db):
        posts, _ = search("outdoor -dog")
        assert ids(posts) == [populated_db['cat_outdoor']]

    def test_untagged_post_has_no_tag_string(self, populated_db):
        posts, _ = search("")
        untagged = [post for post in posts if post.id == populated_db['untagged']][0]
        assert untagged.tags is None

    def test_result_carries_all_tags_sorted(self, populated_db):
        posts, _ = search("outdoor")
        by_id = {post.id: post for post in posts}
        assert by_id[populated_db['cat_outdoor']].tags == "cat outdoor"
        assert by_id[populated_db['dog_outdoor']].tags == "dog outdoor"


@pytest.mark.unit
class TestRatingFilters:

    def test_include_rating(self, populated_db):
        posts, _ = search("rating:q")
        assert ids(posts) == [populated_db['cat_indoor']]

    def test_multiple_included_ratings(self, populated_db):
        posts, _ = search("rating:q rating:e")
        assert set(ids(posts)) == {populated_db['cat_indoor'], populated_db['dog_outdoor']}

    def test_exclude_rating(self, populated_db):
        posts, _ = search("-rating:s")
        assert set(ids(posts)) == {populated_db['cat_indoor'], populated_db['dog_outdoor']}

    def test_unknown_rating_matches_nothing(self, populated_db):
        posts, _ = search("rating:x")
        assert posts == []

    def test_rating_tokens_ignore_case(self, populated_db):
        expected = ids(search("rating:s")[0])
        assert expected == [populated_db['untagged'], populated_db['cat_outdoor']]
        assert ids(search("RATING:S")[0]) == expected
        assert ids(search("Rating:s")[0]) == expected

    def test_negated_rating_ignores_case(self, populated_db):
        posts, _ = search("-Rating:S")
        assert set(ids(posts)) == {populated_db['cat_indoor'], populated_db['dog_outdoor']}

    def test_rating_and_tags_compose(self, populated_db):
        posts, _ = search("cat rating:s")
        assert ids(posts) == [populated_db['cat_outdoor']]


@pytest.mark.unit
class TestVisibility:

    def test_owner_sees_own_private_post(self, populated_db, users):
        posts, _ = search("secret", users['alice'])
        assert ids(posts) == [populated_db['alice_private']]

    def test_other_user_does_not(self, populated_db, users):
        posts, _ = search("secret", users['bob'])
        assert posts == []

    def test_anonymous_does_not(self, populated_db):
        posts, _ = search("secret")
        assert posts == []

    def test_admin_sees_everything(self, populated_db, users):
        posts, _ = search("", users['root'])
        assert len(posts) == 6


@pytest.mark.unit
class TestPagination:

    def test_page_count_and_sizes(self, db_connection, users):
        for _ in range(51):
            create_test_post(db_connection, users['alice'].id, 'bulk')

        first, page_count = search("bulk", page=1)
        second, _ = search("bulk", page=2)
        third, _ = search("bulk", page=3)

        assert page_count == 2
        assert len(first) == 50
        assert len(second) == 1
        assert third == []
        assert second[0].id < first[-1].id

    def test_page_zero_and_negative_are_first_page(self, db_connection, users):
        for _ in range(3):
            create_test_post(db_connection, users['alice'].id, 'bulk')

        first, _ = search("bulk", page_size=2, page=1)
        assert ids(search("bulk", page_size=2, page=0)[0]) == ids(first)
        assert ids(search("bulk", page_size=2, page=-5)[0]) == ids(first)

    def test_zero_page_size_is_rejected(self, db_connection):
        with pytest.raises(BadRequestError):
            search("", page_size=0)

    def test_empty_result_has_zero_pages(self, db_connection):
        posts, page_count = search("anything")
        assert posts == []
        assert page_count == 0


@pytest.mark.unit
def test_recent_posts_feed_is_anonymous(populated_db):
    posts = recent_posts_feed("cat")
    assert set(ids(posts)) == {populated_db['cat_outdoor'], populated_db['cat_indoor']}
