import pytest

from app.core.exceptions import (
    AlreadyFriends, FriendRequestNotFound, FriendRequestPending,
    SelfFriendRequest, UserNotFound
)
from app.models.friendship import Friendship, make_pair_key
from app.services.friend_service import friend_service_obj


class TestFriendRequests:

    def test_pair_key_is_order_independent(self):
        assert make_pair_key("b", "a") == make_pair_key("a", "b") == "a:b"

    def test_cannot_befriend_self(self, db_session, make_user):
        alice = make_user("alice")
        with pytest.raises(SelfFriendRequest):
            friend_service_obj.send_friend_request(db_session, alice.id, alice.id)

    def test_unknown_recipient(self, db_session, make_user):
        alice = make_user("alice")
        with pytest.raises(UserNotFound):
            friend_service_obj.send_friend_request(db_session, alice.id, "nobody")

    def test_pending_request_blocks_both_directions(self, db_session, make_user):
        alice = make_user("alice")
        bob = make_user("bob")
        friend_service_obj.send_friend_request(db_session, alice.id, bob.id)

        with pytest.raises(FriendRequestPending):
            friend_service_obj.send_friend_request(db_session, alice.id, bob.id)
        with pytest.raises(FriendRequestPending):
            friend_service_obj.send_friend_request(db_session, bob.id, alice.id)

        assert db_session.query(Friendship).count() == 1

    def test_already_friends(self, db_session, make_user):
        alice = make_user("alice")
        bob = make_user("bob")
        request = friend_service_obj.send_friend_request(db_session, alice.id, bob.id)
        friend_service_obj.accept_friend_request(db_session, bob.id, request.id)

        with pytest.raises(AlreadyFriends):
            friend_service_obj.send_friend_request(db_session, bob.id, alice.id)

    def test_only_recipient_can_accept(self, db_session, make_user):
        alice = make_user("alice")
        bob = make_user("bob")
        request = friend_service_obj.send_friend_request(db_session, alice.id, bob.id)

        with pytest.raises(FriendRequestNotFound):
            friend_service_obj.accept_friend_request(db_session, alice.id, request.id)

        assert request.status == "PENDING"

    def test_incoming_requests(self, db_session, make_user):
        alice = make_user("alice")
        bob = make_user("bob")
        carol = make_user("carol")
        friend_service_obj.send_friend_request(db_session, alice.id, carol.id)
        friend_service_obj.send_friend_request(db_session, bob.id, carol.id)

        requests = friend_service_obj.get_friend_requests(db_session, carol.id)

        assert sorted(r.user.username for r in requests) == ["alice", "bob"]
        assert friend_service_obj.get_friend_requests(db_session, alice.id) == []


class TestFriendsRelation:

    def test_friends_are_symmetric(self, db_session, make_user):
        alice = make_user("alice")
        bob = make_user("bob")
        request = friend_service_obj.send_friend_request(db_session, alice.id, bob.id)

        # Pending requests do not count
        assert friend_service_obj.get_friends(db_session, alice.id) == []

        friend_service_obj.accept_friend_request(db_session, bob.id, request.id)

        assert [u.username for u in friend_service_obj.get_friends(db_session, alice.id)] == ["bob"]
        assert [u.username for u in friend_service_obj.get_friends(db_session, bob.id)] == ["alice"]

    def test_friend_closure_includes_self(self, db_session, make_user):
        alice = make_user("alice")
        bob = make_user("bob")
        carol = make_user("carol")
        request = friend_service_obj.send_friend_request(db_session, bob.id, alice.id)
        friend_service_obj.accept_friend_request(db_session, alice.id, request.id)
        friend_service_obj.send_friend_request(db_session, carol.id, alice.id)

        assert friend_service_obj.get_friend_closure(db_session, alice.id) == {alice.id, bob.id}
        assert friend_service_obj.get_friend_closure(db_session, carol.id) == {carol.id}

    def test_list_users(self, db_session, make_user):
        make_user("carol")
        make_user("alice")
        assert [u.username for u in friend_service_obj.list_users(db_session)] == ["alice", "carol"]
