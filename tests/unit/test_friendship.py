import pytest

from planmate.core.errors import (
    AuthorizationException,
    BusinessLogicException,
    ResourceNotFoundException,
    StoreFailureException
)
from planmate.schemas import FriendField, ScheduleCreateRequest
from planmate.services import FriendshipService, auth_service, schedule_service
from planmate.stores.memory import InMemoryFriendGraphStore


async def _graph(stores, user):
    return await stores.friend_graphs.find_by_user_id(user.id)


class TestFriendRequest:
    """친구 요청 테스트"""

    @pytest.mark.asyncio
    async def test_request_adds_requester_to_target_pending(self, stores, alice, bob):
        result = await FriendshipService.send_friend_request(stores, alice, "bob")

        assert result.success is True
        assert (await _graph(stores, bob)).pending_requests == {alice.id}
        # 요청자 쪽에는 아무것도 기록되지 않음
        alice_graph = await _graph(stores, alice)
        assert alice_graph.pending_requests == set()
        assert alice_graph.friends == set()

    @pytest.mark.asyncio
    async def test_repeated_request_is_idempotent(self, stores, alice, bob):
        await FriendshipService.send_friend_request(stores, alice, "bob")
        result = await FriendshipService.send_friend_request(stores, alice, "bob")

        assert result.success is True
        assert (await _graph(stores, bob)).pending_requests == {alice.id}

    @pytest.mark.asyncio
    async def test_request_to_self(self, stores, alice):
        with pytest.raises(BusinessLogicException, match="yourself"):
            await FriendshipService.send_friend_request(stores, alice, "alice")

    @pytest.mark.asyncio
    async def test_request_to_unknown_nickname(self, stores, alice):
        with pytest.raises(ResourceNotFoundException, match="User not found"):
            await FriendshipService.send_friend_request(stores, alice, "nobody")

    @pytest.mark.asyncio
    async def test_request_when_already_friends(self, stores, alice, bob):
        await FriendshipService.send_friend_request(stores, alice, "bob")
        await FriendshipService.accept_friend_request(stores, bob, "alice")

        result = await FriendshipService.send_friend_request(stores, alice, "bob")

        assert result.success is True
        assert result.message == "Already friends"
        assert (await _graph(stores, bob)).pending_requests == set()

    @pytest.mark.asyncio
    async def test_request_to_user_without_graph_record(self, stores, tokens, alice, bob):
        """친구 그래프가 아직 없는 기존 계정에 대한 요청도 유지됨"""
        stores.friend_graphs._graphs.pop(bob.id)

        await FriendshipService.send_friend_request(stores, alice, "bob")
        await auth_service.sign_in(stores, tokens, "bob@test.com", "Abc123")

        requests = await FriendshipService.get_friend_requests(stores, bob)
        assert [request.nickname for request in requests] == ["alice"]
        assert (await _graph(stores, bob)).friends == set()


class TestAcceptAndDeny:
    """친구 요청 수락/거절 테스트"""

    @pytest.mark.asyncio
    async def test_accept_makes_friendship_mutual(self, stores, alice, bob):
        await FriendshipService.send_friend_request(stores, alice, "bob")

        result = await FriendshipService.accept_friend_request(stores, bob, "alice")

        assert result.success is True
        bob_graph = await _graph(stores, bob)
        alice_graph = await _graph(stores, alice)
        assert bob_graph.friends == {alice.id}
        assert bob_graph.pending_requests == set()
        assert alice_graph.friends == {bob.id}

        alice_friends = await FriendshipService.get_friends_list(stores, alice)
        bob_friends = await FriendshipService.get_friends_list(stores, bob)
        assert [friend.nickname for friend in alice_friends] == ["bob"]
        assert [friend.nickname for friend in bob_friends] == ["alice"]

    @pytest.mark.asyncio
    async def test_accept_clears_stale_reciprocal_request(self, stores, alice, bob):
        """양쪽이 서로 요청한 상태에서 수락하면 두 요청 모두 정리"""
        await FriendshipService.send_friend_request(stores, alice, "bob")
        await FriendshipService.send_friend_request(stores, bob, "alice")

        await FriendshipService.accept_friend_request(stores, bob, "alice")

        assert (await _graph(stores, alice)).pending_requests == set()
        assert (await _graph(stores, bob)).pending_requests == set()

    @pytest.mark.asyncio
    async def test_accept_unknown_nickname(self, stores, bob):
        with pytest.raises(ResourceNotFoundException, match="nobody"):
            await FriendshipService.accept_friend_request(stores, bob, "nobody")

    @pytest.mark.asyncio
    async def test_accept_without_request_is_rejected(self, stores, alice, bob):
        await schedule_service.create_entry(
            stores,
            bob,
            ScheduleCreateRequest(work="Private", date="2024-05-02", start_time="09:00", end_time="10:00")
        )

        with pytest.raises(ResourceNotFoundException, match="No pending friend request"):
            await FriendshipService.accept_friend_request(stores, alice, "bob")

        assert (await _graph(stores, alice)).friends == set()
        assert (await _graph(stores, bob)).friends == set()
        with pytest.raises(AuthorizationException):
            await FriendshipService.get_friend_schedule(stores, alice, "bob")

    @pytest.mark.asyncio
    async def test_accept_existing_friend_is_idempotent(self, stores, alice, bob):
        await FriendshipService.send_friend_request(stores, alice, "bob")
        await FriendshipService.accept_friend_request(stores, bob, "alice")

        result = await FriendshipService.accept_friend_request(stores, bob, "alice")

        assert result.success is True
        assert result.message == "Already friends"
        assert (await _graph(stores, bob)).friends == {alice.id}
        assert (await _graph(stores, alice)).friends == {bob.id}

    @pytest.mark.asyncio
    async def test_deny_removes_request_only(self, stores, alice, bob):
        await FriendshipService.send_friend_request(stores, alice, "bob")

        result = await FriendshipService.reject_friend_request(stores, bob, "alice")

        assert result.success is True
        bob_graph = await _graph(stores, bob)
        assert bob_graph.pending_requests == set()
        assert bob_graph.friends == set()
        assert (await _graph(stores, alice)).friends == set()
        assert await FriendshipService.are_friends(stores, bob.id, alice.id) is False

    @pytest.mark.asyncio
    async def test_deny_without_request_is_idempotent(self, stores, alice, bob):
        result = await FriendshipService.reject_friend_request(stores, bob, "alice")

        assert result.success is True
        assert (await _graph(stores, bob)).pending_requests == set()


class FailingFriendGraphStore(InMemoryFriendGraphStore):
    """지정한 사용자/필드/연산의 쓰기만 실패하는 저장소"""

    def __init__(self, graphs, fail_user_id: str = "", fail_field=FriendField.FRIENDS, fail_op: str = "add"):
        super().__init__()
        self._graphs = graphs
        self.fail_user_id = fail_user_id
        self.fail_field = fail_field
        self.fail_op = fail_op

    def _should_fail(self, op, user_id, field):
        return op == self.fail_op and user_id == self.fail_user_id and field == self.fail_field

    async def add_to_set(self, user_id, field, peer_id):
        if self._should_fail("add", user_id, field):
            raise StoreFailureException("friend_graphs")
        await super().add_to_set(user_id, field, peer_id)

    async def remove_from_set(self, user_id, field, peer_id):
        if self._should_fail("remove", user_id, field):
            raise StoreFailureException("friend_graphs")
        await super().remove_from_set(user_id, field, peer_id)


class TestAcceptPartialFailure:
    """두 번째 쓰기 실패 시 보상 작업 테스트"""

    @pytest.mark.asyncio
    async def test_first_write_is_reverted(self, stores, alice, bob):
        await FriendshipService.send_friend_request(stores, alice, "bob")
        stores.friend_graphs = FailingFriendGraphStore(stores.friend_graphs._graphs, fail_user_id=alice.id)

        with pytest.raises(StoreFailureException):
            await FriendshipService.accept_friend_request(stores, bob, "alice")

        bob_graph = await _graph(stores, bob)
        alice_graph = await _graph(stores, alice)
        assert bob_graph.friends == set()
        assert bob_graph.pending_requests == {alice.id}
        assert alice_graph.friends == set()

    @pytest.mark.asyncio
    async def test_failed_reaccept_keeps_existing_friendship(self, stores, alice, bob):
        await FriendshipService.send_friend_request(stores, alice, "bob")
        await FriendshipService.accept_friend_request(stores, bob, "alice")
        stores.friend_graphs = FailingFriendGraphStore(stores.friend_graphs._graphs, fail_user_id=alice.id)

        result = await FriendshipService.accept_friend_request(stores, bob, "alice")

        assert result.success is True
        bob_graph = await _graph(stores, bob)
        assert bob_graph.friends == {alice.id}
        assert bob_graph.pending_requests == set()
        assert (await _graph(stores, alice)).friends == {bob.id}

    @pytest.mark.asyncio
    async def test_revert_restores_only_changed_memberships(self, stores, alice, bob):
        """수락 전부터 있던 상대 쪽 상태는 되돌리기 후에도 유지"""
        await FriendshipService.send_friend_request(stores, alice, "bob")
        await FriendshipService.send_friend_request(stores, bob, "alice")
        # 이전 실패로 남은 비대칭 상태: alice 쪽에만 bob 이 친구로 기록됨
        await stores.friend_graphs.add_to_set(alice.id, FriendField.FRIENDS, bob.id)
        stores.friend_graphs = FailingFriendGraphStore(
            stores.friend_graphs._graphs,
            fail_user_id=alice.id,
            fail_field=FriendField.PENDING_REQUESTS,
            fail_op="remove"
        )

        with pytest.raises(StoreFailureException):
            await FriendshipService.accept_friend_request(stores, bob, "alice")

        bob_graph = await _graph(stores, bob)
        alice_graph = await _graph(stores, alice)
        assert bob_graph.friends == set()
        assert bob_graph.pending_requests == {alice.id}
        assert alice_graph.friends == {bob.id}
        assert alice_graph.pending_requests == {bob.id}


class TestFriendQueries:
    """친구 목록/요청 목록/친구 일정 조회 테스트"""

    @pytest.mark.asyncio
    async def test_list_requests(self, stores, alice, bob, carol):
        await FriendshipService.send_friend_request(stores, alice, "carol")
        await FriendshipService.send_friend_request(stores, bob, "carol")

        requests = await FriendshipService.get_friend_requests(stores, carol)

        assert sorted(request.nickname for request in requests) == ["alice", "bob"]

    @pytest.mark.asyncio
    async def test_unresolvable_peer_reported_with_null_fields(self, stores, alice, bob):
        await FriendshipService.send_friend_request(stores, bob, "alice")
        await FriendshipService.accept_friend_request(stores, alice, "bob")
        await stores.friend_graphs.add_to_set(alice.id, FriendField.FRIENDS, "orphaned-user-id")

        friends = await FriendshipService.get_friends_list(stores, alice)

        assert len(friends) == 2
        assert {friend.nickname for friend in friends} == {"bob", None}
        orphan = next(friend for friend in friends if friend.nickname is None)
        assert orphan.profile_image is None

    @pytest.mark.asyncio
    async def test_friend_schedule(self, stores, alice, bob):
        await schedule_service.create_entry(
            stores,
            bob,
            ScheduleCreateRequest(work="Gym", place="Park", date="2024-05-01", start_time="07:00", end_time="08:00")
        )
        await FriendshipService.send_friend_request(stores, alice, "bob")
        await FriendshipService.accept_friend_request(stores, bob, "alice")

        entries = await FriendshipService.get_friend_schedule(stores, alice, "bob")

        assert [entry.work for entry in entries] == ["Gym"]

    @pytest.mark.asyncio
    async def test_friend_schedule_requires_friendship(self, stores, alice, bob):
        # 요청만 보낸 상태는 친구가 아님
        await FriendshipService.send_friend_request(stores, alice, "bob")

        with pytest.raises(AuthorizationException):
            await FriendshipService.get_friend_schedule(stores, alice, "bob")

    @pytest.mark.asyncio
    async def test_friend_schedule_unknown_nickname(self, stores, alice):
        with pytest.raises(ResourceNotFoundException):
            await FriendshipService.get_friend_schedule(stores, alice, "ghost")
