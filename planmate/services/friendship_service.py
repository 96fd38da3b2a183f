from typing import List, Set

from planmate.core.errors import (
    BaseCustomException,
    StoreFailureException,
    user_not_found_error,
    target_not_found_error,
    no_pending_request_error,
    self_request_error,
    not_friends_error
)
from planmate.core.logging import get_logger
from planmate.schemas import (
    User,
    FriendField,
    FriendGraph,
    FriendSummary,
    ScheduleEntry,
    MutationResult
)
from planmate.services import schedule_service
from planmate.stores.base import Stores

logger = get_logger(__name__)


class FriendshipService:
    """친구 관계 관리 서비스"""

    @staticmethod
    async def _peer_ids(stores: Stores, user_id: str, field: FriendField) -> Set[str]:
        graph = await stores.friend_graphs.find_by_user_id(user_id)
        if graph is None:
            return set()
        return getattr(graph, field.value)

    @staticmethod
    async def send_friend_request(
        stores: Stores,
        requester: User,
        target_nickname: str
    ) -> MutationResult:
        """
        친구 요청을 전송합니다.

        대상의 pending_requests 에 요청자를 추가합니다. 집합 연산이므로
        같은 요청을 반복해도 한 번만 기록됩니다. 요청자 쪽에는 아무것도 쓰지 않습니다.

        Args:
            stores: 저장소 묶음
            requester: 요청자
            target_nickname: 대상 사용자 닉네임

        Returns:
            MutationResult: 이미 친구인 경우에도 성공
        """
        target = await stores.profiles.find_by_nickname(target_nickname)
        if target is None:
            raise user_not_found_error(target_nickname)

        if target.user_id == requester.id:
            raise self_request_error()

        target_friends = await FriendshipService._peer_ids(stores, target.user_id, FriendField.FRIENDS)
        if requester.id in target_friends:
            return MutationResult(success=True, message="Already friends")

        await stores.friend_graphs.add_to_set(target.user_id, FriendField.PENDING_REQUESTS, requester.id)

        logger.info(
            "Friend request sent",
            extra={"requester": requester.id, "target": target.user_id}
        )
        return MutationResult(success=True, message="Friend request sent")

    @staticmethod
    async def accept_friend_request(
        stores: Stores,
        user: User,
        requester_nickname: str
    ) -> MutationResult:
        """
        친구 요청을 수락합니다.

        수락자의 pending_requests 에 요청자가 있어야 하며, 이미 친구라면
        아무것도 쓰지 않고 성공합니다. 두 레코드를 순서대로 갱신합니다.
        1) 수락자: pending_requests 에서 요청자 제거, friends 에 요청자 추가
        2) 요청자: friends 에 수락자 추가, pending_requests 에서 수락자 제거
        중간에 실패하면 두 레코드를 수락 전 상태로 되돌린 뒤 StoreFailureException 을 발생시킵니다.

        Args:
            stores: 저장소 묶음
            user: 수락하는 사용자
            requester_nickname: 요청자 닉네임

        Returns:
            MutationResult: 수락 결과
        """
        requester = await stores.profiles.find_by_nickname(requester_nickname)
        if requester is None:
            raise target_not_found_error(requester_nickname)

        graphs = stores.friend_graphs
        own = await graphs.find_by_user_id(user.id) or FriendGraph(user_id=user.id)

        if requester.user_id in own.friends:
            return MutationResult(success=True, message="Already friends")

        if requester.user_id not in own.pending_requests:
            raise no_pending_request_error(requester_nickname)

        peer = await graphs.find_by_user_id(requester.user_id) or FriendGraph(user_id=requester.user_id)

        try:
            await graphs.remove_from_set(user.id, FriendField.PENDING_REQUESTS, requester.user_id)
            await graphs.add_to_set(user.id, FriendField.FRIENDS, requester.user_id)
            await graphs.add_to_set(requester.user_id, FriendField.FRIENDS, user.id)
            await graphs.remove_from_set(requester.user_id, FriendField.PENDING_REQUESTS, user.id)
        except Exception as e:
            await FriendshipService._revert_acceptance(stores, own, peer)
            if isinstance(e, BaseCustomException):
                raise
            raise StoreFailureException("friend_graphs") from e

        logger.info(
            "Friend request accepted",
            extra={"accepter": user.id, "requester": requester.user_id}
        )
        return MutationResult(success=True, message="Friend request accepted")

    @staticmethod
    async def _revert_acceptance(stores: Stores, own: FriendGraph, peer: FriendGraph):
        """두 레코드의 상호 멤버십을 수락 전 스냅샷으로 복원 (보상 작업)"""
        graphs = stores.friend_graphs
        user_id, peer_id = own.user_id, peer.user_id
        memberships = [
            (user_id, FriendField.FRIENDS, peer_id, peer_id in own.friends),
            (user_id, FriendField.PENDING_REQUESTS, peer_id, peer_id in own.pending_requests),
            (peer_id, FriendField.FRIENDS, user_id, user_id in peer.friends),
            (peer_id, FriendField.PENDING_REQUESTS, user_id, user_id in peer.pending_requests),
        ]
        try:
            for owner, field, member, present in memberships:
                if present:
                    await graphs.add_to_set(owner, field, member)
                else:
                    await graphs.remove_from_set(owner, field, member)
            logger.warning(
                "Friend acceptance reverted after partial failure",
                extra={"accepter": user_id, "requester": peer_id}
            )
        except Exception:
            # 되돌리기마저 실패하면 그래프가 비대칭으로 남음
            logger.error(
                "Failed to revert friend acceptance, graph left asymmetric",
                extra={"accepter": user_id, "requester": peer_id},
                exc_info=True
            )

    @staticmethod
    async def reject_friend_request(
        stores: Stores,
        user: User,
        requester_nickname: str
    ) -> MutationResult:
        """
        친구 요청을 거절합니다.

        수락자의 pending_requests 에서만 제거하며 요청이 없어도 성공합니다.
        """
        requester = await stores.profiles.find_by_nickname(requester_nickname)
        if requester is None:
            raise target_not_found_error(requester_nickname)

        await stores.friend_graphs.remove_from_set(user.id, FriendField.PENDING_REQUESTS, requester.user_id)

        logger.info(
            "Friend request denied",
            extra={"denier": user.id, "requester": requester.user_id}
        )
        return MutationResult(success=True, message="Friend request denied")

    @staticmethod
    async def _summaries(stores: Stores, peer_ids: Set[str]) -> List[FriendSummary]:
        summaries = []
        for peer_id in sorted(peer_ids):
            profile = await stores.profiles.find_by_user_id(peer_id)
            if profile is None:
                # 조회할 수 없는 참조는 null 필드로 표시
                summaries.append(FriendSummary())
                continue
            summaries.append(FriendSummary(nickname=profile.nickname, profile_image=profile.profile_image))
        return summaries

    @staticmethod
    async def get_friends_list(stores: Stores, user: User) -> List[FriendSummary]:
        """사용자의 친구 목록을 조회합니다."""
        peer_ids = await FriendshipService._peer_ids(stores, user.id, FriendField.FRIENDS)
        return await FriendshipService._summaries(stores, peer_ids)

    @staticmethod
    async def get_friend_requests(stores: Stores, user: User) -> List[FriendSummary]:
        """사용자가 받은 친구 요청 목록을 조회합니다."""
        peer_ids = await FriendshipService._peer_ids(stores, user.id, FriendField.PENDING_REQUESTS)
        return await FriendshipService._summaries(stores, peer_ids)

    @staticmethod
    async def are_friends(stores: Stores, user_id: str, peer_id: str) -> bool:
        """peer_id 가 user_id 의 friends 에 있는지 확인합니다."""
        friends = await FriendshipService._peer_ids(stores, user_id, FriendField.FRIENDS)
        return peer_id in friends

    @staticmethod
    async def get_friend_schedule(
        stores: Stores,
        user: User,
        friend_nickname: str
    ) -> List[ScheduleEntry]:
        """
        친구의 일정 전체를 조회합니다.

        닉네임을 찾을 수 없으면 404, 친구가 아니면 403 입니다.
        """
        friend = await stores.profiles.find_by_nickname(friend_nickname)
        if friend is None:
            raise target_not_found_error(friend_nickname)

        if not await FriendshipService.are_friends(stores, user.id, friend.user_id):
            raise not_friends_error(friend_nickname)

        return await schedule_service.list_entries(stores, friend.user_id)
