"""
쿼리/뮤테이션 오퍼레이션 디스패치 테이블

모든 오퍼레이션은 OperationName 으로 열거되고, 하나의 Operation 항목이
인자 모델, 핸들러, 인증 필요 여부를 정의합니다. 핸들러는 공통으로
(context, identity, arguments) -> result 형태를 따릅니다.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Awaitable, Callable, Dict, Optional, Type

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from planmate.api.dependencies import Authorizer
from planmate.core.context import AppContext
from planmate.core.errors import ValidationException, ValidationError
from planmate.core.logging import get_logger, log_operation
from planmate.schemas import (
    User,
    SignUpRequest,
    SignInRequest,
    EmailLookupRequest,
    EmailLookupResult,
    ProfileUpdateRequest,
    ScheduleCreateRequest,
    ScheduleUpdateRequest,
    ScheduleDeleteRequest,
    NicknameRequest
)
from planmate.services import auth_service, profile_service, schedule_service, FriendshipService

logger = get_logger(__name__)


class OperationName(str, Enum):
    # Mutations
    SIGN_UP = "signUp"
    SIGN_IN = "signIn"
    UPDATE_PROFILE = "updateProfile"
    CREATE_SCHEDULE = "createSchedule"
    UPDATE_SCHEDULE = "updateSchedule"
    DELETE_SCHEDULE = "deleteSchedule"
    REQUEST_FRIEND = "requestFriend"
    ACCEPT_FRIEND = "acceptFriend"
    DENY_FRIEND = "denyFriend"
    # Queries
    EMAIL_EXISTS = "emailExists"
    ME = "me"
    MY_SCHEDULES = "mySchedules"
    FRIENDS = "friends"
    FRIEND_REQUESTS = "friendRequests"
    FRIEND_SCHEDULES = "friendSchedules"


class OperationKind(str, Enum):
    QUERY = "query"
    MUTATION = "mutation"


class NoArguments(BaseModel):
    pass


Handler = Callable[[AppContext, Optional[User], Any], Awaitable[Any]]


@dataclass(frozen=True)
class Operation:
    name: OperationName
    kind: OperationKind
    arguments_model: Type[BaseModel]
    handler: Handler
    requires_auth: bool = True


# =============================================================================
# Handlers
# =============================================================================

async def _sign_up(context: AppContext, identity: Optional[User], args: SignUpRequest):
    return await auth_service.sign_up(context.stores, args.email, args.password, args.confirm_password)


async def _sign_in(context: AppContext, identity: Optional[User], args: SignInRequest):
    return await auth_service.sign_in(context.stores, context.tokens, args.email, args.password)


async def _email_exists(context: AppContext, identity: Optional[User], args: EmailLookupRequest):
    return EmailLookupResult(exists=await auth_service.is_email_exists(context.stores, args.email))


async def _me(context: AppContext, identity: User, args: NoArguments):
    return await profile_service.get_profile(context.stores, identity)


async def _update_profile(context: AppContext, identity: User, args: ProfileUpdateRequest):
    return await profile_service.update_profile(context.stores, identity, args)


async def _my_schedules(context: AppContext, identity: User, args: NoArguments):
    return await schedule_service.list_entries(context.stores, identity.id)


async def _create_schedule(context: AppContext, identity: User, args: ScheduleCreateRequest):
    return await schedule_service.create_entry(context.stores, identity, args)


async def _update_schedule(context: AppContext, identity: User, args: ScheduleUpdateRequest):
    return await schedule_service.update_entry(context.stores, identity, args)


async def _delete_schedule(context: AppContext, identity: User, args: ScheduleDeleteRequest):
    return await schedule_service.delete_entry(context.stores, identity, args.key)


async def _request_friend(context: AppContext, identity: User, args: NicknameRequest):
    return await FriendshipService.send_friend_request(context.stores, identity, args.nickname)


async def _accept_friend(context: AppContext, identity: User, args: NicknameRequest):
    return await FriendshipService.accept_friend_request(context.stores, identity, args.nickname)


async def _deny_friend(context: AppContext, identity: User, args: NicknameRequest):
    return await FriendshipService.reject_friend_request(context.stores, identity, args.nickname)


async def _friends(context: AppContext, identity: User, args: NoArguments):
    return await FriendshipService.get_friends_list(context.stores, identity)


async def _friend_requests(context: AppContext, identity: User, args: NoArguments):
    return await FriendshipService.get_friend_requests(context.stores, identity)


async def _friend_schedules(context: AppContext, identity: User, args: NicknameRequest):
    return await FriendshipService.get_friend_schedule(context.stores, identity, args.nickname)


OPERATIONS: Dict[OperationName, Operation] = {
    op.name: op for op in [
        Operation(OperationName.SIGN_UP, OperationKind.MUTATION, SignUpRequest, _sign_up, requires_auth=False),
        Operation(OperationName.SIGN_IN, OperationKind.MUTATION, SignInRequest, _sign_in, requires_auth=False),
        Operation(OperationName.UPDATE_PROFILE, OperationKind.MUTATION, ProfileUpdateRequest, _update_profile),
        Operation(OperationName.CREATE_SCHEDULE, OperationKind.MUTATION, ScheduleCreateRequest, _create_schedule),
        Operation(OperationName.UPDATE_SCHEDULE, OperationKind.MUTATION, ScheduleUpdateRequest, _update_schedule),
        Operation(OperationName.DELETE_SCHEDULE, OperationKind.MUTATION, ScheduleDeleteRequest, _delete_schedule),
        Operation(OperationName.REQUEST_FRIEND, OperationKind.MUTATION, NicknameRequest, _request_friend),
        Operation(OperationName.ACCEPT_FRIEND, OperationKind.MUTATION, NicknameRequest, _accept_friend),
        Operation(OperationName.DENY_FRIEND, OperationKind.MUTATION, NicknameRequest, _deny_friend),
        Operation(OperationName.EMAIL_EXISTS, OperationKind.QUERY, EmailLookupRequest, _email_exists, requires_auth=False),
        Operation(OperationName.ME, OperationKind.QUERY, NoArguments, _me),
        Operation(OperationName.MY_SCHEDULES, OperationKind.QUERY, NoArguments, _my_schedules),
        Operation(OperationName.FRIENDS, OperationKind.QUERY, NoArguments, _friends),
        Operation(OperationName.FRIEND_REQUESTS, OperationKind.QUERY, NoArguments, _friend_requests),
        Operation(OperationName.FRIEND_SCHEDULES, OperationKind.QUERY, NicknameRequest, _friend_schedules),
    ]
}


def _parse_arguments(operation: Operation, variables: Dict[str, Any]) -> BaseModel:
    try:
        return operation.arguments_model.model_validate(variables)
    except PydanticValidationError as e:
        raise ValidationException(
            f"Invalid arguments for {operation.name.value}",
            validation_errors=[
                ValidationError(
                    field=".".join(str(loc) for loc in error["loc"]),
                    message=error["msg"]
                )
                for error in e.errors()
            ]
        )


async def dispatch(
    context: AppContext,
    name: OperationName,
    variables: Dict[str, Any],
    authorization: Optional[str] = None
) -> Any:
    """
    오퍼레이션 실행

    인증이 필요한 오퍼레이션은 인자 검증이나 저장소 접근보다 먼저 토큰을 검증합니다.
    """
    operation = OPERATIONS[name]

    identity = None
    if operation.requires_auth:
        identity = await Authorizer(context.stores, context.tokens).authenticate(authorization)

    arguments = _parse_arguments(operation, variables)

    try:
        result = await operation.handler(context, identity, arguments)
    except Exception:
        log_operation(logger, name.value, operation.kind.value, success=False)
        raise

    log_operation(logger, name.value, operation.kind.value)
    return result
