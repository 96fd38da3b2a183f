from typing import Optional, Dict, Any, List
from fastapi import HTTPException, status
from pydantic import BaseModel


class ErrorResponse(BaseModel):
    """표준 에러 응답 모델"""
    error: str
    message: str
    details: Optional[Dict[str, Any]] = None
    status_code: int


class ValidationError(BaseModel):
    """검증 에러 세부사항"""
    field: str
    message: str
    value: Optional[Any] = None


# =============================================================================
# 커스텀 예외 클래스들
# =============================================================================

class BaseCustomException(HTTPException):
    """기본 커스텀 예외 클래스"""
    def __init__(
        self,
        status_code: int,
        error: str,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        self.error = error
        self.message = message
        self.details = details
        self.status_code = status_code
        super().__init__(status_code=status_code, detail=self.to_dict())

    def to_dict(self) -> Dict[str, Any]:
        """예외를 딕셔너리로 변환"""
        return {
            "error": self.error,
            "message": self.message,
            "details": self.details,
            "status_code": self.status_code
        }


class ValidationException(BaseCustomException):
    """입력 검증 실패 예외"""
    def __init__(
        self,
        message: str = "Validation failed",
        validation_errors: Optional[List[ValidationError]] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        self.validation_errors = validation_errors or []
        super().__init__(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            error="validation_error",
            message=message,
            details=details
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error": self.error,
            "message": self.message,
            "validation_errors": [error.model_dump() for error in self.validation_errors],
            "status_code": self.status_code
        }


class AuthenticationException(BaseCustomException):
    """인증 실패 예외"""
    def __init__(
        self,
        message: str = "Authentication failed",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            error="authentication_error",
            message=message,
            details=details
        )


class AuthorizationException(BaseCustomException):
    """권한 부족 예외"""
    def __init__(
        self,
        message: str = "Access denied",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status.HTTP_403_FORBIDDEN,
            error="authorization_error",
            message=message,
            details=details
        )


class ResourceNotFoundException(BaseCustomException):
    """리소스를 찾을 수 없음 예외"""
    def __init__(
        self,
        resource: str = "Resource",
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        if message is None:
            message = f"{resource} not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error="resource_not_found",
            message=message,
            details=details or {"resource": resource}
        )


class ConflictException(BaseCustomException):
    """리소스 충돌 예외"""
    def __init__(
        self,
        message: str = "Resource conflict",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error="resource_conflict",
            message=message,
            details=details
        )


class BusinessLogicException(BaseCustomException):
    """비즈니스 로직 예외"""
    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error="business_logic_error",
            message=message,
            details=details
        )


class StoreFailureException(BaseCustomException):
    """저장소 접근/쓰기 실패 예외"""
    def __init__(
        self,
        store: str,
        message: str = "Data store operation failed",
        details: Optional[Dict[str, Any]] = None
    ):
        super().__init__(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            error="store_failure",
            message=message,
            details=details or {"store": store}
        )


# =============================================================================
# 자주 사용되는 에러 팩토리 함수들
# =============================================================================

def unauthenticated_error():
    """토큰 없음 에러"""
    return AuthenticationException("Authentication required")


def invalid_token_error():
    """잘못된 토큰 에러 (서명 오류/형식 오류/만료 구분 없음)"""
    return AuthenticationException("Invalid or expired token")


def invalid_credentials_error():
    """잘못된 인증 정보 에러 (이메일 존재 여부를 드러내지 않음)"""
    return AuthenticationException("Invalid email or password")


def user_not_found_error(identifier: Optional[str] = None):
    """사용자를 찾을 수 없음 에러"""
    details = {"user": identifier} if identifier else None
    return ResourceNotFoundException("User", details=details)


def target_not_found_error(nickname: str):
    """닉네임 조회 실패 에러"""
    return ResourceNotFoundException(
        "User",
        message=f"No user with nickname '{nickname}'",
        details={"nickname": nickname}
    )


def self_request_error():
    """자기 자신에게 친구 요청 에러"""
    return BusinessLogicException("Cannot send friend request to yourself")


def not_friends_error(nickname: str):
    """친구가 아닌 사용자 접근 에러"""
    return AuthorizationException(
        "You are not friends with this user",
        details={"nickname": nickname}
    )


def no_pending_request_error(nickname: str):
    """수락할 친구 요청이 없음 에러"""
    return ResourceNotFoundException(
        "FriendRequest",
        message=f"No pending friend request from '{nickname}'",
        details={"nickname": nickname}
    )


def email_already_exists_error():
    """이메일 중복 에러"""
    return ConflictException("Email already registered")


def nickname_already_exists_error():
    """닉네임 중복 에러"""
    return ConflictException("Nickname already taken")
