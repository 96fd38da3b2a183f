import re
from datetime import datetime
from typing import Optional, List, Any

from .errors import ValidationException, ValidationError


EMAIL_PATTERN = re.compile(r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$')
PHONE_PATTERN = re.compile(r'^\d{2,3}-?\d{3,4}-?\d{4}$')
TIME_PATTERN = re.compile(r'^([01]\d|2[0-3]):[0-5]\d$')
CONTROL_CHARS = re.compile(r'[\x00-\x1f\x7f]')

GENDERS = ["Male", "Female", "Hide"]


class Validator:
    """입력 검증을 위한 유틸리티 클래스"""

    @staticmethod
    def validate_required(value: Any, field_name: str) -> Any:
        """필수 필드 검증"""
        if value is None or (isinstance(value, str) and value.strip() == ""):
            raise ValidationException(
                f"{field_name} is required",
                validation_errors=[
                    ValidationError(field=field_name, message="This field is required", value=value)
                ]
            )
        return value

    @staticmethod
    def validate_string_length(
        value: str,
        field_name: str,
        min_length: Optional[int] = None,
        max_length: Optional[int] = None
    ) -> str:
        """문자열 길이 검증"""
        errors = []

        if min_length and len(value) < min_length:
            errors.append(
                ValidationError(
                    field=field_name,
                    message=f"Must be at least {min_length} characters long",
                    value=len(value)
                )
            )

        if max_length and len(value) > max_length:
            errors.append(
                ValidationError(
                    field=field_name,
                    message=f"Must be no more than {max_length} characters long",
                    value=len(value)
                )
            )

        if errors:
            raise ValidationException(
                f"{field_name} length validation failed",
                validation_errors=errors
            )

        return value

    @staticmethod
    def validate_email_format(email: str, field_name: str = "email") -> str:
        """이메일 형식 검증"""
        if not EMAIL_PATTERN.match(email or ""):
            raise ValidationException(
                "Invalid email format",
                validation_errors=[
                    ValidationError(
                        field=field_name,
                        message="Invalid email format",
                        value=email
                    )
                ]
            )
        return email

    @staticmethod
    def validate_password_strength(password: str, field_name: str = "password") -> str:
        """비밀번호 강도 검증 (6-20자, 영문+숫자)"""
        errors = []

        if len(password) < 6:
            errors.append(
                ValidationError(
                    field=field_name,
                    message="Password must be at least 6 characters long",
                    value=len(password)
                )
            )
        elif len(password) > 20:
            errors.append(
                ValidationError(
                    field=field_name,
                    message="Password must be no more than 20 characters long",
                    value=len(password)
                )
            )

        if not re.search(r'[a-zA-Z]', password):
            errors.append(
                ValidationError(
                    field=field_name,
                    message="Password must contain at least one letter"
                )
            )

        if not re.search(r'\d', password):
            errors.append(
                ValidationError(
                    field=field_name,
                    message="Password must contain at least one digit"
                )
            )

        if errors:
            raise ValidationException(
                "Password does not meet security requirements",
                validation_errors=errors
            )

        return password

    @staticmethod
    def validate_password_confirmation(
        password: str,
        confirm_password: str,
        field_name: str = "confirm_password"
    ) -> str:
        """비밀번호 확인 일치 검증"""
        if password != confirm_password:
            raise ValidationException(
                "Passwords do not match",
                validation_errors=[
                    ValidationError(
                        field=field_name,
                        message="Password confirmation does not match"
                    )
                ]
            )
        return confirm_password

    @staticmethod
    def validate_nickname(nickname: str, field_name: str = "nickname") -> str:
        """닉네임 검증"""
        nickname = nickname.strip()
        errors = []

        if len(nickname) < 2:
            errors.append(
                ValidationError(
                    field=field_name,
                    message="Nickname must be at least 2 characters long",
                    value=len(nickname)
                )
            )
        elif len(nickname) > 20:
            errors.append(
                ValidationError(
                    field=field_name,
                    message="Nickname must be no more than 20 characters long",
                    value=len(nickname)
                )
            )

        if CONTROL_CHARS.search(nickname):
            errors.append(
                ValidationError(
                    field=field_name,
                    message="Nickname cannot contain control characters"
                )
            )

        if errors:
            raise ValidationException(
                "Nickname validation failed",
                validation_errors=errors
            )

        return nickname

    @staticmethod
    def validate_phone_number(phone_number: str, field_name: str = "phone_number") -> str:
        """전화번호 형식 검증"""
        if not PHONE_PATTERN.match(phone_number):
            raise ValidationException(
                "Invalid phone number format",
                validation_errors=[
                    ValidationError(
                        field=field_name,
                        message="Phone number must look like 010-1234-5678",
                        value=phone_number
                    )
                ]
            )
        return phone_number

    @staticmethod
    def validate_range(value: int, field_name: str, minimum: int, maximum: int) -> int:
        """정수 범위 검증"""
        if value < minimum or value > maximum:
            raise ValidationException(
                f"{field_name} is out of range",
                validation_errors=[
                    ValidationError(
                        field=field_name,
                        message=f"Must be between {minimum} and {maximum}",
                        value=value
                    )
                ]
            )
        return value

    @staticmethod
    def validate_enum(value: str, allowed_values: List[str], field_name: str) -> str:
        """열거형 값 검증"""
        if value not in allowed_values:
            raise ValidationException(
                f"Invalid {field_name}",
                validation_errors=[
                    ValidationError(
                        field=field_name,
                        message=f"Must be one of: {', '.join(allowed_values)}",
                        value=value
                    )
                ]
            )
        return value

    @staticmethod
    def validate_date(value: str, field_name: str = "date") -> str:
        """날짜 형식 검증 (YYYY-MM-DD)"""
        try:
            datetime.strptime(value, "%Y-%m-%d")
        except (TypeError, ValueError):
            raise ValidationException(
                "Invalid date format",
                validation_errors=[
                    ValidationError(
                        field=field_name,
                        message="Date must be in YYYY-MM-DD format",
                        value=value
                    )
                ]
            )
        return value

    @staticmethod
    def validate_time(value: str, field_name: str) -> str:
        """시간 형식 검증 (HH:MM, 24시간제)"""
        if not TIME_PATTERN.match(value or ""):
            raise ValidationException(
                "Invalid time format",
                validation_errors=[
                    ValidationError(
                        field=field_name,
                        message="Time must be in HH:MM format",
                        value=value
                    )
                ]
            )
        return value

    @staticmethod
    def validate_time_order(start_time: str, end_time: str, field_name: str = "end_time") -> str:
        """종료 시간이 시작 시간보다 앞서지 않는지 검증"""
        # HH:MM 고정 폭이므로 문자열 비교로 충분
        if end_time < start_time:
            raise ValidationException(
                "End time precedes start time",
                validation_errors=[
                    ValidationError(
                        field=field_name,
                        message="End time must not be earlier than start time",
                        value=end_time
                    )
                ]
            )
        return end_time

    @staticmethod
    def validate_multiple_fields(validations: List[callable]) -> List[Any]:
        """여러 필드 동시 검증"""
        errors = []
        results = []

        for validation_func in validations:
            try:
                result = validation_func()
                results.append(result)
            except ValidationException as e:
                errors.extend(e.validation_errors)

        if errors:
            raise ValidationException(
                "Multiple validation errors",
                validation_errors=errors
            )

        return results


# 편의 함수들
def validate_sign_up(email: str, password: str, confirm_password: str):
    """회원가입 데이터 전체 검증"""
    validator = Validator()

    validations = [
        lambda: validator.validate_required(email, "email"),
        lambda: validator.validate_email_format(email),
        lambda: validator.validate_required(password, "password"),
        lambda: validator.validate_password_strength(password),
        lambda: validator.validate_password_confirmation(password, confirm_password),
    ]

    return validator.validate_multiple_fields(validations)


def validate_profile_update(
    nickname: Optional[str] = None,
    phone_number: Optional[str] = None,
    age: Optional[int] = None,
    gender: Optional[str] = None,
    address: Optional[str] = None
):
    """프로필 수정 데이터 검증"""
    validator = Validator()
    validations = []

    if nickname is not None:
        validations.append(lambda: validator.validate_nickname(nickname))

    if phone_number is not None:
        validations.append(lambda: validator.validate_phone_number(phone_number))

    if age is not None:
        validations.append(lambda: validator.validate_range(age, "age", 0, 150))

    if gender is not None:
        validations.append(lambda: validator.validate_enum(gender, GENDERS, "gender"))

    if address is not None:
        validations.append(lambda: validator.validate_string_length(address, "address", max_length=200))

    if validations:
        return validator.validate_multiple_fields(validations)

    return []


def validate_schedule_entry(work: str, place: str, date: str, start_time: str, end_time: str):
    """일정 항목 데이터 검증"""
    validator = Validator()

    validations = [
        lambda: validator.validate_required(work, "work"),
        lambda: validator.validate_string_length(work, "work", max_length=100),
        lambda: validator.validate_string_length(place or "", "place", max_length=100),
        lambda: validator.validate_date(date),
        lambda: validator.validate_time(start_time, "start_time"),
        lambda: validator.validate_time(end_time, "end_time"),
    ]
    validator.validate_multiple_fields(validations)

    # 형식이 모두 유효할 때만 순서 검증
    return validator.validate_time_order(start_time, end_time)
