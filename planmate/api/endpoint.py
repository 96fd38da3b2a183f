from typing import Any, Dict

from fastapi import APIRouter, Depends, Request
from fastapi.encoders import jsonable_encoder
from pydantic import BaseModel, Field

from planmate.api.dependencies import get_context
from planmate.api.operations import OperationName, dispatch
from planmate.core.context import AppContext

router = APIRouter(tags=["Operations"])


class OperationRequest(BaseModel):
    """단일 쿼리/뮤테이션 요청"""
    operation: OperationName = Field(..., description="오퍼레이션 이름 (예: signIn, friends)")
    variables: Dict[str, Any] = Field(default_factory=dict, description="오퍼레이션 인자")


@router.post("/api")
async def execute_operation(
        body: OperationRequest,
        request: Request,
        context: AppContext = Depends(get_context)
) -> dict:
    """
    쿼리/뮤테이션 실행

    Authorization 헤더는 인증이 필요한 오퍼레이션에서만 사용됩니다.
    """
    result = await dispatch(
        context,
        body.operation,
        body.variables,
        request.headers.get("Authorization")
    )
    return {"data": jsonable_encoder(result)}
