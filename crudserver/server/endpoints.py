"""
用户接口

每个请求依次经过：解析 -> 校验 -> 服务层 -> 写响应。
校验失败抛出 InvalidInput，由全局异常处理器返回 400。
"""
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, Request, Response
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from .db import Database
from .models import ErrorResponse, ServiceResult, User, UserFilters
from .services import UserService
from .validation import validate_create, validate_update, validate_user_id

router = APIRouter()

users_router = APIRouter(prefix="/users", tags=["users"])

ERROR_RESPONSES = {
    400: {"model": ErrorResponse},
    404: {"model": ErrorResponse},
    409: {"model": ErrorResponse},
    500: {"model": ErrorResponse},
}


@router.get("/")
async def root():
    """
    根路径 - 服务状态检查

    返回:
    - 200: {"message": "CRUD Server API"}
    """
    return {"message": "CRUD Server API"}


# 依赖注入：数据库句柄由应用持有，不在请求中创建
def get_db(request: Request) -> Database:
    """获取应用持有的数据库句柄"""
    return request.app.state.database


def get_user_service(
        db: Database = Depends(get_db)
) -> UserService:
    return UserService(db)


def to_response(result: ServiceResult) -> Response:
    """把服务层结果写成 HTTP 响应"""
    if not result.success:
        return JSONResponse(status_code=result.status_code, content={"error": result.error})
    if result.status_code == 204:
        return Response(status_code=204)
    return JSONResponse(
        status_code=result.status_code,
        content=jsonable_encoder(result.data, by_alias=True)
    )


@users_router.post("", response_model=User, status_code=201, responses=ERROR_RESPONSES)
@users_router.post("/", status_code=201, include_in_schema=False)
async def create_user(payload: Any = Body(default=None),
                      service: UserService = Depends(get_user_service)):
    """
    创建用户

    HTTP调用方式:
    POST /api/users
    Content-Type: application/json
    Body: {
        "username": "用户名",
        "email": "邮箱",
        "name": "显示名称",
        "gender": "性别（可选）",
        "bio": "个人简介（可选）"
    }

    返回:
    - 201: 创建的User对象
    - 400: 参数校验失败（所有失败项合并为一条信息）
    - 409: 用户名或邮箱已存在
    """
    user_data = validate_create(payload)
    return to_response(await service.create_user(user_data))


@users_router.get("", response_model=list[User], responses={500: {"model": ErrorResponse}})
@users_router.get("/", include_in_schema=False)
async def list_users(username: Optional[str] = None,
                     email: Optional[str] = None,
                     name: Optional[str] = None,
                     gender: Optional[str] = None,
                     service: UserService = Depends(get_user_service)):
    """
    获取用户列表，按创建时间倒序

    查询参数（均可选，AND 组合）:
    - username / email / name: 子串匹配（区分大小写）
    - gender: 精确匹配
    """
    filters = UserFilters(username=username, email=email, name=name, gender=gender)
    return to_response(await service.list_users(filters))


@users_router.get("/{user_id}", response_model=User, responses=ERROR_RESPONSES)
async def get_user(user_id: str, service: UserService = Depends(get_user_service)):
    """
    根据ID获取用户

    返回:
    - 200: User对象
    - 400: ID格式错误
    - 404: 用户不存在
    """
    user_id = validate_user_id(user_id)
    return to_response(await service.get_user(user_id))


@users_router.put("/{user_id}", response_model=User, responses=ERROR_RESPONSES)
async def update_user(user_id: str,
                      payload: Any = Body(default=None),
                      service: UserService = Depends(get_user_service)):
    """
    部分更新用户，只修改请求中提供的字段

    返回:
    - 200: 更新后的User对象（未提供任何字段时原样返回）
    - 400: ID格式错误或参数校验失败
    - 404: 用户不存在
    - 409: 用户名或邮箱已被其他用户使用
    """
    user_id = validate_user_id(user_id)
    user_data = validate_update(payload)
    return to_response(await service.update_user(user_id, user_data))


@users_router.delete("/{user_id}", status_code=204, responses=ERROR_RESPONSES)
async def delete_user(user_id: str, service: UserService = Depends(get_user_service)):
    """
    删除用户（物理删除）

    返回:
    - 204: 删除成功，无响应体
    - 400: ID格式错误
    - 404: 用户不存在
    """
    user_id = validate_user_id(user_id)
    return to_response(await service.delete_user(user_id))
