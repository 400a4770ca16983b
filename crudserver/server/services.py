"""
用户服务层：把存储层结果和异常统一为 ServiceResult
"""
from typing import List, Optional

from .db import Database
from .errors import StorageError, UniquenessViolation
from .logger import get_logger
from .models import ServiceResult, User, UserCreate, UserFilters, UserUpdate

logger = get_logger("UserService")

DUPLICATE_USER = "Username or email already exists"
USER_NOT_FOUND = "User not found"


class UserService:
    """
    用户服务

    把已校验的输入转换为存储层调用，并把结果统一为 ServiceResult：
    - 唯一约束冲突 -> 409
    - 记录不存在 -> 404
    - 其他存储错误 -> 500（只返回通用信息，细节写日志）
    """

    def __init__(self, db: Database):
        self.db = db

    async def create_user(self, user_data: UserCreate) -> ServiceResult[User]:
        try:
            user = await self.db.create(user_data)
        except UniquenessViolation:
            return ServiceResult.fail(DUPLICATE_USER, 409)
        except StorageError as e:
            logger.error(f"创建用户失败: {e}")
            return ServiceResult.fail("Failed to create user", 500)

        logger.info(f"用户已创建: {user.id}")
        return ServiceResult.ok(user, 201)

    async def list_users(self, filters: Optional[UserFilters] = None) -> ServiceResult[List[User]]:
        try:
            users = await self.db.find_all(filters)
        except StorageError as e:
            logger.error(f"查询用户列表失败: {e}")
            return ServiceResult.fail("Failed to fetch users", 500)
        return ServiceResult.ok(users, 200)

    async def get_user(self, user_id: str) -> ServiceResult[User]:
        try:
            user = await self.db.find_by_id(user_id)
        except StorageError as e:
            logger.error(f"查询用户失败: {e}")
            return ServiceResult.fail("Failed to fetch user", 500)

        if user is None:
            return ServiceResult.fail(USER_NOT_FOUND, 404)
        return ServiceResult.ok(user, 200)

    async def update_user(self, user_id: str, user_data: UserUpdate) -> ServiceResult[User]:
        try:
            user = await self.db.update(user_id, user_data)
        except UniquenessViolation:
            return ServiceResult.fail(DUPLICATE_USER, 409)
        except StorageError as e:
            logger.error(f"更新用户失败: {e}")
            return ServiceResult.fail("Failed to update user", 500)

        if user is None:
            return ServiceResult.fail(USER_NOT_FOUND, 404)
        logger.info(f"用户已更新: {user_id}")
        return ServiceResult.ok(user, 200)

    async def delete_user(self, user_id: str) -> ServiceResult:
        try:
            deleted = await self.db.delete(user_id)
        except StorageError as e:
            logger.error(f"删除用户失败: {e}")
            return ServiceResult.fail("Failed to delete user", 500)

        if not deleted:
            return ServiceResult.fail(USER_NOT_FOUND, 404)
        logger.info(f"用户已删除: {user_id}")
        return ServiceResult.ok(None, 204)
