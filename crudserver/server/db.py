"""
数据库模块

职责：
1. 定义 users 表结构
2. 提供数据访问层（Database类），并把 peewee 异常转换为带分类的 StorageError
"""
import sqlite3
import uuid
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from peewee import (
    SQL, IntegrityError, Model, PeeweeException, SqliteDatabase,
    CharField, DateTimeField, TextField, fn
)

from .errors import StorageError, UniquenessViolation
from .logger import get_logger
from .models import MUTABLE_FIELDS, User, UserCreate, UserFilters, UserUpdate

logger = get_logger("Database")

# SQLite 扩展错误码：唯一约束 / 主键冲突
_UNIQUE_ERROR_CODES = (
    sqlite3.SQLITE_CONSTRAINT_UNIQUE,
    sqlite3.SQLITE_CONSTRAINT_PRIMARYKEY,
)


def utcnow() -> datetime:
    """当前 UTC 时间（naive，与 CURRENT_TIMESTAMP 一致）"""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def new_user_id() -> str:
    return str(uuid.uuid4())


# ============================================================================
# 第一部分：表定义
# ============================================================================

class BaseTable(Model):
    """
    数据库表基类

    表不绑定具体数据库，由 Database 实例在每次操作时通过 bind_ctx 绑定
    """
    class Meta:
        database = None


class UserTable(BaseTable):
    """用户数据表"""
    # 规范的带连字符 UUID 文本
    id = CharField(primary_key=True, max_length=36, default=new_user_id)
    username = TextField(unique=True)
    email = TextField(unique=True)
    name = TextField()

    # 档案信息
    gender = TextField(null=True)
    bio = TextField(null=True)

    # 时间戳
    created_at = DateTimeField(column_name='createdAt', default=utcnow,
                               constraints=[SQL('DEFAULT CURRENT_TIMESTAMP')])
    updated_at = DateTimeField(column_name='updatedAt', default=utcnow,
                               constraints=[SQL('DEFAULT CURRENT_TIMESTAMP')])

    class Meta:
        table_name = 'users'


def get_all_tables():
    """获取所有表模型列表"""
    return [UserTable]


def _is_unique_violation(exc: IntegrityError) -> bool:
    # peewee 把驱动异常保存在 orig 上
    orig = getattr(exc, "orig", None) or exc.__context__
    return getattr(orig, "sqlite_errorcode", None) in _UNIQUE_ERROR_CODES


def _to_user(row: UserTable) -> User:
    return User(
        id=row.id,
        username=row.username,
        email=row.email,
        name=row.name,
        gender=row.gender,
        bio=row.bio,
        created_at=row.created_at,
        updated_at=row.updated_at
    )


# ============================================================================
# 第二部分：数据访问层
# ============================================================================

class Database:
    """
    数据访问层 - 封装所有 users 表操作

    由进程入口显式创建并注入服务层，不使用全局实例。

    使用示例：
        >>> db = Database("database.sqlite")
        >>> await db.connect()
        >>> db.create_tables()
        >>> user = await db.create(UserCreate(username="ana", email="ana@example.com", name="Ana"))
    """

    def __init__(self, db_path: str = "database.sqlite"):
        """
        创建 Database 实例

        Args:
            db_path: SQLite 数据库文件路径，":memory:" 为内存数据库
        """
        self.db_path = db_path
        pragmas = {}
        if db_path != ":memory:":
            # 确保数据库目录存在
            Path(db_path).parent.mkdir(parents=True, exist_ok=True)
            pragmas['journal_mode'] = 'wal'

        self.db = SqliteDatabase(db_path, pragmas=pragmas)

    async def connect(self):
        """连接数据库"""
        if self.db.is_closed():
            self.db.connect()

    async def disconnect(self):
        """断开数据库连接"""
        if not self.db.is_closed():
            self.db.close()

    @contextmanager
    def _session(self, action: str):
        """绑定表到当前数据库，并把 peewee 异常转换为 StorageError"""
        try:
            with self.db.bind_ctx(get_all_tables()):
                yield
        except IntegrityError as e:
            if _is_unique_violation(e):
                logger.info(f"{action} 违反唯一约束: {e}")
                raise UniquenessViolation(str(e)) from e
            logger.error(f"{action} 违反约束: {e}")
            raise StorageError(str(e)) from e
        except PeeweeException as e:
            logger.error(f"{action} 失败: {e}")
            raise StorageError(str(e)) from e

    # ------------------------------------------------------------------
    # 表管理
    # ------------------------------------------------------------------

    def table_exists(self, table=UserTable) -> bool:
        with self._session("检查表"):
            return table.table_exists()

    def create_tables(self) -> List[str]:
        """创建缺失的表，返回新建的表名"""
        created = []
        with self._session("建表"):
            for table in get_all_tables():
                if not table.table_exists():
                    table.create_table()
                    created.append(table._meta.table_name)
        return created

    def drop_tables(self):
        with self._session("删表"):
            self.db.drop_tables(get_all_tables())

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    async def create(self, user: UserCreate) -> User:
        """创建用户，生成 id，创建时间和更新时间相同；可选字段为空串时存为 NULL"""
        now = utcnow()
        with self._session("创建用户"):
            with self.db.atomic():
                row = UserTable.create(
                    id=new_user_id(),
                    username=user.username,
                    email=user.email,
                    name=user.name,
                    gender=user.gender or None,
                    bio=user.bio or None,
                    created_at=now,
                    updated_at=now
                )
            # 回读，保证返回值与存储内容一致
            return _to_user(UserTable.get_by_id(row.id))

    async def find_all(self, filters: Optional[UserFilters] = None) -> List[User]:
        """
        按条件查询用户，按创建时间倒序

        username / email / name 为区分大小写的子串匹配，gender 为精确匹配，
        多个条件之间为 AND。
        """
        active = filters.active() if filters else {}
        with self._session("查询用户列表"):
            query = UserTable.select()
            for field in ("username", "email", "name"):
                if field in active:
                    query = query.where(fn.INSTR(getattr(UserTable, field), active[field]) > 0)
            if "gender" in active:
                query = query.where(UserTable.gender == active["gender"])

            # 同一时间戳下按插入顺序倒序
            query = query.order_by(UserTable.created_at.desc(), SQL('rowid').desc())
            return [_to_user(row) for row in query]

    async def find_by_id(self, user_id: str) -> Optional[User]:
        """根据ID获取用户，不存在时返回 None"""
        with self._session("查询用户"):
            row = UserTable.get_or_none(UserTable.id == user_id)
            return _to_user(row) if row else None

    async def update(self, user_id: str, user: UserUpdate) -> Optional[User]:
        """
        部分更新

        只写入显式提供的字段并刷新更新时间；没有任何字段时不写库，
        直接返回当前记录。用户不存在时返回 None。
        """
        changes = {field: value for field, value in user.changes().items() if field in MUTABLE_FIELDS}
        if not changes:
            return await self.find_by_id(user_id)

        with self._session("更新用户"):
            with self.db.atomic():
                updated = (UserTable
                           .update(updated_at=utcnow(), **changes)
                           .where(UserTable.id == user_id)
                           .execute())
                if not updated:
                    return None
                return _to_user(UserTable.get_by_id(user_id))

    async def delete(self, user_id: str) -> bool:
        """删除用户，返回是否删除了记录"""
        with self._session("删除用户"):
            with self.db.atomic():
                deleted = UserTable.delete().where(UserTable.id == user_id).execute()
        return deleted > 0
