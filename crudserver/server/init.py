"""
服务器初始化模块
职责：数据库迁移、重置、环境检查等启动相关操作

命令行用法：
    python -m crudserver.server.init --migrate
    python -m crudserver.server.init --reset
    python -m crudserver.server.init --check
"""
import argparse
import sys
from pathlib import Path

from .config import Settings, get_settings
from .db import Database, get_all_tables
from .errors import StorageError
from .logger import get_logger

logger = get_logger("ServerInit")


def migrate_database(db: Database):
    """数据库迁移 - 保留数据，只创建缺失的表"""
    try:
        created = db.create_tables()
        for table_name in created:
            logger.info(f"创建新表: {table_name}")
        logger.info("✅ 数据库迁移完成")
    except StorageError as e:
        logger.error(f"❌ 数据库迁移失败: {e}")
        raise


def reset_database(db: Database):
    """重置数据库 - 完全清空重建（仅开发环境使用）"""
    logger.warning("⚠️ 即将完全重置数据库，所有数据将丢失！")
    try:
        db.drop_tables()
        db.create_tables()
        logger.info("✅ 数据库重置完成")
    except StorageError as e:
        logger.error(f"❌ 数据库重置失败: {e}")
        raise


def check_database(db: Database) -> bool:
    """检查数据库表状态"""
    try:
        logger.info("🔍 检查数据库状态...")
        all_exist = True
        for table in get_all_tables():
            exists = db.table_exists(table)
            all_exist = all_exist and exists
            logger.info(f"{'✅' if exists else '❌'} {table._meta.table_name}")
        return all_exist
    except StorageError as e:
        logger.error(f"❌ 数据库检查失败: {e}")
        return False


def check_sqlite(settings: Settings = None) -> bool:
    """
    检查 SQLite 数据库文件和连接

    Returns:
        bool: SQLite 是否可用
    """
    settings = settings or get_settings()
    db_path = Path(settings.sqlite_path)

    try:
        db_dir = db_path.parent
        if not db_dir.exists():
            db_dir.mkdir(parents=True, exist_ok=True)

        db = Database(settings.sqlite_path)
        db.db.connect()
        db.db.close()
        return True

    except PermissionError as e:
        logger.error(f"❌ SQLite 权限错误: 无法访问 {settings.sqlite_path}")
        logger.error(f"   错误信息: {e}")
        return False
    except Exception as e:
        logger.error(f"❌ SQLite 检查失败: {e}")
        return False


def check_environment(settings: Settings = None) -> bool:
    """
    检查所有环境依赖

    Returns:
        bool: 所有检查是否通过
    """
    settings = settings or get_settings()

    if check_sqlite(settings):
        return True

    logger.error("=" * 60)
    logger.error("❌ 环境检查失败")
    logger.error("💡 请检查 SQLite 数据库文件路径是否可写 (.env 文件中的 SQLITE_PATH)")
    logger.error("=" * 60)
    return False


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="crud-server 数据库管理")
    group = parser.add_mutually_exclusive_group(required=True)
    group.add_argument("--migrate", action="store_true", help="创建缺失的表")
    group.add_argument("--reset", action="store_true", help="删除并重建所有表")
    group.add_argument("--check", action="store_true", help="检查数据库状态")
    args = parser.parse_args(argv)

    settings = get_settings()
    if not check_environment(settings):
        return 1

    db = Database(settings.sqlite_path)
    db.db.connect()
    try:
        if args.migrate:
            migrate_database(db)
        elif args.reset:
            reset_database(db)
        else:
            return 0 if check_database(db) else 1
    finally:
        db.db.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
