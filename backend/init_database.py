#!/usr/bin/env python3
"""
数据库初始化脚本
创建所有必要的数据库表
"""

import sys
from pathlib import Path

# 添加项目根目录到Python路径
project_root = Path(__file__).parent
sys.path.insert(0, str(project_root))

from sqlalchemy import inspect
from participation.core.config import settings
from participation.db.database import engine
from participation.db.init_db import init_db


def init_database():
    """初始化数据库"""
    print(f"🗄️  初始化数据库: {settings.DATABASE_URL}")

    try:
        print("📋 创建参与者表...")
        init_db(engine)
        print("✅ 数据库初始化完成!")

        # 验证表是否创建成功
        tables = inspect(engine).get_table_names()
        print(f"📊 已创建的表: {tables}")

    except Exception as e:
        print(f"❌ 数据库初始化失败: {e}")
        return False

    return True


if __name__ == "__main__":
    sys.exit(0 if init_database() else 1)
