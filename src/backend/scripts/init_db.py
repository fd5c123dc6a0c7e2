# scripts/init_db.py

# このスクリプトを動かす前に：`cd src` -> `docker-compose up -d db`
# 本番のスキーマ管理はAlembic（`alembic upgrade head`）で行う．これはローカル開発用．

from sqlalchemy import create_engine

# base.pyをインポートすることで、Baseを継承した全てのモデルがSQLAlchemyに認識される
from medal_compass.db import base
from medal_compass.core.config import get_settings
from medal_compass.utils.logger import logger, setup_logging

def main():
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL)

    engine = create_engine(str(settings.DATABASE_URL))

    logger.info("データベースのテーブルを作成します...")

    # Baseに紐づけられた全てのテーブルをデータベース内に作成する
    base.Base.metadata.create_all(bind=engine)

    logger.info("テーブルの作成が完了しました。")

if __name__ == "__main__":
    main()
