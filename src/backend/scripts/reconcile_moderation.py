# scripts/reconcile_moderation.py

# 通報の閾値を超えているのに無効化・BANされていないメダル／ユーザーを処理する．
# cronなどで定期的に実行する想定．例：`python scripts/reconcile_moderation.py`

import sys
from medal_compass.core.config import get_settings
from medal_compass.core.exceptions import PersistenceError
from medal_compass.db.session import SessionLocal
from medal_compass.services.moderation_service import reconcile_moderation
from medal_compass.utils.logger import logger, setup_logging

def main() -> int:
    settings = get_settings()
    setup_logging(settings.LOG_LEVEL, to_file=settings.LOG_TO_FILE, file_path=settings.LOG_FILE_PATH)

    db = SessionLocal()
    try:
        result = reconcile_moderation(db)
    except PersistenceError as e:
        logger.error(f"モデレーションの再評価に失敗しました: {e.message}")
        return 1
    finally:
        db.close()

    for medal_no in result.invalidated_medal_nos:
        logger.info(f"  無効化: medal_no={medal_no}")
    for user_id in result.banned_user_ids:
        logger.info(f"  BAN: user_id={user_id}")
    return 0

if __name__ == "__main__":
    sys.exit(main())
