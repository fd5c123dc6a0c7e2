# medal_compass/db/session.py
import time
from typing import Callable, TypeVar
from sqlalchemy import create_engine
from sqlalchemy.exc import OperationalError
from sqlalchemy.orm import Session, sessionmaker
from medal_compass.core.config import get_settings
from medal_compass.utils.logger import logger

T = TypeVar("T")

settings = get_settings()

# バックエンド呼び出しが無期限に待たないよう，接続・クエリ・プール待ちの全てに上限を設ける．
engine = create_engine(
    str(settings.DATABASE_URL),
    pool_pre_ping=True,
    pool_timeout=settings.DB_POOL_TIMEOUT,
    connect_args={
        "connect_timeout": settings.DB_CONNECT_TIMEOUT,
        "options": f"-c statement_timeout={settings.DB_STATEMENT_TIMEOUT_MS}",
    },
)
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# FastAPIのDependsで使うためのDBセッション取得関数
def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def run_with_retry(db: Session, operation: Callable[[], T], label: str,
                   attempts: int | None = None, backoff_seconds: float | None = None) -> T:
    """
    一時的なDB障害（OperationalError：接続断・タイムアウトなど）に限り，operationを回数制限付きで再試行する．
    一意制約違反などそれ以外の例外は即座に呼び出し元へ伝播する．

    operationはトランザクション全体（書き込みならcommitまで）を含むこと．
    失敗のたびにrollbackするので，再試行は常にまっさらなトランザクションから始まる．
    """
    settings = get_settings()
    attempts = attempts or settings.DB_RETRY_ATTEMPTS
    backoff_seconds = settings.DB_RETRY_BACKOFF_SECONDS if backoff_seconds is None else backoff_seconds

    for attempt in range(1, attempts + 1):
        try:
            return operation()
        except OperationalError as e:
            db.rollback()
            if attempt >= attempts:
                logger.error(f"{label}: DB障害が解消しないため諦めます ({attempt}/{attempts}): {e}")
                raise
            logger.warning(f"{label}: 一時的なDB障害のため再試行します ({attempt}/{attempts}): {e}")
            time.sleep(backoff_seconds * attempt) # 線形バックオフ
