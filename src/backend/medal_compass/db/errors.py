# medal_compass/db/errors.py
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session
from medal_compass.core.exceptions import PersistenceError
from medal_compass.utils.logger import logger

# PostgreSQLのSQLSTATE：unique_violation
PG_UNIQUE_VIOLATION = "23505"

def is_unique_violation(e: IntegrityError) -> bool:
    """
    IntegrityErrorが一意制約違反によるものかを判定する．
    外部キー違反やNOT NULL違反と区別するため，psycopg2ならSQLSTATEで，SQLiteならメッセージで見る．
    """
    pgcode = getattr(e.orig, "pgcode", None)
    if pgcode is not None:
        return pgcode == PG_UNIQUE_VIOLATION
    return "UNIQUE" in str(e.orig).upper()

def persistence_error(db: Session, label: str, message: str, e: SQLAlchemyError) -> PersistenceError:
    """
    トランザクションを巻き戻し，ログを残した上で，ユーザー向けのPersistenceErrorを作って返す．
    呼び出し側で raise persistence_error(...) from e とする．
    """
    db.rollback()
    logger.error(f"{label} error: {e}")
    return PersistenceError(message)
