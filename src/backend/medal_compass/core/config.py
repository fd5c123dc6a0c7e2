# medal_compass/core/config.py
from functools import lru_cache
from pydantic import Field, PostgresDsn, computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    """
    1. Setting()の役割
        ・早期失敗：システム環境変数の不足があれば起動時に停止
        ・型の保証：型変換を一手に担うことでアプリ全体に型安全を提供
        ・バリデーション：環境変数の定義域やフォーマットをチェック．例：Field(default=5, gt=0)
        ・環境変数名の一元管理：システム環境変数の名前を変更する際にコード全体に影響しない．

    2. 読み込み優先順位
        ・コード引数：Settings(DB_PORT=9999)など
        ・システム環境変数
        ・.envファイル
        ・デフォルト値（クラス宣言内）
    """
    DB_HOST: str = 'localhost' # ローカルスクリプト用のデフォルト値
    DB_PORT: int = 5432
    DB_NAME: str
    DB_USER: str
    DB_PASSWORD: str

    # バックエンド呼び出しのタイムアウトとリトライ
    DB_CONNECT_TIMEOUT: int = Field(default=5, gt=0)         # 接続確立（秒）
    DB_STATEMENT_TIMEOUT_MS: int = Field(default=5000, gt=0) # 1クエリの上限（ミリ秒）
    DB_POOL_TIMEOUT: int = Field(default=10, gt=0)           # コネクションプール待ち（秒）
    DB_RETRY_ATTEMPTS: int = Field(default=3, ge=1)          # 一時的な障害に対する試行回数（初回を含む）
    DB_RETRY_BACKOFF_SECONDS: float = Field(default=0.2, ge=0)

    # モデレーションの閾値
    MEDAL_INVALIDATION_THRESHOLD: int = Field(default=5, gt=0) # メダル無効化に必要な通報数
    USER_BAN_THRESHOLD: int = Field(default=10, gt=0)          # ユーザーBANに必要な通報受信数

    # 近傍検索
    DEFAULT_SEARCH_RADIUS_KM: float = Field(default=5.0, gt=0)
    MAX_MEDALS_PER_QUERY: int = Field(default=1000, gt=0)

    # 測位精度（メートル）．これ以下なら「十分」とみなす．
    GPS_ACCURACY_THRESHOLD_M: float = Field(default=20.0, gt=0)

    # ログ
    LOG_LEVEL: str = 'INFO'
    LOG_TO_FILE: bool = False
    LOG_FILE_PATH: str = 'logs/medal_compass.log'

    @computed_field
    @property
    def DATABASE_URL(self) -> PostgresDsn:
        """
        他のフィールドの値からDATABASE_URLを構築する．
        """
        # ドライバを明示しないとSQLAlchemyの既定ドライバに解決される．connect_argsはpsycopg2前提．
        return f"postgresql+psycopg2://{self.DB_USER}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    # システム環境変数が見つからなかった場合にココを参照
    # scripts/*.pyやalembicを走らせる時は，.envのあるディレクトリをカレントディレクトリにすること．
    model_config = SettingsConfigDict(
        env_file = '.env',
        env_file_encoding = 'utf-8',
        extra='ignore'
    )

@lru_cache
def get_settings() -> Settings:
    """
    Settingsインスタンスを生成し，キャッシュして返す．
    これにより，アプリ全体で単一のSettingsインスタンスが保証される．
    settings = Settings()のグローバルなインスタンスでもシングルトンは実現可能だが，依存性注入DIによる差し替え可能性が無い．
    """
    return Settings()
