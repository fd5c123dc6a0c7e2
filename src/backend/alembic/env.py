from logging.config import fileConfig

from sqlalchemy import engine_from_config
from sqlalchemy import pool

from alembic import context

# .envファイルから環境変数を読み込む
from medal_compass.core.config import get_settings
settings = get_settings()

# SQLAlchemyモデルをインポートして，Alembicにテーブルの存在を教える．
from medal_compass.db import base # db/base.py を活用して管理したいモデルを全てインポート

# this is the Alembic Config object, which provides
# access to the values within the .ini file in use.
config = context.config

# .iniファイルではなく、Settingsで生成したURLをAlembicに設定する
config.set_main_option("sqlalchemy.url", str(settings.DATABASE_URL))

# Interpret the config file for Python logging.
# This line sets up loggers basically.
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = base.Base.metadata


def run_migrations_offline() -> None:
    """Run migrations in 'offline' mode.

    This configures the context with just a URL
    and not an Engine, though an Engine is acceptable
    here as well.  By skipping the Engine creation
    we don't even need a DBAPI to be available.
    """
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    """Run migrations in 'online' mode."""

    # どのテーブルをAlembicの監視対象にするかを決めるフィルター関数
    def include_object(object, name, type_, reflected, compare_to):
        # 'table' タイプの場合、alembic_versionテーブルと自分のモデルで定義したテーブルのみを対象とする
        if type_ == "table":
            return name == 'alembic_version' or name in target_metadata.tables
        else:
            return True

    connectable = engine_from_config(
        config.get_section(config.config_ini_section, {}),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            include_object=include_object # 上で定義したフィルター関数を設定
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
