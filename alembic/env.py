from logging.config import fileConfig

from alembic import context
from sqlmodel import SQLModel

from tesuto.config import DATABASE_URL
from tesuto.db import make_engine
from tesuto import models  # noqa: F401  регистрирует таблицы в metadata

config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)

# alembic -x db_url=... перекрывает DATABASE_URL
DB_URL = context.get_x_argument(as_dictionary=True).get("db_url", DATABASE_URL)
IS_SQLITE = DB_URL.startswith("sqlite")

target_metadata = SQLModel.metadata


def migrate_offline():
    """SQL-скрипт миграции без подключения к базе"""
    context.configure(
        url=DB_URL,
        target_metadata=target_metadata,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
        render_as_batch=IS_SQLITE,
    )
    with context.begin_transaction():
        context.run_migrations()


def migrate_online():
    # SQLite не умеет ALTER для ограничений, поэтому batch-режим
    migration_engine = make_engine(DB_URL)
    try:
        with migration_engine.connect() as connection:
            context.configure(
                connection=connection,
                target_metadata=target_metadata,
                render_as_batch=IS_SQLITE,
                compare_type=True,
            )
            with context.begin_transaction():
                context.run_migrations()
    finally:
        migration_engine.dispose()


if context.is_offline_mode():
    migrate_offline()
else:
    migrate_online()
