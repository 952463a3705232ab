from logging.config import fileConfig

from alembic import context
from sqlalchemy import create_engine

config = context.config

# Standalone `alembic upgrade` gets logging from alembic.ini; init_db() opts out
if config.config_file_name is not None and config.attributes.get("configure_logger", True):
    fileConfig(config.config_file_name, disable_existing_loggers=False)


def run_migrations() -> None:
    """Apply migrations to the scheduler database, always online against SQLite."""
    engine = create_engine(config.get_main_option("sqlalchemy.url"))

    with engine.connect() as connection:
        # batch mode lets ALTER-style migrations work on SQLite
        context.configure(connection=connection, target_metadata=None, render_as_batch=True)
        with context.begin_transaction():
            context.run_migrations()


run_migrations()
