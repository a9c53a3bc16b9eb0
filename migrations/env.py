import logging
from logging.config import fileConfig

from alembic import context
from flask import current_app

# runs under `flask --app app db ...`, which pushes an app context first
config = context.config
if config.config_file_name is not None:
    fileConfig(config.config_file_name)
logger = logging.getLogger("alembic.env")

portal_db = current_app.extensions["migrate"].db
config.set_main_option(
    "sqlalchemy.url",
    portal_db.engine.url.render_as_string(hide_password=False).replace("%", "%%"),
)


def _skip_empty_autogenerate(context, revision, directives):
    # `flask db migrate` with no model changes should not write a revision
    if getattr(config.cmd_opts, "autogenerate", False):
        script = directives[0]
        if script.upgrade_ops.is_empty():
            directives[:] = []
            logger.info("models unchanged; no revision written")


def run_migrations_offline():
    context.configure(
        url=config.get_main_option("sqlalchemy.url"),
        target_metadata=portal_db.metadata,
        literal_binds=True,
        render_as_batch=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    with portal_db.engine.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=portal_db.metadata,
            process_revision_directives=_skip_empty_autogenerate,
            # sqlite cannot ALTER most constraints in place
            render_as_batch=True,
            compare_type=True,
        )
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
