import click
from flask import current_app
from flask.cli import with_appcontext
from pymongo.errors import PyMongoError

from portfolio_api.services import feedback_service
from portfolio_api.services.feedback import LIST_CAP, InvalidFeedbackId


@click.group()
def feedback():
    """Feedback collection maintenance."""


@feedback.command("ensure-indexes")
@with_appcontext
def feedback_ensure_indexes():
    try:
        name = feedback_service().ensure_indexes()
    except PyMongoError as e:
        raise click.ClickException(f"Index creation failed: {e}")
    click.echo(f"Index ready: {name}")


@feedback.command("list")
@click.option("--slug", required=True)
@click.option("--limit", type=click.IntRange(1, LIST_CAP), default=20, show_default=True)
@with_appcontext
def feedback_list(slug, limit):
    try:
        items = feedback_service().list_by_slug(slug, limit=limit)
    except PyMongoError as e:
        raise click.ClickException(f"Query failed: {e}")
    for fb in items:
        row = fb.to_dict(include_client_ip=True)
        click.echo(f"{row['_id']}  {row['createdAt']}  {row['name']} ({row['clientIp']}): {row['message'][:60]}")
    click.echo(f"{len(items)} feedback item(s) for slug={slug}")


@feedback.command("delete")
@click.argument("feedback_id")
@with_appcontext
def feedback_delete(feedback_id):
    try:
        deleted = feedback_service().delete_by_id(feedback_id)
    except InvalidFeedbackId:
        raise click.ClickException(f"Invalid id format: {feedback_id}")
    except PyMongoError as e:
        raise click.ClickException(f"Delete failed: {e}")
    if not deleted:
        raise click.ClickException(f"Feedback {feedback_id} not found")
    click.echo(f"Deleted {feedback_id}")


@feedback.command("ping")
@with_appcontext
def feedback_ping():
    try:
        current_app.extensions["mongo"].ping()
    except PyMongoError as e:
        raise click.ClickException(f"MongoDB unreachable: {e}")
    click.echo(f"MongoDB ok (db={current_app.config['MONGODB_DB']})")


def register_cli(app):
    app.cli.add_command(feedback)
