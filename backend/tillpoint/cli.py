# Overview: Flask CLI command groups for bootstrap and maintenance.

# backend/tillpoint/cli.py
# Commands Legend (run from the backend directory):
# - flask --app tillpoint system reset-db --yes
#   DEV/TEST only: drop and recreate all tables (deletes all data) and flush the cache.
# - flask --app tillpoint users create --name "Admin" --email admin@tillpoint.local --password "password123" --role admin
#   Create a user (prompts if options are omitted). The only way to create the first admin.
# - flask --app tillpoint users list
#   List all users with their roles.
# - flask --app tillpoint cache flush-prefix products:
#   Delete every cache key starting with the prefix.
# - flask --app tillpoint cache flush --yes
#   Delete every key in the configured cache database.

import click
from flask.cli import with_appcontext

from .errors import DomainError
from .extensions import cache, db
from .models import USER_ROLES, User
from .services import user_service


@click.group('system')
def system_group():
    """System bootstrap and repair commands."""


@system_group.command('reset-db')
@click.option('--yes', is_flag=True, help='Confirm dropping every table.')
@with_appcontext
def reset_db(yes):
    """Drop and recreate all tables, then flush the cache."""
    if not yes:
        raise click.ClickException("Refusing to reset without --yes")
    db.drop_all()
    db.create_all()
    cache.flush()
    click.echo("Database reset and cache flushed.")


@click.group('users')
def users_group():
    """User inspection and bootstrap commands."""


@users_group.command('create')
@click.option('--name', prompt=True)
@click.option('--email', prompt=True)
@click.option('--password', prompt=True, hide_input=True, confirmation_prompt=True)
@click.option('--role', type=click.Choice(USER_ROLES), default='cashier', show_default=True)
@with_appcontext
def create_user_cli(name, email, password, role):
    """Create a user with the given role."""
    if len(password) < 8:
        raise click.ClickException("Password must be at least 8 characters long")
    try:
        user = user_service.register(name=name, email=email, password=password, role=role)
    except DomainError as e:
        raise click.ClickException(e.kind.message)
    click.echo(f"Created user id={user['id']} email={user['email']} role={user['role']}")


@users_group.command('list')
@with_appcontext
def list_users():
    """List all users with their roles."""
    users = db.session.query(User).order_by(User.id.asc()).all()
    if not users:
        click.echo("No users.")
        return
    for u in users:
        click.echo(f"{u.id:>4}  {u.email:<32} {u.role:<8} {u.name}")


@click.group('cache')
def cache_group():
    """Cache maintenance commands."""


@cache_group.command('flush-prefix')
@click.argument('prefix')
@with_appcontext
def flush_prefix(prefix):
    """Delete every cache key starting with PREFIX."""
    try:
        removed = cache.delete_by_prefix(prefix)
    except DomainError as e:
        raise click.ClickException(e.kind.message)
    click.echo(f"Removed {removed} keys.")


@cache_group.command('flush')
@click.option('--yes', is_flag=True, help='Confirm deleting every key.')
@with_appcontext
def flush_cache(yes):
    """Delete every key in the cache database."""
    if not yes:
        raise click.ClickException("Refusing to flush without --yes")
    cache.flush()
    click.echo("Cache flushed.")


def register_commands(app):
    app.cli.add_command(system_group)
    app.cli.add_command(users_group)
    app.cli.add_command(cache_group)
