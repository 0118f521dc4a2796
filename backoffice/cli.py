import click
from flask.cli import with_appcontext
from sqlalchemy.exc import IntegrityError

from backoffice.extensions import db, bcrypt
from backoffice.models import User, ROLES
from backoffice.seed import seed_database


@click.command("init-db")
@with_appcontext
def init_db_command():
    """Create all tables."""
    db.create_all()
    click.echo("Database initialized.")


@click.command("seed")
@with_appcontext
def seed_command():
    """Load demo categories, users, products and an order."""
    seed_database()


@click.command("create-user")
@with_appcontext
@click.argument("email")
@click.option("--password", prompt=True, hide_input=True, confirmation_prompt=True)
@click.option("--role", type=click.Choice(ROLES), default="customer", show_default=True)
@click.option("--first-name", default=None)
@click.option("--last-name", default=None)
def create_user_command(email, password, role, first_name, last_name):
    """Create an account with the given role."""
    user = User(
        email=email,
        password_hash=bcrypt.generate_password_hash(password).decode("utf-8"),
        role=role,
        first_name=first_name,
        last_name=last_name,
    )
    db.session.add(user)
    try:
        db.session.commit()
    except IntegrityError:
        db.session.rollback()
        raise click.ClickException(f"A user with email {email} already exists.")
    click.echo(f"Created {role} account {email} (id {user.id}).")


@click.command("set-role")
@with_appcontext
@click.argument("email")
@click.argument("role", type=click.Choice(ROLES))
def set_role_command(email, role):
    """Change the role of an existing account."""
    user = User.query.filter_by(email=email).first()
    if user is None:
        raise click.ClickException(f"No user with email {email}.")
    user.role = role
    db.session.commit()
    click.echo(f"{email} is now {role}.")


def register_commands(app):
    for command in (init_db_command, seed_command, create_user_command, set_role_command):
        app.cli.add_command(command)
