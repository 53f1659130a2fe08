"""Management script for database and bootstrap tasks"""

import click
from dotenv import load_dotenv
from flask.cli import FlaskGroup

load_dotenv()

from itts_community import create_app  # noqa: E402
from itts_community.bootstrap import create_admin_user, seed_rbac  # noqa: E402
from itts_community.extensions import db  # noqa: E402
from itts_community.services.token_service import TokenService  # noqa: E402

cli = FlaskGroup(create_app=create_app)


@cli.command("init-db")
def init_db():
    """Initialize the database"""
    db.create_all()
    print("✅ Database initialized successfully!")


@cli.command("drop-db")
@click.confirmation_option(prompt="⚠️  Are you sure you want to drop all tables?")
def drop_db():
    """Drop all database tables"""
    db.drop_all()
    print("✅ Database dropped successfully!")


@cli.command("seed-rbac")
def seed_rbac_command():
    """Seed resources, actions, permissions and system roles"""
    roles = seed_rbac()
    print(f"✅ RBAC seeded: roles {', '.join(sorted(roles))}")


@cli.command("create-admin")
@click.option("--email", envvar="ADMIN_EMAIL", required=True)
@click.option("--password", envvar="ADMIN_PASSWORD", required=True, prompt=True, hide_input=True)
@click.option("--name", envvar="ADMIN_NAME", default="System Admin")
def create_admin(email, password, name):
    """Create a super-admin user"""
    user, created = create_admin_user(email, password, name)
    if created:
        print(f"✅ Admin user created: {user.email}")
    else:
        print("⚠️  Admin already exists. Skipping.")


@cli.command("sweep-tokens")
def sweep_tokens():
    """Delete expired refresh tokens"""
    removed = TokenService.sweep_expired()
    print(f"✅ Removed {removed} expired refresh tokens")


if __name__ == "__main__":
    cli()
