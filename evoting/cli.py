# evoting/cli.py

# Administrative commands, available as `flask --app evoting <command>`.

import click
from flask import current_app

from evoting import db
from evoting.elections import registry
from evoting.errors import VotingError


def register_commands(app):
    @app.cli.command('init-db')
    def init_db():
        """Create all tables (use `flask db upgrade` for managed deployments)."""
        db.create_all()
        click.echo("Database tables created.")

    @app.cli.command('create-election')
    @click.option('--name', required=True)
    @click.option('--type', 'election_type', required=True)
    @click.option('--date', 'election_date', required=True, help='YYYY-MM-DD')
    @click.option('--year', 'election_year', required=True, type=int)
    @click.option('--start', 'voting_start', required=True, help='ISO timestamp')
    @click.option('--end', 'voting_end', required=True, help='ISO timestamp')
    def create_election(name, election_type, election_date, election_year, voting_start, voting_end):
        """Register an election from the command line."""
        try:
            result = registry.create_election(name, election_type, election_date, election_year,
                                              voting_start, voting_end)
        except VotingError as e:
            raise click.ClickException(e.message)
        click.echo(f"{result.message} (id {result.id})")

    @app.cli.command('refresh-statuses')
    def refresh_statuses():
        """Rewrite stored election statuses from their voting windows."""
        changed = registry.refresh_election_statuses()
        click.echo(f"Election statuses updated, {changed} changed.")

    @app.cli.command('verify-audit')
    def verify_audit():
        """Check the audit log hash chain and signatures."""
        audit = current_app.extensions['evoting.audit']
        if not audit.verify_log_integrity():
            raise click.ClickException(f"Audit log {audit.log_file} failed integrity verification")
        click.echo(f"Audit log OK, {len(audit.read_entries())} entries verified.")
