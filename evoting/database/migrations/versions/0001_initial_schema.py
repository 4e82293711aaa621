"""elections, candidates, voters and online votes

Revision ID: 0001
Revises:
Create Date: 2025-01-01

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'elections',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('election_type', sa.String(50), nullable=True),
        sa.Column('election_date', sa.Date, nullable=False),
        sa.Column('election_year', sa.Integer, nullable=False),
        sa.Column('status', sa.String(20), nullable=False),
        sa.Column('voting_start', sa.DateTime, nullable=False),
        sa.Column('voting_end', sa.DateTime, nullable=False),
        sa.CheckConstraint('election_year >= 2000', name='ck_elections_year'),
        sa.CheckConstraint('voting_start <= voting_end', name='ck_elections_window'),
    )

    op.create_table(
        'candidates',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('party', sa.String(50), nullable=True),
        sa.Column('symbol', sa.String(30), nullable=True),
        sa.Column('constituency', sa.String(20), nullable=False),
        sa.Column('province', sa.String(30), nullable=False),
        sa.Column('age', sa.Integer, nullable=False),
        sa.Column('election_id', sa.Integer, sa.ForeignKey('elections.id'), nullable=False),
        sa.CheckConstraint('age >= 25', name='ck_candidates_age'),
    )
    op.create_index('ix_candidates_election_id', 'candidates', ['election_id'])

    op.create_table(
        'voters',
        sa.Column('cnic', sa.String(15), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('age', sa.Integer, nullable=False),
        sa.Column('city', sa.String(40), nullable=False),
        sa.Column('province', sa.String(30), nullable=False),
        sa.Column('gender', sa.String(1), nullable=False),
        sa.Column('registration_date', sa.Date, nullable=True),
        sa.Column('email', sa.String(100), nullable=False, unique=True),
        sa.Column('phone', sa.String(15), nullable=True, unique=True),
        sa.Column('status', sa.String(20), nullable=False),
    )

    op.create_table(
        'online_votes',
        sa.Column('id', sa.Integer, primary_key=True),
        sa.Column('cnic', sa.String(15), sa.ForeignKey('voters.cnic'), nullable=False),
        sa.Column('candidate_id', sa.Integer, sa.ForeignKey('candidates.id'), nullable=False),
        sa.Column('election_id', sa.Integer, sa.ForeignKey('elections.id'), nullable=False),
        sa.Column('constituency', sa.String(20), nullable=False),
        sa.Column('timestamp', sa.DateTime, nullable=False),
        sa.Column('location', sa.String(100), nullable=True),
        sa.UniqueConstraint('election_id', 'cnic', name='uq_online_votes_election_cnic'),
    )
    op.create_index('ix_online_votes_candidate_id', 'online_votes', ['candidate_id'])


def downgrade():
    op.drop_index('ix_online_votes_candidate_id', table_name='online_votes')
    op.drop_table('online_votes')
    op.drop_table('voters')
    op.drop_index('ix_candidates_election_id', table_name='candidates')
    op.drop_table('candidates')
    op.drop_table('elections')
