# evoting/database/models.py

from evoting import db
from datetime import datetime

# Database schema for elections, candidates, voters and online votes


class Election(db.Model):
    __tablename__ = 'elections'
    __table_args__ = (
        db.CheckConstraint('election_year >= 2000', name='ck_elections_year'),
        db.CheckConstraint('voting_start <= voting_end', name='ck_elections_window'),
    )
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    election_type = db.Column(db.String(50), nullable=True)
    election_date = db.Column(db.Date, nullable=False)
    election_year = db.Column(db.Integer, nullable=False)
    status = db.Column(db.String(20), nullable=False, default='Upcoming')  # informational, recomputed on read
    voting_start = db.Column(db.DateTime, nullable=False)
    voting_end = db.Column(db.DateTime, nullable=False)

    candidates = db.relationship('Candidate', backref='election', lazy=True)

    def __repr__(self):
        return f'<Election {self.id} {self.name!r}>'


class Candidate(db.Model):
    __tablename__ = 'candidates'
    __table_args__ = (
        db.CheckConstraint('age >= 25', name='ck_candidates_age'),
    )
    id = db.Column(db.Integer, primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    party = db.Column(db.String(50), nullable=True)
    symbol = db.Column(db.String(30), nullable=True)
    constituency = db.Column(db.String(20), nullable=False)
    province = db.Column(db.String(30), nullable=False)
    age = db.Column(db.Integer, nullable=False)
    election_id = db.Column(db.Integer, db.ForeignKey('elections.id'), nullable=False, index=True)

    def to_dict(self):
        return {
            'candidate_id': self.id,
            'name': self.name,
            'party': self.party,
            'symbol': self.symbol,
            'constituency': self.constituency,
            'province': self.province,
            'age': self.age,
            'election_id': self.election_id,
        }


class Voter(db.Model):
    __tablename__ = 'voters'
    cnic = db.Column(db.String(15), primary_key=True)
    name = db.Column(db.String(100), nullable=False)
    age = db.Column(db.Integer, nullable=False)
    city = db.Column(db.String(40), nullable=False)
    province = db.Column(db.String(30), nullable=False)
    gender = db.Column(db.String(1), nullable=False)
    registration_date = db.Column(db.Date, default=lambda: datetime.utcnow().date())
    email = db.Column(db.String(100), unique=True, nullable=False)
    phone = db.Column(db.String(15), unique=True, nullable=True)
    status = db.Column(db.String(20), nullable=False, default='Active')

    votes = db.relationship('Vote', backref='voter', lazy=True)


class Vote(db.Model):
    __tablename__ = 'online_votes'
    # One vote per voter identity per election, enforced by the store
    __table_args__ = (
        db.UniqueConstraint('election_id', 'cnic', name='uq_online_votes_election_cnic'),
    )
    id = db.Column(db.Integer, primary_key=True)
    cnic = db.Column(db.String(15), db.ForeignKey('voters.cnic'), nullable=False)
    candidate_id = db.Column(db.Integer, db.ForeignKey('candidates.id'), nullable=False, index=True)
    election_id = db.Column(db.Integer, db.ForeignKey('elections.id'), nullable=False)
    constituency = db.Column(db.String(20), nullable=False)
    timestamp = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)
    location = db.Column(db.String(100), nullable=True)

    def __repr__(self):
        return f'<Vote {self.id} in Election {self.election_id}>'
