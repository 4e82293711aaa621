# evoting/security/input_validator.py

import re
import html
import bleach
from datetime import date, datetime, timezone

from evoting.errors import ValidationError
from evoting.reference import constituencies

# Input validation and sanitization for the election, candidate and ballot forms

MIN_CANDIDATE_AGE = 25
MAX_CANDIDATE_AGE = 100
MIN_ELECTION_YEAR = 2000
MAX_ELECTION_YEAR = 2100


class InputValidator:
    def __init__(self):
        self.allowed_html_tags = []
        self.allowed_html_attributes = {}

        self.patterns = {
            'cnic': re.compile(r'^\d{5}-?\d{7}-?\d$'),
            'xss_script': re.compile(r'<script[^>]*>.*?</script>', re.IGNORECASE | re.DOTALL),
            'xss_event': re.compile(r'\bon\w+\s*=', re.IGNORECASE)
        }

    def sanitize_string(self, input_str, max_length=255):
        if not isinstance(input_str, str):
            raise ValidationError("Input must be a string")
        if len(input_str) > max_length:
            input_str = input_str[:max_length]

        sanitized = re.sub(self.patterns['xss_script'], '', input_str)
        sanitized = re.sub(self.patterns['xss_event'], '', sanitized)

        # bleach strips the tags but entity-escapes the text; store the plain text
        sanitized = bleach.clean(sanitized, tags=self.allowed_html_tags, attributes=self.allowed_html_attributes, strip=True)
        return html.unescape(sanitized).strip()

    def form_string(self, value, label, max_length):
        if not isinstance(value, str):
            raise ValidationError(f"{label} must be text")
        if len(value.strip()) > max_length:
            raise ValidationError(f"{label} must be at most {max_length} characters")
        return self.sanitize_string(value, max_length)

    def required_string(self, data, field, label, max_length):
        value = data.get(field)
        if value is None or (isinstance(value, str) and not value.strip()):
            raise ValidationError(f"{label} is required")
        value = self.form_string(value, label, max_length)
        if not value:
            raise ValidationError(f"{label} is required")
        return value

    def optional_string(self, data, field, label, max_length):
        value = data.get(field)
        if value is None:
            return None
        value = self.form_string(value, label, max_length)
        return value or None

    def validate_cnic(self, cnic):
        """Return the 13-digit identity with dashes removed."""
        if not isinstance(cnic, str) or not self.patterns['cnic'].match(cnic.strip()):
            raise ValidationError("Please enter a valid 13-digit CNIC")
        return cnic.strip().replace('-', '')

    def parse_int(self, value, label):
        if isinstance(value, bool):
            raise ValidationError(f"{label} must be a whole number")
        try:
            return int(value)
        except (TypeError, ValueError):
            raise ValidationError(f"{label} must be a whole number")

    def parse_datetime(self, value, label):
        """Parse an ISO-8601 timestamp; aware values are converted to naive UTC."""
        if isinstance(value, datetime):
            parsed = value
        else:
            try:
                parsed = datetime.fromisoformat(str(value).strip().replace('Z', '+00:00'))
            except ValueError:
                raise ValidationError(f"{label} must be a valid date and time")
        if parsed.tzinfo is not None:
            parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
        return parsed

    def parse_date(self, value, label):
        if isinstance(value, datetime):
            return value.date()
        if isinstance(value, date):
            return value
        try:
            return date.fromisoformat(str(value).strip()[:10])
        except ValueError:
            raise ValidationError(f"{label} must be a valid date")

    def validate_election_form(self, data):
        if not isinstance(data, dict):
            raise ValidationError("Election data must be an object")

        name = self.required_string(data, 'name', 'Election name', 100)
        election_type = self.required_string(data, 'election_type', 'Election type', 50)
        if data.get('election_date') in (None, ''):
            raise ValidationError("Election date is required")
        election_date = self.parse_date(data['election_date'], 'Election date')

        year = self.parse_int(data.get('election_year'), 'Election year')
        if not MIN_ELECTION_YEAR <= year <= MAX_ELECTION_YEAR:
            raise ValidationError(f"Election year must be between {MIN_ELECTION_YEAR} and {MAX_ELECTION_YEAR}")

        for field, label in (('voting_start', 'Voting start'), ('voting_end', 'Voting end')):
            if data.get(field) in (None, ''):
                raise ValidationError(f"{label} is required")
        voting_start = self.parse_datetime(data['voting_start'], 'Voting start')
        voting_end = self.parse_datetime(data['voting_end'], 'Voting end')
        if voting_start > voting_end:
            raise ValidationError("Voting start must not be after voting end")

        return {
            'name': name,
            'election_type': election_type,
            'election_date': election_date,
            'election_year': year,
            'voting_start': voting_start,
            'voting_end': voting_end,
        }

    def validate_candidate_form(self, data):
        if not isinstance(data, dict):
            raise ValidationError("Candidate data must be an object")

        name = self.required_string(data, 'name', 'Candidate name', 100)
        province = self.required_string(data, 'province', 'Province', 30)
        party = self.optional_string(data, 'party', 'Party', 50)
        symbol = self.optional_string(data, 'symbol', 'Election symbol', 30)

        age = self.parse_int(data.get('age'), 'Candidate age')
        if not MIN_CANDIDATE_AGE <= age <= MAX_CANDIDATE_AGE:
            raise ValidationError(f"Candidate age must be between {MIN_CANDIDATE_AGE} and {MAX_CANDIDATE_AGE}")

        check = constituencies.validate(data.get('constituency'))
        if not check['valid']:
            raise ValidationError(check['error'])

        return {
            'name': name,
            'party': party,
            'symbol': symbol,
            'constituency': check['normalized'],
            'province': province,
            'age': age,
        }
