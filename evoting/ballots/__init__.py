# evoting/ballots/__init__.py
