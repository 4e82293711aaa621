# evoting/database/__init__.py
