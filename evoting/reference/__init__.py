# evoting/reference/__init__.py
