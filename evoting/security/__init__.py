# evoting/security/__init__.py
