# evoting/elections/__init__.py
