# evoting/audit/__init__.py
