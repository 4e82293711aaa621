# evoting/operations/__init__.py
