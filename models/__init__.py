# models/__init__.py
