"""
pylibpq distribution version file.
"""

# Copyright (C) 2022 The Psycopg Team

# Use a versioning scheme as defined in
# https://www.python.org/dev/peps/pep-0440/
__version__ = "0.1.0.dev1"
