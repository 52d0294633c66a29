"""
mysql-dump-splitter

Stream a MySQL-style textual dump and re-partition it into per-table schema,
view and data files, or into a single filtered stream.
"""

__version__ = "0.3.0"
