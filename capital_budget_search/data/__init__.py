"""Project table loading utilities."""

from .loader import catalogue_from_frame, load_catalogue_table, read_table
