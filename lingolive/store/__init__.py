"""Process-local state owned by an explicit store object."""
