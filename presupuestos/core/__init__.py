"""Shared configuration, paths, errors and counter persistence."""
