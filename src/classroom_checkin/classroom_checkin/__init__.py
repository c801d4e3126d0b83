"""Classroom check-in package.

Organized by feature modules (tokens, sessions, attendance, courses, users,
reports) with a thin Flask controller layer over service classes that share
one process-wide store.
"""
