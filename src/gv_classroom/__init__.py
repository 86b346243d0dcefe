"""GV Classroom portal package.

This package is organized by feature modules (users, clases, marcajes,
dispositivos, ...) with a thin Flask controller layer and service/repository
layers underneath.
"""
