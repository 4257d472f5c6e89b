# tfc_league/seed/__init__.py
# Demo data for an empty database

from .seed_all import seed_all
