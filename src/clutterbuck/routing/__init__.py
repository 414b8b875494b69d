"""Routing — an ordered route table with first-match dispatch.

Routes are registered during setup and sealed into an immutable tuple
before the first request is served.
"""
