"""Operations modules: board logic extracted from App.

Each module contains plain functions that operate on BoardState.  App.py
and the canvas wire these to UI signals and handle any UI-owned state
cleanup.
"""
