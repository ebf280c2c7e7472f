"""Shared test fixtures package.

Provides moto fixtures, an in-memory repository and legacy record helpers.
"""
