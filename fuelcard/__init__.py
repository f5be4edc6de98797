"""Fuel-card transaction import service."""
