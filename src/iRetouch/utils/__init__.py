"""Utility helpers for iRetouch."""
