"""Pixel buffers, adjustments and the snapshot codec."""
