"""Bookings app package.

The availability and reservation engine: hourly slot and duration
computation for a facility and date, and the reservation guard that
turns a chosen interval into a reservation atomically. Double booking is
prevented by a per-facility row lock, a re-check inside the transaction
and a unique constraint on reserved hour buckets.
"""
