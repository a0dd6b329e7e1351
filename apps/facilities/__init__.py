"""Facilities app package.

Holds the read-only configuration the reservation engine consumes:
bookable facilities with their hourly price, per-weekday operating hours
and the payment methods a reservation may reference. It also exposes the
operating calendar that resolves a facility and a date to an operating
window.
"""
