"""
Shared Kernel

Base building blocks reused by every app of the booking engine:
value objects, aggregates, domain events and the unit of work that
publishes those events once the surrounding transaction commits.
"""
