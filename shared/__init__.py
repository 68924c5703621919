"""
Shared Kernel

Base classes and utilities shared across the domain apps: value objects,
domain events, the unit of work and the event bus.
"""
