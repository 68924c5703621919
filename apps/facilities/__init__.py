"""Facilities app package.

Shared, physically exclusive hostel resources (laundry machines,
badminton courts): the bookable slot grid, exclusive slot bookings
under a row lock on the resource, a FIFO waitlist per hostel and
resource type, and automatic reassignment of freed slots, both on
explicit cancellation and when the grace-period reaper forfeits a slot
nobody showed up for.
"""
