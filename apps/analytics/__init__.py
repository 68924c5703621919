"""Read-only facility usage analytics for hostel admins."""
