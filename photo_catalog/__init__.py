"""Photo catalog: photos, albums and users over interchangeable storage."""
