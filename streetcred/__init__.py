"""GetStreetCred backend package."""
