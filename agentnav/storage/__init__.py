"""Local persistence: keyed-slot storage and the navigation overlay."""
