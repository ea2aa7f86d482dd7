"""Record Organizer: folder, ordering and header management for stored HTTP requests."""
