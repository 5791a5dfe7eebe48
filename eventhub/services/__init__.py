"""
Service package marker.

Intentionally empty to avoid heavy imports at package import time.
Import the concrete modules directly, e.g.:

    from eventhub.services.normalize import derive_slug, normalize_time
    from eventhub.services.storage import EventRepository, BookingRepository
    from eventhub.services.uploads import CloudinaryUploader
"""
__all__: list[str] = []
