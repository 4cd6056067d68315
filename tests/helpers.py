"""
Test data builders
"""


def event_fields(**overrides):
    """Valid event fields; override any of them per test"""
    fields = {
        "title": "Tech Conference 2024",
        "description": "Conference description",
        "overview": "Conference overview",
        "image": "https://example.com/image.jpg",
        "venue": "Convention Center",
        "location": "San Francisco, CA",
        "date": "2024-06-15",
        "time": "09:00",
        "mode": "In-person",
        "audience": "Developers",
        "agenda": ["Keynote", "Workshops"],
        "organizer": "Organizer Name",
        "tags": ["tech", "conference"],
    }
    fields.update(overrides)
    return fields
