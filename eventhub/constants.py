"""Built-in events shown on the landing page when the API is unreachable."""

FALLBACK_EVENTS = [
    {
        "title": "React Summit 2026",
        "slug": "react-summit-2026",
        "image": "/images/event1.png",
        "location": "Amsterdam, Netherlands",
        "venue": "Kromhouthal",
        "date": "2026-06-12",
        "time": "09:00",
        "mode": "hybrid",
        "tags": ["react", "frontend", "javascript"],
    },
    {
        "title": "PyCon US 2026",
        "slug": "pycon-us-2026",
        "image": "/images/event2.png",
        "location": "Long Beach, CA, USA",
        "venue": "Long Beach Convention Center",
        "date": "2026-05-13",
        "time": "08:30",
        "mode": "offline",
        "tags": ["python", "community", "open-source"],
    },
    {
        "title": "KubeCon Europe",
        "slug": "kubecon-europe",
        "image": "/images/event3.png",
        "location": "London, UK",
        "venue": "ExCeL London",
        "date": "2026-03-23",
        "time": "10:00",
        "mode": "offline",
        "tags": ["kubernetes", "cloud", "devops"],
    },
    {
        "title": "Global AI Hackathon",
        "slug": "global-ai-hackathon",
        "image": "/images/event4.png",
        "location": "Online",
        "venue": "Discord",
        "date": "2026-11-07",
        "time": "18:00",
        "mode": "online",
        "tags": ["ai", "hackathon", "machine-learning"],
    },
]
