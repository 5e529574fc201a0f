"""
Static and demo data for the Fundi feeds engine.

This package contains fixture payloads used by DemoFeedService for
development, testing, and demonstrations without a running backend.

Modules:
- demo_feeds: fundi, job and payment payloads plus metadata lists
"""
