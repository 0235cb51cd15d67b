"""
Application Layer

Orchestrates domain objects and infrastructure ports to run per-guild playback.

Structure:
- interfaces/: Port interfaces for infrastructure adapters
- services/: Session registry, queue manager, progress reporter,
  occupancy monitor, and the playback service that ties them together
"""
