"""
Application Layer

Contains use cases, command handlers, and application services.
This layer orchestrates domain objects and infrastructure to fulfill use cases.

Structure:
- commands/: Write operations (BuildPlaylistCommand and its handler)
- services/: The track resolution pipeline
- interfaces/: Port interfaces for infrastructure adapters
"""
