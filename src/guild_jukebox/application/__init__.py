"""
Application Layer

Orchestrates domain objects and infrastructure ports to fulfil commands.

Structure:
- commands/: Command envelope and the music command facade
- services/: Item resolver, queue renderer and the playback session service
- interfaces/: Port interfaces for infrastructure adapters
"""
