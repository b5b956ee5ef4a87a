"""
Application Layer

Orchestrates domain objects and infrastructure ports to fulfil voice use cases.

Structure:
- interfaces/: Port interfaces for infrastructure adapters
- services/: Session manager, channel configuration and the channel facade
"""
