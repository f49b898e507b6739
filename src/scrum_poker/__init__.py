"""
Scrum Poker backend.

Real-time planning poker rooms served over Socket.IO, with a small FastAPI
surface for health checks and feedback.
"""

__version__ = "1.0.0"
