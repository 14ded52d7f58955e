# app/models/__init__.py
"""
Database models module initialization.
Exports all database models for convenient imports throughout the application.

Models exported:
- User: User account, channel and session model
- Subscription: subscriber -> channel edge
- Video: Uploaded video owned by a User
- WatchHistory: Ordered watch history entry of a User
"""
from .user import User
from .subscription import Subscription
from .video import Video, WatchHistory
