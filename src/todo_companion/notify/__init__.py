"""
Notification delivery: platform notifications with an in-app fallback.
"""
