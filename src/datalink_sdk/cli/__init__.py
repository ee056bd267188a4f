"""
Command-line interface for the Datalink SDK.

Tools:
- tdlink: Send organizer data to a Timex Datalink watch
"""
