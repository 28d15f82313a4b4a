"""frameline: ASCII video frame relay.

Uploads a video, runs the frame extraction script against it, and relays
one ASCII frame at a time through a line table that viewers render.
"""
