"""
Video upload and transcription gateway built with FastAPI, exposing
- a video upload endpoint that stores files in Amazon S3,
- and an asyncio client session that drives upload and transcription
and renders the returned transcript and webhook summary.
"""

__version__ = "0.2.0"
