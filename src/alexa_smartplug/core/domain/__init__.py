"""Domain models and entities.

Pure data structures (Pydantic v2). The domain knows nothing about HTTP or
the CLI, only the concepts of the Alexa smart-home API.
"""
