"""
Services module - Capture, session state, search and orchestration.
"""
