"""
Streamlit presentation layer for SongScout.
"""
