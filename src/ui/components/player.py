"""
Browser audio output for the Streamlit page.
"""

import streamlit as st

from src.services.playback.base import AudioPlayer


class StreamlitPlayer(AudioPlayer):
    """Renders an auto-playing ``st.audio`` element in the current script run."""

    def play(self, data: bytes, content_type: str) -> None:
        st.audio(data, format=content_type, autoplay=True)
