"""
Walkup Try section — type text, hear it spoken.
"""

import asyncio

import streamlit as st

from src.services.api_client import VoiceAPIClient
from src.services.orchestrator import SynthesisFlow
from src.services.synthesis import SynthesisClient
from src.ui.components.player import StreamlitPlayer


async def _speak(text: str) -> None:
    async with VoiceAPIClient(base_url=st.session_state.api_base_url) as api:
        synthesizer = SynthesisClient(
            api,
            slot=st.session_state.synthesis_slot,
            store=st.session_state.resource_store,
            player=StreamlitPlayer(),
        )
        await SynthesisFlow(synthesizer, notify=st.error).submit(text)


def render_walkup() -> None:
    """Render the text form; the result plays as soon as it arrives."""
    st.subheader("Walkup Try")

    with st.form("walkup_form"):
        text = st.text_area(
            "Text",
            value=st.session_state.walkup_text,
            placeholder="Enter text here...",
            height=120,
            label_visibility="collapsed",
        )
        submitted = st.form_submit_button("Convert to Voice")

    st.session_state.walkup_text = text
    if submitted and text:
        with st.spinner("Generating..."):
            asyncio.run(_speak(text))
