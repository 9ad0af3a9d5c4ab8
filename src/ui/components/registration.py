"""
Registering Phonemes section — record a name sample and send it for processing.

States: idle -> recording -> processing -> idle

The browser records the clip through ``st.audio_input``; "Stop & Send" runs
the clip through the recorder controller and uploads it in one event loop.
"""

import asyncio
import logging

import streamlit as st

from src.core.exceptions import WalkupVoiceError
from src.services.api_client import VoiceAPIClient
from src.services.audio.clip import RecordedClipSource
from src.services.audio.recorder import RecorderController
from src.services.orchestrator import CaptureFlow
from src.services.upload import UploadClient
from src.ui.components.player import StreamlitPlayer

logger = logging.getLogger(__name__)


async def _send_clip(clip: bytes, first_name: str, last_name: str) -> None:
    """Replay the browser clip through a capture session and upload it."""
    async with VoiceAPIClient(base_url=st.session_state.api_base_url) as api:
        uploader = UploadClient(
            api,
            slot=st.session_state.capture_slot,
            store=st.session_state.resource_store,
            player=StreamlitPlayer(),
        )
        recorder = RecorderController(lambda: RecordedClipSource(clip))
        flow = CaptureFlow(recorder, uploader, notify=st.error)
        if await flow.start(first_name, last_name):
            await flow.stop_and_send()


def render_registration() -> None:
    """Render the name form, recorder controls, and the "Hear Voice" button."""
    st.subheader("Registering Phonemes")

    status = st.session_state.capture_status
    col1, col2 = st.columns(2)
    with col1:
        st.session_state.first_name = st.text_input(
            "Firstname",
            value=st.session_state.first_name,
            placeholder="Firstname",
            disabled=status != "idle",
        )
    with col2:
        st.session_state.last_name = st.text_input(
            "Lastname",
            value=st.session_state.last_name,
            placeholder="Lastname",
            disabled=status != "idle",
        )

    if status == "idle":
        _render_idle()
    elif status == "recording":
        _render_recording()
    elif status == "processing":
        _render_processing()

    # Processing may have just finished, so re-read the status
    if st.session_state.capture_slot and st.session_state.capture_status == "idle":
        if st.button("Hear Voice"):
            _play_response()


def _play_response() -> None:
    try:
        st.session_state.capture_slot.play()
    except WalkupVoiceError as exc:
        logger.warning("Playback failed [%s]: %s", exc.code, exc.detail)
        st.error(CaptureFlow.describe(exc))


def _render_idle() -> None:
    ready = bool(st.session_state.first_name.strip() and st.session_state.last_name.strip())
    if st.button("Start Recording", disabled=not ready):
        # A new session invalidates the previous response
        st.session_state.capture_slot.clear()
        st.session_state.capture_status = "recording"
        st.rerun()


def _render_recording() -> None:
    clip = st.audio_input("Record your name")
    if st.button("Stop & Send", disabled=clip is None, type="primary"):
        st.session_state._pending_clip = clip.getvalue()
        st.session_state.capture_status = "processing"
        st.rerun()
    if st.button("Cancel"):
        st.session_state.capture_status = "idle"
        st.rerun()


def _render_processing() -> None:
    clip = st.session_state.pop("_pending_clip", None)
    if clip is None:
        st.session_state.capture_status = "idle"
        st.rerun()
        return

    with st.spinner("Processing..."):
        asyncio.run(
            _send_clip(clip, st.session_state.first_name, st.session_state.last_name)
        )

    st.session_state.capture_status = "idle"
    _render_idle()
