"""
Walkup Voice Streamlit UI — main entry point.

Run with: ``streamlit run src/ui/app.py``
"""

# ---------------------------------------------------------------------------
# Ensure project root is on sys.path so ``from src.xxx`` imports work.
# Streamlit replaces sys.path[0] with the script directory (src/ui/),
# which removes the project root needed for absolute ``src.*`` imports.
# ---------------------------------------------------------------------------
import sys  # noqa: E402
from pathlib import Path  # noqa: E402

_project_root = str(Path(__file__).resolve().parent.parent.parent)
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

import streamlit as st  # noqa: E402

from src.core.config import get_settings  # noqa: E402
from src.core.utils import configure_logging  # noqa: E402
from src.services.playback.handle import PlaybackSlot  # noqa: E402
from src.services.playback.store import MemoryResourceStore  # noqa: E402
from src.ui.components.registration import render_registration  # noqa: E402
from src.ui.components.walkup import render_walkup  # noqa: E402

# ---------------------------------------------------------------------------
# Page config (must be first Streamlit call)
# ---------------------------------------------------------------------------
st.set_page_config(
    page_title="Walkup Voice",
    page_icon="\U0001f399️",
)

_settings = get_settings()
configure_logging(_settings.log_level)

# ---------------------------------------------------------------------------
# Session state defaults
# ---------------------------------------------------------------------------
_DEFAULTS = {
    "api_base_url": _settings.api_base_url,
    "first_name": "",
    "last_name": "",
    "capture_status": "idle",
    "walkup_text": "",
}

for key, value in _DEFAULTS.items():
    if key not in st.session_state:
        st.session_state[key] = value

# Playback resources live for the page session only
if "resource_store" not in st.session_state:
    st.session_state.resource_store = MemoryResourceStore()
    st.session_state.capture_slot = PlaybackSlot("capture")
    st.session_state.synthesis_slot = PlaybackSlot("synthesis")

# ---------------------------------------------------------------------------
# Sidebar
# ---------------------------------------------------------------------------
with st.sidebar:
    st.title("\U0001f399️ Walkup Voice")
    st.session_state.api_base_url = st.text_input(
        "Voice backend URL",
        value=st.session_state.api_base_url,
        help="Root URL of the speech-to-text / text-to-speech backend",
    )

# ---------------------------------------------------------------------------
# Page body
# ---------------------------------------------------------------------------
st.title("ElevenLabs POC")
render_registration()
st.divider()
render_walkup()
