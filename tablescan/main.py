"""
Table Scanner - Main Streamlit UI

Upload or photograph a scanned document, let Gemini extract its table,
preview the rows and download them as an Excel file.

Features:
- API key entry, stored between sessions
- File upload (JPEG, PNG) and camera capture
- Gemini structured-output table extraction
- Table preview
- Excel export
"""

import logging
import sys
from pathlib import Path

import streamlit as st

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from tablescan.config import get_config
from tablescan.controller import AppState, ConversionController
from tablescan.export.excel import ExcelExporter
from tablescan.llm.client import create_client
from tablescan.storage.credentials import CredentialStore

# Configure logging
logging.basicConfig(
    level=getattr(logging, get_config().log_level.upper(), logging.INFO),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


def build_controller() -> ConversionController:
    """Wire the controller with the configured collaborators."""
    config = get_config()
    controller = ConversionController(
        store=CredentialStore(config=config.storage),
        client=create_client(config.gemini),
        exporter=ExcelExporter(),
        config=config,
    )
    controller.start()
    return controller


def init_session_state():
    """Initialize Streamlit session state."""
    if "controller" not in st.session_state:
        st.session_state.controller = build_controller()

    if "camera_open" not in st.session_state:
        st.session_state.camera_open = False

    if "last_upload_id" not in st.session_state:
        st.session_state.last_upload_id = None

    if "last_frame_id" not in st.session_state:
        st.session_state.last_frame_id = None


def _file_id(uploaded_file) -> str:
    return getattr(uploaded_file, "file_id", None) or f"{uploaded_file.name}:{uploaded_file.size}"


def render_api_key_screen(controller: ConversionController):
    """Render the API key entry screen."""
    st.title("🔑 Gemini API Key")
    st.markdown(
        "Enter your Gemini API key to continue. "
        "The key is stored on this machine and reused next time."
    )

    with st.form("api_key_form"):
        api_key = st.text_input("API Key", type="password")
        submitted = st.form_submit_button("Save Key", type="primary")

    if submitted and controller.submit_credential(api_key):
        st.rerun()

    if controller.error:
        st.error(controller.error)


def render_sidebar(controller: ConversionController):
    """Render the settings sidebar."""
    config = get_config()
    with st.sidebar:
        st.header("⚙️ Settings")
        st.caption(f"Model: `{config.gemini.model}`")
        st.caption(f"Key file: `{controller.store.path}`")

        if st.button("🗑️ Forget API Key", disabled=controller.is_loading):
            controller.forget_credential()
            st.rerun()


def render_upload_section(controller: ConversionController):
    """Render the upload and camera section."""
    st.subheader("📤 Upload Scanned Image")

    uploaded_file = st.file_uploader(
        "Choose an image",
        type=["png", "jpg", "jpeg"],
        help="Upload a JPEG or PNG image of the document",
    )
    if uploaded_file is not None and _file_id(uploaded_file) != st.session_state.last_upload_id:
        st.session_state.last_upload_id = _file_id(uploaded_file)
        controller.select_upload(uploaded_file)

    if not st.session_state.camera_open:
        if st.button("📷 Use Camera", use_container_width=True):
            controller.open_camera()
            st.session_state.camera_open = True
            st.rerun()
    else:
        frame = st.camera_input("Take a picture of the document")
        if frame is not None and _file_id(frame) != st.session_state.last_frame_id:
            st.session_state.last_frame_id = _file_id(frame)
            controller.select_camera_frame(frame)
            st.session_state.camera_open = False
            st.rerun()
        if st.button("Close Camera", use_container_width=True):
            st.session_state.camera_open = False
            st.rerun()

    if controller.image:
        st.image(
            controller.image.data,
            caption=controller.image.name or "Selected image",
            use_container_width=True,
        )


def render_action_section(controller: ConversionController):
    """Render the convert and download actions."""
    if st.button(
        "🔄 Convert to Excel",
        type="primary",
        use_container_width=True,
        disabled=not controller.can_convert,
    ):
        with st.spinner("Extracting table with Gemini..."):
            controller.convert()
        if controller.state is AppState.NO_CREDENTIAL:
            st.rerun()

    if st.button(
        "📊 Prepare Excel File",
        use_container_width=True,
        disabled=not controller.can_export,
    ):
        with st.spinner("Generating Excel file..."):
            controller.export()

    if controller.spreadsheet:
        st.download_button(
            "⬇️ Download Excel",
            data=controller.spreadsheet.data,
            file_name=controller.spreadsheet.filename,
            mime=controller.spreadsheet.mime_type,
            use_container_width=True,
        )


def render_preview_section(controller: ConversionController):
    """Render the extracted table preview."""
    frame = controller.preview()
    if frame is None:
        return

    st.subheader("Data Preview")
    st.dataframe(frame, use_container_width=True, hide_index=True)


def main():
    """Main application entry point."""
    st.set_page_config(
        page_title="ZZMOTORS Table Scanner",
        page_icon="📄",
        layout="wide",
    )

    init_session_state()
    controller: ConversionController = st.session_state.controller

    if controller.state is AppState.NO_CREDENTIAL:
        render_api_key_screen(controller)
        return

    st.title("ZZMOTORS")
    st.markdown("Extract tables from scanned documents and export them to Excel.")

    render_sidebar(controller)

    col1, col2 = st.columns(2)
    with col1:
        render_upload_section(controller)
    with col2:
        render_action_section(controller)

    if controller.error:
        st.error(controller.error)

    render_preview_section(controller)


if __name__ == "__main__":
    main()
