"""
Application controller for the scan-to-spreadsheet workflow.

Owns the workflow state and wires the credential store, image acquisition,
extraction client and exporter together. Each user action maps to one
method; each method applies a single state transition per outcome and
leaves the application in an actionable state on every failure.
"""

import logging
from enum import Enum
from typing import Optional

import pandas as pd

from tablescan import messages
from tablescan.config import AppConfig, get_config
from tablescan.errors import (
    AuthError,
    EmptyResultError,
    ExportError,
    ExtractionError,
    ValidationError,
)
from tablescan.export.excel import ExcelExporter, SpreadsheetFile
from tablescan.image.acquisition import AcquiredImage, ImageAcquirer, ImageSource
from tablescan.image.encoding import encode
from tablescan.llm.client import GeminiTableClient
from tablescan.models.table import Table
from tablescan.preview import build_preview_frame
from tablescan.storage.credentials import CredentialStore

logger = logging.getLogger(__name__)


class AppState(Enum):
    """Workflow states."""
    NO_CREDENTIAL = "no_credential"
    AWAITING_IMAGE = "awaiting_image"
    IMAGE_READY = "image_ready"
    CONVERTING = "converting"
    CONVERTED = "converted"
    CONVERSION_FAILED = "conversion_failed"
    EXPORTING = "exporting"
    EXPORT_DONE = "export_done"
    EXPORT_FAILED = "export_failed"


class Operation(Enum):
    """Long-running operation currently in flight."""
    IDLE = "idle"
    CONVERTING = "converting"
    EXPORTING = "exporting"


class ConversionController:
    """
    Drives the key entry -> image selection -> conversion -> export flow.

    Collaborators are injected so the controller can be exercised without
    Streamlit, the network or the filesystem.
    """

    def __init__(
        self,
        store: CredentialStore,
        client: GeminiTableClient,
        exporter: Optional[ExcelExporter] = None,
        acquirer: Optional[ImageAcquirer] = None,
        config: Optional[AppConfig] = None,
    ):
        self.config = config or get_config()
        self.store = store
        self.client = client
        self.exporter = exporter or ExcelExporter()
        self.acquirer = acquirer or ImageAcquirer(self.config)

        self.state = AppState.NO_CREDENTIAL
        self.operation = Operation.IDLE
        self.credential: Optional[str] = None
        self.image: Optional[AcquiredImage] = None
        self.table: Optional[Table] = None
        self.spreadsheet: Optional[SpreadsheetFile] = None
        self.error: Optional[str] = None

    # ------------------------------------------------------------------
    # Derived flags
    # ------------------------------------------------------------------

    @property
    def is_loading(self) -> bool:
        return self.operation is not Operation.IDLE

    @property
    def can_convert(self) -> bool:
        return self.image is not None and self.credential is not None and not self.is_loading

    @property
    def can_export(self) -> bool:
        return self.table is not None and not self.is_loading

    # ------------------------------------------------------------------
    # Credential
    # ------------------------------------------------------------------

    def start(self) -> AppState:
        """Load the stored key and pick the initial state."""
        self.credential = self.store.load()
        if self.credential:
            self._set_state(AppState.IMAGE_READY if self.image else AppState.AWAITING_IMAGE)
        else:
            self._set_state(AppState.NO_CREDENTIAL)
        return self.state

    def submit_credential(self, credential: str) -> bool:
        """Store a user-entered key. Returns False when the key is blank."""
        credential = (credential or "").strip()
        if not credential:
            self.error = messages.API_KEY_REQUIRED
            return False

        self.store.save(credential)
        self.credential = credential
        self.error = None
        self._set_state(AppState.IMAGE_READY if self.image else AppState.AWAITING_IMAGE)
        return True

    def forget_credential(self):
        """Remove the stored key and return to key entry."""
        self.store.clear()
        self.credential = None
        self._set_state(AppState.NO_CREDENTIAL)

    # ------------------------------------------------------------------
    # Image selection
    # ------------------------------------------------------------------

    def select_image(
        self,
        data: bytes,
        mime_type: Optional[str],
        name: str = "",
        source: ImageSource = ImageSource.UPLOAD,
    ) -> Optional[AcquiredImage]:
        """
        Replace the current image with a new selection.

        Clears the previous table, export and error. On a rejected file the
        previous image is dropped as well and the error slot is filled.
        """
        self.table = None
        self.spreadsheet = None
        self.error = None
        self._set_state(self._idle_state(AppState.AWAITING_IMAGE))

        try:
            self.image = self.acquirer.accept(data, mime_type, name=name, source=source)
        except ValidationError as e:
            self.image = None
            self.error = e.message
            return None

        self._set_state(self._idle_state(AppState.IMAGE_READY))
        return self.image

    def select_upload(self, uploaded_file) -> Optional[AcquiredImage]:
        """Select a Streamlit UploadedFile from the file uploader."""
        return self.select_image(
            uploaded_file.getvalue(),
            uploaded_file.type,
            name=uploaded_file.name,
            source=ImageSource.UPLOAD,
        )

    def select_camera_frame(self, frame) -> Optional[AcquiredImage]:
        """Select a frame captured with st.camera_input."""
        return self.select_image(
            frame.getvalue(),
            frame.type,
            name=frame.name or "capture.jpg",
            source=ImageSource.CAMERA,
        )

    def open_camera(self):
        self.error = None

    # ------------------------------------------------------------------
    # Conversion
    # ------------------------------------------------------------------

    def convert(self) -> Optional[Table]:
        """
        Send the current image to the extraction client.

        Returns:
            The extracted table, or None when the conversion did not succeed
        """
        if self.is_loading:
            return None
        if self.image is None:
            self.error = messages.NO_IMAGE_SELECTED
            return None
        if not self.credential:
            self.error = messages.API_KEY_NOT_SET
            return None

        self.operation = Operation.CONVERTING
        self.error = None
        self.table = None
        self.spreadsheet = None
        self._set_state(AppState.CONVERTING)

        try:
            table = self.client.extract(encode(self.image), self.credential)
        except AuthError:
            logger.warning("API key rejected, clearing stored key")
            self.error = messages.INVALID_API_KEY
            self.store.clear()
            self.credential = None
            self._set_state(AppState.NO_CREDENTIAL)
            return None
        except EmptyResultError:
            self._fail_conversion(messages.EMPTY_RESULT)
            return None
        except ExtractionError as e:
            self._fail_conversion(e.message or messages.UNKNOWN_ERROR)
            return None
        except Exception:
            logger.exception("Unexpected error during conversion")
            self._fail_conversion(messages.UNKNOWN_ERROR)
            return None
        finally:
            self.operation = Operation.IDLE

        if table is None or table.is_empty:
            self._fail_conversion(messages.EMPTY_RESULT)
            return None

        self.table = table
        self._set_state(AppState.CONVERTED)
        return table

    def _fail_conversion(self, message: str):
        self.error = message
        self._set_state(AppState.CONVERSION_FAILED)

    # ------------------------------------------------------------------
    # Export
    # ------------------------------------------------------------------

    def export(self) -> Optional[SpreadsheetFile]:
        """
        Generate the spreadsheet for the current table.

        Returns:
            The generated file, or None when there is nothing to export or
            the export failed
        """
        if self.is_loading:
            return None
        if self.table is None:
            self.error = messages.NO_DATA_TO_DOWNLOAD
            return None

        self.operation = Operation.EXPORTING
        self.error = None
        self._set_state(AppState.EXPORTING)

        try:
            spreadsheet = self.exporter.export(self.table, self.config.export_filename)
        except ExportError as e:
            self.error = e.message or messages.UNKNOWN_ERROR
            self._set_state(AppState.EXPORT_FAILED)
            return None
        except Exception:
            logger.exception("Unexpected error during export")
            self.error = messages.UNKNOWN_ERROR
            self._set_state(AppState.EXPORT_FAILED)
            return None
        finally:
            self.operation = Operation.IDLE

        self.spreadsheet = spreadsheet
        self._set_state(AppState.EXPORT_DONE)
        return spreadsheet

    # ------------------------------------------------------------------
    # Preview
    # ------------------------------------------------------------------

    def preview(self) -> Optional[pd.DataFrame]:
        return build_preview_frame(self.table)

    # ------------------------------------------------------------------

    def _idle_state(self, state: AppState) -> AppState:
        """Image selection does not leave key entry until a key exists."""
        return state if self.credential else AppState.NO_CREDENTIAL

    def _set_state(self, state: AppState):
        if state is not self.state:
            logger.debug(f"State {self.state.value} -> {state.value}")
        self.state = state
