"""
Image update operation lifecycle.

States: no operation -> pending -> processing -> completed | failed.

- create: only with no tracked operation and a non-empty selection
- download / upload CSV: only while pending, state unchanged
- process: only while pending and after a successful upload; the operation is
  re-fetched afterwards and that record decides the new state
- start_new: only from a terminal state; forgets the finished operation

The allowed-action checks mirror what the UI enables. Calling an action in the
wrong state raises OperationStateError, which signals a caller bug rather
than a recoverable condition.
"""

import os
import time
import logging
from typing import Callable, Dict, Iterable, Optional, Tuple

from . import server_api
from .config import log_and_status
from .models import ImageUpdateOperation
from .server_api import EmptySelectionError
from .utils import csv_filename_for_operation, is_csv_file

NO_OPERATION = "none"
PENDING = "pending"
PROCESSING = "processing"
COMPLETED = "completed"
FAILED = "failed"

# Terminal states share the highest rank
_STATE_RANK = {NO_OPERATION: 0, PENDING: 1, PROCESSING: 2, COMPLETED: 3, FAILED: 3}


class OperationStateError(Exception):
    """An action was requested in a lifecycle state that does not allow it."""


class CsvFileError(ValueError):
    """The file chosen for upload is missing or is not a CSV file."""


class ImageUpdateWorkflow:
    """Tracks the single active image update operation of a session."""

    def __init__(self, cfg: Dict, status_fn: Callable = None,
                 on_complete: Callable[[ImageUpdateOperation], None] = None):
        self.cfg = cfg
        self.status_fn = status_fn
        self.on_complete = on_complete
        self.operation: Optional[ImageUpdateOperation] = None
        self.uploaded_file: Optional[str] = None

    # ------------------------------------------------------------------
    # State queries
    # ------------------------------------------------------------------

    @property
    def state(self) -> str:
        if self.operation is None:
            return NO_OPERATION
        return self.operation.status

    @property
    def is_active(self) -> bool:
        return self.state in (PENDING, PROCESSING)

    def can_create(self, selected_count: int) -> bool:
        return self.state == NO_OPERATION and selected_count > 0

    def can_download(self) -> bool:
        return self.state == PENDING

    def can_upload(self) -> bool:
        return self.state == PENDING

    def can_process(self) -> bool:
        return self.state == PENDING and self.uploaded_file is not None

    def can_refresh(self) -> bool:
        return self.operation is not None

    def can_start_new(self) -> bool:
        return self.state in (COMPLETED, FAILED)

    def _require(self, action: str, allowed: bool):
        if not allowed:
            raise OperationStateError(f"Cannot {action} while operation state is '{self.state}'")

    # ------------------------------------------------------------------
    # Actions
    # ------------------------------------------------------------------

    def create(self, collection_id: str, product_ids: Iterable[str]) -> ImageUpdateOperation:
        """
        Create a new operation for the selected products.

        Raises:
            OperationStateError: an operation is already tracked
            EmptySelectionError: no products selected (no request is sent)
        """
        self._require("create an operation", self.state == NO_OPERATION)

        product_ids = list(product_ids)
        if not product_ids:
            raise EmptySelectionError("Select at least one product before creating an operation")

        operation = server_api.create_image_update_operation(collection_id, product_ids, self.cfg)
        if operation.status != PENDING:
            raise OperationStateError(
                f"Server created operation {operation.operation_id} in state '{operation.status}', expected 'pending'"
            )

        self.operation = operation
        self.uploaded_file = None
        log_and_status(
            self.status_fn,
            f"Created operation {operation.operation_id} for {operation.products_count} products",
            ui_msg="✅ Operation created successfully!"
        )
        return operation

    def download_csv(self, dest_dir: str) -> str:
        """
        Save the operation's CSV template into dest_dir.

        Returns:
            Path of the written file
        """
        self._require("download the CSV", self.can_download())

        data = server_api.download_image_update_csv(self.operation.operation_id, self.cfg)

        os.makedirs(dest_dir, exist_ok=True)
        path = os.path.join(dest_dir, csv_filename_for_operation(self.operation.operation_id))
        with open(path, "wb") as f:
            f.write(data)

        log_and_status(
            self.status_fn,
            f"Saved CSV template for operation {self.operation.operation_id} to {path}",
            ui_msg=f"✅ CSV template downloaded to {path}"
        )
        return path

    def upload_csv(self, path: str) -> Dict:
        """
        Upload the edited CSV.

        The file is checked to be a CSV before any request is made; on
        rejection the previously uploaded file (if any) is kept.

        Raises:
            CsvFileError: path is missing or not a CSV file
        """
        self._require("upload a CSV", self.can_upload())

        if not is_csv_file(path):
            raise CsvFileError("Please select a valid CSV file.")
        if not os.path.isfile(path):
            raise CsvFileError(f"CSV file not found: {path}")

        result = server_api.upload_image_update_csv(self.operation.operation_id, path, self.cfg)
        self.uploaded_file = path

        message = result.get("message") or "CSV file uploaded successfully!"
        log_and_status(self.status_fn, f"Uploaded {path}: {message}", ui_msg=f"✅ {message}")
        return result

    def process(self) -> Tuple[Dict, ImageUpdateOperation]:
        """
        Apply the uploaded CSV and re-fetch the operation.

        The re-fetched record alone decides the new state. If the request
        fails, or the server leaves the operation pending, it stays pending
        and can be processed again.

        Returns:
            Tuple of (server message payload, re-fetched operation)
        """
        self._require("process image updates", self.can_process())

        operation_id = self.operation.operation_id
        result = server_api.process_image_updates(operation_id, self.cfg)

        operation = self.refresh()

        if result.get("success") is False:
            message = result.get("message") or result.get("error") or "The server did not accept the image updates"
            log_and_status(
                self.status_fn,
                f"Process request for {operation_id} rejected: {message}",
                level="error",
                ui_msg=f"❌ {message}"
            )
        elif operation.status == PENDING:
            log_and_status(
                self.status_fn,
                f"Operation {operation_id} is still pending after the process request",
                level="warning",
                ui_msg="⚠️ Operation is still pending. Process it again once the server is ready."
            )
        else:
            message = result.get("message") or "Image updates processed successfully!"
            log_and_status(self.status_fn, f"Process requested for {operation_id}: {message}", ui_msg=f"✅ {message}")
        return result, operation

    def refresh(self) -> ImageUpdateOperation:
        """Re-fetch the tracked operation; the server's record is authoritative."""
        self._require("refresh the operation", self.can_refresh())
        operation = server_api.get_image_update_operation(self.operation.operation_id, self.cfg)
        return self._apply(operation)

    def wait_for_completion(self, poll_interval: float = None, max_polls: int = None,
                            sleep: Callable[[float], None] = time.sleep) -> ImageUpdateOperation:
        """
        Re-fetch the operation while it is processing.

        Stops at a terminal state or after max_polls re-fetches, whichever
        comes first.
        """
        if poll_interval is None:
            poll_interval = self.cfg.get("POLL_INTERVAL", 2)
        if max_polls is None:
            max_polls = self.cfg.get("MAX_POLLS", 30)

        polls = 0
        while self.state == PROCESSING and polls < max_polls:
            sleep(poll_interval)
            self.refresh()
            polls += 1

        if self.state == PROCESSING:
            log_and_status(
                self.status_fn,
                f"Operation {self.operation.operation_id} still processing after {polls} polls",
                level="warning"
            )
        return self.operation

    def start_new(self) -> None:
        """Forget a finished operation so another one can be created."""
        self._require("start a new operation", self.can_start_new())
        logging.info(f"Closing finished operation {self.operation.operation_id} ({self.state})")
        self.operation = None
        self.uploaded_file = None

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def _apply(self, operation: ImageUpdateOperation) -> ImageUpdateOperation:
        """Adopt a newer record of the tracked operation, never moving backwards."""
        current = self.operation
        if operation.operation_id != current.operation_id:
            raise ValueError(
                f"Received operation {operation.operation_id} while tracking {current.operation_id}"
            )

        old_state = current.status
        new_state = operation.status

        if _STATE_RANK[new_state] < _STATE_RANK[old_state]:
            logging.warning(
                f"Ignoring status '{new_state}' for operation {operation.operation_id}; "
                f"already '{old_state}'"
            )
            return current

        if current.is_terminal and new_state != old_state:
            logging.warning(
                f"Ignoring status '{new_state}' for finished operation {operation.operation_id} ('{old_state}')"
            )
            return current

        self.operation = operation

        if new_state != old_state:
            logging.info(f"Operation {operation.operation_id}: {old_state} -> {new_state}")
            if operation.is_terminal:
                self._report_finished(operation)

        return operation

    def _report_finished(self, operation: ImageUpdateOperation):
        if operation.status == COMPLETED:
            log_and_status(
                self.status_fn,
                f"Operation {operation.operation_id} completed: {operation.images_updated} images updated",
                ui_msg=f"✅ Operation completed: {operation.images_updated} images updated"
            )
        else:
            log_and_status(
                self.status_fn,
                f"Operation {operation.operation_id} failed: {operation.error_message or 'no error message'}",
                level="error",
                ui_msg=f"❌ Operation failed: {operation.error_message or 'unknown error'}"
            )

        if self.on_complete is not None:
            self.on_complete(operation)

    # ------------------------------------------------------------------
    # Persistence (CLI sessions)
    # ------------------------------------------------------------------

    def snapshot(self) -> Dict:
        return {
            "operation": self.operation.to_dict() if self.operation else None,
            "uploaded_file": self.uploaded_file,
        }

    def restore(self, snapshot: Dict) -> None:
        operation = (snapshot or {}).get("operation")
        self.operation = ImageUpdateOperation.from_dict(operation) if operation else None
        self.uploaded_file = (snapshot or {}).get("uploaded_file") if self.operation else None
