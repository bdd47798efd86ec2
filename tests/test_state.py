"""
Tests for image_updater_modules/state.py
"""

import json
import sys
from pathlib import Path

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from image_updater_modules.state import load_operation_state, save_operation_state, clear_operation_state


class TestOperationState:
    """Tests for operation_state.json handling."""

    def test_missing_file(self, mock_state_files):
        assert load_operation_state() == {"operation": None, "uploaded_file": None}

    def test_save_and_load(self, mock_state_files, operation_payload):
        save_operation_state({"operation": operation_payload(), "uploaded_file": "/tmp/a.csv"})

        state = load_operation_state()

        assert state["operation"]["operationId"] == "op-123"
        assert state["uploaded_file"] == "/tmp/a.csv"
        assert "last_updated" in state

    def test_corrupt_file(self, mock_state_files, caplog):
        (mock_state_files / "operation_state.json").write_text("{broken")

        assert load_operation_state()["operation"] is None
        assert "Failed to parse operation_state.json" in caplog.text

    def test_clear(self, mock_state_files):
        save_operation_state({"operation": None, "uploaded_file": None})
        clear_operation_state()

        assert not (mock_state_files / "operation_state.json").exists()
        clear_operation_state()

    def test_snapshot_is_not_mutated(self, mock_state_files):
        snapshot = {"operation": None, "uploaded_file": None}
        save_operation_state(snapshot)
        assert "last_updated" not in snapshot
        assert json.loads((mock_state_files / "operation_state.json").read_text())["operation"] is None
