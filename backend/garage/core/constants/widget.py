"""
Widget constants — debounce, result cap, indicator timings.
"""

# Quiet period after the last toggle before the garage is saved
SAVE_DEBOUNCE_SECONDS: float = 1.0

# Rendered catalog rows per search
RESULT_LIMIT: int = 100

SAVED_INDICATOR_SECONDS: float = 2.0
FAILED_INDICATOR_SECONDS: float = 3.0

INDICATOR_SAVING: str = "Saving..."
INDICATOR_SAVED: str = "✓ Saved"
INDICATOR_FAILED: str = "✗ Save failed"
