"""Central CSS definitions for tab-picker."""

# Modal base styles - the picker overlay inherits these
MODAL_CSS = """
/* Modal base positioning - picker floats near the top */
.modal-base {
    align: center top;
    padding-top: 2;
}

/* Dialog container base - elastic height */
.modal-base #dialog {
    height: auto;
    max-height: 90%;
    padding: 1 2;
    background: $surface;
    border: round $surface-lighten-1;
    overflow-y: auto;
}

.modal-lg #dialog {
    width: 80vw;
    min-width: 60;
    max-width: 120;
}
"""

# Common UI patterns shared across components
COMMON_CSS = """
/* Dialog title - centered, muted */
.dialog-title {
    text-align: center;
    width: 100%;
    margin-bottom: 1;
    color: $text-muted;
}

/* Dialog hint text - bottom of modals */
.dialog-hint {
    text-align: center;
    color: $text-disabled;
    margin-top: 1;
}
"""

# Combined base CSS for import
BASE_CSS = MODAL_CSS + COMMON_CSS
