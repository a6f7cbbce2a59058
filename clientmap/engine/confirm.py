"""
Confirmation Dialog
Two-state modal gate (hidden/shown) in front of destructive actions.
While shown, an in-flight flag disables both buttons until the caller finishes.
The caller decides when to hide it.
"""

CONFIRM_LABEL = "Confirm delete"
IN_FLIGHT_LABEL = "Deleting..."


class ConfirmDialog:

    def __init__(self, title: str, message: str):
        self.title = title
        self.message = message
        self.is_open = False
        self.in_flight = False

    def show(self):
        self.is_open = True
        self.in_flight = False

    def hide(self):
        self.is_open = False
        self.in_flight = False

    def begin(self):
        """Action started: lock the buttons."""
        self.in_flight = True

    def end(self):
        """Action finished without closing (e.g. it failed)."""
        self.in_flight = False

    @property
    def buttons_enabled(self) -> bool:
        return self.is_open and not self.in_flight

    @property
    def confirm_label(self) -> str:
        return IN_FLIGHT_LABEL if self.in_flight else CONFIRM_LABEL
