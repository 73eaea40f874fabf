"""Raw-text view of the coordinator's document."""

from typing import Optional

import structlog

from workflow_editor.document.models import WorkflowDocument
from workflow_editor.exceptions import DocumentError
from workflow_editor.sync.coordinator import SyncCoordinator
from workflow_editor.sync.state import EditorState
from workflow_editor.sync.timers import Debouncer, Scheduler

logger = structlog.get_logger(__name__)


class DocumentTextView:
    """Text buffer bound to a coordinator while the view is shown.

    ``mount()`` subscribes to the coordinator and renders the document;
    ``dispose()`` cancels any pending edit and unsubscribes. Use it as a
    context manager so the view is released on every exit path::

        with DocumentTextView(coordinator) as view:
            view.edit(text)

    User edits are debounced: only the latest text is parsed, once, after
    ``text_edit_debounce`` seconds of quiet. Unparseable text is discarded
    and its message kept in ``error`` for the presentation layer.
    """

    def __init__(
        self,
        coordinator: SyncCoordinator,
        scheduler: Optional[Scheduler] = None,
        debounce: Optional[float] = None,
        fmt: str = "json"
    ):
        self._coordinator = coordinator
        self._scheduler = scheduler or coordinator.scheduler
        self._delay = coordinator.settings.text_edit_debounce if debounce is None else debounce
        self._indent = coordinator.settings.export_indent
        self._fmt = fmt
        self._debouncer: Optional[Debouncer[str]] = None
        self._unsubscribe = None
        self._text = ""
        self._rendered = ""
        self.error: Optional[str] = None

    def __enter__(self) -> "DocumentTextView":
        return self.mount()

    def __exit__(self, exc_type, exc, tb) -> None:
        self.dispose()

    @property
    def mounted(self) -> bool:
        return self._debouncer is not None

    @property
    def text(self) -> str:
        return self._text

    @property
    def pending(self) -> bool:
        return self.mounted and self._debouncer.pending

    def mount(self) -> "DocumentTextView":
        if self.mounted:
            return self
        self._rendered = self._text = self._render(self._coordinator.document)
        self.error = None
        self._debouncer = Debouncer(self._scheduler, self._delay, self._apply)
        self._unsubscribe = self._coordinator.subscribe(self._on_state_change)
        return self

    def dispose(self) -> None:
        if not self.mounted:
            return
        self._debouncer.cancel()
        self._debouncer = None
        self._unsubscribe()
        self._unsubscribe = None

    def edit(self, text: str) -> None:
        """Record a user edit; applied after the quiet period."""
        if not self.mounted:
            raise RuntimeError("DocumentTextView is not mounted")
        self._text = text
        self._debouncer.push(text)

    def flush(self) -> bool:
        """Apply a pending edit immediately."""
        return self.mounted and self._debouncer.flush()

    def _render(self, document: WorkflowDocument) -> str:
        return document.export(self._fmt, indent=self._indent)

    def _apply(self, text: str) -> None:
        try:
            document = WorkflowDocument.parse(text, self._fmt)
        except DocumentError as e:
            self.error = str(e)
            logger.info("text_edit_discarded", error=self.error)
            return

        self.error = None
        self._coordinator.apply_document_edit(document)

    def _on_state_change(self, state: EditorState) -> None:
        text = self._render(state.document)
        if text == self._rendered:
            return
        self._rendered = text
        if text == self._text:
            return
        # Replacing the buffer also replaces keystrokes still waiting to apply
        self._debouncer.cancel()
        self._text = text
