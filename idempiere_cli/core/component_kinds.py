"""Component kind identifiers.

The set is closed: generators, manifest requirements and CLI subcommands
are all keyed by these strings.
"""

from __future__ import annotations

CALLOUT = "callout"
EVENT_HANDLER = "event-handler"
PROCESS = "process"
PROCESS_MAPPED = "process-mapped"
ZK_FORM = "zk-form"
ZK_FORM_ZUL = "zk-form-zul"
LISTBOX_GROUP = "listbox-group"
WLISTBOX_EDITOR = "wlistbox-editor"
REPORT = "report"
JASPER_REPORT = "jasper-report"
WINDOW_VALIDATOR = "window-validator"
REST_EXTENSION = "rest-extension"
FACTS_VALIDATOR = "facts-validator"
BASE_TEST = "base-test"

# Order matters: fresh scaffolds run generators in this order
COMPONENT_KINDS: tuple[str, ...] = (
    CALLOUT,
    EVENT_HANDLER,
    PROCESS,
    PROCESS_MAPPED,
    ZK_FORM,
    ZK_FORM_ZUL,
    LISTBOX_GROUP,
    WLISTBOX_EDITOR,
    REPORT,
    JASPER_REPORT,
    WINDOW_VALIDATOR,
    REST_EXTENSION,
    FACTS_VALIDATOR,
    BASE_TEST,
)

UI_KINDS = frozenset({ZK_FORM, ZK_FORM_ZUL, LISTBOX_GROUP, WLISTBOX_EDITOR, WINDOW_VALIDATOR})
ACTIVATOR_KINDS = frozenset({PROCESS_MAPPED, JASPER_REPORT})

# Feature name used by ``init --with-test`` on standalone plugins
TEST_FEATURE = "test"


def flag_name(kind: str) -> str:
    """Template flag for a kind: ``event-handler`` -> ``withEventHandler``."""
    return "with" + "".join(part.capitalize() for part in kind.split("-"))
