"""Incremental rebuilds for the resident watch session.

After the initial development build, a WatchSession maps file-system change
events to the unit that reprocesses them:

    session = WatchSession(
        bindings=[
            WatchBinding(Sources("src/scss/**/*.scss", base_path=root),
                         css_dev, reload=ReloadKind.STYLE_INJECT),
            WatchBinding(Sources("src/js/**/*.js", base_path=root),
                         js_dev, reload=ReloadKind.FULL_RELOAD),
        ],
        source=WatchdogEventSource(root / "src"),
        notifier=notifier,
    )
    await session.run()
"""

from .events import ChangeEvent, QueueEventSource, WatchdogEventSource
from .notifier import (
    LoggingViewer, QueueViewer, ReloadEvent, ReloadKind, ReloadNotifier, Viewer,
)
from .watcher import BindingState, WatchBinding, WatchSession

__all__ = [
    'ChangeEvent',
    'QueueEventSource',
    'WatchdogEventSource',
    'ReloadEvent',
    'ReloadKind',
    'ReloadNotifier',
    'Viewer',
    'QueueViewer',
    'LoggingViewer',
    'BindingState',
    'WatchBinding',
    'WatchSession',
]
