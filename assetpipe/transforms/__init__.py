"""Built-in leaf transforms.

Each factory returns a Task (or a composite of tasks) ready to be placed in
a profile graph. External tools are invoked through ShellCommand templates.
"""

from .shell import ShellCommand
from .files import make_copy_task, copy_matched
from .markup import make_markup_task, render_markup
from .styles import make_styles_task
from .scripts import make_scripts_task
from .images import make_images_task
from .icons import make_icon_tasks, build_sprite, strip_colors

__all__ = [
    'ShellCommand',
    'make_copy_task', 'copy_matched',
    'make_markup_task', 'render_markup',
    'make_styles_task',
    'make_scripts_task',
    'make_images_task',
    'make_icon_tasks', 'build_sprite', 'strip_colors',
]
