"""The asset pipeline: transforms, profiles and watch bindings.

    build  = sequence(clean, parallel(html, css, js, icons, img, resources, fonts))
    watch  = sequence(clean, parallel(html, css:dev, js:dev, icons, img, resources, fonts))
             then a resident WatchSession
    ttf    = standalone .otf -> .ttf conversion

Output layout below the build directory:

    *.html  css/  js/  img/ (+ img/sprite.svg)  fonts/  resources/
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, List

from .config import AssetpipeConfig
from .executor import Profile, make_clean_task
from .fonts import make_font_tasks, make_otf_task
from .graph import concurrent_group, sequence
from .reactive import (
    LoggingViewer, ReloadKind, ReloadNotifier, WatchBinding, WatchdogEventSource,
    WatchSession,
)
from .registry import TransformRegistry
from .task import RunReport, Task
from .taskgen import OutputDir, Sources
from .transforms import (
    ShellCommand, make_copy_task, make_icon_tasks, make_images_task,
    make_markup_task, make_scripts_task, make_styles_task,
)

logger = logging.getLogger(__name__)


@dataclass
class Pipeline:
    """Everything the CLI needs for one configuration."""

    config: AssetpipeConfig
    registry: TransformRegistry
    profiles: Dict[str, Profile] = field(default_factory=dict)
    bindings: List[WatchBinding] = field(default_factory=list)
    notifier: ReloadNotifier = field(default_factory=ReloadNotifier)
    utilities: Dict[str, Task] = field(default_factory=dict)

    def make_session(self, source=None) -> WatchSession:
        """Create the resident session over this pipeline's bindings."""
        watch = self.config.watch
        if source is None:
            source = WatchdogEventSource(self.config.path(self.config.paths.src),
                                         polling=watch.polling)
        return WatchSession(self.bindings, source, self.notifier,
                            debounce=watch.debounce,
                            max_concurrent=watch.max_concurrent)

    def describe(self) -> List[str]:
        lines = []
        for profile in self.profiles.values():
            lines.extend(profile.describe())
        lines.append('watch bindings')
        for binding in self.bindings:
            reload = binding.reload.value if binding.reload else 'no reload'
            lines.append(f'  {binding.sources} -> {binding.name} ({reload})')
        for name, task in self.utilities.items():
            lines.append(f'utility {name}  <- {task.sources}')
        return lines


def build_pipeline(config: AssetpipeConfig) -> Pipeline:
    """Register every transform and compose the profiles."""
    paths = config.paths
    commands = config.commands
    base = config.base_path
    build = config.build_dir
    registry = TransformRegistry(base_path=base)

    def sources(patterns) -> Sources:
        return Sources(patterns, base_path=base)

    def command(template: str) -> ShellCommand:
        return ShellCommand(template, cwd=base)

    markup_sources = sources(paths.markup)
    styles_sources = sources(paths.styles)
    scripts_sources = sources(paths.scripts)

    html = registry.add(make_markup_task(markup_sources, OutputDir(build)))
    css = registry.add(make_styles_task(
        styles_sources, OutputDir(build / 'css'),
        compile_cmd=command(commands.css_compile),
        postprocess_cmd=command(commands.css_postprocess),
        minify_cmd=command(commands.css_minify),
        name='css',
    ))
    css_dev = registry.add(make_styles_task(
        styles_sources, OutputDir(build / 'css'),
        compile_cmd=command(commands.css_compile_dev),
        name='css:dev',
    ))
    js = registry.add(make_scripts_task(
        scripts_sources, OutputDir(build / 'js'),
        minify_cmd=command(commands.js_minify), name='js',
    ))
    js_dev = registry.add(make_scripts_task(
        scripts_sources, OutputDir(build / 'js'), name='js:dev',
    ))
    img = registry.add(make_images_task(
        sources(paths.images), OutputDir(build / 'img'),
        webp=config.images.webp, quality=config.images.quality,
    ))
    resources = registry.add(make_copy_task(
        'resources', sources(paths.resources), OutputDir(build / 'resources'),
    ))

    icons = make_icon_tasks(
        sources(paths.icons_monochrome),
        sources(paths.icons_colorful),
        prebuilt_dir=config.path(paths.icons_prebuilt),
        sprite_path=build / 'img' / 'sprite.svg',
        optimize_cmd=command(commands.svg_optimize),
    )
    fonts = make_font_tasks(
        sources(paths.fonts),
        fonts_dir=build / 'fonts',
        manifest=config.path(paths.font_manifest),
        directive=config.fonts.directive,
    )
    for task in icons.leaves() + fonts.leaves():
        registry.add(task)

    clean = registry.add(make_clean_task(build))
    ttf = make_otf_task(sources(paths.otf_fonts))

    pipeline = Pipeline(config=config, registry=registry, utilities={'ttf': ttf})
    pipeline.bindings = [
        WatchBinding(sources(paths.markup_watch), html, ReloadKind.FULL_RELOAD),
        WatchBinding(sources(paths.styles_watch), css_dev, ReloadKind.STYLE_INJECT),
        WatchBinding(scripts_sources, js_dev, ReloadKind.FULL_RELOAD),
        WatchBinding(sources(paths.images), img, ReloadKind.FULL_RELOAD),
        WatchBinding(sources(paths.resources), resources),
        WatchBinding(sources(paths.icons_monochrome + paths.icons_colorful),
                     icons, ReloadKind.FULL_RELOAD),
        WatchBinding(sources(paths.fonts), fonts, ReloadKind.FULL_RELOAD),
    ]

    async def start_session(report: RunReport) -> None:
        pipeline.notifier.connect(LoggingViewer())
        await pipeline.make_session().run()

    pipeline.profiles['build'] = Profile('build', sequence(
        clean,
        concurrent_group(html, css, js, icons, img, resources, fonts, name='transforms'),
        name='build',
    ))
    pipeline.profiles['watch'] = Profile('watch', sequence(
        clean,
        concurrent_group(html, css_dev, js_dev, icons, img, resources, fonts,
                         name='transforms:dev'),
        name='watch',
    ), post_action=start_session)
    return pipeline
