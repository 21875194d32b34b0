"""Tests for profile execution and the clean step."""

import asyncio
import logging

from assetpipe.exceptions import TransformError
from assetpipe.executor import Profile, ProfileExecutor, empty_directory, make_clean_task
from assetpipe.graph import concurrent_group, sequence
from assetpipe.pipeline import build_pipeline
from assetpipe.task import RunReport, Status, Task


def recording_task(name, calls, error=None):
    async def apply(paths):
        calls.append(name)
        if error is not None:
            raise error
        return []

    return Task(name, apply)


def snapshot(root):
    """Map every file below root to its bytes."""
    return {
        path.relative_to(root).as_posix(): path.read_bytes()
        for path in sorted(root.rglob('*')) if path.is_file()
    }


class TestClean:
    """Tests for emptying the output tree."""

    def test_removes_stray_files(self, tmp_path):
        build = tmp_path / 'build'
        (build / 'css').mkdir(parents=True)
        (build / 'css' / 'old.css').write_text('')
        (build / 'stray.txt').write_text('')

        empty_directory(build)

        assert build.is_dir()
        assert list(build.iterdir()) == []

    def test_missing_root_is_created(self, tmp_path):
        assert empty_directory(tmp_path / 'build') == []
        assert (tmp_path / 'build').is_dir()

    def test_clean_task(self, tmp_path):
        (tmp_path / 'build').mkdir()
        (tmp_path / 'build' / 'stray.txt').write_text('')

        result = asyncio.run(make_clean_task(tmp_path / 'build').execute())

        assert result.status is Status.SUCCESS
        assert not (tmp_path / 'build' / 'stray.txt').exists()


class TestProfileExecutor:
    """Tests for ProfileExecutor.run."""

    def test_clean_runs_before_transforms(self, tmp_path):
        calls = []
        unit = sequence(
            recording_task('clean', calls),
            concurrent_group(recording_task('html', calls), recording_task('css', calls)),
        )
        report = asyncio.run(ProfileExecutor().run(Profile('build', unit)))

        assert report.status is Status.SUCCESS
        assert calls[0] == 'clean'
        assert sorted(calls[1:]) == ['css', 'html']

    def test_failure_in_group_fails_profile(self):
        calls = []
        unit = sequence(
            recording_task('clean', calls),
            concurrent_group(recording_task('html', calls),
                             recording_task('css', calls, error=TransformError('syntax error')),
                             recording_task('js', calls)),
        )
        report = asyncio.run(ProfileExecutor().run(Profile('build', unit)))

        assert report.status is Status.FAILURE
        assert [f.name for f in report.failures] == ['css']
        assert sorted(calls) == ['clean', 'css', 'html', 'js']

    def test_failure_logged_once(self, caplog):
        """The failing task reports its error; the executor only summarizes."""
        calls = []
        unit = sequence(recording_task('css', calls, error=TransformError('syntax error')))

        with caplog.at_level(logging.DEBUG, logger='assetpipe'):
            asyncio.run(ProfileExecutor().run(Profile('build', unit)))

        errors = [r for r in caplog.records if r.levelno >= logging.ERROR]
        assert len(errors) == 1
        assert 'syntax error' in errors[0].getMessage()

    def test_post_action_receives_report(self):
        calls = []
        received = []

        async def post_action(report):
            received.append(report)

        profile = Profile('watch', sequence(recording_task('clean', calls)),
                          post_action=post_action)
        report = asyncio.run(ProfileExecutor().run(profile))

        assert received == [report]

    def test_post_action_runs_after_failure(self):
        calls = []
        received = []

        async def post_action(report):
            received.append(report.status)

        profile = Profile('watch', sequence(
            recording_task('clean', calls, error=TransformError('nope'))),
            post_action=post_action)
        asyncio.run(ProfileExecutor().run(profile))

        assert received == [Status.FAILURE]

    def test_describe(self):
        calls = []
        profile = Profile('build', sequence(recording_task('clean', calls), name='build'))
        assert profile.describe() == ['profile build', '  sequence build', '    clean']


class TestBuildProfile:
    """Running the real build profile with cp standing in for external tools."""

    def run_build(self, config):
        pipeline = build_pipeline(config)
        return asyncio.run(ProfileExecutor().run(pipeline.profiles['build']))

    def test_build_writes_output_tree(self, copy_config):
        report = self.run_build(copy_config)
        build = copy_config.build_dir

        assert report.status is Status.SUCCESS, report.failures
        assert (build / 'index.html').read_text() == '<body><header>Site</header></body>'
        assert (build / 'blog' / 'post.html').exists()
        assert (build / 'css' / 'styles.css').exists()
        assert (build / 'css' / 'styles.min.css').exists()
        assert (build / 'js' / 'app.js').exists()
        assert (build / 'js' / 'app.min.js').exists()
        assert (build / 'img' / 'logo.png').exists()
        assert (build / 'img' / 'logo.webp').exists()
        assert (build / 'img' / 'mark.svg').exists()
        assert (build / 'img' / 'sprite.svg').exists()
        assert (build / 'resources' / 'robots.txt').exists()
        assert (build / 'fonts' / 'heading.woff').exists()
        assert (build / 'fonts' / 'heading.woff2').exists()

        manifest = copy_config.path(copy_config.paths.font_manifest)
        assert manifest.read_text() == '@include font(heading, heading);\n'

    def test_stray_output_removed(self, copy_config):
        stray = copy_config.build_dir / 'stale' / 'old.css'
        stray.parent.mkdir(parents=True)
        stray.write_text('')

        self.run_build(copy_config)

        assert not stray.exists()

    def test_rebuild_is_byte_identical(self, copy_config):
        self.run_build(copy_config)
        first = snapshot(copy_config.build_dir)
        self.run_build(copy_config)
        second = snapshot(copy_config.build_dir)

        assert first.keys() == second.keys()
        assert first == second

    def test_failing_tool_fails_build(self, copy_config):
        copy_config.commands.css_compile = 'false'
        report = self.run_build(copy_config)

        assert report.status is Status.FAILURE
        assert [f.name for f in report.failures] == ['css']
        # siblings in the group still ran
        assert (copy_config.build_dir / 'js' / 'app.js').exists()
