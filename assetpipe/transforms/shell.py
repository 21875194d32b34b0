"""Shell command templates for external transform tools.

Variables are injected in TWO ways:
1. Format string substitution: {input}, {output}
2. Environment variables: input=/path/to/styles.scss, output=/path/to/styles.css

Example:
    compile = ShellCommand("sass --style=expanded {input} {output}")
    await compile.run(input=source, output=dest)
"""

import asyncio
import logging
import os
import shlex
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from ..exceptions import TransformError

logger = logging.getLogger(__name__)


@dataclass
class ShellCommand:
    """An external tool invocation rendered from a template."""

    template: str
    cwd: Optional[Path] = None

    @property
    def enabled(self) -> bool:
        """An empty template disables the step."""
        return bool(self.template.strip())

    def render(self, subs: Dict[str, str]) -> str:
        """Format the template with shell-quoted substitutions."""
        quoted = {key: shlex.quote(str(value)) for key, value in subs.items()}
        try:
            return self.template.format(**quoted)
        except KeyError as e:
            available = ', '.join(sorted(subs))
            raise TransformError(
                f"Unknown variable {e} in command template. "
                f"Available variables: {available}"
            )

    def _build_environment(self, subs: Dict[str, str]) -> Dict[str, str]:
        env = os.environ.copy()
        for key, value in subs.items():
            env[key] = str(value)
        return env

    async def run(self, **subs) -> str:
        """Run the command and return its stdout.

        Raises:
            TransformError: If the command exits with a non-zero status
        """
        subs = {key: str(value) for key, value in subs.items()}
        cmd = self.render(subs)
        logger.debug("$ %s", cmd)

        proc = await asyncio.create_subprocess_shell(
            cmd,
            stdout=asyncio.subprocess.PIPE,
            stderr=asyncio.subprocess.PIPE,
            env=self._build_environment(subs),
            cwd=str(self.cwd) if self.cwd else None,
        )
        stdout, stderr = await proc.communicate()
        stderr_text = stderr.decode(errors='replace').strip()

        if proc.returncode != 0:
            message = f"command exited with status {proc.returncode}: {cmd}"
            if stderr_text:
                message += f"\n{stderr_text}"
            raise TransformError(message, command=cmd, stderr=stderr_text)

        return stdout.decode(errors='replace')

    def __repr__(self) -> str:
        return f"ShellCommand({self.template!r})"
