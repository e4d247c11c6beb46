"""
KaTeX renderer.

Runs KaTeX's ``renderToString`` in a Node.js subprocess. The LaTeX source is
sent as JSON on stdin so no quoting of user input is ever needed. KaTeX is
called with ``throwOnError: false`` so malformed math comes back as KaTeX's
own red error markup; only a missing/broken Node or KaTeX install raises.
"""

import asyncio
import html
import json
import logging
import os
from pathlib import Path
from typing import Optional

from ..errors import RendererUnavailableError

logger = logging.getLogger(__name__)

# Exit codes of the script below
_EXIT_RENDER_FAILED = 2
_EXIT_KATEX_MISSING = 3

_KATEX_SCRIPT = r"""
const fs = require('fs');
let katex;
try {
  katex = require('katex');
} catch (e) {
  process.stderr.write('KaTeX not found: ' + e.message);
  process.exit(3);
}
try {
  require('katex/contrib/mhchem');
} catch (e) {
  // \ce{...} unavailable
}
const input = JSON.parse(fs.readFileSync(0, 'utf-8'));
try {
  process.stdout.write(katex.renderToString(input.latex, {
    displayMode: input.displayMode,
    throwOnError: false,
    output: 'htmlAndMathml',
    strict: 'ignore',
    trust: input.trust,
  }));
} catch (e) {
  process.stderr.write(String(e && e.message || e));
  process.exit(2);
}
"""


class KatexRenderer:
    """
    LaTeX -> KaTeX HTML through Node.js.

    Usage:
        renderer = KatexRenderer(module_dir=Path("node_modules/katex"))
        markup = await renderer.render(r"\\frac{a}{b}", display_mode=True)
    """

    name = "katex"

    def __init__(
        self,
        module_dir: Path,
        node_binary: str = "node",
        timeout: float = 10.0,
        css_path: Optional[Path] = None,
        trust: bool = False,
    ):
        """
        Args:
            module_dir: Directory of the installed ``katex`` npm package
            node_binary: Node.js executable
            timeout: Seconds allowed per formula
            css_path: katex.min.css location (defaults to <module_dir>/dist/katex.min.css)
            trust: Enable KaTeX commands that reference external resources (\\href, \\includegraphics)
        """
        self.module_dir = Path(module_dir)
        self.node_binary = node_binary
        self.timeout = timeout
        self.trust = trust
        self._css_path = Path(css_path) if css_path else self.module_dir / "dist" / "katex.min.css"

    @property
    def stylesheet_path(self) -> Optional[Path]:
        return self._css_path

    def _node_env(self) -> dict:
        env = dict(os.environ)
        node_modules = str(self.module_dir.parent)
        existing = env.get("NODE_PATH")
        env["NODE_PATH"] = node_modules + (os.pathsep + existing if existing else "")
        return env

    @staticmethod
    async def _kill(proc) -> None:
        if proc.returncode is not None:
            return
        try:
            proc.kill()
        except ProcessLookupError:
            return
        await asyncio.shield(proc.wait())

    async def render(self, latex: str, display_mode: bool = False) -> str:
        payload = json.dumps({
            "latex": latex,
            "displayMode": display_mode,
            "trust": self.trust,
        }).encode("utf-8")

        try:
            proc = await asyncio.create_subprocess_exec(
                self.node_binary, "-e", _KATEX_SCRIPT,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
                env=self._node_env(),
            )
        except FileNotFoundError as e:
            raise RendererUnavailableError(f"Node.js executable not found: {self.node_binary}") from e

        try:
            stdout, stderr = await asyncio.wait_for(proc.communicate(payload), timeout=self.timeout)
        except asyncio.TimeoutError as e:
            await self._kill(proc)
            raise RendererUnavailableError(f"KaTeX timed out after {self.timeout}s") from e
        except BaseException:
            # Cancellation included: the child must not outlive the request
            await self._kill(proc)
            raise

        message = stderr.decode("utf-8", errors="replace").strip()

        if proc.returncode == _EXIT_RENDER_FAILED:
            # Malformed input KaTeX could not recover from: best-effort markup
            logger.warning(f"KaTeX could not render formula: {message}")
            return (
                f'<span class="katex-error" title="{html.escape(message)}">'
                f'{html.escape(latex)}</span>'
            )
        if proc.returncode != 0:
            if proc.returncode == _EXIT_KATEX_MISSING:
                logger.error(f"KaTeX is not installed under {self.module_dir.parent}")
            raise RendererUnavailableError(
                f"KaTeX renderer failed (exit code {proc.returncode}): {message}"
            )

        return stdout.decode("utf-8")
