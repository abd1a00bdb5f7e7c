"""Version of the peerdep-checker distribution.

Read by ``pyproject.toml`` at build time, so this module must not import
anything from the package.
"""

__version__ = "0.2.0"

#: Name used in ``--version`` output, the User-Agent and the HTML footer.
PROG_NAME = "peerdep-checker"
